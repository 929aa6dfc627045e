"""
Client context - one set of session/navigation components per browser session.

Streamlit reruns the script on every interaction, so the components live in
st.session_state and are built only the first time.
"""

import asyncio
from dataclasses import dataclass
from typing import Optional

import streamlit as st

from config.app_config import AppConfig, get_config
from services.auth_service import (
    AuthService,
    EncryptedFileSecureStorage,
    SecureStorage,
    SessionManager,
)
from services.identity_service import IdentityProvider, create_identity_provider
from services.navigation_service import Destination, NavigationController
from utils.logging_config import get_logger, get_error_tracker


CONTEXT_KEY = "client_context"

logger = get_logger(__name__)


@dataclass
class ClientContext:
    """Components shared by every screen of one browser session"""
    config: AppConfig
    session_manager: SessionManager
    auth_service: AuthService
    identity_provider: IdentityProvider
    navigation: NavigationController


def build_client_context(config: Optional[AppConfig] = None,
                         storage: Optional[SecureStorage] = None) -> ClientContext:
    """
    Wire the client components from configuration

    Args:
        config: Application configuration (global config by default)
        storage: Secure storage override; when omitted and persistence is
            enabled, an encrypted file store is opened
    """
    config = config or get_config()

    if storage is None and config.auth.persist_session:
        storage = EncryptedFileSecureStorage(config.auth.secure_storage_dir)

    session_manager = SessionManager(storage=storage)
    auth_service = AuthService(
        session_manager,
        base_url=config.api.base_url,
        timeout_seconds=config.api.timeout_seconds,
        default_ttl_seconds=config.auth.default_ttl_seconds,
    )
    navigation = NavigationController(
        root=Destination.from_name(config.navigation.unauthenticated_root),
        authenticated_root=Destination.from_name(config.navigation.authenticated_root),
    )

    return ClientContext(
        config=config,
        session_manager=session_manager,
        auth_service=auth_service,
        identity_provider=create_identity_provider(config),
        navigation=navigation,
    )


def has_existing_session(context: ClientContext) -> bool:
    """
    Startup check: a valid session, or one restored from secure storage

    The session manager is authoritative; the identity provider is only
    signed in next to it and is never consulted here.
    """
    if context.session_manager.is_valid():
        return True
    return context.config.auth.persist_session and context.session_manager.restore()


def start_navigation(context: ClientContext) -> Destination:
    """Run the one-time startup check and return the start destination"""
    async def check() -> bool:
        return has_existing_session(context)

    return asyncio.run(context.navigation.start(check))


def get_client_context() -> ClientContext:
    """Get (or lazily build) the client context of the current browser session"""
    if CONTEXT_KEY not in st.session_state:
        try:
            context = build_client_context()
        except Exception as e:
            get_error_tracker().track_error(e, "build_client_context")
            raise
        st.session_state[CONTEXT_KEY] = context
        start_navigation(context)
        logger.info(f"Client context created, start destination: {context.navigation.current_destination}")
    return st.session_state[CONTEXT_KEY]


def reset_client_context():
    """Drop the client context; the next access rebuilds it"""
    if CONTEXT_KEY in st.session_state:
        st.session_state[CONTEXT_KEY].navigation.dispose()
        del st.session_state[CONTEXT_KEY]
