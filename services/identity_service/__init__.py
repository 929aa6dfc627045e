"""
Identity service - platform identity providers and adapter selection.
"""

from typing import Optional

from config.app_config import AppConfig, get_config
from .base import IdentityProvider
from .cloud_provider import CloudIdentityProvider
from .noop_provider import NoOpIdentityProvider, UNAVAILABLE_MESSAGE


def create_identity_provider(config: Optional[AppConfig] = None) -> IdentityProvider:
    """
    Select the identity adapter for this host

    Unknown provider names fall back to the no-op adapter so the rest of the
    application still runs.
    """
    config = config or get_config()
    provider = config.auth.identity_provider

    if provider == "cloud":
        return CloudIdentityProvider(
            auth_api_url=config.api.auth_api_url,
            timeout_seconds=config.api.timeout_seconds,
        )
    return NoOpIdentityProvider()


__all__ = [
    'IdentityProvider',
    'CloudIdentityProvider',
    'NoOpIdentityProvider',
    'UNAVAILABLE_MESSAGE',
    'create_identity_provider',
]
