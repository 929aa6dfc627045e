"""
Placeholder screens rendered from the navigation state.
"""

import asyncio

import streamlit as st

from services.navigation_service import (
    BOTTOM_NAV_ITEMS,
    HOME,
    LOGIN,
    REGISTER,
    Destination,
    Screen,
    post_detail,
)
from services.ui_service import account_actions
from services.ui_service.account_actions import logout
from services.ui_service.client_context import ClientContext
from utils.logging_config import get_logger, get_error_tracker

logger = get_logger(__name__)


def render_login(context: ClientContext):
    """Render login form"""
    st.title("🔐 Sign In")

    with st.form("login_form"):
        email = st.text_input("📧 Email", placeholder="your@email.com")
        password = st.text_input("🔒 Password", type="password")
        submitted = st.form_submit_button("🔑 Sign In", type="primary", use_container_width=True)

    if submitted:
        with st.spinner("Authenticating..."):
            result = asyncio.run(account_actions.login(context, email, password))
        if result.success:
            context.navigation.navigate_to_root(HOME)
            st.rerun()
        else:
            # Stay on the login screen with the inline message
            st.error(f"❌ {result.error_message}")

    if st.button("📝 Create an account"):
        context.navigation.navigate_to(REGISTER)
        st.rerun()


def render_register(context: ClientContext):
    """Render registration form"""
    st.title("📝 Create Account")

    with st.form("register_form"):
        name = st.text_input("👤 Name")
        email = st.text_input("📧 Email", placeholder="your@email.com")
        password = st.text_input("🔒 Password", type="password")
        confirm_password = st.text_input("🔒 Confirm Password", type="password")
        submitted = st.form_submit_button("📝 Create Account", type="primary", use_container_width=True)

    if submitted:
        if password != confirm_password:
            st.error("Passwords do not match")
            return

        with st.spinner("Creating your account..."):
            result = asyncio.run(account_actions.register(context, name, email, password))

        if not result.success:
            st.error(f"❌ {result.error_message}")
        elif context.session_manager.is_valid():
            context.navigation.navigate_to_root(HOME)
            st.rerun()
        else:
            st.success("✅ Account created successfully! Please log in.")
            context.navigation.navigate_to_root(LOGIN)
            st.rerun()


def render_home(context: ClientContext):
    """Render the feed placeholder"""
    user = context.session_manager.current_user()
    st.title("⚽ Feed")
    if user is not None:
        st.write(f"**Welcome, {user.display_name or user.email or user.uid}!**")

    post_id = st.text_input("Open post", placeholder="Post id")
    if st.button("Open") and post_id:
        context.navigation.navigate_to(post_detail(post_id))
        st.rerun()


def render_profile(context: ClientContext):
    """Render account details and the display name form"""
    user = context.session_manager.current_user()
    identity = context.identity_provider.current_identity()
    st.title("👤 Profile")
    if user is not None:
        st.write(f"**Email:** {user.email or '-'}")
        st.write(f"**Role:** {user.global_role.value}")

    with st.form("profile_form"):
        current_name = (identity.display_name if identity else None) or (user.display_name if user else "")
        display_name = st.text_input("Display name", value=current_name or "")
        submitted = st.form_submit_button("💾 Save")

    if submitted and display_name:
        if asyncio.run(account_actions.update_display_name(context, display_name)):
            logger.info("Display name update requested")
            st.success("✅ Profile updated")
        else:
            st.info("Profile editing is not available for this account.")


def render_placeholder(context: ClientContext, destination: Destination):
    """Generic view for screens without dedicated content"""
    st.title(destination.title)
    if destination.screen is Screen.POST_DETAIL:
        st.caption(f"Post {destination.post_id}")


def render_bottom_nav(context: ClientContext):
    """Render bottom navigation buttons"""
    columns = st.columns(len(BOTTOM_NAV_ITEMS))
    for column, item in zip(columns, BOTTOM_NAV_ITEMS):
        with column:
            if st.button(item.title, key=f"nav_{item}", use_container_width=True):
                context.navigation.navigate_to(item)
                st.rerun()


def render_session_sidebar(context: ClientContext):
    """Render session info and logout in the sidebar"""
    user = context.session_manager.current_user()
    with st.sidebar:
        st.subheader("👤 Account")
        if user is not None:
            st.write(user.email or user.uid)
            st.caption(f"Role: {user.global_role.value}")

        if context.session_manager.is_valid():
            minutes = int(context.session_manager.remaining_seconds() // 60)
            st.caption(f"Session expires in {minutes} min")
        elif user is not None:
            st.warning("Your session has expired. Please log in again.")

        if st.button("🚪 Logout", use_container_width=True):
            logout(context)
            st.rerun()

        if context.config.debug:
            with st.expander("🛠️ Diagnostics"):
                st.json(get_error_tracker().get_error_summary())


def render_current_screen(context: ClientContext):
    """Dispatch on the current destination"""
    destination = context.navigation.current_destination

    if destination.is_auth_screen:
        if destination.screen is Screen.LOGIN:
            render_login(context)
        else:
            render_register(context)
    else:
        render_session_sidebar(context)
        if context.config.ui.show_breadcrumbs:
            st.caption(context.navigation.breadcrumbs())
        if destination.screen is Screen.HOME:
            render_home(context)
        elif destination.screen is Screen.PROFILE:
            render_profile(context)
        else:
            render_placeholder(context, destination)
        if destination.shows_bottom_nav:
            render_bottom_nav(context)

    if context.navigation.can_navigate_back:
        if st.button("⬅️ Back"):
            context.navigation.navigate_back()
            st.rerun()
