"""
UI service - Streamlit binding of the session and navigation core.
"""

from .client_context import (
    ClientContext,
    build_client_context,
    get_client_context,
    reset_client_context,
    has_existing_session,
    start_navigation,
)


# Lazy import keeps the screens out of non-UI imports
def render_current_screen(context: ClientContext):
    from .screens import render_current_screen as _render_current_screen
    return _render_current_screen(context)


__all__ = [
    'ClientContext',
    'build_client_context',
    'get_client_context',
    'reset_client_context',
    'has_existing_session',
    'start_navigation',
    'render_current_screen',
]
