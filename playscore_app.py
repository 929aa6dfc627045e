import streamlit as st

from config.app_config import get_config
from services.ui_service import get_client_context, render_current_screen
from utils.logging_config import initialize_logging, get_logger

# Initialize logging and error tracking
error_tracker = initialize_logging()
logger = get_logger(__name__)

# Get configuration
config = get_config()


def main():
    st.set_page_config(page_title=config.ui.app_title, page_icon=config.ui.page_icon)

    try:
        context = get_client_context()
    except Exception:
        st.error("🚨 The application could not start. Check the logs for details.")
        return

    render_current_screen(context)


main()
