"""
Session management utilities for Streamlit pages.

This module provides functions for managing user sessions across Streamlit pages.
The session ID identifies the browser session to the backend: it keys the
anonymous cart and the recipe/grocery search pagination state.
"""

import uuid
import streamlit as st

SESSION_ID_KEY = "session_id"


def get_or_create_session_id() -> str:
    """
    Get or create a persistent session ID stored in st.session_state.

    The same session ID is reused across all Streamlit pages within a single
    browser session, so a search started on the Recipes page keeps its page
    when the user comes back to it. Refreshing the page starts a new session.

    Returns:
        Session ID string (UUID format)
    """
    if SESSION_ID_KEY not in st.session_state:
        st.session_state[SESSION_ID_KEY] = str(uuid.uuid4())
    return st.session_state[SESSION_ID_KEY]
