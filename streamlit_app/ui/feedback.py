"""
Standardized feedback utilities for error, empty, and loading states.

Provides reusable components for displaying errors, empty states, and loading
indicators across all pages, including the upstream-error banner of the
paged searches.
"""

from contextlib import contextmanager
from typing import Any, Dict, Optional
import streamlit as st


def show_error(message: str, hint: Optional[str] = None) -> None:
    """
    Display a standardized error message with optional hint.

    Args:
        message: Main error message to display
        hint: Optional hint text to help users resolve the issue
    """
    st.error(f"⚠️ {message}")
    if hint:
        st.caption(f"💡 {hint}")


def show_fetch_error(error: Optional[Dict[str, Any]], source: str) -> None:
    """
    Show the error of a failed page fetch (SearchPageView["error"]).

    The results below the banner are the previously loaded page.
    """
    if not error:
        return
    if error.get("kind") == "upstream_error":
        message = f"{source} answered with an error: {error.get('message')}"
        hint = "Try again in a moment. Showing the previously loaded page."
    else:
        message = f"Could not reach {source}: {error.get('message')}"
        hint = "Check your connection. Showing the previously loaded page."
    show_error(message, hint)


def show_empty_state(
    title: str,
    subtitle: Optional[str] = None,
    action_label: str = "Get started",
    action_page_path: Optional[str] = None
) -> None:
    """
    Display a standardized empty state with optional action button.

    Args:
        title: Main empty state title
        subtitle: Optional subtitle/description text
        action_label: Label for the action button
        action_page_path: Optional page path to navigate to when button is clicked
    """
    st.info(f"📭 **{title}**")
    if subtitle:
        st.caption(subtitle)

    if action_page_path:
        if st.button(action_label, use_container_width=True, type="primary"):
            st.switch_page(action_page_path)


@contextmanager
def working_spinner(label: str = "Working…"):
    """
    Context manager wrapper for standardized loading spinners.

    Usage:
        with working_spinner("Searching…"):
            # Do work here
            pass
    """
    with st.spinner(label):
        yield
