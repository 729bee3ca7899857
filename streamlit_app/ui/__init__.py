"""
UI Components Module.

This module provides reusable layout, feedback, chart, and pagination
components for the NutriCart Streamlit app.
"""

from ui.feedback import show_error, show_empty_state, show_fetch_error
from ui.pagination import render_pagination

__all__ = [
    "show_error",
    "show_empty_state",
    "show_fetch_error",
    "render_pagination",
]
