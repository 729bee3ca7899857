"""
Layout primitives for consistent page structure.

Provides reusable components for page headers, sections, and the sign-in box.
"""

from contextlib import contextmanager
from typing import Optional
import streamlit as st

from utils.api_client import view_cart_backend
from utils.state import current_user_id, get_app_state, sign_in, sign_out


def page_header(title: str, subtitle: Optional[str] = None) -> None:
    """
    Render a consistent page header with title and optional subtitle.

    Args:
        title: Main page title
        subtitle: Optional subtitle/description text
    """
    st.markdown(f"# {title}")
    if subtitle:
        st.caption(subtitle)


@contextmanager
def section(title: str, help_text: Optional[str] = None):
    """
    Context manager for a titled page section.

    Usage:
        with section("Results"):
            st.write("...")
    """
    st.markdown(f"### {title}")
    if help_text:
        st.caption(help_text)
    yield
    st.divider()


def render_sign_in_box() -> Optional[str]:
    """
    Render the sidebar sign-in box.

    Returns:
        User id of the signed-in user, or None
    """
    state = get_app_state()
    if state.is_signed_in:
        name = (state.current_user or {}).get("display_name", "")
        st.markdown(f"Signed in as **{name}**")
        if st.button("Sign out", use_container_width=True, key="sign_out_btn"):
            sign_out()
            st.rerun()
        return current_user_id()

    user_id = st.text_input("User id", key="sign_in_user_id", placeholder="e.g. alice")
    if st.button("Sign in", use_container_width=True, type="primary", key="sign_in_btn") and user_id.strip():
        sign_in(user_id.strip())
        st.rerun()
    return None


def render_sidebar(session_id: str) -> Optional[str]:
    """
    Render the shared sidebar: branding, sign-in box, and cart count.

    Returns:
        User id of the signed-in user, or None
    """
    with st.sidebar:
        st.markdown("### 🥗 **NutriCart**")
        st.divider()
        user_id = render_sign_in_box()
        st.divider()

        cart = view_cart_backend(session_id, user_id=user_id)
        total_items = cart.get("total_items", 0) if cart else 0
        if total_items:
            st.markdown(f"**Cart:** {total_items} items")
        else:
            st.caption("Cart is empty")
        if st.button("Open Cart", use_container_width=True, key="sidebar_cart_btn"):
            st.switch_page("pages/03_🧺_My_Cart.py")
    return user_id


def require_sign_in(page_name: str) -> Optional[str]:
    """
    Return the signed-in user's id, or show a hint and return None.

    Args:
        page_name: Shown in the hint ("to see your {page_name}")
    """
    user_id = current_user_id()
    if user_id is None:
        st.info(f"Sign in from the sidebar to see your {page_name}.")
    return user_id
