"""
Pagination bar for paged search results.

Renders the window returned by the backend (SearchPageView["window"]) as a
row of buttons. Each control maps to a navigation target:

- page    -> ("page", n)   shows n, highlighted when active
- first   -> ("first",)    shows "<<" (five pages back)
- prev    -> ("prev",)     shows "<"
- next    -> ("next",)     shows ">"
- last    -> ("last",)     shows ">>" (five pages forward)
- ellipsis                 shows "..." and is never clickable
"""

from typing import Any, Dict, List, Optional, Tuple

import streamlit as st

CONTROL_LABELS = {
    "first": "<<",
    "prev": "<",
    "next": ">",
    "last": ">>",
    "ellipsis": "...",
}


def control_label(control: Dict[str, Any]) -> str:
    if control.get("kind") == "page":
        return str(control.get("page"))
    return CONTROL_LABELS.get(control.get("kind", ""), "?")


def control_target(control: Dict[str, Any]) -> Optional[Tuple[str, Optional[int]]]:
    """
    Navigation target of a control, or None if clicking it does nothing.

    The active page and disabled controls have no target.
    """
    kind = control.get("kind")
    if kind == "ellipsis" or not control.get("enabled", True):
        return None
    if kind == "page":
        if control.get("active"):
            return None
        return ("page", control.get("page"))
    return (kind, None)


def render_pagination(window: List[Dict[str, Any]], key_prefix: str) -> Optional[Tuple[str, Optional[int]]]:
    """
    Render the pagination bar.

    Args:
        window: Controls of the current SearchPageView
        key_prefix: Unique prefix for the button keys of this bar

    Returns:
        (target, page) of the clicked control, or None when nothing was clicked
    """
    if not window:
        return None

    clicked = None
    # Pad the row so the bar stays compact on wide layouts
    columns = st.columns(len(window) + 2)
    for i, control in enumerate(window):
        target = control_target(control)
        with columns[i + 1]:
            pressed = st.button(
                control_label(control),
                key=f"{key_prefix}_pg_{i}_{control.get('kind')}_{control.get('page')}",
                disabled=target is None,
                type="primary" if control.get("active") else "secondary",
                use_container_width=True,
            )
        if pressed and target is not None:
            clicked = target
    return clicked
