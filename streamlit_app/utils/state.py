"""
App State Management Module.

This module wraps Streamlit's session_state around the application reducer
(nutricart.store). The current AppState lives under one session_state key
and is only ever replaced by dispatch(action), never mutated in place.

It also keeps the last SearchPageView of each search kind so that pages can
re-render results and the pagination bar without calling the backend again.

# NOTE: This module uses session_state, so the signed-in user persists only for
    the current Streamlit session.
"""

from typing import Any, Dict, Optional

import streamlit as st

from nutricart.store import INITIAL_STATE, Action, AppState, SignIn, SubmitUserInfo, reduce

# Session state keys
APP_STATE_KEY = "app_state"
SEARCH_VIEW_KEY = "search_view_{kind}"


def get_app_state() -> AppState:
    """Current AppState of this browser session."""
    if APP_STATE_KEY not in st.session_state:
        st.session_state[APP_STATE_KEY] = INITIAL_STATE
    return st.session_state[APP_STATE_KEY]


def dispatch(action: Action) -> AppState:
    """Apply an action to the session's AppState and store the result."""
    new_state = reduce(st.session_state.get(APP_STATE_KEY), action)
    st.session_state[APP_STATE_KEY] = new_state
    return new_state


def sign_in(user_id: str, display_name: Optional[str] = None) -> AppState:
    """Sign a user in by id. An empty id signs out."""
    if not user_id:
        return dispatch(SignIn(None))
    return dispatch(SignIn({"uid": user_id, "display_name": display_name or user_id}))


def sign_out() -> AppState:
    return dispatch(SignIn(None))


def submit_user_info(record: Dict[str, Any]) -> AppState:
    return dispatch(SubmitUserInfo(record))


def current_user_id() -> Optional[str]:
    """User id of the signed-in user, or None."""
    state = get_app_state()
    if not state.is_signed_in or not state.current_user:
        return None
    return state.current_user.get("uid")


def get_search_view(kind: str) -> Optional[Dict[str, Any]]:
    """Last SearchPageView received for kind ("recipes" or "foods")."""
    return st.session_state.get(SEARCH_VIEW_KEY.format(kind=kind))


def set_search_view(kind: str, view: Dict[str, Any]) -> None:
    """
    Store a SearchPageView.

    Views with status "noop" or "stale" carry the backend's current page, so
    they are stored like "ok" views. Views with status "error" also carry the
    previous page's results, which stay on screen.
    """
    st.session_state[SEARCH_VIEW_KEY.format(kind=kind)] = view
