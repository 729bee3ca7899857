"""
Application state reducer.

The frontend keeps one AppState per browser session: whether a user is
signed in, the signed-in user, and the user info submitted through the daily
value questionnaire. State only changes through reduce(state, action).
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class AppState:
    is_signed_in: bool = False
    current_user: Optional[Dict[str, Any]] = None
    user_info: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class SignIn:
    """Sign a user in, or out when user is None."""
    user: Optional[Dict[str, Any]]


@dataclass(frozen=True)
class SubmitUserInfo:
    """Store the user info used to calculate nutrient results."""
    record: Dict[str, Any]


Action = Union[SignIn, SubmitUserInfo]

INITIAL_STATE = AppState()


def reduce(state: Optional[AppState], action: Action) -> AppState:
    """
    Return the state that results from applying action to state.

    Unknown actions return an unchanged copy.
    """
    if state is None:
        state = INITIAL_STATE

    if isinstance(action, SignIn):
        return replace(state, is_signed_in=bool(action.user), current_user=action.user)
    if isinstance(action, SubmitUserInfo):
        return replace(state, user_info=dict(action.record))
    return replace(state)
