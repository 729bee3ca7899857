"""
Tests for the application state reducer.
"""

from dataclasses import FrozenInstanceError

import pytest

from nutricart.store import INITIAL_STATE, AppState, SignIn, SubmitUserInfo, reduce


class TestReduce:
    """reduce(state, action) for each action kind."""

    def test_initial_state(self):
        assert INITIAL_STATE == AppState(is_signed_in=False, current_user=None, user_info={})

    def test_none_state_starts_from_initial(self):
        state = reduce(None, SubmitUserInfo({"age": 30}))
        assert state.user_info == {"age": 30}
        assert state.is_signed_in is False

    def test_sign_in(self):
        state = reduce(INITIAL_STATE, SignIn({"uid": "alice"}))
        assert state.is_signed_in is True
        assert state.current_user == {"uid": "alice"}

    def test_sign_out(self):
        signed_in = reduce(INITIAL_STATE, SignIn({"uid": "alice"}))
        state = reduce(signed_in, SignIn(None))
        assert state.is_signed_in is False
        assert state.current_user is None

    def test_empty_user_is_signed_out(self):
        assert reduce(INITIAL_STATE, SignIn({})).is_signed_in is False

    def test_submit_user_info_keeps_user(self):
        signed_in = reduce(INITIAL_STATE, SignIn({"uid": "alice"}))
        state = reduce(signed_in, SubmitUserInfo({"daily_values": [1, 2]}))
        assert state.current_user == {"uid": "alice"}
        assert state.user_info == {"daily_values": [1, 2]}

    def test_returns_new_object(self):
        """The previous state is never modified."""
        state = reduce(INITIAL_STATE, SignIn({"uid": "alice"}))
        assert state is not INITIAL_STATE
        assert INITIAL_STATE.is_signed_in is False

    def test_unknown_action_returns_copy(self):
        state = reduce(INITIAL_STATE, object())
        assert state == INITIAL_STATE
        assert state is not INITIAL_STATE

    def test_state_is_frozen(self):
        with pytest.raises(FrozenInstanceError):
            INITIAL_STATE.is_signed_in = True
