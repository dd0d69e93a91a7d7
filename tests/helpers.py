"""Shared test helpers."""

import time

import jwt

TEST_SIGNING_KEY = "test-signing-key-for-portal-unit-tests-0001"


def make_token(expires_in: int = 3600, key: str = TEST_SIGNING_KEY, **claims) -> str:
    """Build a signed JWT whose exp is ``expires_in`` seconds from now."""
    payload = {"sub": "5", "exp": int(time.time()) + expires_in}
    payload.update(claims)
    return jwt.encode(payload, key, algorithm="HS256")


def assert_session_invariants(state, storage):
    """The three session states stay exclusive and storage mirrors memory."""
    if state.mfa_pending:
        assert state.mfa_challenge is not None
        assert state.user is None
        assert state.token is None
    if state.user is not None:
        assert state.token is not None
    assert storage.get_item("token") == state.token
    assert storage.get_json("user") == state.user
