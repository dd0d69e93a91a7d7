"""Client session state and the authentication flows that change it."""

import logging
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from healthwire.config import settings, ROLES
from healthwire.schemas.auth import (
    AuthResult,
    LoginRequest,
    MFAChallenge,
    MFAVerifyRequest,
    SessionState,
)
from healthwire.services.api_gateway import ApiError, NetworkError, UnauthorizedError
from healthwire.services.navigation_service import Navigator
from healthwire.services.storage_service import get_json, set_json
from healthwire.services.token_service import is_token_expired

logger = logging.getLogger(__name__)

LOGIN_FAILED_MESSAGE = "An error occurred during login. Please try again."
REGISTRATION_FAILED_MESSAGE = "An error occurred during registration. Please try again."
MFA_FAILED_MESSAGE = "Invalid MFA code. Please try again."
NO_MFA_CHALLENGE_MESSAGE = "No verification is pending. Please sign in again."


class SessionManager:
    """Owns the client session and is the only thing allowed to change it.

    The session is always in exactly one of three states: anonymous,
    MFA-pending or authenticated. Persisted storage holds the same token
    and user as memory after every operation. Operations never raise;
    failures end up in ``state.error``.
    """

    def __init__(self, gateway, storage, navigator: Optional[Navigator] = None):
        self.gateway = gateway
        self.storage = storage
        self.navigator = navigator or Navigator()
        self.token_key = settings.TOKEN_STORAGE_KEY
        self.user_key = settings.USER_STORAGE_KEY

        self._state = SessionState()
        self._listeners: List[Callable[[SessionState], None]] = []
        self._initialized = False

        gateway.set_unauthorized_handler(self._handle_unauthorized)

    # State access

    @property
    def state(self) -> SessionState:
        """A copy of the current session state."""
        return self._state.model_copy(deep=True)

    @property
    def is_authenticated(self) -> bool:
        return self._state.user is not None

    @property
    def mfa_pending(self) -> bool:
        return self._state.mfa_pending

    def subscribe(self, listener: Callable[[SessionState], None]) -> Callable[[], None]:
        """Register a listener called with a fresh snapshot after every change."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def redirect_path(self) -> str:
        """Where the presentation layer should send the user right now."""
        if self._state.mfa_pending:
            return settings.MFA_PATH
        if self._state.user is None:
            return settings.LOGIN_PATH
        role = self._state.user.get("role")
        return ROLES.get(role, {}).get("dashboard", settings.DASHBOARD_PATH)

    def _set_state(self, **changes) -> None:
        self._state = self._state.model_copy(update=changes)
        snapshot = self.state
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Session listener failed")

    # Persistence

    def _persist(self, token: str, user: Dict[str, Any]) -> None:
        self.storage.set_item(self.token_key, token)
        set_json(self.storage, self.user_key, user)

    def _clear_storage(self) -> None:
        self.storage.remove_item(self.token_key)
        self.storage.remove_item(self.user_key)

    def _authenticate(self, token: str, user: Dict[str, Any]) -> AuthResult:
        self._persist(token, user)
        self._set_state(
            user=user,
            token=token,
            mfa_pending=False,
            mfa_challenge=None,
            error=None,
        )
        logger.info(f"Session authenticated for user {user.get('id')} ({user.get('role')})")
        return AuthResult(success=True)

    def _reset(self, error: Optional[str] = None) -> None:
        self._clear_storage()
        self._set_state(user=None, token=None, mfa_pending=False, mfa_challenge=None, error=error)

    def _fail_anonymous(self, error: ApiError, fallback: str) -> AuthResult:
        message = _error_message(error, fallback)
        self._reset(error=message)
        return AuthResult(success=False, error=message)

    # Bootstrap

    def initialize(self) -> SessionState:
        """Restore a persisted session if its token is still valid. Runs once."""
        if self._initialized:
            logger.warning("Session already initialized; ignoring repeated bootstrap")
            return self.state

        token = self.storage.get_item(self.token_key)
        stored_user = get_json(self.storage, self.user_key)

        if token and isinstance(stored_user, dict) and not is_token_expired(token):
            self._set_state(user=stored_user, token=token, loading=False)
            logger.info(f"Restored session for user {stored_user.get('id')}")
        else:
            if token or stored_user:
                logger.info("Discarding expired or incomplete persisted session")
            self._clear_storage()
            self._set_state(user=None, token=None, loading=False)

        self._initialized = True
        return self.state

    def check_expiry(self) -> bool:
        """Log out if the live token has expired. Returns True when it did."""
        if self._state.token is None or not is_token_expired(self._state.token):
            return False
        logger.info("Session token expired")
        self.logout()
        return True

    # Flows

    async def login(self, email: str, password: str, role: str) -> AuthResult:
        """Sign in with primary credentials, possibly starting an MFA challenge."""
        self._set_state(error=None, mfa_pending=False, mfa_challenge=None)

        try:
            data = await self.gateway.login(LoginRequest(email=email, password=password), role)
        except ApiError as e:
            # The basic endpoint signals MFA through its error body
            challenge = _challenge_from(e.payload, role)
            if challenge is not None:
                return self._begin_mfa(challenge)
            logger.warning(f"Login failed for role {role}: {e.status_code}")
            return self._fail_anonymous(e, LOGIN_FAILED_MESSAGE)

        challenge = _challenge_from(data, role)
        if challenge is not None:
            return self._begin_mfa(challenge)

        return self._accept_credentials(data, role, LOGIN_FAILED_MESSAGE)

    def _begin_mfa(self, challenge: MFAChallenge) -> AuthResult:
        self._clear_storage()
        self._set_state(user=None, token=None, mfa_pending=True, mfa_challenge=challenge, error=None)
        logger.info(f"Second factor required for user {challenge.user_id} ({challenge.user_type})")
        return AuthResult(success=False, mfa_required=True)

    def _accept_credentials(self, data: Dict[str, Any], role: str, fallback: str) -> AuthResult:
        token = data.get("token")
        user_data = data.get(role)
        if not token or not isinstance(user_data, dict):
            logger.error(f"Auth response for role {role} is missing a token or user record")
            self._reset(error=fallback)
            return AuthResult(success=False, error=fallback)
        return self._authenticate(token, {**user_data, "role": role})

    async def verify_mfa(self, code: str) -> AuthResult:
        """Submit the second-factor code for the pending challenge."""
        self._set_state(error=None)

        challenge = self._state.mfa_challenge
        if not self._state.mfa_pending or challenge is None:
            self._set_state(error=NO_MFA_CHALLENGE_MESSAGE)
            return AuthResult(success=False, error=NO_MFA_CHALLENGE_MESSAGE)

        try:
            data = await self.gateway.verify_mfa(MFAVerifyRequest.from_challenge(challenge, code))
        except ApiError as e:
            message = _error_message(e, MFA_FAILED_MESSAGE)
            logger.warning(f"MFA verification failed for user {challenge.user_id}: {e.status_code}")
            self._set_state(error=message)
            return AuthResult(success=False, error=message)

        token = data.get("token")
        user = data.get("user")
        if not token or not isinstance(user, dict):
            logger.error("MFA verification response is missing a token or user record")
            self._set_state(error=MFA_FAILED_MESSAGE)
            return AuthResult(success=False, error=MFA_FAILED_MESSAGE)

        user = dict(user)
        user.setdefault("role", challenge.user_type)
        return self._authenticate(token, user)

    async def register(self, user_data: Dict[str, Any], role: str) -> AuthResult:
        """Create an account and sign in with it. Never asks for a second factor."""
        self._set_state(error=None, mfa_pending=False, mfa_challenge=None)

        try:
            data = await self.gateway.register(user_data, role)
        except ApiError as e:
            logger.warning(f"Registration failed for role {role}: {e.status_code}")
            return self._fail_anonymous(e, REGISTRATION_FAILED_MESSAGE)

        return self._accept_credentials(data, role, REGISTRATION_FAILED_MESSAGE)

    def logout(self) -> None:
        """Forget the session and send the user to the login page."""
        self._reset()
        logger.info("Session cleared")
        self.navigator.push(settings.LOGIN_PATH)

    async def get_current_user(self) -> Optional[Dict[str, Any]]:
        """Refresh the user record from the backend. Returns None on failure."""
        try:
            data = await self.gateway.get_current_user()
        except UnauthorizedError:
            # The 401 interceptor normally logged out already
            if self._has_credentials():
                self.logout()
            return None
        except ApiError as e:
            logger.error(f"Error fetching current user: {e}")
            return None

        if not isinstance(data, dict):
            logger.error("Current user response is not an object")
            return None

        if self._state.token is None:
            logger.warning("Ignoring user profile fetched without a live session")
            return data

        user = dict(data)
        current_role = self._state.user.get("role") if self._state.user else None
        if current_role and "role" not in user:
            user["role"] = current_role

        set_json(self.storage, self.user_key, user)
        self._set_state(user=user)
        return user

    def _has_credentials(self) -> bool:
        return self._state.token is not None or bool(self.storage.get_item(self.token_key))

    def _handle_unauthorized(self) -> None:
        if not self._has_credentials():
            logger.debug("401 received without a live session; nothing to clear")
            return
        logger.warning("Session rejected by the server; logging out")
        self.logout()


def _error_message(error: ApiError, fallback: str) -> str:
    if isinstance(error, NetworkError) or not error.message:
        return fallback
    return error.message


def _challenge_from(payload: Optional[Dict[str, Any]], role: str) -> Optional[MFAChallenge]:
    if not payload or not payload.get("mfaRequired"):
        return None
    try:
        return MFAChallenge(
            temp_token=payload.get("tempToken"),
            user_id=payload.get("userId"),
            user_type=payload.get("userType") or role,
        )
    except ValidationError as e:
        logger.error(f"Malformed MFA challenge in login response: {e.error_count()} invalid fields")
        return None
