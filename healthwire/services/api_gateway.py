"""REST client for the HealthWire backend API."""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Union

import httpx

from healthwire.config import settings
from healthwire.middleware.interceptors import AuthHeaderInterceptor, UnauthorizedInterceptor
from healthwire.schemas.auth import LoginRequest, MFAVerifyRequest
from healthwire.utils.timezone import format_api_date

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """A request to the backend failed."""

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None, payload: Optional[Dict[str, Any]] = None):
        self.message = message
        self.status_code = status_code
        self.payload = payload or {}
        super().__init__(message or f"API request failed with status {status_code}")


class UnauthorizedError(ApiError):
    """The backend rejected the session credential (HTTP 401)."""


class NetworkError(ApiError):
    """The backend could not be reached or did not answer in time."""


class ApiGateway:
    """HTTP gateway to the portal backend.

    The persisted token is attached to every request and every 401 response
    is reported to the handler bound with ``set_unauthorized_handler``.
    Requests are never retried.
    """

    def __init__(self, storage, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.storage = storage
        self.auth_interceptor = AuthHeaderInterceptor(storage)
        self.unauthorized_interceptor = UnauthorizedInterceptor()

        self._client = httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            timeout=timeout if timeout is not None else settings.API_TIMEOUT_SECONDS,
            headers={"Content-Type": "application/json"},
            event_hooks={
                "request": [self.auth_interceptor],
                "response": [self.unauthorized_interceptor],
            },
            transport=transport,
        )

    def set_unauthorized_handler(self, handler) -> None:
        """Bind the callback run on every 401 response."""
        self.unauthorized_interceptor.bind(handler)

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, path: str, expect_object: bool = True, **kwargs) -> Any:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TimeoutException as e:
            logger.error(f"{method} {path} timed out: {e}")
            raise NetworkError("The server did not respond in time.") from e
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise NetworkError("Unable to reach the server.") from e

        if response.is_success:
            if not response.content:
                return {}
            try:
                data = response.json()
            except ValueError as e:
                logger.error(f"{method} {path} returned a non-JSON body")
                raise ApiError("Unexpected response from the server.", response.status_code) from e
            if expect_object and not isinstance(data, dict):
                logger.error(f"{method} {path} returned {type(data).__name__}, expected an object")
                raise ApiError("Unexpected response from the server.", response.status_code)
            return data

        payload = self._error_payload(response)
        message = payload.get("message") or payload.get("detail")
        if not isinstance(message, str):
            message = None

        logger.warning(f"{method} {path} returned {response.status_code}")
        error_cls = UnauthorizedError if response.status_code == 401 else ApiError
        raise error_cls(message, response.status_code, payload)

    @staticmethod
    def _error_payload(response: httpx.Response) -> Dict[str, Any]:
        try:
            payload = response.json()
        except ValueError:
            return {}
        return payload if isinstance(payload, dict) else {}

    # Authentication

    async def login(self, credentials: LoginRequest, role: str, enhanced: Optional[bool] = None) -> Dict[str, Any]:
        """
        Submit primary credentials.

        Args:
            credentials: Email and password as entered
            role: "doctor" or "client"
            enhanced: Use the MFA-aware endpoint (defaults to AUTH_LOGIN_MODE)

        Returns:
            Either ``{"token", <role>: user}`` or an MFA marker
            ``{"mfaRequired", "tempToken", "userId", "userType"}``
        """
        if enhanced is None:
            enhanced = settings.AUTH_LOGIN_MODE == "enhanced"
        flavor = "enhanced" if enhanced else "basic"
        return await self._request("POST", f"/auth/{flavor}/login/{role}", json=credentials.model_dump())

    async def verify_mfa(self, request: MFAVerifyRequest) -> Dict[str, Any]:
        """Complete a pending MFA challenge; returns ``{"token", "user"}``."""
        return await self._request("POST", "/auth/enhanced/mfa/verify", json=request.model_dump(by_alias=True))

    async def register(self, user_data: Dict[str, Any], role: str) -> Dict[str, Any]:
        """Create an account; returns ``{"token", <role>: user}``."""
        return await self._request("POST", f"/auth/basic/register/{role}", json=user_data)

    async def get_current_user(self) -> Dict[str, Any]:
        return await self._request("GET", "/auth/basic/user")

    async def enable_mfa(self) -> Dict[str, Any]:
        return await self._request("POST", "/auth/enhanced/mfa/enable")

    async def disable_mfa(self, code: str) -> Dict[str, Any]:
        return await self._request("POST", "/auth/enhanced/mfa/disable", json={"token": code})

    async def get_auth_logs(self) -> Any:
        return await self._request("GET", "/auth/enhanced/logs", expect_object=False)

    # Appointments

    async def get_available_slots(self, doctor_id: Union[int, str], day: date) -> List[str]:
        """Free time slots ("HH:MM") for a doctor on a given day."""
        data = await self._request(
            "GET",
            f"/appointments/available/{doctor_id}",
            params={"date": format_api_date(day)},
        )
        return data.get("availableSlots") or []
