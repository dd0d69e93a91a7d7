"""Authentication schemas."""

from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class SessionStatus(str, Enum):
    """Mutually exclusive session states."""
    ANONYMOUS = "anonymous"
    MFA_PENDING = "mfa_pending"
    AUTHENTICATED = "authenticated"


class LoginRequest(BaseModel):
    """Login request body. Credentials are passed through as entered."""
    email: str
    password: str


class MFAChallenge(BaseModel):
    """State needed to finish a second-factor check without resending the password."""
    temp_token: str
    user_id: Union[int, str]
    user_type: str


class MFAVerifyRequest(BaseModel):
    """MFA verification body in the backend's camelCase wire format."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: Union[int, str] = Field(alias="userId")
    user_type: str = Field(alias="userType")
    token: str
    temp_token: str = Field(alias="tempToken")

    @classmethod
    def from_challenge(cls, challenge: MFAChallenge, code: str) -> "MFAVerifyRequest":
        return cls(
            user_id=challenge.user_id,
            user_type=challenge.user_type,
            token=code,
            temp_token=challenge.temp_token,
        )


class AuthResult(BaseModel):
    """Outcome of a session operation, as returned to the presentation layer."""
    success: bool
    mfa_required: bool = False
    error: Optional[str] = None


class SessionState(BaseModel):
    """Read-only snapshot of the client session."""
    user: Optional[Dict[str, Any]] = None
    token: Optional[str] = None
    mfa_pending: bool = False
    mfa_challenge: Optional[MFAChallenge] = None
    loading: bool = True
    error: Optional[str] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def status(self) -> SessionStatus:
        if self.mfa_pending:
            return SessionStatus.MFA_PENDING
        if self.user is not None:
            return SessionStatus.AUTHENTICATED
        return SessionStatus.ANONYMOUS

    @property
    def role(self) -> Optional[str]:
        if self.user is None:
            return None
        return self.user.get("role")
