"""Pydantic schemas for session state and request payloads."""

from healthwire.schemas.auth import (
    AuthResult,
    LoginRequest,
    MFAChallenge,
    MFAVerifyRequest,
    SessionState,
    SessionStatus,
)
from healthwire.schemas.validation import FieldCheck, ValidationResult

__all__ = [
    "AuthResult",
    "LoginRequest",
    "MFAChallenge",
    "MFAVerifyRequest",
    "SessionState",
    "SessionStatus",
    "FieldCheck",
    "ValidationResult",
]
