"""Schemas for input validation results."""

from typing import Any, Dict, Optional

from pydantic import BaseModel


class FieldCheck(BaseModel):
    """Result of checking a single value."""
    valid: bool
    message: Optional[str] = None


class ValidationResult(BaseModel):
    """Result of checking a form payload; errors are keyed by field name."""
    valid: bool
    errors: Dict[str, Any] = {}

    @classmethod
    def from_errors(cls, errors: Dict[str, Any]) -> "ValidationResult":
        return cls(valid=len(errors) == 0, errors=errors)
