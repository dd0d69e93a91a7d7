"""Session token inspection.

The portal never verifies token signatures (the backend owns the signing key);
it only reads the embedded claims to decide whether a persisted token is
still worth presenting.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import jwt

from healthwire.config import settings

logger = logging.getLogger(__name__)


def decode_token_claims(token: str) -> Optional[Dict[str, Any]]:
    """
    Decode the claims of a JWT without verifying its signature.

    Args:
        token: Encoded JWT string

    Returns:
        Claims dictionary, or None if the token cannot be decoded
    """
    try:
        return jwt.decode(token, options={"verify_signature": False})
    except jwt.InvalidTokenError as e:
        logger.debug(f"Could not decode session token: {e}")
        return None


def is_token_expired(token: Optional[str], leeway: Optional[int] = None) -> bool:
    """
    Check whether a session token should be treated as expired.

    A token that cannot be decoded counts as expired, as does one whose
    ``exp`` claim lies in the past. Has no side effects.

    Args:
        token: Encoded JWT string (None or empty counts as expired)
        leeway: Seconds of clock skew to tolerate (defaults to settings)

    Returns:
        True if the token must not be used
    """
    if not token:
        return True

    if leeway is None:
        leeway = settings.TOKEN_EXPIRY_LEEWAY_SECONDS

    try:
        jwt.decode(
            token,
            options={"verify_signature": False, "verify_exp": True},
            leeway=leeway,
        )
    except jwt.ExpiredSignatureError:
        return True
    except jwt.InvalidTokenError:
        return True
    return False


def get_token_expiry(token: str) -> Optional[datetime]:
    """Return the token's expiry as an aware UTC datetime, if it carries one."""
    claims = decode_token_claims(token)
    if not claims or "exp" not in claims:
        return None
    try:
        return datetime.fromtimestamp(int(claims["exp"]), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError):
        return None
