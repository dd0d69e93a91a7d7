"""Route guarding and role-based redirection for portal pages."""

import logging
from typing import List, Optional

from healthwire.config import settings, ROLES
from healthwire.schemas.auth import SessionState

logger = logging.getLogger(__name__)


class RouteGuard:
    """Decide where a page request should go given the session state."""

    def __init__(self, public_paths: Optional[List[str]] = None):
        self.public_paths = public_paths if public_paths is not None else list(settings.PUBLIC_PATHS)

    def resolve(self, path: str, state: SessionState) -> Optional[str]:
        """
        Check a page request against the session.

        Args:
            path: Requested page path
            state: Current session snapshot

        Returns:
            Path to redirect to, or None if the page may be shown
        """
        # Nothing is decided until the persisted session has been read
        if state.loading:
            return None

        if path == settings.MFA_PATH:
            if state.is_authenticated:
                return settings.DASHBOARD_PATH
            if not state.mfa_pending:
                return settings.LOGIN_PATH
            return None

        if state.is_authenticated:
            if path == settings.LOGIN_PATH:
                return settings.DASHBOARD_PATH
            if path == settings.DASHBOARD_PATH:
                return self.dashboard_for(state.role)
            return None

        if self._is_public_path(path):
            return None

        logger.debug(f"Anonymous request to protected page {path}")
        return settings.LOGIN_PATH

    def dashboard_for(self, role: Optional[str]) -> Optional[str]:
        """Role-specific dashboard; None for unknown roles."""
        role_config = ROLES.get(role)
        if role_config is None:
            logger.warning(f"No dashboard configured for role: {role}")
            return None
        return role_config["dashboard"]

    def _is_public_path(self, path: str) -> bool:
        """Check if path is public (no auth required)."""
        return path in self.public_paths
