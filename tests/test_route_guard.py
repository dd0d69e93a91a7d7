"""Tests for page route guarding."""

import pytest

from healthwire.middleware.auth import RouteGuard
from healthwire.schemas.auth import MFAChallenge, SessionState

ANONYMOUS = SessionState(loading=False)
LOADING = SessionState(loading=True)
PENDING = SessionState(
    loading=False,
    mfa_pending=True,
    mfa_challenge=MFAChallenge(temp_token="X", user_id=5, user_type="client"),
)


def authenticated(role):
    return SessionState(loading=False, user={"id": 1, "role": role}, token="T1")


class TestRouteGuard:
    """Test redirect decisions."""

    def setup_method(self):
        """Set up test fixtures."""
        self.guard = RouteGuard()

    @pytest.mark.parametrize("path", ["/", "/login", "/register", "/register/client", "/register/doctor"])
    def test_public_paths_open_to_anonymous(self, path):
        """Test that public pages never redirect anonymous users."""
        assert self.guard.resolve(path, ANONYMOUS) is None

    @pytest.mark.parametrize("path", ["/appointments", "/messages/3", "/dashboard", "/profile/settings"])
    def test_protected_paths_require_login(self, path):
        """Test that protected pages send anonymous users to login."""
        assert self.guard.resolve(path, ANONYMOUS) == "/login"

    def test_no_decision_while_loading(self):
        """Test that nothing redirects before bootstrap finishes."""
        assert self.guard.resolve("/appointments", LOADING) is None

    def test_login_page_when_authenticated(self):
        """Test that signed-in users skip the login page."""
        assert self.guard.resolve("/login", authenticated("client")) == "/dashboard"

    def test_dashboard_by_role(self):
        """Test role-based dashboard redirection."""
        assert self.guard.resolve("/dashboard", authenticated("doctor")) == "/dashboard/doctor"
        assert self.guard.resolve("/dashboard", authenticated("client")) == "/dashboard/client"

    def test_unknown_role_stays_on_dashboard(self):
        """Test that an unmapped role is not redirected."""
        assert self.guard.resolve("/dashboard", authenticated("nurse")) is None

    def test_mfa_page(self):
        """Test the MFA page guard in every state."""
        assert self.guard.resolve("/mfa-verification", PENDING) is None
        assert self.guard.resolve("/mfa-verification", ANONYMOUS) == "/login"
        assert self.guard.resolve("/mfa-verification", authenticated("client")) == "/dashboard"

    def test_pending_user_cannot_reach_protected_pages(self):
        """Test that an MFA-pending session is not authenticated."""
        assert self.guard.resolve("/appointments", PENDING) == "/login"


class TestPortalNavigate:
    """Test redirect chains applied by the portal."""

    @pytest.mark.asyncio
    async def test_login_chain_for_authenticated_doctor(self, portal):
        """Test /login -> /dashboard -> /dashboard/doctor."""
        await portal.session.login("martin@clinic.fr", "doctorpass", "doctor")
        await portal.session.verify_mfa("123456")

        assert portal.navigate("/login") == "/dashboard/doctor"
        assert portal.navigator.current_path == "/dashboard/doctor"

    @pytest.mark.asyncio
    async def test_anonymous_redirect(self, portal):
        """Test that anonymous users land on login."""
        assert portal.navigate("/prescriptions") == "/login"
