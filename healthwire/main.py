"""
Portal composition root.

Owns the single storage, gateway, navigator and session manager of a
running client.
"""

import logging
from typing import Optional

import httpx

from healthwire.config import settings
from healthwire.middleware.auth import RouteGuard
from healthwire.services.api_gateway import ApiGateway
from healthwire.services.navigation_service import Navigator
from healthwire.services.scheduling_service import TimeSlotPicker
from healthwire.services.session_manager import SessionManager
from healthwire.services.storage_service import create_storage

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


class Portal:
    """One running portal client."""

    def __init__(self, storage=None, navigator: Optional[Navigator] = None,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.storage = storage if storage is not None else create_storage()
        self.navigator = navigator or Navigator()
        self.gateway = ApiGateway(self.storage, transport=transport)
        self.session = SessionManager(self.gateway, self.storage, self.navigator)
        self.route_guard = RouteGuard()

    async def startup(self) -> None:
        logger.info(f"Starting {settings.APP_NAME} v{settings.APP_VERSION} ({settings.ENVIRONMENT})")
        self.session.initialize()

    async def shutdown(self) -> None:
        logger.info(f"Shutting down {settings.APP_NAME}")
        await self.gateway.aclose()

    async def __aenter__(self) -> "Portal":
        await self.startup()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.shutdown()

    def navigate(self, path: str) -> str:
        """Apply route guarding to a page request and return the page shown."""
        state = self.session.state
        target = path
        # /login -> /dashboard -> /dashboard/<role> is the longest chain
        for _ in range(3):
            redirect = self.route_guard.resolve(target, state)
            if redirect is None or redirect == target:
                break
            target = redirect
        self.navigator.push(target)
        return target

    def time_slot_picker(self, doctor_id) -> TimeSlotPicker:
        return TimeSlotPicker(self.gateway, doctor_id=doctor_id)
