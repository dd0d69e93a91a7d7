"""Session, transport and booking services for the HealthWire portal client."""

from healthwire.services.api_gateway import ApiGateway, ApiError, NetworkError, UnauthorizedError
from healthwire.services.navigation_service import Navigator
from healthwire.services.scheduling_service import TimeSlotPicker
from healthwire.services.session_manager import SessionManager
from healthwire.services.storage_service import JsonFileStorage, MemoryStorage, create_storage
from healthwire.services.token_service import is_token_expired

__all__ = [
    "ApiGateway",
    "ApiError",
    "NetworkError",
    "UnauthorizedError",
    "Navigator",
    "TimeSlotPicker",
    "SessionManager",
    "JsonFileStorage",
    "MemoryStorage",
    "create_storage",
    "is_token_expired",
]
