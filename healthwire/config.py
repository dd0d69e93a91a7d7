"""
Application Configuration Settings
HealthWire patient/doctor portal client
"""

from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Environment
    ENVIRONMENT: str = "development"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"

    # Application
    APP_NAME: str = "HealthWire Medical System"
    APP_VERSION: str = "1.0.0"

    # REST API
    API_BASE_URL: str = "http://localhost:5000/api"
    API_TIMEOUT_SECONDS: float = 30.0
    AUTH_HEADER_NAME: str = "x-auth-token"  # Header the backend reads the session token from
    AUTH_LOGIN_MODE: str = "enhanced"  # "enhanced" (MFA-aware) or "basic"

    # Persisted session storage
    STORAGE_BACKEND: str = "file"  # "file" or "memory"
    STORAGE_PATH: str = ".healthwire/session.json"
    TOKEN_STORAGE_KEY: str = "token"
    USER_STORAGE_KEY: str = "user"
    TOKEN_EXPIRY_LEEWAY_SECONDS: int = 0

    # Navigation entry points
    LOGIN_PATH: str = "/login"
    MFA_PATH: str = "/mfa-verification"
    DASHBOARD_PATH: str = "/dashboard"
    PUBLIC_PATHS: List[str] = ["/", "/login", "/register", "/register/client", "/register/doctor"]

    # Input rules (enforced by the presentation layer)
    PASSWORD_MIN_LENGTH: int = 8
    MFA_CODE_LENGTH: int = 6

    # Appointment booking
    SLOT_WINDOW_DAYS: int = 7
    TIMEZONE: str = "Europe/Paris"  # Clinic-local calendar days

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()

ROLES = {
    "doctor": {
        "name": "Doctor",
        "dashboard": "/dashboard/doctor"
    },
    "client": {
        "name": "Patient",
        "dashboard": "/dashboard/client"
    }
}
