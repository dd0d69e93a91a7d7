"""Request interceptors and route guarding."""

from .auth import RouteGuard
from .interceptors import AuthHeaderInterceptor, UnauthorizedInterceptor

__all__ = [
    "RouteGuard",
    "AuthHeaderInterceptor",
    "UnauthorizedInterceptor",
]
