"""HTTP interceptors registered on the API gateway's client."""

import logging
from typing import Awaitable, Callable, Optional, Union

import httpx

from healthwire.config import settings

logger = logging.getLogger(__name__)

UnauthorizedHandler = Callable[[], Union[None, Awaitable[None]]]


class AuthHeaderInterceptor:
    """Attach the persisted session token to every outgoing request."""

    def __init__(self, storage, header_name: Optional[str] = None, token_key: Optional[str] = None):
        self.storage = storage
        self.header_name = header_name or settings.AUTH_HEADER_NAME
        self.token_key = token_key or settings.TOKEN_STORAGE_KEY

    async def __call__(self, request: httpx.Request) -> None:
        token = self.storage.get_item(self.token_key)
        if token:
            request.headers[self.header_name] = token


class UnauthorizedInterceptor:
    """Hand every HTTP 401 response to a single session-level handler."""

    def __init__(self, handler: Optional[UnauthorizedHandler] = None):
        self.handler = handler

    def bind(self, handler: UnauthorizedHandler) -> None:
        if self.handler is not None and self.handler is not handler:
            logger.warning("Replacing existing unauthorized handler")
        self.handler = handler

    async def __call__(self, response: httpx.Response) -> None:
        if response.status_code != 401:
            return

        logger.warning(f"Unauthorized response from {response.request.method} {response.request.url.path}")
        if self.handler is None:
            return

        result = self.handler()
        if result is not None:
            await result
