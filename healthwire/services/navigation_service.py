"""Navigation signals from the session core to the presentation layer."""

import logging
from typing import Callable, List

logger = logging.getLogger(__name__)


class Navigator:
    """Records navigation requests and forwards them to listeners."""

    def __init__(self, initial_path: str = "/"):
        self.history: List[str] = [initial_path]
        self._listeners: List[Callable[[str], None]] = []

    @property
    def current_path(self) -> str:
        return self.history[-1]

    def push(self, path: str) -> None:
        logger.info(f"Navigating to {path}")
        self.history.append(path)
        for listener in list(self._listeners):
            try:
                listener(path)
            except Exception:
                logger.exception(f"Navigation listener failed for {path}")

    def subscribe(self, listener: Callable[[str], None]) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

