"""
In-memory store of per-session controllers.
"""
import logging
from collections import OrderedDict
from typing import Callable, Optional

from .controller import AppController

logger = logging.getLogger(__name__)

DEFAULT_MAX_SESSIONS = 256


class SessionStore:
    """
    Maps a session id to its AppController. Nothing is persisted.

    Holds at most `max_sessions` controllers; when full, the least recently
    used controller that is not generating is discarded.
    """

    def __init__(self, max_sessions: int = DEFAULT_MAX_SESSIONS):
        if max_sessions < 1:
            raise ValueError("max_sessions must be at least 1")
        self.max_sessions = max_sessions
        self._controllers: "OrderedDict[str, AppController]" = OrderedDict()

    def get(self, session_id: str) -> Optional[AppController]:
        controller = self._controllers.get(session_id)
        if controller is not None:
            self._controllers.move_to_end(session_id)
        return controller

    def get_or_create(self, session_id: str, factory: Callable[[], AppController]) -> AppController:
        controller = self.get(session_id)
        if controller is None:
            self._evict()
            controller = factory()
            self._controllers[session_id] = controller
            logger.info(f"Created session controller ({len(self._controllers)} active)")
        return controller

    def discard(self, session_id: str):
        if self._controllers.pop(session_id, None) is not None:
            logger.info(f"Discarded session controller ({len(self._controllers)} active)")

    def _evict(self):
        while len(self._controllers) >= self.max_sessions:
            idle = next((sid for sid, c in self._controllers.items() if not c.busy), None)
            if idle is None:
                logger.warning(f"All {len(self._controllers)} sessions are generating; store over capacity")
                return
            self.discard(idle)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._controllers

    def __len__(self) -> int:
        return len(self._controllers)
