from __future__ import annotations

import threading
import time
from typing import Callable, Dict, Optional

from models import BrowseState


class SessionManager:
    """Simple in-memory store of per-session browse state."""

    def __init__(self, ttl_sec: int = 3600, default_category: str = "food") -> None:
        self._sessions: Dict[str, BrowseState] = {}
        self._last_access: Dict[str, float] = {}
        self._lock = threading.Lock()
        self.ttl_sec = ttl_sec
        self.default_category = default_category

    def get_state(self, session_id: str) -> BrowseState:
        with self._lock:
            self._cleanup()
            if not session_id:
                return BrowseState(category=self.default_category)
            self._last_access[session_id] = time.time()
            return self._sessions.get(session_id) or BrowseState(category=self.default_category)

    def set_state(self, session_id: str, state: BrowseState) -> None:
        if not session_id:
            return
        with self._lock:
            self._cleanup()
            # states are immutable; replace, never patch
            self._sessions[session_id] = state
            self._last_access[session_id] = time.time()

    def update(self, session_id: str, fn: Callable[[BrowseState], BrowseState]) -> BrowseState:
        """Apply fn to a session's state and store the result under one lock.

        Concurrent updates to the same session are serialized, so none is lost.
        """
        with self._lock:
            self._cleanup()
            if not session_id:
                return fn(BrowseState(category=self.default_category))
            current = self._sessions.get(session_id) or BrowseState(category=self.default_category)
            state = fn(current)
            self._sessions[session_id] = state
            self._last_access[session_id] = time.time()
            return state

    def reset(self, session_id: str) -> None:
        """Forget a session's state."""
        if not session_id:
            return
        with self._lock:
            self._sessions.pop(session_id, None)
            self._last_access.pop(session_id, None)

    def _cleanup(self) -> None:
        """Remove expired sessions."""
        now = time.time()
        expired = [
            sid for sid, last in self._last_access.items()
            if now - last > self.ttl_sec
        ]
        for sid in expired:
            self._sessions.pop(sid, None)
            del self._last_access[sid]


# Global singleton
session_manager = SessionManager()


def configure(ttl_sec: Optional[int] = None, default_category: Optional[str] = None) -> None:
    if ttl_sec is not None:
        session_manager.ttl_sec = ttl_sec
    if default_category:
        session_manager.default_category = default_category
