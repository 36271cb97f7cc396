"""
Drop Detective Session
======================

Explicit session object with change notifications.

The current user is held by a SessionManager instance that callers pass
around, rather than by app-wide state. Interested parties subscribe to
auth events:

    manager = SessionManager()
    unsubscribe = manager.subscribe(lambda event, session: ...)
    manager.sign_in(Session(user_id="u-1", email="a@b.in"))
    unsubscribe()

Scoring never reads the session; the pipeline only records who asked.
"""

import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class AuthEvent(Enum):
    """Session change events."""
    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"
    USER_UPDATED = "user_updated"


@dataclass(frozen=True)
class Session:
    """An authenticated user session."""
    user_id: str
    email: Optional[str] = None
    access_token: Optional[str] = None
    started_at: datetime = field(default_factory=datetime.utcnow)


SessionCallback = Callable[[AuthEvent, Optional[Session]], None]


class SessionManager:
    """Holds the current session and notifies subscribers of changes."""

    def __init__(self, session: Optional[Session] = None):
        self._session = session
        self._subscribers: List[SessionCallback] = []
        self._lock = threading.Lock()

    @property
    def current(self) -> Optional[Session]:
        return self._session

    @property
    def is_authenticated(self) -> bool:
        return self._session is not None

    def subscribe(self, callback: SessionCallback) -> Callable[[], None]:
        """
        Register a callback for auth events.

        Returns:
            A function that removes the subscription
        """
        with self._lock:
            self._subscribers.append(callback)

        def unsubscribe():
            with self._lock:
                if callback in self._subscribers:
                    self._subscribers.remove(callback)

        return unsubscribe

    def sign_in(self, session: Session):
        self._session = session
        self._notify(AuthEvent.SIGNED_IN)

    def sign_out(self):
        self._session = None
        self._notify(AuthEvent.SIGNED_OUT)

    def update_user(self, session: Session):
        if self._session is None:
            raise ValueError("Cannot update user without an active session")
        self._session = session
        self._notify(AuthEvent.USER_UPDATED)

    def _notify(self, event: AuthEvent):
        logger.info(f"Auth state change event: {event.value}")
        with self._lock:
            subscribers = list(self._subscribers)
        for callback in subscribers:
            try:
                callback(event, self._session)
            except Exception as e:
                logger.error(f"Session subscriber failed on {event.value}: {e}")
