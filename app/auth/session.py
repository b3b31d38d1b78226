"""
Explicit session context with sign-in/sign-out notifications.

One instance per application, stored on ``app.state`` and handed to request
handlers through ``get_session_context``. Listeners receive
``(event, user, db)`` and run inside the caller's transaction; a failing
listener is logged and never blocks the sign-in itself.
"""
import enum
import logging
from typing import Callable, List

from fastapi import Request
from sqlalchemy.orm import Session

from app.models.user import User

logger = logging.getLogger(__name__)


class AuthEvent(str, enum.Enum):
    SIGNED_IN = "SIGNED_IN"
    SIGNED_OUT = "SIGNED_OUT"
    PASSWORD_UPDATED = "PASSWORD_UPDATED"


Listener = Callable[[AuthEvent, User, Session], None]


class SessionContext:
    def __init__(self):
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener. Returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def publish(self, event: AuthEvent, user: User, db: Session) -> None:
        for listener in list(self._listeners):
            try:
                listener(event, user, db)
            except Exception as e:
                logger.error("Session listener %r failed on %s for user %s: %s", listener, event.value, user.id, e)


def get_session_context(request: Request) -> SessionContext:
    """Dependency returning the application's session context"""
    return request.app.state.session_context
