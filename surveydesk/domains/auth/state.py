"""Process-wide sign-in state notifications.

The notifier lives on ``app.state`` for the lifetime of the application. Listeners
subscribe at startup and are cleared at shutdown; routes get it through Depends.
"""

import logging
from enum import Enum
from typing import Awaitable, Callable

from fastapi import Request
from pydantic import BaseModel

logger = logging.getLogger(__name__)


class AuthEventType(str, Enum):
    """Identity state changes."""

    SIGNED_IN = "signed_in"
    SIGNED_OUT = "signed_out"
    PASSWORD_CHANGED = "password_changed"


class AuthEvent(BaseModel):
    """One identity state change."""

    type: AuthEventType
    staff_id: str
    email: str
    persistence: str | None = None


AuthListener = Callable[[AuthEvent], Awaitable[None]]


class AuthStateNotifier:
    """Fan-out of sign-in, sign-out and password-change events."""

    def __init__(self) -> None:
        self._listeners: list[AuthListener] = []

    def subscribe(self, listener: AuthListener) -> Callable[[], None]:
        """Register a listener; returns a function that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def clear(self) -> None:
        self._listeners.clear()

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    async def publish(self, event: AuthEvent) -> None:
        """Deliver an event to every listener. A failing listener does not block the rest."""
        for listener in list(self._listeners):
            try:
                await listener(event)
            except Exception as e:
                logger.error(f"Auth listener failed on {event.type.value}: {e}")


async def log_auth_event(event: AuthEvent) -> None:
    """Default listener: write identity changes to the application log."""
    suffix = f" ({event.persistence})" if event.persistence else ""
    logger.info(f"{event.email} {event.type.value}{suffix}")


def get_auth_notifier(request: Request) -> AuthStateNotifier:
    """Dependency returning the application's notifier."""
    return request.app.state.auth_notifier
