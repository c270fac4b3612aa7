"""
User-visible status notices.

The embedding page decides how a notice is shown (a modal, a toast, a
terminal line). The services only need somewhere to hand the message.
"""

from typing import Protocol, runtime_checkable

import structlog

logger = structlog.get_logger(__name__)


@runtime_checkable
class StatusNotifier(Protocol):
    """Receives human-readable failure messages meant for the voter."""

    def notify(self, message: str) -> None: ...


class LoggingNotifier:
    """Default notifier: writes notices to the log."""

    def notify(self, message: str) -> None:
        logger.warning("status_notice", message=message)


class CollectingNotifier:
    """Keeps every notice in order, for headless hosts and tests."""

    def __init__(self):
        self.messages: list[str] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)

    @property
    def last(self) -> str | None:
        return self.messages[-1] if self.messages else None

    def clear(self) -> None:
        self.messages.clear()
