from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Literal, Protocol

log = logging.getLogger(__name__)

Severity = Literal["loading", "success", "error"]


class Notifier(Protocol):
    """Transient user feedback for long-running operations and their outcome."""

    def loading(self, message: str) -> Callable[[], None]:
        """Shows an in-progress indicator and returns the function that hides it."""
        ...

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


@dataclass
class Notification:
    severity: Severity
    message: str


@dataclass
class RecordingNotifier:
    """A notifier that keeps every event in memory, in the order it happened."""

    events: list[Notification] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)

    def loading(self, message: str) -> Callable[[], None]:
        self.events.append(Notification("loading", message))
        self.pending.append(message)
        hidden = False

        def hide() -> None:
            nonlocal hidden
            if hidden:
                return
            hidden = True
            self.pending.remove(message)

        return hide

    def success(self, message: str) -> None:
        log.info(message)
        self.events.append(Notification("success", message))

    def error(self, message: str) -> None:
        log.warning(message)
        self.events.append(Notification("error", message))

    @property
    def errors(self) -> list[str]:
        return [n.message for n in self.events if n.severity == "error"]

    @property
    def successes(self) -> list[str]:
        return [n.message for n in self.events if n.severity == "success"]
