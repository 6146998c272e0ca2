from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from textual.widget import Widget

log = logging.getLogger(__name__)


class AppNotifier:
    """
    Reports operation feedback through Textual toasts.

    Toasts cannot be withdrawn, so in-progress messages are shown through
    `on_pending`, which receives the messages still pending after every change.
    """

    def __init__(self, node: Widget, on_pending: Callable[[list[str]], None]) -> None:
        self._node = node
        self._on_pending = on_pending
        self._pending: list[str] = []

    @property
    def pending(self) -> list[str]:
        return list(self._pending)

    def loading(self, message: str) -> Callable[[], None]:
        self._pending.append(message)
        self._on_pending(self.pending)
        hidden = False

        def hide() -> None:
            nonlocal hidden
            if hidden:
                return
            hidden = True
            self._pending.remove(message)
            self._on_pending(self.pending)

        return hide

    def success(self, message: str) -> None:
        log.info(message)
        self._node.notify(message, title="Success", timeout=5)

    def error(self, message: str) -> None:
        log.warning(message)
        self._node.notify(message, title="Error", severity="error", timeout=10)
