"""State of the secondary views (detail, YAML, create/edit) of a resource page."""

from __future__ import annotations

import enum
import logging
from typing import Any, Awaitable, Callable, Literal, Optional

from KubeConsole.core.notifications import Notifier
from KubeConsole.models.base import DisplayRow

log = logging.getLogger(__name__)

FETCH_FAILED = "Failed to obtain, please try again!"

ViewKind = Literal["detail", "yaml", "edit"]
FetchCallback = Callable[[DisplayRow], Awaitable[Any]]
RefreshCallback = Callable[[], Awaitable[Any]]


class ViewState(enum.Enum):
    CLOSED = "closed"
    LOADING = "loading"
    OPEN = "open"


class AuxiliaryView:
    """
    One secondary view, bound to at most one row at a time.

    Views created with a fetch callback load the full resource before
    opening. Every open or close starts a new generation, and a fetch that
    completes for an older generation is discarded, so a late response never
    reopens a closed view or replaces a newer selection.
    """

    def __init__(
        self,
        kind: ViewKind,
        notifier: Notifier,
        fetch: Optional[FetchCallback] = None,
        on_refresh: Optional[RefreshCallback] = None,
    ) -> None:
        self.kind = kind
        self._notifier = notifier
        self._fetch = fetch
        self._on_refresh = on_refresh
        self._state = ViewState.CLOSED
        self._row: DisplayRow | None = None
        self._payload: Any = None
        self._generation = 0
        self._listeners: list[Callable[[AuxiliaryView], None]] = []

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def row(self) -> DisplayRow | None:
        """The selected row the view is bound to, if any."""
        return self._row

    @property
    def payload(self) -> Any:
        """The fetched resource shown by the view once it is open."""
        return self._payload

    @property
    def is_open(self) -> bool:
        return self._state is ViewState.OPEN

    def subscribe(self, listener: Callable[[AuxiliaryView], None]) -> None:
        self._listeners.append(listener)

    def _set(self, state: ViewState, row: DisplayRow | None, payload: Any) -> None:
        self._state = state
        self._row = row
        self._payload = payload
        log.debug(
            "%s view -> %s (%s)",
            self.kind,
            state.value,
            row.name if row is not None else "no row",
        )
        for listener in list(self._listeners):
            listener(self)

    async def open_for(self, row: DisplayRow) -> bool:
        """Binds the view to a row, fetching its full resource first if needed."""
        self._generation += 1
        generation = self._generation

        if self._fetch is None:
            self._set(ViewState.OPEN, row, row.raw)
            return True

        self._set(ViewState.LOADING, row, None)
        try:
            payload = await self._fetch(row)
        except Exception as e:
            if generation != self._generation:
                log.debug("Ignoring failed %s fetch for a stale selection", self.kind)
                return False
            log.error(
                "Failed to fetch %s for %s '%s': %s",
                self.kind,
                row.kind,
                row.name,
                e,
                exc_info=True,
            )
            self._set(ViewState.CLOSED, None, None)
            self._notifier.error(FETCH_FAILED)
            return False

        if generation != self._generation:
            log.debug("Discarding stale %s response for '%s'", self.kind, row.name)
            return False

        if payload is None:
            self._set(ViewState.CLOSED, None, None)
            self._notifier.error(FETCH_FAILED)
            return False

        self._set(ViewState.OPEN, row, payload)
        return True

    def open_blank(self) -> None:
        """Opens the view without a bound row, as the creation flow does."""
        self._generation += 1
        self._set(ViewState.OPEN, None, None)

    def close(self) -> None:
        self._generation += 1
        if self._state is not ViewState.CLOSED or self._row is not None:
            self._set(ViewState.CLOSED, None, None)

    async def submit_succeeded(self) -> None:
        """Closes the view after a successful submit and asks for a list refresh."""
        self.close()
        if self._on_refresh is not None:
            await self._on_refresh()


class AuxiliaryViewController:
    """The independent detail, YAML and create/edit views of one page."""

    def __init__(
        self,
        notifier: Notifier,
        fetch_detail: FetchCallback,
        on_refresh: RefreshCallback,
    ) -> None:
        self.detail = AuxiliaryView("detail", notifier, fetch=fetch_detail)
        self.yaml = AuxiliaryView(
            "yaml", notifier, fetch=fetch_detail, on_refresh=on_refresh
        )
        self.edit = AuxiliaryView("edit", notifier, on_refresh=on_refresh)

    def get(self, kind: ViewKind) -> AuxiliaryView:
        return {"detail": self.detail, "yaml": self.yaml, "edit": self.edit}[kind]

    def close_all(self) -> None:
        for view in (self.detail, self.yaml, self.edit):
            view.close()
