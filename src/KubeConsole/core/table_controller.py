"""The generic controller behind every resource page.

A page is described by a TableConfig: which row model projects the raw
resources, which filter inputs it offers and which actions each row has. The
controller fetches the raw collection, projects and filters it, and routes
mutations and secondary views, re-running the request after each successful
mutation.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Sequence, Type

from aiohttp import ClientError

from KubeConsole.core.filters import (
    NAMESPACE_FILTER,
    FilterCriteria,
    FilterField,
    filter_rows,
)
from KubeConsole.core.mutations import ConfirmCallback, MutationCoordinator, MutationResult
from KubeConsole.core.namespaces import NamespaceOption, list_available_namespaces
from KubeConsole.core.notifications import Notifier
from KubeConsole.core.resource_api import ResourceApi
from KubeConsole.core.session import SessionContext
from KubeConsole.core.views import AuxiliaryViewController
from KubeConsole.models.base import DisplayRow

log = logging.getLogger(__name__)

LIST_FAILED = "Failed to load resources, please try again!"

TRANSPORT_ERRORS = (ClientError, asyncio.TimeoutError)


@dataclass(frozen=True)
class RowAction:
    """An action offered for each row of a table."""

    key: str
    label: str
    danger: bool = False


DETAIL_ACTION = RowAction(key="detail", label="Detail")
YAML_ACTION = RowAction(key="yaml", label="YAML")
DELETE_ACTION = RowAction(key="delete", label="Delete", danger=True)


@dataclass(frozen=True)
class TableConfig:
    model_class: Type[DisplayRow]
    filter_fields: tuple[FilterField, ...] = ()
    row_actions: tuple[RowAction, ...] = ()
    project: Optional[Callable[[Any], DisplayRow]] = None
    title: Optional[str] = None
    create_label: Optional[str] = None

    @property
    def projector(self) -> Callable[[Any], DisplayRow]:
        return self.project or self.model_class.project

    @property
    def header(self) -> str:
        return self.title or self.model_class.display_name

    @property
    def has_namespace_filter(self) -> bool:
        return NAMESPACE_FILTER in self.filter_fields


@dataclass
class TableResult:
    rows: list[DisplayRow] = field(default_factory=list)
    total: int = 0
    success: bool = True
    # Set when a newer request or a session change superseded this one.
    stale: bool = False


class ResourceTableController:
    def __init__(
        self,
        config: TableConfig,
        api: ResourceApi,
        session: SessionContext,
        notifier: Notifier,
        confirm: ConfirmCallback,
    ) -> None:
        self.config = config
        self._api = api
        self._session = session
        self._notifier = notifier
        self._criteria = FilterCriteria()
        self._namespace_options: list[NamespaceOption] = []
        self._last_result = TableResult()
        self._refresh_listeners: list[Callable[[TableResult], Any]] = []
        self.request_count = 0
        self._generation = 0

        self.mutations = MutationCoordinator(
            api,
            config.model_class,
            notifier,
            refresh=self.reload,
            confirm=confirm,
        )
        self.views = AuxiliaryViewController(
            notifier,
            fetch_detail=self._fetch_detail,
            on_refresh=self.reload,
        )

    @property
    def session(self) -> SessionContext:
        return self._session

    @property
    def criteria(self) -> FilterCriteria:
        return self._criteria

    @property
    def namespace_options(self) -> list[NamespaceOption]:
        return list(self._namespace_options)

    @property
    def last_result(self) -> TableResult:
        return self._last_result

    def add_refresh_listener(self, listener: Callable[[TableResult], Any]) -> None:
        self._refresh_listeners.append(listener)

    def _restrict(self, criteria: FilterCriteria) -> FilterCriteria:
        # Criteria for inputs the page does not offer are dropped.
        if criteria.namespaces and not self.config.has_namespace_filter:
            return FilterCriteria(name=criteria.name, time_range=criteria.time_range)
        return criteria

    def set_criteria(self, criteria: FilterCriteria | Mapping[str, Any] | None) -> None:
        if criteria is None or isinstance(criteria, Mapping):
            criteria = FilterCriteria.from_form(criteria)
        self._criteria = self._restrict(criteria)

    def reset_criteria(self) -> None:
        self._criteria = FilterCriteria()

    async def load_namespace_options(self) -> list[NamespaceOption]:
        if not self.config.model_class.namespaced:
            self._namespace_options = []
            return self.namespace_options

        session = self._session
        options = await list_available_namespaces(session, self._api)
        if self._session is not session:
            return options
        self._namespace_options = options
        return self.namespace_options

    def _project_all(self, items: Sequence[Any]) -> list[DisplayRow]:
        rows = []
        project = self.config.projector
        for item in items:
            try:
                rows.append(project(item))
            except Exception as e:
                log.warning(
                    "Skipping %s that could not be projected: %s",
                    self.config.model_class.kind,
                    e,
                    exc_info=True,
                )
        return rows

    async def request(self, params: Mapping[str, Any] | None = None) -> TableResult:
        """
        Fetches the collection for the session scope and returns the rows
        matching the current criteria. `params` only fill in criteria the
        form leaves empty.

        A response that arrives after a newer request or a session change
        is returned marked stale and does not replace `last_result`.
        """
        self.request_count += 1
        self._generation += 1
        generation = self._generation
        criteria = self._criteria
        if params:
            criteria = self._restrict(FilterCriteria.from_form(params)).merged_with(
                criteria
            )

        scope = self._session.scope if self.config.model_class.namespaced else None
        try:
            response = await self._api.list_resources(scope)
        except Exception as e:
            if generation != self._generation:
                log.debug("Ignoring failure of superseded list request: %s", e)
                return TableResult(success=False, stale=True)
            # No traceback for connection problems.
            log.error(
                "Failed to list %s: %s",
                self.config.model_class.plural,
                e,
                exc_info=not isinstance(e, TRANSPORT_ERRORS),
            )
            self._notifier.error(LIST_FAILED)
            self._last_result = TableResult(rows=[], total=0, success=False)
            return self._last_result

        items = response.get("items") if isinstance(response, Mapping) else None
        if generation != self._generation:
            log.debug(
                "Discarding superseded list of %s for scope %r",
                self.config.model_class.plural,
                scope,
            )
            return TableResult(stale=True)

        rows = list(filter_rows(self._project_all(items or []), criteria))
        self._last_result = TableResult(rows=rows, total=len(rows), success=True)
        log.debug(
            "Listed %d %s (%d shown)",
            len(items or []),
            self.config.model_class.plural,
            len(rows),
        )
        return self._last_result

    async def reload(self) -> TableResult:
        """Re-runs the request with the current criteria and notifies listeners."""
        result = await self.request()
        if result.stale:
            return result
        for listener in list(self._refresh_listeners):
            listener(result)
        return result

    async def start(self) -> TableResult:
        """Loads the namespace options and the first page of rows concurrently."""
        _, result = await asyncio.gather(self.load_namespace_options(), self.reload())
        return result

    async def set_session(self, session: SessionContext) -> TableResult:
        """Switches the namespace scope; filters are reset and options reloaded."""
        self._session = session
        # Lists still in flight for the old scope are discarded.
        self._generation += 1
        self.reset_criteria()
        self.views.close_all()
        return await self.start()

    async def _fetch_detail(self, row: DisplayRow) -> Any:
        return await self._api.get_resource_detail(row.namespace, row.name)

    async def open_detail(self, row: DisplayRow) -> bool:
        return await self.views.detail.open_for(row)

    async def open_yaml(self, row: DisplayRow) -> bool:
        return await self.views.yaml.open_for(row)

    def open_create(self) -> None:
        self.views.edit.open_blank()

    def cancel_create(self) -> None:
        self.views.edit.close()

    async def submit_create(
        self, namespace: str | None, payload: dict[str, Any]
    ) -> MutationResult:
        """Creates a resource; the create view closes only when it succeeded."""
        return await self.mutations.create(
            namespace, payload, on_success=self.views.edit.close
        )

    async def submit_yaml(self) -> None:
        await self.views.yaml.submit_succeeded()

    async def delete(self, row: DisplayRow) -> MutationResult:
        return await self.mutations.delete(row)

    async def run_row_action(self, action: RowAction, row: DisplayRow) -> Any:
        if action.key == DETAIL_ACTION.key:
            return await self.open_detail(row)
        if action.key == YAML_ACTION.key:
            return await self.open_yaml(row)
        if action.key == DELETE_ACTION.key:
            return await self.delete(row)
        raise ValueError(f"Unknown row action: {action.key}")
