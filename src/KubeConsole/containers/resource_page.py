from __future__ import annotations

import logging
from typing import Any

from textual import on, work
from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.css.query import NoMatches
from textual.widgets import Button, DataTable, Input, SelectionList, Static, TabPane
from textual.widgets.selection_list import Selection

from KubeConsole.containers.resource_table import ResourceTable
from KubeConsole.core.filters import CREATION_TIME_FILTER, NAME_FILTER, NAMESPACE_FILTER
from KubeConsole.core.resource_api import ResourceApi
from KubeConsole.core.session import SessionContext
from KubeConsole.core.table_controller import (
    DELETE_ACTION,
    YAML_ACTION,
    ResourceTableController,
    TableResult,
)
from KubeConsole.models.base import DisplayRow
from KubeConsole.pages import PageDefinition
from KubeConsole.screens.action_screen import ActionScreen
from KubeConsole.screens.confirmation_screen import ConfirmationScreen
from KubeConsole.screens.manifest_editor_screen import ManifestEditorScreen
from KubeConsole.screens.manifest_viewer_screen import ManifestViewerScreen
from KubeConsole.ui.notifier import AppNotifier


log = logging.getLogger(__name__)


class ResourcePage(TabPane):
    """A tab with the filter form, toolbar and table of one resource kind."""

    DEFAULT_CSS = """
    ResourcePage #filters, ResourcePage #toolbar {
        height: auto;
        dock: top;
    }

    ResourcePage #toolbar {
        margin-top: 3;
    }

    ResourcePage Input {
        width: 28;
        border: round $primary;

        &:focus {
            border: round $accent;
        }
    }

    ResourcePage SelectionList {
        width: 30;
        max-height: 8;
        border: round $primary;
    }

    ResourcePage #table-title {
        width: 1fr;
        padding: 1;
        text-style: bold;
    }

    ResourcePage #pending {
        width: auto;
        padding: 1;
        color: $warning;

        &.-idle {
            display: none;
        }
    }
    """

    def __init__(
        self,
        page: PageDefinition,
        api: ResourceApi,
        session: SessionContext,
    ) -> None:
        super().__init__(page.table.header, id=page.id)
        self.page = page
        self.notifier = AppNotifier(self, on_pending=self._show_pending)
        self.controller = ResourceTableController(
            page.table,
            api,
            session,
            self.notifier,
            confirm=self._confirm,
        )

    def compose(self) -> ComposeResult:
        fields = self.page.table.filter_fields
        with Horizontal(id="filters"):
            if NAMESPACE_FILTER in fields:
                yield SelectionList[str](id="namespace-filter")
            if NAME_FILTER in fields:
                yield Input(placeholder=NAME_FILTER.placeholder, id="name-filter")
            if CREATION_TIME_FILTER in fields:
                yield Input(
                    placeholder=f"Start Time {CREATION_TIME_FILTER.placeholder}",
                    id="start-filter",
                )
                yield Input(
                    placeholder=f"End Time {CREATION_TIME_FILTER.placeholder}",
                    id="end-filter",
                )
            yield Button("Search", variant="primary", id="search")
            yield Button("Reset", id="reset")
        with Horizontal(id="toolbar"):
            yield Static(self.page.table.header, id="table-title")
            yield Static("", id="pending", classes="-idle")
            yield Button(
                self.page.table.create_label or "Create",
                variant="primary",
                id="create",
            )
        yield ResourceTable(self.page.table.model_class, id="resource-table")

    def on_mount(self) -> None:
        self.controller.add_refresh_listener(self._show_result)
        self.start()

    def _show_pending(self, messages: list[str]) -> None:
        try:
            pending = self.query_one("#pending", Static)
        except NoMatches:
            # Feedback can arrive before the page is composed.
            return
        pending.update(" ".join(messages))
        pending.set_class(not messages, "-idle")

    def _show_result(self, result: TableResult) -> None:
        self.query_one(ResourceTable).set_rows(result.rows)
        self.query_one("#table-title", Static).update(
            f"{self.page.table.header} ({result.total})"
        )

    def _populate_namespace_filter(self) -> None:
        if NAMESPACE_FILTER not in self.page.table.filter_fields:
            return
        selection_list = self.query_one("#namespace-filter", SelectionList)
        selection_list.clear_options()
        selection_list.add_options(
            [
                Selection(option.label, option.value)
                for option in self.controller.namespace_options
            ]
        )

    def _form_values(self) -> dict[str, Any]:
        values: dict[str, Any] = {}
        fields = self.page.table.filter_fields
        if NAMESPACE_FILTER in fields:
            values[NAMESPACE_FILTER.key] = list(
                self.query_one("#namespace-filter", SelectionList).selected
            )
        if NAME_FILTER in fields:
            values[NAME_FILTER.key] = self.query_one("#name-filter", Input).value
        if CREATION_TIME_FILTER in fields:
            start = self.query_one("#start-filter", Input).value.strip()
            end = self.query_one("#end-filter", Input).value.strip()
            if start or end:
                values[CREATION_TIME_FILTER.key] = [start, end]
        return values

    def _clear_form(self) -> None:
        for form_input in self.query("#filters Input").results(Input):
            form_input.value = ""
        if NAMESPACE_FILTER in self.page.table.filter_fields:
            self.query_one("#namespace-filter", SelectionList).deselect_all()

    async def _confirm(self, title: str, prompt: str) -> bool:
        return bool(
            await self.app.push_screen_wait(ConfirmationScreen(prompt=prompt, title=title))
        )

    @work(exclusive=True, group="load")
    async def start(self) -> None:
        await self.controller.start()
        self._populate_namespace_filter()

    @work(exclusive=True, group="load")
    async def reload(self) -> None:
        await self.controller.reload()

    @work(exclusive=True, group="load")
    async def set_session(self, session: SessionContext) -> None:
        self._clear_form()
        await self.controller.set_session(session)
        self._populate_namespace_filter()

    @on(Button.Pressed, "#search")
    @on(Input.Submitted)
    def search(self) -> None:
        values = self._form_values()
        log.debug("Searching %s with %r", self.page.id, values)
        self.controller.set_criteria(values)
        self.reload()

    @on(Button.Pressed, "#reset")
    def reset(self) -> None:
        self._clear_form()
        self.controller.reset_criteria()
        self.reload()

    @on(Button.Pressed, "#create")
    def on_create_pressed(self) -> None:
        self.open_create_screen()

    @work
    async def open_create_screen(self) -> None:
        await self.app.push_screen_wait(
            ManifestEditorScreen(self.controller, self.page.template)
        )

    @on(DataTable.RowSelected, "#resource-table")
    def on_row_selected(self, event: DataTable.RowSelected) -> None:
        row = self.query_one(ResourceTable).row_for_key(event.row_key.value)
        if row is not None:
            self.run_row_menu(row)

    @work
    async def run_row_menu(self, row: DisplayRow) -> None:
        action = await self.app.push_screen_wait(
            ActionScreen(row, self.page.table.row_actions)
        )
        if action is None:
            return
        if action.key == DELETE_ACTION.key:
            await self.controller.delete(row)
            return

        opened = await self.controller.run_row_action(action, row)
        view = (
            self.controller.views.yaml
            if action.key == YAML_ACTION.key
            else self.controller.views.detail
        )
        if not opened or view.row is not row:
            return

        result = await self.app.push_screen_wait(
            ManifestViewerScreen(
                view, submit_label="OK" if action.key == YAML_ACTION.key else None
            )
        )
        if result == "submit":
            await self.controller.submit_yaml()
        else:
            view.close()
