from __future__ import annotations
from typing import Optional

from rich.text import Text
from textual import on
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.events import Click
from textual.screen import ModalScreen
from textual.widgets import OptionList, Static
from textual.widgets.option_list import Option

from KubeConsole.core.table_controller import RowAction
from KubeConsole.models.base import DisplayRow


class ActionScreen(ModalScreen[Optional[RowAction]]):
    """The row menu. Dismisses with the chosen action, or None."""

    BINDINGS = [("escape", "close_menu", "Dismiss")]

    DEFAULT_CSS = """
    ActionScreen {
        align: center middle;
    }

    #row-menu {
        width: 50;
        height: auto;
        border: round $primary;
        background: $boost;
    }

    #row-menu-title {
        width: 100%;
        padding: 1;
        text-style: bold;
    }

    #row-menu OptionList {
        height: auto;
        border: none;
    }
    """

    def __init__(self, row: DisplayRow, actions: tuple[RowAction, ...]) -> None:
        super().__init__()
        self.row = row
        self.actions = {action.key: action for action in actions}

    def compose(self) -> ComposeResult:
        with Vertical(id="row-menu"):
            yield Static(f"{self.row.kind} {self.row.name}", id="row-menu-title", markup=False)
            yield OptionList(
                *[
                    Option(
                        Text(action.label, style="bold red" if action.danger else ""),
                        id=key,
                    )
                    for key, action in self.actions.items()
                ]
            )

    def on_mount(self) -> None:
        self.query_one(OptionList).focus()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.dismiss(self.actions.get(event.option.id or ""))

    def action_close_menu(self) -> None:
        self.dismiss(None)

    @on(Click)
    def close_on_click_outside(self, event: Click) -> None:
        menu = self.query_one("#row-menu")
        if not menu.region.contains(event.screen_x, event.screen_y):
            self.dismiss(None)
