from __future__ import annotations

from typing import Optional

from textual.app import ComposeResult
from textual.containers import Grid, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Input, Label, Static

from KubeConsole.core.session import SessionContext


class ScopeScreen(ModalScreen[Optional[SessionContext]]):
    """Asks for the namespace the session is restricted to.

    Leaving the field empty makes the session unrestricted. Dismisses with
    None when cancelled.
    """

    DEFAULT_CSS = """
    ScopeScreen {
        align: center middle;
    }

    #scope_dialog {
        grid-size: 1;
        grid-rows: auto 1fr auto;
        padding: 0 1;
        width: 60;
        height: 16;
        border: thick $primary;
        background: $boost;
    }

    #scope_title {
        text-style: bold;
        padding: 1 0;
    }

    #scope_buttons {
        grid-size: 2;
        grid-gutter: 1;
        height: auto;
    }

    #scope_buttons Button {
        width: 100%;
    }
    """

    BINDINGS = [("escape", "cancel", "Cancel")]

    def __init__(self, session: SessionContext) -> None:
        super().__init__()
        self.session = session

    def compose(self) -> ComposeResult:
        yield Grid(
            Static("Namespace scope", id="scope_title"),
            Vertical(
                Label("Namespace (empty for all namespaces)"),
                Input(value=self.session.namespace, id="scope_namespace"),
            ),
            Grid(
                Button("Apply", variant="primary", id="scope_ok"),
                Button("Cancel", variant="default", id="scope_cancel"),
                id="scope_buttons",
            ),
            id="scope_dialog",
        )

    def on_mount(self) -> None:
        self.query_one(Input).focus()

    def _apply(self) -> None:
        namespace = self.query_one("#scope_namespace", Input).value.strip()
        self.dismiss(SessionContext(namespace=namespace))

    def action_cancel(self) -> None:
        self.dismiss(None)

    def on_input_submitted(self, event: Input.Submitted) -> None:
        self._apply()

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "scope_ok":
            self._apply()
        else:
            self.dismiss(None)
