from __future__ import annotations

from typing import Literal

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Static, TextArea

from KubeConsole.core.manifests import dump_manifest
from KubeConsole.core.views import AuxiliaryView
from KubeConsole.models.base import format_datetime_string

ViewerResult = Literal["submit", "cancel"]


class ManifestViewerScreen(ModalScreen[ViewerResult]):
    """Shows the full resource bound to a detail or YAML view."""

    DEFAULT_CSS = """
    ManifestViewerScreen {
        align: center middle;
    }

    #viewer {
        width: 80%;
        height: 80%;
        border: thick $primary;
        background: $boost;
    }

    #summary {
        padding: 0 1;
        height: auto;
    }

    TextArea {
        border: round $primary;
        height: 1fr;
    }

    #buttons {
        height: auto;
        align-horizontal: right;
    }

    Button {
        margin: 1;
    }
    """

    BINDINGS = [("escape", "cancel", "Close")]

    def __init__(self, view: AuxiliaryView, submit_label: str | None = None) -> None:
        super().__init__()
        self.view = view
        self.submit_label = submit_label

    def _summary(self) -> str:
        row = self.view.row
        if row is None:
            return ""
        lines = [f"{row.kind}: {row.name}"]
        if row.namespace:
            lines.append(f"Namespace: {row.namespace}")
        lines.append(f"Created: {format_datetime_string(row.creation_timestamp)}")
        if row.uid:
            lines.append(f"UID: {row.uid}")
        return "\n".join(lines)

    def compose(self) -> ComposeResult:
        with Vertical(id="viewer"):
            if self.view.kind == "detail":
                yield Static(self._summary(), id="summary")
            yield TextArea.code_editor(
                text=dump_manifest(self.view.payload),
                language="yaml",
                theme="monokai",
                read_only=True,
            )
            with Horizontal(id="buttons"):
                if self.submit_label:
                    yield Button(self.submit_label, variant="primary", id="submit")
                yield Button("Close", id="cancel")

    def action_cancel(self) -> None:
        self.dismiss("cancel")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss("submit" if event.button.id == "submit" else "cancel")
