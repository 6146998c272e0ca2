from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Literal

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen
from textual.widgets import Button, Static


@dataclass
class ButtonInfo:
    """One answer offered by a ConfirmationScreen and the value it dismisses with."""

    label: str
    result: Any
    variant: Literal["default", "primary", "success", "warning", "error"] = "primary"


YES_NO_BUTTONS = [
    ButtonInfo(label="Yes", result=True, variant="error"),
    ButtonInfo(label="No", result=False, variant="primary"),
]


class ConfirmationScreen(ModalScreen[Any]):
    """Asks the user to confirm an action before it is carried out.

    Escape answers False. The last button gets the focus, so the safe answer
    must come last.
    """

    DEFAULT_CSS = """
    ConfirmationScreen {
        align: center middle;
    }

    #confirm-dialog {
        width: 64;
        height: auto;
        padding: 1 2;
        border: thick $error 60%;
        background: $surface;
    }

    #confirm-title {
        width: 100%;
        text-style: bold;
        color: $error;
    }

    #confirm-prompt {
        width: 100%;
        margin: 1 0;
    }

    #confirm-buttons {
        width: 100%;
        height: auto;
        align-horizontal: right;
    }

    #confirm-buttons Button {
        margin-left: 1;
    }
    """

    BINDINGS = [("escape", "decline", "Cancel")]

    def __init__(
        self,
        prompt: str,
        title: str | None = None,
        buttons: list[ButtonInfo] | None = None,
    ) -> None:
        super().__init__()
        self.title_text = title
        self.prompt_text = prompt
        self.answers = {
            f"answer-{index}": info
            for index, info in enumerate(buttons or YES_NO_BUTTONS)
        }

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-dialog"):
            if self.title_text:
                yield Static(self.title_text, id="confirm-title", markup=False)
            yield Static(self.prompt_text, id="confirm-prompt", markup=False)
            with Horizontal(id="confirm-buttons"):
                for button_id, info in self.answers.items():
                    yield Button(info.label, variant=info.variant, id=button_id)

    def on_mount(self) -> None:
        self.query(Button).last().focus()

    def action_decline(self) -> None:
        self.dismiss(False)

    def on_button_pressed(self, event: Button.Pressed) -> None:
        info = self.answers.get(event.button.id or "")
        if info is not None:
            self.dismiss(info.result)
