from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from textual.app import ComposeResult
from textual.containers import Vertical, Horizontal
from textual.screen import ModalScreen
from textual.widgets import Button, Select, Static, TextArea

from KubeConsole.core.exceptions import ManifestError
from KubeConsole.core.manifests import load_manifest
from KubeConsole.core.namespaces import creation_targets

if TYPE_CHECKING:
    from KubeConsole.core.table_controller import ResourceTableController

log = logging.getLogger(__name__)


class ManifestEditorScreen(ModalScreen[bool]):
    """The creation drawer: a YAML editor plus the target namespace.

    The screen only closes on cancel or after the API accepted the manifest,
    so a rejected manifest can be corrected in place.
    """

    DEFAULT_CSS = """
    ManifestEditorScreen {
        align: center middle;
    }

    #create-drawer {
        width: 90%;
        height: 90%;
        padding: 0 1;
        border: thick $success 60%;
        background: $surface;
    }

    #create-title {
        padding: 1 0;
        text-style: bold;
    }

    #namespace-select {
        width: 40;
    }

    #manifest-editor {
        height: 1fr;
        margin: 1 0;
        border: round $primary;
    }

    #create-buttons {
        height: auto;
        align-horizontal: right;
    }

    #create-buttons Button {
        margin-left: 1;
    }
    """

    BINDINGS = [
        ("escape", "cancel", "Dismiss"),
    ]

    def __init__(
        self,
        controller: ResourceTableController,
        template: Callable[[str], str],
    ) -> None:
        super().__init__()
        self.controller = controller
        self.template = template
        self._namespaces = [
            option.value
            for option in creation_targets(controller.namespace_options)
        ]

    @property
    def _namespaced(self) -> bool:
        return self.controller.config.model_class.namespaced

    def compose(self) -> ComposeResult:
        title = self.controller.config.create_label or "Create resource"
        initial_namespace = self._namespaces[0] if self._namespaces else ""
        with Vertical(id="create-drawer"):
            yield Static(title, id="create-title")
            if self._namespaced:
                yield Select(
                    [(ns, ns) for ns in self._namespaces],
                    prompt="Please select namespace",
                    value=initial_namespace or Select.BLANK,
                    id="namespace-select",
                )
            yield TextArea.code_editor(
                text=self.template(initial_namespace),
                language="yaml",
                theme="monokai",
                id="manifest-editor",
            )
            with Horizontal(id="create-buttons"):
                yield Button("Create", variant="success", id="create")
                yield Button("Cancel", variant="error", id="cancel")

    def on_mount(self) -> None:
        self.controller.open_create()
        self.query_one(TextArea).focus()

    def action_cancel(self) -> None:
        self.controller.cancel_create()
        self.dismiss(False)

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "cancel":
            self.action_cancel()
        elif event.button.id == "create":
            event.button.disabled = True
            try:
                await self._validate_and_submit()
            finally:
                event.button.disabled = False

    def _selected_namespace(self) -> str | None:
        if not self._namespaced:
            return None
        value = self.query_one("#namespace-select", Select).value
        return value if isinstance(value, str) and value else None

    async def _validate_and_submit(self) -> None:
        try:
            payload = load_manifest(self.query_one(TextArea).text)
        except ManifestError as e:
            log.debug("Manifest not submitted: %s", e)
            self.app.notify(str(e), title="Error", severity="error", timeout=10)
            return

        namespace = self._selected_namespace()
        if namespace is not None:
            metadata = payload.setdefault("metadata", {})
            if isinstance(metadata, dict):
                metadata["namespace"] = namespace

        result = await self.controller.submit_create(namespace, payload)
        if result.success:
            self.dismiss(True)
