from __future__ import annotations
import logging
import queue
import sys
from logging.handlers import QueueHandler, QueueListener
from typing import ClassVar

from textual import work
from textual.app import App, ComposeResult
from textual.widgets import Footer, Header, TabbedContent

from KubeConsole.config import AppConfig
from KubeConsole.containers.resource_page import ResourcePage
from KubeConsole.containers.resource_table import ResourceTable
from KubeConsole.core.exceptions import ConfigurationError
from KubeConsole.core.kubernetes_client import KubernetesClient
from KubeConsole.core.resource_api import KubernetesResourceApi
from KubeConsole.core.session import SessionContext
from KubeConsole.pages import PAGES, PageDefinition
from KubeConsole.screens.confirmation_screen import ButtonInfo, ConfirmationScreen
from KubeConsole.screens.scope_screen import ScopeScreen

log = logging.getLogger(__name__)


class AppLogger:
    """Routes log records to the configured log file through a queue."""

    _instance: ClassVar[AppLogger | None] = None

    @classmethod
    def get_instance(cls, app_config: AppConfig | None = None) -> AppLogger:
        if cls._instance is None:
            cls._instance = AppLogger(app_config or AppConfig.get_instance())
        return cls._instance

    def __init__(self, app_config: AppConfig) -> None:
        self.log_queue: queue.Queue[logging.LogRecord] = queue.Queue(-1)
        self.log_listener: QueueListener | None = None

        log_level = getattr(logging, app_config.log_level, logging.INFO)

        # The terminal belongs to the TUI, so without a log file nothing is written.
        if app_config.log_file:
            log_handler = logging.FileHandler(app_config.log_file, mode="w")
            log_handler.setFormatter(
                logging.Formatter(
                    "%(asctime)s - %(name)s:%(lineno)d - %(levelname)s - %(message)s"
                )
            )
            self.log_listener = QueueListener(self.log_queue, log_handler)
            root_logger = logging.getLogger()
            root_logger.addHandler(QueueHandler(self.log_queue))
            root_logger.setLevel(log_level)
            logging.getLogger("KubeConsole").setLevel(log_level)
            self.log_listener.start()

            log.info("--- KubeConsole logger initialized ---")

            logging.getLogger("kubernetes_asyncio.client.rest").setLevel(logging.INFO)

    def stop(self) -> None:
        """Stop the log listener."""
        if self.log_listener:
            self.log_listener.stop()
            self.log_listener = None


class KubeConsole(App[None]):
    """The resource console: one tab per managed resource kind."""

    CSS = """
    TabbedContent {
        height: 1fr;
    }
    """

    TITLE = "KubeConsole"
    AUTO_FOCUS = ""

    BINDINGS = [
        ("ctrl+n", "create_resource", "Create"),
        ("r", "reload", "Reload"),
        ("ctrl+s", "change_scope", "Namespace scope"),
        ("ctrl+q", "request_quit", "Quit"),
    ]

    def __init__(
        self,
        app_config: AppConfig | None = None,
        pages: tuple[PageDefinition, ...] = PAGES,
    ) -> None:
        super().__init__()
        self._config = app_config or AppConfig.get_instance()
        self._app_logger = AppLogger.get_instance(self._config)
        self._pages = pages
        self._session = SessionContext(namespace=self._config.namespace)
        self._kubernetes_client: KubernetesClient | None = None
        self._update_sub_title()

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def session(self) -> SessionContext:
        return self._session

    def _update_sub_title(self) -> None:
        scope = self._session.namespace or "all namespaces"
        self.sub_title = f"Scope: {scope}"

    def compose(self) -> ComposeResult:
        yield Header()
        yield TabbedContent()
        yield Footer()

    async def on_mount(self) -> None:
        try:
            self._kubernetes_client = await KubernetesClient.get_instance(self._config)
        except ConfigurationError as e:
            log.error("Failed to set up the Kubernetes client: %s", e)
            self.notify(str(e), title="Error", severity="error", timeout=30)
            return

        tabbed_content = self.query_one(TabbedContent)
        for page in self._pages:
            api = KubernetesResourceApi(self._kubernetes_client, page.table.model_class)
            await tabbed_content.add_pane(ResourcePage(page, api, self._session))
        if self._pages:
            tabbed_content.active = self._pages[0].id
            self._focus_active_table()

    def _active_page(self) -> ResourcePage | None:
        pane = self.query_one(TabbedContent).active_pane
        return pane if isinstance(pane, ResourcePage) else None

    def _focus_active_table(self) -> None:
        page = self._active_page()
        if page is not None:
            page.query_one(ResourceTable).focus()

    def on_tabbed_content_tab_activated(self, event: TabbedContent.TabActivated) -> None:
        self._focus_active_table()

    def action_create_resource(self) -> None:
        page = self._active_page()
        if page is not None:
            page.open_create_screen()

    def action_reload(self) -> None:
        page = self._active_page()
        if page is not None:
            page.reload()

    @work
    async def action_change_scope(self) -> None:
        session = await self.push_screen_wait(ScopeScreen(self._session))
        if session is None or session == self._session:
            return
        log.info("Switching session scope to %r", session.namespace or "<all>")
        self._session = session
        self._update_sub_title()
        for page in self.query(ResourcePage):
            page.set_session(session)

    @work
    async def action_request_quit(self) -> None:
        buttons = [
            ButtonInfo(label="Quit", result=True, variant="error"),
            ButtonInfo(label="Cancel", result=False, variant="primary"),
        ]
        screen = ConfirmationScreen(
            prompt="Are you sure you want to quit KubeConsole?",
            buttons=buttons,
        )
        if await self.push_screen_wait(screen):
            self.exit()

    async def on_unmount(self) -> None:
        if self._kubernetes_client is not None:
            await KubernetesClient.reset_instance()
            self._kubernetes_client = None
        self._app_logger.stop()


async def main(app_config: AppConfig | None = None) -> None:
    """Runs the console until it exits."""
    app = KubeConsole(app_config)
    await app.run_async()
    sys.exit(app.return_code or 0)
