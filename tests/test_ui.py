import pytest
from textual.app import App, ComposeResult
from textual.widgets import Input, SelectionList, TabbedContent

from conftest import make_deployment
from KubeConsole.containers.resource_page import ResourcePage
from KubeConsole.containers.resource_table import ResourceTable, row_key
from KubeConsole.core.session import SessionContext
from KubeConsole.models import DeploymentRow
from KubeConsole.pages import DEPLOYMENTS_PAGE


class TableApp(App):
    def compose(self) -> ComposeResult:
        yield ResourceTable(DeploymentRow, id="table")


class PageApp(App):
    def __init__(self, api):
        super().__init__()
        self.api = api

    def compose(self) -> ComposeResult:
        with TabbedContent():
            yield ResourcePage(DEPLOYMENTS_PAGE, self.api, SessionContext())


def test_row_key_falls_back_to_namespace_and_name():
    raw = make_deployment("web", "prod")
    del raw["metadata"]["uid"]
    assert row_key(DeploymentRow.project(raw)) == "prod/web"


@pytest.mark.asyncio
async def test_resource_table_renders_rows():
    app = TableApp()
    async with app.run_test():
        table = app.query_one(ResourceTable)
        rows = [
            DeploymentRow.project(
                make_deployment("web", status={"replicas": 2, "availableReplicas": 1})
            ),
            DeploymentRow.project(make_deployment("api")),
            DeploymentRow.project(make_deployment("api")),
        ]

        table.set_rows(rows)

        assert table.row_count == 2
        assert [str(column.label) for column in table.columns.values()] == [
            "Name",
            "Namespace",
            "Replicas(available/total)",
            "Creation time",
        ]
        assert table.get_row("uid-default-web")[2].plain == "1/2"
        assert table.row_for_key("uid-default-api").name == "api"


@pytest.mark.asyncio
async def test_resource_page_loads_and_filters(deployments_api):
    app = PageApp(deployments_api)
    async with app.run_test() as pilot:
        await pilot.pause()
        await app.workers.wait_for_complete()
        page = app.query_one(ResourcePage)
        table = page.query_one(ResourceTable)

        assert table.row_count == 3
        assert page.query_one(SelectionList).option_count == 3

        page.query_one("#name-filter", Input).value = "front"
        page.search()
        await app.workers.wait_for_complete()

        assert table.row_count == 2
        assert deployments_api.count("list") == 2

        page.reset()
        await app.workers.wait_for_complete()

        assert table.row_count == 3
        assert page.query_one("#name-filter", Input).value == ""
