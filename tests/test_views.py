import asyncio

import pytest

from conftest import make_deployment
from KubeConsole.core.views import (
    FETCH_FAILED,
    AuxiliaryView,
    AuxiliaryViewController,
    ViewState,
)
from KubeConsole.models import DeploymentRow


def row(name="web"):
    return DeploymentRow.project(make_deployment(name))


class GatedFetch:
    """A fetch whose responses are released one by one by the test."""

    def __init__(self):
        self.gates: dict[str, asyncio.Event] = {}

    def release(self, name):
        self.gates.setdefault(name, asyncio.Event()).set()

    async def __call__(self, target):
        await self.gates.setdefault(target.name, asyncio.Event()).wait()
        return {"metadata": {"name": target.name}}


@pytest.mark.asyncio
async def test_fetching_view_opens_with_payload(notifier):
    states = []

    async def fetch(target):
        return {"metadata": {"name": target.name}, "spec": {}}

    view = AuxiliaryView("detail", notifier, fetch=fetch)
    view.subscribe(lambda v: states.append(v.state))

    assert await view.open_for(row())

    assert states == [ViewState.LOADING, ViewState.OPEN]
    assert view.is_open
    assert view.row.name == "web"
    assert view.payload == {"metadata": {"name": "web"}, "spec": {}}


@pytest.mark.asyncio
async def test_fetch_failure_closes_and_notifies(notifier):
    async def fetch(target):
        raise ConnectionError("boom")

    view = AuxiliaryView("yaml", notifier, fetch=fetch)

    assert not await view.open_for(row())

    assert view.state is ViewState.CLOSED
    assert view.row is None
    assert notifier.errors == [FETCH_FAILED]


@pytest.mark.asyncio
async def test_empty_response_is_a_failure(notifier):
    async def fetch(target):
        return None

    view = AuxiliaryView("detail", notifier, fetch=fetch)

    assert not await view.open_for(row())
    assert view.state is ViewState.CLOSED
    assert notifier.errors == [FETCH_FAILED]


@pytest.mark.asyncio
async def test_late_response_does_not_reopen_closed_view(notifier):
    fetch = GatedFetch()
    view = AuxiliaryView("detail", notifier, fetch=fetch)

    task = asyncio.create_task(view.open_for(row("web")))
    await asyncio.sleep(0)
    assert view.state is ViewState.LOADING

    view.close()
    fetch.release("web")

    assert await task is False
    assert view.state is ViewState.CLOSED
    assert view.payload is None


@pytest.mark.asyncio
async def test_late_response_does_not_replace_newer_selection(notifier):
    fetch = GatedFetch()
    view = AuxiliaryView("detail", notifier, fetch=fetch)

    first = asyncio.create_task(view.open_for(row("web")))
    await asyncio.sleep(0)
    second = asyncio.create_task(view.open_for(row("api")))
    await asyncio.sleep(0)

    fetch.release("api")
    assert await second is True
    fetch.release("web")
    assert await first is False

    assert view.row.name == "api"
    assert view.payload == {"metadata": {"name": "api"}}


@pytest.mark.asyncio
async def test_view_without_fetch_opens_with_raw_resource(notifier):
    view = AuxiliaryView("edit", notifier)
    selected = row()

    assert await view.open_for(selected)
    assert view.payload is selected.raw


@pytest.mark.asyncio
async def test_submit_succeeded_closes_and_refreshes(notifier):
    refreshed = []

    async def on_refresh():
        refreshed.append(True)

    view = AuxiliaryView("edit", notifier, on_refresh=on_refresh)
    view.open_blank()
    assert view.is_open and view.row is None

    await view.submit_succeeded()

    assert view.state is ViewState.CLOSED
    assert refreshed == [True]


@pytest.mark.asyncio
async def test_controller_views_are_independent(notifier):
    async def fetch(target):
        return target.raw

    async def on_refresh():
        pass

    views = AuxiliaryViewController(notifier, fetch_detail=fetch, on_refresh=on_refresh)
    await views.detail.open_for(row())
    views.edit.open_blank()

    assert views.get("detail").is_open
    assert views.get("edit").is_open
    assert not views.get("yaml").is_open

    views.close_all()
    assert not any(v.is_open for v in (views.detail, views.yaml, views.edit))
