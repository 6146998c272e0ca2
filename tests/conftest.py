from __future__ import annotations

import asyncio
import copy
import uuid
from datetime import datetime, timezone
from typing import Any

import pytest

from KubeConsole.core.notifications import RecordingNotifier
from KubeConsole.core.session import SessionContext
from KubeConsole.core.table_controller import ResourceTableController
from KubeConsole.pages import CLUSTER_ROLES_PAGE, DEPLOYMENTS_PAGE


def make_deployment(
    name: str,
    namespace: str = "default",
    created: str | None = "2024-01-01T10:00:00Z",
    status: dict[str, Any] | None = None,
    uid: str | None = None,
) -> dict[str, Any]:
    metadata: dict[str, Any] = {
        "name": name,
        "namespace": namespace,
        "uid": uid or f"uid-{namespace}-{name}",
    }
    if created is not None:
        metadata["creationTimestamp"] = created
    resource: dict[str, Any] = {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": metadata,
        "spec": {"replicas": (status or {}).get("replicas", 1)},
    }
    if status is not None:
        resource["status"] = status
    return resource


def make_cluster_role(name: str, created: str | None = "2024-01-01T10:00:00Z") -> dict[str, Any]:
    metadata: dict[str, Any] = {"name": name, "uid": f"uid-{name}"}
    if created is not None:
        metadata["creationTimestamp"] = created
    return {
        "apiVersion": "rbac.authorization.k8s.io/v1",
        "kind": "ClusterRole",
        "metadata": metadata,
        "rules": [],
    }


class FakeResourceApi:
    """An in-memory ResourceApi recording every call it receives."""

    def __init__(
        self,
        items: list[dict[str, Any]] | None = None,
        namespaces: list[str] | None = None,
        namespaced: bool = True,
    ) -> None:
        self.items = list(items or [])
        self.namespaces = list(namespaces or [])
        self.namespaced = namespaced
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        # Set any of these to an exception to make the matching call raise it.
        self.list_error: Exception | None = None
        self.detail_error: Exception | None = None
        self.create_error: Exception | None = None
        self.delete_error: Exception | None = None
        self.namespaces_error: Exception | None = None
        # Set these to return a canned response instead of mutating the store.
        self.create_response: dict[str, Any] | None = None
        self.delete_response: dict[str, Any] | None = None
        self.detail_response: dict[str, Any] | None = None
        # The next list call waits on this event before answering.
        self.list_gate: asyncio.Event | None = None

    def count(self, operation: str) -> int:
        return sum(1 for name, _ in self.calls if name == operation)

    async def list_resources(self, scope: str | None) -> dict[str, Any]:
        self.calls.append(("list", (scope,)))
        gate, self.list_gate = self.list_gate, None
        if gate is not None:
            await gate.wait()
        if self.list_error is not None:
            raise self.list_error
        items = [
            copy.deepcopy(item)
            for item in self.items
            if not scope or item["metadata"].get("namespace") == scope
        ]
        return {"kind": "List", "items": items}

    async def get_resource_detail(self, namespace: str | None, name: str) -> dict[str, Any]:
        self.calls.append(("detail", (namespace, name)))
        if self.detail_error is not None:
            raise self.detail_error
        if self.detail_response is not None:
            return self.detail_response
        for item in self.items:
            metadata = item["metadata"]
            if metadata["name"] == name and metadata.get("namespace") == namespace:
                return copy.deepcopy(item)
        return {"kind": "Status", "status": "Failure", "message": "not found"}

    async def create_resource(
        self, namespace: str | None, payload: dict[str, Any]
    ) -> dict[str, Any]:
        self.calls.append(("create", (namespace, payload)))
        if self.create_error is not None:
            raise self.create_error
        if self.create_response is not None:
            return self.create_response
        created = copy.deepcopy(payload)
        metadata = created.setdefault("metadata", {})
        if namespace:
            metadata["namespace"] = namespace
        metadata["uid"] = str(uuid.uuid4())
        metadata["creationTimestamp"] = datetime.now(timezone.utc).strftime(
            "%Y-%m-%dT%H:%M:%SZ"
        )
        self.items.append(created)
        return copy.deepcopy(created)

    async def delete_resource(self, namespace: str | None, name: str) -> dict[str, Any]:
        self.calls.append(("delete", (namespace, name)))
        if self.delete_error is not None:
            raise self.delete_error
        if self.delete_response is not None:
            return self.delete_response
        self.items = [
            item
            for item in self.items
            if not (
                item["metadata"]["name"] == name
                and item["metadata"].get("namespace") == namespace
            )
        ]
        return {"kind": "Status", "status": "Success"}

    async def list_namespaces(self) -> dict[str, Any]:
        self.calls.append(("namespaces", ()))
        if self.namespaces_error is not None:
            raise self.namespaces_error
        return {"items": [{"metadata": {"name": name}} for name in self.namespaces]}


class Confirm:
    """A confirm callback that answers with a fixed choice and records prompts."""

    def __init__(self, answer: bool = True) -> None:
        self.answer = answer
        self.prompts: list[tuple[str, str]] = []

    async def __call__(self, title: str, prompt: str) -> bool:
        self.prompts.append((title, prompt))
        return self.answer


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def confirm() -> Confirm:
    return Confirm(answer=True)


@pytest.fixture
def deployments_api() -> FakeResourceApi:
    return FakeResourceApi(
        items=[
            make_deployment(
                "frontend",
                "default",
                "2024-01-01T10:00:00Z",
                {"replicas": 3, "availableReplicas": 2},
            ),
            make_deployment(
                "backend",
                "kube-system",
                "2024-02-01T10:00:00Z",
                {"replicas": 1, "availableReplicas": 1},
            ),
            make_deployment("front-proxy", "kube-system", "2024-03-01T10:00:00Z"),
        ],
        namespaces=["default", "kube-system"],
    )


@pytest.fixture
def cluster_roles_api() -> FakeResourceApi:
    return FakeResourceApi(
        items=[make_cluster_role("admin"), make_cluster_role("view")],
        namespaced=False,
    )


@pytest.fixture
def deployments_controller(deployments_api, notifier, confirm) -> ResourceTableController:
    return ResourceTableController(
        DEPLOYMENTS_PAGE.table,
        deployments_api,
        SessionContext(),
        notifier,
        confirm=confirm,
    )


@pytest.fixture
def cluster_roles_controller(cluster_roles_api, notifier, confirm) -> ResourceTableController:
    return ResourceTableController(
        CLUSTER_ROLES_PAGE.table,
        cluster_roles_api,
        SessionContext(),
        notifier,
        confirm=confirm,
    )
