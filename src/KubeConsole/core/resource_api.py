from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol, Type

import orjson
from kubernetes_asyncio.client.exceptions import ApiException

from KubeConsole.models.base import DisplayRow

if TYPE_CHECKING:
    from KubeConsole.core.kubernetes_client import KubernetesClient

log = logging.getLogger(__name__)


class NamespaceLister(Protocol):
    async def list_namespaces(self) -> dict[str, Any]:
        """Returns a namespace list object: {"items": [{"metadata": {"name": ...}}]}."""
        ...


class ResourceApi(NamespaceLister, Protocol):
    """The remote operations a resource page relies on, for one resource kind.

    Every call returns plain Kubernetes-shaped dicts (metadata/spec/status)
    and raises on transport failures.
    """

    async def list_resources(self, scope: str | None) -> dict[str, Any]: ...

    async def get_resource_detail(
        self, namespace: str | None, name: str
    ) -> dict[str, Any]: ...

    async def create_resource(
        self, namespace: str | None, payload: dict[str, Any]
    ) -> dict[str, Any]: ...

    async def delete_resource(self, namespace: str | None, name: str) -> dict[str, Any]: ...


def status_payload(error: ApiException) -> dict[str, Any] | None:
    """
    Turns an API error that carries a Kubernetes Status body into an error
    payload with the server's message, or None when the body is not one.
    """
    if not error.body:
        return None
    try:
        body = orjson.loads(error.body)
    except orjson.JSONDecodeError:
        return None
    if not isinstance(body, dict) or not body.get("message"):
        return None
    return {
        "kind": "Status",
        "status": body.get("status") or "Failure",
        "msg": body["message"],
        "reason": body.get("reason") or error.reason,
        "code": body.get("code") or error.status,
    }


class KubernetesResourceApi:
    """A ResourceApi backed by the Kubernetes API for one row model."""

    def __init__(self, kubernetes_client: KubernetesClient, model_class: Type[DisplayRow]):
        self._client = kubernetes_client
        self._model_class = model_class

    @property
    def model_class(self) -> Type[DisplayRow]:
        return self._model_class

    def _to_dict(self, obj: Any) -> dict[str, Any]:
        sanitized = self._client.sanitize_for_serialization(obj)
        return sanitized if isinstance(sanitized, dict) else {}

    def _namespace_for(self, namespace: str | None) -> str | None:
        return namespace if self._model_class.namespaced else None

    async def list_resources(self, scope: str | None) -> dict[str, Any]:
        method, kwargs = self._client.get_api_method_for_resource(
            self._model_class, "list", namespace=self._namespace_for(scope)
        )
        log.debug("Listing %s with %s", self._model_class.plural, kwargs)
        return self._to_dict(await method(**kwargs))

    async def get_resource_detail(
        self, namespace: str | None, name: str
    ) -> dict[str, Any]:
        method, kwargs = self._client.get_api_method_for_resource(
            self._model_class, "read", namespace=self._namespace_for(namespace)
        )
        kwargs["name"] = name
        return self._to_dict(await method(**kwargs))

    async def create_resource(
        self, namespace: str | None, payload: dict[str, Any]
    ) -> dict[str, Any]:
        method, kwargs = self._client.get_api_method_for_resource(
            self._model_class, "create", namespace=self._namespace_for(namespace)
        )
        kwargs["body"] = payload
        try:
            return self._to_dict(await method(**kwargs))
        except ApiException as e:
            error_payload = status_payload(e)
            if error_payload is None:
                raise
            log.info(
                "Create %s rejected (HTTP %s): %s",
                self._model_class.kind,
                e.status,
                error_payload["msg"],
            )
            return error_payload

    async def delete_resource(self, namespace: str | None, name: str) -> dict[str, Any]:
        method, kwargs = self._client.get_api_method_for_resource(
            self._model_class, "delete", namespace=self._namespace_for(namespace)
        )
        kwargs["name"] = name
        try:
            return self._to_dict(await method(**kwargs))
        except ApiException as e:
            error_payload = status_payload(e)
            if error_payload is None:
                raise
            log.info(
                "Delete %s '%s' rejected (HTTP %s): %s",
                self._model_class.kind,
                name,
                e.status,
                error_payload["msg"],
            )
            return error_payload

    async def list_namespaces(self) -> dict[str, Any]:
        return self._to_dict(await self._client.CoreV1Api.list_namespace())
