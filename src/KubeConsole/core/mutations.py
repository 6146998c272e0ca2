"""Create and delete operations with user feedback and list refresh."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional, Type

from KubeConsole.core.notifications import Notifier
from KubeConsole.core.resource_api import ResourceApi
from KubeConsole.models.base import DisplayRow

log = logging.getLogger(__name__)

ConfirmCallback = Callable[[str, str], Awaitable[bool]]
RefreshCallback = Callable[[], Awaitable[Any]]

ADD_PENDING = "Adding..."
ADD_SUCCESS = "Added successfully!"
ADD_FAILED = "Failed, please try again!"
DELETE_PENDING = "Deleting..."
DELETE_SUCCESS = "Successfully deleted, about to refresh"
DELETE_FAILED = "Deletion failed, please try again"
NAMESPACE_REQUIRED = "Please select a namespace to create the resource in"


@dataclass(frozen=True)
class MutationResult:
    success: bool
    message: str | None = None


def server_message(response: Any) -> str | None:
    """The error message a response carries, if any."""
    if not isinstance(response, Mapping):
        return None
    message = response.get("msg") or response.get("message")
    return str(message) if message else None


def is_created(response: Any) -> bool:
    """A create succeeded when the returned object has a creation timestamp."""
    if not isinstance(response, Mapping):
        return False
    metadata = response.get("metadata")
    return isinstance(metadata, Mapping) and bool(metadata.get("creationTimestamp"))


def is_deleted(response: Any, name: str) -> bool:
    """
    A delete succeeded when the API answers with a "Success" Status, or
    with the deleted object itself (metadata.name equal to the target name).
    Both shapes occur depending on the resource kind, so both are accepted.
    """
    if not isinstance(response, Mapping):
        return False
    if response.get("status") == "Success":
        return True
    metadata = response.get("metadata")
    return isinstance(metadata, Mapping) and metadata.get("name") == name


class MutationCoordinator:
    """
    Runs create and delete calls against the API.

    Each call shows a pending indicator that is always hidden before the
    outcome is reported, and a successful mutation triggers exactly one list
    refresh after its response has been observed. Failures are never retried.
    """

    def __init__(
        self,
        api: ResourceApi,
        model_class: Type[DisplayRow],
        notifier: Notifier,
        refresh: RefreshCallback,
        confirm: ConfirmCallback,
    ) -> None:
        self._api = api
        self._model_class = model_class
        self._notifier = notifier
        self._refresh = refresh
        self._confirm = confirm

    async def create(
        self,
        namespace: str | None,
        payload: dict[str, Any],
        on_success: Optional[Callable[[], None]] = None,
    ) -> MutationResult:
        """Creates a resource; `on_success` runs before the list refresh."""
        if self._model_class.namespaced and not namespace:
            self._notifier.error(NAMESPACE_REQUIRED)
            return MutationResult(False, NAMESPACE_REQUIRED)

        hide = self._notifier.loading(ADD_PENDING)
        try:
            try:
                response = await self._api.create_resource(namespace, payload)
            finally:
                hide()
        except Exception as e:
            log.error(
                "Failed to create %s in namespace '%s': %s",
                self._model_class.kind,
                namespace,
                e,
                exc_info=True,
            )
            self._notifier.error(ADD_FAILED)
            return MutationResult(False, ADD_FAILED)

        if not is_created(response):
            message = server_message(response) or ADD_FAILED
            log.warning("Create %s was not accepted: %s", self._model_class.kind, message)
            self._notifier.error(message)
            return MutationResult(False, message)

        log.info(
            "Created %s '%s'",
            self._model_class.kind,
            response["metadata"].get("name"),
        )
        self._notifier.success(ADD_SUCCESS)
        if on_success is not None:
            on_success()
        await self._refresh()
        return MutationResult(True, ADD_SUCCESS)

    def _delete_prompt(self, row: DisplayRow) -> str:
        namespace_text = f" in namespace '{row.namespace}'" if row.namespace else ""
        return (
            f"Are you sure you want to delete {row.kind} '{row.name}'{namespace_text}?"
        )

    async def delete(self, row: DisplayRow) -> MutationResult:
        confirmed = await self._confirm("Delete", self._delete_prompt(row))
        if not confirmed:
            log.debug("Deletion of %s '%s' declined", row.kind, row.name)
            return MutationResult(False)

        hide = self._notifier.loading(DELETE_PENDING)
        try:
            try:
                response = await self._api.delete_resource(row.namespace, row.name)
            finally:
                hide()
        except Exception as e:
            log.error(
                "Failed to delete %s '%s': %s", row.kind, row.name, e, exc_info=True
            )
            self._notifier.error(DELETE_FAILED)
            return MutationResult(False, DELETE_FAILED)

        if not is_deleted(response, row.name):
            message = server_message(response) or DELETE_FAILED
            log.warning("Delete of %s '%s' was not accepted: %s", row.kind, row.name, message)
            self._notifier.error(message)
            return MutationResult(False, message)

        log.info("Deleted %s '%s'", row.kind, row.name)
        self._notifier.success(DELETE_SUCCESS)
        await self._refresh()
        return MutationResult(True, DELETE_SUCCESS)
