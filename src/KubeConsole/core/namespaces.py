from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterable

if TYPE_CHECKING:
    from KubeConsole.core.resource_api import NamespaceLister
    from KubeConsole.core.session import SessionContext

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class NamespaceOption:
    """A selectable namespace. An empty value stands for all namespaces."""

    label: str
    value: str

    @property
    def is_wildcard(self) -> bool:
        return self.value == ""


ALL_NAMESPACES = NamespaceOption(label="All namespaces", value="")


def creation_targets(options: Iterable[NamespaceOption]) -> list[NamespaceOption]:
    """The options a resource may be created in; the wildcard is never one."""
    return [option for option in options if not option.is_wildcard]


def _namespace_name(item: Any) -> str | None:
    metadata = item.get("metadata") if isinstance(item, dict) else None
    if not isinstance(metadata, dict):
        return None
    name = metadata.get("name")
    return name if isinstance(name, str) and name else None


async def list_available_namespaces(
    session: SessionContext, api: NamespaceLister
) -> list[NamespaceOption]:
    """
    Resolves the namespaces a user can pick from.

    A session scoped to one namespace gets exactly that namespace without a
    remote call. An unrestricted session gets the "All namespaces" option
    followed by every namespace the API returns, in API order. Any failure
    degrades to an empty list.
    """
    if session.is_scoped:
        return [NamespaceOption(label=session.namespace, value=session.namespace)]

    try:
        response = await api.list_namespaces()
    except Exception as e:
        log.error("Failed to list namespaces: %s", e, exc_info=True)
        return []

    items = response.get("items") if isinstance(response, dict) else None
    options = [ALL_NAMESPACES]
    for item in items or []:
        name = _namespace_name(item)
        if name is None:
            log.debug("Skipping namespace entry without a name: %r", item)
            continue
        options.append(NamespaceOption(label=name, value=name))

    log.debug("Resolved %d namespace options", len(options))
    return options
