from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class SessionContext:
    """The namespace scope a console session is authorized for.

    An empty namespace means the session is unrestricted and may enumerate
    and list across all namespaces.
    """

    namespace: str = ""

    @property
    def is_scoped(self) -> bool:
        return bool(self.namespace)

    @property
    def scope(self) -> str | None:
        """The namespace to pass to list calls, or None for all namespaces."""
        return self.namespace or None
