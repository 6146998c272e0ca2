from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional

from .base import (
    ApiInfo,
    DisplayRow,
    apps_v1_api,
    as_count,
    column_field,
    section,
)


@dataclass(frozen=True)
class DeploymentRow(DisplayRow):
    """Represents a Deployment for UI display."""

    # --- API Metadata ---
    api_info: ClassVar[ApiInfo] = apps_v1_api
    kind: ClassVar[str] = "Deployment"
    plural: ClassVar[str] = "deployments"
    namespaced: ClassVar[bool] = True
    display_name: ClassVar[str] = "Deployments"

    # --- Instance Fields ---
    ready: str = column_field(label="Replicas(available/total)", width=12, index=2)
    replicas: int = field(init=False, default=0)
    available_replicas: Optional[int] = field(init=False, default=None)
    unavailable_replicas: int = field(init=False, default=0)
    available: int = field(init=False, default=0)

    def __init__(self, raw: Any):
        """Initialize the deployment row from the raw resource's status counters."""
        super().__init__(raw=raw)
        status = section(raw, "status")

        replicas = as_count(status.get("replicas"))
        unavailable = as_count(status.get("unavailableReplicas"))
        available_raw = status.get("availableReplicas")
        available_replicas = (
            None if available_raw is None else as_count(available_raw)
        )

        # A reported availableReplicas, even 0, wins over the subtraction.
        available = (
            available_replicas
            if available_replicas is not None
            else replicas - unavailable
        )

        object.__setattr__(self, "replicas", replicas)
        object.__setattr__(self, "available_replicas", available_replicas)
        object.__setattr__(self, "unavailable_replicas", unavailable)
        object.__setattr__(self, "available", available)
        object.__setattr__(self, "ready", f"{available}/{replicas}")
