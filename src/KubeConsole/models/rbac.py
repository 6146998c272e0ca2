from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from .base import ApiInfo, DisplayRow, rbac_authorization_v1_api


@dataclass(frozen=True)
class ClusterRoleRow(DisplayRow):
    """Represents a ClusterRole for UI display."""

    # --- API Metadata ---
    api_info: ClassVar[ApiInfo] = rbac_authorization_v1_api
    kind: ClassVar[str] = "ClusterRole"
    plural: ClassVar[str] = "clusterroles"
    namespaced: ClassVar[bool] = False
    display_name: ClassVar[str] = "Cluster Roles"

    def __init__(self, raw: Any):
        """Initialize the cluster role row with data from the raw Kubernetes resource."""
        super().__init__(raw=raw)
