"""The resource pages of the console, each an instance of the generic table."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from KubeConsole.core.filters import CREATION_TIME_FILTER, NAME_FILTER, NAMESPACE_FILTER
from KubeConsole.core.manifests import cluster_role_template, deployment_template
from KubeConsole.core.table_controller import (
    DELETE_ACTION,
    DETAIL_ACTION,
    YAML_ACTION,
    TableConfig,
)
from KubeConsole.models.apps import DeploymentRow
from KubeConsole.models.rbac import ClusterRoleRow


@dataclass(frozen=True)
class PageDefinition:
    id: str
    table: TableConfig
    # Builds the starter manifest shown in the create editor for a namespace.
    template: Callable[[str], str]


DEPLOYMENTS_PAGE = PageDefinition(
    id="deployments",
    table=TableConfig(
        model_class=DeploymentRow,
        filter_fields=(NAMESPACE_FILTER, NAME_FILTER, CREATION_TIME_FILTER),
        row_actions=(DETAIL_ACTION, DELETE_ACTION),
        title="Deployment",
        create_label="Add Deployment",
    ),
    template=lambda namespace: deployment_template(namespace or "default"),
)

CLUSTER_ROLES_PAGE = PageDefinition(
    id="clusterroles",
    table=TableConfig(
        model_class=ClusterRoleRow,
        filter_fields=(NAME_FILTER, CREATION_TIME_FILTER),
        row_actions=(YAML_ACTION, DELETE_ACTION),
        title="Clusterroles",
        create_label="Add Clusterrole",
    ),
    template=lambda _namespace: cluster_role_template(),
)

PAGES: tuple[PageDefinition, ...] = (DEPLOYMENTS_PAGE, CLUSTER_ROLES_PAGE)
