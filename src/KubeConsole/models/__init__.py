from .base import DisplayRow, ApiInfo, ALL_APIS
from .apps import DeploymentRow
from .rbac import ClusterRoleRow

__all__ = ["DisplayRow", "ApiInfo", "ALL_APIS", "DeploymentRow", "ClusterRoleRow"]
