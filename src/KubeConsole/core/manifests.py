from __future__ import annotations

import copy
import logging
from typing import Any

import yaml

from KubeConsole.core.exceptions import ManifestError

log = logging.getLogger(__name__)

# Server-managed metadata that only adds noise to a displayed manifest.
_NOISY_METADATA_KEYS = ("managedFields",)


def dump_manifest(obj: Any) -> str:
    """Renders a resource as YAML, keeping the API's key order."""
    if isinstance(obj, dict):
        obj = copy.deepcopy(obj)
        metadata = obj.get("metadata")
        if isinstance(metadata, dict):
            for key in _NOISY_METADATA_KEYS:
                metadata.pop(key, None)
    return str(yaml.safe_dump(obj, sort_keys=False, indent=2, allow_unicode=True))


def load_manifest(text: str) -> dict[str, Any]:
    """Parses a single YAML document into a request body."""
    try:
        document = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ManifestError(f"Invalid YAML: {e}") from e
    if not isinstance(document, dict):
        raise ManifestError("The manifest must be a YAML mapping.")
    return document


def deployment_template(namespace: str = "default", name: str = "my-deployment") -> str:
    return dump_manifest(
        {
            "apiVersion": "apps/v1",
            "kind": "Deployment",
            "metadata": {"name": name, "namespace": namespace},
            "spec": {
                "replicas": 1,
                "selector": {"matchLabels": {"app": name}},
                "template": {
                    "metadata": {"labels": {"app": name}},
                    "spec": {
                        "containers": [
                            {"name": name, "image": "nginx:stable"},
                        ]
                    },
                },
            },
        }
    )


def cluster_role_template(name: str = "my-cluster-role") -> str:
    return dump_manifest(
        {
            "apiVersion": "rbac.authorization.k8s.io/v1",
            "kind": "ClusterRole",
            "metadata": {"name": name},
            "rules": [
                {
                    "apiGroups": [""],
                    "resources": ["pods"],
                    "verbs": ["get", "list", "watch"],
                }
            ],
        }
    )
