import pytest
import yaml

from KubeConsole.core.exceptions import ManifestError
from KubeConsole.core.manifests import (
    cluster_role_template,
    deployment_template,
    dump_manifest,
    load_manifest,
)


def test_dump_strips_managed_fields_without_touching_input():
    resource = {
        "kind": "ClusterRole",
        "metadata": {"name": "admin", "managedFields": [{"manager": "kubectl"}]},
        "rules": [],
    }

    text = dump_manifest(resource)

    assert "managedFields" not in text
    assert "managedFields" in resource["metadata"]
    # Keys keep the API's order.
    assert text.index("kind") < text.index("metadata") < text.index("rules")


def test_load_manifest():
    assert load_manifest("kind: Deployment\nmetadata:\n  name: web\n") == {
        "kind": "Deployment",
        "metadata": {"name": "web"},
    }


@pytest.mark.parametrize("text", ["kind: [unclosed", "- a\n- b\n", "just text", ""])
def test_load_manifest_rejects_unusable_documents(text):
    with pytest.raises(ManifestError):
        load_manifest(text)


def test_templates_are_loadable():
    deployment = load_manifest(deployment_template("prod", "web"))
    assert deployment["metadata"] == {"name": "web", "namespace": "prod"}
    assert deployment["spec"]["selector"]["matchLabels"] == {"app": "web"}

    cluster_role = yaml.safe_load(cluster_role_template("reader"))
    assert cluster_role["kind"] == "ClusterRole"
    assert "namespace" not in cluster_role["metadata"]
