from pathlib import Path

import pytest

from KubeConsole.config import DEFAULT_API_TIMEOUT, AppConfig


@pytest.fixture(autouse=True)
def reset_config_singleton():
    yield
    AppConfig.set_instance(None)


def test_defaults_from_empty_environment():
    config = AppConfig.from_env({})
    assert config == AppConfig()
    assert config.namespace == ""
    assert config.api_timeout == DEFAULT_API_TIMEOUT


def test_reads_environment():
    config = AppConfig.from_env(
        {
            "KUBECONFIG": "/tmp/kube/config",
            "KUBE_CONTEXT": "staging",
            "KUBECONSOLE_NAMESPACE": " prod ",
            "LOG_LEVEL": "debug",
            "KUBECONSOLE_LOG_FILE": "/tmp/kubeconsole.log",
            "KUBECONSOLE_API_TIMEOUT": "2.5",
        }
    )
    assert config.kube_config_path == Path("/tmp/kube/config")
    assert config.kube_context == "staging"
    assert config.namespace == "prod"
    assert config.log_level == "DEBUG"
    assert config.log_file == Path("/tmp/kubeconsole.log")
    assert config.api_timeout == 2.5


@pytest.mark.parametrize("raw", ["soon", "0", "-3"])
def test_invalid_timeout_falls_back_to_default(raw, caplog):
    config = AppConfig.from_env({"KUBECONSOLE_API_TIMEOUT": raw})
    assert config.api_timeout == DEFAULT_API_TIMEOUT
    assert "KUBECONSOLE_API_TIMEOUT" in caplog.text


def test_with_overrides_skips_none():
    config = AppConfig(kube_context="staging").with_overrides(
        kube_context=None, namespace="prod", log_level="warning"
    )
    assert config.kube_context == "staging"
    assert config.namespace == "prod"
    assert config.log_level == "WARNING"


def test_singleton(monkeypatch):
    monkeypatch.setenv("KUBECONSOLE_NAMESPACE", "team-a")
    AppConfig.set_instance(None)
    assert AppConfig.get_instance() is AppConfig.get_instance()
    assert AppConfig.get_instance().namespace == "team-a"
