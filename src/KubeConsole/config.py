from __future__ import annotations

import dataclasses
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, ClassVar, Mapping, Optional


log = logging.getLogger(__name__)

DEFAULT_API_TIMEOUT = 10.0


def _parse_timeout(raw: Optional[str]) -> float:
    if not raw:
        return DEFAULT_API_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        log.warning(
            "Invalid KUBECONSOLE_API_TIMEOUT %r, using %s seconds",
            raw,
            DEFAULT_API_TIMEOUT,
        )
        return DEFAULT_API_TIMEOUT
    if timeout <= 0:
        log.warning(
            "Non-positive KUBECONSOLE_API_TIMEOUT %r, using %s seconds",
            raw,
            DEFAULT_API_TIMEOUT,
        )
        return DEFAULT_API_TIMEOUT
    return timeout


@dataclass(frozen=True)
class AppConfig:
    """Manages application-wide configuration settings."""

    _instance: ClassVar[AppConfig | None] = None

    kube_config_path: Optional[Path] = None
    kube_context: Optional[str] = None
    # The namespace the session is restricted to; empty means unrestricted.
    namespace: str = ""
    log_level: str = "INFO"
    log_file: Optional[Path] = None
    api_timeout: float = DEFAULT_API_TIMEOUT

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AppConfig:
        env = os.environ if environ is None else environ
        kubeconfig = env.get("KUBECONFIG")
        log_file = env.get("KUBECONSOLE_LOG_FILE")
        return cls(
            kube_config_path=Path(kubeconfig).expanduser() if kubeconfig else None,
            kube_context=env.get("KUBE_CONTEXT") or None,
            namespace=env.get("KUBECONSOLE_NAMESPACE", "").strip(),
            log_level=env.get("LOG_LEVEL", "INFO").upper(),
            log_file=Path(log_file).expanduser() if log_file else None,
            api_timeout=_parse_timeout(env.get("KUBECONSOLE_API_TIMEOUT")),
        )

    @classmethod
    def get_instance(cls) -> AppConfig:
        """Returns the singleton instance of the AppConfig."""
        if cls._instance is None:
            cls._instance = cls.from_env()
            log.info("AppConfig singleton initialized.")
        return cls._instance

    @classmethod
    def set_instance(cls, instance: AppConfig | None) -> None:
        cls._instance = instance

    def with_overrides(self, **overrides: Any) -> AppConfig:
        """Returns a copy with every override that is not None applied."""
        changes = {key: value for key, value in overrides.items() if value is not None}
        if "kube_config_path" in changes:
            changes["kube_config_path"] = Path(changes["kube_config_path"]).expanduser()
        if "log_level" in changes:
            changes["log_level"] = str(changes["log_level"]).upper()
        return dataclasses.replace(self, **changes)
