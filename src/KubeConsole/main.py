from __future__ import annotations
import asyncio
import os
import sys
from pathlib import Path
from typing import Optional

import click
import yaml

from KubeConsole.config import AppConfig
from KubeConsole.app import main as run_app


LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def validate_kubeconfig(ctx, param, value):
    if value:
        path = Path(value).expanduser()
        if not path.is_file():
            raise click.BadParameter(f"Kubeconfig path is not a file: {path}")
    return value


def validate_context(ctx, param, value):
    if not value:
        return value
    kubeconfig_path = ctx.params.get("kubeconfig") or os.environ.get("KUBECONFIG")
    if not kubeconfig_path:
        kubeconfig_path = Path.home() / ".kube" / "config"
    config_path = Path(kubeconfig_path).expanduser()
    if not config_path.exists():
        raise click.BadParameter(f"Kubeconfig file not found: {config_path}")
    try:
        config_data = yaml.safe_load(config_path.read_text()) or {}
    except (OSError, yaml.YAMLError) as e:
        raise click.BadParameter(f"Failed to read kubeconfig: {e}")
    contexts = [c["name"] for c in config_data.get("contexts") or [] if "name" in c]
    if value not in contexts:
        raise click.BadParameter(
            f"Context '{value}' not found. Available: {', '.join(contexts)}"
        )
    return value


@click.command(context_settings=dict(help_option_names=["-h", "--help"]))
@click.option(
    "--kubeconfig",
    envvar="KUBECONFIG",
    callback=validate_kubeconfig,
    help="Path to the kubeconfig file.",
)
@click.option(
    "--context",
    envvar="KUBE_CONTEXT",
    callback=validate_context,
    help="The name of the kubeconfig context to use.",
)
@click.option(
    "--namespace",
    "-n",
    envvar="KUBECONSOLE_NAMESPACE",
    help="Restrict the session to one namespace.",
)
@click.option(
    "--log-level",
    envvar="LOG_LEVEL",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Log level for the log file.",
)
@click.option(
    "--log-file",
    envvar="KUBECONSOLE_LOG_FILE",
    type=click.Path(dir_okay=False),
    help="Write logs to this file.",
)
def main(
    kubeconfig: Optional[str],
    context: Optional[str],
    namespace: Optional[str],
    log_level: Optional[str],
    log_file: Optional[str],
) -> None:
    """A terminal console for managing Kubernetes resources."""
    app_config = AppConfig.from_env().with_overrides(
        kube_config_path=kubeconfig,
        kube_context=context,
        namespace=namespace.strip() if namespace is not None else None,
        log_level=log_level,
        log_file=Path(log_file).expanduser() if log_file else None,
    )
    AppConfig.set_instance(app_config)
    asyncio.run(run_app(app_config))


if __name__ == "__main__":
    sys.exit(main())
