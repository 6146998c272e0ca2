"""KubeConsole: a terminal console for managing Kubernetes resources."""

__version__ = "0.1.0"
