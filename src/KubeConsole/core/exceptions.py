"""KubeConsole Core Custom Exceptions"""


class KubeConsoleError(Exception):
    """Base class for all KubeConsole application-specific exceptions."""


class ConfigurationError(KubeConsoleError):
    """Custom exception for configuration errors."""


class ManifestError(KubeConsoleError):
    """Raised when a manifest entered by the user cannot be used as a request body."""


class K8sClientError(KubeConsoleError):
    """Raised when a Kubernetes client API call cannot be resolved or issued."""
