from __future__ import annotations
import logging
import orjson
import re
from typing import (
    Any,
    Callable,
    ClassVar,
    Type,
)


from kubernetes_asyncio import client, config
from kubernetes_asyncio.config.config_exception import ConfigException
from kubernetes_asyncio.client.api_client import ApiClient

from KubeConsole.config import AppConfig
from KubeConsole.core.exceptions import ConfigurationError, K8sClientError
from KubeConsole.models.base import ALL_APIS, DisplayRow

log = logging.getLogger(__name__)


class KubernetesClient(ApiClient):
    _instance: ClassVar[KubernetesClient | None] = None

    @classmethod
    async def get_instance(cls, app_config: AppConfig | None = None) -> KubernetesClient:
        if cls._instance is None:
            app_config = app_config or AppConfig.get_instance()
            configuration = await cls._load_configuration(app_config)
            configuration.client_side_timeout = app_config.api_timeout
            configuration.json_dumps = orjson.dumps
            configuration.json_loads = orjson.loads
            cls._instance = KubernetesClient(configuration)
        return cls._instance

    @classmethod
    async def reset_instance(cls) -> None:
        """Closes and forgets the shared client."""
        if cls._instance is not None:
            await cls._instance.close()
            cls._instance = None

    @staticmethod
    async def _load_configuration(app_config: AppConfig) -> client.Configuration:
        configuration = client.Configuration()
        context_kwarg = (
            {"context": app_config.kube_context} if app_config.kube_context else {}
        )
        try:
            await config.load_kube_config(
                config_file=(
                    str(app_config.kube_config_path)
                    if app_config.kube_config_path
                    else None
                ),
                client_configuration=configuration,
                **context_kwarg,
            )
            log.info("Kubeconfig loaded. API host: %s", configuration.host)
        except ConfigException as e:
            if app_config.kube_config_path or app_config.kube_context:
                raise ConfigurationError(
                    f"Could not load Kubernetes configuration: {e}"
                ) from e
            log.info("No usable kubeconfig (%s), trying in-cluster configuration", e)
            try:
                config.load_incluster_config(client_configuration=configuration)
            except ConfigException as incluster_error:
                raise ConfigurationError(
                    f"Could not load Kubernetes configuration: {incluster_error}"
                ) from incluster_error
        return configuration

    def __init__(self, configuration: client.Configuration) -> None:
        super().__init__(configuration)
        self._api_cache: dict[str, Any] = {}

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        if name in self._api_cache:
            return self._api_cache[name]

        if name in ALL_APIS:
            api_info = ALL_APIS[name]
            api_class = getattr(client, api_info.client_name)
            api_instance = api_class(self)
            self._api_cache[name] = api_instance
            return api_instance

        raise AttributeError(
            f"'{self.__class__.__name__}' object has no attribute '{name}'"
        )

    @staticmethod
    def _to_snake_case(name: str) -> str:
        """Converts PascalCase to snake_case."""
        s1 = re.sub("(.)([A-Z][a-z]+)", r"\1_\2", name)
        return re.sub("([a-z0-9])([A-Z])", r"\1_\2", s1).lower()

    def get_api_method_for_resource(
        self,
        model_class: Type[DisplayRow],
        action: str,
        namespace: str | None = None,
    ) -> tuple[Callable, dict[str, Any]]:
        """
        Gets the API method and kwargs for an action on a resource model.

        A namespaced 'list' without a namespace resolves to the
        '..._for_all_namespaces' variant; cluster-scoped kinds ignore the
        namespace altogether.
        """
        api_client = getattr(self, model_class.api_info.client_name)
        kind_snake = self._to_snake_case(model_class.kind)

        method_name = f"{action}_"
        if model_class.namespaced:
            if action == "list" and not namespace:
                method_name += f"{kind_snake}_for_all_namespaces"
            else:
                method_name += f"namespaced_{kind_snake}"
        else:
            method_name += kind_snake

        api_method = getattr(api_client, method_name, None)
        if not callable(api_method):
            raise K8sClientError(
                f"API method '{method_name}' not found on {model_class.api_info.client_name}."
            )

        kwargs: dict[str, Any] = {}
        if model_class.namespaced and namespace:
            kwargs["namespace"] = namespace
        elif model_class.namespaced and action != "list":
            raise K8sClientError(
                f"A namespace is required to {action} a {model_class.kind}."
            )

        return api_method, kwargs
