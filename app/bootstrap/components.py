import logging
import os
from pathlib import Path
from threading import Lock
from typing import Any, TypeVar, cast

import httpx

from app.components.configuration.configuration import Configuration
from app.components.logger.logger import DEFAULT_LOG_FORMAT, Logger


T = TypeVar("T")

DEFAULT_TIMEOUT_SECONDS = 300.0


def _configure_tracing() -> None:
    """
    Turn Langfuse tracing and its console warnings off unless credentials
    are available.

    The `@observe()` decorators on the services stay in place either way; with
    tracing disabled they only call through. An explicit
    LANGFUSE_TRACING_ENABLED setting is never overridden.
    """
    public_key: str = os.getenv("LANGFUSE_PUBLIC_KEY", "").strip()
    secret_key: str = os.getenv("LANGFUSE_SECRET_KEY", "").strip()

    if public_key and secret_key:
        return

    os.environ.setdefault("LANGFUSE_TRACING_ENABLED", "false")

    # The client still warns about missing keys when tracing is off.
    langfuse_logger = logging.getLogger("langfuse")
    langfuse_logger.setLevel(logging.CRITICAL)
    langfuse_logger.propagate = False


class ComponentsMeta(type):
    _instances: dict[tuple[type, str], "Components"] = {}
    _lock: Lock = Lock()

    def __call__(cls, *args, **kwargs):
        env = args[0] if args else kwargs.get("env")
        if env is None:
            raise ValueError("Environment must be provided")

        env_key = str(env)
        key = (cls, env_key)
        with cls._lock:
            if key not in cls._instances:
                instance = super().__call__(*args, **kwargs)
                cls._instances[key] = instance
        return cls._instances[key]

    def reset(cls) -> None:
        with cls._lock:
            cls._instances.clear()


class Components(metaclass=ComponentsMeta):
    def __init__(self, env: str, config_path: str = ".env") -> None:
        self.__env: str = env
        root_dir: str = str(Path(__file__).resolve().parents[2])
        self.__config_path: str = os.path.join(root_dir, config_path)
        self.__components: dict[type[Any], Any] = self.__bootstrap_components()

    def __bootstrap_components(self) -> dict[type[Any], Any]:
        if self.__env in {"development", "staging", "production"}:
            return self.__get_components()

        raise ValueError(f"Invalid environment: {self.__env}")

    def __get_components(self) -> dict[type[Any], Any]:
        configuration: Configuration = Configuration(self.__env, self.__config_path)
        _configure_tracing()

        logger: Logger = Logger(
            log_format=configuration.get_configuration(
                "LOG_FORMAT", str, default=DEFAULT_LOG_FORMAT
            ),
            log_level=configuration.get_configuration(
                "LOG_LEVEL", str, default="WARNING"
            ),
        )

        # A timeout of 0 disables the client timeout entirely.
        timeout: float | None = configuration.get_configuration(
            "LLM_TIMEOUT", float, default=DEFAULT_TIMEOUT_SECONDS
        )
        if not timeout:
            timeout = None

        http_client: httpx.Client = httpx.Client(timeout=timeout)

        logger.get_logger("Components").debug(
            "Components ready for %s (config=%s, timeout=%s)",
            self.__env,
            self.__config_path,
            timeout,
        )

        components: dict[type[Any], Any] = {
            Configuration: configuration,
            Logger: logger,
            httpx.Client: http_client,
        }

        return components

    def get_component(self, component_name: type[T]) -> T:
        if component_name not in self.__components:
            raise ValueError(f"Component {component_name} not found")

        return cast(T, self.__components[component_name])

    def get_config_path(self) -> str:
        return self.__config_path

    def close(self) -> None:
        """Close the shared HTTP client and forget this environment's instance."""
        self.get_component(httpx.Client).close()
        with ComponentsMeta._lock:
            ComponentsMeta._instances.pop((type(self), self.__env), None)
