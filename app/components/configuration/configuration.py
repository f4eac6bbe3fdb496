import os
from typing import Any, TypeVar, overload

from dotenv import find_dotenv, load_dotenv


T = TypeVar("T")

_MISSING: Any = object()
_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class Configuration:
    """
    Typed access to settings stored in environment variables.

    Values from a `.env` file are loaded once at construction; variables
    already present in the process environment take precedence.
    """

    def __init__(self, env: str, dotenv_path: str | None = None) -> None:
        self.env = env
        if dotenv_path and os.path.isfile(dotenv_path):
            load_dotenv(dotenv_path)
        else:
            load_dotenv(find_dotenv(usecwd=True))

    @overload
    def get_configuration(self, key: str, value_type: type[T]) -> T: ...

    @overload
    def get_configuration(
        self, key: str, value_type: type[T], default: T | None
    ) -> T | None: ...

    def get_configuration(
        self, key: str, value_type: type[Any], default: Any = _MISSING
    ) -> Any:
        raw = os.getenv(key)
        if raw is None or raw.strip() == "":
            if default is _MISSING:
                raise KeyError(f"Configuration key {key} is not set")
            return default

        raw = raw.strip()
        if value_type is bool:
            lowered = raw.lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
            raise ValueError(f"Configuration key {key} is not a boolean: {raw!r}")

        try:
            return value_type(raw)
        except (TypeError, ValueError) as e:
            raise ValueError(
                f"Configuration key {key} cannot be read as {value_type.__name__}: {raw!r}"
            ) from e
