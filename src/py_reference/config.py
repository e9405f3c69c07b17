"""Configuration: defaults, YAML file loading and command line overrides."""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any, Mapping

import yaml

from py_reference.definitions import PublicApiDefinition, get_api_definition
from py_reference.exceptions import InvalidConfigurationError

DEFAULT_CONFIG: dict[str, Any] = {
    "namespace": None,
    "api": "HasTagApi",
    "index_file_name": "readme",
    "summary_page_path": "/readme.md",
    "source_url_base": None,
    "output": "docs",
}


def deep_merge(base: dict[str, Any], update: Mapping[str, Any]) -> dict[str, Any]:
    """Merge ``update`` into a copy of ``base``; nested mappings merge recursively."""
    result = copy.deepcopy(base)
    for key, value in update.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, Mapping):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


class Config:
    """Settings of one documentation run."""

    def __init__(self, values: Mapping[str, Any] | None = None):
        self._values = deep_merge(DEFAULT_CONFIG, values or {})

    def get(self, key: str, default: Any = None) -> Any:
        value = self._values.get(key)
        return default if value is None else value

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value

    def has(self, key: str) -> bool:
        return self._values.get(key) is not None

    def all(self) -> dict[str, Any]:
        return copy.deepcopy(self._values)

    def merge_with_cli_args(self, args: Mapping[str, Any]) -> Config:
        """Apply command line values on top; unset (None) arguments are ignored."""
        for key, value in args.items():
            if value is not None:
                self._values[key.replace("-", "_")] = value
        return self

    def get_api_definition(self) -> PublicApiDefinition:
        """Policy named by the ``api`` setting.

        Raises:
            InvalidConfigurationError: If the policy name is unknown.
        """
        return get_api_definition(str(self.get("api", "HasTagApi")))

    @property
    def namespace(self) -> str:
        namespace = self.get("namespace")
        if not namespace:
            raise InvalidConfigurationError("No namespace configured")
        return str(namespace)

    @property
    def source_url_base(self) -> str | None:
        base = self.get("source_url_base")
        return str(base).rstrip("/") if base else None

    @property
    def index_file_name(self) -> str:
        return str(self.get("index_file_name", "readme"))

    @property
    def summary_page_path(self) -> str:
        return str(self.get("summary_page_path", "/readme.md"))


def load_config(path: str | Path | None = None) -> Config:
    """Load a YAML configuration file merged over the defaults.

    A missing file gives the defaults.

    Raises:
        InvalidConfigurationError: If the file is not a YAML mapping.
    """
    values: dict[str, Any] = {}
    if path:
        config_path = Path(path)
        if config_path.exists():
            try:
                loaded = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
            except yaml.YAMLError as e:
                raise InvalidConfigurationError(f"Invalid YAML in {config_path}: {e}") from e
            if not isinstance(loaded, dict):
                raise InvalidConfigurationError(
                    f"{config_path} must contain a mapping, got {type(loaded).__name__}"
                )
            values = {str(k).replace("-", "_"): v for k, v in loaded.items()}
    return Config(values)
