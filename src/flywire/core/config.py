# Copyright 2026 Firefly Software Solutions Inc.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Layered configuration: packaged defaults, project files, environment."""

from __future__ import annotations

import dataclasses
import importlib.resources
import os
import re
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, get_origin, get_type_hints

import yaml  # type: ignore[import-untyped]

from flywire.kernel.exceptions import ConfigurationException

T = TypeVar("T")

CONFIG_FILE_STEM = "flywire"
DEFAULTS_RESOURCE = "flywire-defaults.yaml"
ENV_PREFIX = "FLYWIRE_"

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")
_CONFIG_PROPERTIES_ATTR = "__flywire_config_prefix__"
_MAX_PLACEHOLDER_DEPTH = 10
_TRUE_STRINGS = frozenset({"true", "1", "yes", "on"})


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a dataclass as bindable to a configuration prefix.

    Usage:
        @config_properties(prefix="flywire.generator")
        @dataclass
        class GeneratorSettings:
            output_suffix: str = "_g"
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _CONFIG_PROPERTIES_ATTR, prefix)
        return cls

    return decorator


def env_key(key: str) -> str:
    """``flywire.generator.output_suffix`` -> ``FLYWIRE_GENERATOR_OUTPUT_SUFFIX``."""
    return ENV_PREFIX + key.removeprefix("flywire.").upper().replace(".", "_").replace("-", "_")


class Config:
    """Nested configuration read with dotted keys.

    A value is taken from the first of:

    1. the ``FLYWIRE_*`` environment variable named by :func:`env_key`;
    2. the merged file data (explicit file, then ``flywire.yaml`` /
       ``flywire.toml``, then packaged defaults);
    3. the caller's default.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._loaded_sources: list[str] = []

    @property
    def loaded_sources(self) -> list[str]:
        """Sources merged into this config, lowest priority first."""
        return list(self._loaded_sources)

    @classmethod
    def from_sources(
        cls,
        base_dir: str | Path,
        config_file: str | Path | None = None,
        load_defaults: bool = True,
    ) -> Config:
        """Merge packaged defaults, the project file in *base_dir*, and *config_file*.

        Raises:
            ConfigurationException: *config_file* does not exist, or a file
                cannot be parsed.
        """
        layers: list[tuple[str, dict[str, Any]]] = []
        if load_defaults:
            layers.append((f"{DEFAULTS_RESOURCE} (defaults)", cls._load_defaults()))

        for suffix in (".yaml", ".toml"):
            candidate = Path(base_dir) / f"{CONFIG_FILE_STEM}{suffix}"
            if candidate.is_file():
                layers.append((str(candidate), cls._load_file(candidate)))

        if config_file is not None:
            path = Path(config_file)
            if not path.is_file():
                raise ConfigurationException(
                    f"Configuration file '{path}' does not exist",
                    code="CONFIG_NOT_FOUND",
                    context={"path": str(path)},
                )
            layers.append((str(path), cls._load_file(path)))

        data: dict[str, Any] = {}
        for _, layer in layers:
            data = _deep_merge(data, layer)
        instance = cls(data)
        instance._loaded_sources = [source for source, _ in layers]
        return instance

    @staticmethod
    def _load_file(path: Path) -> dict[str, Any]:
        try:
            if path.suffix == ".toml":
                with open(path, "rb") as f:
                    return tomllib.load(f)
            with open(path, encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
        except (OSError, tomllib.TOMLDecodeError, yaml.YAMLError) as exc:
            raise ConfigurationException(
                f"Failed to load configuration file '{path}': {exc}",
                code="CONFIG_PARSE",
                context={"path": str(path)},
            ) from exc

    @staticmethod
    def _load_defaults() -> dict[str, Any]:
        resource = importlib.resources.files("flywire.resources").joinpath(DEFAULTS_RESOURCE)
        return yaml.safe_load(resource.read_text(encoding="utf-8")) or {}

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dotted key, checking the environment first.

        String values may contain ``${NAME}`` or ``${NAME:fallback}``
        placeholders, where ``NAME`` is an environment variable or another
        dotted key.
        """
        env_value = os.environ.get(env_key(key))
        if env_value is not None:
            return env_value
        value = self._lookup(key)
        if value is None:
            return default
        if isinstance(value, str) and "${" in value:
            return self._resolve_placeholders(value)
        return value

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Return the mapping stored under *prefix*, or ``{}``."""
        section = self._lookup(prefix)
        return section if isinstance(section, dict) else {}

    def _lookup(self, key: str) -> Any:
        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict):
                return None
            current = current.get(part)
            if current is None:
                return None
        return current

    def _resolve_placeholders(self, value: str, depth: int = 0) -> str:
        if depth > _MAX_PLACEHOLDER_DEPTH:
            raise ConfigurationException(
                f"Placeholders in '{value}' nest too deeply; check for circular references",
                code="CONFIG_PLACEHOLDER",
            )

        def replace(match: re.Match[str]) -> str:
            name, has_fallback, fallback = match.group(1).partition(":")
            resolved = os.environ.get(name)
            if resolved is None:
                found = self._lookup(name)
                resolved = None if found is None else str(found)
            if resolved is None:
                if has_fallback:
                    return fallback
                raise ConfigurationException(
                    f"Cannot resolve placeholder '${{{match.group(1)}}}': not found in environment or config",
                    code="CONFIG_PLACEHOLDER",
                    context={"placeholder": match.group(1)},
                )
            if "${" in resolved:
                resolved = self._resolve_placeholders(resolved, depth + 1)
            return resolved

        return _PLACEHOLDER_RE.sub(replace, value)

    def bind(self, config_cls: type[T]) -> T:
        """Build a ``@config_properties`` dataclass from its prefix.

        Fields are read through :meth:`get`, so environment overrides apply.
        Strings are converted for ``int``, ``float`` and ``bool`` fields, and
        split on commas for ``list`` fields. Missing keys keep the dataclass
        default.

        Raises:
            ConfigurationException: *config_cls* is not decorated, or a value
                cannot be converted.
        """
        prefix = getattr(config_cls, _CONFIG_PROPERTIES_ATTR, None)
        if prefix is None:
            raise ConfigurationException(
                f"{config_cls.__name__} is not decorated with @config_properties",
                code="CONFIG_BIND",
            )

        hints = get_type_hints(config_cls)
        kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(config_cls):  # type: ignore[arg-type]
            key = f"{prefix}.{field.name}"
            value = self.get(key)
            if value is None:
                continue
            try:
                kwargs[field.name] = _convert(value, hints.get(field.name))
            except ValueError as exc:
                raise ConfigurationException(
                    f"Invalid value for '{key}': {value!r}",
                    code="CONFIG_BIND",
                    context={"key": key},
                ) from exc
        return config_cls(**kwargs)


def _convert(value: Any, expected: Any) -> Any:
    if get_origin(expected) is list:
        if isinstance(value, str):
            return [item.strip() for item in value.split(",") if item.strip()]
        return value if isinstance(value, list) else [value]
    if not isinstance(value, str):
        return value
    if expected is bool:
        return value.strip().lower() in _TRUE_STRINGS
    if expected is int:
        return int(value)
    if expected is float:
        return float(value)
    return value


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        if isinstance(merged.get(key), dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged
