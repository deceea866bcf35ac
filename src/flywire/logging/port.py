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
"""LoggingPort — the logging contract the CLI configures."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

from flywire.core.config import Config

_LEVEL_PREFIX = "flywire.logging.level"


@runtime_checkable
class LoggingPort(Protocol):
    """Port defining the logging contract for flywire."""

    def configure(self, config: Config) -> None: ...
    def get_logger(self, name: str) -> Any: ...
    def set_level(self, name: str, level: str) -> None: ...


@dataclass(frozen=True)
class LoggingSettings:
    """The ``flywire.logging`` section as the adapters consume it.

    ``level.root`` sets the root logger; every other key under ``level`` names
    a logger (``flywire.analysis: DEBUG``).
    """

    format: str = "console"
    root_level: str = "WARNING"
    module_levels: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_config(cls, config: Config) -> LoggingSettings:
        modules = {
            name: str(level).upper()
            for name, level in config.get_section(_LEVEL_PREFIX).items()
            if name != "root"
        }
        return cls(
            format=str(config.get("flywire.logging.format", "console")).lower(),
            root_level=str(config.get(f"{_LEVEL_PREFIX}.root", "WARNING")).upper(),
            module_levels=modules,
        )

    @property
    def is_json(self) -> bool:
        return self.format == "json"


def level_number(level: str, default: int = logging.INFO) -> int:
    """``"debug"`` -> ``logging.DEBUG``; unknown names map to *default*."""
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else default
