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
"""StructlogAdapter — default LoggingPort implementation using structlog."""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

from flywire.core.config import Config
from flywire.logging.port import LoggingSettings, level_number


class StructlogAdapter:
    """Default logging adapter backed by structlog.

    Records emitted through ``logging.getLogger(__name__)`` in the library
    modules are rendered by the same processor chain as structlog loggers.
    """

    def __init__(self) -> None:
        self.settings = LoggingSettings()

    def configure(self, config: Config) -> None:
        """Configure structlog from the ``flywire.logging`` section."""
        self.settings = LoggingSettings.from_config(config)
        self._install()
        for name, level in self.settings.module_levels.items():
            self.set_level(name, level)

    def get_logger(self, name: str) -> Any:
        return structlog.get_logger(name)

    def set_level(self, name: str, level: str) -> None:
        logging.getLogger(name).setLevel(level_number(level))

    def _install(self) -> None:
        # Shared by structlog loggers and foreign stdlib records.
        pre_chain: list[structlog.types.Processor] = [
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
        ]
        renderer: structlog.types.Processor = (
            structlog.processors.JSONRenderer() if self.settings.is_json else structlog.dev.ConsoleRenderer()
        )

        structlog.configure(
            processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
            logger_factory=structlog.stdlib.LoggerFactory(),
            wrapper_class=structlog.stdlib.BoundLogger,
            cache_logger_on_first_use=True,
        )

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            structlog.stdlib.ProcessorFormatter(
                foreign_pre_chain=pre_chain,
                processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
            )
        )
        logging.basicConfig(
            handlers=[handler],
            level=level_number(self.settings.root_level, logging.WARNING),
            force=True,
        )
