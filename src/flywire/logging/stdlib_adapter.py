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
"""StdlibLoggingAdapter — LoggingPort using only stdlib logging."""

from __future__ import annotations

import logging
import sys
from typing import Any

from flywire.core.config import Config
from flywire.logging.port import LoggingSettings, level_number

_CONSOLE_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_JSON_FORMAT = '{"timestamp":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}'


class _StructuredLogger:
    """Accepts structlog-style calls (``logger.info(event, **kwargs)``)."""

    __slots__ = ("_logger",)

    def __init__(self, logger: logging.Logger) -> None:
        self._logger = logger

    def _log(self, level: int, event: str, kwargs: dict[str, Any]) -> None:
        if not self._logger.isEnabledFor(level):
            return
        if kwargs:
            event = f"{event} | " + " ".join(f"{k}={v}" for k, v in kwargs.items())
        self._logger.log(level, event)

    def debug(self, event: str, **kwargs: Any) -> None:
        self._log(logging.DEBUG, event, kwargs)

    def info(self, event: str, **kwargs: Any) -> None:
        self._log(logging.INFO, event, kwargs)

    def warning(self, event: str, **kwargs: Any) -> None:
        self._log(logging.WARNING, event, kwargs)

    def error(self, event: str, **kwargs: Any) -> None:
        self._log(logging.ERROR, event, kwargs)


class StdlibLoggingAdapter:
    """LoggingPort using only stdlib logging.

    Selected with ``flywire.logging.adapter: stdlib``. Lines go to stderr as
    ``event | key=value``.
    """

    def __init__(self) -> None:
        self.settings = LoggingSettings()

    def configure(self, config: Config) -> None:
        self.settings = LoggingSettings.from_config(config)
        logging.basicConfig(
            format=_JSON_FORMAT if self.settings.is_json else _CONSOLE_FORMAT,
            stream=sys.stderr,
            level=level_number(self.settings.root_level, logging.WARNING),
            force=True,
        )
        for name, level in self.settings.module_levels.items():
            self.set_level(name, level)

    def get_logger(self, name: str) -> Any:
        return _StructuredLogger(logging.getLogger(name))

    def set_level(self, name: str, level: str) -> None:
        logging.getLogger(name).setLevel(level_number(level))
