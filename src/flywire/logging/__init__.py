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
"""Flywire logging — port and adapters used by the command line."""

from __future__ import annotations

from flywire.core.config import Config
from flywire.logging.port import LoggingPort, LoggingSettings
from flywire.logging.stdlib_adapter import StdlibLoggingAdapter
from flywire.logging.structlog_adapter import StructlogAdapter


def create_logging_adapter(config: Config) -> LoggingPort:
    """Return the adapter named by ``flywire.logging.adapter`` (``structlog`` or ``stdlib``)."""
    adapter = str(config.get("flywire.logging.adapter", "structlog")).lower()
    if adapter == "stdlib":
        return StdlibLoggingAdapter()
    return StructlogAdapter()


__all__ = [
    "LoggingPort",
    "LoggingSettings",
    "StdlibLoggingAdapter",
    "StructlogAdapter",
    "create_logging_adapter",
]
