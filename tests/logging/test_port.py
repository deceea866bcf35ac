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
"""Tests for the LoggingPort protocol and adapter selection."""

import logging

from flywire.core.config import Config
from flywire.logging import StdlibLoggingAdapter, StructlogAdapter, create_logging_adapter
from flywire.logging.port import LoggingPort, LoggingSettings, level_number


class TestLoggingPort:
    def test_adapters_conform(self):
        assert isinstance(StructlogAdapter(), LoggingPort)
        assert isinstance(StdlibLoggingAdapter(), LoggingPort)

    def test_object_without_methods_does_not_conform(self):
        assert not isinstance(object(), LoggingPort)


class TestCreateLoggingAdapter:
    def test_structlog_is_default(self):
        assert isinstance(create_logging_adapter(Config({})), StructlogAdapter)

    def test_stdlib_selected_by_config(self):
        config = Config({"flywire": {"logging": {"adapter": "stdlib"}}})
        assert isinstance(create_logging_adapter(config), StdlibLoggingAdapter)


class TestLoggingSettings:
    def test_defaults_when_section_missing(self):
        settings = LoggingSettings.from_config(Config({}))
        assert settings.root_level == "WARNING"
        assert settings.format == "console"
        assert settings.module_levels == {}

    def test_root_is_split_from_module_levels(self):
        config = Config({"flywire": {"logging": {"format": "JSON", "level": {"root": "info", "flywire.codegen": "debug"}}}})
        settings = LoggingSettings.from_config(config)
        assert settings.root_level == "INFO"
        assert settings.module_levels == {"flywire.codegen": "DEBUG"}
        assert settings.is_json

    def test_root_level_env_override(self, monkeypatch):
        monkeypatch.setenv("FLYWIRE_LOGGING_LEVEL_ROOT", "error")
        assert LoggingSettings.from_config(Config({})).root_level == "ERROR"


class TestLevelNumber:
    def test_known_names(self):
        assert level_number("debug") == logging.DEBUG
        assert level_number("WARNING") == logging.WARNING

    def test_unknown_name_uses_default(self):
        assert level_number("verbose") == logging.INFO
        assert level_number("verbose", logging.WARNING) == logging.WARNING
