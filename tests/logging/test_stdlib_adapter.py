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
"""Tests for StdlibLoggingAdapter."""

import logging

from flywire.core.config import Config
from flywire.logging.stdlib_adapter import StdlibLoggingAdapter


class TestStdlibLoggingAdapter:
    def test_configure_reads_levels(self):
        adapter = StdlibLoggingAdapter()
        adapter.configure(Config({"flywire": {"logging": {"level": {"root": "ERROR", "flywire.codegen": "INFO"}}}}))
        assert adapter.settings.root_level == "ERROR"
        assert logging.getLogger("flywire.codegen").level == logging.INFO

    def test_structured_call_format(self, capsys):
        adapter = StdlibLoggingAdapter()
        adapter.configure(Config({"flywire": {"logging": {"level": {"root": "INFO"}}}}))
        adapter.get_logger("flywire.cli").info("generated", modules=2)
        assert "generated | modules=2" in capsys.readouterr().err
