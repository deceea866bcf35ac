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
"""Tests for the flywire exception hierarchy."""

from pathlib import Path

from flywire.kernel.exceptions import (
    ArtifactWriteException,
    ConfigurationException,
    FlywireException,
    SourceRootNotFoundException,
)


class TestFlywireException:
    def test_basic_creation(self):
        exc = FlywireException("something went wrong")
        assert str(exc) == "something went wrong"
        assert exc.code is None
        assert exc.context == {}

    def test_with_code_and_context(self):
        exc = FlywireException("bad config", code="CONFIG_001", context={"key": "flywire.generator"})
        assert exc.code == "CONFIG_001"
        assert exc.context["key"] == "flywire.generator"

    def test_context_defaults_are_not_shared(self):
        first = FlywireException("a")
        second = FlywireException("b")
        first.context["x"] = 1
        assert second.context == {}


class TestEnvironmentExceptions:
    def test_configuration_exception_is_flywire_exception(self):
        assert issubclass(ConfigurationException, FlywireException)

    def test_source_root_not_found(self):
        exc = SourceRootNotFoundException(Path("src"))
        assert exc.code == "SOURCE_ROOT_NOT_FOUND"
        assert exc.root == Path("src")
        assert exc.context == {"root": "src"}
        assert "src" in str(exc)

    def test_artifact_write(self):
        exc = ArtifactWriteException(Path("pkg/app_context_g.py"), "read-only file system")
        assert isinstance(exc, FlywireException)
        assert exc.code == "ARTIFACT_WRITE"
        assert str(exc) == "Failed to write generated module 'pkg/app_context_g.py': read-only file system"
