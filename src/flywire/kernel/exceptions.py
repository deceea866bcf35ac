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
"""Flywire exception hierarchy.

Defects in analysed user code are never raised: they are reported as
diagnostics and the generation pass carries on. The exceptions below cover
the environment around a pass (configuration, source roots, artifact output).
"""

from __future__ import annotations

from pathlib import Path


# =============================================================================
# Base Exception
# =============================================================================


class FlywireException(Exception):
    """Base exception for all flywire errors.

    Carries an optional error code and context dict for structured error data.

    Args:
        message: Human-readable error description.
        code: Machine-readable error code (e.g. "CONFIG_001").
        context: Arbitrary key-value pairs for error context and debugging.
    """

    def __init__(
        self,
        message: str,
        code: str | None = None,
        context: dict | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.context: dict = context if context is not None else {}


# =============================================================================
# Environment Exceptions
# =============================================================================


class ConfigurationException(FlywireException):
    """Configuration could not be loaded or bound."""


class SourceRootNotFoundException(FlywireException):
    """A configured source root does not exist or is not a directory."""

    def __init__(self, root: Path) -> None:
        self.root = root
        super().__init__(
            message=f"Source root '{root}' does not exist or is not a directory",
            code="SOURCE_ROOT_NOT_FOUND",
            context={"root": str(root)},
        )


class ArtifactWriteException(FlywireException):
    """A generated artifact could not be written to disk."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(
            message=f"Failed to write generated module '{path}': {reason}",
            code="ARTIFACT_WRITE",
            context={"path": str(path), "reason": reason},
        )
