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
"""Diagnostic catalog and accumulator.

Diagnostics are data: every analysis step appends to a :class:`DiagnosticBag`
and returns its partial result, so one malformed field never prevents
generation for the rest of the program.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import StrEnum

from flywire.analysis.symbols import SourceLocation


class Severity(StrEnum):
    """Diagnostic severity."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True)
class DiagnosticDescriptor:
    """Stable description of one diagnostic condition.

    Attributes:
        code: Stable identifier (``FW0001``...).
        title: Short human-readable summary.
        message_format: ``str.format`` template filled with the diagnostic's
            arguments.
        severity: Default severity.
        category: Grouping used by reporters.
    """

    code: str
    title: str
    message_format: str
    severity: Severity
    category: str = "Usage"


INIT_ONLY_FIELD = DiagnosticDescriptor(
    code="FW0001",
    title="Field is init-only",
    message_format="Field '{0}' in type '{1}' is init-only and cannot be injected",
    severity=Severity.WARNING,
)

UNSUPPORTED_GENERIC_CONTEXT = DiagnosticDescriptor(
    code="FW0002",
    title="Unsupported generic context class",
    message_format="Generic context class '{0}' is not supported; skipping",
    severity=Severity.WARNING,
)

MULTIPLE_CONTEXTS = DiagnosticDescriptor(
    code="FW0003",
    title="Multiple contexts found",
    message_format="Multiple injection contexts found; context '{0}' also receives every injector, ensure they don't conflict",
    severity=Severity.INFO,
)

NO_ELIGIBLE_TYPES = DiagnosticDescriptor(
    code="FW0004",
    title="No eligible types found",
    message_format="No eligible types found for context '{0}'",
    severity=Severity.INFO,
)

INACCESSIBLE_FIELD = DiagnosticDescriptor(
    code="FW0005",
    title="Inaccessible field",
    message_format=(
        "Field '{0}' in type '{1}' has an inaccessible setter "
        "(must be public or single-underscore, and properties need a setter)"
    ),
    severity=Severity.WARNING,
)

MULTIPLE_INJECT_MARKERS = DiagnosticDescriptor(
    code="FW0006",
    title="Multiple inject markers",
    message_format="Field '{0}' in type '{1}' has multiple inject markers; only one is allowed",
    severity=Severity.ERROR,
)

PROVIDER_KEY_IGNORED = DiagnosticDescriptor(
    code="FW0007",
    title="Service key ignored for ServiceProvider",
    message_format=(
        "Field '{0}' in type '{1}' uses InjectKeyed but ServiceProvider injection ignores the service key"
    ),
    severity=Severity.WARNING,
)

SOURCE_PARSE_FAILURE = DiagnosticDescriptor(
    code="FW0008",
    title="Source file could not be parsed",
    message_format="Module '{0}' could not be analysed: {1}",
    severity=Severity.ERROR,
)

ALL_DESCRIPTORS: tuple[DiagnosticDescriptor, ...] = (
    INIT_ONLY_FIELD,
    UNSUPPORTED_GENERIC_CONTEXT,
    MULTIPLE_CONTEXTS,
    NO_ELIGIBLE_TYPES,
    INACCESSIBLE_FIELD,
    MULTIPLE_INJECT_MARKERS,
    PROVIDER_KEY_IGNORED,
    SOURCE_PARSE_FAILURE,
)


@dataclass(frozen=True)
class Diagnostic:
    """One reported condition, anchored to a source location."""

    descriptor: DiagnosticDescriptor
    location: SourceLocation | None
    arguments: tuple[str, ...] = ()

    @property
    def code(self) -> str:
        return self.descriptor.code

    @property
    def severity(self) -> Severity:
        return self.descriptor.severity

    @property
    def message(self) -> str:
        return self.descriptor.message_format.format(*self.arguments)

    def format(self) -> str:
        """Render as ``path:line:col: severity CODE: message``."""
        where = str(self.location) if self.location is not None else "<program>"
        return f"{where}: {self.severity} {self.code}: {self.message}"


class DiagnosticBag:
    """Ordered accumulator of diagnostics for one generation pass."""

    def __init__(self) -> None:
        self._items: list[Diagnostic] = []

    def report(
        self,
        descriptor: DiagnosticDescriptor,
        location: SourceLocation | None,
        *arguments: object,
    ) -> Diagnostic:
        diagnostic = Diagnostic(
            descriptor=descriptor,
            location=location,
            arguments=tuple(str(a) for a in arguments),
        )
        self._items.append(diagnostic)
        return diagnostic

    def extend(self, diagnostics: tuple[Diagnostic, ...] | list[Diagnostic]) -> None:
        self._items.extend(diagnostics)

    @property
    def has_errors(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self._items)

    def by_code(self, code: str) -> list[Diagnostic]:
        return [d for d in self._items if d.code == code]

    def to_tuple(self) -> tuple[Diagnostic, ...]:
        return tuple(self._items)

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)
