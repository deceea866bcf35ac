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
"""Static analysis of a source tree: symbols, eligible types, field metadata."""

from flywire.analysis.collector import (
    InjectableType,
    ResolverContextDeclaration,
    collect_eligible_types,
    discover_contexts,
)
from flywire.analysis.diagnostics import Diagnostic, DiagnosticBag, DiagnosticDescriptor, Severity
from flywire.analysis.fields import FieldInjection, extract_fields
from flywire.analysis.keys import UnsupportedKey, format_key_literal
from flywire.analysis.loader import ProgramLoader
from flywire.analysis.names import RuntimeNames
from flywire.analysis.shapes import Collection, Materialization, Scalar, classify
from flywire.analysis.symbols import Program

__all__ = [
    "Collection",
    "Diagnostic",
    "DiagnosticBag",
    "DiagnosticDescriptor",
    "FieldInjection",
    "InjectableType",
    "Materialization",
    "Program",
    "ProgramLoader",
    "ResolverContextDeclaration",
    "RuntimeNames",
    "Scalar",
    "Severity",
    "UnsupportedKey",
    "classify",
    "collect_eligible_types",
    "discover_contexts",
    "extract_fields",
    "format_key_literal",
]
