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
"""Tests for the diagnostic model."""

from __future__ import annotations

from flywire.analysis.diagnostics import (
    ALL_DESCRIPTORS,
    MULTIPLE_INJECT_MARKERS,
    NO_ELIGIBLE_TYPES,
    DiagnosticBag,
    Severity,
)
from flywire.analysis.symbols import SourceLocation


class TestDescriptors:
    def test_codes_are_unique_and_stable(self):
        assert [d.code for d in ALL_DESCRIPTORS] == [f"FW000{i}" for i in range(1, 9)]

    def test_only_marker_and_parse_failures_are_errors(self):
        errors = {d.code for d in ALL_DESCRIPTORS if d.severity == Severity.ERROR}
        assert errors == {"FW0006", "FW0008"}


class TestDiagnosticBag:
    def test_report_formats_message(self):
        bag = DiagnosticBag()
        diagnostic = bag.report(MULTIPLE_INJECT_MARKERS, SourceLocation("app.py", 3, 5), "mailer", "Order")
        assert diagnostic.message == "Field 'mailer' in type 'Order' has multiple inject markers; only one is allowed"
        assert diagnostic.format().startswith("app.py:3:5: error FW0006: ")
        assert bag.has_errors

    def test_info_does_not_count_as_error(self):
        bag = DiagnosticBag()
        bag.report(NO_ELIGIBLE_TYPES, None, "AppContext")
        assert not bag.has_errors
        assert len(bag) == 1
        assert bag.by_code("FW0004")[0].format() == "<program>: info FW0004: No eligible types found for context 'AppContext'"
