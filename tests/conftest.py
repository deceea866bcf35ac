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
"""Shared fixtures: in-memory source trees for the analysis pipeline."""

from __future__ import annotations

from collections.abc import Callable
from textwrap import dedent

import pytest

from flywire.analysis.loader import ProgramLoader
from flywire.analysis.symbols import Program

SERVICES_MODULE = """
class Mailer: ...
class Cache: ...
class Plugin: ...
"""

CONTEXT_MODULE = """
from flywire import ResolverContext

class AppContext(ResolverContext):
    pass
"""


@pytest.fixture
def load_program() -> Callable[..., Program]:
    """Build a Program from ``{"pkg/mod.py": source}``; sources are dedented."""

    def _load(files: dict[str, str], exclude: tuple[str, ...] = ()) -> Program:
        return ProgramLoader(exclude=exclude).load_sources(
            {path: dedent(source).lstrip("\n") for path, source in files.items()}
        )

    return _load


@pytest.fixture
def app_sources() -> Callable[[str], dict[str, str]]:
    """A ``myapp`` package with services and one context, plus the given entities module."""

    def _sources(entities: str) -> dict[str, str]:
        return {
            "myapp/__init__.py": "",
            "myapp/services.py": SERVICES_MODULE,
            "myapp/di.py": CONTEXT_MODULE,
            "myapp/entities.py": entities,
        }

    return _sources
