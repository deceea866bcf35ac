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
"""Tests for the static program loader."""

from __future__ import annotations

from pathlib import Path, PurePosixPath

import pytest

from flywire.analysis.loader import ProgramLoader, compute_module_name, resolve_relative_import
from flywire.analysis.symbols import GENERATED_FILE_HEADER, MemberKind, QualifiedName
from flywire.kernel.exceptions import SourceRootNotFoundException


class TestModuleNames:
    def test_plain_module(self):
        assert compute_module_name(PurePosixPath("pkg/sub/mod.py")) == ("pkg.sub.mod", False)

    def test_package_init(self):
        assert compute_module_name(PurePosixPath("pkg/__init__.py")) == ("pkg", True)

    def test_invalid_identifier(self):
        assert compute_module_name(PurePosixPath("my-pkg/mod.py")) is None

    @pytest.mark.parametrize(
        ("module", "level", "current", "is_package", "expected"),
        [
            ("services", 1, "myapp.entities", False, "myapp.services"),
            (None, 1, "myapp.entities", False, "myapp"),
            ("services", 1, "myapp", True, "myapp.services"),
            ("core", 2, "myapp.web.views", False, "myapp.core"),
            ("x", 3, "myapp.entities", False, None),
        ],
    )
    def test_relative_imports(self, module, level, current, is_package, expected):
        assert resolve_relative_import(module, level, current, is_package) == expected


class TestNameResolution:
    def test_imports_aliases_and_relative_imports(self, load_program):
        program = load_program(
            {
                "myapp/__init__.py": "",
                "myapp/services.py": "class Mailer: ...\n",
                "myapp/entities.py": """
                    import myapp.services as svc
                    from . import services
                    from .services import Mailer as M
                """,
            }
        )
        scope = program.modules["myapp.entities"]
        assert scope.resolve(["svc", "Mailer"]) == QualifiedName("myapp.services", "Mailer")
        assert scope.resolve(["services", "Mailer"]) == QualifiedName("myapp.services", "Mailer")
        assert scope.resolve(["M"]) == QualifiedName("myapp.services", "Mailer")

    def test_local_names_shadow_builtins(self, load_program):
        program = load_program({"app.py": "class list: ...\n"})
        scope = program.modules["app"]
        assert scope.resolve(["list"]) == QualifiedName("app", "list")
        assert scope.resolve(["dict"]) == QualifiedName("builtins", "dict")

    def test_conditional_imports_are_seen(self, load_program):
        program = load_program(
            {
                "app.py": """
                    from typing import TYPE_CHECKING

                    if TYPE_CHECKING:
                        from myapp.services import Mailer
                """,
            }
        )
        assert program.modules["app"].resolve(["Mailer"]) == QualifiedName("myapp.services", "Mailer")

    def test_typevars_are_recorded(self, load_program):
        program = load_program(
            {
                "app.py": """
                    import typing
                    from typing import TypeVar

                    T = TypeVar("T")
                    U = typing.TypeVar("U")
                    V = dict()
                """,
            }
        )
        assert program.modules["app"].typevars == frozenset({"T", "U"})


class TestClassSymbols:
    def test_nested_classes_use_qualname(self, load_program):
        program = load_program(
            {
                "app.py": """
                    class Outer:
                        class Inner:
                            pass

                    def factory():
                        class Hidden:
                            pass
                """,
            }
        )
        assert list(program.classes) == ["app.Outer", "app.Outer.Inner"]
        assert program.classes["app.Outer.Inner"].name == "Inner"

    def test_members_in_declaration_order(self, load_program):
        program = load_program(
            {
                "app.py": """
                    class Sample:
                        a: int
                        b = 1

                        @property
                        def c(self) -> int:
                            return 1

                        @c.setter
                        def c(self, value: int) -> None:
                            pass

                        @property
                        def d(self) -> int:
                            return 1

                        def e(self):
                            pass
                """,
            }
        )
        members = program.classes["app.Sample"].members
        assert [(m.name, m.kind) for m in members] == [
            ("a", MemberKind.FIELD),
            ("b", MemberKind.OTHER),
            ("c", MemberKind.PROPERTY),
            ("d", MemberKind.PROPERTY),
            ("e", MemberKind.OTHER),
        ]
        assert members[2].has_setter is True
        assert members[3].has_setter is False

    @pytest.mark.parametrize(
        "source",
        [
            "from abc import ABC\nclass Base(ABC): ...\n",
            "import abc\nclass Base(metaclass=abc.ABCMeta): ...\n",
            "from typing import Protocol\nclass Base(Protocol): ...\n",
            "from abc import abstractmethod\nclass Base:\n    @abstractmethod\n    def run(self): ...\n",
        ],
    )
    def test_abstract_detection(self, load_program, source):
        assert load_program({"app.py": source}).classes["app.Base"].is_abstract is True

    @pytest.mark.parametrize(
        ("source", "frozen"),
        [
            ("from dataclasses import dataclass\n@dataclass(frozen=True)\nclass Base: ...\n", True),
            ("from dataclasses import dataclass\n@dataclass\nclass Base: ...\n", False),
            ("import attrs\n@attrs.frozen\nclass Base: ...\n", True),
            ("import attrs\n@attrs.define(frozen=True)\nclass Base: ...\n", True),
        ],
    )
    def test_frozen_detection(self, load_program, source, frozen):
        assert load_program({"app.py": source}).classes["app.Base"].is_frozen is frozen

    def test_pep695_type_params(self, load_program):
        program = load_program({"app.py": "class Box[T]:\n    pass\n"})
        assert program.classes["app.Box"].type_params == ("T",)


class TestSourceHandling:
    def test_syntax_error_reports_fw0008_and_continues(self, load_program):
        program = load_program({"bad.py": "class Broken(:\n", "good.py": "class Fine: ...\n"})
        assert "good.Fine" in program.classes
        assert [d.code for d in program.load_diagnostics] == ["FW0008"]
        assert program.load_diagnostics[0].location.path == "bad.py"

    def test_generated_modules_are_skipped(self, load_program):
        program = load_program({"app_context_g.py": f"{GENERATED_FILE_HEADER}\nclass AppContext: ...\n"})
        assert program.modules == {}

    def test_exclude_patterns(self, load_program):
        program = load_program({"app.py": "", "tests/test_app.py": ""}, exclude=("tests/*",))
        assert list(program.modules) == ["app"]

    def test_load_from_disk(self, tmp_path: Path):
        (tmp_path / "pkg").mkdir()
        (tmp_path / "pkg" / "__init__.py").write_text("")
        (tmp_path / "pkg" / "mod.py").write_text("class Thing: ...\n")
        (tmp_path / "pkg" / "__pycache__").mkdir()
        (tmp_path / "pkg" / "__pycache__" / "stale.py").write_text("class Stale: ...\n")

        program = ProgramLoader().load([tmp_path])

        assert sorted(program.modules) == ["pkg", "pkg.mod"]
        assert program.modules["pkg"].is_package is True
        assert list(program.classes) == ["pkg.mod.Thing"]

    def test_missing_root_raises(self, tmp_path: Path):
        with pytest.raises(SourceRootNotFoundException) as exc_info:
            ProgramLoader().load([tmp_path / "missing"])
        assert exc_info.value.code == "SOURCE_ROOT_NOT_FOUND"

    def test_duplicate_identities_keep_first_module(self, load_program):
        program = load_program({"app.py": "class Thing: ...\nclass Thing: ...\n"})
        assert list(program.classes) == ["app.Thing"]
