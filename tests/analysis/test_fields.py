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
"""Tests for the field metadata extractor."""

from __future__ import annotations

from flywire.analysis.diagnostics import DiagnosticBag
from flywire.analysis.fields import extract_fields
from flywire.analysis.keys import UnsupportedKey
from flywire.analysis.shapes import SCALAR, Collection, Materialization

HEADER = """
from dataclasses import dataclass
from typing import Annotated, ClassVar, Final, Optional

from flywire import Inject, InjectKeyed, Injectable, ServiceProvider
from myapp.services import Cache, Mailer, Plugin
"""


def _extract(load_program, app_sources, body: str, cls: str = "Sample"):
    program = load_program(app_sources(HEADER + body))
    bag = DiagnosticBag()
    fields = extract_fields(program, program.classes[f"myapp.entities.{cls}"], bag)
    return fields, bag


class TestFieldMarkers:
    def test_required_and_optional_keyed(self, load_program, app_sources):
        fields, bag = _extract(
            load_program,
            app_sources,
            """
class Sample(Injectable):
    x: Mailer = Inject()
    y: Cache = InjectKeyed("k", required=False)
""",
        )
        assert len(bag) == 0
        x, y = fields
        assert (x.name, x.field_type.text, x.keyed, x.required, x.shape) == (
            "x",
            "myapp.services.Mailer",
            False,
            True,
            SCALAR,
        )
        assert (y.name, y.keyed, y.key, y.required) == ("y", True, "k", False)

    def test_annotated_metadata_marker(self, load_program, app_sources):
        fields, bag = _extract(
            load_program,
            app_sources,
            """
class Sample(Injectable):
    mailer: Annotated[Mailer, Inject(required=False)]
    cache: Annotated[Optional[Cache], InjectKeyed(key=3)]
""",
        )
        assert len(bag) == 0
        assert [(f.name, f.field_type.text, f.key, f.required) for f in fields] == [
            ("mailer", "myapp.services.Mailer", None, False),
            ("cache", "myapp.services.Cache", 3, True),
        ]

    def test_unmarked_fields_are_ignored(self, load_program, app_sources):
        fields, bag = _extract(
            load_program,
            app_sources,
            """
class Sample(Injectable):
    name: str = "x"
    mailer: Mailer
""",
        )
        assert fields == ()
        assert len(bag) == 0

    def test_multiple_markers_reported_and_excluded(self, load_program, app_sources):
        fields, bag = _extract(
            load_program,
            app_sources,
            """
class Sample(Injectable):
    a: Annotated[Mailer, Inject(), InjectKeyed("k")] = Inject()
    b: Mailer = Inject()
""",
        )
        assert [f.name for f in fields] == ["b"]
        assert [d.code for d in bag] == ["FW0006"]
        assert bag.has_errors

    def test_class_var_is_skipped_silently(self, load_program, app_sources):
        fields, bag = _extract(
            load_program,
            app_sources,
            """
class Sample(Injectable):
    shared: ClassVar[Mailer] = Inject()
""",
        )
        assert fields == ()
        assert len(bag) == 0


class TestFieldAccessibility:
    def test_mangled_name_is_inaccessible(self, load_program, app_sources):
        fields, bag = _extract(
            load_program,
            app_sources,
            """
class Sample(Injectable):
    __secret: Mailer = Inject()
    _internal: Mailer = Inject()
""",
        )
        assert [f.name for f in fields] == ["_internal"]
        assert [d.code for d in bag] == ["FW0005"]

    def test_property_without_setter(self, load_program, app_sources):
        fields, bag = _extract(
            load_program,
            app_sources,
            """
class Sample(Injectable):
    @property
    def mailer(self) -> Annotated[Mailer, Inject()]:
        return self._mailer

    @property
    def cache(self) -> Annotated[Cache, Inject()]:
        return self._cache

    @cache.setter
    def cache(self, value: Cache) -> None:
        self._cache = value
""",
        )
        assert [f.name for f in fields] == ["cache"]
        assert [d.code for d in bag] == ["FW0005"]
        assert bag.to_tuple()[0].arguments == ("mailer", "Sample")

    def test_final_field_is_init_only(self, load_program, app_sources):
        fields, bag = _extract(
            load_program,
            app_sources,
            """
class Sample(Injectable):
    mailer: Final[Mailer] = Inject()
""",
        )
        assert fields == ()
        assert [d.code for d in bag] == ["FW0001"]

    def test_frozen_dataclass_is_init_only(self, load_program, app_sources):
        fields, bag = _extract(
            load_program,
            app_sources,
            """
@dataclass(frozen=True)
class Sample(Injectable):
    mailer: Mailer = Inject()
""",
        )
        assert fields == ()
        assert [d.code for d in bag] == ["FW0001"]


class TestFieldArguments:
    def test_non_literal_key_is_unsupported(self, load_program, app_sources):
        fields, _ = _extract(
            load_program,
            app_sources,
            """
KEY = "k"

class Sample(Injectable):
    mailer: Mailer = InjectKeyed(KEY)
""",
        )
        assert fields[0].key == UnsupportedKey("KEY")

    def test_non_literal_required_defaults_to_true(self, load_program, app_sources):
        fields, _ = _extract(
            load_program,
            app_sources,
            """
OPTIONAL = False

class Sample(Injectable):
    mailer: Mailer = Inject(required=OPTIONAL)
""",
        )
        assert fields[0].required is True

    def test_positional_required(self, load_program, app_sources):
        fields, _ = _extract(
            load_program,
            app_sources,
            """
class Sample(Injectable):
    a: Mailer = Inject(False)
    b: Cache = InjectKeyed(None, False)
""",
        )
        assert [(f.required, f.keyed, f.key) for f in fields] == [(False, False, None), (False, True, None)]


class TestProviderPassthrough:
    def test_provider_field(self, load_program, app_sources):
        fields, bag = _extract(
            load_program,
            app_sources,
            """
class Sample(Injectable):
    provider: ServiceProvider = Inject()
""",
        )
        assert fields[0].is_provider
        assert len(bag) == 0

    def test_key_on_provider_is_reported_and_ignored(self, load_program, app_sources):
        fields, bag = _extract(
            load_program,
            app_sources,
            """
class Sample(Injectable):
    provider: ServiceProvider = InjectKeyed("k")
""",
        )
        assert fields[0].is_provider
        assert fields[0].keyed is False
        assert [d.code for d in bag] == ["FW0007"]


class TestCollections:
    def test_collection_shapes_recorded(self, load_program, app_sources):
        fields, _ = _extract(
            load_program,
            app_sources,
            """
class Sample(Injectable):
    plugins: tuple[Plugin, ...] = Inject()
    extra: list[Plugin] = InjectKeyed("x")
""",
        )
        assert fields[0].shape == Collection(fields[0].shape.element, Materialization.TO_FIXED_ARRAY)
        assert fields[1].shape.materialization == Materialization.TO_GROWABLE_LIST
        assert fields[1].key == "x"


class TestInheritance:
    def test_base_fields_follow_derived_fields(self, load_program, app_sources):
        fields, _ = _extract(
            load_program,
            app_sources,
            """
class Base(Injectable):
    mailer: Mailer = Inject()
    cache: Cache = Inject()

class Sample(Base):
    plugin: Plugin = Inject()
""",
        )
        assert [(f.name, f.owner) for f in fields] == [
            ("plugin", "myapp.entities.Sample"),
            ("mailer", "myapp.entities.Base"),
            ("cache", "myapp.entities.Base"),
        ]

    def test_derived_declaration_shadows_base_field(self, load_program, app_sources):
        fields, bag = _extract(
            load_program,
            app_sources,
            """
class Base(Injectable):
    mailer: Mailer = Inject()
    cache: Cache = Inject()

class Sample(Base):
    mailer: Mailer = Inject(required=False)
    cache = None
""",
        )
        assert [(f.name, f.required, f.owner) for f in fields] == [("mailer", False, "myapp.entities.Sample")]
        assert len(bag) == 0

    def test_class_var_does_not_shadow(self, load_program, app_sources):
        fields, _ = _extract(
            load_program,
            app_sources,
            """
class Base(Injectable):
    mailer: Mailer = Inject()

class Sample(Base):
    mailer: ClassVar[Mailer]
""",
        )
        assert [(f.name, f.owner) for f in fields] == [("mailer", "myapp.entities.Base")]
