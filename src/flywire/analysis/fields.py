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
"""Field Metadata Extractor.

Walks a class and its program bases in method resolution order and turns every
marked field into a :class:`FieldInjection`. Each member goes through the same
sequence of checks; the first failing check excludes it:

1. ``ClassVar`` fields are ignored and do not claim their name.
2. Names already claimed by a more derived class are shadowed.
3. Exactly one ``Inject``/``InjectKeyed`` marker is required (FW0006).
4. The setter must be reachable: no name mangling, properties need a
   setter (FW0005).
5. The field must be assignable after construction: not ``Final``, not on a
   frozen class (FW0001).
6. Marker arguments are read as literals.
7. ``ServiceProvider`` fields receive the provider itself; a key on them is
   reported and ignored (FW0007).
"""

from __future__ import annotations

import ast
import logging
from dataclasses import dataclass
from typing import Any

from flywire.analysis.annotations import (
    TypeExpression,
    qualify,
    strip_optional,
    strip_qualifier,
    unwrap_annotated,
)
from flywire.analysis.diagnostics import (
    INACCESSIBLE_FIELD,
    INIT_ONLY_FIELD,
    MULTIPLE_INJECT_MARKERS,
    PROVIDER_KEY_IGNORED,
    DiagnosticBag,
    DiagnosticDescriptor,
)
from flywire.analysis.inheritance import linearize
from flywire.analysis.keys import UnsupportedKey
from flywire.analysis.names import RuntimeNames
from flywire.analysis.shapes import SCALAR, Shape, classify
from flywire.analysis.symbols import (
    ClassSymbol,
    MemberKind,
    MemberSymbol,
    ModuleSymbols,
    Program,
    SourceLocation,
)

logger = logging.getLogger(__name__)

_NOT_LITERAL = object()


@dataclass(frozen=True)
class FieldInjection:
    """Injection metadata of one field.

    Attributes:
        name: Attribute name assigned on the instance.
        field_type: Declared type, rendered for the generated module.
        keyed: Whether the field uses ``InjectKeyed``.
        key: Literal key value, or :class:`UnsupportedKey`.
        required: Fail when the service is missing (scalars only).
        shape: Scalar or collection classification.
        is_provider: The field receives the provider itself.
        owner: Identity of the class that declares the field.
        location: Declaration site.
    """

    name: str
    field_type: TypeExpression
    keyed: bool = False
    key: Any = None
    required: bool = True
    shape: Shape = SCALAR
    is_provider: bool = False
    owner: str = ""
    location: SourceLocation | None = None


@dataclass(frozen=True)
class _Marker:
    keyed: bool
    call: ast.expr


class FieldExtractor:
    """Extracts :class:`FieldInjection` records for program classes."""

    def __init__(self, program: Program, names: RuntimeNames, diagnostics: DiagnosticBag) -> None:
        self._program = program
        self._names = names
        self._diagnostics = diagnostics
        # (owner identity, member name); inherited fields are extracted once per subclass.
        self._reported: set[tuple[str, str]] = set()

    def extract(self, cls: ClassSymbol) -> tuple[FieldInjection, ...]:
        claimed: set[str] = set()
        fields: list[FieldInjection] = []
        for owner in linearize(self._program, cls):
            scope = self._program.scope_of(owner)
            for member in owner.members:
                if self._is_class_var(scope, member):
                    continue
                if member.name in claimed:
                    continue
                claimed.add(member.name)
                if member.kind == MemberKind.OTHER or member.annotation is None:
                    continue
                injection = self._extract_member(scope, owner, cls, member, member.annotation)
                if injection is not None:
                    fields.append(injection)
        return tuple(fields)

    def _is_class_var(self, scope: ModuleSymbols, member: MemberSymbol) -> bool:
        if member.kind != MemberKind.FIELD or member.annotation is None:
            return False
        inner, _ = unwrap_annotated(scope, member.annotation)
        return strip_qualifier(scope, inner, "ClassVar") is not None

    def _extract_member(
        self,
        scope: ModuleSymbols,
        owner: ClassSymbol,
        candidate: ClassSymbol,
        member: MemberSymbol,
        annotation: ast.expr,
    ) -> FieldInjection | None:
        declared, metadata = unwrap_annotated(scope, annotation)
        markers = self._markers(scope, [member.value, *metadata])
        if not markers:
            return None
        if len(markers) > 1:
            self._report(MULTIPLE_INJECT_MARKERS, owner, member)
            return None

        if member.name.startswith("__") and not member.name.endswith("__"):
            self._report(INACCESSIBLE_FIELD, owner, member)
            return None
        if member.kind == MemberKind.PROPERTY and not member.has_setter:
            self._report(INACCESSIBLE_FIELD, owner, member)
            return None

        final_inner = strip_qualifier(scope, declared, "Final")
        if final_inner is not None or owner.is_frozen or candidate.is_frozen:
            self._report(INIT_ONLY_FIELD, owner, member)
            return None

        marker = markers[0]
        keyed, key, required = self._arguments(marker)

        type_node = strip_optional(scope, declared)
        field_type = qualify(scope, type_node)
        is_provider = field_type.name is not None and field_type.name.matches(
            self._names.service_provider, self._names.namespaces
        )
        if is_provider and keyed:
            self._report(PROVIDER_KEY_IGNORED, owner, member)

        return FieldInjection(
            name=member.name,
            field_type=field_type,
            keyed=keyed and not is_provider,
            key=key if not is_provider else None,
            required=required,
            shape=SCALAR if is_provider else classify(scope, type_node),
            is_provider=is_provider,
            owner=owner.identity,
            location=member.location,
        )

    def _report(self, descriptor: DiagnosticDescriptor, owner: ClassSymbol, member: MemberSymbol) -> None:
        reported = (owner.identity, member.name)
        if reported in self._reported:
            return
        self._reported.add(reported)
        self._diagnostics.report(descriptor, member.location, member.name, owner.name)

    def _markers(self, scope: ModuleSymbols, candidates: list[ast.expr | None]) -> list[_Marker]:
        found: list[_Marker] = []
        for node in candidates:
            if node is None:
                continue
            target = node.func if isinstance(node, ast.Call) else node
            resolved = scope.resolve_node(target)
            if resolved is None:
                continue
            if resolved.matches(self._names.inject, self._names.namespaces):
                found.append(_Marker(keyed=False, call=node))
            elif resolved.matches(self._names.inject_keyed, self._names.namespaces):
                found.append(_Marker(keyed=True, call=node))
        return found

    def _arguments(self, marker: _Marker) -> tuple[bool, Any, bool]:
        call = marker.call
        args: list[ast.expr] = list(call.args) if isinstance(call, ast.Call) else []
        keywords = {kw.arg: kw.value for kw in call.keywords if kw.arg} if isinstance(call, ast.Call) else {}

        if not marker.keyed:
            required_node = args[0] if args else keywords.get("required")
            return False, None, _required(required_node)

        key_node = args[0] if args else keywords.get("key")
        required_node = args[1] if len(args) > 1 else keywords.get("required")
        if key_node is None:
            key: Any = UnsupportedKey("")
        else:
            value = _literal(key_node)
            if value is _NOT_LITERAL or not isinstance(value, str | int | float | bool | type(None)):
                key = UnsupportedKey(ast.unparse(key_node))
                logger.debug("Key %s is not a supported literal", key.source)
            else:
                key = value
        return True, key, _required(required_node)


def _literal(node: ast.expr) -> Any:
    try:
        return ast.literal_eval(node)
    except (ValueError, TypeError, SyntaxError, MemoryError, RecursionError):
        return _NOT_LITERAL


def _required(node: ast.expr | None) -> bool:
    if node is None:
        return True
    value = _literal(node)
    return value if isinstance(value, bool) else True


def extract_fields(
    program: Program,
    cls: ClassSymbol,
    diagnostics: DiagnosticBag,
    names: RuntimeNames | None = None,
) -> tuple[FieldInjection, ...]:
    """Return the injectable fields of *cls*, most derived class first."""
    return FieldExtractor(program, names or RuntimeNames(), diagnostics).extract(cls)
