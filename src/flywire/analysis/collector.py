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
"""Eligible-Type Collector and resolver-context discovery."""

from __future__ import annotations

import ast
import logging
from dataclasses import dataclass

from flywire.analysis.diagnostics import DiagnosticBag
from flywire.analysis.fields import FieldExtractor, FieldInjection
from flywire.analysis.inheritance import inherits_from
from flywire.analysis.names import RuntimeNames
from flywire.analysis.symbols import ClassSymbol, Program, SourceLocation

logger = logging.getLogger(__name__)

_FINAL_DECORATORS = frozenset({"typing.final", "typing_extensions.final"})
_GENERIC_BASES = frozenset(
    {"typing.Generic", "typing.Protocol", "typing_extensions.Generic", "typing_extensions.Protocol"}
)


@dataclass(frozen=True)
class InjectableType:
    """A concrete ``Injectable`` subclass and its injectable fields."""

    identity: str
    name: str
    module: str
    location: SourceLocation
    fields: tuple[FieldInjection, ...] = ()


@dataclass(frozen=True)
class ResolverContextDeclaration:
    """A user-declared ``ResolverContext`` subclass that receives a generated module."""

    identity: str
    name: str
    qualname: str
    module: str
    path: str
    is_package: bool
    location: SourceLocation
    is_final: bool = False
    generic_arity: int = 0

    @property
    def is_public(self) -> bool:
        return not self.name.startswith("_")


def collect_eligible_types(
    program: Program,
    diagnostics: DiagnosticBag,
    names: RuntimeNames | None = None,
) -> tuple[InjectableType, ...]:
    """Collect every concrete, non-excluded ``Injectable`` in ascending identity order."""
    names = names or RuntimeNames()
    extractor = FieldExtractor(program, names, diagnostics)
    found: dict[str, InjectableType] = {}
    for cls in program.iter_classes():
        if cls.is_abstract or cls.identity in found:
            continue
        if cls.has_decorator(names.exclude, names.namespaces):
            logger.debug("Skipping %s: excluded from injection generation", cls.identity)
            continue
        if not inherits_from(program, cls, names.injectable, names.namespaces):
            continue
        found[cls.identity] = InjectableType(
            identity=cls.identity,
            name=cls.name,
            module=cls.module,
            location=cls.location,
            fields=extractor.extract(cls),
        )
    logger.debug("Collected %d eligible types", len(found))
    return tuple(found[identity] for identity in sorted(found))


def discover_contexts(program: Program, names: RuntimeNames | None = None) -> tuple[ResolverContextDeclaration, ...]:
    """Find every ``ResolverContext`` subclass in ascending identity order."""
    names = names or RuntimeNames()
    contexts: list[ResolverContextDeclaration] = []
    for cls in program.iter_classes():
        if not inherits_from(program, cls, names.resolver_context, names.namespaces):
            continue
        scope = program.scope_of(cls)
        contexts.append(
            ResolverContextDeclaration(
                identity=cls.identity,
                name=cls.name,
                qualname=cls.qualname,
                module=cls.module,
                path=scope.path,
                is_package=scope.is_package,
                location=cls.location,
                is_final=any(d.name is not None and d.name.dotted in _FINAL_DECORATORS for d in cls.decorators),
                generic_arity=generic_arity(program, cls),
            )
        )
    return tuple(contexts)


def generic_arity(program: Program, cls: ClassSymbol) -> int:
    """Number of type parameters *cls* declares (PEP 695, ``Generic[...]`` or ``TypeVar`` bases)."""
    if cls.type_params:
        return len(cls.type_params)
    scope = program.scope_of(cls)
    parameters: list[str] = []
    for base in cls.bases:
        if not base.arguments:
            continue
        explicit = base.name is not None and base.name.dotted in _GENERIC_BASES
        for argument in base.arguments:
            resolved = scope.resolve_node(argument)
            is_typevar = resolved is not None and _is_typevar(program, resolved.module, resolved.attr)
            if (explicit or is_typevar) and ast.unparse(argument) not in parameters:
                parameters.append(ast.unparse(argument))
    return len(parameters)


def _is_typevar(program: Program, module: str, attr: str) -> bool:
    scope = program.modules.get(module)
    return scope is not None and attr in scope.typevars
