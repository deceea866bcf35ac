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
"""Static program model — the symbol graph every analysis step reads.

A :class:`Program` is an immutable snapshot of the declarations found in a set
of source trees. Nothing here imports user code: type identity is the dotted
name the loader resolves from import statements.
"""

from __future__ import annotations

import ast
import builtins
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from flywire.analysis.diagnostics import Diagnostic

GENERATED_FILE_HEADER = "# <auto-generated/>"

_BUILTIN_NAMES = frozenset(dir(builtins))


@dataclass(frozen=True)
class SourceLocation:
    """Position of a declaration (1-based line and column)."""

    path: str
    line: int = 1
    column: int = 1

    def __str__(self) -> str:
        return f"{self.path}:{self.line}:{self.column}"

    @classmethod
    def of(cls, node: ast.AST, path: str) -> SourceLocation:
        return cls(
            path=path,
            line=getattr(node, "lineno", 1),
            column=getattr(node, "col_offset", 0) + 1,
        )


@dataclass(frozen=True, order=True)
class QualifiedName:
    """A resolved dotted name split into importable module and attribute path."""

    module: str
    attr: str

    @property
    def dotted(self) -> str:
        if not self.module:
            return self.attr
        if not self.attr:
            return self.module
        return f"{self.module}.{self.attr}"

    @property
    def name(self) -> str:
        return self.dotted.rpartition(".")[2]

    @property
    def namespace(self) -> str:
        return self.dotted.rpartition(".")[0]

    @property
    def is_builtin(self) -> bool:
        return self.module == "builtins"

    def render(self) -> str:
        """Expression that evaluates to this name once ``module`` is imported."""
        return self.attr if self.is_builtin else self.dotted

    def matches(self, name: str, namespaces: frozenset[str]) -> bool:
        """Nominal check by simple name and containing namespace."""
        return self.name == name and self.namespace in namespaces


@dataclass(frozen=True)
class ImportBinding:
    """What a module-level name was bound to by an import statement."""

    target: str
    is_module: bool


class MemberKind(StrEnum):
    FIELD = "field"
    PROPERTY = "property"
    OTHER = "other"


@dataclass(frozen=True)
class MemberSymbol:
    """One named member of a class body, in declaration order.

    ``annotation`` is the field annotation (or the property's return
    annotation); ``value`` is the assigned default of a field.
    """

    name: str
    kind: MemberKind
    location: SourceLocation
    annotation: ast.expr | None = field(default=None, compare=False)
    value: ast.expr | None = field(default=None, compare=False)
    has_setter: bool = True


@dataclass(frozen=True)
class BaseReference:
    """A base-class expression; ``arguments`` holds subscript arguments."""

    name: QualifiedName | None
    arguments: tuple[ast.expr, ...] = field(default=(), compare=False)


@dataclass(frozen=True)
class DecoratorSymbol:
    name: QualifiedName | None
    keywords: Mapping[str, Any] = field(default_factory=dict, compare=False)


@dataclass(frozen=True)
class ClassSymbol:
    """A class declared at module level or nested in another class."""

    identity: str
    name: str
    qualname: str
    module: str
    location: SourceLocation
    bases: tuple[BaseReference, ...] = ()
    decorators: tuple[DecoratorSymbol, ...] = ()
    members: tuple[MemberSymbol, ...] = ()
    type_params: tuple[str, ...] = ()
    is_abstract: bool = False
    is_frozen: bool = False

    def has_decorator(self, name: str, namespaces: frozenset[str]) -> bool:
        return any(d.name is not None and d.name.matches(name, namespaces) for d in self.decorators)


@dataclass(frozen=True)
class ModuleSymbols:
    """Name-resolution scope of one module."""

    name: str
    path: str
    is_package: bool = False
    imports: Mapping[str, ImportBinding] = field(default_factory=dict)
    imported_modules: frozenset[str] = frozenset()
    local_names: frozenset[str] = frozenset()
    typevars: frozenset[str] = frozenset()
    known_modules: frozenset[str] = field(default=frozenset(), repr=False, compare=False)

    def resolve(self, chain: Sequence[str]) -> QualifiedName:
        """Resolve a ``Name``/``Attribute`` chain as seen from this module.

        Imports win over module-level names, which win over builtins. Unknown
        names are assumed to be module-local.
        """
        head, rest = chain[0], list(chain[1:])
        binding = self.imports.get(head)
        if binding is not None:
            if binding.is_module or binding.target in self.known_modules:
                return self._descend(binding.target, rest)
            module, _, attr = binding.target.rpartition(".")
            return QualifiedName(module, ".".join([attr, *rest]))
        if head in self.local_names or head not in _BUILTIN_NAMES:
            return QualifiedName(self.name, ".".join(chain))
        return QualifiedName("builtins", ".".join(chain))

    def resolve_node(self, node: ast.expr) -> QualifiedName | None:
        chain = dotted_chain(node)
        if chain is None:
            return None
        return self.resolve(chain)

    def _descend(self, module: str, rest: list[str]) -> QualifiedName:
        while rest:
            candidate = f"{module}.{rest[0]}"
            if candidate not in self.known_modules and candidate not in self.imported_modules:
                break
            module = candidate
            rest.pop(0)
        return QualifiedName(module, ".".join(rest))


def dotted_chain(node: ast.expr) -> list[str] | None:
    """Return ``["a", "b", "C"]`` for ``a.b.C``; ``None`` for other expressions."""
    parts: list[str] = []
    current: ast.expr = node
    while isinstance(current, ast.Attribute):
        parts.append(current.attr)
        current = current.value
    if not isinstance(current, ast.Name):
        return None
    parts.append(current.id)
    parts.reverse()
    return parts


@dataclass(frozen=True)
class Program:
    """Immutable snapshot of every module and class in the analysed sources.

    ``classes`` is keyed by identity and iterates in ascending identity order
    whatever order the sources were read in.
    """

    modules: Mapping[str, ModuleSymbols]
    classes: Mapping[str, ClassSymbol]
    load_diagnostics: tuple[Diagnostic, ...] = ()

    def iter_classes(self) -> Iterator[ClassSymbol]:
        for identity in sorted(self.classes):
            yield self.classes[identity]

    def scope_of(self, cls: ClassSymbol) -> ModuleSymbols:
        return self.modules[cls.module]

    def find_class(self, name: QualifiedName | None) -> ClassSymbol | None:
        """Find the program class *name* refers to, following re-exports."""
        seen: set[str] = set()
        current = name
        while current is not None and current.dotted not in seen:
            seen.add(current.dotted)
            found = self.classes.get(current.dotted)
            if found is not None:
                return found
            scope = self.modules.get(current.module)
            if scope is None or not current.attr:
                return None
            head = current.attr.split(".")
            if head[0] not in scope.imports:
                return None
            current = scope.resolve(head)
        return None
