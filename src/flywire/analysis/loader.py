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
"""Source-tree loader — builds a :class:`Program` without importing anything.

Walks each source root, parses every module with :mod:`ast` and records the
declarations the analysis needs. Unreadable or unparsable files are reported
as diagnostics and skipped; they never abort the pass.
"""

from __future__ import annotations

import ast
import fnmatch
import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Any

from flywire.analysis.diagnostics import SOURCE_PARSE_FAILURE, DiagnosticBag
from flywire.analysis.symbols import (
    GENERATED_FILE_HEADER,
    BaseReference,
    ClassSymbol,
    DecoratorSymbol,
    ImportBinding,
    MemberKind,
    MemberSymbol,
    ModuleSymbols,
    Program,
    SourceLocation,
)
from flywire.kernel.exceptions import SourceRootNotFoundException

logger = logging.getLogger(__name__)

_TYPEVAR_FACTORIES = frozenset({"TypeVar", "ParamSpec", "TypeVarTuple"})
_ABSTRACT_BASES = frozenset({"abc.ABC", "typing.Protocol", "typing_extensions.Protocol"})
_ABSTRACT_METACLASSES = frozenset({"abc.ABCMeta"})
_ABSTRACT_DECORATORS = frozenset({"abc.abstractmethod"})
_FROZEN_WHEN_FLAGGED = frozenset(
    {
        "dataclasses.dataclass",
        "pydantic.dataclasses.dataclass",
        "attr.s",
        "attr.attrs",
        "attr.define",
        "attrs.define",
    }
)
_ALWAYS_FROZEN = frozenset({"attr.frozen", "attrs.frozen"})


@dataclass(frozen=True)
class _ParsedModule:
    name: str
    path: str
    is_package: bool
    tree: ast.Module


def compute_module_name(relative: PurePosixPath) -> tuple[str, bool] | None:
    """Map ``pkg/sub/mod.py`` to ``("pkg.sub.mod", False)``.

    Returns ``None`` when a path segment is not a valid identifier.
    """
    parts = list(relative.with_suffix("").parts)
    is_package = bool(parts) and parts[-1] == "__init__"
    if is_package:
        parts = parts[:-1]
    if not parts or not all(part.isidentifier() for part in parts):
        return None
    return ".".join(parts), is_package


def resolve_relative_import(module: str | None, level: int, current: str, is_package: bool) -> str | None:
    """Resolve ``from ..x import y`` against the importing module."""
    if level == 0:
        return module
    package = current if is_package else current.rpartition(".")[0]
    parts = package.split(".") if package else []
    if level - 1 > len(parts):
        return None
    base = parts[: len(parts) - (level - 1)]
    if module:
        base.append(module)
    return ".".join(base) if base else None


class ProgramLoader:
    """Builds a :class:`Program` from source roots or in-memory files.

    Args:
        exclude: ``fnmatch`` patterns matched against root-relative POSIX
            paths (e.g. ``"tests/*"``).
    """

    def __init__(self, exclude: Sequence[str] = ()) -> None:
        self._exclude = tuple(exclude)

    def load(self, roots: Iterable[str | Path]) -> Program:
        """Load every ``*.py`` file under *roots*."""
        diagnostics = DiagnosticBag()
        parsed: dict[str, _ParsedModule] = {}
        for root in roots:
            root_path = Path(root)
            if not root_path.is_dir():
                raise SourceRootNotFoundException(root_path)
            for file_path in sorted(root_path.rglob("*.py")):
                relative = PurePosixPath(file_path.relative_to(root_path).as_posix())
                if self._skipped(relative):
                    continue
                try:
                    source = file_path.read_text(encoding="utf-8")
                except (OSError, UnicodeDecodeError) as exc:
                    self._report_unreadable(diagnostics, relative, str(file_path), exc)
                    continue
                self._parse_into(parsed, diagnostics, relative, str(file_path), source)
        return self._build(parsed, diagnostics)

    def load_sources(self, files: Mapping[str, str]) -> Program:
        """Load in-memory sources keyed by root-relative path (``"pkg/mod.py"``)."""
        diagnostics = DiagnosticBag()
        parsed: dict[str, _ParsedModule] = {}
        for path in sorted(files):
            relative = PurePosixPath(path)
            if self._skipped(relative):
                continue
            self._parse_into(parsed, diagnostics, relative, path, files[path])
        return self._build(parsed, diagnostics)

    def _skipped(self, relative: PurePosixPath) -> bool:
        if "__pycache__" in relative.parts or any(p.startswith(".") for p in relative.parts[:-1]):
            return True
        text = relative.as_posix()
        return any(fnmatch.fnmatch(text, pattern) for pattern in self._exclude)

    def _report_unreadable(
        self,
        diagnostics: DiagnosticBag,
        relative: PurePosixPath,
        display_path: str,
        exc: Exception,
    ) -> None:
        module = compute_module_name(relative)
        name = module[0] if module else relative.as_posix()
        logger.warning("Skipping unreadable source %s: %s", display_path, exc)
        diagnostics.report(SOURCE_PARSE_FAILURE, SourceLocation(display_path), name, exc)

    def _parse_into(
        self,
        parsed: dict[str, _ParsedModule],
        diagnostics: DiagnosticBag,
        relative: PurePosixPath,
        display_path: str,
        source: str,
    ) -> None:
        module = compute_module_name(relative)
        if module is None:
            logger.debug("Skipping %s: not an importable module path", display_path)
            return
        name, is_package = module
        if source.startswith(GENERATED_FILE_HEADER):
            logger.debug("Skipping generated module %s", name)
            return
        if name in parsed:
            logger.debug("Module %s already loaded from %s", name, parsed[name].path)
            return
        try:
            tree = ast.parse(source, filename=display_path)
        except SyntaxError as exc:
            location = SourceLocation(display_path, exc.lineno or 1, exc.offset or 1)
            diagnostics.report(SOURCE_PARSE_FAILURE, location, name, exc.msg)
            return
        parsed[name] = _ParsedModule(name=name, path=display_path, is_package=is_package, tree=tree)

    def _build(self, parsed: dict[str, _ParsedModule], diagnostics: DiagnosticBag) -> Program:
        known_modules = frozenset(parsed)
        modules: dict[str, ModuleSymbols] = {}
        classes: dict[str, ClassSymbol] = {}
        for name in sorted(parsed):
            scope = _build_scope(parsed[name], known_modules)
            modules[name] = scope
            for cls in _ClassReader(scope).read(parsed[name].tree):
                classes.setdefault(cls.identity, cls)
        logger.debug("Loaded %d modules and %d classes", len(modules), len(classes))
        return Program(
            modules=modules,
            classes={identity: classes[identity] for identity in sorted(classes)},
            load_diagnostics=diagnostics.to_tuple(),
        )


def _module_level_statements(body: Iterable[ast.stmt]) -> Iterable[ast.stmt]:
    """Yield statements executed at module level, entering ``if``/``try``/``with`` blocks."""
    for node in body:
        yield node
        if isinstance(node, ast.If):
            yield from _module_level_statements(node.body)
            yield from _module_level_statements(node.orelse)
        elif isinstance(node, ast.Try | ast.TryStar):
            yield from _module_level_statements(node.body)
            for handler in node.handlers:
                yield from _module_level_statements(handler.body)
            yield from _module_level_statements(node.orelse)
            yield from _module_level_statements(node.finalbody)
        elif isinstance(node, ast.With):
            yield from _module_level_statements(node.body)


def _build_scope(parsed: _ParsedModule, known_modules: frozenset[str]) -> ModuleSymbols:
    imports: dict[str, ImportBinding] = {}
    imported_modules: set[str] = set()
    local_names: set[str] = set()
    typevar_calls: dict[str, ast.expr] = {}

    for node in _module_level_statements(parsed.tree.body):
        if isinstance(node, ast.Import):
            for alias in node.names:
                prefix = alias.name.split(".")
                imported_modules.update(".".join(prefix[: i + 1]) for i in range(len(prefix)))
                if alias.asname:
                    imports[alias.asname] = ImportBinding(alias.name, is_module=True)
                else:
                    imports[prefix[0]] = ImportBinding(prefix[0], is_module=True)
        elif isinstance(node, ast.ImportFrom):
            base = resolve_relative_import(node.module, node.level, parsed.name, parsed.is_package)
            if base is None:
                continue
            for alias in node.names:
                if alias.name == "*":
                    continue
                imports[alias.asname or alias.name] = ImportBinding(f"{base}.{alias.name}", is_module=False)
        elif isinstance(node, ast.ClassDef | ast.FunctionDef | ast.AsyncFunctionDef):
            local_names.add(node.name)
        elif isinstance(node, ast.TypeAlias) and isinstance(node.name, ast.Name):
            local_names.add(node.name.id)
        elif isinstance(node, ast.AnnAssign) and isinstance(node.target, ast.Name):
            local_names.add(node.target.id)
        elif isinstance(node, ast.Assign):
            for target in node.targets:
                if isinstance(target, ast.Name):
                    local_names.add(target.id)
                    if isinstance(node.value, ast.Call):
                        typevar_calls[target.id] = node.value.func

    scope = ModuleSymbols(
        name=parsed.name,
        path=parsed.path,
        is_package=parsed.is_package,
        imports=imports,
        imported_modules=frozenset(imported_modules),
        local_names=frozenset(local_names - set(imports)),
        known_modules=known_modules,
    )
    typevars = frozenset(
        name
        for name, func in typevar_calls.items()
        if (resolved := scope.resolve_node(func)) is not None and resolved.name in _TYPEVAR_FACTORIES
    )
    return ModuleSymbols(
        name=scope.name,
        path=scope.path,
        is_package=scope.is_package,
        imports=scope.imports,
        imported_modules=scope.imported_modules,
        local_names=scope.local_names,
        typevars=typevars,
        known_modules=known_modules,
    )


def _literal(node: ast.expr) -> Any:
    try:
        return ast.literal_eval(node)
    except (ValueError, TypeError, SyntaxError, MemoryError, RecursionError):
        return None


class _ClassReader:
    """Extracts :class:`ClassSymbol` records from one module's AST."""

    def __init__(self, scope: ModuleSymbols) -> None:
        self._scope = scope

    def read(self, tree: ast.Module) -> list[ClassSymbol]:
        found: list[ClassSymbol] = []
        for node in _module_level_statements(tree.body):
            if isinstance(node, ast.ClassDef):
                self._read_class(node, prefix="", into=found)
        return found

    def _read_class(self, node: ast.ClassDef, prefix: str, into: list[ClassSymbol]) -> None:
        qualname = f"{prefix}{node.name}"
        into.append(
            ClassSymbol(
                identity=f"{self._scope.name}.{qualname}",
                name=node.name,
                qualname=qualname,
                module=self._scope.name,
                location=SourceLocation.of(node, self._scope.path),
                bases=tuple(self._base(base) for base in node.bases),
                decorators=tuple(self._decorator(d) for d in node.decorator_list),
                members=self._members(node),
                type_params=tuple(p.name for p in getattr(node, "type_params", ())),
                is_abstract=self._is_abstract(node),
                is_frozen=self._is_frozen(node),
            )
        )
        for item in node.body:
            if isinstance(item, ast.ClassDef):
                self._read_class(item, prefix=f"{qualname}.", into=into)

    def _base(self, node: ast.expr) -> BaseReference:
        if isinstance(node, ast.Subscript):
            args = node.slice.elts if isinstance(node.slice, ast.Tuple) else [node.slice]
            return BaseReference(name=self._scope.resolve_node(node.value), arguments=tuple(args))
        return BaseReference(name=self._scope.resolve_node(node))

    def _decorator(self, node: ast.expr) -> DecoratorSymbol:
        if isinstance(node, ast.Call):
            keywords = {kw.arg: _literal(kw.value) for kw in node.keywords if kw.arg is not None}
            return DecoratorSymbol(name=self._scope.resolve_node(node.func), keywords=keywords)
        return DecoratorSymbol(name=self._scope.resolve_node(node))

    def _members(self, node: ast.ClassDef) -> tuple[MemberSymbol, ...]:
        path = self._scope.path
        setters = {
            d.value.id
            for item in node.body
            if isinstance(item, ast.FunctionDef | ast.AsyncFunctionDef)
            for d in item.decorator_list
            if isinstance(d, ast.Attribute) and d.attr == "setter" and isinstance(d.value, ast.Name)
        }
        members: list[MemberSymbol] = []
        for item in node.body:
            location = SourceLocation.of(item, path)
            if isinstance(item, ast.AnnAssign) and isinstance(item.target, ast.Name):
                members.append(
                    MemberSymbol(
                        name=item.target.id,
                        kind=MemberKind.FIELD,
                        location=location,
                        annotation=item.annotation,
                        value=item.value,
                    )
                )
            elif isinstance(item, ast.Assign):
                members.extend(
                    MemberSymbol(name=t.id, kind=MemberKind.OTHER, location=location)
                    for t in item.targets
                    if isinstance(t, ast.Name)
                )
            elif isinstance(item, ast.FunctionDef | ast.AsyncFunctionDef):
                if self._is_accessor(item):
                    continue
                if self._is_property(item):
                    members.append(
                        MemberSymbol(
                            name=item.name,
                            kind=MemberKind.PROPERTY,
                            location=location,
                            annotation=item.returns,
                            has_setter=item.name in setters,
                        )
                    )
                else:
                    members.append(MemberSymbol(name=item.name, kind=MemberKind.OTHER, location=location))
            elif isinstance(item, ast.ClassDef):
                members.append(MemberSymbol(name=item.name, kind=MemberKind.OTHER, location=location))
        return tuple(members)

    def _is_property(self, node: ast.FunctionDef | ast.AsyncFunctionDef) -> bool:
        for decorator in node.decorator_list:
            resolved = self._scope.resolve_node(decorator)
            if resolved is not None and resolved.dotted == "builtins.property":
                return True
        return False

    @staticmethod
    def _is_accessor(node: ast.FunctionDef | ast.AsyncFunctionDef) -> bool:
        return any(
            isinstance(d, ast.Attribute) and d.attr in ("setter", "deleter") and isinstance(d.value, ast.Name)
            for d in node.decorator_list
        )

    def _is_abstract(self, node: ast.ClassDef) -> bool:
        for base in node.bases:
            target = base.value if isinstance(base, ast.Subscript) else base
            resolved = self._scope.resolve_node(target)
            if resolved is not None and resolved.dotted in _ABSTRACT_BASES:
                return True
        for keyword in node.keywords:
            if keyword.arg == "metaclass":
                resolved = self._scope.resolve_node(keyword.value)
                if resolved is not None and resolved.dotted in _ABSTRACT_METACLASSES:
                    return True
        for item in node.body:
            if isinstance(item, ast.FunctionDef | ast.AsyncFunctionDef):
                for decorator in item.decorator_list:
                    resolved = self._scope.resolve_node(decorator)
                    if resolved is not None and resolved.dotted in _ABSTRACT_DECORATORS:
                        return True
        return False

    def _is_frozen(self, node: ast.ClassDef) -> bool:
        for decorator in node.decorator_list:
            target = decorator.func if isinstance(decorator, ast.Call) else decorator
            resolved = self._scope.resolve_node(target)
            if resolved is None:
                continue
            if resolved.dotted in _ALWAYS_FROZEN:
                return True
            if resolved.dotted in _FROZEN_WHEN_FLAGGED and isinstance(decorator, ast.Call):
                if any(kw.arg == "frozen" and _literal(kw.value) is True for kw in decorator.keywords):
                    return True
        return False
