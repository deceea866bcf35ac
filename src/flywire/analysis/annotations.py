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
"""Helpers for reading type annotations out of the AST."""

from __future__ import annotations

import ast
from dataclasses import dataclass

from flywire.analysis.symbols import ModuleSymbols, QualifiedName, dotted_chain

_TYPING_MODULES = frozenset({"typing", "typing_extensions"})


def typing_name(scope: ModuleSymbols, node: ast.expr) -> str | None:
    """Return ``"ClassVar"`` for ``typing.ClassVar`` (or the typing_extensions twin)."""
    resolved = scope.resolve_node(node)
    if resolved is None or resolved.namespace not in _TYPING_MODULES:
        return None
    return resolved.name


def parse_forward_reference(node: ast.expr) -> ast.expr:
    """Parse a string annotation (``"Repo"``) into an expression."""
    if isinstance(node, ast.Constant) and isinstance(node.value, str):
        try:
            return ast.parse(node.value.strip(), mode="eval").body
        except SyntaxError:
            return node
    return node


def subscript_arguments(node: ast.Subscript) -> list[ast.expr]:
    if isinstance(node.slice, ast.Tuple):
        return list(node.slice.elts)
    return [node.slice]


def unwrap_annotated(scope: ModuleSymbols, node: ast.expr) -> tuple[ast.expr, list[ast.expr]]:
    """Split ``Annotated[T, m1, m2]`` into ``(T, [m1, m2])``; nesting is flattened."""
    node = parse_forward_reference(node)
    metadata: list[ast.expr] = []
    while isinstance(node, ast.Subscript) and typing_name(scope, node.value) == "Annotated":
        args = subscript_arguments(node)
        metadata.extend(args[1:])
        node = parse_forward_reference(args[0])
    return node, metadata


def strip_qualifier(scope: ModuleSymbols, node: ast.expr, qualifier: str) -> ast.expr | None:
    """Return ``T`` for ``ClassVar[T]`` / ``Final[T]``; ``None`` when *node* is not that qualifier.

    A bare ``Final`` returns the node itself so callers can still detect it.
    """
    if isinstance(node, ast.Subscript) and typing_name(scope, node.value) == qualifier:
        return unwrap_annotated(scope, subscript_arguments(node)[0])[0]
    if typing_name(scope, node) == qualifier:
        return node
    return None


def strip_optional(scope: ModuleSymbols, node: ast.expr) -> ast.expr:
    """Remove ``Optional[...]``, ``Union[T, None]`` and ``T | None`` wrappers."""
    while True:
        node, _ = unwrap_annotated(scope, node)
        if isinstance(node, ast.Subscript):
            name = typing_name(scope, node.value)
            if name == "Optional":
                node = subscript_arguments(node)[0]
                continue
            if name == "Union":
                remaining = [a for a in subscript_arguments(node) if not _is_none(a)]
                if len(remaining) == 1:
                    node = remaining[0]
                    continue
            return node
        if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
            operands = [a for a in _flatten_union(node) if not _is_none(a)]
            if len(operands) == 1:
                node = operands[0]
                continue
        return node


def _flatten_union(node: ast.expr) -> list[ast.expr]:
    if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
        return [*_flatten_union(node.left), *_flatten_union(node.right)]
    return [parse_forward_reference(node)]


def _is_none(node: ast.expr) -> bool:
    node = parse_forward_reference(node)
    return isinstance(node, ast.Constant) and node.value is None


@dataclass(frozen=True)
class TypeExpression:
    """A type expression rewritten to fully-qualified dotted names.

    Attributes:
        text: Source text valid in a module that imports every entry of
            ``modules``.
        modules: Modules the text refers to (``builtins`` excluded).
        name: Resolved name when the expression is a plain name, else ``None``.
    """

    text: str
    modules: frozenset[str]
    name: QualifiedName | None = None


class _Qualifier(ast.NodeTransformer):
    def __init__(self, scope: ModuleSymbols) -> None:
        self._scope = scope
        self.modules: set[str] = set()

    def _qualified(self, node: ast.expr) -> ast.expr:
        resolved = self._scope.resolve_node(node)
        if resolved is None:
            return node
        if not resolved.is_builtin and resolved.module:
            self.modules.add(resolved.module)
        return ast.copy_location(ast.parse(resolved.render(), mode="eval").body, node)

    def visit_Name(self, node: ast.Name) -> ast.expr:
        return self._qualified(node)

    def visit_Attribute(self, node: ast.Attribute) -> ast.expr:
        if dotted_chain(node) is not None:
            return self._qualified(node)
        return self.generic_visit(node)

    def visit_Constant(self, node: ast.Constant) -> ast.expr:
        if isinstance(node.value, str):
            parsed = parse_forward_reference(node)
            if parsed is not node:
                return self.visit(parsed)
        return node

    def visit_Subscript(self, node: ast.Subscript) -> ast.expr:
        if typing_name(self._scope, node.value) == "Literal":
            node.value = self.visit(node.value)
            return node
        return self.generic_visit(node)


def qualify(scope: ModuleSymbols, node: ast.expr) -> TypeExpression:
    """Rewrite *node* so it can be evaluated from a generated module."""
    node = parse_forward_reference(node)
    transformer = _Qualifier(scope)
    rewritten = transformer.visit(_clone(node))
    return TypeExpression(
        text=ast.unparse(rewritten),
        modules=frozenset(transformer.modules),
        name=scope.resolve_node(node),
    )


def _clone(node: ast.expr) -> ast.expr:
    return ast.parse(ast.unparse(node), mode="eval").body
