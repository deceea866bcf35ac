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
"""Collection Shape Classifier.

Decides whether a field asks for one service or for every registration of an
element type, and how the provider's result has to be materialised to fit the
declared container.
"""

from __future__ import annotations

import ast
from dataclasses import dataclass
from enum import StrEnum

from flywire.analysis.annotations import (
    TypeExpression,
    parse_forward_reference,
    qualify,
    strip_optional,
    subscript_arguments,
)
from flywire.analysis.symbols import ModuleSymbols


class Materialization(StrEnum):
    """How the provider's iterable is converted before assignment."""

    NONE = "none"
    TO_FIXED_ARRAY = "tuple"
    TO_GROWABLE_LIST = "list"


@dataclass(frozen=True)
class Scalar:
    """A single service of the declared type."""


@dataclass(frozen=True)
class Collection:
    """Every registration of ``element``, materialised as ``materialization``."""

    element: TypeExpression
    materialization: Materialization


Shape = Scalar | Collection

SCALAR = Scalar()

_TUPLE_NAMES = frozenset({"builtins.tuple", "typing.Tuple", "typing_extensions.Tuple"})

_SINGLE_ARGUMENT_SHAPES: dict[str, Materialization] = {
    "typing.Iterable": Materialization.NONE,
    "collections.abc.Iterable": Materialization.NONE,
    "typing.Collection": Materialization.TO_FIXED_ARRAY,
    "collections.abc.Collection": Materialization.TO_FIXED_ARRAY,
    "typing.Sequence": Materialization.TO_FIXED_ARRAY,
    "collections.abc.Sequence": Materialization.TO_FIXED_ARRAY,
    "builtins.list": Materialization.TO_GROWABLE_LIST,
    "typing.List": Materialization.TO_GROWABLE_LIST,
    "typing.MutableSequence": Materialization.TO_GROWABLE_LIST,
    "collections.abc.MutableSequence": Materialization.TO_GROWABLE_LIST,
}


def classify(scope: ModuleSymbols, annotation: ast.expr) -> Shape:
    """Classify a field annotation as it appears in *scope*.

    ``Annotated`` and ``Optional`` wrappers are transparent. Multi-argument
    generics, ``set``/``dict`` and every non-generic type are :data:`SCALAR`.
    """
    node = strip_optional(scope, annotation)
    if not isinstance(node, ast.Subscript):
        return SCALAR
    origin = scope.resolve_node(node.value)
    if origin is None:
        return SCALAR
    args = subscript_arguments(node)

    if origin.dotted in _TUPLE_NAMES:
        if len(args) == 2 and _is_ellipsis(args[1]):
            return Collection(qualify(scope, args[0]), Materialization.TO_FIXED_ARRAY)
        return SCALAR

    materialization = _SINGLE_ARGUMENT_SHAPES.get(origin.dotted)
    if materialization is None or len(args) != 1:
        return SCALAR
    return Collection(qualify(scope, args[0]), materialization)


def _is_ellipsis(node: ast.expr) -> bool:
    node = parse_forward_reference(node)
    return isinstance(node, ast.Constant) and node.value is Ellipsis
