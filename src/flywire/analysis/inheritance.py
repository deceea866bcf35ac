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
"""Inheritance Walker — nominal base-class checks over the static program."""

from __future__ import annotations

import logging

from flywire.analysis.symbols import ClassSymbol, Program

logger = logging.getLogger(__name__)


def inherits_from(program: Program, cls: ClassSymbol, name: str, namespaces: frozenset[str]) -> bool:
    """Return ``True`` when any ancestor of *cls* is ``<namespace>.<name>``.

    Ancestors are compared by simple name and containing namespace, so a base
    re-exported from several modules matches through any of them. The walk is
    depth-first and left to right and stops at classes outside the program.
    *cls* itself never matches.
    """
    visited: set[str] = {cls.identity}
    stack = list(reversed(cls.bases))
    while stack:
        base = stack.pop()
        if base.name is None:
            continue
        if base.name.matches(name, namespaces):
            return True
        parent = program.find_class(base.name)
        if parent is None or parent.identity in visited:
            continue
        visited.add(parent.identity)
        if parent.name == name and parent.module in namespaces:
            return True
        stack.extend(reversed(parent.bases))
    return False


def program_bases(program: Program, cls: ClassSymbol) -> list[ClassSymbol]:
    """Direct bases of *cls* that are declared in the program, in order."""
    found: list[ClassSymbol] = []
    for base in cls.bases:
        parent = program.find_class(base.name)
        if parent is not None and parent.identity != cls.identity and parent not in found:
            found.append(parent)
    return found


def linearize(program: Program, cls: ClassSymbol) -> list[ClassSymbol]:
    """Method resolution order of *cls* restricted to program classes.

    Uses C3 linearization; when the hierarchy has no consistent C3 order the
    result falls back to depth-first, left-to-right order without duplicates.
    """
    try:
        return _c3(program, cls, ())
    except _InconsistentHierarchy:
        logger.debug("No consistent C3 order for %s; using depth-first order", cls.identity)
        return _depth_first(program, cls)


class _InconsistentHierarchy(Exception):
    pass


def _c3(program: Program, cls: ClassSymbol, active: tuple[str, ...]) -> list[ClassSymbol]:
    if cls.identity in active:
        raise _InconsistentHierarchy(cls.identity)
    active = (*active, cls.identity)
    bases = program_bases(program, cls)
    sequences = [_c3(program, base, active) for base in bases]
    sequences.append(list(bases))
    result = [cls]
    while True:
        sequences = [seq for seq in sequences if seq]
        if not sequences:
            return result
        for seq in sequences:
            head = seq[0]
            if not any(head in other[1:] for other in sequences):
                break
        else:
            raise _InconsistentHierarchy(cls.identity)
        result.append(head)
        for seq in sequences:
            if seq[0] == head:
                del seq[0]


def _depth_first(program: Program, cls: ClassSymbol) -> list[ClassSymbol]:
    order: list[ClassSymbol] = []
    seen: set[str] = set()

    def visit(current: ClassSymbol) -> None:
        if current.identity in seen:
            return
        seen.add(current.identity)
        order.append(current)
        for base in program_bases(program, current):
            visit(base)

    visit(cls)
    return order
