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
"""Declarative markers read by the injection code generator.

The markers carry no behaviour at runtime. ``flywire generate`` reads them
from the source text and emits direct assignments for every marked field.
"""

from __future__ import annotations

from typing import Any, TypeVar

T = TypeVar("T", bound=type)


class Inject:
    """Marks a class attribute for generated field injection.

    Usage::

        class OrderView(Injectable):
            repo: OrderRepository = Inject()
            metrics: Annotated[MetricsCollector | None, Inject(required=False)] = None
            audit: Annotated[AuditLog, Inject()]

    Args:
        required: If ``False``, an unresolvable service leaves the field at its
            prior value instead of failing the injection call. Defaults to
            ``True``.

    When used as the assigned value, the marker itself is the class default, so
    an optional field declared as ``x: T = Inject(required=False)`` still holds
    the marker if its service is missing. Declare optional fields as
    ``x: Annotated[T | None, Inject(required=False)] = None`` instead.
    """

    __slots__ = ("required",)

    def __init__(self, required: bool = True) -> None:
        self.required = required

    def __repr__(self) -> str:
        if not self.required:
            return "Inject(required=False)"
        return "Inject()"


class InjectKeyed:
    """Marks a class attribute for keyed generated field injection.

    Usage::

        class OrderView(Injectable):
            cache: CacheAdapter = InjectKeyed("redis")
            fallback: Annotated[CacheAdapter | None, InjectKeyed("memory", required=False)] = None

    Args:
        key: Service key; a ``str``, ``bool``, ``int``, ``float`` or ``None``
            literal.
        required: If ``False``, an unresolvable service leaves the field at its
            prior value. Defaults to ``True``.
    """

    __slots__ = ("key", "required")

    def __init__(self, key: Any, required: bool = True) -> None:
        self.key = key
        self.required = required

    def __repr__(self) -> str:
        parts = [repr(self.key)]
        if not self.required:
            parts.append("required=False")
        return f"InjectKeyed({', '.join(parts)})"


def exclude_from_injection_generation(cls: T) -> T:
    """Opt a class out of injector generation.

    The class keeps whatever runtime injection strategy the resolver context
    falls back to when no generated injector exists.
    """
    cls.__flywire_excluded__ = True  # type: ignore[attr-defined]
    return cls
