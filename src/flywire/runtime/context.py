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
"""Base types that generated modules complete."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from flywire.runtime.provider import ServiceProvider


def type_identity(cls: type) -> str:
    """Return the dispatch identity of *cls* (``module.qualname``)."""
    return f"{cls.__module__}.{cls.__qualname__}"


@runtime_checkable
class TypeInjector(Protocol):
    """Performs every field assignment for exactly one injectable type."""

    def inject(self, provider: ServiceProvider, instance: Any) -> None: ...


class NoOpInjector:
    """Shared injector for eligible types that declare no injectable fields."""

    __slots__ = ()

    def inject(self, provider: ServiceProvider, instance: Any) -> None:
        return None

    def __repr__(self) -> str:
        return "NO_OP_INJECTOR"


NO_OP_INJECTOR = NoOpInjector()


class _UnsupportedKey:
    """Sentinel emitted in place of a service key that has no literal form."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "<unsupported key type>"


UNSUPPORTED_KEY: Any = _UnsupportedKey()


class Injectable:
    """Base class of entities eligible for generated field injection."""


class ResolverContext:
    """Dispatch root mapping a runtime type identity to a generated injector.

    Declare a subclass anywhere in the program; ``flywire generate`` writes a
    module beside it containing a same-named subclass that overrides
    :meth:`get_type_injector`. This base answers ``None`` for every type,
    which tells callers to fall back to reflection-based injection.
    """

    def get_type_injector(self, type_name: str) -> TypeInjector | None:
        return None

    def get_injector_for(self, cls: type) -> TypeInjector | None:
        """Return the generated injector for *cls*, or ``None``."""
        return self.get_type_injector(type_identity(cls))

    def inject(self, provider: ServiceProvider, instance: Any) -> bool:
        """Inject *instance* through its generated injector.

        Returns:
            ``True`` when a generated injector handled the instance, ``False``
            when the caller has to use its reflection fallback.
        """
        injector = self.get_injector_for(type(instance))
        if injector is None:
            return False
        injector.inject(provider, instance)
        return True
