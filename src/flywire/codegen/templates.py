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
"""Jinja2 templates for generated resolver-context modules.

Each template renders one top-level block; the emitter joins the blocks with
the blank-line spacing of a formatted module.
"""

from __future__ import annotations

from textwrap import dedent

from jinja2 import Environment, StrictUndefined

MODULE_DOCSTRING_TEMPLATE = dedent(
    '''
    {{ header }}
    """Generated field injectors for ``{{ context_identity }}``.

    Do not edit: this module is rewritten by ``flywire generate``.
    """
    ''',
).strip()

IMPORTS_TEMPLATE = dedent(
    """
    from __future__ import annotations
    {% if typing_imports %}

    from typing import {{ typing_imports | join(", ") }}
    {% endif %}

    {% for module in modules %}
    import {{ module }}
    {% endfor %}
    from flywire.runtime import {{ runtime_imports | join(", ") }}
    """,
).strip()

EXPORTS_TEMPLATE = dedent(
    """
    {% if exported %}
    __all__ = [{{ exported | join(", ") }}]
    {% else %}
    __all__: list[str] = []
    {% endif %}
    """,
).strip()

CONTEXT_CLASS_TEMPLATE = dedent(
    '''
    {% if is_final %}
    @final
    {% endif %}
    class {{ class_name }}({{ base }}):
        """Resolver context with generated injectors for every eligible type."""

        def get_type_injector(self, type_name: str) -> TypeInjector | None:
            {% if has_types %}
            return _INJECTORS.get(type_name)
            {% else %}
            return None  # No eligible types found for context '{{ class_name }}'.
            {% endif %}
    ''',
).strip()

INJECTOR_CLASS_TEMPLATE = dedent(
    '''
    class {{ class_name }}:
        """Injects ``{{ identity }}``."""

        __slots__ = ()

        def inject(self, {{ provider }}: ServiceProvider, {{ instance }}: Any) -> None:
            {% for line in body %}
            {{ line }}
            {% endfor %}
    ''',
).strip()

DISPATCH_TABLE_TEMPLATE = dedent(
    """
    _INJECTORS: dict[str, TypeInjector] = {
        {% for identity, injector in entries %}
        {{ identity }}: {{ injector }},
        {% endfor %}
    }
    """,
).strip()


def create_environment() -> Environment:
    """Create the Jinja2 environment used for generated Python source."""
    return Environment(
        autoescape=False,
        keep_trailing_newline=True,
        lstrip_blocks=True,
        trim_blocks=True,
        undefined=StrictUndefined,
    )
