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
"""Dispatch Emitter — renders one generated module per resolver context."""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import PurePath

from flywire.analysis.collector import InjectableType, ResolverContextDeclaration
from flywire.analysis.diagnostics import (
    MULTIPLE_CONTEXTS,
    NO_ELIGIBLE_TYPES,
    UNSUPPORTED_GENERIC_CONTEXT,
    DiagnosticBag,
)
from flywire.analysis.fields import FieldInjection
from flywire.analysis.keys import format_key_literal, is_unsupported
from flywire.analysis.shapes import Collection, Materialization
from flywire.analysis.symbols import GENERATED_FILE_HEADER
from flywire.codegen.templates import (
    CONTEXT_CLASS_TEMPLATE,
    DISPATCH_TABLE_TEMPLATE,
    EXPORTS_TEMPLATE,
    IMPORTS_TEMPLATE,
    INJECTOR_CLASS_TEMPLATE,
    MODULE_DOCSTRING_TEMPLATE,
    create_environment,
)

logger = logging.getLogger(__name__)

_INDENT = " " * 4
_RUNTIME_MODULE = "flywire.runtime"
_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


@dataclass(frozen=True)
class _BodyNames:
    """Parameter and local names of an injector body.

    Type expressions in the body are dotted from their top-level package, so
    none of these may equal an imported package root.
    """

    provider: str = "provider"
    instance: str = "instance"
    service: str = "service"

    @classmethod
    def avoiding(cls, modules: set[str]) -> _BodyNames:
        roots = {module.partition(".")[0] for module in modules}

        def pick(name: str) -> str:
            while name in roots:
                name += "_"
            return name

        return cls(provider=pick("provider"), instance=pick("instance"), service=pick("service"))


@dataclass(frozen=True)
class GeneratedSource:
    """One generated module.

    Attributes:
        context_identity: Identity of the resolver context it completes.
        hint_name: File name (``app_context_g.py``).
        module_name: Importable dotted name of the generated module.
        path: File path beside the context's module.
        text: Full module source.
    """

    context_identity: str
    hint_name: str
    module_name: str
    path: PurePath
    text: str


def snake_case(name: str) -> str:
    """``AppContext`` -> ``app_context``; ``HTTPContext`` -> ``http_context``."""
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def assign_short_names(types: Sequence[InjectableType]) -> dict[str, str]:
    """Map identity to a unique short name: ``Name``, then ``Name1``, ``Name2``..."""
    used: set[str] = set()
    names: dict[str, str] = {}
    for injectable in types:
        candidate = injectable.name
        counter = 1
        while candidate in used:
            candidate = f"{injectable.name}{counter}"
            counter += 1
        used.add(candidate)
        names[injectable.identity] = candidate
    return names


def artifact_location(context: ResolverContextDeclaration, suffix: str) -> tuple[str, str, PurePath]:
    """Return ``(hint_name, module_name, path)`` for the context's generated module."""
    stem = f"{snake_case(context.name)}{suffix}"
    hint_name = f"{stem}.py"
    package = context.module if context.is_package else context.module.rpartition(".")[0]
    module_name = f"{package}.{stem}" if package else stem
    return hint_name, module_name, PurePath(context.path).parent / hint_name


class DispatchEmitter:
    """Renders generated resolver-context modules.

    Args:
        output_suffix: Appended to the snake-cased context name to form the
            generated module's name.
    """

    def __init__(self, output_suffix: str = "_g") -> None:
        self._output_suffix = output_suffix
        env = create_environment()
        self._docstring_template = env.from_string(MODULE_DOCSTRING_TEMPLATE)
        self._imports_template = env.from_string(IMPORTS_TEMPLATE)
        self._exports_template = env.from_string(EXPORTS_TEMPLATE)
        self._context_template = env.from_string(CONTEXT_CLASS_TEMPLATE)
        self._injector_template = env.from_string(INJECTOR_CLASS_TEMPLATE)
        self._dispatch_template = env.from_string(DISPATCH_TABLE_TEMPLATE)

    def emit_all(
        self,
        contexts: Sequence[ResolverContextDeclaration],
        types: Sequence[InjectableType],
        diagnostics: DiagnosticBag,
    ) -> list[GeneratedSource]:
        """Emit a module for every non-generic context, in identity order."""
        generated: list[GeneratedSource] = []
        for context in sorted(contexts, key=lambda c: c.identity):
            if context.generic_arity > 0:
                diagnostics.report(UNSUPPORTED_GENERIC_CONTEXT, context.location, context.name)
                continue
            if generated:
                diagnostics.report(MULTIPLE_CONTEXTS, context.location, context.name)
            generated.append(self.emit(context, types, diagnostics))
        return generated

    def emit(
        self,
        context: ResolverContextDeclaration,
        types: Sequence[InjectableType],
        diagnostics: DiagnosticBag,
    ) -> GeneratedSource:
        """Render the generated module for one context."""
        types = sorted(types, key=lambda t: t.identity)
        if not types:
            diagnostics.report(NO_ELIGIBLE_TYPES, context.location, context.name)
        short_names = assign_short_names(types)

        modules: set[str] = {context.module}
        for injectable in types:
            for field in injectable.fields:
                modules.update(_field_modules(field))
        names = _BodyNames.avoiding(modules)
        runtime_imports: set[str] = {"TypeInjector"}
        typing_imports: set[str] = {"final"} if context.is_final else set()
        injector_blocks: list[str] = []
        entries: list[tuple[str, str]] = []

        for injectable in types:
            if not injectable.fields:
                runtime_imports.add("NO_OP_INJECTOR")
                entries.append((format_key_literal(injectable.identity), "NO_OP_INJECTOR"))
                continue
            class_name = f"_{short_names[injectable.identity]}Injector"
            body: list[str] = []
            for field in injectable.fields:
                body.extend(self._field_statements(field, names=names, runtime_imports=runtime_imports))
            runtime_imports.add("ServiceProvider")
            typing_imports.add("Any")
            injector_blocks.append(
                self._injector_template.render(
                    class_name=class_name,
                    identity=injectable.identity,
                    provider=names.provider,
                    instance=names.instance,
                    body=body,
                ).rstrip()
            )
            entries.append((format_key_literal(injectable.identity), f"{class_name}()"))

        blocks = [
            self._context_template.render(
                is_final=context.is_final,
                class_name=context.name,
                base=f"{context.module}.{context.qualname}",
                has_types=bool(types),
            ).rstrip(),
            *injector_blocks,
        ]
        if entries:
            blocks.append(self._dispatch_template.render(entries=entries).rstrip())

        preamble = "\n\n".join(
            [
                self._docstring_template.render(
                    header=GENERATED_FILE_HEADER,
                    context_identity=context.identity,
                ).rstrip(),
                self._render_imports(
                    modules=modules,
                    runtime_imports=runtime_imports,
                    typing_imports=typing_imports,
                ),
                self._exports_template.render(
                    exported=[format_key_literal(context.name)] if context.is_public else [],
                ).rstrip(),
            ]
        )
        text = preamble + "\n\n\n" + "\n\n\n".join(blocks) + "\n"

        hint_name, module_name, path = artifact_location(context, self._output_suffix)
        logger.debug("Rendered %s for context %s (%d types)", module_name, context.identity, len(types))
        return GeneratedSource(
            context_identity=context.identity,
            hint_name=hint_name,
            module_name=module_name,
            path=path,
            text=text,
        )

    def _render_imports(self, *, modules: set[str], runtime_imports: set[str], typing_imports: set[str]) -> str:
        return self._imports_template.render(
            typing_imports=sorted(typing_imports),
            modules=sorted(m for m in modules if m != _RUNTIME_MODULE),
            runtime_imports=sorted(runtime_imports),
        ).rstrip()

    def _field_statements(
        self,
        field: FieldInjection,
        *,
        names: _BodyNames,
        runtime_imports: set[str],
    ) -> list[str]:
        provider = names.provider
        target = f"{names.instance}.{field.name}"
        if field.is_provider:
            return [f"{target} = {provider}"]

        key = ""
        if field.keyed:
            literal = format_key_literal(field.key)
            if is_unsupported(literal):
                runtime_imports.add(literal)
            key = f", {literal}"

        if isinstance(field.shape, Collection):
            method = "get_keyed_services" if field.keyed else "get_services"
            call = f"{provider}.{method}({field.shape.element.text}{key})"
            if field.shape.materialization == Materialization.TO_FIXED_ARRAY:
                call = f"tuple({call})"
            elif field.shape.materialization == Materialization.TO_GROWABLE_LIST:
                call = f"list({call})"
            return [f"{target} = {call}"]

        service_type = field.field_type.text
        if field.required:
            method = "get_required_keyed_service" if field.keyed else "get_required_service"
            return [f"{target} = {provider}.{method}({service_type}{key})"]
        method = "get_keyed_service" if field.keyed else "get_service"
        return [
            f"{names.service} = {provider}.{method}({service_type}{key})",
            f"if {names.service} is not None:",
            f"{_INDENT}{target} = {names.service}",
        ]


def _field_modules(field: FieldInjection) -> frozenset[str]:
    """Modules the field's generated statements refer to."""
    if field.is_provider:
        return frozenset()
    if isinstance(field.shape, Collection):
        return field.shape.element.modules
    return field.field_type.modules
