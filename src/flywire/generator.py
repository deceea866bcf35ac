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
"""Generation pipeline: load, collect, emit per context, write.

:func:`generate` is a pure function of a :class:`Program`; only
:func:`run_generation` touches the filesystem.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from pathlib import Path, PurePath

from flywire.analysis.collector import collect_eligible_types, discover_contexts
from flywire.analysis.diagnostics import Diagnostic, DiagnosticBag, Severity
from flywire.analysis.loader import ProgramLoader
from flywire.analysis.names import RuntimeNames
from flywire.analysis.symbols import Program
from flywire.codegen.emitter import DispatchEmitter, GeneratedSource
from flywire.core.config import config_properties
from flywire.kernel.exceptions import ArtifactWriteException

logger = logging.getLogger(__name__)


@config_properties(prefix="flywire.generator")
@dataclass
class GeneratorSettings:
    """Generator configuration (flywire.generator.*)."""

    source_roots: list[str] = field(default_factory=lambda: ["."])
    exclude: list[str] = field(default_factory=list)
    runtime_namespaces: list[str] = field(default_factory=lambda: sorted(RuntimeNames().namespaces))
    injectable_base: str = "Injectable"
    context_base: str = "ResolverContext"
    inject_marker: str = "Inject"
    inject_keyed_marker: str = "InjectKeyed"
    exclude_marker: str = "exclude_from_injection_generation"
    service_provider: str = "ServiceProvider"
    output_suffix: str = "_g"

    def runtime_names(self) -> RuntimeNames:
        return RuntimeNames(
            namespaces=frozenset(self.runtime_namespaces),
            injectable=self.injectable_base,
            resolver_context=self.context_base,
            inject=self.inject_marker,
            inject_keyed=self.inject_keyed_marker,
            exclude=self.exclude_marker,
            service_provider=self.service_provider,
        )


@dataclass(frozen=True)
class GenerationResult:
    """Artifacts and diagnostics of one generation pass.

    ``written`` lists the files :func:`run_generation` changed on disk; it is
    empty for :func:`generate` and for dry runs.
    """

    artifacts: tuple[GeneratedSource, ...] = ()
    diagnostics: tuple[Diagnostic, ...] = ()
    written: tuple[Path, ...] = ()

    @property
    def has_errors(self) -> bool:
        return any(d.severity == Severity.ERROR for d in self.diagnostics)


def generate(program: Program, settings: GeneratorSettings | None = None) -> GenerationResult:
    """Run analysis and emission over *program*."""
    settings = settings or GeneratorSettings()
    names = settings.runtime_names()
    diagnostics = DiagnosticBag()
    diagnostics.extend(program.load_diagnostics)

    types = collect_eligible_types(program, diagnostics, names)
    contexts = discover_contexts(program, names)
    logger.info("Found %d eligible types and %d resolver contexts", len(types), len(contexts))

    emitter = DispatchEmitter(output_suffix=settings.output_suffix)
    artifacts = _disambiguate(emitter.emit_all(contexts, types, diagnostics), set(program.modules))
    return GenerationResult(artifacts=tuple(artifacts), diagnostics=diagnostics.to_tuple())


def _disambiguate(artifacts: list[GeneratedSource], taken: set[str]) -> list[GeneratedSource]:
    """Give every artifact a module name no source module or earlier artifact uses."""
    unique: list[GeneratedSource] = []
    for artifact in artifacts:
        candidate = artifact
        counter = 2
        while candidate.module_name in taken:
            stem = PurePath(artifact.hint_name).stem
            hint_name = f"{stem}{counter}.py"
            package = artifact.module_name.rpartition(".")[0]
            candidate = dataclasses.replace(
                artifact,
                hint_name=hint_name,
                module_name=f"{package}.{stem}{counter}" if package else f"{stem}{counter}",
                path=artifact.path.with_name(hint_name),
            )
            counter += 1
        if candidate is not artifact:
            logger.debug("Renamed %s to %s to avoid a collision", artifact.module_name, candidate.module_name)
        taken.add(candidate.module_name)
        unique.append(candidate)
    return unique


def run_generation(
    settings: GeneratorSettings,
    base_dir: str | Path = ".",
    write: bool = True,
) -> GenerationResult:
    """Load the configured source roots, generate, and write changed artifacts.

    Roots are resolved against *base_dir*. Files whose content is unchanged
    are left untouched.

    Raises:
        SourceRootNotFoundException: If a source root does not exist.
        ArtifactWriteException: If a generated module cannot be written.
    """
    base = Path(base_dir)
    roots = [base / root for root in settings.source_roots]
    program = ProgramLoader(exclude=settings.exclude).load(roots)
    result = generate(program, settings)
    if not write:
        return result

    written: list[Path] = []
    for artifact in result.artifacts:
        path = Path(artifact.path)
        if _write_if_changed(path, artifact.text):
            logger.info("Wrote %s", path)
            written.append(path)
        else:
            logger.debug("Unchanged %s", path)
    return dataclasses.replace(result, written=tuple(written))


def _write_if_changed(path: Path, text: str) -> bool:
    try:
        if path.is_file() and path.read_text(encoding="utf-8") == text:
            return False
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except (OSError, UnicodeError) as exc:
        raise ArtifactWriteException(path, str(exc)) from exc
    return True
