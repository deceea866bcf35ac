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
"""'flywire generate' — Write generated resolver-context modules."""

from __future__ import annotations

from pathlib import Path

import click
from rich.markup import escape

from flywire.cli.console import console, print_diagnostics
from flywire.core.config import Config
from flywire.generator import GeneratorSettings, run_generation
from flywire.kernel.exceptions import FlywireException
from flywire.logging import create_logging_adapter


def load_settings(config_path: Path | None, source_roots: tuple[str, ...]) -> tuple[Path, GeneratorSettings]:
    """Load configuration, configure logging, and bind the generator settings.

    Returns the project directory roots are resolved against (the config
    file's directory, or the working directory) and the bound settings.
    """
    base_dir = config_path.parent if config_path is not None else Path.cwd()
    config = Config.from_sources(base_dir, config_file=config_path)

    adapter = create_logging_adapter(config)
    adapter.configure(config)

    settings = config.bind(GeneratorSettings)
    if source_roots:
        settings.source_roots = [str(Path(root).resolve()) for root in source_roots]
    return base_dir, settings


@click.command()
@click.argument("source_roots", nargs=-1, type=click.Path(file_okay=False))
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (YAML or TOML).",
)
@click.option("--dry-run", is_flag=True, default=False, help="Report what would be written without writing.")
def generate_command(source_roots: tuple[str, ...], config_path: Path | None, dry_run: bool) -> None:
    """Generate injector modules for every resolver context under SOURCE_ROOTS."""
    try:
        base_dir, settings = load_settings(config_path, source_roots)
        result = run_generation(settings, base_dir=base_dir, write=not dry_run)
    except FlywireException as exc:
        console.print(f"[error]Error:[/error] {escape(str(exc))}", soft_wrap=True)
        raise SystemExit(2) from exc

    print_diagnostics(result.diagnostics)

    written = set(result.written)
    for artifact in result.artifacts:
        path = escape(str(artifact.path))
        if dry_run:
            console.print(f"  [info]would write[/info] {path}", soft_wrap=True)
        elif Path(artifact.path) in written:
            console.print(f"  [success]✓[/success] wrote {path}", soft_wrap=True)
        else:
            console.print(f"  [dim]unchanged[/dim] {path}", soft_wrap=True)

    console.print(
        f"\n  {len(result.artifacts)} module(s), {len(result.written)} written, "
        f"{len(result.diagnostics)} diagnostic(s)"
    )
    if result.has_errors:
        raise SystemExit(1)
