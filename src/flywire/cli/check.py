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
"""'flywire check' — Report diagnostics without writing anything."""

from __future__ import annotations

from pathlib import Path

import click
from rich.markup import escape

from flywire.cli.console import console, print_diagnostics, print_summary_table
from flywire.cli.generate import load_settings
from flywire.generator import run_generation
from flywire.kernel.exceptions import FlywireException


@click.command()
@click.argument("source_roots", nargs=-1, type=click.Path(file_okay=False))
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="Configuration file (YAML or TOML).",
)
def check_command(source_roots: tuple[str, ...], config_path: Path | None) -> None:
    """Analyse SOURCE_ROOTS and print diagnostics; exits 1 on errors."""
    try:
        base_dir, settings = load_settings(config_path, source_roots)
        result = run_generation(settings, base_dir=base_dir, write=False)
    except FlywireException as exc:
        console.print(f"[error]Error:[/error] {escape(str(exc))}", soft_wrap=True)
        raise SystemExit(2) from exc

    print_diagnostics(result.diagnostics)
    print_summary_table(result.diagnostics)
    if result.has_errors:
        console.print("  [error]Errors found.[/error]")
        raise SystemExit(1)
    console.print(f"  [success]No errors.[/success] {len(result.artifacts)} context(s) ready to generate.")
