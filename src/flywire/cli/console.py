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
"""Shared Rich console for CLI output."""

from __future__ import annotations

from collections.abc import Iterable

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.theme import Theme

from flywire.analysis.diagnostics import Diagnostic, Severity

FLYWIRE_THEME = Theme({
    "info": "cyan",
    "success": "bold green",
    "warning": "bold yellow",
    "error": "bold red",
    "flywire": "bold magenta",
    "dim": "dim",
})

console = Console(theme=FLYWIRE_THEME)

_SEVERITY_STYLES = {
    Severity.ERROR: "error",
    Severity.WARNING: "warning",
    Severity.INFO: "info",
}


def print_banner() -> None:
    """Print the flywire banner."""
    from flywire import __version__

    console.print("[flywire]flywire[/flywire] [dim]build-time field injection[/dim]")
    console.print(f"  [dim]:: flywire :: (v{__version__})[/dim]")
    console.print("  [dim]Copyright 2026 Firefly Software Solutions Inc. | Apache 2.0 License[/dim]\n")


def print_diagnostics(diagnostics: Iterable[Diagnostic]) -> None:
    """Print one line per diagnostic: ``path:line:col: severity CODE: message``."""
    for diagnostic in diagnostics:
        style = _SEVERITY_STYLES[diagnostic.severity]
        where = escape(str(diagnostic.location)) if diagnostic.location is not None else "<program>"
        console.print(
            f"  {where}: [{style}]{diagnostic.severity} {diagnostic.code}[/{style}]: {escape(diagnostic.message)}",
            soft_wrap=True,
        )


def print_summary_table(diagnostics: Iterable[Diagnostic]) -> None:
    """Print a count of diagnostics per severity."""
    counts = {severity: 0 for severity in Severity}
    for diagnostic in diagnostics:
        counts[diagnostic.severity] += 1

    table = Table(title="Diagnostics", border_style="dim")
    table.add_column("Severity", style="bold")
    table.add_column("Count", justify="right")
    for severity in Severity:
        style = _SEVERITY_STYLES[severity]
        table.add_row(f"[{style}]{severity}[/{style}]", str(counts[severity]))
    console.print(table)
