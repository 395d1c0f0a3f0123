"""Resolve command implementation - replace dependencies with workspace units."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..errors import RelinkError
from ..substitution.plugin import relink
from ..substitution.resolver import Substitution
from ..workspace.loader import open_workspace


def run_resolve(
    workspace_path: Path,
    mode: str | None = None,
    output_json: bool = False,
) -> int:
    """Run dependency substitution and report every replacement.

    Args:
        workspace_path: Workspace root directory
        mode: "staged" or "listener"; defaults to the relink.toml setting
        output_json: Print the replacements as JSON on stdout

    Returns:
        Exit code (0 = success, 1 = workspace error)
    """
    console = Console(stderr=True)

    try:
        workspace, config = open_workspace(workspace_path)
        effective_mode = mode or config.mode
        substitutions = relink(workspace, effective_mode)  # type: ignore[arg-type]
    except (RelinkError, ValueError) as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1

    if output_json:
        print(json.dumps([s.to_dict() for s in substitutions], indent=2))
        return 0

    console.print(
        f"Resolved {len(workspace.units_by_path)} units ({effective_mode} mode)",
        style="dim",
    )
    if not substitutions:
        console.print("No dependencies replaced.", style="yellow")
        return 0

    Console().print(_substitution_table(substitutions))
    return 0


def _substitution_table(substitutions: list[Substitution]) -> Table:
    table = Table(title="Replaced dependencies")
    table.add_column("Unit", style="cyan")
    table.add_column("Configuration")
    table.add_column("External dependency", style="red")
    table.add_column("Replaced by", style="green")

    for s in substitutions:
        table.add_row(s.unit_path, s.group_name, str(s.original), str(s.replacement))
    return table
