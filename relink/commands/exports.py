"""Exports command implementation - dump the export index."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..errors import RelinkError
from ..substitution.index import build_export_index
from ..workspace.loader import open_workspace


def run_exports(workspace_path: Path, output_json: bool = False) -> int:
    """Evaluate all units and list which output groups export which artifacts."""
    console = Console(stderr=True)

    try:
        workspace, _ = open_workspace(workspace_path)
        workspace.evaluate_all()
    except (RelinkError, ValueError) as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1

    index = build_export_index(workspace.units)

    if output_json:
        data = {
            str(key): [{"path": e.unit_path, "configuration": e.group_name} for e in entries]
            for key, entries in index.items()
        }
        print(json.dumps(data, indent=2))
        return 0

    if not len(index):
        console.print("No exported artifacts.", style="yellow")
        return 0

    table = Table(title="Exported artifacts")
    table.add_column("Artifact", style="cyan")
    table.add_column("Exported by")
    for key, entries in index.items():
        table.add_row(str(key), "\n".join(str(e) for e in entries))

    Console().print(table)
    return 0
