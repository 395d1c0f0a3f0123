"""Explain command implementation - show how dependencies match exports."""

from __future__ import annotations

import json
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from ..errors import OutputGroupNotFoundError, RelinkError
from ..substitution.index import build_export_index
from ..substitution.resolver import Explanation, explain_dependency
from ..workspace.loader import open_workspace


def run_explain(workspace_path: Path, unit_path: str, group_name: str, output_json: bool = False) -> int:
    """Explain, per external dependency of one output group, which unit would replace it.

    Nothing is modified: the index is built after evaluating all units and
    each dependency is only looked up.
    """
    console = Console(stderr=True)

    try:
        workspace, _ = open_workspace(workspace_path)
        workspace.evaluate_all()
        unit = workspace.get_unit(unit_path)
        group = unit.find_output_group(group_name)
        if group is None:
            raise OutputGroupNotFoundError(unit_path, group_name)
    except (RelinkError, ValueError) as e:
        console.print(f"Error: {escape(str(e))}", style="bold red")
        return 1

    index = build_export_index(workspace.units)
    explanations = [explain_dependency(d, index) for d in group.external_dependencies]

    if output_json:
        print(json.dumps([_to_dict(e) for e in explanations], indent=2))
        return 0

    if not explanations:
        console.print(f"{unit_path} ({group_name}) has no external dependencies.", style="yellow")
        return 0

    out = Console()
    for explanation in explanations:
        out.print(f"[bold]{explanation.dependency}[/]")
        for key, entries in explanation.lookups:
            found = ", ".join(str(e) for e in entries) or "[dim]nothing[/]"
            out.print(f"  {key} -> {found}")
        if explanation.selected is None:
            out.print("  [yellow]stays external[/]")
        else:
            out.print(f"  [green]replaced by {explanation.selected}[/]")
    return 0


def _to_dict(explanation: Explanation) -> dict:
    selected = explanation.selected
    return {
        "dependency": str(explanation.dependency),
        "lookups": {
            str(key): [str(e) for e in entries] for key, entries in explanation.lookups
        },
        "candidates": [str(e) for e in explanation.candidates],
        "selected": (
            {"path": selected.unit_path, "configuration": selected.group_name} if selected else None
        ),
    }
