"""Drivers that run dependency substitution over a workspace.

Two modes are available:

- listener: substitution runs for each unit right after that unit is
  evaluated, against an index of everything known at that moment. A unit
  evaluated before the sibling it depends on keeps its external dependency.
- staged: every unit is evaluated first, then one index is built and all
  units are resolved against it. Evaluation order no longer matters.
"""

from __future__ import annotations

import logging
from typing import Iterable

from ..config import Mode
from ..models import BuildUnit
from ..workspace.graph import Workspace
from .index import build_export_index
from .resolver import Substitution, resolve_unit

logger = logging.getLogger(__name__)


class WorkspacePlugin:
    """Evaluation listener replacing dependencies once a unit is evaluated."""

    def __init__(self) -> None:
        self._workspace: Workspace | None = None
        self.substitutions: list[Substitution] = []

    @property
    def workspace(self) -> Workspace:
        if self._workspace is None:
            raise RuntimeError("WorkspacePlugin has not been applied to a workspace")
        return self._workspace

    def apply(self, workspace: Workspace) -> None:
        logger.info("Applying workspace plugin to %s", workspace.root or "workspace")
        self._workspace = workspace
        workspace.add_evaluation_listener(self)

    def before_evaluate(self, unit: BuildUnit) -> None:
        pass

    def after_evaluate(self, unit: BuildUnit) -> None:
        self.replace_dependencies(unit)

    def replace_dependencies(self, unit: BuildUnit) -> list[Substitution]:
        """Rebuild the export index from all known units and resolve `unit`."""
        index = build_export_index(self.workspace.units)
        substitutions = resolve_unit(unit, index, self.workspace.project_dependency)
        self.substitutions.extend(substitutions)
        return substitutions


def run_listener(workspace: Workspace, order: Iterable[str] | None = None) -> list[Substitution]:
    """Evaluate units in order, resolving each one as soon as it is evaluated."""
    plugin = WorkspacePlugin()
    plugin.apply(workspace)
    workspace.evaluate_all(order)
    return plugin.substitutions


def run_staged(workspace: Workspace, order: Iterable[str] | None = None) -> list[Substitution]:
    """Evaluate all units, build one export index, then resolve every unit."""
    workspace.evaluate_all(order)

    index = build_export_index(workspace.units)

    substitutions: list[Substitution] = []
    for unit in workspace.units:
        substitutions.extend(resolve_unit(unit, index, workspace.project_dependency))

    logger.info("Replaced %d dependencies in %d units", len(substitutions), len(workspace.units_by_path))
    return substitutions


def relink(workspace: Workspace, mode: Mode = "staged", order: Iterable[str] | None = None) -> list[Substitution]:
    """Run substitution over `workspace` in the given mode."""
    if mode == "listener":
        return run_listener(workspace, order)
    if mode == "staged":
        return run_staged(workspace, order)
    raise ValueError(f"Unknown mode: {mode}")
