"""Workspace graph of build units and their evaluation lifecycle."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Protocol

from ..errors import EvaluationError, OutputGroupNotFoundError, UnitNotFoundError
from ..models import BuildUnit, ProjectDependency
from ..substitution.policy import WorkspaceConfig
from .parser import UnitManifest

logger = logging.getLogger(__name__)


class EvaluationListener(Protocol):
    def before_evaluate(self, unit: BuildUnit) -> None: ...

    def after_evaluate(self, unit: BuildUnit) -> None: ...


@dataclass
class Workspace:
    """All build units of a workspace, keyed by path.

    Units exist from the moment they are added, but their group, output
    groups and published artifacts only appear once they are evaluated.
    """

    root: Path | None = None
    units_by_path: dict[str, BuildUnit] = field(default_factory=dict)
    manifests: dict[str, UnitManifest] = field(default_factory=dict)
    listeners: list[EvaluationListener] = field(default_factory=list)
    _evaluating: list[str] = field(default_factory=list, init=False, repr=False)

    @property
    def units(self) -> list[BuildUnit]:
        """All units, ordered by path."""
        return [self.units_by_path[path] for path in sorted(self.units_by_path)]

    def add_unit(self, path: str, manifest: UnitManifest | None = None) -> BuildUnit:
        if path in self.units_by_path:
            raise EvaluationError(f"Build unit '{path}' is already part of the workspace")
        unit = BuildUnit(path=path)
        self.units_by_path[path] = unit
        self.manifests[path] = manifest or UnitManifest()
        return unit

    def find_unit(self, path: str) -> BuildUnit | None:
        return self.units_by_path.get(path)

    def get_unit(self, path: str) -> BuildUnit:
        unit = self.find_unit(path)
        if unit is None:
            raise UnitNotFoundError(path)
        return unit

    def add_evaluation_listener(self, listener: EvaluationListener) -> None:
        self.listeners.append(listener)

    def project_dependency(self, path: str, configuration: str) -> ProjectDependency:
        """Create a local reference to output group `configuration` of unit `path`."""
        unit = self.get_unit(path)
        if unit.find_output_group(configuration) is None:
            raise OutputGroupNotFoundError(path, configuration)
        return ProjectDependency(path=path, configuration=configuration)

    def evaluate(self, unit: BuildUnit) -> None:
        """Apply the unit's manifest and notify listeners.

        Units named in `evaluationDependsOn` are evaluated first. Evaluating
        an already evaluated unit does nothing.
        """
        if unit.evaluated:
            return
        if unit.path in self._evaluating:
            chain = " -> ".join([*self._evaluating, unit.path])
            raise EvaluationError(f"Circular evaluation dependency: {chain}")

        manifest = self.manifests.get(unit.path) or UnitManifest()
        self._evaluating.append(unit.path)
        try:
            for path in manifest.evaluation_depends_on:
                self.evaluate(self.get_unit(path))

            for listener in self.listeners:
                listener.before_evaluate(unit)

            logger.debug("Evaluating %s", unit.path)
            _apply_manifest(unit, manifest)
            unit.evaluated = True
        finally:
            self._evaluating.pop()

        for listener in self.listeners:
            listener.after_evaluate(unit)

    def evaluate_all(self, order: Iterable[str] | None = None) -> None:
        """Evaluate every unit; paths in `order` first, then the rest by path."""
        paths = list(order or [])
        paths += [path for path in sorted(self.units_by_path) if path not in paths]
        for path in paths:
            self.evaluate(self.get_unit(path))


def _apply_manifest(unit: BuildUnit, manifest: UnitManifest) -> None:
    unit.group = manifest.group
    unit.version = manifest.version

    if manifest.has_workspace_config:
        unit.workspace_config = WorkspaceConfig(manifest.exported_configurations)

    for output in manifest.outputs:
        unit.add_output_group(output.name, output.artifacts, output.dependencies)
