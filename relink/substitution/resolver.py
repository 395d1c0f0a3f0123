"""Replace external dependencies with local references to workspace units."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from ..models import BuildUnit, Dependency, ExternalDependency, OutputGroup
from .identity import ArtifactKey, keys_for_dependency
from .index import ExportIndex, ExportingEntry

logger = logging.getLogger(__name__)

# Builds a local reference from (unit path, output group name)
LocalReferenceFactory = Callable[[str, str], Dependency]


@dataclass(frozen=True)
class Substitution:
    """Record of one external dependency replaced by a local reference."""

    unit_path: str
    group_name: str
    original: ExternalDependency
    replacement: Dependency
    entry: ExportingEntry

    def to_dict(self) -> dict:
        return {
            "unit": self.unit_path,
            "configuration": self.group_name,
            "original": str(self.original),
            "replacement": str(self.replacement),
            "target": {"path": self.entry.unit_path, "configuration": self.entry.group_name},
        }


@dataclass(frozen=True)
class Explanation:
    """How one dependency was matched against the export index."""

    dependency: ExternalDependency
    lookups: tuple[tuple[ArtifactKey, tuple[ExportingEntry, ...]], ...]
    candidates: tuple[ExportingEntry, ...]

    @property
    def selected(self) -> ExportingEntry | None:
        return self.candidates[0] if self.candidates else None


def find_candidates(dependency: ExternalDependency, index: ExportIndex) -> tuple[ExportingEntry, ...]:
    """Entries able to satisfy every artifact `dependency` asks for, smallest first."""
    return explain_dependency(dependency, index).candidates


def explain_dependency(dependency: ExternalDependency, index: ExportIndex) -> Explanation:
    """Look up each requested artifact and intersect the results.

    A dependency without selectors asks for its default jar only. With
    selectors, an entry qualifies only if it exports all of them, so a
    selector that matches nothing leaves no candidates.
    """
    lookups = tuple((key, index.lookup(key)) for key in keys_for_dependency(dependency))

    candidates = set(lookups[0][1])
    for _, entries in lookups[1:]:
        candidates.intersection_update(entries)

    return Explanation(dependency=dependency, lookups=lookups, candidates=tuple(sorted(candidates)))


def resolve_dependencies(
    unit: BuildUnit,
    group: OutputGroup,
    index: ExportIndex,
    factory: LocalReferenceFactory,
) -> list[Substitution]:
    """Replace each external dependency of `group` that a workspace unit exports.

    The replacements are applied to `group.dependencies` in one edit after
    all dependencies were matched. Errors raised by `factory` propagate and
    leave the group untouched.
    """
    logger.debug("Replacing dependencies for %s (%s)", unit.path, group.name)

    substitutions: list[Substitution] = []
    for dependency in group.dependencies:
        if not isinstance(dependency, ExternalDependency):
            continue

        candidates = find_candidates(dependency, index)
        if not candidates:
            continue

        entry = candidates[0]
        replacement = factory(entry.unit_path, entry.group_name)
        logger.debug("Replacing dependency %s with %s in %s", dependency, replacement, unit.path)
        substitutions.append(
            Substitution(
                unit_path=unit.path,
                group_name=group.name,
                original=dependency,
                replacement=replacement,
                entry=entry,
            )
        )

    if substitutions:
        group.dependencies.replace(
            [s.original for s in substitutions],
            [s.replacement for s in substitutions],
        )

    return substitutions


def resolve_unit(unit: BuildUnit, index: ExportIndex, factory: LocalReferenceFactory) -> list[Substitution]:
    """Resolve every output group of `unit` against `index`."""
    substitutions: list[Substitution] = []
    for group in list(unit.output_groups.values()):
        substitutions.extend(resolve_dependencies(unit, group, index, factory))
    return substitutions
