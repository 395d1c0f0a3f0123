"""Export index: which unit, through which output group, publishes which artifact."""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Iterator, Mapping

from ..models import BuildUnit, OutputGroup
from .identity import ArtifactKey, key_for_artifact
from .policy import scanned_group_names

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class ExportingEntry:
    """An output group known to publish an artifact.

    Equal and ordered by unit path, then group name. The ordering is the
    tie-break whenever more than one entry can satisfy a dependency.
    """

    unit_path: str
    group_name: str
    unit: BuildUnit = field(compare=False, repr=False)
    group: OutputGroup = field(compare=False, repr=False)

    @classmethod
    def of(cls, unit: BuildUnit, group: OutputGroup) -> "ExportingEntry":
        return cls(unit_path=unit.path, group_name=group.name, unit=unit, group=group)

    def __str__(self) -> str:
        return f"{self.unit_path} ({self.group_name})"


@dataclass(frozen=True)
class ExportIndex:
    """Read-only mapping from artifact key to its sorted exporting entries."""

    entries: Mapping[ArtifactKey, tuple[ExportingEntry, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )

    def lookup(self, key: ArtifactKey) -> tuple[ExportingEntry, ...]:
        """Entries exporting `key`, smallest first. Empty for unknown keys."""
        return self.entries.get(key, ())

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def __iter__(self) -> Iterator[ArtifactKey]:
        return iter(sorted(self.entries))

    def __len__(self) -> int:
        return len(self.entries)

    def items(self) -> list[tuple[ArtifactKey, tuple[ExportingEntry, ...]]]:
        return [(key, self.entries[key]) for key in self]


def build_export_index(units: Iterable[BuildUnit]) -> ExportIndex:
    """Scan every unit's exported output groups for published artifacts.

    The result does not depend on the order of `units`. Units without a
    policy are scanned through the "default" group; groups a unit does not
    have are skipped.
    """
    found: dict[ArtifactKey, set[ExportingEntry]] = defaultdict(set)

    for unit in units:
        for group_name in sorted(scanned_group_names(unit)):
            group = unit.find_output_group(group_name)
            if group is None:
                continue

            entry = ExportingEntry.of(unit, group)
            for artifact in group.artifacts:
                found[key_for_artifact(unit, artifact)].add(entry)

    index = ExportIndex(
        MappingProxyType({key: tuple(sorted(entries)) for key, entries in found.items()})
    )
    logger.debug("Built export index with %d artifact keys", len(index))
    return index
