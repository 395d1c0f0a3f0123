"""Per-unit export policy: which output groups may satisfy sibling dependencies."""

from __future__ import annotations

from typing import Iterable

from ..models import BuildUnit

# Groups exported by a unit that carries a policy but does not customize it
DEFAULT_EXPORTED_CONFIGURATIONS = frozenset({"runtime", "testRuntime"})

# Groups scanned for a unit that carries no policy at all
FALLBACK_EXPORTED_CONFIGURATIONS = frozenset({"default"})


class WorkspaceConfig:
    """Export policy attached to a build unit.

    Only output groups named in `exported_configurations` are scanned when
    looking for artifacts that can replace external dependencies.
    """

    def __init__(self, exported_configurations: Iterable[str] | None = None):
        self._exported_configurations = DEFAULT_EXPORTED_CONFIGURATIONS
        if exported_configurations is not None:
            self.exported_configurations = exported_configurations

    @property
    def exported_configurations(self) -> frozenset[str]:
        return self._exported_configurations

    @exported_configurations.setter
    def exported_configurations(self, configurations: Iterable[str]) -> None:
        if isinstance(configurations, str):
            configurations = [configurations]
        self._exported_configurations = frozenset(configurations)

    def __repr__(self) -> str:
        return f"WorkspaceConfig(exported_configurations={sorted(self._exported_configurations)!r})"


def get_exported_group_names(unit: BuildUnit) -> frozenset[str] | None:
    """Exported group names of `unit`, or None if it has no policy attached."""
    if unit.workspace_config is None:
        return None
    return unit.workspace_config.exported_configurations


def scanned_group_names(unit: BuildUnit) -> frozenset[str]:
    """Group names the export index scans for `unit`."""
    names = get_exported_group_names(unit)
    if names is None:
        return FALLBACK_EXPORTED_CONFIGURATIONS
    return names
