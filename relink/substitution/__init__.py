"""Artifact identity, export index and dependency substitution."""

from .identity import ArtifactKey, key_for_artifact, key_for_dependency, key_for_selector, keys_for_dependency
from .index import ExportIndex, ExportingEntry, build_export_index
from .policy import (
    DEFAULT_EXPORTED_CONFIGURATIONS,
    FALLBACK_EXPORTED_CONFIGURATIONS,
    WorkspaceConfig,
    get_exported_group_names,
    scanned_group_names,
)
from .resolver import Explanation, Substitution, explain_dependency, find_candidates, resolve_dependencies, resolve_unit

__all__ = [
    "ArtifactKey",
    "key_for_artifact",
    "key_for_dependency",
    "key_for_selector",
    "keys_for_dependency",
    "ExportIndex",
    "ExportingEntry",
    "build_export_index",
    "DEFAULT_EXPORTED_CONFIGURATIONS",
    "FALLBACK_EXPORTED_CONFIGURATIONS",
    "WorkspaceConfig",
    "get_exported_group_names",
    "scanned_group_names",
    "Explanation",
    "Substitution",
    "explain_dependency",
    "find_candidates",
    "resolve_dependencies",
    "resolve_unit",
]
