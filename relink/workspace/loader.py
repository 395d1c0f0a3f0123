"""Workspace loading from unit manifests on disk."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml

from ..config import DEFAULT_MANIFEST, RelinkConfig, load_workspace_config
from ..errors import ManifestError
from .graph import Workspace
from .parser import UnitManifest, parse_manifest

logger = logging.getLogger(__name__)


def unit_path_for(manifest_dir: Path, workspace_root: Path) -> str:
    """Unit path of the manifest directory: "/" plus its relative location."""
    rel = manifest_dir.relative_to(workspace_root)
    if not rel.parts:
        return "/"
    return "/" + "/".join(rel.parts)


def load_manifest(path: Path, unit_name: str) -> UnitManifest:
    """Read and parse a single unit manifest."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ManifestError(path, f"Invalid YAML: {e}") from e
    return parse_manifest(data, unit_name, source=path)


def load_workspace(workspace_root: Path, manifest_name: str = DEFAULT_MANIFEST) -> Workspace:
    """Register one build unit per manifest found below `workspace_root`.

    Args:
        workspace_root: Workspace directory
        manifest_name: File name identifying a unit directory

    Returns:
        Workspace with all units added but none evaluated
    """
    workspace_root = workspace_root.resolve()
    workspace = Workspace(root=workspace_root)

    for manifest_path in sorted(workspace_root.rglob(manifest_name)):
        rel_parts = manifest_path.relative_to(workspace_root).parts
        # Skip hidden files and directories
        if any(part.startswith(".") for part in rel_parts):
            continue

        unit_dir = manifest_path.parent
        path = unit_path_for(unit_dir, workspace_root)
        unit_name = unit_dir.name if path != "/" else workspace_root.name
        workspace.add_unit(path, load_manifest(manifest_path, unit_name))
        logger.debug("Found build unit %s in %s", path, manifest_path)

    return workspace


def open_workspace(workspace_root: Path) -> tuple[Workspace, RelinkConfig]:
    """Load the workspace's relink.toml and then its unit manifests."""
    config = load_workspace_config(workspace_root)
    return load_workspace(workspace_root, config.manifest), config
