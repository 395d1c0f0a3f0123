"""Pytest configuration and fixtures."""

from pathlib import Path
from typing import Callable

import pytest
import yaml

from relink.models import BuildUnit, ProjectDependency
from relink.substitution.policy import WorkspaceConfig


@pytest.fixture
def workspace_root(tmp_path: Path) -> Path:
    """Empty workspace directory."""
    root = tmp_path / "ws"
    root.mkdir()
    return root


@pytest.fixture
def write_unit(workspace_root: Path) -> Callable[[str, dict], Path]:
    """Write a unit.yml for the unit at `rel` (e.g. "core", "libs/io", "")."""

    def _write(rel: str, data: dict) -> Path:
        unit_dir = workspace_root / rel if rel else workspace_root
        unit_dir.mkdir(parents=True, exist_ok=True)
        path = unit_dir / "unit.yml"
        path.write_text(yaml.safe_dump(data, sort_keys=False), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def acme_workspace(workspace_root: Path, write_unit) -> Path:
    """/core publishes acme:utils from runtime, /app depends on it externally."""
    write_unit(
        "core",
        {
            "group": "acme",
            "workspace": {},
            "outputs": {"runtime": {"artifacts": [{"name": "utils"}]}},
        },
    )
    write_unit(
        "app",
        {
            "group": "acme",
            "outputs": {"runtime": {"dependencies": ["acme:utils:1.0"]}},
        },
    )
    return workspace_root


@pytest.fixture
def project_factory() -> Callable[[str, str], ProjectDependency]:
    """Local reference factory that never fails."""
    return lambda path, configuration: ProjectDependency(path=path, configuration=configuration)


@pytest.fixture
def make_unit() -> Callable[..., BuildUnit]:
    """Build an evaluated unit, with an export policy unless `policy=False`."""

    def _make(path: str, group: str = "acme", exported: list[str] | None = None, policy: bool = True) -> BuildUnit:
        unit = BuildUnit(path=path, group=group, evaluated=True)
        if policy:
            unit.workspace_config = WorkspaceConfig(exported)
        return unit

    return _make
