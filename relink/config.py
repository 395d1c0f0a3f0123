from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

Mode = Literal["staged", "listener"]

CONFIG_FILENAME = "relink.toml"
DEFAULT_MANIFEST = "unit.yml"
MODES = ("staged", "listener")


@dataclass(frozen=True)
class RelinkConfig:
    mode: Mode = "staged"
    manifest: str = DEFAULT_MANIFEST


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def load_config(path: Path) -> RelinkConfig:
    """
    Load tool settings from TOML.

    Settings may sit at the top level or in a [relink] table.
    """
    import tomllib

    data = tomllib.loads(path.read_text(encoding="utf-8"))
    settings = _coerce_dict(data.get("relink")) or data

    mode = str(settings.get("mode", "staged")).strip() or "staged"
    if mode not in MODES:
        raise ValueError(f"mode must be one of {', '.join(MODES)}, got '{mode}'")

    manifest = str(settings.get("manifest", DEFAULT_MANIFEST)).strip()
    if not manifest or "/" in manifest:
        raise ValueError("manifest must be a plain file name")

    return RelinkConfig(mode=mode, manifest=manifest)  # type: ignore[arg-type]


def load_workspace_config(workspace_root: Path) -> RelinkConfig:
    """Load the workspace's relink.toml, if present."""
    config_path = workspace_root / CONFIG_FILENAME
    if not config_path.exists():
        return RelinkConfig()
    return load_config(config_path)
