"""Parsing of unit manifests and dependency notations."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from ..errors import ManifestError
from ..models import (
    DEFAULT_ARTIFACT_EXTENSION,
    DEFAULT_ARTIFACT_TYPE,
    ArtifactSelector,
    Dependency,
    ExternalDependency,
    ProjectDependency,
    PublishedArtifact,
)

# Output group a project dependency points at when none is named
DEFAULT_PROJECT_CONFIGURATION = "default"


@dataclass(frozen=True)
class OutputSpec:
    name: str
    artifacts: tuple[PublishedArtifact, ...] = ()
    dependencies: tuple[Dependency, ...] = ()


@dataclass(frozen=True)
class UnitManifest:
    """Declarations of one build unit, applied when the unit is evaluated."""

    source: Path | None = None
    group: str = ""
    version: str | None = None
    has_workspace_config: bool = False
    exported_configurations: tuple[str, ...] | None = None
    evaluation_depends_on: tuple[str, ...] = ()
    outputs: tuple[OutputSpec, ...] = field(default_factory=tuple)


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


def _optional_str(raw: dict[str, Any], key: str) -> str | None:
    value = raw.get(key)
    if value is None:
        return None
    return str(value).strip() or None


def _type_and_extension(raw: dict[str, Any]) -> tuple[str, str]:
    type_ = _optional_str(raw, "type")
    extension = _optional_str(raw, "extension") or _optional_str(raw, "ext")
    return (
        type_ or extension or DEFAULT_ARTIFACT_TYPE,
        extension or type_ or DEFAULT_ARTIFACT_EXTENSION,
    )


def parse_dependency_notation(notation: str, source: Path | None = None) -> ExternalDependency:
    """Parse `group:name[:version[:classifier]][@extension]`.

    A classifier or an extension makes the dependency request exactly one
    artifact named after the module.
    """
    coordinates, _, extension = notation.strip().partition("@")
    parts = [p.strip() for p in coordinates.split(":")]
    if len(parts) < 2 or len(parts) > 4 or not parts[0] or not parts[1]:
        raise ManifestError(source, f"Invalid dependency notation '{notation}'")

    group, name = parts[0], parts[1]
    version = parts[2] if len(parts) > 2 and parts[2] else None
    classifier = parts[3] if len(parts) > 3 and parts[3] else None
    extension = extension.strip()

    artifacts: tuple[ArtifactSelector, ...] = ()
    if classifier or extension:
        artifacts = (
            ArtifactSelector(
                name=name,
                type=extension or DEFAULT_ARTIFACT_TYPE,
                extension=extension or DEFAULT_ARTIFACT_EXTENSION,
                classifier=classifier,
            ),
        )

    return ExternalDependency(group=group, name=name, version=version, artifacts=artifacts)


def parse_dependency(raw: Any, source: Path | None = None) -> Dependency:
    """Parse one entry of an output group's `dependencies` list."""
    if isinstance(raw, str):
        return parse_dependency_notation(raw, source)

    if not isinstance(raw, dict):
        raise ManifestError(source, f"Dependency must be a string or a mapping, got {raw!r}")

    project = _optional_str(raw, "project")
    if project is not None:
        configuration = _optional_str(raw, "configuration") or DEFAULT_PROJECT_CONFIGURATION
        return ProjectDependency(path=project, configuration=configuration)

    group = _optional_str(raw, "group")
    name = _optional_str(raw, "name")
    if not group or not name:
        raise ManifestError(source, f"Dependency needs 'group' and 'name': {raw!r}")

    selectors = [parse_selector(entry, name, source) for entry in _as_list(raw.get("artifacts"))]

    # Map shorthand for a single classified/typed artifact, as in the string notation
    classifier = _optional_str(raw, "classifier")
    if not selectors and (classifier or _optional_str(raw, "ext") or _optional_str(raw, "type")):
        type_, extension = _type_and_extension(raw)
        selectors.append(ArtifactSelector(name=name, type=type_, extension=extension, classifier=classifier))

    return ExternalDependency(
        group=group,
        name=name,
        version=_optional_str(raw, "version"),
        artifacts=tuple(selectors),
    )


def parse_selector(raw: Any, default_name: str, source: Path | None = None) -> ArtifactSelector:
    if isinstance(raw, str):
        return ArtifactSelector(name=raw.strip() or default_name)
    if not isinstance(raw, dict):
        raise ManifestError(source, f"Artifact must be a string or a mapping, got {raw!r}")

    type_, extension = _type_and_extension(raw)
    return ArtifactSelector(
        name=_optional_str(raw, "name") or default_name,
        type=type_,
        extension=extension,
        classifier=_optional_str(raw, "classifier"),
    )


def parse_artifact(raw: Any, default_name: str, source: Path | None = None) -> PublishedArtifact:
    if isinstance(raw, str):
        return PublishedArtifact(name=raw.strip() or default_name)
    if not isinstance(raw, dict):
        raise ManifestError(source, f"Artifact must be a string or a mapping, got {raw!r}")

    type_, extension = _type_and_extension(raw)
    return PublishedArtifact(
        name=_optional_str(raw, "name") or default_name,
        type=type_,
        extension=extension,
        classifier=_optional_str(raw, "classifier"),
    )


def parse_manifest(data: Any, unit_name: str, source: Path | None = None) -> UnitManifest:
    """Turn the YAML content of a unit manifest into a `UnitManifest`.

    Args:
        data: Parsed YAML document (None for an empty file)
        unit_name: Default name of the artifacts the unit publishes
        source: Manifest file, for error messages
    """
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ManifestError(source, "Manifest must be a mapping")

    has_workspace_config = "workspace" in data
    workspace = _coerce_dict(data.get("workspace"))
    exported = workspace.get("exportedConfigurations", workspace.get("exported_configurations"))
    exported_configurations = None
    if exported is not None:
        exported_configurations = tuple(str(name).strip() for name in _as_list(exported))

    outputs: list[OutputSpec] = []
    raw_outputs = data.get("outputs") or {}
    if not isinstance(raw_outputs, dict):
        raise ManifestError(source, "'outputs' must be a mapping of output group names")

    for group_name, raw_group in raw_outputs.items():
        raw_group = raw_group or {}
        if not isinstance(raw_group, dict):
            raise ManifestError(source, f"Output group '{group_name}' must be a mapping")
        outputs.append(
            OutputSpec(
                name=str(group_name),
                artifacts=tuple(
                    parse_artifact(entry, unit_name, source) for entry in _as_list(raw_group.get("artifacts"))
                ),
                dependencies=tuple(
                    parse_dependency(entry, source) for entry in _as_list(raw_group.get("dependencies"))
                ),
            )
        )

    version = data.get("version")
    return UnitManifest(
        source=source,
        group=str(data.get("group") or ""),
        version=str(version) if version is not None else None,
        has_workspace_config=has_workspace_config,
        exported_configurations=exported_configurations,
        evaluation_depends_on=tuple(str(p) for p in _as_list(data.get("evaluationDependsOn"))),
        outputs=tuple(outputs),
    )
