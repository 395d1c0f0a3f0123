"""Canonical artifact identity used to match dependencies to published artifacts."""

from __future__ import annotations

from dataclasses import dataclass

from ..models import (
    DEFAULT_ARTIFACT_EXTENSION,
    DEFAULT_ARTIFACT_TYPE,
    ArtifactSelector,
    BuildUnit,
    ExternalDependency,
    PublishedArtifact,
)


def normalize_classifier(classifier: str | None) -> str:
    """Map an absent classifier and an empty one to the same value."""
    return classifier or ""


@dataclass(frozen=True, order=True)
class ArtifactKey:
    """Join key between published artifacts and requested artifacts.

    Compared field by field in declaration order. The classifier is stored
    normalized, so "no classifier" sorts before any real classifier.
    """

    group: str
    name: str
    type: str
    extension: str
    classifier: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "classifier", normalize_classifier(self.classifier))

    def __str__(self) -> str:
        parts = [self.group, self.name, self.type, self.extension]
        if self.classifier:
            parts.append(self.classifier)
        return ":".join(parts)


def key_for_artifact(unit: BuildUnit, artifact: PublishedArtifact) -> ArtifactKey:
    """Key of an artifact published by `unit`."""
    return ArtifactKey(
        group=unit.group,
        name=artifact.name,
        type=artifact.type,
        extension=artifact.extension,
        classifier=normalize_classifier(artifact.classifier),
    )


def key_for_selector(dependency: ExternalDependency, selector: ArtifactSelector) -> ArtifactKey:
    """Key of one artifact explicitly requested by `dependency`."""
    return ArtifactKey(
        group=dependency.group,
        name=selector.name,
        type=selector.type,
        extension=selector.extension,
        classifier=normalize_classifier(selector.classifier),
    )


def key_for_dependency(dependency: ExternalDependency) -> ArtifactKey:
    """Key of the implicit default jar of a dependency without selectors."""
    return ArtifactKey(
        group=dependency.group,
        name=dependency.name,
        type=DEFAULT_ARTIFACT_TYPE,
        extension=DEFAULT_ARTIFACT_EXTENSION,
    )


def keys_for_dependency(dependency: ExternalDependency) -> list[ArtifactKey]:
    """All keys a dependency requests, in declaration order."""
    if not dependency.artifacts:
        return [key_for_dependency(dependency)]
    return [key_for_selector(dependency, selector) for selector in dependency.artifacts]
