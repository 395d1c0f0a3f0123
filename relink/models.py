"""Data models for workspace build units and their dependencies."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, Iterable, Iterator, Union

if TYPE_CHECKING:
    from .substitution.policy import WorkspaceConfig

# Type and extension of the artifact a dependency without selectors stands for
DEFAULT_ARTIFACT_TYPE = "jar"
DEFAULT_ARTIFACT_EXTENSION = "jar"


@dataclass(frozen=True)
class PublishedArtifact:
    """An artifact an output group claims to produce."""

    name: str
    type: str = DEFAULT_ARTIFACT_TYPE
    extension: str = DEFAULT_ARTIFACT_EXTENSION
    classifier: str | None = None


@dataclass(frozen=True)
class ArtifactSelector:
    """One artifact requested explicitly by an external dependency."""

    name: str
    type: str = DEFAULT_ARTIFACT_TYPE
    extension: str = DEFAULT_ARTIFACT_EXTENSION
    classifier: str | None = None


@dataclass(frozen=True)
class ExternalDependency:
    """A dependency on a published module, by coordinates."""

    group: str
    name: str
    version: str | None = None
    artifacts: tuple[ArtifactSelector, ...] = ()

    def __str__(self) -> str:
        parts = [self.group, self.name]
        if self.version:
            parts.append(self.version)
        return ":".join(parts)


@dataclass(frozen=True)
class ProjectDependency:
    """A local reference to an output group of another unit in the workspace."""

    path: str
    configuration: str

    def __str__(self) -> str:
        return f"project({self.path}, {self.configuration})"


Dependency = Union[ExternalDependency, ProjectDependency]


class DependencySet:
    """Ordered collection of declared dependencies with set semantics.

    Iteration follows insertion order. Adding a dependency that is already
    present is a no-op. Observers registered with `when_changed` are called
    once per completed edit.
    """

    def __init__(self, dependencies: Iterable[Dependency] = ()):
        self._items: list[Dependency] = []
        self._observers: list[Callable[["DependencySet"], None]] = []
        for dependency in dependencies:
            if dependency not in self._items:
                self._items.append(dependency)

    def __iter__(self) -> Iterator[Dependency]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, dependency: object) -> bool:
        return dependency in self._items

    def __repr__(self) -> str:
        return f"DependencySet({self._items!r})"

    def when_changed(self, callback: Callable[["DependencySet"], None]) -> None:
        """Register a callback fired after each edit that changed the set."""
        self._observers.append(callback)

    def add(self, dependency: Dependency) -> bool:
        changed = self._add(dependency)
        if changed:
            self._notify()
        return changed

    def remove(self, dependency: Dependency) -> bool:
        changed = self._remove(dependency)
        if changed:
            self._notify()
        return changed

    def replace(self, remove: Iterable[Dependency], add: Iterable[Dependency]) -> None:
        """Remove then add dependencies as a single edit.

        Observers see either the state before or the state after the whole
        edit, never the removals without the additions.
        """
        changed = False
        for dependency in remove:
            changed = self._remove(dependency) or changed
        for dependency in add:
            changed = self._add(dependency) or changed
        if changed:
            self._notify()

    def _add(self, dependency: Dependency) -> bool:
        if dependency in self._items:
            return False
        self._items.append(dependency)
        return True

    def _remove(self, dependency: Dependency) -> bool:
        try:
            self._items.remove(dependency)
        except ValueError:
            return False
        return True

    def _notify(self) -> None:
        for callback in self._observers:
            callback(self)


@dataclass(eq=False)
class OutputGroup:
    """A named bundle of consumed dependencies and published artifacts."""

    name: str
    unit: "BuildUnit" = field(repr=False)
    artifacts: tuple[PublishedArtifact, ...] = ()
    dependencies: DependencySet = field(default_factory=DependencySet)

    @property
    def external_dependencies(self) -> list[ExternalDependency]:
        return [d for d in self.dependencies if isinstance(d, ExternalDependency)]


@dataclass(eq=False)
class BuildUnit:
    """A module of the workspace, identified by its path."""

    path: str
    group: str = ""
    version: str | None = None
    output_groups: dict[str, OutputGroup] = field(default_factory=dict)
    workspace_config: WorkspaceConfig | None = None
    evaluated: bool = False

    @property
    def name(self) -> str:
        """Last segment of the unit path ("" for the root unit)."""
        return self.path.rstrip("/").rsplit("/", 1)[-1]

    def add_output_group(
        self,
        name: str,
        artifacts: Iterable[PublishedArtifact] = (),
        dependencies: Iterable[Dependency] = (),
    ) -> OutputGroup:
        group = OutputGroup(
            name=name,
            unit=self,
            artifacts=tuple(artifacts),
            dependencies=DependencySet(dependencies),
        )
        self.output_groups[name] = group
        return group

    def find_output_group(self, name: str) -> OutputGroup | None:
        return self.output_groups.get(name)

    def __str__(self) -> str:
        return f"unit '{self.path}'"
