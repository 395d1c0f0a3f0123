import pytest

from relink.errors import UnitNotFoundError
from relink.models import ArtifactSelector, ExternalDependency, ProjectDependency, PublishedArtifact
from relink.substitution.index import build_export_index
from relink.substitution.resolver import explain_dependency, find_candidates, resolve_dependencies
from relink.workspace.graph import Workspace


@pytest.fixture
def consumer(make_unit):
    return make_unit("/app")


def _publish(unit, group_name, *artifacts):
    return unit.add_output_group(group_name, artifacts)


def test_default_artifact_matches_only_plain_jar(make_unit, consumer, project_factory) -> None:
    lib = make_unit("/lib", group="g")
    _publish(lib, "runtime", PublishedArtifact("lib"))
    war = make_unit("/war", group="g")
    _publish(war, "runtime", PublishedArtifact("lib", type="war", extension="war"))
    sources = make_unit("/sources", group="g")
    _publish(sources, "runtime", PublishedArtifact("lib", classifier="sources"))
    index = build_export_index([war, sources, lib])

    dep = ExternalDependency(group="g", name="lib")
    group = consumer.add_output_group("runtime", dependencies=[dep])

    substitutions = resolve_dependencies(consumer, group, index, project_factory)

    assert [s.entry.unit_path for s in substitutions] == ["/lib"]
    assert list(group.dependencies) == [ProjectDependency("/lib", "runtime")]


def test_smallest_entry_wins_regardless_of_scan_order(make_unit, consumer, project_factory) -> None:
    a = make_unit("/a")
    _publish(a, "runtime", PublishedArtifact("utils"))
    b = make_unit("/b")
    _publish(b, "runtime", PublishedArtifact("utils"))
    dep = ExternalDependency(group="acme", name="utils")

    for units in ([a, b], [b, a]):
        group = consumer.add_output_group("runtime", dependencies=[dep])
        resolve_dependencies(consumer, group, build_export_index(units), project_factory)
        assert list(group.dependencies) == [ProjectDependency("/a", "runtime")]


def test_selectors_matching_different_units_are_not_replaced(make_unit, consumer, project_factory) -> None:
    a = make_unit("/a")
    _publish(a, "runtime", PublishedArtifact("utils"))
    b = make_unit("/b")
    _publish(b, "runtime", PublishedArtifact("utils", classifier="tests"))
    index = build_export_index([a, b])

    dep = ExternalDependency(
        group="acme",
        name="utils",
        artifacts=(ArtifactSelector("utils"), ArtifactSelector("utils", classifier="tests")),
    )
    group = consumer.add_output_group("runtime", dependencies=[dep])

    assert resolve_dependencies(consumer, group, index, project_factory) == []
    assert list(group.dependencies) == [dep]


def test_selectors_matching_the_same_unit_are_replaced(make_unit, consumer, project_factory) -> None:
    a = make_unit("/a")
    _publish(a, "runtime", PublishedArtifact("utils"))
    c = make_unit("/c")
    _publish(c, "runtime", PublishedArtifact("utils"), PublishedArtifact("utils", classifier="tests"))
    index = build_export_index([a, c])

    dep = ExternalDependency(
        group="acme",
        name="utils",
        artifacts=(ArtifactSelector("utils"), ArtifactSelector("utils", classifier="tests")),
    )
    group = consumer.add_output_group("runtime", dependencies=[dep])

    substitutions = resolve_dependencies(consumer, group, index, project_factory)

    assert [s.replacement for s in substitutions] == [ProjectDependency("/c", "runtime")]


def test_unmatched_first_selector_does_not_admit_later_matches(make_unit) -> None:
    c = make_unit("/c")
    _publish(c, "runtime", PublishedArtifact("utils", classifier="tests"))
    index = build_export_index([c])

    dep = ExternalDependency(
        group="acme",
        name="utils",
        artifacts=(ArtifactSelector("missing"), ArtifactSelector("utils", classifier="tests")),
    )
    reversed_dep = ExternalDependency(group="acme", name="utils", artifacts=tuple(reversed(dep.artifacts)))

    assert find_candidates(dep, index) == ()
    assert find_candidates(reversed_dep, index) == ()


def test_second_run_changes_nothing(make_unit, consumer, project_factory) -> None:
    core = make_unit("/core")
    _publish(core, "runtime", PublishedArtifact("utils"))
    index = build_export_index([core, consumer])
    group = consumer.add_output_group(
        "runtime",
        dependencies=[ExternalDependency(group="acme", name="utils"), ExternalDependency(group="ext", name="x")],
    )

    first = resolve_dependencies(consumer, group, index, project_factory)
    snapshot = list(group.dependencies)
    second = resolve_dependencies(consumer, group, index, project_factory)

    assert len(first) == 1
    assert second == []
    assert list(group.dependencies) == snapshot


def test_replacements_are_applied_in_one_edit(make_unit, consumer, project_factory) -> None:
    core = make_unit("/core")
    _publish(core, "runtime", PublishedArtifact("utils"), PublishedArtifact("io"))
    index = build_export_index([core])
    local = ProjectDependency("/other", "default")
    group = consumer.add_output_group(
        "runtime",
        dependencies=[
            ExternalDependency(group="acme", name="utils"),
            local,
            ExternalDependency(group="ext", name="x"),
            ExternalDependency(group="acme", name="io"),
        ],
    )
    seen = []
    group.dependencies.when_changed(lambda deps: seen.append(list(deps)))

    resolve_dependencies(consumer, group, index, project_factory)

    # both replacements target the same group, so the set keeps one reference
    expected = [local, ExternalDependency(group="ext", name="x"), ProjectDependency("/core", "runtime")]
    assert seen == [expected]
    assert list(group.dependencies) == expected


def test_factory_failure_propagates_and_leaves_group_untouched(make_unit, consumer) -> None:
    ghost = make_unit("/ghost")
    _publish(ghost, "runtime", PublishedArtifact("utils"))
    index = build_export_index([ghost])
    workspace = Workspace()
    dep = ExternalDependency(group="acme", name="utils")
    group = consumer.add_output_group("runtime", dependencies=[dep])

    with pytest.raises(UnitNotFoundError, match="/ghost"):
        resolve_dependencies(consumer, group, index, workspace.project_dependency)

    assert list(group.dependencies) == [dep]


def test_explanation_lists_each_lookup(make_unit) -> None:
    c = make_unit("/c")
    _publish(c, "runtime", PublishedArtifact("utils"), PublishedArtifact("utils", classifier="tests"))
    index = build_export_index([c])
    dep = ExternalDependency(
        group="acme",
        name="utils",
        artifacts=(ArtifactSelector("utils"), ArtifactSelector("utils", classifier="tests")),
    )

    explanation = explain_dependency(dep, index)

    assert [str(key) for key, _ in explanation.lookups] == ["acme:utils:jar:jar", "acme:utils:jar:jar:tests"]
    assert explanation.selected is not None
    assert explanation.selected.unit_path == "/c"
