"""End-to-end substitution over workspaces loaded from disk."""

from pathlib import Path

import pytest

from relink.models import ExternalDependency, ProjectDependency
from relink.substitution.plugin import WorkspacePlugin, relink, run_listener, run_staged
from relink.workspace.loader import load_workspace


def _app_dependencies(workspace) -> list:
    return list(workspace.get_unit("/app").output_groups["runtime"].dependencies)


def test_listener_mode_replaces_dependency_when_core_evaluates_first(acme_workspace: Path) -> None:
    workspace = load_workspace(acme_workspace)

    substitutions = run_listener(workspace, order=["/core", "/app"])

    assert _app_dependencies(workspace) == [ProjectDependency("/core", "runtime")]
    assert not any(isinstance(d, ExternalDependency) for d in _app_dependencies(workspace))
    assert [(s.unit_path, str(s.original)) for s in substitutions] == [("/app", "acme:utils:1.0")]


def test_listener_mode_keeps_dependency_when_app_evaluates_first(acme_workspace: Path) -> None:
    workspace = load_workspace(acme_workspace)

    substitutions = run_listener(workspace, order=["/app", "/core"])

    # /core had published nothing yet when /app was resolved
    assert substitutions == []
    assert _app_dependencies(workspace) == [ExternalDependency("acme", "utils", "1.0")]


def test_listener_mode_default_order_hits_the_same_hazard(acme_workspace: Path) -> None:
    workspace = load_workspace(acme_workspace)

    run_listener(workspace)

    assert _app_dependencies(workspace) == [ExternalDependency("acme", "utils", "1.0")]


def test_evaluation_depends_on_fixes_listener_order(acme_workspace: Path, write_unit) -> None:
    write_unit(
        "app",
        {
            "group": "acme",
            "evaluationDependsOn": ["/core"],
            "outputs": {"runtime": {"dependencies": ["acme:utils:1.0"]}},
        },
    )
    workspace = load_workspace(acme_workspace)

    run_listener(workspace)

    assert _app_dependencies(workspace) == [ProjectDependency("/core", "runtime")]


@pytest.mark.parametrize("order", [["/app", "/core"], ["/core", "/app"], None])
def test_staged_mode_is_independent_of_evaluation_order(acme_workspace: Path, order) -> None:
    workspace = load_workspace(acme_workspace)

    substitutions = run_staged(workspace, order)

    assert len(substitutions) == 1
    assert _app_dependencies(workspace) == [ProjectDependency("/core", "runtime")]


def test_rerunning_a_unit_changes_nothing(acme_workspace: Path) -> None:
    workspace = load_workspace(acme_workspace)
    plugin = WorkspacePlugin()
    plugin.apply(workspace)
    workspace.evaluate_all(["/core", "/app"])

    assert plugin.replace_dependencies(workspace.get_unit("/app")) == []
    assert len(plugin.substitutions) == 1


def test_core_without_policy_is_only_scanned_through_default(workspace_root: Path, write_unit) -> None:
    write_unit(
        "core",
        {
            "group": "acme",
            "outputs": {
                "runtime": {"artifacts": ["utils"]},
                "default": {"artifacts": ["utils"]},
            },
        },
    )
    write_unit("app", {"group": "acme", "outputs": {"runtime": {"dependencies": ["acme:utils"]}}})
    workspace = load_workspace(workspace_root)

    relink(workspace)

    assert _app_dependencies(workspace) == [ProjectDependency("/core", "default")]


def test_unit_resolves_against_its_own_exported_groups(workspace_root: Path, write_unit) -> None:
    write_unit(
        "core",
        {
            "group": "acme",
            "workspace": {"exportedConfigurations": ["runtime", "testRuntime"]},
            "outputs": {
                "runtime": {"artifacts": ["utils"]},
                "testRuntime": {
                    "artifacts": [{"name": "utils", "classifier": "tests"}],
                    "dependencies": ["acme:utils", "acme:utils::tests", "junit:junit:4.13"],
                },
            },
        },
    )
    workspace = load_workspace(workspace_root)

    relink(workspace)

    deps = list(workspace.get_unit("/core").output_groups["testRuntime"].dependencies)
    assert deps == [
        ExternalDependency("junit", "junit", "4.13"),
        ProjectDependency("/core", "runtime"),
        ProjectDependency("/core", "testRuntime"),
    ]


def test_unknown_mode_is_rejected(acme_workspace: Path) -> None:
    with pytest.raises(ValueError, match="Unknown mode"):
        relink(load_workspace(acme_workspace), "eager")  # type: ignore[arg-type]
