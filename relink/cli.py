"""CLI entrypoint for relink."""

import logging
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.logging import RichHandler

from . import __version__
from .config import CONFIG_FILENAME, DEFAULT_MANIFEST, MODES


def _auto_detect_workspace(start: Path) -> Path | None:
    """Find the workspace root by walking up from `start`.

    The nearest directory holding relink.toml wins; otherwise the outermost
    directory holding a unit manifest.
    """
    cur = start.resolve()
    outermost = None
    for p in (cur, *cur.parents):
        if (p / CONFIG_FILENAME).is_file():
            return p
        if (p / DEFAULT_MANIFEST).is_file():
            outermost = p
    return outermost


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


@click.group()
@click.version_option(__version__, prog_name="relink")
@click.option(
    "--workspace",
    "-w",
    type=click.Path(exists=False, file_okay=False, dir_okay=True, path_type=Path),
    default=None,
    help="Path to the workspace root (defaults to auto-detected relink.toml / unit.yml)",
)
@click.option("--verbose", "-V", is_flag=True, help="Log every index build and replacement")
@click.pass_context
def cli(ctx: click.Context, workspace: Path | None, verbose: bool) -> None:
    """relink - Replace published-artifact dependencies with workspace units.

    Every unit.yml below the workspace root declares one build unit. External
    dependencies on artifacts that a sibling unit publishes are rewritten to
    local references to that sibling.
    """
    _configure_logging(verbose)

    ctx.ensure_object(dict)
    if workspace is None:
        detected = _auto_detect_workspace(Path.cwd())
        if detected is None:
            raise click.ClickException("Workspace not found. Pass --workspace /path/to/root or run from inside it.")
        workspace = detected

    if not workspace.exists() or not workspace.is_dir():
        raise click.BadParameter(f"Directory '{workspace}' does not exist.", param_hint="--workspace / -w")

    ctx.obj["workspace"] = workspace.resolve()


@cli.command()
@click.option(
    "--mode",
    type=click.Choice(list(MODES)),
    default=None,
    help="staged: evaluate everything, then replace (default). "
    "listener: replace as each unit finishes evaluating.",
)
@click.option("--json", "output_json", is_flag=True, help="Output replacements as JSON")
@click.pass_context
def resolve(ctx: click.Context, mode: str | None, output_json: bool) -> None:
    """Replace dependencies and report what changed.

    Examples:

        relink resolve

        relink -w ../monorepo resolve --mode listener --json
    """
    from .commands.resolve import run_resolve

    sys.exit(run_resolve(ctx.obj["workspace"], mode, output_json))


@cli.command()
@click.option("--json", "output_json", is_flag=True, help="Output the index as JSON")
@click.pass_context
def exports(ctx: click.Context, output_json: bool) -> None:
    """List which unit and output group exports each artifact."""
    from .commands.exports import run_exports

    sys.exit(run_exports(ctx.obj["workspace"], output_json))


@cli.command()
@click.argument("unit")
@click.argument("configuration", default="runtime")
@click.option("--json", "output_json", is_flag=True, help="Output the explanation as JSON")
@click.pass_context
def explain(ctx: click.Context, unit: str, configuration: str, output_json: bool) -> None:
    """Explain how the external dependencies of UNIT's CONFIGURATION match.

    Examples:

        relink explain /app

        relink explain /app testRuntime --json
    """
    from .commands.explain import run_explain

    sys.exit(run_explain(ctx.obj["workspace"], unit, configuration, output_json))


def main() -> None:
    """Main entrypoint."""
    cli()


if __name__ == "__main__":
    main()
