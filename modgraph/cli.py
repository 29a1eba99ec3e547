"""Click CLI with show, enumerate, and serve subcommands."""

from __future__ import annotations

import json
import logging
from pathlib import Path

import click

from modgraph.config import VIEW_CHOICES, ExplorerConfig, load_config
from modgraph.exceptions import ModuleGraphError
from modgraph.explorer import VIEW_MODES, ModulesExplorer, ViewMode
from modgraph.scanner import enumerate_translation_units
from modgraph.store import GraphStatus
from modgraph.views import TreeNode, ViewRouter


def _load_notification(path: Path) -> dict:
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as e:
        raise click.ClickException(f"{path} is not valid JSON: {e}")
    if not isinstance(data, dict):
        raise click.ClickException(f"{path} must contain a JSON object")
    # Accept a bare snapshot as well as a full notification
    if "event" not in data:
        data = {"event": "update", **data}
    return data


def _echo_tree(router: ViewRouter, node: TreeNode | None, depth: int, max_depth: int) -> None:
    for child in router.get_children(node):
        item = router.get_node(child)
        marker = "▸" if item.collapsible and depth + 1 >= max_depth else " "
        line = f"{'  ' * depth}{marker} {click.style(item.label, fg='cyan' if item.icon else None)}"
        if item.description:
            line += f"  {click.style(item.description, dim=True)}"
        click.echo(line)
        if item.collapsible and depth + 1 < max_depth:
            _echo_tree(router, child, depth + 1, max_depth)


@click.group()
@click.version_option(version="0.1.0")
@click.option("--config", "config_path", type=click.Path(dir_okay=False, path_type=Path),
              help="Path to a JSON config file")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool):
    """modgraph: Explore the module dependency graph of a C++ modules codebase."""
    try:
        config = load_config(config_path)
    except ModuleGraphError as e:
        raise click.ClickException(str(e))
    logging.basicConfig(
        level=logging.DEBUG if verbose else config.log_level.upper(),
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = config


@cli.command()
@click.argument("snapshot", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--view", "view", type=click.Choice(VIEW_CHOICES), help="Tree to display")
@click.option("--depth", "-d", default=8, show_default=True, help="Maximum expansion depth")
@click.pass_obj
def show(config: ExplorerConfig, snapshot: Path, view: str | None, depth: int):
    """Resolve a modules snapshot and print one of its trees."""
    explorer = ModulesExplorer(config)
    if view:
        explorer.activate_view_mode(ViewMode(view))

    result = explorer.publish_modules_info(_load_notification(snapshot))
    if result.status is GraphStatus.INVALID:
        raise click.ClickException(explorer.message or "Snapshot rejected")

    click.echo(click.style(f"[{explorer.description}]", bold=True))
    if explorer.message:
        click.echo(explorer.message)
    _echo_tree(explorer.router, None, 0, depth)

    graph = explorer.store.graph
    click.echo()
    click.echo(
        f"{len(graph.modules)} module(s), {len(graph.module_units)} module unit(s), "
        f"{len(graph.translation_units)} translation unit(s), {len(graph.edges())} import edge(s)"
    )


@cli.command("enumerate")
@click.argument("root", type=click.Path(exists=True, file_okay=False, path_type=Path), default=".")
@click.pass_obj
def enumerate_units(config: ExplorerConfig, root: Path):
    """List the C++ translation units under ROOT."""
    paths = enumerate_translation_units(root, config.extensions, config.skip_dirs)
    if not paths:
        click.echo("No translation units found.")
        return
    for path in paths:
        click.echo(str(path))
    click.echo(f"\n{len(paths)} translation unit(s)")


@cli.command()
@click.pass_obj
def views(config: ExplorerConfig):
    """List the available view modes."""
    for mode, info in VIEW_MODES.items():
        current = "*" if mode.value == config.default_view else " "
        click.echo(f"{current} {mode.value:<10} {info.pick_label:<10} {info.pick_description}")


@cli.command()
@click.option("--port", "-p", default=8421, help="Port number")
@click.option("--host", default="127.0.0.1", help="Host address")
@click.option("--snapshot", type=click.Path(exists=True, dir_okay=False, path_type=Path),
              help="Publish this snapshot before serving")
@click.pass_obj
def serve(config: ExplorerConfig, port: int, host: str, snapshot: Path | None):
    """Start the HTTP display surface."""
    try:
        import uvicorn
    except ImportError:
        raise click.ClickException(
            "uvicorn is required for the web UI. "
            "Install with: pip install 'modgraph[web]'"
        )

    from modgraph.web import create_app

    explorer = ModulesExplorer(config)
    if snapshot:
        explorer.publish_modules_info(_load_notification(snapshot))

    click.echo(f"Starting modgraph at http://{host}:{port}")
    uvicorn.run(create_app(explorer), host=host, port=port, log_level=config.log_level.lower())


if __name__ == "__main__":
    cli()
