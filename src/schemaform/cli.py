"""
schemaform command line.

Commands:
- compile: show the control tree for a layout file
- flatten: flatten a tree-shaped value against a layout
- actions: show normalized action buttons
- fetch: download ``<url>/form/`` and show its control tree
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.tree import Tree

from ._version import get_version
from .core.actions import normalize_actions
from .core.compiler import compile_layout
from .core.errors import SchemaFormError
from .core.flatten import flatten
from .core.ir import ChoiceField, ControlNode, Group, RadioField
from .runtime.config import load_settings
from .runtime.transport import FormTransport

app = typer.Typer(
    help="Compile declarative form layouts and flatten form values",
    no_args_is_help=True,
)

console = Console()
err_console = Console(stderr=True)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"schemaform {get_version()}")
        raise typer.Exit()


@app.callback()
def main_callback(
    version: bool | None = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show version",
    ),
    log_level: Annotated[
        str,
        typer.Option("--log-level", envvar="LOG_LEVEL", help="Logging level"),
    ] = "WARNING",
) -> None:
    """schemaform CLI main callback for global options."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper(), logging.WARNING),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _load_json(path: Path) -> Any:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        err_console.print(f"[red]Cannot read {path}:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)
    except json.JSONDecodeError as e:
        err_console.print(f"[red]Invalid JSON in {path}:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)


def _compile_or_exit(layout: Any, source: str) -> list[ControlNode]:
    try:
        return compile_layout(layout)
    except SchemaFormError as e:
        err_console.print(f"[red]Cannot compile {escape(source)}:[/red]\n{escape(str(e))}")
        raise typer.Exit(code=1)


def _node_label(node: ControlNode) -> str:
    if isinstance(node, Group):
        legend = f" [dim]{escape(node.legend)}[/dim]" if node.legend else ""
        return f"[bold]{escape(node.id)}[/bold] (group){legend}"
    text = f"[cyan]{escape(node.id)}[/cyan] ({node.kind})"
    if node.label:
        text += f" [dim]{escape(node.label)}[/dim]"
    if isinstance(node, RadioField | ChoiceField) and node.options:
        text += escape(" [" + ", ".join(option.label for option in node.options) + "]")
    return text


def render_tree(controls: list[ControlNode], title: str = "form") -> Tree:
    """Build a rich ``Tree`` of the compiled controls."""
    tree = Tree(f"[bold]{escape(title)}[/bold]")

    def add(parent: Tree, nodes: list[ControlNode]) -> None:
        for node in nodes:
            branch = parent.add(_node_label(node))
            if isinstance(node, Group):
                add(branch, node.controls)

    add(tree, controls)
    return tree


def _print_controls(controls: list[ControlNode], title: str, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps([node.model_dump() for node in controls], indent=2, default=str))
    else:
        console.print(render_tree(controls, title))


@app.command("compile")
def compile_command(
    layout_file: Annotated[Path, typer.Argument(help="JSON file holding the layout list")],
    as_json: Annotated[bool, typer.Option("--json", help="Output JSON")] = False,
) -> None:
    """Compile a layout and print its control tree."""
    controls = _compile_or_exit(_load_json(layout_file), str(layout_file))
    _print_controls(controls, layout_file.name, as_json)


@app.command("flatten")
def flatten_command(
    layout_file: Annotated[Path, typer.Argument(help="JSON file holding the layout list")],
    value_file: Annotated[Path, typer.Argument(help="JSON file holding the form value")],
) -> None:
    """Flatten a tree-shaped form value into a submission record."""
    controls = _compile_or_exit(_load_json(layout_file), str(layout_file))
    try:
        record = flatten(_load_json(value_file), controls)
    except SchemaFormError as e:
        err_console.print(f"[red]Cannot flatten {value_file}:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)
    typer.echo(json.dumps(record, indent=2, default=str))


@app.command("actions")
def actions_command(
    actions_file: Annotated[Path, typer.Argument(help="JSON file holding the action list")],
) -> None:
    """Normalize an action list and print it as a table."""
    try:
        actions = normalize_actions(_load_json(actions_file))
    except SchemaFormError as e:
        err_console.print(f"[red]Invalid actions:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    table = Table(title="Actions")
    table.add_column("id")
    table.add_column("label")
    table.add_column("color")
    table.add_column("cancel")
    for action in actions:
        table.add_row(
            escape(str(action.id)), escape(str(action.label)), action.color, str(action.cancel)
        )
    console.print(table)


@app.command("fetch")
def fetch_command(
    url: Annotated[str, typer.Argument(help="Resource url; <url>/form/ is downloaded")],
    settings_file: Annotated[
        Path | None, typer.Option("--settings", "-s", help="Settings file")
    ] = None,
    as_json: Annotated[bool, typer.Option("--json", help="Output JSON")] = False,
) -> None:
    """Download a form config and print its compiled control tree."""
    try:
        settings = load_settings(settings_file)
    except SchemaFormError as e:
        err_console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(code=1)

    async def _fetch() -> Any:
        async with settings.create_client() as client:
            return await FormTransport(client).fetch_form(url)

    try:
        config = asyncio.run(_fetch())
    except SchemaFormError as e:
        err_console.print(f"[red]Download failed:[/red] {escape(str(e))}")
        raise typer.Exit(code=1)

    controls = _compile_or_exit(config.layout, url)
    _print_controls(controls, config.form_title or url, as_json)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
