"""Check a stack declaration without a Pulumi engine.

    python validate.py check config.yaml
    python validate.py order config.yaml --destroy
"""

from pathlib import Path
from typing import Annotated

import typer

from config import load_config
from errors import ConfigurationError, StackError, ValidationError
from graph import build_dependency_graph
from validation import validate_config

app = typer.Typer(add_completion=False, help="Static checks for the stack declaration.")

ConfigFile = Annotated[
    Path,
    typer.Argument(help="Path to the YAML declaration.", dir_okay=False),
]


def _err(msg: str) -> None:
    typer.echo(typer.style(msg, fg=typer.colors.RED), err=True)


def _fail(exc: StackError) -> None:
    if isinstance(exc, ValidationError):
        _err("Validation failed:")
        for problem in exc.problems:
            _err(f"  - {problem}")
    elif isinstance(exc, ConfigurationError):
        _err(f"Configuration error: {exc}")
    else:
        _err(str(exc))
    raise typer.Exit(code=1)


@app.command()
def check(path: ConfigFile = Path("config.yaml")) -> None:
    """Verify references, argument names and types, and acyclicity."""
    try:
        config = load_config(str(path))
        validate_config(config)
    except StackError as e:
        _fail(e)
    typer.echo(f"{path}: {len(config.aws_resources)} resources, {len(config.outputs)} outputs OK")


@app.command()
def order(
    path: ConfigFile = Path("config.yaml"),
    destroy: Annotated[bool, typer.Option("--destroy", help="Print destruction order.")] = False,
) -> None:
    """Print the order resources are created (or destroyed) in."""
    try:
        config = load_config(str(path))
        graph = build_dependency_graph(config)
        names = graph.reverse_topological_order() if destroy else graph.topological_order()
    except StackError as e:
        _fail(e)
    for index, name in enumerate(names, start=1):
        deps = ", ".join(sorted(graph.dependencies_of(name)))
        typer.echo(f"{index:3d}. {name}" + (f"  <- {deps}" if deps else ""))


if __name__ == "__main__":
    app()
