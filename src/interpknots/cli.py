"""Interface for ``python -m interpknots``."""

import json
import logging
from itertools import islice

import click
from pydantic import TypeAdapter

from .boundary import BoundaryPolicy, NoRepeat, parse_policy
from .grid import KnotGrid, knots


@click.group(invoke_without_command=True)
@click.option(
    "--log-level",
    default="INFO",
    type=click.Choice(
        ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"], case_sensitive=False
    ),
)
@click.version_option(prog_name="interpknots", message="%(version)s")
@click.pass_context
def cli(ctx: click.Context, log_level: str):
    """Top level interpknots command line interface."""
    level = getattr(logging, log_level.upper(), None)
    logging.basicConfig(format="%(levelname)s:%(message)s", level=level)

    # if no command is supplied, print the help message
    if ctx.invoked_subcommand is None:
        # We need to prove that cli has been converted to a command
        # by the click decorator to keep pyright happy.
        assert isinstance(cli, click.Command)
        click.echo(cli.get_help(ctx))


@cli.command(name="knots")
@click.argument("axes", nargs=-1, required=True)
@click.option(
    "--boundary",
    "-b",
    multiple=True,
    help="Boundary policy like 'periodic' or 'flat:reflect'. "
    "Give once for every axis, or once per axis.",
)
@click.option("--num", "-n", type=click.IntRange(min=0), help="Knots to print.")
@click.option(
    "--interpolation-only", is_flag=True, help="Ignore the boundary policy."
)
def knots_command(
    axes: tuple[str, ...],
    boundary: tuple[str, ...],
    num: int | None,
    interpolation_only: bool,
):
    """Print the knots of a grid, one per line.

    Each of AXES is a comma separated list of knots, e.g. 1,1.2,2.3,3
    """
    try:
        policies: list[BoundaryPolicy] = [parse_policy(b) for b in boundary]
        grid = KnotGrid(
            axes=[[float(k) for k in axis.split(",")] for axis in axes],
            boundary=policies[0] if len(policies) == 1 else policies or NoRepeat(),
        )
        iterator = knots(grid, interpolation_only=interpolation_only)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e
    if num is None and not iterator.is_finite():
        raise click.UsageError("Knots repeat forever, so --num must be given")
    for knot in islice(iterator, num):
        if isinstance(knot, tuple):
            click.echo(" ".join(str(float(k)) for k in knot))
        else:
            click.echo(str(float(knot)))


@cli.command()
def schema():
    """Print the JSON schema for a KnotGrid."""
    click.echo(json.dumps(TypeAdapter(KnotGrid).json_schema(), indent=2))
