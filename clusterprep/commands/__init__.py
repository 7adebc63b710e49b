"""CLI command definitions for clusterprep."""

import click

from clusterprep.commands.bootstrap import bootstrap
from clusterprep.commands.detect import detect
from clusterprep.commands.status import status
from clusterprep.commands.tools import tools


@click.group()
@click.option("--debug", is_flag=True, help="Enable debug output for troubleshooting")
@click.pass_context
def cli(ctx, debug):
    """Prepare a Linux host for the cluster automation toolchain."""
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


cli.add_command(bootstrap)
cli.add_command(detect)
cli.add_command(status)
cli.add_command(tools)

__all__ = ["cli"]


if __name__ == "__main__":
    cli()
