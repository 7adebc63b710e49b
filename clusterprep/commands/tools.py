"""Tools command implementation."""

import asyncio

import click

from clusterprep import BootstrapConfig, CommandRunner, setup_logging
from clusterprep.http import CurlClient
from clusterprep.installer import InstallationOutcome, default_tools, install_tools

TOOL_NAMES = [spec.name for spec in default_tools()]


@click.command()
@click.option(
    "--only",
    "-o",
    multiple=True,
    type=click.Choice(TOOL_NAMES),
    help="Install only this tool (repeatable)",
)
@click.pass_context
def tools(ctx, only: tuple[str, ...]):
    """Install the external CLIs that are missing from PATH."""
    setup_logging(ctx.obj.get("debug", False))
    config = BootstrapConfig.from_env()
    specs = [s for s in default_tools(config.arch) if not only or s.name in only]

    runner = CommandRunner()
    http = CurlClient(runner, config.context, config.github_token)
    results = asyncio.run(install_tools(specs, config, runner, http))

    skipped = [r for r in results if r.outcome == InstallationOutcome.SKIPPED_WITH_WARNING]
    if skipped:
        click.secho(
            f"\n{len(skipped)} tool(s) could not be installed: "
            f"{', '.join(r.name for r in skipped)}",
            fg="yellow",
        )
