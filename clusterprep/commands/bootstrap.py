"""Bootstrap command implementation."""

import asyncio
import sys
from pathlib import Path

import click

from clusterprep import BootstrapConfig, BootstrapError, setup_logging
from clusterprep.errors import describe
from clusterprep.orchestrator import run_bootstrap
from clusterprep.report import print_completion


@click.command()
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the requirement manifests (default: $CLUSTERPREP_ROOT or cwd)",
)
@click.option(
    "--skip-tools",
    is_flag=True,
    help="Do not install helm, talosctl and kubectl",
)
@click.pass_context
def bootstrap(ctx, root: Path | None, skip_tools: bool):
    """Install system packages, the virtualenv, collections and external CLIs."""
    debug = ctx.obj.get("debug", False)
    setup_logging(debug)
    config = BootstrapConfig.from_env(root=root)

    try:
        report = asyncio.run(run_bootstrap(config, skip_tools=skip_tools))
    except BootstrapError as e:
        click.echo(describe(e), err=True)
        sys.exit(e.exit_code)

    print_completion(config, report)
