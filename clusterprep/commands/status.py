"""Status command implementation."""

import asyncio
from pathlib import Path

import click

from clusterprep import BootstrapConfig, CommandRunner, setup_logging
from clusterprep.installer import default_tools, scan_dependencies
from clusterprep.installer.galaxy import galaxy_path


@click.command()
@click.option(
    "--root",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Directory holding the requirement manifests (default: $CLUSTERPREP_ROOT or cwd)",
)
@click.pass_context
def status(ctx, root: Path | None):
    """Report what is already installed, without changing anything."""
    setup_logging(ctx.obj.get("debug", False))
    config = BootstrapConfig.from_env(root=root)
    runner = CommandRunner()

    click.echo("Host dependencies:")
    statuses = asyncio.run(scan_dependencies(runner, config.context))
    for name, dep_status in statuses.items():
        version = f" {dep_status.version}" if dep_status.version else ""
        click.echo(f"  {dep_status.status_icon} {name}{version}")

    click.echo("\nProject:")
    for label, path in (
        ("requirements", config.requirements_file),
        ("collections", config.collections_file),
        ("virtualenv", config.venv_dir),
        ("ansible-galaxy", galaxy_path(config)),
    ):
        icon = "✅" if path.exists() else "❌"
        click.echo(f"  {icon} {label}: {path}")

    click.echo("\nExternal tools:")
    for spec in default_tools(config.arch):
        path = runner.which(spec.name, path=config.context.path)
        icon = "✅" if path else "❌"
        click.echo(f"  {icon} {spec.name}{f': {path}' if path else ''}")
