"""Detect command implementation."""

import sys

import click

from clusterprep import BootstrapConfig, CommandRunner, UnsupportedHost, setup_logging
from clusterprep.errors import describe
from clusterprep.installer import resolve_profile


@click.command()
@click.pass_context
def detect(ctx):
    """Show which package manager profile would be used."""
    setup_logging(ctx.obj.get("debug", False))
    config = BootstrapConfig.from_env()

    try:
        profile = resolve_profile(CommandRunner(), config.context)
    except UnsupportedHost as e:
        click.echo(describe(e), err=True)
        sys.exit(e.exit_code)

    click.echo(f"Package manager: {profile.name} ({profile.executable})")
    click.echo(f"Install command: {profile.render_install(profile.packages)}")
    click.echo("Packages:")
    for package in profile.packages:
        click.echo(f"  • {package}")
