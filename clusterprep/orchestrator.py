"""Sequential bootstrap pipeline."""

import logging

import click

from .config import BootstrapConfig
from .execution import CommandRunner
from .http import CurlClient
from .installer import (
    BootstrapReport,
    ToolSpec,
    check_iso_tooling,
    configure_locale,
    default_tools,
    ensure_virtualenv,
    install_collections,
    install_requirements,
    install_system_packages,
    install_tools,
    require_manifest,
    resolve_profile,
)

_logging = logging.getLogger(__name__)


async def run_bootstrap(
    config: BootstrapConfig,
    runner: CommandRunner | None = None,
    http: CurlClient | None = None,
    tools: list[ToolSpec] | None = None,
    skip_tools: bool = False,
) -> BootstrapReport:
    """Bring the host to a usable automation toolchain state.

    Steps run strictly in order and each one is safe to repeat. Fatal
    conditions propagate as ``BootstrapError``; everything else is recorded
    in the returned report.

    Args:
        config: Run configuration
        runner: Command runner (defaults to a real subprocess runner)
        http: HTTP client (defaults to curl through ``runner``)
        tools: External tools to install (defaults to helm, talosctl, kubectl)
        skip_tools: Do not touch the external tools at all

    Returns:
        Report with one result per step
    """
    runner = runner or CommandRunner()
    http = http or CurlClient(runner, config.context, config.github_token)
    report = BootstrapReport()

    click.echo(f"Running clusterprep bootstrap from {config.root_dir}")

    # Both manifests are checked before anything privileged runs.
    require_manifest(config.requirements_file, "Pinned requirements file")
    require_manifest(config.collections_file, "Collection requirements file")

    profile = resolve_profile(runner, config.context)
    click.echo(f"Using package manager: {profile.name}")

    report.add(await install_system_packages(profile, config, runner))
    report.add(await configure_locale(profile, config, runner))
    report.add(await ensure_virtualenv(config, runner))
    report.add(check_iso_tooling(config, runner))
    report.add(await install_requirements(config, runner))
    report.add(await install_collections(config, runner))

    if skip_tools:
        _logging.debug("Skipping external tools")
    else:
        specs = tools if tools is not None else default_tools(config.arch)
        report.add(*await install_tools(specs, config, runner, http))

    return report


__all__ = ["run_bootstrap"]
