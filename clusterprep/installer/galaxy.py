"""Ansible collection installation with a single widened-PATH retry."""

import logging
import shlex
from pathlib import Path

import click
import yaml

from clusterprep.config import BootstrapConfig, ExecutionContext
from clusterprep.errors import (
    AutomationCliMissing,
    CollectionInstallFailed,
    ManifestNotFound,
)
from clusterprep.execution import CommandRunner

from .models import InstallationOutcome, StepResult

GALAXY_BINARY = "ansible-galaxy"

_logging = logging.getLogger(__name__)


def load_collection_names(path: Path) -> list[str]:
    """Return the collection names listed in a galaxy requirements file.

    Accepts both the ``collections:`` mapping form and a bare list.

    Raises:
        ManifestNotFound: If the file is missing or is not valid YAML
    """
    try:
        with open(path, "r") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ManifestNotFound(f"Collection manifest not found at {path}") from e
    except yaml.YAMLError as e:
        raise ManifestNotFound(f"Collection manifest {path} is not valid YAML: {e}") from e

    if isinstance(data, dict):
        entries = data.get("collections") or []
    elif isinstance(data, list):
        entries = data
    else:
        entries = []

    names = []
    for entry in entries:
        if isinstance(entry, str):
            names.append(entry)
        elif isinstance(entry, dict) and entry.get("name"):
            names.append(str(entry["name"]))
    return names


def galaxy_path(config: BootstrapConfig) -> Path:
    return config.venv_bin_dir / GALAXY_BINARY


def require_galaxy(config: BootstrapConfig, runner: CommandRunner) -> Path:
    """Raises AutomationCliMissing if ansible-galaxy is not in the virtualenv."""
    path = galaxy_path(config)
    if not runner.which(str(path)):
        activate = config.venv_dir / "bin" / "activate"
        raise AutomationCliMissing(
            f"{GALAXY_BINARY} not found in venv; ensure ansible-core is installed in the venv",
            hint=f"source {activate} && pip install 'ansible-core>=2.12'",
        )
    return path


def galaxy_install_command(config: BootstrapConfig) -> str:
    inner = (
        f"{shlex.quote(str(galaxy_path(config)))} install -r "
        f"{shlex.quote(str(config.collections_file))}"
    )
    return f"bash -lc {shlex.quote(inner)}"


async def _attempt(
    command: str, context: ExecutionContext, runner: CommandRunner
) -> tuple[str, int]:
    return await runner.run(command, env=context.environ(), timeout=None)


async def install_collections(
    config: BootstrapConfig, runner: CommandRunner
) -> StepResult:
    """Install the collection manifest, retrying once with the venv bin on PATH.

    Raises:
        AutomationCliMissing: If ansible-galaxy is not in the virtualenv
        CollectionInstallFailed: If both attempts fail
    """
    require_galaxy(config, runner)
    names = load_collection_names(config.collections_file)
    _logging.debug(f"Collections requested: {', '.join(names) or '(none)'}")

    click.echo("Installing required Ansible collections into virtualenv")
    command = galaxy_install_command(config)

    output, returncode = await _attempt(command, config.context, runner)
    if returncode == 0:
        return StepResult(
            "ansible collections", InstallationOutcome.INSTALLED, ", ".join(names)
        )

    _logging.warning(f"ansible-galaxy failed: {output}")
    click.echo("Primary ansible-galaxy attempt failed; retrying with explicit PATH set")
    widened = config.context.with_path_prefix(config.venv_bin_dir)
    output, returncode = await _attempt(command, widened, runner)
    if returncode != 0:
        raise CollectionInstallFailed(
            f"ansible-galaxy install failed twice: {output}",
            hint=f"inspect {config.collections_file} and rerun",
        )

    return StepResult(
        "ansible collections", InstallationOutcome.INSTALLED, ", ".join(names)
    )


__all__ = [
    "GALAXY_BINARY",
    "load_collection_names",
    "galaxy_path",
    "require_galaxy",
    "galaxy_install_command",
    "install_collections",
]
