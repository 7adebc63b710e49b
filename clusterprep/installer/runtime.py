"""Isolated runtime (virtualenv) provisioning and pinned requirement install."""

import logging
import shlex
from pathlib import Path

import click

from clusterprep.config import BootstrapConfig
from clusterprep.errors import ManifestNotFound, RuntimeProvisionError
from clusterprep.execution import CommandRunner

from .dependencies import PYTHON
from .models import InstallationOutcome, StepResult

BOOTSTRAP_PACKAGES = ("pip", "setuptools", "wheel")

_logging = logging.getLogger(__name__)


def require_manifest(path: Path, description: str) -> Path:
    """Fail fast when a manifest file the run depends on is absent.

    Raises:
        ManifestNotFound: If ``path`` is not a regular file
    """
    if not path.is_file():
        raise ManifestNotFound(
            f"{description} not found at {path}",
            hint="run from the project root or pass --root",
        )
    return path


async def ensure_virtualenv(config: BootstrapConfig, runner: CommandRunner) -> StepResult:
    """Create the virtualenv unless the directory already exists.

    An existing directory is trusted as-is; its contents are not validated.

    Raises:
        RuntimeProvisionError: If python3 is missing, too old, or venv creation fails
    """
    venv_dir = config.venv_dir
    if venv_dir.exists():
        click.echo(f"✅ Virtualenv already exists at {venv_dir}")
        return StepResult("virtualenv", InstallationOutcome.ALREADY_PRESENT, str(venv_dir))

    status = await PYTHON.probe(runner, config.context)
    if not status.available:
        raise RuntimeProvisionError("python3 not found on PATH", hint=PYTHON.install_hint)
    if not status.version_satisfied:
        raise RuntimeProvisionError(
            f"python3 {status.version} is older than {PYTHON.min_version}",
            hint=PYTHON.install_hint,
        )

    click.echo(f"Creating Python virtualenv in {venv_dir}")
    output, returncode = await runner.run(
        f"python3 -m venv {shlex.quote(str(venv_dir))}",
        env=config.context.environ(),
        timeout=None,
    )
    if returncode != 0:
        raise RuntimeProvisionError(
            f"Failed to create virtualenv at {venv_dir}: {output}",
            hint="install the python3-venv package",
        )

    return StepResult("virtualenv", InstallationOutcome.INSTALLED, str(venv_dir))


async def install_requirements(
    config: BootstrapConfig, runner: CommandRunner
) -> StepResult:
    """Install the pinned requirements into the virtualenv.

    A pip failure is reported rather than raised; the automation CLI check that
    follows is what decides whether the run can continue.
    """
    python = shlex.quote(str(config.venv_bin_dir / "python"))
    env = config.context.environ()
    commands = [
        f"{python} -m pip install --upgrade {' '.join(BOOTSTRAP_PACKAGES)}",
        f"{python} -m pip install -r {shlex.quote(str(config.requirements_file))}",
    ]

    click.echo("Installing Python packages into virtualenv")
    for command in commands:
        output, returncode = await runner.run(command, env=env, timeout=None)
        if returncode != 0:
            _logging.error(f"pip failed: {output}")
            click.secho(f"❌ pip install failed: {output}", fg="red")
            return StepResult("python requirements", InstallationOutcome.FAILED, output)

    return StepResult(
        "python requirements",
        InstallationOutcome.INSTALLED,
        str(config.requirements_file),
    )


__all__ = [
    "BOOTSTRAP_PACKAGES",
    "require_manifest",
    "ensure_virtualenv",
    "install_requirements",
]
