"""Download and install of the external CLIs (helm, talosctl, kubectl).

Every failure in here is downgraded to a warning and reported with the
manual-install hint; nothing raised by a tool install leaves this module.
"""

import logging
import lzma
import shlex
import tarfile
import tempfile
import zlib
from dataclasses import dataclass
from pathlib import Path

import click

from clusterprep.config import OVERRIDE_VARIABLES, BootstrapConfig
from clusterprep.errors import DownloadError, ResolutionError, ToolInstallError
from clusterprep.execution import CommandRunner
from clusterprep.http import CurlClient

from .models import InstallationOutcome, StepResult
from .resolution import (
    ApiJsonResolver,
    AssetFilterResolver,
    EnvOverrideResolver,
    RedirectTextResolver,
    VersionResolver,
)

_logging = logging.getLogger(__name__)

_ARCHIVE_ERRORS = (tarfile.TarError, EOFError, zlib.error, lzma.LZMAError)


@dataclass
class ToolSpec:
    name: str
    resolver: VersionResolver
    manual_hint: str
    archive_member: str | None = None

    @property
    def override_variable(self) -> str | None:
        return OVERRIDE_VARIABLES.get(self.name)


def default_tools(arch: str = "amd64") -> list[ToolSpec]:
    return [
        ToolSpec(
            name="helm",
            resolver=ApiJsonResolver(
                "https://api.github.com/repos/helm/helm/releases/latest",
                f"https://get.helm.sh/helm-{{version}}-linux-{arch}.tar.gz",
            ),
            archive_member=f"linux-{arch}/helm",
            manual_hint="https://helm.sh/docs/intro/install/",
        ),
        ToolSpec(
            name="talosctl",
            resolver=AssetFilterResolver(
                "https://api.github.com/repos/siderolabs/talos/releases/latest",
                f"talosctl-linux-{arch}",
            ),
            manual_hint="https://www.talos.dev/latest/talos-guides/install/talosctl/",
        ),
        ToolSpec(
            name="kubectl",
            resolver=RedirectTextResolver(
                "https://dl.k8s.io/release/stable.txt",
                f"https://dl.k8s.io/release/{{version}}/bin/linux/{arch}/kubectl",
            ),
            manual_hint="https://kubernetes.io/docs/tasks/tools/",
        ),
    ]


def select_resolver(spec: ToolSpec, config: BootstrapConfig) -> VersionResolver:
    override = config.override_for(spec.name)
    if override and spec.override_variable:
        return EnvOverrideResolver(override, spec.override_variable)
    return spec.resolver


def extract_binary(archive: Path, spec: ToolSpec, workdir: Path) -> Path:
    """Pull the tool's binary out of a tarball into ``workdir``.

    Raises:
        DownloadError: If the archive is unreadable or has no such binary
    """
    try:
        with tarfile.open(archive) as tar:
            members = [m for m in tar.getmembers() if m.isfile()]
            member = next(
                (m for m in members if m.name.lstrip("./") == spec.archive_member),
                None,
            ) or next((m for m in members if Path(m.name).name == spec.name), None)
            if member is None:
                raise DownloadError(f"{spec.name} binary not found in {archive.name}")

            source = tar.extractfile(member)
            if source is None:
                raise DownloadError(f"Cannot read {member.name} from {archive.name}")

            target = workdir / "extracted" / spec.name
            target.parent.mkdir(parents=True, exist_ok=True)
            with source, open(target, "wb") as out:
                out.write(source.read())
            return target
    except _ARCHIVE_ERRORS as e:
        raise DownloadError(f"Cannot extract {archive.name}: {e}") from e


async def place_binary(
    binary: Path, spec: ToolSpec, config: BootstrapConfig, runner: CommandRunner
) -> Path:
    destination = config.bin_dir / spec.name
    env = config.context.environ()
    for command in (
        config.privileged(f"mv {shlex.quote(str(binary))} {shlex.quote(str(destination))}"),
        config.privileged(f"chmod +x {shlex.quote(str(destination))}"),
    ):
        output, returncode = await runner.run(command, env=env, timeout=None)
        if returncode != 0:
            raise DownloadError(f"Failed to install {destination}: {output}")
    return destination


async def download_and_install(
    spec: ToolSpec,
    url: str,
    config: BootstrapConfig,
    runner: CommandRunner,
    http: CurlClient,
) -> Path:
    with tempfile.TemporaryDirectory(prefix=f"clusterprep-{spec.name}-") as tmp:
        workdir = Path(tmp)
        artifact = await http.download(url, workdir / f"{spec.name}.download")
        try:
            is_archive = tarfile.is_tarfile(artifact)
        except _ARCHIVE_ERRORS as e:
            raise DownloadError(f"Cannot read {artifact.name}: {e}") from e
        if is_archive:
            binary = extract_binary(artifact, spec, workdir)
        else:
            binary = artifact
        return await place_binary(binary, spec, config, runner)


def _report_failure(spec: ToolSpec, reason: str, url: str | None) -> None:
    click.secho(f"⚠️  Could not install {spec.name}: {reason}", fg="yellow")
    if url:
        click.echo(f"   Attempted URL: {url}")
    click.echo(f"   Please install {spec.name} manually: {spec.manual_hint}")
    if spec.override_variable:
        click.echo(
            f"   You can set {spec.override_variable} to a direct download URL "
            f"to install {spec.name} automatically."
        )


async def install_tool(
    spec: ToolSpec,
    config: BootstrapConfig,
    runner: CommandRunner,
    http: CurlClient,
) -> StepResult:
    click.echo(f"Ensure {spec.name} is installed")
    existing = runner.which(spec.name, path=config.context.path)
    if existing:
        click.echo(f"✅ {spec.name} already installed ({existing})")
        return StepResult(spec.name, InstallationOutcome.ALREADY_PRESENT, existing)

    click.echo(f"{spec.name} not found, attempting to download latest release")
    resolver = select_resolver(spec, config)
    try:
        url = await resolver.resolve(http)
    except ResolutionError as e:
        _logging.warning(f"{spec.name}: resolution via {resolver.source} failed: {e}")
        _report_failure(spec, str(e), None)
        return StepResult(spec.name, InstallationOutcome.SKIPPED_WITH_WARNING, str(e))

    click.echo(f"Downloading {spec.name} from {url}")
    try:
        destination = await download_and_install(spec, url, config, runner, http)
    except (ToolInstallError, OSError) as e:
        _logging.warning(f"{spec.name}: install from {url} failed: {e}")
        _report_failure(spec, str(e), url)
        return StepResult(
            spec.name, InstallationOutcome.SKIPPED_WITH_WARNING, str(e), url=url
        )

    click.echo(f"✅ {spec.name} installed to {destination}")
    return StepResult(spec.name, InstallationOutcome.INSTALLED, str(destination), url=url)


async def install_tools(
    specs: list[ToolSpec],
    config: BootstrapConfig,
    runner: CommandRunner,
    http: CurlClient,
) -> list[StepResult]:
    results = []
    for spec in specs:
        results.append(await install_tool(spec, config, runner, http))
    return results


__all__ = [
    "ToolSpec",
    "default_tools",
    "select_resolver",
    "extract_binary",
    "place_binary",
    "download_and_install",
    "install_tool",
    "install_tools",
]
