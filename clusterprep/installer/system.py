"""Native package installation and locale setup."""

import logging
import shlex

import click

from clusterprep.config import BootstrapConfig
from clusterprep.errors import SystemPackagesFailed
from clusterprep.execution import PROBE_TIMEOUT, CommandRunner

from .dependencies import ISO_TOOLS, split_locale
from .models import InstallationOutcome, StepResult
from .profiles import PackageManager, PackageManagerProfile

_logging = logging.getLogger(__name__)

LOCALE_GEN_FILE = "/etc/locale.gen"
DEFAULT_LOCALE_FILE = "/etc/default/locale"


async def find_missing_packages(
    profile: PackageManagerProfile, config: BootstrapConfig, runner: CommandRunner
) -> list[str]:
    missing = []
    env = config.context.environ()
    for package in profile.packages:
        _, returncode = await runner.run(
            f"{profile.render_query(package)} >/dev/null 2>&1",
            env=env,
            timeout=PROBE_TIMEOUT,
        )
        if returncode != 0:
            missing.append(package)
    return missing


async def install_system_packages(
    profile: PackageManagerProfile, config: BootstrapConfig, runner: CommandRunner
) -> StepResult:
    """Install the profile's package set, skipping packages already present.

    Raises:
        SystemPackagesFailed: If the install fails on a profile where that is fatal
    """
    missing = await find_missing_packages(profile, config, runner)
    if not missing:
        click.echo(f"✅ System packages already installed ({profile.name})")
        return StepResult("system packages", InstallationOutcome.ALREADY_PRESENT)

    click.echo(
        f"Installing system packages with {profile.name} (requires sudo): "
        f"{' '.join(missing)}"
    )
    env = config.context.environ()

    if profile.refresh_command:
        output, returncode = await runner.run(
            config.privileged(profile.refresh_command), env=env, timeout=None
        )
        if returncode != 0:
            return _package_failure(profile, "refresh", output)

    output, returncode = await runner.run(
        config.privileged(profile.render_install(missing)), env=env, timeout=None
    )
    if returncode != 0:
        return _package_failure(profile, "install", output)

    click.echo(f"✅ Installed {len(missing)} system package(s)")
    return StepResult(
        "system packages", InstallationOutcome.INSTALLED, " ".join(missing)
    )


def _package_failure(
    profile: PackageManagerProfile, action: str, output: str
) -> StepResult:
    message = f"{profile.name} package {action} failed: {output}"
    if profile.install_is_fatal:
        raise SystemPackagesFailed(
            message, hint="check network access and that sudo is available"
        )

    _logging.warning(message)
    click.secho(f"⚠️  {message} (continuing)", fg="yellow")
    return StepResult("system packages", InstallationOutcome.SKIPPED_WITH_WARNING, message)


def _normalize_locale(name: str) -> str:
    return name.strip().lower().replace("-", "")


async def locale_available(config: BootstrapConfig, runner: CommandRunner) -> bool:
    output, returncode = await runner.run(
        "locale -a", env=config.context.environ(), timeout=PROBE_TIMEOUT
    )
    if returncode != 0:
        return False
    wanted = _normalize_locale(config.context.lang)
    return any(_normalize_locale(line) == wanted for line in output.splitlines())


def _locale_steps(
    profile: PackageManagerProfile, config: BootstrapConfig
) -> list[tuple[str, str]]:
    lang = config.context.lang
    lc_all = config.context.lc_all
    language, charset = split_locale(lang)
    sudo = config.privileged

    if profile.manager == PackageManager.APT:
        entry = f"{lang} {charset}"
        pattern = f"^{lang}\\s+{charset}"
        return [
            (
                "enable locale in /etc/locale.gen",
                f"grep -q -E {shlex.quote(pattern)} {LOCALE_GEN_FILE} || "
                f"echo {shlex.quote(entry)} | {sudo(f'tee -a {LOCALE_GEN_FILE}')} >/dev/null",
            ),
            ("locale-gen", sudo(f"locale-gen {shlex.quote(lang)}")),
            (
                "localedef",
                sudo(
                    f"localedef -i {shlex.quote(language)} -f {shlex.quote(charset)} "
                    f"{shlex.quote(lang)}"
                ),
            ),
            (
                "persist default locale",
                f"echo {shlex.quote(f'LANG={lang}')} | "
                f"{sudo(f'tee {DEFAULT_LOCALE_FILE}')} >/dev/null",
            ),
            (
                "update-locale",
                sudo(
                    f"update-locale {shlex.quote(f'LANG={lang}')} "
                    f"{shlex.quote(f'LC_ALL={lc_all}')}"
                ),
            ),
        ]

    return [
        ("localectl", sudo(f"localectl set-locale {shlex.quote(f'LANG={lang}')}")),
    ]


async def configure_locale(
    profile: PackageManagerProfile, config: BootstrapConfig, runner: CommandRunner
) -> StepResult:
    """Generate and select the UTF-8 locale. Every sub-step is best-effort."""
    if await locale_available(config, runner):
        click.echo(f"✅ Locale {config.context.lang} already available")
        return StepResult("locale", InstallationOutcome.ALREADY_PRESENT)

    click.echo(f"Configuring locale {config.context.lang}")
    env = config.context.environ()
    failed = []
    for label, command in _locale_steps(profile, config):
        output, returncode = await runner.run(command, env=env, timeout=None)
        if returncode != 0:
            _logging.warning(f"Locale step '{label}' failed: {output}")
            failed.append(label)

    if failed:
        detail = f"locale steps failed: {', '.join(failed)}"
        click.secho(f"⚠️  {detail} (continuing)", fg="yellow")
        return StepResult("locale", InstallationOutcome.SKIPPED_WITH_WARNING, detail)

    return StepResult("locale", InstallationOutcome.INSTALLED, config.context.lang)


def check_iso_tooling(config: BootstrapConfig, runner: CommandRunner) -> StepResult:
    for tool in ISO_TOOLS:
        path = runner.which(tool, path=config.context.path)
        if path:
            return StepResult("iso tooling", InstallationOutcome.ALREADY_PRESENT, path)

    click.secho(
        f"⚠️  Warning: no ISO creation tool found ({'/'.join(ISO_TOOLS)}). "
        "Some role tasks create Talos config ISOs.",
        fg="yellow",
    )
    click.echo("   On Debian/Ubuntu: sudo apt-get install -y genisoimage xorriso")
    click.echo("   On RHEL/Fedora: sudo dnf install -y xorriso")
    click.echo(
        "   You can set KUBECTL_DOWNLOAD_URL and TALOSCTL_DOWNLOAD_URL "
        "if downloads are blocked by a proxy."
    )
    return StepResult(
        "iso tooling",
        InstallationOutcome.SKIPPED_WITH_WARNING,
        "no ISO creation tool found",
    )


__all__ = [
    "find_missing_packages",
    "install_system_packages",
    "locale_available",
    "configure_locale",
    "check_iso_tooling",
]
