"""Package manager detection and per-manager install profiles."""

import logging
from dataclasses import dataclass
from enum import Enum

from clusterprep.config import ExecutionContext
from clusterprep.errors import UnsupportedHost
from clusterprep.execution import CommandRunner

_logging = logging.getLogger(__name__)


class PackageManager(Enum):
    APT = "apt"
    DNF = "dnf"
    YUM = "yum"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class PackageManagerProfile:
    manager: PackageManager
    executable: str
    install_command: str
    query_command: str
    packages: tuple[str, ...]
    refresh_command: str | None = None
    install_is_fatal: bool = False

    @property
    def name(self) -> str:
        return self.manager.value

    def render_install(self, packages: list[str] | tuple[str, ...]) -> str:
        return self.install_command.format(packages=" ".join(packages))

    def render_query(self, package: str) -> str:
        return self.query_command.format(package=package)


_RPM_PACKAGES = (
    "python3",
    "python3-pip",
    "gcc",
    "python3-devel",
    "redhat-rpm-config",
    "glibc-langpack-en",
)

# Probe order matters: the first executable found on PATH wins.
PROFILES: tuple[PackageManagerProfile, ...] = (
    PackageManagerProfile(
        manager=PackageManager.APT,
        executable="apt-get",
        install_command="apt-get install -y {packages}",
        query_command="dpkg -s {package}",
        refresh_command="apt-get update -y",
        install_is_fatal=True,
        packages=(
            "python3",
            "python3-venv",
            "python3-pip",
            "build-essential",
            "libssl-dev",
            "libffi-dev",
            "locales",
            "jq",
            "genisoimage",
            "xorriso",
            "curl",
        ),
    ),
    PackageManagerProfile(
        manager=PackageManager.DNF,
        executable="dnf",
        install_command="dnf install -y {packages}",
        query_command="rpm -q {package}",
        packages=_RPM_PACKAGES,
    ),
    PackageManagerProfile(
        manager=PackageManager.YUM,
        executable="yum",
        install_command="yum install -y {packages}",
        query_command="rpm -q {package}",
        packages=_RPM_PACKAGES,
    ),
)


def detect_package_manager(
    runner: CommandRunner, context: ExecutionContext
) -> PackageManager:
    for profile in PROFILES:
        if runner.which(profile.executable, path=context.path):
            return profile.manager
    return PackageManager.UNSUPPORTED


def get_profile(manager: PackageManager) -> PackageManagerProfile | None:
    return next((p for p in PROFILES if p.manager == manager), None)


def resolve_profile(
    runner: CommandRunner, context: ExecutionContext
) -> PackageManagerProfile:
    """Return the profile of the first supported package manager on PATH.

    Raises:
        UnsupportedHost: If none of apt-get, dnf or yum is available
    """
    manager = detect_package_manager(runner, context)
    profile = get_profile(manager)
    if profile is None:
        raise UnsupportedHost(
            "Unsupported package manager (none of apt-get, dnf, yum found)",
            hint="install Python 3.9+, pip and required build tools manually",
        )

    _logging.debug(f"Selected package manager profile: {profile.name}")
    return profile


__all__ = [
    "PackageManager",
    "PackageManagerProfile",
    "PROFILES",
    "detect_package_manager",
    "get_profile",
    "resolve_profile",
]
