"""Host dependency probing."""

import re
from dataclasses import dataclass

from packaging import version as pkg_version

from clusterprep.config import ExecutionContext
from clusterprep.execution import PROBE_TIMEOUT, CommandRunner
from clusterprep.versions import extract_version_number

ISO_TOOLS = ("genisoimage", "mkisofs", "xorriso")


@dataclass
class Dependency:
    name: str
    binary: str
    install_hint: str
    version_command: str | None = None
    min_version: str | None = None

    def locate(self, runner: CommandRunner, context: ExecutionContext) -> str | None:
        return runner.which(self.binary, path=context.path)

    async def get_version(
        self, runner: CommandRunner, context: ExecutionContext
    ) -> str | None:
        if not self.version_command:
            return None

        output, returncode = await runner.run(
            self.version_command, env=context.environ(), timeout=PROBE_TIMEOUT
        )
        if returncode != 0:
            return None
        return extract_version_number(output) or None

    def is_version_satisfied(self, version: str | None) -> bool:
        if not self.min_version:
            return True
        if not version:
            return False

        try:
            return pkg_version.parse(version) >= pkg_version.parse(self.min_version)
        except pkg_version.InvalidVersion:
            return True

    async def probe(
        self, runner: CommandRunner, context: ExecutionContext
    ) -> "DependencyStatus":
        path = self.locate(runner, context)
        if path is None:
            return DependencyStatus(name=self.name, available=False)

        version = await self.get_version(runner, context)
        return DependencyStatus(
            name=self.name,
            available=True,
            version=version,
            path=path,
            version_satisfied=self.is_version_satisfied(version),
        )


@dataclass
class DependencyStatus:
    name: str
    available: bool
    version: str | None = None
    path: str | None = None
    version_satisfied: bool = True

    @property
    def status_icon(self) -> str:
        if not self.available:
            return "❌"
        if not self.version_satisfied:
            return "⚠️"
        return "✅"


PYTHON = Dependency(
    name="python3",
    binary="python3",
    version_command="python3 --version",
    min_version="3.9",
    install_hint="Install Python 3.9+ with venv and pip support",
)

_BUILTIN_DEPENDENCIES = [
    PYTHON,
    Dependency(
        name="curl",
        binary="curl",
        version_command="curl --version",
        install_hint="Install via system package manager",
    ),
] + [
    Dependency(
        name=tool,
        binary=tool,
        install_hint="sudo apt-get install -y genisoimage xorriso (Debian/Ubuntu) "
        "or sudo dnf install -y xorriso (RHEL/Fedora)",
    )
    for tool in ISO_TOOLS
]


def get_all_dependencies() -> dict[str, Dependency]:
    return {dep.name: dep for dep in _BUILTIN_DEPENDENCIES}


def get_dependency(name: str) -> Dependency | None:
    return get_all_dependencies().get(name)


async def scan_dependencies(
    runner: CommandRunner, context: ExecutionContext
) -> dict[str, DependencyStatus]:
    result = {}
    for name, dep in get_all_dependencies().items():
        result[name] = await dep.probe(runner, context)
    return result


def split_locale(locale_name: str) -> tuple[str, str]:
    """Split ``en_US.UTF-8`` into ``("en_US", "UTF-8")``."""
    match = re.match(r"^([^.@]+)(?:\.([^@]+))?", locale_name)
    if not match:
        return locale_name, "UTF-8"
    return match.group(1), match.group(2) or "UTF-8"


__all__ = [
    "ISO_TOOLS",
    "PYTHON",
    "Dependency",
    "DependencyStatus",
    "get_all_dependencies",
    "get_dependency",
    "scan_dependencies",
    "split_locale",
]
