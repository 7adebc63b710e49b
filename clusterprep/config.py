"""Run configuration: execution context, anchor paths and tool overrides."""

import os
import platform
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Mapping

from .paths import (
    SYSTEM_BIN_DIR,
    get_collections_path,
    get_requirements_path,
    get_root_dir,
    get_venv_bin_dir,
    get_venv_dir,
)

DEFAULT_LOCALE = "en_US.UTF-8"
DEFAULT_PATH = "/usr/local/sbin:/usr/local/bin:/usr/sbin:/usr/bin:/sbin:/bin"

# Tool name -> environment variable holding a direct download URL.
OVERRIDE_VARIABLES = {
    "helm": "HELM_DOWNLOAD_URL",
    "talosctl": "TALOSCTL_DOWNLOAD_URL",
    "kubectl": "KUBECTL_DOWNLOAD_URL",
}

_ARCH_ALIASES = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "arm",
}


def normalize_arch(machine: str) -> str:
    """Map a ``platform.machine()`` value to the release-asset architecture name."""
    return _ARCH_ALIASES.get(machine.lower(), machine.lower())


@dataclass(frozen=True)
class ExecutionContext:
    """Environment every subprocess step runs under.

    ``inherited`` is the snapshot of the process environment taken when the
    configuration was built; LANG, LC_ALL and PATH always take precedence over it.
    """

    lang: str = DEFAULT_LOCALE
    lc_all: str = DEFAULT_LOCALE
    path: str = DEFAULT_PATH
    inherited: Mapping[str, str] = field(default_factory=dict, compare=False)

    def environ(self) -> dict[str, str]:
        env = dict(self.inherited)
        env["LANG"] = self.lang
        env["LC_ALL"] = self.lc_all
        env["PATH"] = self.path
        return env

    def with_path_prefix(self, directory: str | Path) -> "ExecutionContext":
        return replace(self, path=f"{directory}{os.pathsep}{self.path}")


@dataclass(frozen=True)
class BootstrapConfig:
    root_dir: Path
    context: ExecutionContext = field(default_factory=ExecutionContext)
    bin_dir: Path = SYSTEM_BIN_DIR
    arch: str = "amd64"
    use_sudo: bool = True
    github_token: str | None = None
    overrides: Mapping[str, str] = field(default_factory=dict, compare=False)

    @property
    def requirements_file(self) -> Path:
        return get_requirements_path(self.root_dir)

    @property
    def collections_file(self) -> Path:
        return get_collections_path(self.root_dir)

    @property
    def venv_dir(self) -> Path:
        return get_venv_dir(self.root_dir)

    @property
    def venv_bin_dir(self) -> Path:
        return get_venv_bin_dir(self.venv_dir)

    def privileged(self, command: str) -> str:
        """Prefix ``command`` with sudo unless already running as root."""
        if self.use_sudo:
            return f"sudo {command}"
        return command

    def override_for(self, tool_name: str) -> str | None:
        return self.overrides.get(tool_name) or None

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        root: str | Path | None = None,
    ) -> "BootstrapConfig":
        """Build the configuration from a snapshot of the environment.

        This is the only place the process environment is read; components
        receive the resulting object instead.
        """
        environ = dict(os.environ if environ is None else environ)

        context = ExecutionContext(
            lang=environ.get("LANG") or DEFAULT_LOCALE,
            lc_all=environ.get("LC_ALL") or DEFAULT_LOCALE,
            path=environ.get("PATH") or DEFAULT_PATH,
            inherited=environ,
        )

        overrides = {
            tool: environ[variable]
            for tool, variable in OVERRIDE_VARIABLES.items()
            if environ.get(variable)
        }

        arch = environ.get("CLUSTERPREP_ARCH") or normalize_arch(platform.machine())

        return cls(
            root_dir=get_root_dir(root, environ),
            context=context,
            arch=arch,
            use_sudo=os.geteuid() != 0,
            github_token=environ.get("GITHUB_TOKEN") or None,
            overrides=overrides,
        )
