"""Host bootstrap for the cluster automation toolchain."""

import logging

from .config import BootstrapConfig, ExecutionContext
from .errors import (
    AutomationCliMissing,
    BootstrapError,
    CollectionInstallFailed,
    ManifestNotFound,
    RuntimeProvisionError,
    SystemPackagesFailed,
    UnsupportedHost,
    format_error,
    format_suggestion,
)
from .execution import CommandRunner, run_command_async

__version__ = "0.1.0"


def setup_logging(debug: bool = False) -> None:
    """Configure root logging; DEBUG shows every command that runs."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
        force=True,
    )


__all__ = [
    "__version__",
    "setup_logging",
    "BootstrapConfig",
    "ExecutionContext",
    "BootstrapError",
    "ManifestNotFound",
    "UnsupportedHost",
    "RuntimeProvisionError",
    "SystemPackagesFailed",
    "AutomationCliMissing",
    "CollectionInstallFailed",
    "format_error",
    "format_suggestion",
    "CommandRunner",
    "run_command_async",
]
