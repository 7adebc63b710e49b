"""Installer engine for host bootstrap."""

from .dependencies import (
    Dependency,
    DependencyStatus,
    get_all_dependencies,
    get_dependency,
    scan_dependencies,
)
from .galaxy import install_collections, load_collection_names, require_galaxy
from .models import BootstrapReport, InstallationOutcome, StepResult
from .profiles import (
    PackageManager,
    PackageManagerProfile,
    detect_package_manager,
    resolve_profile,
)
from .resolution import (
    ApiJsonResolver,
    AssetFilterResolver,
    EnvOverrideResolver,
    RedirectTextResolver,
    VersionResolver,
)
from .runtime import ensure_virtualenv, install_requirements, require_manifest
from .system import check_iso_tooling, configure_locale, install_system_packages
from .tools import ToolSpec, default_tools, install_tool, install_tools

__all__ = [
    "Dependency",
    "DependencyStatus",
    "get_all_dependencies",
    "get_dependency",
    "scan_dependencies",
    "install_collections",
    "load_collection_names",
    "require_galaxy",
    "BootstrapReport",
    "InstallationOutcome",
    "StepResult",
    "PackageManager",
    "PackageManagerProfile",
    "detect_package_manager",
    "resolve_profile",
    "VersionResolver",
    "ApiJsonResolver",
    "AssetFilterResolver",
    "EnvOverrideResolver",
    "RedirectTextResolver",
    "ensure_virtualenv",
    "install_requirements",
    "require_manifest",
    "check_iso_tooling",
    "configure_locale",
    "install_system_packages",
    "ToolSpec",
    "default_tools",
    "install_tool",
    "install_tools",
]
