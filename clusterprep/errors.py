"""Error types and formatting utilities for consistent error messages.

Fatal conditions are raised as subclasses of ``BootstrapError``; each one
carries the process exit code the CLI uses and an optional remediation hint.
Tool download problems are ``ToolInstallError`` subclasses and never abort a
run: the tool installer catches them and reports a warning instead.

Error Style Guide:
- User-facing errors use 'Error: ' prefix
- Use present tense: 'must be', 'is required'
- Include actionable hints where helpful
- Be concise but informative
"""


class BootstrapError(Exception):
    """A condition that leaves the host unusable for later steps."""

    exit_code = 1

    def __init__(self, message: str, hint: str | None = None):
        super().__init__(message)
        self.hint = hint


class ManifestNotFound(BootstrapError):
    exit_code = 2


class UnsupportedHost(BootstrapError):
    exit_code = 3


class RuntimeProvisionError(BootstrapError):
    exit_code = 4


class SystemPackagesFailed(BootstrapError):
    exit_code = 5


class AutomationCliMissing(BootstrapError):
    exit_code = 6


class CollectionInstallFailed(BootstrapError):
    exit_code = 7


class ToolInstallError(Exception):
    """Raised while fetching an optional external tool."""


class ResolutionError(ToolInstallError):
    pass


class DownloadError(ToolInstallError):
    pass


def format_error(message: str) -> str:
    """Format an error message with consistent prefix.

    Examples:
        >>> format_error("manifest not found")
        'Error: manifest not found'
    """
    return f"Error: {message}"


def format_suggestion(message: str, suggestion: str) -> str:
    """Format an error message with a helpful suggestion.

    Examples:
        >>> format_suggestion("no package manager found", "install python3 manually")
        'Error: no package manager found. Hint: install python3 manually'
    """
    return f"{format_error(message)}. Hint: {suggestion}"


def describe(error: BootstrapError) -> str:
    """Render a fatal error for the console, including its hint if any."""
    if error.hint:
        return format_suggestion(str(error), error.hint)
    return format_error(str(error))


__all__ = [
    "BootstrapError",
    "ManifestNotFound",
    "UnsupportedHost",
    "RuntimeProvisionError",
    "SystemPackagesFailed",
    "AutomationCliMissing",
    "CollectionInstallFailed",
    "ToolInstallError",
    "ResolutionError",
    "DownloadError",
    "format_error",
    "format_suggestion",
    "describe",
]
