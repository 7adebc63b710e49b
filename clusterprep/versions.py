"""Version string utilities."""

import re

RELEASE_TAG_PATTERN = re.compile(r"^v\d+(\.\d+)*[\w.+-]*$")


def is_release_tag(text: str) -> bool:
    """Check that ``text`` looks like a release tag such as ``v1.29.0``.

    Used to reject proxy error pages and other non-version bodies before they
    are templated into a download URL.
    """
    return bool(text) and RELEASE_TAG_PATTERN.fullmatch(text.strip()) is not None


def extract_version_number(version_str: str) -> str:
    """Extract version number from version string."""
    if not version_str:
        return ""

    # Look for version patterns like v1.2.3, 1.2.3, or version numbers in parentheses
    patterns = [
        r"v?(\d+\.\d+\.\d+(?:\.\d+)?)",  # v1.2.3 or 1.2.3
        r"v?(\d+\.\d+(?:\.\d+)?)",  # v1.2 or 1.2
    ]

    for pattern in patterns:
        match = re.search(pattern, version_str)
        if match:
            return match.group(1)

    return ""
