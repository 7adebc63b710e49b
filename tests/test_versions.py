"""Tests for version utilities."""

import pytest

from clusterprep.versions import extract_version_number, is_release_tag


@pytest.mark.parametrize("text", ["v1.29.0", "v1", "v1.30.0-rc.1", " v1.29.0\n"])
def test_release_tags_accepted(text):
    assert is_release_tag(text)


@pytest.mark.parametrize(
    "text",
    [
        "",
        "1.29.0",
        "<html><body>302 Found</body></html>",
        "vnext",
        "V1.29.0",
        "v1.29.0 <html><body>proxy</body></html>",
        "v1.29.0/bin",
    ],
)
def test_non_tags_rejected(text):
    assert not is_release_tag(text)


def test_extract_version_number():
    assert extract_version_number("Python 3.11.6") == "3.11.6"
    assert extract_version_number("curl 8.5.0 (x86_64-pc-linux-gnu)") == "8.5.0"
    assert extract_version_number("Python 3.9") == "3.9"
    assert extract_version_number("no digits here") == ""
    assert extract_version_number("") == ""
