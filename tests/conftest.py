"""Pytest fixtures and fakes for clusterprep tests."""

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from clusterprep.config import BootstrapConfig, ExecutionContext
from clusterprep.errors import DownloadError

REQUIREMENTS = "ansible-core==2.16.3\njmespath==1.0.1\n"
COLLECTIONS = """\
collections:
  - name: kubernetes.core
  - name: community.general
    version: ">=8.0.0"
"""


@dataclass
class Call:
    command: str
    env: dict[str, str] = field(default_factory=dict)
    timeout: float | None = None


class FakeRunner:
    """Records commands and answers them from scripted responses.

    ``respond(pattern, *results)`` makes any command containing ``pattern``
    return the given ``(output, returncode)`` results in order; the last one
    repeats. Unmatched commands succeed with empty output.
    """

    def __init__(self, available: dict[str, str] | None = None):
        self.available = dict(available or {})
        self.responses: list[tuple[str, list[tuple[str, int]]]] = []
        self.calls: list[Call] = []

    def respond(self, pattern: str, *results: tuple[str, int]) -> "FakeRunner":
        self.responses.append((pattern, list(results)))
        return self

    def make_available(self, *names: str) -> "FakeRunner":
        for name in names:
            self.available[name] = name if name.startswith("/") else f"/usr/bin/{name}"
        return self

    async def run(self, command, *, env=None, timeout=None):
        self.calls.append(Call(command, dict(env or {}), timeout))
        for pattern, results in self.responses:
            if pattern in command:
                if len(results) > 1:
                    return results.pop(0)
                return results[0]
        return "", 0

    def which(self, name, path=None):
        return self.available.get(name)

    @property
    def commands(self) -> list[str]:
        return [c.command for c in self.calls]

    def matching(self, pattern: str) -> list[Call]:
        return [c for c in self.calls if pattern in c.command]


class FakeHttp:
    """Canned HTTP responses keyed by URL; unknown URLs fail like curl -f."""

    def __init__(
        self,
        texts: dict[str, str] | None = None,
        documents: dict[str, object] | None = None,
        payloads: dict[str, bytes] | None = None,
        failing_downloads: tuple[str, ...] = (),
    ):
        self.texts = texts or {}
        self.documents = documents or {}
        self.payloads = payloads or {}
        self.failing_downloads = failing_downloads
        self.requests: list[str] = []
        self.downloads: list[str] = []

    async def get_text(self, url: str) -> str:
        self.requests.append(url)
        if url not in self.texts:
            raise DownloadError(f"Failed to fetch {url}: 404")
        return self.texts[url]

    async def get_json(self, url: str):
        self.requests.append(url)
        if url not in self.documents:
            raise DownloadError(f"Failed to fetch {url}: 404")
        return self.documents[url]

    async def download(self, url: str, destination: Path) -> Path:
        self.downloads.append(url)
        if url in self.failing_downloads:
            raise DownloadError(f"Failed to download {url}: 403")
        destination.write_bytes(self.payloads.get(url, b"\x7fELF fake binary"))
        return destination


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """A project directory with both manifests present."""
    (tmp_path / "python-requirements.txt").write_text(REQUIREMENTS)
    (tmp_path / "ansible-requirements.yml").write_text(COLLECTIONS)
    return tmp_path


@pytest.fixture
def config(project_root: Path) -> BootstrapConfig:
    return BootstrapConfig(
        root_dir=project_root,
        context=ExecutionContext(path="/usr/bin:/bin", inherited={"HOME": "/root"}),
        bin_dir=project_root / "bin",
        arch="amd64",
        use_sudo=True,
    )


@pytest.fixture
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture
def http() -> FakeHttp:
    return FakeHttp()
