"""HTTP access through curl.

All requests use ``curl -fsSL``: HTTP errors fail the command and redirects
are followed, which dl.k8s.io relies on.
"""

import json
import logging
import shlex
from pathlib import Path
from typing import Any

from .config import ExecutionContext
from .errors import DownloadError
from .execution import CommandRunner

GITHUB_API_HOST = "api.github.com"

_logging = logging.getLogger(__name__)


def add_github_auth_if_needed(
    args: list[str], url: str, token: str | None
) -> list[str]:
    """Add a bearer token header to curl arguments targeting the GitHub API.

    Args:
        args: curl arguments built so far (without the URL)
        url: The URL the request goes to
        token: GitHub token, or None for anonymous access

    Returns:
        A new argument list with the Authorization header if applicable
    """
    if not token or GITHUB_API_HOST not in url:
        return list(args)

    if any("Authorization:" in arg for arg in args):
        return list(args)

    return list(args) + ["-H", f"Authorization: Bearer {token}"]


def build_curl_command(
    url: str, token: str | None = None, output: Path | None = None
) -> str:
    args = ["curl", "-fsSL"]
    if GITHUB_API_HOST in url:
        args += ["-H", "Accept: application/vnd.github.v3+json"]
    args = add_github_auth_if_needed(args, url, token)
    if output is not None:
        args += ["-o", str(output)]
    args.append(url)
    return " ".join(shlex.quote(arg) for arg in args)


class CurlClient:
    def __init__(
        self,
        runner: CommandRunner,
        context: ExecutionContext,
        github_token: str | None = None,
    ):
        self.runner = runner
        self.context = context
        self.github_token = github_token

    async def get_text(self, url: str) -> str:
        output, returncode = await self.runner.run(
            build_curl_command(url, self.github_token),
            env=self.context.environ(),
            timeout=None,
        )
        if returncode != 0:
            raise DownloadError(f"Failed to fetch {url}: {output or 'curl failed'}")
        return output

    async def get_json(self, url: str) -> Any:
        text = await self.get_text(url)
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise DownloadError(f"Invalid JSON from {url}: {e}") from e

    async def download(self, url: str, destination: Path) -> Path:
        _logging.debug(f"Downloading {url} -> {destination}")
        output, returncode = await self.runner.run(
            build_curl_command(url, self.github_token, output=destination),
            env=self.context.environ(),
            timeout=None,
        )
        if returncode != 0:
            raise DownloadError(f"Failed to download {url}: {output or 'curl failed'}")
        return destination


__all__ = [
    "add_github_auth_if_needed",
    "build_curl_command",
    "CurlClient",
]
