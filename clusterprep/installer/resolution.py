"""Latest-release resolution strategies for external tools."""

from abc import ABC, abstractmethod

from clusterprep.errors import DownloadError, ResolutionError
from clusterprep.http import CurlClient
from clusterprep.versions import is_release_tag


class VersionResolver(ABC):
    """Abstract base class for "what is the latest download" strategies.

    Each strategy validates what it got back before trusting it and raises
    ``ResolutionError`` instead of building a URL from a bad response.
    """

    @abstractmethod
    async def resolve(self, http: CurlClient) -> str:
        """Return the download URL of the latest release.

        Args:
            http: Client used for any network lookups

        Returns:
            Direct download URL

        Raises:
            ResolutionError: If the latest release cannot be determined
        """
        pass

    @property
    @abstractmethod
    def source(self) -> str:
        """Where the resolver looks, for operator-facing messages."""
        pass


class ApiJsonResolver(VersionResolver):
    """Read a tag from a JSON API and template it into a URL."""

    def __init__(self, api_url: str, url_template: str, field: str = "tag_name"):
        self.api_url = api_url
        self.url_template = url_template
        self.field = field

    @property
    def source(self) -> str:
        return self.api_url

    async def resolve(self, http: CurlClient) -> str:
        try:
            data = await http.get_json(self.api_url)
        except DownloadError as e:
            raise ResolutionError(str(e)) from e

        tag = data.get(self.field) if isinstance(data, dict) else None
        if not tag or not isinstance(tag, str) or tag == "null":
            raise ResolutionError(f"No '{self.field}' in response from {self.api_url}")

        return self.url_template.format(version=tag.strip())


class AssetFilterResolver(VersionResolver):
    """Pick a release asset by name and use its download URL verbatim.

    An asset named exactly ``pattern`` wins; otherwise the first asset whose
    name contains it is used.
    """

    def __init__(self, api_url: str, pattern: str):
        self.api_url = api_url
        self.pattern = pattern

    @property
    def source(self) -> str:
        return self.api_url

    async def resolve(self, http: CurlClient) -> str:
        try:
            data = await http.get_json(self.api_url)
        except DownloadError as e:
            raise ResolutionError(str(e)) from e

        assets = data.get("assets") if isinstance(data, dict) else None
        if not isinstance(assets, list):
            raise ResolutionError(f"No assets listed in response from {self.api_url}")

        candidates = [
            a
            for a in assets
            if isinstance(a, dict)
            and self.pattern in str(a.get("name", ""))
            and a.get("browser_download_url")
        ]
        exact = [a for a in candidates if a.get("name") == self.pattern]
        chosen = (exact or candidates or [None])[0]
        if chosen is None:
            raise ResolutionError(f"No release asset matching '{self.pattern}'")

        return str(chosen["browser_download_url"])


class RedirectTextResolver(VersionResolver):
    """Fetch a plain-text version file and template it into a URL."""

    def __init__(self, version_url: str, url_template: str):
        self.version_url = version_url
        self.url_template = url_template

    @property
    def source(self) -> str:
        return self.version_url

    async def resolve(self, http: CurlClient) -> str:
        try:
            text = (await http.get_text(self.version_url)).strip()
        except DownloadError as e:
            raise ResolutionError(str(e)) from e

        if not is_release_tag(text):
            preview = text[:80]
            raise ResolutionError(
                f"Could not determine stable release from {self.version_url}. "
                f"Received: '{preview}'"
            )

        return self.url_template.format(version=text)


class EnvOverrideResolver(VersionResolver):
    """Use an operator-supplied URL as-is, without any network lookup."""

    def __init__(self, url: str, variable: str):
        self.url = url
        self.variable = variable

    @property
    def source(self) -> str:
        return f"${self.variable}"

    async def resolve(self, http: CurlClient) -> str:
        return self.url


__all__ = [
    "VersionResolver",
    "ApiJsonResolver",
    "AssetFilterResolver",
    "RedirectTextResolver",
    "EnvOverrideResolver",
]
