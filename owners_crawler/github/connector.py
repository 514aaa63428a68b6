"""GitHub connector implementation."""

from typing import Any
from urllib.parse import quote

import httpx
import structlog

from owners_crawler.config import Settings
from owners_crawler.errors import ConfigurationError, RemoteAPIError
from owners_crawler.github.schemas import (
    GitHubCommit,
    GitHubCommitPage,
    GitHubContentEntry,
    GitHubUser,
)

logger = structlog.get_logger()


class GitHubConnector:
    """Synchronous client for the two GitHub endpoints the crawl needs.

    Provides:
    - Directory listings through the contents API
    - Paginated commit history for a path
    """

    def __init__(
        self,
        settings: Settings,
        transport: httpx.BaseTransport | None = None,
    ):
        self._settings = settings
        self._transport = transport
        self._client: httpx.Client | None = None

    def connect(self) -> None:
        """Open the HTTP client."""
        token = self._settings.github_token.get_secret_value()
        if not token:
            raise ConfigurationError("GitHub token isn't provided")

        self._client = httpx.Client(
            base_url=self._settings.github_api_url,
            headers={
                "Accept": "application/vnd.github.v3+json",
                "Authorization": f"Bearer {token}",
            },
            timeout=self._settings.request_timeout,
            transport=self._transport,
        )
        logger.info(
            "GitHub connector connected",
            repo=self._settings.repo_full_name,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        if self._client:
            self._client.close()
            self._client = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    def __enter__(self) -> "GitHubConnector":
        self.connect()
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def list_directory(self, path: str) -> list[GitHubContentEntry]:
        """List the entries of a repository directory."""
        url = f"{self._repo_url}/contents/{quote(path, safe='/')}"
        data = self._json(self._get(url, path=path), url, path)

        # The contents API answers with a single object for files.
        if isinstance(data, dict):
            return []

        return [self._parse_entry(entry) for entry in self._records(data, url, path)]

    def list_commits(self, path: str, page: int = 1) -> GitHubCommitPage:
        """Get one page of commit history touching ``path``."""
        params: dict[str, Any] = {
            "per_page": self._settings.commits_page_size,
            "page": page,
        }
        if path:
            params["path"] = path

        url = f"{self._repo_url}/commits"
        response = self._get(url, path=path, params=params)
        data = self._json(response, url, path)

        return GitHubCommitPage(
            commits=[
                self._parse_commit(c, path) for c in self._records(data, url, path)
            ],
            next_page=self._next_page(response),
        )

    @property
    def _repo_url(self) -> str:
        return f"/repos/{self._settings.github_org}/{self._settings.github_repo}"

    def _get(
        self,
        url: str,
        path: str,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        if not self._client:
            raise RuntimeError("GitHub connector is not connected")

        try:
            response = self._client.get(url, params=params)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "GitHub request failed",
                url=url,
                status_code=e.response.status_code,
            )
            raise RemoteAPIError(
                f"GitHub request for {url!r} failed with status "
                f"{e.response.status_code}",
                path=path,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            logger.error("GitHub request failed", url=url, error=str(e))
            raise RemoteAPIError(
                f"GitHub request for {url!r} failed: {e}", path=path
            ) from e

        return response

    def _json(self, response: httpx.Response, url: str, path: str) -> Any:
        """Decode a JSON response body."""
        try:
            return response.json()
        except ValueError as e:
            logger.error("GitHub returned invalid JSON", url=url)
            raise RemoteAPIError(
                f"GitHub response for {url!r} is not valid JSON", path=path
            ) from e

    def _records(self, data: Any, url: str, path: str) -> list[dict[str, Any]]:
        """Check that a response body is a list of objects."""
        if not isinstance(data, list) or not all(isinstance(d, dict) for d in data):
            logger.error("GitHub returned an unexpected payload", url=url)
            raise RemoteAPIError(
                f"GitHub response for {url!r} is not a list of objects", path=path
            )
        return data

    def _next_page(self, response: httpx.Response) -> int | None:
        """Read the next page number from the ``Link`` header."""
        next_link = response.links.get("next")
        if not next_link or not next_link.get("url"):
            return None

        page = httpx.URL(next_link["url"]).params.get("page")
        if page is None or not page.isdigit():
            return None
        return int(page)

    def _parse_entry(self, data: dict[str, Any]) -> GitHubContentEntry:
        """Parse a contents API entry."""
        return GitHubContentEntry(
            name=data.get("name", ""),
            path=data.get("path", ""),
            type=data.get("type", ""),
        )

    def _parse_commit(self, data: dict[str, Any], path: str) -> GitHubCommit:
        """Parse raw commit data into schema."""
        commit = data.get("commit") or {}
        return GitHubCommit(
            sha=data.get("sha", ""),
            message=commit.get("message"),
            author=self._parse_user(data.get("author")),
            path=path,
        )

    def _parse_user(self, data: dict[str, Any] | None) -> GitHubUser | None:
        """Parse user data."""
        if not data or not data.get("login"):
            return None
        return GitHubUser(login=data["login"], id=data.get("id"))
