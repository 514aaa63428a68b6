"""Pytest fixtures and configuration."""

from itertools import count
from typing import Any, Callable

import httpx
import pytest
import structlog

from owners_crawler.config import Settings
from owners_crawler.github.connector import GitHubConnector

ORG = "kubernetes"
REPO = "kubernetes"
API_URL = "https://api.github.com"


class FakeGitHub:
    """In-memory stand-in for the GitHub contents and commits endpoints."""

    def __init__(self, org: str = ORG, repo: str = REPO):
        self.prefix = f"/repos/{org}/{repo}"
        self.contents: dict[str, Any] = {}
        self.commits: dict[str, list[dict[str, Any]]] = {}
        self.failing_paths: set[str] = set()
        self.requests: list[httpx.Request] = []

    def add_dir(self, path: str, dirs=(), files=()) -> None:
        """Register a directory listing with child directory and file names."""
        entries = []
        for name in dirs:
            entries.append(self._entry(path, name, "dir"))
        for name in files:
            entries.append(self._entry(path, name, "file"))
        self.contents[path] = entries

    def add_commits(self, path: str, *commits: dict[str, Any]) -> None:
        self.commits.setdefault(path, []).extend(commits)

    @property
    def commit_paths(self) -> list[str]:
        """Paths queried on the commits endpoint, in request order."""
        return [
            r.url.params.get("path", "")
            for r in self.requests
            if r.url.path == f"{self.prefix}/commits"
        ]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url_path = request.url.path

        if url_path.startswith(f"{self.prefix}/contents"):
            path = url_path[len(f"{self.prefix}/contents") :].strip("/")
            if path in self.failing_paths:
                return httpx.Response(500, json={"message": "Server Error"})
            if path not in self.contents:
                return httpx.Response(404, json={"message": "Not Found"})
            return httpx.Response(200, json=self.contents[path])

        if url_path == f"{self.prefix}/commits":
            path = request.url.params.get("path", "")
            if path in self.failing_paths:
                return httpx.Response(502, json={"message": "Bad Gateway"})
            per_page = int(request.url.params["per_page"])
            page = int(request.url.params.get("page", "1"))
            history = self.commits.get(path, [])
            chunk = history[(page - 1) * per_page : page * per_page]

            headers = {}
            if page * per_page < len(history):
                next_url = httpx.URL(
                    f"{API_URL}{self.prefix}/commits",
                    params={"path": path, "per_page": per_page, "page": page + 1},
                )
                headers["Link"] = f'<{next_url}>; rel="next"'
            return httpx.Response(200, json=chunk, headers=headers)

        return httpx.Response(404, json={"message": "Not Found"})

    def _entry(self, parent: str, name: str, entry_type: str) -> dict[str, Any]:
        path = f"{parent}/{name}" if parent else name
        return {"name": name, "path": path, "type": entry_type}


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep real GitHub settings in the environment out of the tests."""
    for name in (
        "GITHUB_TOKEN",
        "GITHUB_ORG",
        "GITHUB_REPO",
        "TOP_DIR",
        "LOCAL_REPO",
        "DEPTH",
        "DRY_RUN",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    yield
    structlog.reset_defaults()


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings writing into a temporary local checkout."""
    return Settings(
        _env_file=None,
        github_token="test-token",
        local_repo=tmp_path,
        fallback_owners={},
    )


@pytest.fixture
def fake_github() -> FakeGitHub:
    return FakeGitHub()


@pytest.fixture
def transport(fake_github) -> httpx.MockTransport:
    return httpx.MockTransport(fake_github.handler)


@pytest.fixture
def connector(settings, transport):
    """Connected GitHub connector talking to the fake."""
    with GitHubConnector(settings, transport=transport) as conn:
        yield conn


@pytest.fixture
def make_commit() -> Callable[..., dict[str, Any]]:
    """Factory for raw commit payloads as returned by the commits API."""
    shas = count(1)

    def _make_commit(
        login: str | None,
        message: str | None = "Fix typo",
    ) -> dict[str, Any]:
        sha = f"{next(shas):040x}"
        return {
            "sha": sha,
            "commit": {"message": message},
            "author": {"login": login, "id": 1} if login else None,
        }

    return _make_commit
