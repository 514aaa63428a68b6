"""Unit tests for the GitHub connector."""

import httpx
import pytest
from pydantic import SecretStr

from owners_crawler.errors import ConfigurationError, RemoteAPIError
from owners_crawler.github.connector import GitHubConnector


class TestListDirectory:
    """Tests for directory listings."""

    def test_parses_entries(self, connector, fake_github):
        fake_github.add_dir("docs", dirs=["admin"], files=["index.md"])

        entries = connector.list_directory("docs")

        assert [(e.name, e.path, e.type) for e in entries] == [
            ("admin", "docs/admin", "dir"),
            ("index.md", "docs/index.md", "file"),
        ]
        assert entries[0].is_dir
        assert entries[1].is_file

    def test_repository_root(self, connector, fake_github):
        fake_github.add_dir("", dirs=["pkg"])

        entries = connector.list_directory("")

        assert [e.path for e in entries] == ["pkg"]
        assert fake_github.requests[0].url.path == "/repos/kubernetes/kubernetes/contents/"

    def test_file_path_has_no_entries(self, connector, fake_github):
        fake_github.contents["README.md"] = {
            "name": "README.md",
            "path": "README.md",
            "type": "file",
        }

        assert connector.list_directory("README.md") == []

    def test_server_error(self, connector, fake_github):
        fake_github.failing_paths.add("pkg")

        with pytest.raises(RemoteAPIError) as exc_info:
            connector.list_directory("pkg")

        assert exc_info.value.status_code == 500
        assert exc_info.value.path == "pkg"

    def test_not_found(self, connector):
        with pytest.raises(RemoteAPIError) as exc_info:
            connector.list_directory("missing")

        assert exc_info.value.status_code == 404

    def test_name_with_hash(self, connector, fake_github):
        """Test that "#" in a directory name is not read as a URL fragment."""
        fake_github.add_dir("docs/c", files=["other.md"])
        fake_github.add_dir("docs/c#", files=["index.md"])

        entries = connector.list_directory("docs/c#")

        assert [e.path for e in entries] == ["docs/c#/index.md"]
        assert fake_github.requests[0].url.path.endswith("/contents/docs/c#")

    def test_name_with_question_mark(self, connector, fake_github):
        """Test that "?" in a directory name is not read as a query string."""
        fake_github.add_dir("faq/why?", files=["answer.md"])

        entries = connector.list_directory("faq/why?")

        assert [e.name for e in entries] == ["answer.md"]
        assert "path" not in fake_github.requests[0].url.params

    def test_invalid_json(self, settings):
        def _html(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>rate limited</html>")

        with GitHubConnector(settings, transport=httpx.MockTransport(_html)) as connector:
            with pytest.raises(RemoteAPIError, match="not valid JSON"):
                connector.list_directory("pkg")

    def test_unexpected_entries(self, connector, fake_github):
        fake_github.contents["pkg"] = ["types.go"]

        with pytest.raises(RemoteAPIError, match="not a list of objects"):
            connector.list_directory("pkg")


class TestListCommits:
    """Tests for commit history pages."""

    def test_single_page(self, connector, fake_github, make_commit):
        fake_github.add_commits("pkg", make_commit("alice", "Add pkg"))

        page = connector.list_commits("pkg")

        assert page.next_page is None
        assert not page.has_next_page
        assert page.commits[0].author_login == "alice"
        assert page.commits[0].message == "Add pkg"
        assert page.commits[0].path == "pkg"

    def test_request_parameters(self, connector, fake_github):
        connector.list_commits("pkg/api", page=3)

        params = fake_github.requests[0].url.params
        assert params["path"] == "pkg/api"
        assert params["per_page"] == "200"
        assert params["page"] == "3"

    def test_root_history_has_no_path_filter(self, connector, fake_github):
        connector.list_commits("")

        assert "path" not in fake_github.requests[0].url.params

    def test_next_page_from_link_header(self, settings, transport, fake_github, make_commit):
        settings = settings.model_copy(update={"commits_page_size": 1})
        fake_github.add_commits("pkg", make_commit("alice"), make_commit("bob"))

        with GitHubConnector(settings, transport=transport) as connector:
            first = connector.list_commits("pkg")
            second = connector.list_commits("pkg", page=first.next_page)

        assert first.next_page == 2
        assert [c.author_login for c in second.commits] == ["bob"]
        assert second.next_page is None

    def test_missing_author_and_message(self, connector, fake_github):
        fake_github.add_commits("pkg", {"sha": "abc", "commit": {}, "author": None})

        commit = connector.list_commits("pkg").commits[0]

        assert commit.message is None
        assert commit.author_login is None

    def test_server_error(self, connector, fake_github):
        fake_github.failing_paths.add("pkg")

        with pytest.raises(RemoteAPIError) as exc_info:
            connector.list_commits("pkg")

        assert exc_info.value.status_code == 502

    def test_object_payload(self, settings):
        def _object(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"message": "Moved Permanently"})

        with GitHubConnector(settings, transport=httpx.MockTransport(_object)) as connector:
            with pytest.raises(RemoteAPIError, match="not a list of objects"):
                connector.list_commits("pkg")

    def test_invalid_json(self, settings):
        def _text(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="not json")

        with GitHubConnector(settings, transport=httpx.MockTransport(_text)) as connector:
            with pytest.raises(RemoteAPIError, match="not valid JSON"):
                connector.list_commits("pkg")


class TestConnection:
    """Tests for connector lifecycle."""

    def test_sends_token(self, connector, fake_github):
        connector.list_commits("pkg")

        headers = fake_github.requests[0].headers
        assert headers["Authorization"] == "Bearer test-token"
        assert headers["Accept"] == "application/vnd.github.v3+json"

    def test_missing_token(self, settings, transport):
        settings = settings.model_copy(update={"github_token": SecretStr("")})

        with pytest.raises(ConfigurationError):
            GitHubConnector(settings, transport=transport).connect()

    def test_transport_error(self, settings):
        def _fail(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with GitHubConnector(settings, transport=httpx.MockTransport(_fail)) as connector:
            with pytest.raises(RemoteAPIError, match="connection refused"):
                connector.list_directory("")

    def test_close(self, settings, transport):
        connector = GitHubConnector(settings, transport=transport)
        connector.connect()
        assert connector.is_connected

        connector.close()

        assert not connector.is_connected

    def test_requires_connect(self, settings):
        with pytest.raises(RuntimeError):
            GitHubConnector(settings).list_directory("")
