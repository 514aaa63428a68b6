"""GitHub data schemas."""

from pydantic import BaseModel, Field


class GitHubUser(BaseModel):
    """GitHub user schema."""

    login: str
    id: int | None = None


class GitHubCommit(BaseModel):
    """A commit touching a queried path."""

    sha: str = ""
    message: str | None = None
    author: GitHubUser | None = None
    path: str = ""

    @property
    def author_login(self) -> str | None:
        """Login of the GitHub account behind the commit, if resolvable."""
        if self.author and self.author.login:
            return self.author.login
        return None


class GitHubCommitPage(BaseModel):
    """One page of commit history."""

    commits: list[GitHubCommit] = Field(default_factory=list)
    next_page: int | None = None

    @property
    def has_next_page(self) -> bool:
        return self.next_page is not None


class GitHubContentEntry(BaseModel):
    """An entry of a repository directory listing."""

    name: str
    path: str
    type: str  # "file", "dir", "symlink", "submodule"

    @property
    def is_dir(self) -> bool:
        return self.type == "dir"

    @property
    def is_file(self) -> bool:
        return self.type == "file"
