"""GitHub REST API access."""

from owners_crawler.github.connector import GitHubConnector
from owners_crawler.github.schemas import (
    GitHubCommit,
    GitHubCommitPage,
    GitHubContentEntry,
    GitHubUser,
)

__all__ = [
    "GitHubConnector",
    "GitHubCommit",
    "GitHubCommitPage",
    "GitHubContentEntry",
    "GitHubUser",
]
