"""
Commit Aggregator - Turns the commit history of a path into author scores.

Every retained commit adds the current weight to its author's score, and the
weight grows by a small fixed step after each one. Commits seen later in the
history (usually older ones) therefore count slightly more; the step acts as a
tie-breaker between authors with the same number of commits.
"""

from dataclasses import dataclass

import structlog

from owners_crawler.config import Settings
from owners_crawler.github.connector import GitHubConnector
from owners_crawler.github.schemas import GitHubCommit

logger = structlog.get_logger()

WEIGHT_INCREMENT = 0.001


@dataclass
class AuthorScore:
    """Accumulated weight of one author for a path."""

    login: str
    score: float = 0.0
    lines_changed: int = 0  # never populated from diff stats

    def merge(self, other: "AuthorScore") -> None:
        """Fold another score for the same author into this one."""
        self.score += other.score
        self.lines_changed += other.lines_changed


class CommitAggregator:
    """Aggregates weighted commit counts per author for a repository path."""

    def __init__(self, connector: GitHubConnector, settings: Settings):
        self._connector = connector
        self._settings = settings

    def aggregate(self, path: str, start_weight: float) -> dict[str, AuthorScore]:
        """
        Score every author who committed to ``path``.

        Args:
            path: Repository path whose history is fetched
            start_weight: Weight of the first retained commit

        Returns:
            Mapping of author login to accumulated score
        """
        scores: dict[str, AuthorScore] = {}
        weight = start_weight
        page = 1

        while True:
            commit_page = self._connector.list_commits(path, page=page)
            logger.debug(
                "Fetched commits",
                count=len(commit_page.commits),
                source=f"{self._settings.repo_full_name}:{path}",
                page=page,
            )

            for commit in commit_page.commits:
                login = self._retained_author(commit)
                if login is None:
                    continue

                if login not in scores:
                    scores[login] = AuthorScore(login=login)
                scores[login].score += weight
                weight += WEIGHT_INCREMENT

            if not commit_page.has_next_page:
                break
            page = commit_page.next_page

        return scores

    def _retained_author(self, commit: GitHubCommit) -> str | None:
        """Return the author login if the commit counts towards ownership."""
        message = commit.message
        if message is None:
            return None

        if message.startswith(self._settings.merge_commit_prefix):
            return None

        if self._settings.skip_maintenance_commits and any(
            marker in message for marker in self._settings.maintenance_markers
        ):
            return None

        return commit.author_login
