"""
Rank Resolver - Picks the owners of a path from related commit histories.

A path is scored from up to three histories:
- the path itself
- its README.md variant, for index.md documents that used to be READMEs
- for directories, the co-located ``<dir>.md`` overview document
"""

from collections.abc import Iterable

import structlog

from owners_crawler.config import Settings
from owners_crawler.ownership.analyzer import AuthorScore, CommitAggregator
from owners_crawler.ownership.fallback import augment_with_fallback

logger = structlog.get_logger()

PATH_WEIGHT = 1.0
README_VARIANT_WEIGHT = 1.5
OVERVIEW_DOCUMENT_WEIGHT = 2.0


def readme_variant(path: str) -> str:
    """Replace the first ``index.md`` in ``path`` with ``README.md``."""
    return path.replace("index.md", "README.md", 1)


def merge_scores(
    target: dict[str, AuthorScore],
    source: dict[str, AuthorScore],
) -> dict[str, AuthorScore]:
    """Add every score of ``source`` into ``target``."""
    for login, score in source.items():
        if login in target:
            target[login].merge(score)
        else:
            target[login] = AuthorScore(
                login=login,
                score=score.score,
                lines_changed=score.lines_changed,
            )
    return target


def rank_authors(scores: Iterable[AuthorScore]) -> list[AuthorScore]:
    """Order authors by score, then lines changed, highest first."""
    return sorted(
        scores,
        key=lambda s: (-s.score, -s.lines_changed, s.login),
    )


def top_authors(
    ranked: list[AuthorScore],
    limit: int,
    excluded: Iterable[str] = (),
) -> list[str]:
    """
    Take the logins among the first ``limit`` ranked authors.

    Excluded logins still use up one of the ``limit`` slots; they are
    dropped, not replaced by the next author.
    """
    excluded = set(excluded)
    return [s.login for s in ranked[:limit] if s.login not in excluded]


class RankResolver:
    """Resolves the ordered, de-duplicated owner list of a path."""

    def __init__(self, aggregator: CommitAggregator, settings: Settings):
        self._aggregator = aggregator
        self._settings = settings

    def collect_scores(
        self, path: str, is_leaf_document: bool
    ) -> dict[str, AuthorScore]:
        """Merge the author scores of every history related to ``path``."""
        scores: dict[str, AuthorScore] = {}

        merge_scores(scores, self._aggregator.aggregate(path, PATH_WEIGHT))
        merge_scores(
            scores,
            self._aggregator.aggregate(readme_variant(path), README_VARIANT_WEIGHT),
        )
        if not is_leaf_document:
            merge_scores(
                scores,
                self._aggregator.aggregate(f"{path}.md", OVERVIEW_DOCUMENT_WEIGHT),
            )

        return scores

    def resolve(self, path: str, is_leaf_document: bool) -> list[str]:
        """
        Resolve the owners of a directory or document.

        Args:
            path: Repository path
            is_leaf_document: True for documents, False for directories

        Returns:
            Alphabetically sorted, unique owner logins (may be empty)
        """
        scores = self.collect_scores(path, is_leaf_document)
        ranked = rank_authors(scores.values())

        owners = top_authors(
            ranked,
            limit=self._settings.owner_limit,
            excluded=self._settings.excluded_logins,
        )
        owners = augment_with_fallback(path, owners, self._settings.fallback_owners)
        owners = sorted(set(owners))

        logger.info("Resolved owners", path=path, owners=owners)
        return owners
