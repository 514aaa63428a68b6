"""Tree walker that assigns owners to every directory and document."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from fnmatch import fnmatch
from typing import Any

import structlog

from owners_crawler.config import Settings
from owners_crawler.github.connector import GitHubConnector
from owners_crawler.ownership.analyzer import CommitAggregator
from owners_crawler.ownership.ranker import RankResolver
from owners_crawler.ownership.writer import OwnerWriter

logger = structlog.get_logger()


@dataclass
class CrawlResult:
    """Result of a crawl run."""

    root: str
    started_at: datetime
    completed_at: datetime | None = None
    directories_visited: int = 0
    documents_visited: int = 0
    owners_files_written: int = 0
    documents_annotated: int = 0
    paths_without_owners: int = 0
    paths_ignored: int = 0
    errors: list[str] = field(default_factory=list)

    @property
    def duration_seconds(self) -> float:
        """Calculate duration in seconds."""
        if not self.completed_at:
            return 0
        return (self.completed_at - self.started_at).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "root": self.root,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": self.duration_seconds,
            "directories_visited": self.directories_visited,
            "documents_visited": self.documents_visited,
            "owners_files_written": self.owners_files_written,
            "documents_annotated": self.documents_annotated,
            "paths_without_owners": self.paths_without_owners,
            "paths_ignored": self.paths_ignored,
            "error_count": len(self.errors),
        }


class OwnersCrawler:
    """Walks the remote tree and writes owners into the local checkout.

    Remote API errors propagate out of :meth:`run`; the caller decides
    whether to abort. Local write failures are recorded on the result and
    the walk continues.
    """

    def __init__(
        self,
        connector: GitHubConnector,
        settings: Settings,
        resolver: RankResolver | None = None,
        writer: OwnerWriter | None = None,
    ):
        self._connector = connector
        self._settings = settings
        self._resolver = resolver or RankResolver(
            CommitAggregator(connector, settings), settings
        )
        self._writer = writer or OwnerWriter(settings)
        self.result = CrawlResult(
            root=settings.top_dir, started_at=datetime.now(timezone.utc)
        )

    def run(self) -> CrawlResult:
        """Crawl from the configured top directory."""
        root = self._settings.top_dir
        self.result = CrawlResult(root=root, started_at=datetime.now(timezone.utc))

        logger.info(
            "Starting crawl",
            repo=self._settings.repo_full_name,
            root=root or "/",
            max_depth=self._settings.depth,
        )

        self.walk(root, 0)

        result = self.result
        result.completed_at = datetime.now(timezone.utc)
        logger.info("Crawl completed", **result.to_dict())
        return result

    def walk(self, path: str, current_depth: int) -> None:
        """Process ``path`` and recurse into its subdirectories."""
        if current_depth > self._settings.depth:
            return

        entries = self._connector.list_directory(path)

        self.result.directories_visited += 1
        self.process_path(path, is_leaf_document=False)

        for entry in entries:
            if self._is_ignored(entry.path):
                self.result.paths_ignored += 1
                continue

            if entry.is_dir:
                self.walk(entry.path, current_depth + 1)
            elif entry.is_file and self._is_document(entry.name):
                self.result.documents_visited += 1
                self.process_path(entry.path, is_leaf_document=True)

    def process_path(self, path: str, is_leaf_document: bool) -> list[str]:
        """Resolve the owners of one path and write them if there are any."""
        owners = self._resolver.resolve(path, is_leaf_document)
        if not owners:
            self.result.paths_without_owners += 1
            return owners

        if is_leaf_document:
            if self._writer.write(path, owners, is_leaf_document=True):
                self.result.documents_annotated += 1
            return owners

        try:
            self._writer.write(path, owners, is_leaf_document=False)
            self.result.owners_files_written += 1
        except OSError as e:
            error_msg = f"Failed to write OWNERS for {path or '/'}: {e}"
            self.result.errors.append(error_msg)
            logger.error(error_msg, path=path)

        return owners

    def _is_document(self, name: str) -> bool:
        # Substring match: "markdown.txt" counts as a document too.
        return (
            self._settings.process_documents
            and self._settings.document_name_marker in name
        )

    def _is_ignored(self, path: str) -> bool:
        return any(fnmatch(path, pattern) for pattern in self._settings.ignore_patterns)
