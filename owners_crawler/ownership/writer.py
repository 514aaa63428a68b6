"""
Owner Writer - Persists resolved owners into the local checkout.

Directories get an ``OWNERS`` file; documents get an ``assignees`` block
injected at their front-matter delimiter.
"""

from pathlib import Path

import structlog
import yaml

from owners_crawler.config import Settings

logger = structlog.get_logger()

OWNERS_FILENAME = "OWNERS"
FRONT_MATTER_DELIMITER = "---"


def render_yaml(authors: list[str]) -> str:
    """Serialize owners as a YAML ``assignees`` mapping."""
    return yaml.safe_dump(
        {"assignees": sorted(authors)},
        default_flow_style=False,
    )


class OwnerWriter:
    """Writes owner lists below the configured local repository."""

    def __init__(self, settings: Settings):
        self._root = Path(settings.local_repo)
        self._dry_run = settings.dry_run

    def write(self, path: str, authors: list[str], is_leaf_document: bool) -> bool:
        """
        Persist ``authors`` for a repository path.

        Returns True when something was written.
        """
        if is_leaf_document:
            return self.inject_front_matter(path, authors)
        self.write_owners_file(path, authors)
        return True

    def write_owners_file(self, path: str, authors: list[str]) -> Path:
        """Create or truncate ``<path>/OWNERS``.

        Raises:
            OSError: If the file cannot be written
        """
        target = self._root / path / OWNERS_FILENAME
        content = render_yaml(authors) + "\n"

        if self._dry_run:
            logger.info("Dry run, skipping OWNERS file", file=str(target))
            return target

        target.write_text(content, encoding="utf-8")
        logger.debug("Wrote OWNERS file", file=str(target))
        return target

    def inject_front_matter(self, path: str, authors: list[str]) -> bool:
        """Insert an ``assignees`` block after the first front-matter delimiter.

        Failures are logged and reported as False; they never abort a crawl.
        """
        target = self._root / path

        try:
            content = target.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(
                "Failed to read document", file=str(target), error=str(e)
            )
            return False

        if FRONT_MATTER_DELIMITER not in content:
            logger.debug("Document has no front matter", file=str(target))
            return False

        replacement = f"{FRONT_MATTER_DELIMITER}\n{render_yaml(authors)}"
        updated = content.replace(FRONT_MATTER_DELIMITER, replacement, 1)

        if self._dry_run:
            logger.info("Dry run, skipping front matter", file=str(target))
            return True

        try:
            target.write_text(updated, encoding="utf-8")
        except OSError as e:
            logger.warning(
                "Failed to write document", file=str(target), error=str(e)
            )
            return False

        logger.debug("Injected front matter", file=str(target))
        return True
