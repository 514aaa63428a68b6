"""Command line entry point."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any

import httpx
import structlog
from pydantic import ValidationError

from owners_crawler.config import Settings
from owners_crawler.errors import ConfigurationError, OwnersCrawlerError
from owners_crawler.github.connector import GitHubConnector
from owners_crawler.ownership.fallback import load_fallback_owners
from owners_crawler.pipelines.crawler import OwnersCrawler


def configure_logging(level: str = "INFO", log_format: str = "console") -> None:
    """Configure structured logging to standard error."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level, logging.INFO),
        force=True,
    )

    renderer: Any
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=False)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="owners-crawler",
        description="Write OWNERS files and document assignees from GitHub commit history",
    )
    parser.add_argument("--github-token", help="GitHub API token (or GITHUB_TOKEN)")
    parser.add_argument("--github-org", help="Repository owner (default: kubernetes)")
    parser.add_argument("--github-repo", help="Repository name (default: kubernetes)")
    parser.add_argument("--top-dir", help="Directory to start crawling from")
    parser.add_argument("--local-repo", help="Local checkout receiving the owner files")
    parser.add_argument("--depth", type=int, help="Maximum recursion depth (default: 10)")
    parser.add_argument(
        "--fallback-owners",
        type=Path,
        help="YAML file mapping path keywords to fallback owners",
    )
    parser.add_argument(
        "--ignore",
        action="append",
        dest="ignore_patterns",
        metavar="GLOB",
        help="Skip repository paths matching GLOB (repeatable)",
    )
    parser.add_argument(
        "--skip-documents",
        action="store_true",
        help="Only write OWNERS files, leave documents untouched",
    )
    parser.add_argument(
        "--keep-maintenance-commits",
        action="store_true",
        help="Count gendocs/moving commits towards ownership",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Resolve owners without writing anything",
    )
    parser.add_argument("--log-level", help="Logging level (default: INFO)")
    return parser


def build_settings(args: argparse.Namespace) -> Settings:
    """Build the run settings from the environment and CLI flags."""
    overrides: dict[str, Any] = {
        "github_token": args.github_token,
        "github_org": args.github_org,
        "github_repo": args.github_repo,
        "top_dir": args.top_dir,
        "local_repo": args.local_repo,
        "depth": args.depth,
        "ignore_patterns": args.ignore_patterns,
        "log_level": args.log_level,
    }
    if args.skip_documents:
        overrides["process_documents"] = False
    if args.keep_maintenance_commits:
        overrides["skip_maintenance_commits"] = False
    if args.dry_run:
        overrides["dry_run"] = True
    if args.fallback_owners is not None:
        overrides["fallback_owners"] = load_fallback_owners(args.fallback_owners)

    try:
        settings = Settings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}") from e

    if not settings.github_token.get_secret_value():
        raise ConfigurationError("GitHub token isn't provided")
    return settings


def run(settings: Settings, transport: httpx.BaseTransport | None = None) -> int:
    """Crawl the repository described by ``settings``."""
    with GitHubConnector(settings, transport=transport) as connector:
        OwnersCrawler(connector, settings).run()
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging((args.log_level or "INFO").upper())

    try:
        settings = build_settings(args)
        configure_logging(settings.log_level, settings.log_format)
        return run(settings)
    except OwnersCrawlerError as e:
        print(e, file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
