"""Keyword fallback owners guaranteeing coverage for well-known areas."""

from pathlib import Path

import structlog
import yaml

from owners_crawler.errors import ConfigurationError

logger = structlog.get_logger()


def augment_with_fallback(
    path: str,
    owners: list[str],
    table: dict[str, list[str]],
) -> list[str]:
    """
    Append fallback owners for every table keyword contained in ``path``.

    Keywords are matched as plain substrings, so "ha" also matches
    "pkg/share". Logins already present are not added twice and blank
    logins are ignored. The input list is left unchanged.
    """
    result = list(owners)
    seen = set(result)

    for keyword, logins in table.items():
        if keyword not in path:
            continue
        for login in logins:
            if login and login not in seen:
                result.append(login)
                seen.add(login)

    return result


def load_fallback_owners(path: Path) -> dict[str, list[str]]:
    """Load a keyword -> logins table from a YAML file."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigurationError(
            f"Cannot read fallback owners file {path}: {e}"
        ) from e
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Invalid YAML in fallback owners file {path}: {e}"
        ) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(
            f"Fallback owners file {path} must contain a mapping"
        )

    table: dict[str, list[str]] = {}
    for keyword, logins in data.items():
        if isinstance(logins, str):
            logins = [logins]
        if not isinstance(logins, list):
            raise ConfigurationError(
                f"Fallback owners for {keyword!r} must be a list of logins"
            )
        table[str(keyword)] = [str(login) for login in logins if login]

    logger.info("Loaded fallback owners", file=str(path), keywords=len(table))
    return table
