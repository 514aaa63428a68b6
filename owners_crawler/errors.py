"""Exceptions raised while crawling a repository for owners."""


class OwnersCrawlerError(Exception):
    """Base class for errors that abort a crawl."""


class ConfigurationError(OwnersCrawlerError):
    """Raised when the run cannot start because of bad settings."""


class RemoteAPIError(OwnersCrawlerError):
    """Raised when a GitHub API call fails."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        status_code: int | None = None,
    ):
        super().__init__(message)
        self.path = path
        self.status_code = status_code
