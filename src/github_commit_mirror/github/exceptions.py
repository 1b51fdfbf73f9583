"""GitHub client exceptions."""

from datetime import datetime


class GitHubClientError(Exception):
    """Base exception for GitHub client errors."""

    pass


class GitHubAuthenticationError(GitHubClientError):
    """Raised when authentication fails (401)."""

    pass


class GitHubRetryableError(GitHubClientError):
    """Base class for errors a later run can expect to succeed.

    Sync never retries internally; these propagate and abort the run like
    any other error. The distinction only tells the caller whether
    re-running later is worthwhile.
    """

    pass


class GitHubRateLimitError(GitHubRetryableError):
    """Raised when rate limit is exceeded (403/429 with exhausted quota)."""

    def __init__(self, message: str, reset_at: datetime | None = None) -> None:
        super().__init__(message)
        self.reset_at = reset_at


class GitHubTransportError(GitHubRetryableError):
    """Raised when the API can't be reached (connection failure or timeout)."""

    pass


class GitHubNotFoundError(GitHubClientError):
    """Raised when a repository or commit is not found (404)."""

    pass


class GitHubMalformedPayloadError(GitHubClientError):
    """Raised when a response lacks fields the mirror requires."""

    pass
