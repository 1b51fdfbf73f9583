"""GitHub API client module.

This module provides:
- GitHubClient: Async GitHub API client for commit listings and details
- Exceptions mapped from githubkit failures
- Commit Sync: CommitSynchronizer and its collaborators
"""

from .client import GitHubClient
from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubMalformedPayloadError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubRetryableError,
    GitHubTransportError,
)
from .sync import (
    CommitStore,
    CommitSynchronizer,
    ExistenceIndex,
    OutputFormat,
    RepositorySyncResult,
    SyncRunResult,
    UserResolver,
)

__all__ = [
    # Client
    "GitHubClient",
    # Exceptions
    "GitHubAuthenticationError",
    "GitHubClientError",
    "GitHubMalformedPayloadError",
    "GitHubNotFoundError",
    "GitHubRateLimitError",
    "GitHubRetryableError",
    "GitHubTransportError",
    # Commit Sync
    "CommitStore",
    "CommitSynchronizer",
    "ExistenceIndex",
    "OutputFormat",
    "RepositorySyncResult",
    "SyncRunResult",
    "UserResolver",
]
