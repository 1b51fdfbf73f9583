"""Test fixtures for GitHub Commit Mirror."""

from .github_responses import (
    GITHUB_ACCOUNT_RESPONSE,
    GITHUB_COMMIT_LIST_RESPONSE,
    GITHUB_COMMIT_RESPONSE,
    GITHUB_COMMIT_UNLINKED_RESPONSE,
    GITHUB_FILES_RESPONSE,
    GITHUB_WEB_FLOW_ACCOUNT_RESPONSE,
)

__all__ = [
    "GITHUB_ACCOUNT_RESPONSE",
    "GITHUB_COMMIT_LIST_RESPONSE",
    "GITHUB_COMMIT_RESPONSE",
    "GITHUB_COMMIT_UNLINKED_RESPONSE",
    "GITHUB_FILES_RESPONSE",
    "GITHUB_WEB_FLOW_ACCOUNT_RESPONSE",
]
