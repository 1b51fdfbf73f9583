"""Pydantic schemas for GitHub Commit Mirror.

This module provides input validation and output serialization models.
"""

from .base import SchemaBase
from .commit import CommitCreate, CommitFileCreate, CommitFileRead, CommitRead
from .github_api import (
    GitHubCommitData,
    GitHubCommitDetail,
    GitHubCommitFile,
    GitHubCommitStats,
    GitHubCommitSummary,
    GitHubGitActor,
    GitHubUser,
)
from .repository import RepositoryCreate, RepositoryRead, parse_repo_string

__all__ = [
    # Base
    "SchemaBase",
    # Commit
    "CommitCreate",
    "CommitFileCreate",
    "CommitFileRead",
    "CommitRead",
    # GitHub API
    "GitHubCommitData",
    "GitHubCommitDetail",
    "GitHubCommitFile",
    "GitHubCommitStats",
    "GitHubCommitSummary",
    "GitHubGitActor",
    "GitHubUser",
    # Repository
    "RepositoryCreate",
    "RepositoryRead",
    "parse_repo_string",
]
