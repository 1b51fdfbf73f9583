"""Pydantic schemas for Repository and Project models."""

import re
from datetime import datetime

from pydantic import Field

from .base import SchemaBase

# GitHub owner/repo names: letters, digits, '-', '_', '.'
_REPO_PATTERN = re.compile(r"^([A-Za-z0-9_.-]+)/([A-Za-z0-9_.-]+)$")


def parse_repo_string(repo: str) -> tuple[str, str]:
    """Split an ``owner/name`` string into its parts.

    Args:
        repo: Repository string like 'octo-org/octo-repo'

    Returns:
        Tuple of (owner, name)

    Raises:
        ValueError: If the string is not in owner/name format
    """
    match = _REPO_PATTERN.match(repo.strip())
    if match is None:
        raise ValueError(f"Repository must be in owner/name format: {repo!r}")
    return match.group(1), match.group(2)


class RepositoryCreate(SchemaBase):
    """Schema for registering a repository to mirror."""

    owner: str = Field(max_length=100, description="GitHub org or user (e.g., 'octo-org')")
    name: str = Field(max_length=100, description="Repository name (e.g., 'octo-repo')")
    project: str = Field(max_length=100, description="Project the repository is grouped under")

    @property
    def full_name(self) -> str:
        """Full repository path (owner/name)."""
        return f"{self.owner}/{self.name}"

    @classmethod
    def from_full_name(cls, full_name: str, project: str) -> "RepositoryCreate":
        """
        Factory method to create from a full repository name.

        Args:
            full_name: Full repo path like 'octo-org/octo-repo'
            project: Project name

        Returns:
            RepositoryCreate instance with owner and name extracted
        """
        owner, name = parse_repo_string(full_name)
        return cls(owner=owner, name=name, project=project)


class RepositoryRead(SchemaBase):
    """Schema for reading repository data."""

    id: int
    project_id: int
    owner: str
    name: str
    full_name: str
    is_active: bool
    last_synced_at: datetime | None
    created_at: datetime
