"""Pydantic schemas for parsing GitHub API responses.

These schemas map directly to the GitHub REST API response structure.
See: https://docs.github.com/en/rest/commits/commits

Parsing is strict: a commit detail lacking its git author/committer
record, its stats or its file list, or carrying a partial account
block, fails validation rather than being mirrored with gaps.
"""

from datetime import datetime, tzinfo
from typing import Any

from pydantic import BaseModel, Field, field_validator

from .commit import CommitCreate, CommitFileCreate


class GitHubUser(BaseModel):
    """GitHub account linked to a commit (author or committer)."""

    id: int = Field(description="GitHub user ID")
    login: str = Field(description="GitHub username")
    avatar_url: str = Field(description="Avatar image URL")


class GitHubGitActor(BaseModel):
    """Git author/committer record (from git, not the GitHub account)."""

    name: str = Field(description="Name as recorded by git")
    email: str | None = Field(default=None, description="Email as recorded by git")
    date: datetime = Field(description="Timestamp as recorded by git")


class GitHubCommitData(BaseModel):
    """Nested ``commit`` object of a commit response."""

    author: GitHubGitActor = Field(description="Git author")
    committer: GitHubGitActor = Field(description="Git committer")
    message: str = Field(description="Commit message")


class GitHubCommitStats(BaseModel):
    """Line stats of a commit."""

    additions: int = Field(description="Lines added")
    deletions: int = Field(description="Lines deleted")
    total: int = Field(description="Total line changes")


class GitHubCommitFile(BaseModel):
    """File entry of a commit response."""

    filename: str = Field(description="File path")
    status: str = Field(description="File status (added, modified, removed, renamed, ...)")
    additions: int = Field(description="Lines added")
    deletions: int = Field(description="Lines deleted")
    changes: int = Field(description="Total line changes")

    def to_file_create(self) -> CommitFileCreate:
        """Factory method to convert to CommitFileCreate schema."""
        return CommitFileCreate(
            filename=self.filename,
            status=self.status,
            additions=self.additions,
            deletions=self.deletions,
            changes=self.changes,
        )


class GitHubCommitSummary(BaseModel):
    """Commit entry from the list endpoint.

    Maps to: GET /repos/{owner}/{repo}/commits

    Only the SHA is used; full details come from the single-commit endpoint.
    """

    sha: str = Field(description="Commit SHA")


class GitHubCommitDetail(BaseModel):
    """Full commit object from API.

    Maps to: GET /repos/{owner}/{repo}/commits/{ref}
    """

    sha: str = Field(description="Commit SHA")

    # Linked accounts (None when the git identity matches no GitHub account)
    author: GitHubUser | None = Field(default=None, description="GitHub author account")
    committer: GitHubUser | None = Field(default=None, description="GitHub committer account")

    commit: GitHubCommitData = Field(description="Git commit data")
    stats: GitHubCommitStats = Field(description="Line stats")
    files: list[GitHubCommitFile] = Field(description="Files touched")

    @field_validator("author", "committer", mode="before")
    @classmethod
    def empty_account_as_none(cls, v: Any) -> Any:
        """GitHub sends ``{}`` for some unlinked identities; treat it like null."""
        if isinstance(v, dict) and not v:
            return None
        return v

    def to_commit_create(
        self,
        repository_id: int,
        *,
        sort: int,
        author_id: int | None = None,
        committer_id: int | None = None,
        timezone: tzinfo | None = None,
    ) -> CommitCreate:
        """
        Factory method to convert to CommitCreate schema.

        Args:
            repository_id: ID of the repository this commit belongs to
            sort: Provisional position in the listing
            author_id: Local user resolved for the author account, if any
            committer_id: Local user resolved for the committer account, if any
            timezone: Zone to store timestamps in (None = process local zone)

        Returns:
            CommitCreate aggregate including the commit's files
        """
        return CommitCreate(
            repository_id=repository_id,
            sha=self.sha,
            author_id=author_id,
            author_name=self.commit.author.name,
            authored_at=self.commit.author.date.astimezone(timezone),
            committer_id=committer_id,
            committer_name=self.commit.committer.name,
            committed_at=self.commit.committer.date.astimezone(timezone),
            message=self.commit.message,
            additions=self.stats.additions,
            deletions=self.stats.deletions,
            total=self.stats.total,
            sort=sort,
            files=[f.to_file_create() for f in self.files],
        )
