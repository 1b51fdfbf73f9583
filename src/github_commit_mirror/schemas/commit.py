"""Pydantic schemas for Commit and CommitFile models."""

from datetime import datetime

from pydantic import ConfigDict, Field

from .base import SchemaBase


class CommitFileCreate(SchemaBase):
    """Schema for one file entry of a commit, copied verbatim from GitHub."""

    model_config = ConfigDict(str_strip_whitespace=False)

    filename: str = Field(description="File path")
    status: str = Field(max_length=20, description="added, modified, removed, renamed, ...")
    additions: int = Field(ge=0, description="Lines added")
    deletions: int = Field(ge=0, description="Lines deleted")
    changes: int = Field(ge=0, description="Total line changes")


class CommitCreate(SchemaBase):
    """Schema for a new commit together with its files.

    This is the aggregate handed to CommitStore.stage(): the commit and
    all of its files are constructed up front and persisted together.
    """

    # Names and messages are stored exactly as git recorded them
    model_config = ConfigDict(str_strip_whitespace=False)

    repository_id: int = Field(description="Foreign key to repository")
    sha: str = Field(min_length=1, max_length=40, description="Commit SHA")

    author_id: int | None = Field(default=None, description="Local user for the author")
    author_name: str = Field(description="Git author name")
    authored_at: datetime = Field(description="Author date in the local zone")

    committer_id: int | None = Field(default=None, description="Local user for the committer")
    committer_name: str = Field(description="Git committer name")
    committed_at: datetime = Field(description="Commit date in the local zone")

    message: str = Field(description="Commit message")

    additions: int = Field(ge=0, description="Lines added")
    deletions: int = Field(ge=0, description="Lines deleted")
    total: int = Field(ge=0, description="Total line changes")

    sort: int = Field(ge=0, description="Provisional position in the listing")

    files: list[CommitFileCreate] = Field(default_factory=list, description="Files touched")


class CommitFileRead(SchemaBase):
    """Schema for reading commit file data."""

    filename: str
    status: str
    additions: int
    deletions: int
    changes: int


class CommitRead(SchemaBase):
    """Schema for reading commit data."""

    id: int
    repository_id: int
    sha: str
    author_id: int | None
    author_name: str
    authored_at: datetime
    committer_id: int | None
    committer_name: str
    committed_at: datetime
    message: str
    additions: int
    deletions: int
    total: int
    sort: int
    files: list[CommitFileRead] = []

    @property
    def short_sha(self) -> str:
        """First 7 characters of the SHA, as git abbreviates it."""
        return self.sha[:7]

    @property
    def subject(self) -> str:
        """First line of the commit message."""
        return self.message.split("\n", 1)[0]
