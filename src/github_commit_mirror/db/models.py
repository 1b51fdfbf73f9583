"""SQLAlchemy ORM models for GitHub Commit Mirror."""

from datetime import datetime

from sqlalchemy import (
    DateTime,
    ForeignKey,
    Index,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    Mapped,
    mapped_column,
    relationship,
)


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""

    pass


# ------------------------------------------------------------------------------
# Project model
# ------------------------------------------------------------------------------
class Project(Base):
    """Grouping of mirrored repositories (e.g., a product or team)."""

    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())

    # Relationships
    repositories: Mapped[list["Repository"]] = relationship(
        back_populates="project",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Project(id={self.id}, name='{self.name}')>"


# ------------------------------------------------------------------------------
# Repository model
# ------------------------------------------------------------------------------
class Repository(Base):
    """Mirrored GitHub repository."""

    __tablename__ = "repositories"

    id: Mapped[int] = mapped_column(primary_key=True)
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id", ondelete="CASCADE"))
    owner: Mapped[str] = mapped_column(String(100))  # e.g., "octo-org"
    name: Mapped[str] = mapped_column(String(100))  # e.g., "octo-repo"
    full_name: Mapped[str] = mapped_column(String(200), unique=True)  # "octo-org/octo-repo"
    is_active: Mapped[bool] = mapped_column(default=True)
    last_synced_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())

    # Relationships
    project: Mapped["Project"] = relationship(back_populates="repositories")
    commits: Mapped[list["Commit"]] = relationship(
        back_populates="repository",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Repository(id={self.id}, full_name='{self.full_name}')>"


# ------------------------------------------------------------------------------
# User model
# ------------------------------------------------------------------------------
class User(Base):
    """Local record of a GitHub account seen as a commit author or committer."""

    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    github_id: Mapped[int] = mapped_column(unique=True)
    login: Mapped[str] = mapped_column(String(100))
    avatar_url: Mapped[str] = mapped_column(String(500))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=func.now(), onupdate=func.now())

    def __repr__(self) -> str:
        return f"<User(id={self.id}, login='{self.login}')>"


# ------------------------------------------------------------------------------
# Commit model
# ------------------------------------------------------------------------------
class Commit(Base):
    """Mirrored commit.

    Everything except ``sort`` is fixed when the commit is first mirrored.
    ``sort`` is the commit's 0-based position in the most recent GitHub
    listing and is rewritten after every repository pass.
    """

    __tablename__ = "commits"

    id: Mapped[int] = mapped_column(primary_key=True)
    repository_id: Mapped[int] = mapped_column(ForeignKey("repositories.id", ondelete="CASCADE"))
    sha: Mapped[str] = mapped_column(String(40))

    # --------------------------------------------------------------------------
    # Authorship (local user link is optional, raw git name is not)
    # --------------------------------------------------------------------------
    author_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    author_name: Mapped[str] = mapped_column(String(255))
    authored_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    committer_id: Mapped[int | None] = mapped_column(
        ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    committer_name: Mapped[str] = mapped_column(String(255))
    committed_at: Mapped[datetime] = mapped_column(DateTime(timezone=True))

    message: Mapped[str] = mapped_column(Text)

    # Numeric stats
    additions: Mapped[int] = mapped_column(default=0)
    deletions: Mapped[int] = mapped_column(default=0)
    total: Mapped[int] = mapped_column(default=0)

    sort: Mapped[int] = mapped_column(default=0)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())

    # --------------------------------------------------------------------------
    # Relationships
    # --------------------------------------------------------------------------
    repository: Mapped["Repository"] = relationship(back_populates="commits")
    author: Mapped["User | None"] = relationship(foreign_keys=[author_id])
    committer: Mapped["User | None"] = relationship(foreign_keys=[committer_id])
    files: Mapped[list["CommitFile"]] = relationship(
        back_populates="commit",
        cascade="all, delete-orphan",
        order_by="CommitFile.id",
    )

    # One SHA per repository; sort lookups are always scoped to a repository
    __table_args__ = (
        UniqueConstraint("repository_id", "sha", name="uq_repo_commit_sha"),
        Index("ix_commits_repository_sort", "repository_id", "sort"),
    )

    def __repr__(self) -> str:
        return f"<Commit(id={self.id}, repo='{self.repository_id}', sha='{self.sha[:12]}')>"


# ------------------------------------------------------------------------------
# CommitFile model
# ------------------------------------------------------------------------------
class CommitFile(Base):
    """File touched by a commit, with per-file line stats."""

    __tablename__ = "commit_files"

    id: Mapped[int] = mapped_column(primary_key=True)
    commit_id: Mapped[int] = mapped_column(ForeignKey("commits.id", ondelete="CASCADE"))
    filename: Mapped[str] = mapped_column(String(1000))
    status: Mapped[str] = mapped_column(String(20))  # added, modified, removed, renamed, ...
    additions: Mapped[int] = mapped_column(default=0)
    deletions: Mapped[int] = mapped_column(default=0)
    changes: Mapped[int] = mapped_column(default=0)

    commit: Mapped["Commit"] = relationship(back_populates="files")

    def __repr__(self) -> str:
        return f"<CommitFile(id={self.id}, commit_id={self.commit_id}, filename='{self.filename}')>"
