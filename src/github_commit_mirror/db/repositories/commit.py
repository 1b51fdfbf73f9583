"""Repository for Commit and CommitFile model operations."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from github_commit_mirror.db.models import Commit, CommitFile

from .base import BaseRepository

if TYPE_CHECKING:
    from github_commit_mirror.schemas.commit import CommitCreate

# Keeps IN (...) lists under SQLite's bound-parameter limit
DELETE_CHUNK_SIZE = 500


class CommitRepository(BaseRepository[Commit]):
    """Repository for mirrored Commit entities.

    Commits are immutable once written apart from ``sort``, so this
    repository only creates, bulk-deletes, and bulk-reorders them.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: Async SQLAlchemy session
        """
        super().__init__(session, Commit)

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    async def get_sha_map(self) -> dict[int, dict[str, int]]:
        """Load every known commit as repository_id -> {sha: sort}.

        One query over the whole table; used to build the per-run
        existence snapshot.

        Returns:
            Nested dict keyed by repository ID, then SHA
        """
        stmt = select(Commit.repository_id, Commit.sha, Commit.sort)
        result = await self._session.execute(stmt)

        sha_map: dict[int, dict[str, int]] = {}
        for repository_id, sha, sort in result.all():
            sha_map.setdefault(repository_id, {})[sha] = sort
        return sha_map

    async def get_by_sha(self, repository_id: int, sha: str) -> Commit | None:
        """Get a commit (with files) by repository and SHA.

        Args:
            repository_id: Repository ID
            sha: Commit SHA

        Returns:
            Commit or None if not found
        """
        stmt = (
            select(Commit)
            .options(
                selectinload(Commit.files),
                selectinload(Commit.author),
                selectinload(Commit.committer),
            )
            .where(Commit.repository_id == repository_id, Commit.sha == sha)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_repository(
        self,
        repository_id: int,
        *,
        limit: int | None = None,
    ) -> list[Commit]:
        """List a repository's commits in mirrored order (newest first).

        Args:
            repository_id: Repository ID
            limit: Maximum number of commits to return

        Returns:
            Commits ordered by sort, with files and users loaded
        """
        stmt = (
            select(Commit)
            .options(
                selectinload(Commit.files),
                selectinload(Commit.author),
                selectinload(Commit.committer),
            )
            .where(Commit.repository_id == repository_id)
            .order_by(Commit.sort, Commit.id)
            .execution_options(populate_existing=True)
        )
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def count_for_repository(self, repository_id: int) -> int:
        """Count commits stored for a repository.

        Args:
            repository_id: Repository ID

        Returns:
            Number of commits
        """
        stmt = (
            select(func.count())
            .select_from(Commit)
            .where(Commit.repository_id == repository_id)
        )
        result = await self._session.execute(stmt)
        return result.scalar() or 0

    async def get_sha_index(self, repository_id: int) -> list[tuple[int, str, int]]:
        """Get (id, sha, sort) for every commit of a repository.

        Lightweight rows for pruning and reordering without loading
        full ORM objects.

        Args:
            repository_id: Repository ID

        Returns:
            List of (id, sha, sort) tuples
        """
        stmt = select(Commit.id, Commit.sha, Commit.sort).where(
            Commit.repository_id == repository_id
        )
        result = await self._session.execute(stmt)
        return [(row.id, row.sha, row.sort) for row in result.all()]

    # -------------------------------------------------------------------------
    # Write Methods
    # -------------------------------------------------------------------------

    def stage(self, data: CommitCreate) -> Commit:
        """Build a Commit with its files from the aggregate and add it.

        Does not flush; the caller decides when the batch is written.

        Args:
            data: Commit aggregate (commit fields plus its file list)

        Returns:
            The pending Commit instance
        """
        commit = Commit(
            repository_id=data.repository_id,
            sha=data.sha,
            author_id=data.author_id,
            author_name=data.author_name,
            authored_at=data.authored_at,
            committer_id=data.committer_id,
            committer_name=data.committer_name,
            committed_at=data.committed_at,
            message=data.message,
            additions=data.additions,
            deletions=data.deletions,
            total=data.total,
            sort=data.sort,
            files=[
                CommitFile(
                    filename=f.filename,
                    status=f.status,
                    additions=f.additions,
                    deletions=f.deletions,
                    changes=f.changes,
                )
                for f in data.files
            ],
        )
        return self.add(commit)

    async def delete_by_ids(self, commit_ids: Iterable[int]) -> int:
        """Delete commits and their files by primary key.

        Files are deleted explicitly rather than relying on the database
        enforcing ON DELETE CASCADE (SQLite doesn't by default).

        Args:
            commit_ids: Commit IDs to delete

        Returns:
            Number of commits deleted
        """
        ids = list(commit_ids)
        deleted = 0
        for start in range(0, len(ids), DELETE_CHUNK_SIZE):
            chunk = ids[start : start + DELETE_CHUNK_SIZE]
            await self._session.execute(
                delete(CommitFile).where(CommitFile.commit_id.in_(chunk))
            )
            result = await self._session.execute(
                delete(Commit).where(Commit.id.in_(chunk))
            )
            deleted += result.rowcount or 0
        return deleted

    async def update_sort_orders(self, changes: Sequence[tuple[int, int]]) -> int:
        """Bulk-update sort values by primary key.

        Args:
            changes: (commit_id, new_sort) pairs

        Returns:
            Number of commits updated
        """
        if not changes:
            return 0
        await self._session.execute(
            update(Commit),
            [{"id": commit_id, "sort": sort} for commit_id, sort in changes],
        )
        return len(changes)
