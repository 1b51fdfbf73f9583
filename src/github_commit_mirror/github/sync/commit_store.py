"""Commit Store - Staged commit persistence with explicit flush boundaries.

New commits are staged in the session as they are mirrored and written
durably only when the synchronizer flushes. A failure therefore loses at
most the commits staged since the last flush; those are re-discovered on
the next run because the existence snapshot never saw them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from github_commit_mirror.db.exceptions import PersistenceError
from github_commit_mirror.db.repositories import CommitRepository
from github_commit_mirror.logging import get_logger

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from github_commit_mirror.db.models import Commit
    from github_commit_mirror.schemas.commit import CommitCreate

logger = get_logger(__name__)


class CommitStore:
    """Buffers new commits and commits them to the database on flush().

    Usage:
        async with get_session() as session:
            store = CommitStore(session)

            store.stage(commit_create)  # Buffered, nothing written yet
            ...
            await store.flush()  # Durable; safe to call with nothing staged

    Attributes:
        staged_count: Commits staged since the last flush.
        total_flushed: Commits written across all flushes.
        flush_count: Number of flush() calls that completed.
    """

    def __init__(
        self,
        session: AsyncSession,
        commit_repository: CommitRepository | None = None,
    ) -> None:
        """Initialize the commit store.

        Args:
            session: Async SQLAlchemy session to stage into and commit on.
            commit_repository: Repository used to build commit rows.
                               Defaults to one bound to the same session.
        """
        self._session = session
        self._commits = commit_repository or CommitRepository(session)
        self._staged_count = 0
        self._total_flushed = 0
        self._flush_count = 0

    @property
    def staged_count(self) -> int:
        """Commits staged since the last flush."""
        return self._staged_count

    @property
    def total_flushed(self) -> int:
        """Commits written across all flushes."""
        return self._total_flushed

    @property
    def flush_count(self) -> int:
        """Number of completed flushes."""
        return self._flush_count

    def stage(self, data: CommitCreate) -> Commit:
        """Stage a commit and its files for the next flush.

        Args:
            data: Commit aggregate (commit plus files)

        Returns:
            The pending Commit instance
        """
        commit = self._commits.stage(data)
        self._staged_count += 1
        return commit

    async def flush(self) -> int:
        """Durably write everything staged so far.

        Commits the session even when nothing is staged, so user records
        resolved along the way are written too.

        Returns:
            Number of commits written by this flush.

        Raises:
            PersistenceError: If the database rejects the batch. The
                session is rolled back and the staged batch is discarded.
        """
        try:
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            lost = self._staged_count
            self._staged_count = 0
            raise PersistenceError(f"Failed to flush {lost} staged commit(s): {e}") from e

        flushed = self._staged_count
        self._total_flushed += flushed
        self._staged_count = 0
        self._flush_count += 1

        logger.debug(
            "Flushed batch of {} commits (total: {})",
            flushed,
            self._total_flushed,
        )
        return flushed
