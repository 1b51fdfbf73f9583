"""History reconciliation - prune rewritten commits and re-sort the rest.

Both steps run once per repository, after the complete remote listing has
been observed. Given a partial listing they would delete or misorder
commits that simply hadn't been seen yet.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from github_commit_mirror.db.exceptions import PersistenceError
from github_commit_mirror.logging import get_logger

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from github_commit_mirror.db.models import Repository
    from github_commit_mirror.db.repositories import CommitRepository

logger = get_logger(__name__)


def observed_positions(observed: Sequence[str]) -> dict[str, int]:
    """Map each SHA to its 0-based position in the listing.

    A SHA listed more than once keeps its first position.
    """
    positions: dict[str, int] = {}
    for index, sha in enumerate(observed):
        positions.setdefault(sha, index)
    return positions


class UnreachableCommitPruner:
    """Deletes local commits that no longer appear in the remote listing.

    Commits rebased or force-pushed away upstream drop out of the listing;
    their rows (and files) are removed so the mirror matches the remote.
    """

    def __init__(self, session: AsyncSession, commit_repository: CommitRepository) -> None:
        self._session = session
        self._commits = commit_repository

    async def prune(self, repository: Repository, observed: Sequence[str]) -> int:
        """Delete every commit of the repository whose SHA is not in observed.

        Args:
            repository: Repository being synchronized
            observed: Complete listing of SHAs from this pass

        Returns:
            Number of commits deleted

        Raises:
            PersistenceError: If the deletes can't be committed
        """
        reachable = set(observed)
        try:
            rows = await self._commits.get_sha_index(repository.id)
            unreachable = [commit_id for commit_id, sha, _sort in rows if sha not in reachable]
            deleted = await self._commits.delete_by_ids(unreachable) if unreachable else 0
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            raise PersistenceError(
                f"Failed to prune commits for {repository.full_name}: {e}"
            ) from e

        if deleted:
            logger.info(
                "Pruned {} unreachable commit(s) from {}", deleted, repository.full_name
            )
        return deleted


class CommitOrderReconciler:
    """Rewrites each commit's sort to its position in the remote listing."""

    def __init__(self, session: AsyncSession, commit_repository: CommitRepository) -> None:
        self._session = session
        self._commits = commit_repository

    async def reorder(self, repository: Repository, observed: Sequence[str]) -> int:
        """Set sort = 0-based position in observed for every stored commit.

        Only rows whose sort actually changes are updated. Stored commits
        missing from observed are left alone; pruning removes them first.

        Args:
            repository: Repository being synchronized
            observed: Complete listing of SHAs from this pass

        Returns:
            Number of commits whose sort changed

        Raises:
            PersistenceError: If the updates can't be committed
        """
        positions = observed_positions(observed)
        try:
            rows = await self._commits.get_sha_index(repository.id)
            changes = [
                (commit_id, positions[sha])
                for commit_id, sha, sort in rows
                if sha in positions and positions[sha] != sort
            ]
            updated = await self._commits.update_sort_orders(changes)
            await self._session.commit()
        except SQLAlchemyError as e:
            await self._session.rollback()
            raise PersistenceError(
                f"Failed to reorder commits for {repository.full_name}: {e}"
            ) from e

        logger.debug("Reordered {} commit(s) in {}", updated, repository.full_name)
        return updated
