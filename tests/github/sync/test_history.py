"""Tests for unreachable-commit pruning and order reconciliation."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from github_commit_mirror.db.exceptions import PersistenceError
from github_commit_mirror.db.repositories import CommitRepository
from github_commit_mirror.github.sync import (
    CommitOrderReconciler,
    UnreachableCommitPruner,
    observed_positions,
)
from tests.factories import make_commit, make_repository, make_sha


async def stored(session, repository_id: int) -> list[tuple[str, int]]:
    commits = await CommitRepository(session).list_for_repository(repository_id)
    return [(c.sha, c.sort) for c in commits]


@pytest.fixture
async def seeded(db_session):
    """Repository with commits 1..3 stored newest first (sha 3 at sort 0)."""
    repo = make_repository(db_session)
    await db_session.flush()
    for sort, n in enumerate([3, 2, 1]):
        make_commit(db_session, repo, sha=make_sha(n), sort=sort)
    await db_session.commit()
    return repo


def failing_commits() -> MagicMock:
    commits = MagicMock()
    commits.get_sha_index = AsyncMock(
        side_effect=OperationalError("SELECT", {}, Exception("database is locked"))
    )
    return commits


def failing_session() -> MagicMock:
    session = MagicMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    return session


# -----------------------------------------------------------------------------
# observed_positions
# -----------------------------------------------------------------------------
class TestObservedPositions:
    """Tests for listing position lookup."""

    def test_positions_are_zero_based(self):
        """Each SHA maps to its index in the listing."""
        assert observed_positions(["c", "b", "a"]) == {"c": 0, "b": 1, "a": 2}

    def test_first_occurrence_wins(self):
        """A SHA listed twice keeps its first position."""
        assert observed_positions(["b", "a", "b"]) == {"b": 0, "a": 1}

    def test_empty(self):
        assert observed_positions([]) == {}


# -----------------------------------------------------------------------------
# UnreachableCommitPruner
# -----------------------------------------------------------------------------
class TestUnreachableCommitPruner:
    """Tests for deleting commits missing from the listing."""

    async def test_prunes_missing_commits(self, db_session, seeded):
        """Commits absent from the listing are deleted."""
        pruner = UnreachableCommitPruner(db_session, CommitRepository(db_session))

        deleted = await pruner.prune(seeded, [make_sha(3), make_sha(1)])

        assert deleted == 1
        assert [sha for sha, _ in await stored(db_session, seeded.id)] == [
            make_sha(3),
            make_sha(1),
        ]

    async def test_nothing_to_prune(self, db_session, seeded):
        """A complete listing deletes nothing."""
        pruner = UnreachableCommitPruner(db_session, CommitRepository(db_session))

        deleted = await pruner.prune(seeded, [make_sha(3), make_sha(2), make_sha(1)])

        assert deleted == 0
        assert len(await stored(db_session, seeded.id)) == 3

    async def test_empty_listing_prunes_everything(self, db_session, seeded):
        """An empty remote history empties the mirror."""
        pruner = UnreachableCommitPruner(db_session, CommitRepository(db_session))

        assert await pruner.prune(seeded, []) == 3
        assert await stored(db_session, seeded.id) == []

    async def test_other_repositories_untouched(self, db_session, seeded):
        """Pruning is scoped to the repository being synced."""
        other = make_repository(db_session, project=seeded.project, name="other")
        await db_session.flush()
        make_commit(db_session, other, sha=make_sha(50))
        await db_session.commit()

        pruner = UnreachableCommitPruner(db_session, CommitRepository(db_session))
        await pruner.prune(seeded, [])

        assert await stored(db_session, other.id) == [(make_sha(50), 0)]

    async def test_database_failure(self):
        """Database errors roll back and raise PersistenceError."""
        session = failing_session()
        pruner = UnreachableCommitPruner(session, failing_commits())

        with pytest.raises(PersistenceError):
            await pruner.prune(MagicMock(full_name="octo-org/octo-repo"), [])

        session.rollback.assert_awaited_once()
        session.commit.assert_not_awaited()


# -----------------------------------------------------------------------------
# CommitOrderReconciler
# -----------------------------------------------------------------------------
class TestCommitOrderReconciler:
    """Tests for rewriting sort to listing positions."""

    async def test_unchanged_order_updates_nothing(self, db_session, seeded):
        """Rows already at their listing position aren't rewritten."""
        reconciler = CommitOrderReconciler(db_session, CommitRepository(db_session))

        updated = await reconciler.reorder(seeded, [make_sha(3), make_sha(2), make_sha(1)])

        assert updated == 0

    async def test_new_commit_on_top_shifts_the_rest(self, db_session, seeded):
        """A commit listed above the stored ones pushes each down by one."""
        reconciler = CommitOrderReconciler(db_session, CommitRepository(db_session))

        updated = await reconciler.reorder(
            seeded, [make_sha(4), make_sha(3), make_sha(2), make_sha(1)]
        )

        assert updated == 3
        assert await stored(db_session, seeded.id) == [
            (make_sha(3), 1),
            (make_sha(2), 2),
            (make_sha(1), 3),
        ]

    async def test_duplicate_listing_uses_first_position(self, db_session, seeded):
        """A SHA listed twice is sorted by its first appearance."""
        reconciler = CommitOrderReconciler(db_session, CommitRepository(db_session))

        await reconciler.reorder(seeded, [make_sha(1), make_sha(3), make_sha(2), make_sha(1)])

        assert await stored(db_session, seeded.id) == [
            (make_sha(1), 0),
            (make_sha(3), 1),
            (make_sha(2), 2),
        ]

    async def test_unlisted_commits_keep_their_sort(self, db_session, seeded):
        """Stored commits absent from the listing are left alone."""
        reconciler = CommitOrderReconciler(db_session, CommitRepository(db_session))

        updated = await reconciler.reorder(seeded, [make_sha(1)])

        assert updated == 1
        assert dict(await stored(db_session, seeded.id)) == {
            make_sha(1): 0,
            make_sha(3): 0,
            make_sha(2): 1,
        }

    async def test_database_failure(self):
        """Database errors roll back and raise PersistenceError."""
        session = failing_session()
        reconciler = CommitOrderReconciler(session, failing_commits())

        with pytest.raises(PersistenceError):
            await reconciler.reorder(MagicMock(full_name="octo-org/octo-repo"), [])

        session.rollback.assert_awaited_once()
