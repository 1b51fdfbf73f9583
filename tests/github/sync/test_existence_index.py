"""Tests for ExistenceIndex."""

from unittest.mock import AsyncMock, MagicMock

from github_commit_mirror.db.repositories import CommitRepository
from github_commit_mirror.github.sync import ExistenceIndex
from tests.factories import make_commit, make_project, make_repository, make_sha


def make_index(sha_map: dict[int, dict[str, int]]) -> tuple[ExistenceIndex, MagicMock]:
    commits = MagicMock()
    commits.get_sha_map = AsyncMock(return_value=sha_map)
    return ExistenceIndex(commits), commits


def make_repo(repository_id: int) -> MagicMock:
    repository = MagicMock()
    repository.id = repository_id
    return repository


class TestExistenceIndexLoading:
    """Tests for the lazily-loaded snapshot."""

    async def test_not_loaded_until_first_lookup(self):
        """Constructing the index doesn't touch the database."""
        index, commits = make_index({})

        assert index.is_loaded is False
        commits.get_sha_map.assert_not_called()

    async def test_loaded_once(self):
        """Many lookups read the table once."""
        index, commits = make_index({1: {make_sha(1): 0}})
        repository = make_repo(1)

        await index.exists(repository, make_sha(1))
        await index.exists(repository, make_sha(2))
        await index.sort_of(repository, make_sha(1))

        assert index.is_loaded is True
        commits.get_sha_map.assert_awaited_once()

    async def test_reset_reloads(self):
        """reset() makes the next lookup read the table again."""
        index, commits = make_index({})
        repository = make_repo(1)

        await index.exists(repository, make_sha(1))
        index.reset()
        assert index.is_loaded is False

        await index.exists(repository, make_sha(1))
        assert commits.get_sha_map.await_count == 2


class TestExistenceIndexLookups:
    """Tests for exists() and sort_of()."""

    async def test_exists_scoped_to_repository(self):
        """A SHA known in one repository is unknown in another."""
        index, _ = make_index({1: {make_sha(1): 0}})

        assert await index.exists(make_repo(1), make_sha(1)) is True
        assert await index.exists(make_repo(2), make_sha(1)) is False

    async def test_sort_of(self):
        """sort_of returns the stored sort, or None when unknown."""
        index, _ = make_index({1: {make_sha(1): 4}})

        assert await index.sort_of(make_repo(1), make_sha(1)) == 4
        assert await index.sort_of(make_repo(1), make_sha(2)) is None

    async def test_snapshot_ignores_later_writes(self, db_session):
        """Commits written after the first lookup stay invisible."""
        project = make_project(db_session)
        repo = make_repository(db_session, project=project)
        await db_session.flush()
        make_commit(db_session, repo, sha=make_sha(1), sort=0)
        await db_session.flush()

        index = ExistenceIndex(CommitRepository(db_session))
        assert await index.exists(repo, make_sha(1)) is True

        make_commit(db_session, repo, sha=make_sha(2), sort=1)
        await db_session.flush()

        assert await index.exists(repo, make_sha(2)) is False
