"""Tests for SQLAlchemy ORM models."""

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError

from github_commit_mirror.db.models import Commit, CommitFile, Repository

from tests.factories import make_commit, make_project, make_repository, make_sha, make_user


class TestRepositoryModel:
    """Tests for Repository model."""

    async def test_create_repository(self, db_session):
        """Test creating and querying a repository."""
        make_repository(db_session)
        await db_session.flush()

        # Query it back
        result = await db_session.execute(
            select(Repository).where(Repository.full_name == "octo-org/octo-repo")
        )
        fetched = result.scalar_one()

        assert fetched.owner == "octo-org"
        assert fetched.name == "octo-repo"
        assert fetched.is_active is True
        assert fetched.last_synced_at is None

    async def test_repository_unique_full_name(self, db_session):
        """Test that duplicate full_name is rejected."""
        project = make_project(db_session)
        make_repository(db_session, project=project, name="test-repo")
        await db_session.flush()

        make_repository(db_session, project=project, name="test-repo")  # Same full_name

        with pytest.raises(IntegrityError):
            await db_session.flush()

    async def test_project_unique_name(self, db_session):
        """Project names are unique."""
        make_project(db_session, name="octo")
        await db_session.flush()
        make_project(db_session, name="octo")

        with pytest.raises(IntegrityError):
            await db_session.flush()


class TestUserModel:
    """Tests for User model."""

    async def test_unique_github_id(self, db_session):
        """A GitHub account maps to at most one user."""
        make_user(db_session, github_id=5)
        await db_session.flush()
        make_user(db_session, github_id=5, login="renamed")

        with pytest.raises(IntegrityError):
            await db_session.flush()


class TestCommitModel:
    """Tests for Commit and CommitFile models."""

    async def test_create_commit_with_files(self, db_session):
        """Files are persisted with their commit."""
        repo = make_repository(db_session)
        await db_session.flush()

        commit = make_commit(db_session, repo, filenames=["a.py", "b.py"])
        await db_session.flush()

        result = await db_session.execute(
            select(CommitFile).where(CommitFile.commit_id == commit.id)
        )
        assert {f.filename for f in result.scalars()} == {"a.py", "b.py"}

    async def test_sha_unique_per_repository(self, db_session):
        """The same SHA can't be stored twice for one repository."""
        repo = make_repository(db_session)
        await db_session.flush()
        make_commit(db_session, repo, sha=make_sha(1))
        await db_session.flush()

        make_commit(db_session, repo, sha=make_sha(1), sort=1)

        with pytest.raises(IntegrityError):
            await db_session.flush()

    async def test_same_sha_in_different_repositories(self, db_session):
        """Forks share SHAs; uniqueness is per repository."""
        project = make_project(db_session)
        repo_a = make_repository(db_session, project=project, name="a")
        repo_b = make_repository(db_session, project=project, name="b")
        await db_session.flush()

        make_commit(db_session, repo_a, sha=make_sha(1))
        make_commit(db_session, repo_b, sha=make_sha(1))
        await db_session.flush()

        result = await db_session.execute(select(Commit).where(Commit.sha == make_sha(1)))
        assert len(result.scalars().all()) == 2

    async def test_author_and_committer_links(self, db_session):
        """Author and committer can link to different users."""
        repo = make_repository(db_session)
        author = make_user(db_session, github_id=1, login="author")
        committer = make_user(db_session, github_id=2, login="committer")
        await db_session.flush()

        commit = make_commit(db_session, repo, author=author, committer=committer)
        await db_session.flush()

        assert commit.author_id == author.id
        assert commit.committer_id == committer.id

    async def test_unlinked_commit(self, db_session):
        """Commits can exist without linked users."""
        repo = make_repository(db_session)
        await db_session.flush()

        commit = make_commit(db_session, repo, author_name="Someone")
        await db_session.flush()

        assert commit.author_id is None
        assert commit.committer_id is None
        assert commit.author_name == "Someone"
