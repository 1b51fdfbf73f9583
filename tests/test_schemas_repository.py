"""Tests for Repository Pydantic schemas."""

from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from github_commit_mirror.schemas import RepositoryCreate, RepositoryRead, parse_repo_string
from tests.factories import make_repository


class TestParseRepoString:
    """Tests for parse_repo_string helper."""

    def test_valid(self):
        """owner/name splits into its parts."""
        assert parse_repo_string("octo-org/octo-repo") == ("octo-org", "octo-repo")

    def test_dots_and_underscores(self):
        """Dots and underscores are valid in names."""
        assert parse_repo_string("octo_org/octo.js") == ("octo_org", "octo.js")

    def test_surrounding_whitespace_ignored(self):
        """Surrounding whitespace is stripped."""
        assert parse_repo_string("  octo-org/octo-repo ") == ("octo-org", "octo-repo")

    @pytest.mark.parametrize("value", ["octo-repo", "a/b/c", "/repo", "owner/", ""])
    def test_invalid(self, value):
        """Anything but exactly owner/name is rejected."""
        with pytest.raises(ValueError):
            parse_repo_string(value)


class TestRepositoryCreate:
    """Tests for RepositoryCreate schema."""

    def test_repository_create_valid(self):
        """Test valid data is accepted."""
        repo = RepositoryCreate(owner="octo-org", name="octo-repo", project="octo")

        assert repo.owner == "octo-org"
        assert repo.name == "octo-repo"
        assert repo.project == "octo"
        assert repo.full_name == "octo-org/octo-repo"

    def test_repository_create_from_full_name(self):
        """Test factory method parses 'owner/name' correctly."""
        repo = RepositoryCreate.from_full_name("octo-org/octo-repo", "octo")

        assert repo.owner == "octo-org"
        assert repo.name == "octo-repo"
        assert repo.project == "octo"

    def test_repository_create_rejects_long_owner(self):
        """Owner longer than the column is rejected."""
        with pytest.raises(ValidationError):
            RepositoryCreate(owner="x" * 101, name="repo", project="octo")


class TestRepositoryRead:
    """Tests for RepositoryRead schema."""

    async def test_from_orm(self, db_session):
        """RepositoryRead is built from the ORM model."""
        synced = datetime(2024, 1, 15, 10, 0, 0, tzinfo=UTC)
        repo = make_repository(db_session, last_synced_at=synced)
        await db_session.flush()

        read = RepositoryRead.from_orm(repo)

        assert read.id == repo.id
        assert read.project_id == repo.project_id
        assert read.full_name == "octo-org/octo-repo"
        assert read.is_active is True
        assert read.last_synced_at == synced
