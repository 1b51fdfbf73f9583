"""Database module for GitHub Commit Mirror."""

from github_commit_mirror.db.engine import (
    create_tables,
    dispose_engine,
    drop_tables,
    get_engine,
    get_session,
    get_session_factory,
)
from github_commit_mirror.db.exceptions import PersistenceError
from github_commit_mirror.db.models import (
    Base,
    Commit,
    CommitFile,
    Project,
    Repository,
    User,
)
from github_commit_mirror.db.repositories import (
    BaseRepository,
    CommitRepository,
    RepositoryRepository,
    UserRepository,
)

__all__ = [
    # Models
    "Base",
    "Commit",
    "CommitFile",
    "Project",
    "Repository",
    "User",
    # Engine
    "create_tables",
    "dispose_engine",
    "drop_tables",
    "get_engine",
    "get_session",
    "get_session_factory",
    # Errors
    "PersistenceError",
    # Repositories
    "BaseRepository",
    "CommitRepository",
    "RepositoryRepository",
    "UserRepository",
]
