"""User Resolver - map GitHub accounts on commits to local users."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy.exc import SQLAlchemyError

from github_commit_mirror.db.exceptions import PersistenceError
from github_commit_mirror.db.repositories import UserRepository
from github_commit_mirror.logging import get_logger

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from github_commit_mirror.schemas.github_api import GitHubUser

logger = get_logger(__name__)


class UserResolver:
    """Resolves GitHub accounts to local user IDs, caching per run.

    The same few accounts author most commits in a repository, so each
    GitHub ID is looked up (and created if missing) once per resolver.

    Creating a user flushes the session, which also writes any commits
    staged since the last batch. Database failures here are therefore
    handled like a failed batch: rolled back and raised as PersistenceError.
    """

    def __init__(
        self,
        session: AsyncSession,
        user_repository: UserRepository | None = None,
    ) -> None:
        self._session = session
        self._users = user_repository or UserRepository(session)
        self._cache: dict[int, int] = {}
        self._created = 0

    @property
    def created_count(self) -> int:
        """Users created by this resolver."""
        return self._created

    async def resolve(self, account: GitHubUser) -> int:
        """Get the local user ID for a GitHub account.

        Args:
            account: Account block from a commit payload

        Returns:
            Local user ID

        Raises:
            PersistenceError: If the lookup or insert (or the staged
                commits flushed with it) is rejected by the database
        """
        cached = self._cache.get(account.id)
        if cached is not None:
            return cached

        try:
            user, created = await self._users.get_or_create_by_github_id(
                account.id, account.login, account.avatar_url
            )
        except SQLAlchemyError as e:
            await self._session.rollback()
            self._cache.clear()
            raise PersistenceError(
                f"Failed to resolve GitHub account {account.login} (id={account.id}): {e}"
            ) from e

        if created:
            self._created += 1
            logger.debug("Created user {} (github_id={})", account.login, account.id)

        self._cache[account.id] = user.id
        return user.id
