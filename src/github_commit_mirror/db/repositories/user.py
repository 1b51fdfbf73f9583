"""Repository for User model CRUD operations."""

from sqlalchemy.ext.asyncio import AsyncSession

from github_commit_mirror.db.models import User

from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for local User entities linked to GitHub accounts."""

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: Async SQLAlchemy session
        """
        super().__init__(session, User)

    async def get_by_github_id(self, github_id: int) -> User | None:
        """Get a user by GitHub account ID.

        Args:
            github_id: Numeric GitHub user ID

        Returns:
            User or None if not found
        """
        return await self._get_by_field("github_id", github_id)

    async def get_or_create_by_github_id(
        self,
        github_id: int,
        login: str,
        avatar_url: str,
    ) -> tuple[User, bool]:
        """Get the user for a GitHub account, creating it if needed.

        Logins and avatars change upstream; an existing user is refreshed
        with the latest values.

        Args:
            github_id: Numeric GitHub user ID
            login: Current GitHub login
            avatar_url: Current avatar URL

        Returns:
            Tuple of (user, created) where created is True if new
        """
        user = await self.get_by_github_id(github_id)
        if user is not None:
            if user.login != login or user.avatar_url != avatar_url:
                user.login = login
                user.avatar_url = avatar_url
                await self.flush()
            return user, False

        user = User(github_id=github_id, login=login, avatar_url=avatar_url)
        self.add(user)
        await self.flush()
        return user, True
