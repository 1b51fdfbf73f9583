"""Repository for GitHub Repository and Project model CRUD operations."""

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from github_commit_mirror.db.models import Project, Repository

from .base import BaseRepository


class RepositoryRepository(BaseRepository[Repository]):
    """Repository for mirrored GitHub Repository entities.

    Also owns the Project rows repositories are grouped under, since a
    project only ever exists to order and group repositories.
    """

    def __init__(self, session: AsyncSession) -> None:
        """Initialize the repository.

        Args:
            session: Async SQLAlchemy session
        """
        super().__init__(session, Repository)

    # -------------------------------------------------------------------------
    # Query Methods
    # -------------------------------------------------------------------------

    async def get_by_full_name(self, full_name: str) -> Repository | None:
        """Get a repository by its full name (owner/repo).

        Args:
            full_name: Full repository name (e.g., "octo-org/octo-repo")

        Returns:
            Repository or None if not found
        """
        stmt = (
            select(Repository)
            .options(selectinload(Repository.project))
            .where(Repository.full_name == full_name)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_by_owner_and_name(self, owner: str, name: str) -> Repository | None:
        """Get a repository by owner and name.

        Args:
            owner: Repository owner (e.g., "octo-org")
            name: Repository name (e.g., "octo-repo")

        Returns:
            Repository or None if not found
        """
        return await self.get_by_full_name(f"{owner}/{name}")

    async def get_sorted_by_project_and_name(self) -> list[Repository]:
        """Get all active repositories in sync order.

        Ordered by project name, then repository name, then ID so the
        order is stable across calls within a run.

        Returns:
            List of active repositories with their project loaded
        """
        stmt = (
            select(Repository)
            .join(Repository.project)
            .options(selectinload(Repository.project))
            .where(Repository.is_active.is_(True))
            .order_by(Project.name, Repository.name, Repository.id)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def get_project_by_name(self, name: str) -> Project | None:
        """Get a project by name.

        Args:
            name: Project name

        Returns:
            Project or None if not found
        """
        stmt = select(Project).where(Project.name == name)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    # -------------------------------------------------------------------------
    # Create/Update Methods
    # -------------------------------------------------------------------------

    async def get_or_create_project(self, name: str) -> tuple[Project, bool]:
        """Get existing project or create a new one.

        Args:
            name: Project name

        Returns:
            Tuple of (project, created) where created is True if new
        """
        existing = await self.get_project_by_name(name)
        if existing is not None:
            return existing, False

        project = Project(name=name)
        self._session.add(project)
        await self.flush()
        return project, True

    async def create(
        self,
        owner: str,
        name: str,
        project: Project,
        *,
        is_active: bool = True,
    ) -> Repository:
        """Create a new repository.

        Args:
            owner: Repository owner
            name: Repository name
            project: Project the repository belongs to
            is_active: Whether the repository is active for syncing

        Returns:
            Created repository (not yet committed)
        """
        repo = Repository(
            owner=owner,
            name=name,
            full_name=f"{owner}/{name}",
            project=project,
            is_active=is_active,
        )
        self.add(repo)
        await self.flush()
        # created_at is generated by the INSERT; load it while we're async
        await self._session.refresh(repo, attribute_names=["created_at"])
        return repo

    async def get_or_create(
        self,
        owner: str,
        name: str,
        project_name: str,
    ) -> tuple[Repository, bool]:
        """Get existing repository or create a new one under a project.

        An existing repository keeps its current project.

        Args:
            owner: Repository owner
            name: Repository name
            project_name: Project to create the repository under

        Returns:
            Tuple of (repository, created) where created is True if new
        """
        existing = await self.get_by_owner_and_name(owner, name)
        if existing is not None:
            return existing, False

        project, _ = await self.get_or_create_project(project_name)
        repo = await self.create(owner, name, project)
        return repo, True

    async def update_last_synced(
        self,
        repository_id: int,
        synced_at: datetime,
    ) -> Repository | None:
        """Update the last_synced_at timestamp for a repository.

        Args:
            repository_id: Repository ID
            synced_at: Timestamp of the sync

        Returns:
            Updated repository or None if not found
        """
        repo = await self.get_by_id(repository_id)
        if repo is None:
            return None

        repo.last_synced_at = synced_at
        await self.flush()
        return repo

    async def set_active(self, repository_id: int, is_active: bool) -> Repository | None:
        """Mark a repository as active or inactive for syncing.

        Args:
            repository_id: Repository ID
            is_active: New active flag

        Returns:
            Updated repository or None if not found
        """
        repo = await self.get_by_id(repository_id)
        if repo is None:
            return None

        repo.is_active = is_active
        await self.flush()
        return repo
