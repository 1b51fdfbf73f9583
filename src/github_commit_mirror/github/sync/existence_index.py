"""Existence Index - per-run snapshot of which commits are already mirrored."""

from __future__ import annotations

from typing import TYPE_CHECKING

from github_commit_mirror.logging import get_logger

if TYPE_CHECKING:
    from github_commit_mirror.db.models import Repository
    from github_commit_mirror.db.repositories import CommitRepository

logger = get_logger(__name__)


class ExistenceIndex:
    """Lazily-loaded map of repository -> {sha: sort} for one sync run.

    The whole table is read once, on the first lookup, and never refreshed.
    Commits staged later in the same run don't show up here; each SHA is
    looked up once per run before it is mirrored, so they never need to.
    Call reset() before reusing the index for another run.
    """

    def __init__(self, commit_repository: CommitRepository) -> None:
        self._commits = commit_repository
        self._snapshot: dict[int, dict[str, int]] | None = None

    @property
    def is_loaded(self) -> bool:
        """Whether the snapshot has been read from the database."""
        return self._snapshot is not None

    async def _load(self) -> dict[int, dict[str, int]]:
        if self._snapshot is None:
            self._snapshot = await self._commits.get_sha_map()
            logger.debug(
                "Loaded existence snapshot: {} commits across {} repositories",
                sum(len(shas) for shas in self._snapshot.values()),
                len(self._snapshot),
            )
        return self._snapshot

    async def exists(self, repository: Repository, sha: str) -> bool:
        """Check whether a commit was already mirrored when the run started."""
        snapshot = await self._load()
        return sha in snapshot.get(repository.id, {})

    async def sort_of(self, repository: Repository, sha: str) -> int | None:
        """Stored sort of a commit at run start, or None if unknown."""
        snapshot = await self._load()
        return snapshot.get(repository.id, {}).get(sha)

    def reset(self) -> None:
        """Drop the snapshot so the next lookup reloads it."""
        self._snapshot = None
