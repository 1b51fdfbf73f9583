"""Commit Synchronizer - Mirror commit history for all tracked repositories.

For each active repository (ordered by project, then name) the remote
commit listing is paged through newest-first. Unknown commits are fetched
in full and staged; staged commits are flushed every ``flush_interval``
listed commits and once more when the listing ends. Only after the whole
listing has been seen are unreachable commits pruned and the remaining
commits re-sorted to match the remote order.

Nothing here catches errors: the first failure aborts the run, leaving
earlier flushes in place and skipping pruning/reordering for the
repository being processed.
"""

from __future__ import annotations

import time
from datetime import UTC, datetime, tzinfo
from typing import TYPE_CHECKING

from github_commit_mirror.config import SyncConfig, get_settings
from github_commit_mirror.db.repositories import (
    CommitRepository,
    RepositoryRepository,
    UserRepository,
)
from github_commit_mirror.logging import LogContext, bind_commit, bind_repo, get_logger

from .commit_store import CommitStore
from .existence_index import ExistenceIndex
from .history import CommitOrderReconciler, UnreachableCommitPruner
from .results import RepositorySyncResult, SyncRunResult
from .user_resolver import UserResolver

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from github_commit_mirror.config import Settings
    from github_commit_mirror.db.models import Repository
    from github_commit_mirror.github.client import GitHubClient
    from github_commit_mirror.schemas.commit import CommitCreate
    from github_commit_mirror.schemas.github_api import GitHubCommitSummary, GitHubUser

logger = get_logger(__name__)


class CommitSynchronizer:
    """Synchronizes local commit mirrors with GitHub.

    Usage:
        async with GitHubClient() as client:
            async with get_session() as session:
                synchronizer = CommitSynchronizer.from_session(client, session)
                result = await synchronizer.synchronize()

    The existence index is a per-run snapshot. Reusing an instance for a
    second run requires a fresh index (see from_session).
    """

    def __init__(
        self,
        client: GitHubClient,
        repo_repository: RepositoryRepository,
        existence_index: ExistenceIndex,
        user_resolver: UserResolver,
        commit_store: CommitStore,
        pruner: UnreachableCommitPruner,
        reconciler: CommitOrderReconciler,
        *,
        sync_config: SyncConfig | None = None,
        timezone: tzinfo | None = None,
    ) -> None:
        """Initialize the synchronizer.

        Args:
            client: GitHub API client
            repo_repository: Source of the ordered repository list
            existence_index: Snapshot of commits mirrored before this run
            user_resolver: Maps commit accounts to local users
            commit_store: Stages and flushes new commits
            pruner: Deletes commits no longer in the remote listing
            reconciler: Re-sorts commits to the remote order
            sync_config: Page size and flush interval (defaults if omitted)
            timezone: Zone for stored timestamps (None = process local zone)
        """
        self._client = client
        self._repo_repository = repo_repository
        self._existence_index = existence_index
        self._user_resolver = user_resolver
        self._commit_store = commit_store
        self._pruner = pruner
        self._reconciler = reconciler
        self._config = sync_config or SyncConfig()
        self._timezone = timezone

    @classmethod
    def from_session(
        cls,
        client: GitHubClient,
        session: AsyncSession,
        settings: Settings | None = None,
    ) -> CommitSynchronizer:
        """Build a synchronizer with all collaborators bound to one session."""
        settings = settings or get_settings()
        commits = CommitRepository(session)
        return cls(
            client=client,
            repo_repository=RepositoryRepository(session),
            existence_index=ExistenceIndex(commits),
            user_resolver=UserResolver(session, UserRepository(session)),
            commit_store=CommitStore(session, commits),
            pruner=UnreachableCommitPruner(session, commits),
            reconciler=CommitOrderReconciler(session, commits),
            sync_config=settings.sync,
            timezone=settings.local_timezone,
        )

    # -------------------------------------------------------------------------
    # Run Level
    # -------------------------------------------------------------------------

    async def synchronize(self) -> SyncRunResult:
        """Synchronize every active repository, in project/name order.

        Returns:
            SyncRunResult with one entry per repository

        Raises:
            GitHubClientError: On any remote failure (aborts the run)
            PersistenceError: On any database failure (aborts the run)
        """
        start_time = time.monotonic()
        result = SyncRunResult()

        repositories = await self._repo_repository.get_sorted_by_project_and_name()
        logger.info("Starting sync of {} repositories", len(repositories))

        for repository in repositories:
            # Client and store logs inside the pass carry the repository too
            with LogContext(repo=repository.full_name):
                result.repo_results.append(await self.synchronize_repository(repository))

        result.duration_seconds = time.monotonic() - start_time
        logger.info(
            "Sync complete: repos={}, observed={}, created={}, pruned={} ({:.1f}s)",
            len(result.repo_results),
            result.total_observed,
            result.total_created,
            result.total_pruned,
            result.duration_seconds,
        )
        return result

    # -------------------------------------------------------------------------
    # Repository Level
    # -------------------------------------------------------------------------

    async def synchronize_repository(self, repository: Repository) -> RepositorySyncResult:
        """Mirror one repository's commit history.

        Args:
            repository: Repository to synchronize

        Returns:
            RepositorySyncResult with counts for this pass
        """
        log = bind_repo(repository.full_name)
        result = RepositorySyncResult(repository=repository.full_name, started_at=datetime.now(UTC))
        log.info("Starting sync for {}", repository.full_name)

        seq = 0
        observed: list[str] = []

        async for page in self._client.iter_commit_pages(
            repository.owner, repository.name, per_page=self._config.page_size
        ):
            seq = await self._synchronize_page(repository, page, seq, observed, result)

        await self._commit_store.flush()
        result.flushes += 1

        result.pruned = await self._pruner.prune(repository, observed)
        # Recorded before reordering so the reconciler's commit persists it
        await self._repo_repository.update_last_synced(repository.id, datetime.now(UTC))
        result.reordered = await self._reconciler.reorder(repository, observed)

        result.observed = len(observed)
        result.completed_at = datetime.now(UTC)
        log.info(
            "Completed sync for {}: observed={}, created={}, skipped={}, pruned={}, reordered={}",
            repository.full_name,
            result.observed,
            result.created,
            result.skipped,
            result.pruned,
            result.reordered,
        )
        return result

    async def _synchronize_page(
        self,
        repository: Repository,
        page: list[GitHubCommitSummary],
        seq: int,
        observed: list[str],
        result: RepositorySyncResult,
    ) -> int:
        """Process one listing page; returns the updated sequence counter.

        The counter advances for every listed commit, known or new, so
        flushes happen every ``flush_interval`` listed commits.
        """
        for summary in page:
            observed.append(summary.sha)

            if await self._existence_index.exists(repository, summary.sha):
                result.skipped += 1
            else:
                await self.synchronize_commit(repository, summary.sha, seq)
                result.created += 1

            seq += 1
            if seq % self._config.flush_interval == 0:
                await self._commit_store.flush()
                result.flushes += 1

        return seq

    # -------------------------------------------------------------------------
    # Commit Level
    # -------------------------------------------------------------------------

    async def synchronize_commit(
        self,
        repository: Repository,
        sha: str,
        seq: int,
    ) -> CommitCreate:
        """Fetch a commit, resolve its accounts, and stage it with its files.

        Args:
            repository: Repository the commit belongs to
            sha: Commit SHA
            seq: Provisional sort (position in the listing so far)

        Returns:
            The staged CommitCreate aggregate

        Raises:
            GitHubNotFoundError: If the commit vanished upstream
            GitHubMalformedPayloadError: If the payload is incomplete
        """
        detail = await self._client.get_commit(repository.owner, repository.name, sha)

        data = detail.to_commit_create(
            repository.id,
            sort=seq,
            author_id=await self._resolve(detail.author),
            committer_id=await self._resolve(detail.committer),
            timezone=self._timezone,
        )
        self._commit_store.stage(data)

        bind_commit(repository.full_name, sha).debug(
            "Staged commit ({} files, sort {})", len(data.files), seq
        )
        return data

    async def _resolve(self, account: GitHubUser | None) -> int | None:
        if account is None:
            return None
        return await self._user_resolver.resolve(account)
