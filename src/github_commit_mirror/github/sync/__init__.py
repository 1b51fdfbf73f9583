"""Commit Sync module - GitHub to database synchronization.

This module provides the services that mirror commit history from the
GitHub API into the local database.

Services:
- CommitSynchronizer: Per-repository and full-run orchestration
- ExistenceIndex: Per-run snapshot of already-mirrored commits
- UserResolver: GitHub account to local user mapping
- CommitStore: Staged commits with explicit flush boundaries
- UnreachableCommitPruner / CommitOrderReconciler: History reconciliation
"""

from .commit_store import CommitStore
from .commit_synchronizer import CommitSynchronizer
from .enums import OutputFormat
from .existence_index import ExistenceIndex
from .history import CommitOrderReconciler, UnreachableCommitPruner, observed_positions
from .results import RepositorySyncResult, SyncRunResult
from .user_resolver import UserResolver

__all__ = [
    # Orchestration
    "CommitSynchronizer",
    "RepositorySyncResult",
    "SyncRunResult",
    # Collaborators
    "CommitStore",
    "ExistenceIndex",
    "UserResolver",
    # History reconciliation
    "CommitOrderReconciler",
    "UnreachableCommitPruner",
    "observed_positions",
    # CLI
    "OutputFormat",
]
