"""Result objects for sync operations.

Structured results provide consistent interfaces for monitoring
and CLI output.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass
class RepositorySyncResult:
    """Result of synchronizing a single repository."""

    repository: str
    """Full repository name (owner/repo)."""

    started_at: datetime
    """When sync started for this repository."""

    completed_at: datetime | None = None
    """When sync completed (None while in progress)."""

    observed: int = 0
    """Commits listed remotely in this pass."""

    created: int = 0
    """New commits mirrored."""

    skipped: int = 0
    """Listed commits that were already mirrored."""

    pruned: int = 0
    """Local commits deleted as unreachable."""

    reordered: int = 0
    """Commits whose sort changed."""

    flushes: int = 0
    """Batch flushes performed."""

    @property
    def duration_seconds(self) -> float:
        """Time taken to sync this repository."""
        if self.completed_at is None:
            return 0.0
        return (self.completed_at - self.started_at).total_seconds()

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "repository": self.repository,
            "observed": self.observed,
            "created": self.created,
            "skipped": self.skipped,
            "pruned": self.pruned,
            "reordered": self.reordered,
            "flushes": self.flushes,
            "started_at": self.started_at.isoformat(),
            "completed_at": self.completed_at.isoformat() if self.completed_at else None,
            "duration_seconds": round(self.duration_seconds, 2),
        }


@dataclass
class SyncRunResult:
    """Result of synchronizing every active repository.

    Aggregates results from all repository syncs.
    """

    repo_results: list[RepositorySyncResult] = field(default_factory=list)
    """Results for each repository, in sync order."""

    duration_seconds: float = 0.0
    """Total time taken for the run."""

    @property
    def total_observed(self) -> int:
        """Commits listed across all repositories."""
        return sum(r.observed for r in self.repo_results)

    @property
    def total_created(self) -> int:
        """New commits mirrored across all repositories."""
        return sum(r.created for r in self.repo_results)

    @property
    def total_pruned(self) -> int:
        """Commits pruned across all repositories."""
        return sum(r.pruned for r in self.repo_results)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "summary": {
                "total_repos": len(self.repo_results),
                "total_observed": self.total_observed,
                "total_created": self.total_created,
                "total_pruned": self.total_pruned,
                "duration_seconds": round(self.duration_seconds, 2),
            },
            "repositories": [r.to_dict() for r in self.repo_results],
        }
