"""Async GitHub API client wrapper using githubkit.

This module provides a typed async interface to the GitHub REST API
for commit listing and commit detail retrieval.
"""

from __future__ import annotations

import re
from collections.abc import AsyncIterator
from datetime import UTC, datetime
from typing import Any

from githubkit import GitHub
from githubkit.exception import RequestError, RequestFailed, RequestTimeout
from pydantic import ValidationError

from github_commit_mirror.config import get_settings
from github_commit_mirror.logging import get_logger
from github_commit_mirror.schemas.github_api import GitHubCommitDetail, GitHubCommitSummary

from .exceptions import (
    GitHubAuthenticationError,
    GitHubClientError,
    GitHubMalformedPayloadError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubTransportError,
)

logger = get_logger(__name__)

# rel="next" entry of a Link header
_NEXT_LINK = re.compile(r"<[^>]+>;\s*rel=\"next\"")


def _links_next_page(link_header: str | None) -> bool:
    """Whether a Link response header points to a next page."""
    return link_header is not None and _NEXT_LINK.search(link_header) is not None


class GitHubClient:
    """Async GitHub API client for commit data retrieval.

    Usage:
        async with GitHubClient() as client:
            async for page in client.iter_commit_pages("octo-org", "octo-repo"):
                for summary in page:
                    detail = await client.get_commit("octo-org", "octo-repo", summary.sha)

    Or without context manager:
        client = GitHubClient()
        detail = await client.get_commit("octo-org", "octo-repo", "6dcb09b")
        await client.close()
    """

    def __init__(self, token: str | None = None) -> None:
        """Initialize the GitHub client.

        Args:
            token: GitHub PAT. If not provided, uses GITHUB_TOKEN from settings.

        Raises:
            GitHubAuthenticationError: If no token is available.
        """
        self._token = token or get_settings().github_token
        if not self._token:
            raise GitHubAuthenticationError(
                "GitHub token required. Set GITHUB_TOKEN environment variable."
            )
        self._client: GitHub[Any] | None = None

    @property
    def _github(self) -> GitHub[Any]:
        """Get or create the githubkit client instance."""
        if self._client is None:
            self._client = GitHub(self._token)
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            self._client = None

    async def __aenter__(self) -> GitHubClient:
        """Async context manager entry."""
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: object,
    ) -> None:
        """Async context manager exit."""
        await self.close()

    # -------------------------------------------------------------------------
    # Rate Limit Info
    # -------------------------------------------------------------------------
    async def get_rate_limit(self) -> dict[str, int | datetime]:
        """Get current rate limit status.

        Returns:
            Dict with 'limit', 'remaining', 'reset' (datetime), 'used' keys.
        """
        try:
            resp = await self._github.rest.rate_limit.async_get()
        except RequestFailed as e:
            raise self._handle_error(e) from e
        except (RequestError, RequestTimeout) as e:
            raise GitHubTransportError(f"GitHub API unreachable: {e}") from e

        core = resp.parsed_data.resources.core
        return {
            "limit": core.limit,
            "remaining": core.remaining,
            "used": core.used,
            "reset": datetime.fromtimestamp(core.reset, tz=UTC),
        }

    # -------------------------------------------------------------------------
    # Commit Methods
    # -------------------------------------------------------------------------
    async def iter_commit_pages(
        self,
        owner: str,
        repo: str,
        *,
        per_page: int = 100,
    ) -> AsyncIterator[list[GitHubCommitSummary]]:
        """Iterate over a repository's commit listing one page at a time.

        githubkit's paginator follows the listing lazily, in the order
        GitHub returns it (newest first on the default branch); entries are
        regrouped into lists of ``per_page``. An empty repository (409)
        yields no pages.

        Args:
            owner: Repository owner (org or user)
            repo: Repository name
            per_page: Results per page (max 100)

        Yields:
            Lists of GitHubCommitSummary objects, one list per page

        Raises:
            GitHubNotFoundError: If the repository doesn't exist
            GitHubMalformedPayloadError: If a listing entry lacks a SHA
        """
        page: list[GitHubCommitSummary] = []
        pages = 0
        try:
            commit_data: Any
            async for commit_data in self._github.paginate(
                self._github.rest.repos.async_list_commits,
                owner=owner,
                repo=repo,
                per_page=per_page,
            ):
                try:
                    page.append(GitHubCommitSummary.model_validate(commit_data.model_dump()))
                except ValidationError as e:
                    raise GitHubMalformedPayloadError(
                        f"Malformed commit listing for {owner}/{repo} "
                        f"(page {pages + 1}): {e}"
                    ) from e

                if len(page) == per_page:
                    pages += 1
                    logger.debug("Fetched commit page {} for {}/{}", pages, owner, repo)
                    yield page
                    page = []
        except RequestFailed as e:
            if e.response.status_code == 409:
                # "Git Repository is empty."
                return
            if e.response.status_code == 404:
                raise GitHubNotFoundError(f"Repository {owner}/{repo} not found") from e
            raise self._handle_error(e) from e
        except (RequestError, RequestTimeout) as e:
            raise GitHubTransportError(f"GitHub API unreachable: {e}") from e

        if page:
            logger.debug(
                "Fetched commit page {} for {}/{} ({} commits)", pages + 1, owner, repo, len(page)
            )
            yield page

    async def get_commit(
        self,
        owner: str,
        repo: str,
        sha: str,
    ) -> GitHubCommitDetail:
        """Get full details for a single commit.

        Includes stats and the complete file list. GitHub pages the file
        list of very large commits; further pages are followed for as long
        as the response links a next page.

        Args:
            owner: Repository owner
            repo: Repository name
            sha: Commit SHA

        Returns:
            GitHubCommitDetail with full details

        Raises:
            GitHubNotFoundError: If the commit doesn't exist
            GitHubMalformedPayloadError: If the payload lacks required fields
        """
        payload, has_next = await self._fetch_commit(owner, repo, sha, page=1)

        page = 1
        while has_next:
            page += 1
            next_payload, has_next = await self._fetch_commit(owner, repo, sha, page=page)
            payload["files"] = [*(payload.get("files") or []), *(next_payload.get("files") or [])]

        try:
            return GitHubCommitDetail.model_validate(payload)
        except ValidationError as e:
            raise GitHubMalformedPayloadError(
                f"Malformed commit {sha} in {owner}/{repo}: {e}"
            ) from e

    async def _fetch_commit(
        self,
        owner: str,
        repo: str,
        sha: str,
        *,
        page: int,
    ) -> tuple[dict[str, Any], bool]:
        """Fetch one page of a single-commit response.

        Returns:
            Tuple of (raw payload, whether a next file page is linked)
        """
        try:
            resp = await self._github.rest.repos.async_get_commit(
                owner=owner,
                repo=repo,
                ref=sha,
                page=page,
            )
        except RequestFailed as e:
            if e.response.status_code in (404, 422):
                raise GitHubNotFoundError(f"Commit {sha} not found in {owner}/{repo}") from e
            raise self._handle_error(e) from e
        except (RequestError, RequestTimeout) as e:
            raise GitHubTransportError(f"GitHub API unreachable: {e}") from e

        data: dict[str, Any] = resp.parsed_data.model_dump()
        return data, _links_next_page(resp.headers.get("link"))

    # -------------------------------------------------------------------------
    # Error Handling
    # -------------------------------------------------------------------------
    def _handle_error(self, error: RequestFailed) -> GitHubClientError:
        """Convert githubkit exceptions to our custom exceptions."""
        status = error.response.status_code

        if status == 401:
            return GitHubAuthenticationError("Invalid GitHub token")
        elif status in (403, 429):
            headers = error.response.headers
            if status == 429 or headers.get("x-ratelimit-remaining") == "0":
                reset_ts = int(headers.get("x-ratelimit-reset", "0"))
                reset_at = datetime.fromtimestamp(reset_ts, tz=UTC) if reset_ts else None
                return GitHubRateLimitError(
                    "GitHub rate limit exceeded",
                    reset_at=reset_at,
                )
            return GitHubClientError(f"Access forbidden: {error}")
        elif status == 404:
            return GitHubNotFoundError(str(error))
        else:
            return GitHubClientError(f"GitHub API error ({status}): {error}")
