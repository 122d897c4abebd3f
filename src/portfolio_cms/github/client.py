# ABOUTME: GitHub REST API client for the public account and repository listings.
# ABOUTME: Wraps httpx and converts HTTP failures into GitHub exception types.

import logging
from typing import Any

import httpx

from portfolio_cms.github.exceptions import (
    GitHubError,
    GitHubNotFoundError,
    GitHubRateLimitError,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.github.com"
REPOS_PER_PAGE = 100
MAX_REPO_PAGES = 10


class GitHubClient:
    """Read-only client for public GitHub account data."""

    def __init__(
        self,
        token: str | None = None,
        base_url: str = DEFAULT_BASE_URL,
        http_client: httpx.Client | None = None,
        timeout: float = 10.0,
    ) -> None:
        """Create a GitHub client.

        Args:
            token: Optional personal access token for higher rate limits.
            base_url: API root, overridable for GitHub Enterprise.
            http_client: Preconfigured httpx client, mainly for tests.
            timeout: Request timeout in seconds.
        """
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": "portfolio-cms",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=timeout)
        self._client.headers.update(headers)
        self._base_url = base_url.rstrip("/")

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def get_user(self, username: str) -> dict[str, Any]:
        """Get a user's public profile.

        Raises:
            GitHubNotFoundError: If the user does not exist.
            GitHubRateLimitError: If the API rate limit is exhausted.
            GitHubError: For other failures.
        """
        data = self._get(f"/users/{username}")
        if not isinstance(data, dict):
            raise GitHubError(f"Unexpected response for user {username}")
        return data

    def list_repos(self, username: str) -> list[dict[str, Any]]:
        """List a user's public repositories, following pagination."""
        repos: list[dict[str, Any]] = []
        for page in range(1, MAX_REPO_PAGES + 1):
            batch = self._get(
                f"/users/{username}/repos",
                params={"per_page": REPOS_PER_PAGE, "page": page, "type": "owner"},
            )
            if not isinstance(batch, list):
                raise GitHubError(f"Unexpected response for repositories of {username}")
            repos.extend(batch)
            if len(batch) < REPOS_PER_PAGE:
                break
        return repos

    def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        url = f"{self._base_url}{path}"
        try:
            response = self._client.get(url, params=params)
        except httpx.HTTPError as e:
            raise GitHubError(f"Request to {path} failed: {e}") from e

        if response.status_code == 404:
            raise GitHubNotFoundError(f"Not found on GitHub: {path}")
        if response.status_code in (403, 429):
            reset = response.headers.get("X-RateLimit-Reset")
            detail = f" (resets at {reset})" if reset else ""
            raise GitHubRateLimitError(f"GitHub rate limit exceeded{detail}")
        if response.is_error:
            raise GitHubError(f"GitHub returned {response.status_code} for {path}")

        logger.debug("GET %s -> %d", path, response.status_code)
        try:
            return response.json()
        except ValueError as e:
            raise GitHubError(f"Invalid JSON from {path}") from e
