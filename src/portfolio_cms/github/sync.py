# ABOUTME: Refreshes the cached GitHub statistics row from the GitHub API.
# ABOUTME: Upserts by username so repeated refreshes replace the previous numbers.

import logging

from sqlalchemy.exc import SQLAlchemyError

from portfolio_cms.database import DatabaseService
from portfolio_cms.github.client import GitHubClient
from portfolio_cms.github.exceptions import GitHubError
from portfolio_cms.github.mapper import map_github_stats, parse_github_username
from portfolio_cms.models import GitHubStats
from portfolio_cms.models.base import utc_now

logger = logging.getLogger(__name__)


class GitHubStatsSync:
    """Fetches account statistics and writes them to the github_stats table."""

    def __init__(self, db_service: DatabaseService, client: GitHubClient) -> None:
        self._db_service = db_service
        self._client = client

    def refresh(self, github_url: str) -> GitHubStats:
        """Fetch statistics for the account behind a profile URL and store them.

        Raises:
            GitHubError: If the URL has no username, the API call fails or the row
                cannot be saved.
        """
        username = parse_github_username(github_url)
        user = self._client.get_user(username)
        repos = self._client.list_repos(username)
        values = map_github_stats(username, user, repos)
        values["last_updated"] = utc_now()
        del values["username"]

        try:
            row = self._db_service.upsert_row(GitHubStats, {"username": username}, values)
        except SQLAlchemyError as e:
            logger.error("Failed to save GitHub stats for %s: %s", username, e)
            raise GitHubError(f"Could not save GitHub stats for {username}: {e}") from e
        logger.info(
            "Refreshed GitHub stats for %s: %d repos, %d stars",
            username,
            row.total_repos,
            row.total_stars,
        )
        return row
