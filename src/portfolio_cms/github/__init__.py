# ABOUTME: GitHub package refreshing the cached repository statistics.
# ABOUTME: Exports the API client, the stats sync and GitHub exceptions.

from portfolio_cms.github.client import GitHubClient
from portfolio_cms.github.exceptions import (
    GitHubError,
    GitHubNotFoundError,
    GitHubRateLimitError,
)
from portfolio_cms.github.mapper import map_github_stats, parse_github_username
from portfolio_cms.github.sync import GitHubStatsSync

__all__ = [
    "GitHubClient",
    "GitHubError",
    "GitHubNotFoundError",
    "GitHubRateLimitError",
    "GitHubStatsSync",
    "map_github_stats",
    "parse_github_username",
]
