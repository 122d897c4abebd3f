# ABOUTME: Custom exceptions for GitHub API operations.
# ABOUTME: Provides specific error types for missing accounts, rate limits, and general errors.

from portfolio_cms.errors import PortfolioCMSError


class GitHubError(PortfolioCMSError):
    """Base exception for all GitHub API errors."""

    pass


class GitHubNotFoundError(GitHubError):
    """Exception raised when the requested GitHub account does not exist."""

    pass


class GitHubRateLimitError(GitHubError):
    """Exception raised when GitHub's rate limiting is triggered."""

    pass
