# ABOUTME: Maps GitHub API responses to the cached GitHubStats columns.
# ABOUTME: Extracts the username from a profile URL and totals repository counters.

from collections import Counter
from typing import Any
from urllib.parse import urlparse

from portfolio_cms.github.exceptions import GitHubError


def parse_github_username(github_url: str) -> str:
    """Extract the account name from a GitHub profile URL.

    Accepts "https://github.com/octocat", "github.com/octocat/" or a bare
    "octocat".

    Raises:
        GitHubError: If no account name can be found.
    """
    value = github_url.strip()
    if "://" not in value and "/" in value:
        value = f"https://{value}"
    if "://" in value:
        parsed = urlparse(value)
        if parsed.netloc.lower() not in ("github.com", "www.github.com"):
            raise GitHubError(f"Not a GitHub URL: {github_url}")
        parts = [part for part in parsed.path.split("/") if part]
        value = parts[0] if parts else ""
    if not value:
        raise GitHubError(f"No GitHub username in {github_url!r}")
    return value


def map_github_stats(
    username: str,
    user: dict[str, Any],
    repos: list[dict[str, Any]],
) -> dict[str, Any]:
    """Total repository counters for a GitHubStats row.

    Args:
        username: Account name the row is keyed on.
        user: Response of GET /users/{username}.
        repos: Response pages of GET /users/{username}/repos.

    Returns:
        Column values: total_repos, total_stars, total_forks, languages.
        Contribution totals and streaks are not exposed by the REST API and
        are left unset.
    """
    languages = Counter(repo["language"] for repo in repos if repo.get("language"))
    return {
        "username": username,
        "total_repos": int(user.get("public_repos", len(repos))),
        "total_stars": sum(int(repo.get("stargazers_count", 0)) for repo in repos),
        "total_forks": sum(int(repo.get("forks_count", 0)) for repo in repos),
        "languages": dict(languages.most_common()),
    }
