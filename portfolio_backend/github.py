"""
Turn a GitHub user's public repositories into project drafts.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

import requests

from portfolio_backend.config import get_settings

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30  # seconds
REPOS_PER_PAGE = 20
FEATURED_STAR_THRESHOLD = 5
DEFAULT_TECHNOLOGY = "JavaScript"


class GitHubError(Exception):
    """Raised when the GitHub API cannot be reached or answers with an error."""


def fetch_github_repos(username: str, api_url: Optional[str] = None) -> list[dict]:
    """
    Fetch a user's public repositories, most recently updated first.

    Raises:
        GitHubError: on network failures, non-2xx answers or a non-list body.
    """
    base = (api_url or get_settings().github_api_url).rstrip("/")
    url = f"{base}/users/{username}/repos"
    try:
        response = requests.get(
            url,
            params={"sort": "updated", "per_page": REPOS_PER_PAGE},
            headers={"Accept": "application/vnd.github+json"},
            timeout=REQUEST_TIMEOUT,
        )
        response.raise_for_status()
        repos = response.json()
    except (requests.RequestException, ValueError) as exc:
        logger.warning("GitHub repository fetch failed for %s: %s", username, exc)
        raise GitHubError("Failed to fetch repositories") from exc
    if not isinstance(repos, list):
        raise GitHubError("Unexpected response from GitHub")
    return repos


def _display_name(repo_name: str) -> str:
    spaced = repo_name.replace("-", " ")
    return re.sub(r"\b\w", lambda m: m.group(0).upper(), spaced)


def repo_to_project_draft(repo: dict, developer_ids: list[str]) -> dict:
    topics = repo.get("topics") or []
    technologies = list(topics) if topics else [repo.get("language") or DEFAULT_TECHNOLOGY]
    return {
        "title": _display_name(repo.get("name", "")),
        "description": repo.get("description") or "No description available",
        "technologies": technologies,
        "github_link": repo.get("html_url"),
        "live_demo_link": repo.get("homepage") or None,
        "featured": (repo.get("stargazers_count") or 0) > FEATURED_STAR_THRESHOLD,
        "developer_ids": list(developer_ids),
    }
