from __future__ import annotations

"""
GitHub Repository Lister.

Lists the paths of a repository through the GitHub REST API. The whole tree
is fetched in a single git-trees request (`recursive=1`) and returned as a
flat list of {"path", "type"} entries ready for build_tree_from_entries.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

import requests

from treeforge.domain.errors import RemoteRepositoryError
from treeforge.infra.network.common import DEFAULT_TIMEOUT, build_headers

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
RATE_LIMIT_DOCS_URL = "https://docs.github.com/rest/overview/resources-in-the-rest-api#rate-limiting"

_REPO_URL_RE = re.compile(r"github\.com[/:]([^/\s]+)/([^/\s#?]+)")

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def parse_repository_url(url: str) -> Tuple[str, str]:
    """
    Extract owner and repository name from a GitHub URL.

    Accepts https, scheme-less and SSH forms, with or without a `.git` suffix.

    Args:
        url: Repository URL, e.g. https://github.com/owner/repo.

    Returns:
        Tuple[str, str]: (owner, repo).

    Raises:
        ValueError: If the URL does not point at a GitHub repository.
    """
    match = _REPO_URL_RE.search(url or "")
    if not match:
        raise ValueError(f"Invalid GitHub URL format: '{url}'")

    owner, repo = match.group(1), match.group(2)
    if repo.endswith(".git"):
        repo = repo[:-4]
    if not repo:
        raise ValueError(f"Invalid GitHub URL format: '{url}'")
    return owner, repo


def list_branches(owner: str, repo: str, token: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    List repository branches, flagging the default one.

    Args:
        owner: Repository owner.
        repo: Repository name.
        token: Optional API token.

    Returns:
        List[Dict[str, Any]]: Items shaped like {"name": str, "is_default": bool}.

    Raises:
        RemoteRepositoryError: On HTTP or transport failure.
    """
    default_branch = get_default_branch(owner, repo, token)
    data = _get_json(f"{GITHUB_API_URL}/repos/{owner}/{repo}/branches", token, params={"per_page": 100})
    return [
        {"name": item.get("name", ""), "is_default": item.get("name") == default_branch}
        for item in data
        if isinstance(item, dict)
    ]


def get_default_branch(owner: str, repo: str, token: Optional[str] = None) -> str:
    """Name of the repository's default branch."""
    data = _get_json(f"{GITHUB_API_URL}/repos/{owner}/{repo}", token)
    return str(data.get("default_branch") or "main")


def fetch_repository_entries(
        owner: str,
        repo: str,
        ref: str,
        path: str = "",
        token: Optional[str] = None,
) -> List[Dict[str, Any]]:
    """
    Fetch every path of a repository at a given branch, tag or commit.

    When `path` is given, only entries below it are kept and their paths are
    made relative to it.

    Args:
        owner: Repository owner.
        repo: Repository name.
        ref: Branch name, tag or commit SHA.
        path: Optional sub-directory to re-root the listing at.
        token: Optional API token.

    Returns:
        List[Dict[str, Any]]: Items shaped like {"path", "type", "size"} with
                              type "file" for blobs and "dir" otherwise.

    Raises:
        RemoteRepositoryError: On HTTP or transport failure.
    """
    url = f"{GITHUB_API_URL}/repos/{owner}/{repo}/git/trees/{ref}"
    logger.info(f"Fetching repository tree {owner}/{repo}@{ref}")
    data = _get_json(url, token, params={"recursive": "1"})

    if data.get("truncated"):
        logger.warning("Repository tree is too large and was truncated by the GitHub API.")

    items = [item for item in data.get("tree", []) if isinstance(item, dict)]

    prefix = path.strip("/")
    if prefix:
        items = [
            dict(item, path=item["path"][len(prefix) + 1:])
            for item in items
            if str(item.get("path", "")).startswith(prefix + "/")
        ]

    entries = [
        {
            "path": item["path"],
            "type": "file" if item.get("type") == "blob" else "dir",
            "size": item.get("size", 0),
        }
        for item in items
        if item.get("path")
    ]
    logger.debug(f"Repository listing returned {len(entries)} entries.")
    return entries

# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _get_json(url: str, token: Optional[str], params: Optional[Dict[str, str]] = None) -> Any:
    """GET a GitHub API resource and translate failures into RemoteRepositoryError."""
    try:
        response = requests.get(url, headers=build_headers(token), params=params, timeout=DEFAULT_TIMEOUT)
    except requests.exceptions.Timeout as e:
        raise RemoteRepositoryError(f"GitHub API timed out after {DEFAULT_TIMEOUT}s") from e
    except requests.exceptions.RequestException as e:
        raise RemoteRepositoryError(f"GitHub API communication failure: {e}") from e

    if response.status_code == 403 and _is_rate_limited(response):
        raise RemoteRepositoryError(
            "GitHub API rate limit exceeded. Set a token through the GITHUB_TOKEN "
            f"environment variable or the 'github_token' setting. See {RATE_LIMIT_DOCS_URL}"
        )
    if response.status_code == 404:
        raise RemoteRepositoryError("Repository or branch not found. Please check the URL and branch name.")

    try:
        response.raise_for_status()
        return response.json()
    except requests.exceptions.HTTPError as e:
        raise RemoteRepositoryError(f"Failed to fetch repository contents: {e}") from e
    except ValueError as e:
        raise RemoteRepositoryError(f"Malformed response from GitHub API: {e}") from e


def _is_rate_limited(response: requests.Response) -> bool:
    if response.headers.get("X-RateLimit-Remaining") == "0":
        return True
    try:
        message = str(response.json().get("message", ""))
    except ValueError:
        return False
    return "rate limit" in message.lower()
