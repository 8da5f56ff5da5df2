from __future__ import annotations

"""
Network Communication Infrastructure.

Facade over the remote repository lister.
"""

from treeforge.infra.network.github_client import (
    fetch_repository_entries,
    get_default_branch,
    list_branches,
    parse_repository_url,
)

__all__ = [
    "parse_repository_url",
    "list_branches",
    "get_default_branch",
    "fetch_repository_entries",
]
