from __future__ import annotations

from typing import Dict, Optional

from treeforge.domain.constants import APP_VERSION

USER_AGENT = f"TreeForge-Client/{APP_VERSION}"
DEFAULT_TIMEOUT = 10


def build_headers(token: Optional[str] = None) -> Dict[str, str]:
    """Common request headers, with a bearer token when one is configured."""
    headers = {
        "User-Agent": USER_AGENT,
        "Accept": "application/vnd.github+json",
    }
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers
