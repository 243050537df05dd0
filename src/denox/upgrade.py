# upgrade.py
"""
New-version notice.

Asks GitHub for the latest release of denox and prints a one-off notice
when it is newer than the running version. The check is advisory: it has
a short timeout and any failure is only reported in debug mode.
"""
from __future__ import annotations

import http.client
import json
import re
import urllib.error
import urllib.request
from typing import Optional, Tuple

from .ui.console import get_console

GITHUB_API = "https://api.github.com"
DEFAULT_TIMEOUT = 2.0

_VERSION_RE = re.compile(r"^v?(\d+(?:\.\d+)*)")


def parse_version(tag: str) -> Optional[Tuple[int, ...]]:
    """'v1.4.2' -> (1, 4, 2); None when the tag has no leading version number."""
    match = _VERSION_RE.match(tag.strip())
    if not match:
        return None
    return tuple(int(part) for part in match.group(1).split("."))


def is_newer(latest: str, current: str) -> bool:
    latest_v = parse_version(latest)
    current_v = parse_version(current)
    if latest_v is None or current_v is None:
        return False
    return latest_v > current_v


def fetch_latest_tag(repo: str, *, timeout: float = DEFAULT_TIMEOUT) -> str:
    """
    Return the tag name of the latest GitHub release of ``repo`` ("owner/name").

    Raises:
        urllib.error.URLError / http.client.HTTPException / OSError: network failure
        ValueError: the response is not the expected JSON
    """
    url = f"{GITHUB_API}/repos/{repo}/releases/latest"
    req = urllib.request.Request(url, headers={"Accept": "application/vnd.github+json"}, method="GET")
    with urllib.request.urlopen(req, timeout=timeout) as response:
        data = json.loads(response.read().decode("utf-8"))
    tag = data.get("tag_name") if isinstance(data, dict) else None
    if not isinstance(tag, str) or not tag:
        raise ValueError("release response has no tag_name")
    return tag


def upgrade_version_message(current: str, repo: str, *, timeout: float = DEFAULT_TIMEOUT) -> Optional[str]:
    """
    Print a notice if a newer release exists. Never raises.

    Returns:
        The newer tag when a notice was printed, otherwise None
    """
    console = get_console()
    try:
        latest = fetch_latest_tag(repo, timeout=timeout)
    except (urllib.error.URLError, http.client.HTTPException, OSError, ValueError) as e:
        console.print_debug(f"Upgrade check failed: {e}")
        return None

    if not is_newer(latest, current):
        console.print_debug(f"denox {current} is up to date (latest: {latest})")
        return None

    console.print_upgrade_available(current, latest, repo)
    return latest
