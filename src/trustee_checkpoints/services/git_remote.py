"""
Git remote discovery for newly registered projects.

Only called at registration, against a path that was just canonicalized.
Any failure (no git, not a repository, no origin, timeout) yields None.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Callable

__all__ = ['GitRemoteResolver', 'detect_git_remote']

logger = logging.getLogger(__name__)

GitRemoteResolver = Callable[[str], str | None]


def detect_git_remote(project_path: str, timeout: float = 2.0) -> str | None:
    """
    Return the origin remote URL of the repository at project_path, if any.

    Args:
        project_path: Canonical project directory
        timeout: Seconds to wait for git

    Returns:
        Remote URL, or None if it cannot be determined
    """
    try:
        result = subprocess.run(
            ['git', '-C', project_path, 'config', '--get', 'remote.origin.url'],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        logger.debug('git remote detection failed for %s: %s', project_path, e)
        return None

    if result.returncode != 0:
        return None

    remote = result.stdout.strip()
    return remote or None
