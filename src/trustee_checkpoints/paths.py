"""
Path canonicalization and project hashing.

A project's identity is derived exactly once, when it is first registered:

    canonicalize_path('/tmp/proj/')  -> '/tmp/proj'
    hash_project_path('/tmp/proj')   -> '5c0b...'  (64 hex chars)

After registration the hash is an opaque key. Nothing that looks a project
up by hash may call back into this module.
"""

from __future__ import annotations

import hashlib
import os
from pathlib import Path

from trustee_checkpoints.exceptions import PathNotFoundError, PathPermissionError

__all__ = ['canonicalize_path', 'hash_project_path', 'lexical_absolute_path']


def canonicalize_path(path: Path | str) -> str:
    """
    Resolve a user-supplied path to its canonical absolute form.

    Expands `~`, makes relative paths absolute against the current
    directory, drops trailing separators and resolves every symbolic link.
    Read-only; no caching.

    Args:
        path: Path as typed by the user

    Returns:
        Canonical absolute path string

    Raises:
        PathNotFoundError: If the target does not exist or cannot be resolved
        PathPermissionError: If the target or one of its parents is inaccessible
    """
    candidate = Path(path).expanduser()
    try:
        resolved = candidate.resolve(strict=True)
    except PermissionError:
        raise PathPermissionError(path)
    except (FileNotFoundError, NotADirectoryError):
        raise PathNotFoundError(path)
    except (RuntimeError, OSError) as e:
        # Symlink loops (RuntimeError before 3.13, OSError ELOOP after)
        raise PathNotFoundError(path, reason=str(e))

    if not os.access(resolved, os.R_OK):
        raise PathPermissionError(path)

    return str(resolved)


def hash_project_path(canonical_path: str) -> str:
    """
    Derive the project hash from a canonical path.

    Deterministic sha256 over the path's filesystem byte representation,
    rendered as lowercase hex. There is no fallback: callers must
    canonicalize first and handle failures themselves.

    Args:
        canonical_path: Output of canonicalize_path()

    Returns:
        64-character hex digest
    """
    return hashlib.sha256(os.fsencode(canonical_path)).hexdigest()


def lexical_absolute_path(path: Path | str) -> str:
    """
    Absolute, normalized form of a path without touching the filesystem.

    Used only to find a historical registration when the live path no
    longer resolves. Symlinks are not followed.
    """
    return os.path.normpath(os.path.abspath(os.path.expanduser(str(path))))
