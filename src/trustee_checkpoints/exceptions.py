"""
Shared exceptions for trustee-checkpoints.

Exception Hierarchy:
    CheckpointStoreError (base)
    ├── PathResolutionError (live path failures, creation only)
    │   ├── PathNotFoundError
    │   └── PathPermissionError
    ├── ProjectLookupError (lookup by hash)
    │   ├── ProjectNotFoundError
    │   ├── CorruptEntryError
    │   └── AmbiguousProjectHashError (prefix matches multiple projects)
    ├── StorageIOError (read/write fault on a single file)
    ├── InvalidSessionUpdateError (rejected session field values)
    └── StorageRootInaccessibleError (the whole store cannot be opened)
"""

from __future__ import annotations

from pathlib import Path


class CheckpointStoreError(Exception):
    """Base exception for all trustee-checkpoints errors."""


class PathResolutionError(CheckpointStoreError):
    """Base exception for failures resolving a live filesystem path."""

    def __init__(self, path: str | Path, message: str) -> None:
        self.path = str(path)
        super().__init__(message)


class PathNotFoundError(PathResolutionError):
    """Raised when a project path does not exist (or cannot be resolved)."""

    def __init__(self, path: str | Path, reason: str | None = None) -> None:
        message = f'Project path does not exist: {path}'
        if reason:
            message += f' ({reason})'
        super().__init__(path, message)


class PathPermissionError(PathResolutionError):
    """Raised when a project path exists but cannot be accessed."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(path, f'Permission denied resolving project path: {path}')


class ProjectLookupError(CheckpointStoreError):
    """Base exception for lookups by project hash."""


class ProjectNotFoundError(ProjectLookupError):
    """Raised when no metadata record exists for a project hash."""

    def __init__(self, project_hash: str, reason: str | None = None) -> None:
        self.project_hash = project_hash
        message = f'No project registered for hash: {project_hash}'
        if reason:
            message += f' ({reason})'
        super().__init__(message)


class CorruptEntryError(ProjectLookupError):
    """Raised when a record exists on disk but fails to parse or validate."""

    def __init__(self, project_hash: str, detail: str) -> None:
        self.project_hash = project_hash
        self.detail = detail
        super().__init__(f'Corrupt entry for project {project_hash}: {detail}')


class AmbiguousProjectHashError(ProjectLookupError):
    """Raised when a project hash prefix matches multiple projects."""

    def __init__(self, prefix: str, matches: list[str]) -> None:
        self.prefix = prefix
        self.matches = matches
        matches_str = '\n  '.join(matches[:10])
        if len(matches) > 10:
            matches_str += f'\n  ... and {len(matches) - 10} more'
        super().__init__(
            f"Project hash prefix '{prefix}' is ambiguous. Matches {len(matches)} projects:\n  {matches_str}\n\n"
            f'Please provide a longer prefix.'
        )


class StorageIOError(CheckpointStoreError):
    """Raised when reading or writing a single file under the storage root fails."""

    def __init__(self, path: Path, cause: OSError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f'I/O failure on {path}: {cause}')


class InvalidSessionUpdateError(CheckpointStoreError):
    """Raised when a session update carries an invalid value."""

    def __init__(self, session_id: str, detail: str) -> None:
        self.session_id = session_id
        self.detail = detail
        super().__init__(f'Invalid update for session {session_id}: {detail}')


class StorageRootInaccessibleError(CheckpointStoreError):
    """Raised when the storage root itself cannot be opened."""

    def __init__(self, root: Path, cause: OSError | None = None) -> None:
        self.root = root
        self.cause = cause
        message = f'Storage root is not accessible: {root}'
        if cause is not None:
            message += f' ({cause})'
        super().__init__(message)
