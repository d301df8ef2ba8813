"""
Storage root handle.

A StorageRoot is constructed once (usually from settings) and passed
explicitly to every component that touches the store. There is no
module-level default instance, so tests can point at disposable
temporary directories.
"""

from __future__ import annotations

import re
from pathlib import Path

import attrs

from trustee_checkpoints.exceptions import ProjectNotFoundError
from trustee_checkpoints.types import PROJECT_HASH_PATTERN

__all__ = ['METADATA_FILENAME', 'SESSIONS_DIRNAME', 'StorageRoot', 'is_project_hash']

METADATA_FILENAME = 'metadata.json'
SESSIONS_DIRNAME = 'sessions'

_PROJECT_HASH_RE = re.compile(PROJECT_HASH_PATTERN)


def is_project_hash(value: str) -> bool:
    """True if value is a well-formed project hash (64 lowercase hex chars)."""
    return _PROJECT_HASH_RE.fullmatch(value) is not None


@attrs.define(frozen=True)
class StorageRoot:
    """
    Base directory holding one subdirectory per project hash.

    Layout:
        <path>/<project_hash>/metadata.json
        <path>/<project_hash>/sessions/<session_id>.json
    """

    path: Path = attrs.field(converter=Path)

    def project_dir(self, project_hash: str) -> Path:
        """
        Directory for a project.

        The hash is validated before it becomes a path component, so a
        caller-supplied value can never address anything outside the root.

        Raises:
            ProjectNotFoundError: If project_hash is not a well-formed hash
        """
        if not is_project_hash(project_hash):
            raise ProjectNotFoundError(project_hash, reason='not a valid project hash')
        return self.path / project_hash

    def metadata_file(self, project_hash: str) -> Path:
        return self.project_dir(project_hash) / METADATA_FILENAME

    def sessions_dir(self, project_hash: str) -> Path:
        return self.project_dir(project_hash) / SESSIONS_DIRNAME
