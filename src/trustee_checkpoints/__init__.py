"""
Checkpoint storage and resume for project-oriented work sessions.

Projects are registered once by canonical path and addressed afterwards by
an immutable hash, so previously known projects can be listed and resumed
even after their directories have moved or been deleted.
"""

from __future__ import annotations

from trustee_checkpoints.exceptions import (
    AmbiguousProjectHashError,
    CheckpointStoreError,
    CorruptEntryError,
    InvalidSessionUpdateError,
    PathNotFoundError,
    PathPermissionError,
    ProjectNotFoundError,
    StorageIOError,
    StorageRootInaccessibleError,
)
from trustee_checkpoints.paths import canonicalize_path, hash_project_path
from trustee_checkpoints.services.resume import ResumeCoordinator
from trustee_checkpoints.services.storage_manager import CheckpointStorageManager, ProjectStorage
from trustee_checkpoints.storage.metadata import ProjectMetadataStore
from trustee_checkpoints.storage.root import StorageRoot

__all__ = [
    'AmbiguousProjectHashError',
    'CheckpointStorageManager',
    'CheckpointStoreError',
    'CorruptEntryError',
    'InvalidSessionUpdateError',
    'PathNotFoundError',
    'PathPermissionError',
    'ProjectMetadataStore',
    'ProjectNotFoundError',
    'ProjectStorage',
    'ResumeCoordinator',
    'StorageIOError',
    'StorageRoot',
    'StorageRootInaccessibleError',
    'canonicalize_path',
    'hash_project_path',
]
