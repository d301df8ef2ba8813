"""Service layer for checkpoint storage operations."""

from trustee_checkpoints.services.git_remote import GitRemoteResolver, detect_git_remote
from trustee_checkpoints.services.resume import ResumeCoordinator, ResumeTarget
from trustee_checkpoints.services.storage_manager import CheckpointStorageManager, ProjectStorage

__all__ = [
    'CheckpointStorageManager',
    'GitRemoteResolver',
    'ProjectStorage',
    'ResumeCoordinator',
    'ResumeTarget',
    'detect_git_remote',
]
