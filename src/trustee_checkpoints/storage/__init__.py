"""Storage layer for project metadata and session records."""

from trustee_checkpoints.storage.metadata import ProjectMetadataStore, RawRecord
from trustee_checkpoints.storage.protocol import SessionStore
from trustee_checkpoints.storage.root import StorageRoot
from trustee_checkpoints.storage.sessions import LocalSessionStore

__all__ = ['LocalSessionStore', 'ProjectMetadataStore', 'RawRecord', 'SessionStore', 'StorageRoot']
