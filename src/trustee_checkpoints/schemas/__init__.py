"""
Schema definitions for trustee-checkpoints.

- project: persisted project metadata and its listing views
- session: session records addressed by project hash
- operations: result schemas for resume operations
"""

from __future__ import annotations

from trustee_checkpoints.schemas.project import ProjectListing, ProjectMetadata, ProjectSummary, SkippedEntry
from trustee_checkpoints.schemas.session import SessionRecord

__all__ = [
    'ProjectListing',
    'ProjectMetadata',
    'ProjectSummary',
    'SessionRecord',
    'SkippedEntry',
]
