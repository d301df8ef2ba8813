"""
Project metadata schemas.

ProjectMetadata is the on-disk record (metadata.json). ProjectSummary is the
listing view returned to callers. They are separate models so the storage
format and the API contract can evolve independently.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from trustee_checkpoints.base_model import StrictModel
from trustee_checkpoints.types import JsonDatetime, NonNegativeInt, ProjectHash

__all__ = [
    'ProjectListing',
    'ProjectMetadata',
    'ProjectSummary',
    'SkipReason',
    'SkippedEntry',
]


class ProjectMetadata(StrictModel):
    """Persisted metadata for one registered project.

    Field ordering:
    - Identity (immutable after creation)
    - Temporal
    - Usage (advisory, last-writer-wins)
    """

    # Identity
    project_hash: ProjectHash
    project_path: str  # Last known path, advisory only - never re-resolved for lookup
    name: str

    # Temporal
    created_at: JsonDatetime
    last_accessed: JsonDatetime

    # Usage
    session_count: NonNegativeInt
    size_bytes: NonNegativeInt
    git_remote: str | None


class ProjectSummary(StrictModel):
    """API view of a registered project, built from a valid metadata record."""

    project_hash: ProjectHash
    project_path: str
    name: str
    created_at: JsonDatetime
    last_accessed: JsonDatetime
    session_count: NonNegativeInt
    size_bytes: NonNegativeInt
    git_remote: str | None

    @classmethod
    def from_metadata(cls, metadata: ProjectMetadata) -> ProjectSummary:
        return cls(**dict(metadata))


SkipReason = Literal['corrupt', 'missing_metadata', 'unreadable', 'invalid_name']


class SkippedEntry(StrictModel):
    """An entry under the storage root that could not be listed."""

    project_hash: str  # Directory name (may not be a valid hash)
    reason: SkipReason
    detail: str


class ProjectListing(StrictModel):
    """Every valid project under a storage root, plus what was skipped.

    Projects are ordered by last_accessed, most recent first.
    """

    projects: list[ProjectSummary] = Field(default_factory=list)
    skipped: list[SkippedEntry] = Field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped)
