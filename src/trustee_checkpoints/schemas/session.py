"""
Session record schema.

Sessions belong to the session store; this core only needs to address them
by project hash so that resume listings can join them with projects.
"""

from __future__ import annotations

from trustee_checkpoints.base_model import StrictModel
from trustee_checkpoints.types import JsonDatetime, NonNegativeInt, ProjectHash

__all__ = ['SessionRecord']


class SessionRecord(StrictModel):
    """One work session recorded for a project."""

    session_id: str
    project_hash: ProjectHash
    started_at: JsonDatetime
    ended_at: JsonDatetime | None = None
    size: NonNegativeInt = 0
