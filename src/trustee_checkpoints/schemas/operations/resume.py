"""
Resume operation schemas.

Models for the resumable-project view assembled by ResumeCoordinator.
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field

from trustee_checkpoints.base_model import StrictModel
from trustee_checkpoints.schemas.project import ProjectSummary
from trustee_checkpoints.schemas.session import SessionRecord

__all__ = ['ResumableProject', 'ResumeDiagnostic', 'ResumeListing']


class ResumableProject(StrictModel):
    """A project together with its sessions.

    sessions is None when the session store could not list them; the project
    is still resumable by hash.
    """

    project: ProjectSummary
    sessions: list[SessionRecord] | None

    @property
    def sessions_available(self) -> bool:
        return self.sessions is not None


class ResumeDiagnostic(StrictModel):
    """A non-fatal problem encountered while building a resume listing."""

    project_hash: str
    stage: Literal['listing', 'sessions']
    message: str


class ResumeListing(StrictModel):
    """Result of ResumeCoordinator.list_resumable()."""

    projects: list[ResumableProject] = Field(default_factory=list)
    diagnostics: list[ResumeDiagnostic] = Field(default_factory=list)
    skipped_count: int = 0
