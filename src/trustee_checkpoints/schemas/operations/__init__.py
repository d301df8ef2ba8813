"""Operation result schemas."""

from __future__ import annotations

from trustee_checkpoints.schemas.operations.resume import ResumableProject, ResumeDiagnostic, ResumeListing

__all__ = ['ResumableProject', 'ResumeDiagnostic', 'ResumeListing']
