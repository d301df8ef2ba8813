"""
Strict base for every record trustee-checkpoints writes to disk.

Project metadata and session files are parsed back through these models, so
the model is the on-disk schema: an unknown key, a wrong JSON type or a
missing field fails validation, and the stores report that record as a
CorruptEntryError instead of guessing at its contents.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

__all__ = ['StrictModel']


class StrictModel(BaseModel):
    """Frozen record model; updates go through model_copy or re-validation."""

    model_config = ConfigDict(
        extra='forbid',  # Keys written by a newer schema are corrupt, not ignored
        strict=True,
        frozen=True,  # Records are replaced on disk, never mutated in memory
    )
