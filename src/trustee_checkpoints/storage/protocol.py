"""
Session store protocol.

The session store owns session content. This core depends on it only
through list_sessions(), so resume listings can join sessions to projects
by hash without knowing how they are stored.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from trustee_checkpoints.schemas.session import SessionRecord


@runtime_checkable
class SessionStore(Protocol):
    """Protocol for session stores addressed by project hash."""

    def list_sessions(self, project_hash: str) -> list[SessionRecord]:
        """
        List sessions recorded for a project.

        Args:
            project_hash: Full project hash

        Returns:
            Session records, most recent first (empty if none)

        Raises:
            Any exception on failure. Callers enumerating many projects
            treat failures as per-project diagnostics.
        """
        ...
