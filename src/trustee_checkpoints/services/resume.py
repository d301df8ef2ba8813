"""
Resume coordinator - the resumable view over every known project.

Builds on CheckpointStorageManager.list_projects() and joins each project
with its sessions from the session store. Failures are contained at the
per-project boundary:

- a corrupt or unreadable metadata entry is skipped and reported
- a session-store failure keeps the project, with sessions marked unavailable

The only fatal condition is StorageRootInaccessibleError. Nothing here
resolves a project's recorded path; resuming goes through
get_project_storage_by_hash().
"""

from __future__ import annotations

import asyncio
import logging

import attrs

from trustee_checkpoints.schemas.operations.resume import ResumableProject, ResumeDiagnostic, ResumeListing
from trustee_checkpoints.schemas.session import SessionRecord
from trustee_checkpoints.services.storage_manager import CheckpointStorageManager, ProjectStorage
from trustee_checkpoints.storage.protocol import SessionStore

__all__ = ['ResumeCoordinator', 'ResumeTarget']

logger = logging.getLogger(__name__)


@attrs.define(frozen=True)
class ResumeTarget:
    """A project selected for resume, with its sessions (None if unavailable)."""

    storage: ProjectStorage
    sessions: list[SessionRecord] | None


class ResumeCoordinator:
    """Enumerate and select resumable projects, tolerating per-entry failures."""

    def __init__(self, manager: CheckpointStorageManager, session_store: SessionStore) -> None:
        self.manager = manager
        self.session_store = session_store

    def list_resumable(self) -> ResumeListing:
        """
        Every valid project with its sessions, most recently accessed first.

        Returns:
            ResumeListing with projects, per-entry diagnostics and the number
            of skipped metadata entries

        Raises:
            StorageRootInaccessibleError: The storage root cannot be opened
        """
        listing = self.manager.list_projects()

        diagnostics = [
            ResumeDiagnostic(
                project_hash=skipped.project_hash,
                stage='listing',
                message=f'{skipped.reason}: {skipped.detail}',
            )
            for skipped in listing.skipped
        ]

        projects: list[ResumableProject] = []
        for summary in listing.projects:
            sessions, error = self._list_sessions(summary.project_hash)
            if error is not None:
                diagnostics.append(ResumeDiagnostic(project_hash=summary.project_hash, stage='sessions', message=error))
            projects.append(ResumableProject(project=summary, sessions=sessions))

        logger.info(
            'Resumable projects: %d listed, %d skipped, %d diagnostic(s)',
            len(projects),
            listing.skipped_count,
            len(diagnostics),
        )
        return ResumeListing(projects=projects, diagnostics=diagnostics, skipped_count=listing.skipped_count)

    async def list_resumable_async(self) -> ResumeListing:
        """Run list_resumable() in a worker thread. Same ordering and guarantees."""
        return await asyncio.to_thread(self.list_resumable)

    def select(self, hash_or_prefix: str) -> ResumeTarget:
        """
        Select a project to resume by hash or unambiguous hash prefix.

        Looks the project up by hash only and records the access (best-effort).
        The returned metadata is the record as it was before this access.

        Raises:
            ProjectNotFoundError: No project matches
            AmbiguousProjectHashError: Prefix matches several projects
            CorruptEntryError: The project's record is unparseable
        """
        project_hash = self.manager.resolve_hash(hash_or_prefix)
        storage = self.manager.get_project_storage_by_hash(project_hash)
        self.manager.touch(project_hash)

        sessions, error = self._list_sessions(project_hash)
        if error is not None:
            logger.warning('Resuming project %s without session list: %s', project_hash, error)
        logger.info('Selected project %s for resume', project_hash)
        return ResumeTarget(storage=storage, sessions=sessions)

    def _list_sessions(self, project_hash: str) -> tuple[list[SessionRecord] | None, str | None]:
        """Sessions for one project, or (None, message) if the store fails."""
        try:
            return list(self.session_store.list_sessions(project_hash)), None
        except Exception as e:
            # Per-project boundary: a session-store failure must not abort the listing
            logger.warning('Could not list sessions for project %s: %s', project_hash, e)
            return None, f'{type(e).__name__}: {e}'
