"""
Local filesystem session store.

Implements SessionStore over <root>/<project_hash>/sessions/<session_id>.json.
Session ids are UUIDv7 so they sort by creation time.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime

import pydantic
import uuid6

from trustee_checkpoints.exceptions import (
    CorruptEntryError,
    InvalidSessionUpdateError,
    ProjectNotFoundError,
    StorageIOError,
)
from trustee_checkpoints.schemas.session import SessionRecord
from trustee_checkpoints.storage.atomic import write_json_atomic
from trustee_checkpoints.storage.root import StorageRoot

__all__ = ['LocalSessionStore']

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class LocalSessionStore:
    """Session records stored as JSON files beside project metadata."""

    def __init__(self, root: StorageRoot, clock: Callable[[], datetime] = _utcnow) -> None:
        self.root = root
        self.clock = clock

    def list_sessions(self, project_hash: str) -> list[SessionRecord]:
        """
        List sessions for a project, most recent first.

        Raises:
            CorruptEntryError: If a session file fails to parse
            StorageIOError: If the sessions directory or a file cannot be read
        """
        sessions_dir = self.root.sessions_dir(project_hash)
        if not sessions_dir.exists():
            return []

        records: list[SessionRecord] = []
        try:
            session_files = sorted(sessions_dir.glob('*.json'))
        except OSError as e:
            raise StorageIOError(sessions_dir, e)

        for session_file in session_files:
            if session_file.name.startswith('.'):
                continue
            try:
                raw = session_file.read_bytes()
            except OSError as e:
                raise StorageIOError(session_file, e)
            try:
                record = SessionRecord.model_validate_json(raw)
            except pydantic.ValidationError as e:
                raise CorruptEntryError(project_hash, f'session file {session_file.name}: {e.error_count()} error(s)')
            records.append(record)

        records.sort(key=lambda r: r.started_at, reverse=True)
        return records

    def begin_session(self, project_hash: str) -> SessionRecord:
        """
        Record the start of a new session.

        Raises:
            ProjectNotFoundError: If the project directory does not exist
            StorageIOError: If the record cannot be written
        """
        project_dir = self.root.project_dir(project_hash)
        if not project_dir.is_dir():
            raise ProjectNotFoundError(project_hash)

        record = SessionRecord(
            session_id=str(uuid6.uuid7()),
            project_hash=project_hash,
            started_at=self.clock(),
        )
        self._write(record)
        logger.info('Began session %s for project %s', record.session_id, project_hash)
        return record

    def end_session(self, project_hash: str, session_id: str, size: int = 0) -> SessionRecord:
        """
        Mark a session as ended and record its final size.

        Raises:
            ProjectNotFoundError: If the session does not exist
            InvalidSessionUpdateError: If size is negative
            CorruptEntryError: If the existing session file fails to parse
            StorageIOError: If the record cannot be read or written
        """
        if size < 0:
            raise InvalidSessionUpdateError(session_id, f'size must be non-negative, got {size}')
        if not session_id or '/' in session_id or session_id.startswith('.'):
            raise ProjectNotFoundError(project_hash, reason=f'invalid session id {session_id!r}')

        session_file = self.root.sessions_dir(project_hash) / f'{session_id}.json'
        try:
            raw = session_file.read_bytes()
        except FileNotFoundError:
            raise ProjectNotFoundError(project_hash, reason=f'no session {session_id}')
        except OSError as e:
            raise StorageIOError(session_file, e)

        try:
            record = SessionRecord.model_validate_json(raw)
        except pydantic.ValidationError as e:
            raise CorruptEntryError(project_hash, f'session file {session_file.name}: {e.error_count()} error(s)')

        ended = SessionRecord.model_validate({**dict(record), 'ended_at': self.clock(), 'size': size})
        self._write(ended)
        return ended

    def _write(self, record: SessionRecord) -> None:
        sessions_dir = self.root.sessions_dir(record.project_hash)
        session_file = sessions_dir / f'{record.session_id}.json'
        try:
            sessions_dir.mkdir(parents=True, exist_ok=True)
            write_json_atomic(session_file, record.model_dump(mode='json'))
        except OSError as e:
            raise StorageIOError(session_file, e)
