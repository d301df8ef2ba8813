"""
Tests for LocalSessionStore.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from conftest import StepClock, fake_hash
from trustee_checkpoints.exceptions import CorruptEntryError, InvalidSessionUpdateError, ProjectNotFoundError
from trustee_checkpoints.services.storage_manager import CheckpointStorageManager
from trustee_checkpoints.storage.protocol import SessionStore
from trustee_checkpoints.storage.root import StorageRoot
from trustee_checkpoints.storage.sessions import LocalSessionStore


@pytest.fixture
def sessions(storage_root: StorageRoot, clock: StepClock) -> LocalSessionStore:
    return LocalSessionStore(storage_root, clock=clock)


def test_implements_session_store_protocol(sessions: LocalSessionStore) -> None:
    assert isinstance(sessions, SessionStore)


def test_begin_end_and_list(
    sessions: LocalSessionStore, manager: CheckpointStorageManager, project_dir: Path
) -> None:
    project_hash = manager.get_or_create_project_storage(project_dir).project_hash

    first = sessions.begin_session(project_hash)
    second = sessions.begin_session(project_hash)
    ended = sessions.end_session(project_hash, first.session_id, size=512)

    assert first.ended_at is None
    assert ended.ended_at is not None
    assert ended.ended_at > ended.started_at
    assert ended.size == 512

    listed = sessions.list_sessions(project_hash)
    assert [r.session_id for r in listed] == [second.session_id, first.session_id]
    assert listed[1] == ended


def test_list_sessions_for_project_without_sessions(sessions: LocalSessionStore) -> None:
    assert sessions.list_sessions(fake_hash('quiet')) == []


def test_begin_session_for_unknown_project(sessions: LocalSessionStore) -> None:
    with pytest.raises(ProjectNotFoundError):
        sessions.begin_session(fake_hash('unknown'))


def test_end_unknown_session(
    sessions: LocalSessionStore, manager: CheckpointStorageManager, project_dir: Path
) -> None:
    project_hash = manager.get_or_create_project_storage(project_dir).project_hash
    with pytest.raises(ProjectNotFoundError):
        sessions.end_session(project_hash, 'no-such-session')
    with pytest.raises(ProjectNotFoundError):
        sessions.end_session(project_hash, '../metadata')


def test_corrupt_session_file_raises(
    sessions: LocalSessionStore, manager: CheckpointStorageManager, project_dir: Path, storage_root: StorageRoot
) -> None:
    project_hash = manager.get_or_create_project_storage(project_dir).project_hash
    sessions.begin_session(project_hash)
    (storage_root.sessions_dir(project_hash) / 'broken.json').write_text('{')

    with pytest.raises(CorruptEntryError):
        sessions.list_sessions(project_hash)


def test_end_session_rejects_negative_size(
    sessions: LocalSessionStore, manager: CheckpointStorageManager, project_dir: Path
) -> None:
    project_hash = manager.get_or_create_project_storage(project_dir).project_hash
    record = sessions.begin_session(project_hash)

    with pytest.raises(InvalidSessionUpdateError):
        sessions.end_session(project_hash, record.session_id, size=-1)

    # The stored record is untouched
    assert sessions.list_sessions(project_hash) == [record]
