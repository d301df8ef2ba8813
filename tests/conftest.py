"""Shared fixtures: disposable storage roots, a deterministic clock, sample records."""

from __future__ import annotations

import hashlib
import threading
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest

from trustee_checkpoints.schemas.project import ProjectMetadata
from trustee_checkpoints.services.storage_manager import CheckpointStorageManager
from trustee_checkpoints.storage.metadata import ProjectMetadataStore
from trustee_checkpoints.storage.root import StorageRoot

BASE_TIME = datetime(2026, 1, 1, 9, 0, 0, tzinfo=UTC)


class StepClock:
    """Returns a strictly increasing timestamp (one second apart) on each call."""

    def __init__(self, start: datetime = BASE_TIME) -> None:
        self._next = start
        self._lock = threading.Lock()
        self.issued: list[datetime] = []

    def __call__(self) -> datetime:
        with self._lock:
            value = self._next
            self._next += timedelta(seconds=1)
            self.issued.append(value)
            return value


def fake_hash(seed: str) -> str:
    """A well-formed project hash not derived from any real path."""
    return hashlib.sha256(seed.encode()).hexdigest()


def make_metadata(project_hash: str, **overrides: object) -> ProjectMetadata:
    fields: dict[str, object] = {
        'project_hash': project_hash,
        'project_path': f'/nonexistent/{project_hash[:8]}',
        'name': project_hash[:8],
        'created_at': BASE_TIME,
        'last_accessed': BASE_TIME,
        'session_count': 1,
        'size_bytes': 0,
        'git_remote': None,
    }
    fields.update(overrides)
    return ProjectMetadata.model_validate(fields)


def write_raw_record(root: StorageRoot, project_hash: str, raw: bytes) -> Path:
    """Write arbitrary bytes as a project's metadata.json (bypassing validation)."""
    project_dir = root.path / project_hash
    project_dir.mkdir(parents=True, exist_ok=True)
    metadata_file = project_dir / 'metadata.json'
    metadata_file.write_bytes(raw)
    return metadata_file


@pytest.fixture
def storage_root(tmp_path: Path) -> StorageRoot:
    return StorageRoot(tmp_path / 'store')


@pytest.fixture
def store(storage_root: StorageRoot) -> ProjectMetadataStore:
    return ProjectMetadataStore(storage_root)


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def manager(storage_root: StorageRoot, clock: StepClock) -> CheckpointStorageManager:
    return CheckpointStorageManager(storage_root, git_remote_resolver=None, clock=clock)


@pytest.fixture
def workspace(tmp_path: Path) -> Path:
    """Directory holding project directories, separate from the storage root."""
    path = tmp_path / 'work'
    path.mkdir()
    return path


@pytest.fixture
def project_dir(workspace: Path) -> Path:
    path = workspace / 'proj'
    path.mkdir()
    return path
