"""
Tests for ProjectMetadataStore: load/parse outcomes, atomic upsert, lazy enumeration.
"""

from __future__ import annotations

import json
import pathlib
from pathlib import Path

import pytest

from conftest import fake_hash, make_metadata, write_raw_record
from trustee_checkpoints.exceptions import (
    CorruptEntryError,
    ProjectNotFoundError,
    StorageIOError,
    StorageRootInaccessibleError,
)
from trustee_checkpoints.storage.metadata import ProjectMetadataStore
from trustee_checkpoints.storage.root import StorageRoot


def test_upsert_then_load_returns_same_record(store: ProjectMetadataStore) -> None:
    metadata = make_metadata(fake_hash('a'), git_remote='git@example.com:org/repo.git', size_bytes=42)
    store.upsert(metadata)
    assert store.load(metadata.project_hash) == metadata


def test_record_uses_documented_field_names(store: ProjectMetadataStore, storage_root: StorageRoot) -> None:
    metadata = make_metadata(fake_hash('a'))
    store.upsert(metadata)

    data = json.loads(storage_root.metadata_file(metadata.project_hash).read_text())
    assert set(data) == {
        'project_hash',
        'project_path',
        'name',
        'created_at',
        'last_accessed',
        'session_count',
        'size_bytes',
        'git_remote',
    }
    assert data['git_remote'] is None
    assert data['created_at'].endswith('Z') or data['created_at'].endswith('+00:00')


def test_upsert_leaves_no_temp_files(store: ProjectMetadataStore, storage_root: StorageRoot) -> None:
    metadata = make_metadata(fake_hash('a'))
    store.upsert(metadata)
    store.upsert(metadata.model_copy(update={'session_count': 5}))

    files = sorted(p.name for p in storage_root.project_dir(metadata.project_hash).iterdir())
    assert files == ['metadata.json']


def test_upsert_failure_raises_storage_io_error(store: ProjectMetadataStore, storage_root: StorageRoot) -> None:
    project_hash = fake_hash('blocked')
    storage_root.path.mkdir(parents=True)
    (storage_root.path / project_hash).write_text('a file where the project directory should be')

    with pytest.raises(StorageIOError):
        store.upsert(make_metadata(project_hash))


def test_load_missing_raises_not_found(store: ProjectMetadataStore) -> None:
    with pytest.raises(ProjectNotFoundError):
        store.load(fake_hash('missing'))


@pytest.mark.parametrize('bad_hash', ['', 'abc', '../etc', 'A' * 64, fake_hash('x') + '0'])
def test_load_malformed_hash_raises_not_found(store: ProjectMetadataStore, bad_hash: str) -> None:
    with pytest.raises(ProjectNotFoundError):
        store.load(bad_hash)


def test_load_invalid_json_raises_corrupt_entry(store: ProjectMetadataStore, storage_root: StorageRoot) -> None:
    project_hash = fake_hash('corrupt')
    write_raw_record(storage_root, project_hash, b'{"project_hash": ')

    with pytest.raises(CorruptEntryError) as exc_info:
        store.load(project_hash)
    assert exc_info.value.project_hash == project_hash


def test_load_schema_violation_raises_corrupt_entry(store: ProjectMetadataStore, storage_root: StorageRoot) -> None:
    project_hash = fake_hash('negative')
    data = make_metadata(project_hash).model_dump(mode='json')
    data['session_count'] = -1
    write_raw_record(storage_root, project_hash, json.dumps(data).encode())

    with pytest.raises(CorruptEntryError):
        store.load(project_hash)


def test_load_naive_timestamp_raises_corrupt_entry(store: ProjectMetadataStore, storage_root: StorageRoot) -> None:
    project_hash = fake_hash('naive')
    data = make_metadata(project_hash).model_dump(mode='json')
    data['last_accessed'] = '2026-01-01T09:00:00'
    write_raw_record(storage_root, project_hash, json.dumps(data).encode())

    with pytest.raises(CorruptEntryError):
        store.load(project_hash)


def test_load_hash_mismatch_raises_corrupt_entry(store: ProjectMetadataStore, storage_root: StorageRoot) -> None:
    stored_under = fake_hash('dir')
    data = make_metadata(fake_hash('other')).model_dump(mode='json')
    write_raw_record(storage_root, stored_under, json.dumps(data).encode())

    with pytest.raises(CorruptEntryError, match='claims project_hash'):
        store.load(stored_under)


def test_iter_raw_missing_root_is_empty(tmp_path: Path) -> None:
    store = ProjectMetadataStore(StorageRoot(tmp_path / 'does-not-exist'))
    assert list(store.iter_raw()) == []


def test_iter_raw_root_is_file_raises_inaccessible(tmp_path: Path) -> None:
    root_file = tmp_path / 'root-file'
    root_file.write_text('')
    store = ProjectMetadataStore(StorageRoot(root_file))

    with pytest.raises(StorageRootInaccessibleError):
        list(store.iter_raw())


def test_iter_raw_yields_bytes_without_parsing(store: ProjectMetadataStore, storage_root: StorageRoot) -> None:
    good = make_metadata(fake_hash('good'))
    store.upsert(good)
    write_raw_record(storage_root, fake_hash('bad'), b'not json')

    records = {r.project_hash: r for r in store.iter_raw()}
    assert set(records) == {good.project_hash, fake_hash('bad')}
    assert records[fake_hash('bad')].raw == b'not json'
    assert records[fake_hash('bad')].error is None


def test_iter_raw_reports_missing_metadata_per_entry(store: ProjectMetadataStore, storage_root: StorageRoot) -> None:
    store.upsert(make_metadata(fake_hash('good')))
    (storage_root.path / fake_hash('empty')).mkdir()

    records = {r.project_hash: r for r in store.iter_raw()}
    assert records[fake_hash('good')].raw is not None
    assert records[fake_hash('empty')].raw is None
    assert isinstance(records[fake_hash('empty')].error, ProjectNotFoundError)


def test_iter_raw_ignores_hidden_entries_and_files(store: ProjectMetadataStore, storage_root: StorageRoot) -> None:
    store.upsert(make_metadata(fake_hash('good')))
    (storage_root.path / '.cache').mkdir()
    (storage_root.path / 'README').write_text('notes')

    assert [r.project_hash for r in store.iter_raw()] == [fake_hash('good')]


def test_iter_raw_is_lazy(
    store: ProjectMetadataStore, storage_root: StorageRoot, monkeypatch: pytest.MonkeyPatch
) -> None:
    for seed in ('a', 'b', 'c', 'd'):
        store.upsert(make_metadata(fake_hash(seed)))

    reads: list[Path] = []
    original_read_bytes = pathlib.Path.read_bytes

    def counting_read_bytes(self: Path) -> bytes:
        reads.append(self)
        return original_read_bytes(self)

    monkeypatch.setattr(pathlib.Path, 'read_bytes', counting_read_bytes)

    iterator = store.iter_raw()
    first = next(iterator)
    assert first.raw is not None
    assert len(reads) == 1


def test_load_record_with_unknown_key_is_corrupt(store: ProjectMetadataStore, storage_root: StorageRoot) -> None:
    metadata = make_metadata(fake_hash('newer'))
    data = metadata.model_dump(mode='json')
    data['written_by_newer_schema'] = True
    write_raw_record(storage_root, metadata.project_hash, json.dumps(data).encode())

    with pytest.raises(CorruptEntryError):
        store.load(metadata.project_hash)
