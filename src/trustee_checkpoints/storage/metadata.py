"""
Project metadata store.

Reads and writes one metadata.json per project under the storage root.
Parsing is separate from enumeration: iter_raw() yields raw bytes (or the
read error) for each project directory without parsing anything, and
parse() turns one raw record into ProjectMetadata or raises
CorruptEntryError. A bad file never stops enumeration of the others.
"""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Iterator
from dataclasses import dataclass

import pydantic

from trustee_checkpoints.exceptions import (
    CorruptEntryError,
    ProjectNotFoundError,
    StorageIOError,
    StorageRootInaccessibleError,
)
from trustee_checkpoints.schemas.project import ProjectMetadata
from trustee_checkpoints.storage.atomic import write_json_atomic
from trustee_checkpoints.storage.root import StorageRoot

__all__ = ['ProjectMetadataStore', 'RawRecord']

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RawRecord:
    """One enumerated project directory.

    Exactly one of raw / error is set. error is a StorageIOError for an
    unreadable file or ProjectNotFoundError when the directory has no
    metadata file (or a name that is not a project hash).
    """

    project_hash: str
    raw: bytes | None = None
    error: StorageIOError | ProjectNotFoundError | None = None


class ProjectMetadataStore:
    """Load, upsert and enumerate project metadata records."""

    def __init__(self, root: StorageRoot) -> None:
        self.root = root

    def load(self, project_hash: str) -> ProjectMetadata:
        """
        Load metadata for a project by hash alone.

        Never touches the project's recorded path.

        Args:
            project_hash: Full project hash

        Returns:
            Parsed metadata

        Raises:
            ProjectNotFoundError: No record (or malformed hash)
            CorruptEntryError: Record present but unparseable
            StorageIOError: Record present but unreadable
        """
        metadata_file = self.root.metadata_file(project_hash)
        try:
            raw = metadata_file.read_bytes()
        except (FileNotFoundError, NotADirectoryError):
            raise ProjectNotFoundError(project_hash)
        except OSError as e:
            raise StorageIOError(metadata_file, e)
        return self.parse(project_hash, raw)

    def parse(self, project_hash: str, raw: bytes) -> ProjectMetadata:
        """
        Parse and validate one raw record.

        The record's own project_hash must match the directory it lives in.

        Raises:
            CorruptEntryError: If the bytes are not a valid metadata record
        """
        try:
            metadata = ProjectMetadata.model_validate_json(raw)
        except pydantic.ValidationError as e:
            raise CorruptEntryError(project_hash, f'{e.error_count()} validation error(s): {_first_error(e)}')

        if metadata.project_hash != project_hash:
            raise CorruptEntryError(
                project_hash, f'record claims project_hash {metadata.project_hash}, stored under {project_hash}'
            )
        return metadata

    def upsert(self, metadata: ProjectMetadata) -> None:
        """
        Write a metadata record atomically (temp file + rename).

        Creates the project directory on first write.

        Raises:
            StorageIOError: If the write fails (no partial record is left behind)
        """
        metadata_file = self.root.metadata_file(metadata.project_hash)
        try:
            metadata_file.parent.mkdir(parents=True, exist_ok=True)
            write_json_atomic(metadata_file, metadata.model_dump(mode='json'))
        except OSError as e:
            raise StorageIOError(metadata_file, e)
        logger.debug('Wrote metadata for project %s', metadata.project_hash)

    def iter_hashes(self) -> Iterator[str]:
        """
        Lazily yield the names of project directories under the root.

        Hidden entries and plain files are ignored. Names are not validated
        here; iter_raw() reports invalid ones per entry.

        Raises:
            StorageRootInaccessibleError: If the root exists but cannot be opened
        """
        root_path = self.root.path
        try:
            entries = os.scandir(root_path)
        except FileNotFoundError:
            # Nothing registered yet
            return
        except OSError as e:
            raise StorageRootInaccessibleError(root_path, e)

        with entries:
            for entry in entries:
                if entry.name.startswith('.'):
                    continue
                try:
                    if not entry.is_dir(follow_symlinks=False):
                        continue
                except OSError:
                    continue
                yield entry.name

    def iter_raw(self) -> Iterator[RawRecord]:
        """
        Lazily yield (hash, raw bytes) for every project directory.

        Each element is read only when the consumer asks for it, so a caller
        can stop mid-enumeration without reading the rest. Per-entry read
        failures are yielded as RawRecord.error, never raised.

        Raises:
            StorageRootInaccessibleError: If the root exists but cannot be opened
        """
        self._check_root()
        for name in self.iter_hashes():
            try:
                metadata_file = self.root.metadata_file(name)
            except ProjectNotFoundError as e:
                yield RawRecord(project_hash=name, error=e)
                continue

            try:
                raw = metadata_file.read_bytes()
            except (FileNotFoundError, NotADirectoryError):
                yield RawRecord(project_hash=name, error=ProjectNotFoundError(name, reason='no metadata file'))
            except OSError as e:
                yield RawRecord(project_hash=name, error=StorageIOError(metadata_file, e))
            else:
                yield RawRecord(project_hash=name, raw=raw)

    def _check_root(self) -> None:
        """Raise StorageRootInaccessibleError if the root exists but is not a directory."""
        root_path = self.root.path
        try:
            mode = root_path.stat().st_mode
        except FileNotFoundError:
            return
        except OSError as e:
            raise StorageRootInaccessibleError(root_path, e)
        if not stat.S_ISDIR(mode):
            raise StorageRootInaccessibleError(root_path)


def _first_error(error: pydantic.ValidationError) -> str:
    first = error.errors()[0]
    location = '.'.join(str(part) for part in first['loc']) or '<root>'
    return f'{location}: {first["msg"]}'
