"""
Checkpoint storage manager - creation, lookup and access tracking.

Identity is derived from a live path exactly once, when a project is
registered (get_or_create_project_storage). Every later operation takes the
stored hash as an opaque key and never re-resolves the recorded path, so a
project whose directory was moved or deleted stays fully usable:

    Unknown --create(path)--> Active(path live)
    Active(path live) --path removed externally--> Active(path stale)
    Active(path stale) --touch / lookup by hash--> Active(path stale)

Only unparseable on-disk content makes a record corrupt.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator
from datetime import UTC, datetime
from pathlib import Path

import attrs

from trustee_checkpoints.exceptions import (
    AmbiguousProjectHashError,
    CorruptEntryError,
    PathNotFoundError,
    ProjectNotFoundError,
    StorageIOError,
)
from trustee_checkpoints.paths import canonicalize_path, hash_project_path, lexical_absolute_path
from trustee_checkpoints.schemas.project import ProjectListing, ProjectMetadata, ProjectSummary, SkippedEntry
from trustee_checkpoints.services.git_remote import GitRemoteResolver, detect_git_remote
from trustee_checkpoints.storage.metadata import ProjectMetadataStore, RawRecord
from trustee_checkpoints.storage.root import METADATA_FILENAME, StorageRoot, is_project_hash

__all__ = ['CheckpointStorageManager', 'ProjectStorage']

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@attrs.define(frozen=True)
class ProjectStorage:
    """Handle to one project's storage directory and its metadata."""

    metadata: ProjectMetadata
    directory: Path
    created: bool = False

    @property
    def project_hash(self) -> str:
        return self.metadata.project_hash


class CheckpointStorageManager:
    """
    Orchestrates per-project storage under a single StorageRoot.

    Two lookup operations with different failure contracts:
    - get_or_create_project_storage(path): needs a live path, may raise
      PathNotFoundError / PathPermissionError
    - get_project_storage_by_hash(hash): needs only the hash, never touches
      the recorded project path
    """

    def __init__(
        self,
        root: StorageRoot,
        store: ProjectMetadataStore | None = None,
        git_remote_resolver: GitRemoteResolver | None = detect_git_remote,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """
        Initialize the manager.

        Args:
            root: Storage root every operation reads and writes
            store: Metadata store (defaults to one over root)
            git_remote_resolver: Called with the canonical path at registration;
                None disables remote detection
            clock: Source of timestamps (timezone-aware)
        """
        self.root = root
        self.store = store or ProjectMetadataStore(root)
        self.git_remote_resolver = git_remote_resolver
        self.clock = clock

    # ==========================================================================
    # Creation (live path required)
    # ==========================================================================

    def get_or_create_project_storage(self, original_path: Path | str) -> ProjectStorage:
        """
        Get storage for the project at original_path, registering it if new.

        Existing projects get session_count incremented and last_accessed
        refreshed (best-effort). If the path no longer resolves, a record
        registered under its lexical absolute form is still returned.

        Args:
            original_path: Project directory as supplied by the user

        Returns:
            ProjectStorage (created=True if the project was just registered)

        Raises:
            PathNotFoundError: Path does not exist and was never registered
            PathPermissionError: Path exists but is inaccessible
            CorruptEntryError: Existing record for this path is unparseable
            StorageIOError: Registering a new project failed to write
        """
        try:
            canonical_path = canonicalize_path(original_path)
        except PathNotFoundError:
            metadata = self._find_historical_registration(original_path)
            if metadata is None:
                raise
            logger.info('Path %s no longer resolves; using registered project %s', original_path, metadata.project_hash)
            return self._record_access(metadata)

        project_hash = hash_project_path(canonical_path)
        try:
            metadata = self.store.load(project_hash)
        except ProjectNotFoundError:
            return self._register(project_hash, canonical_path)
        return self._record_access(metadata)

    def _find_historical_registration(self, original_path: Path | str) -> ProjectMetadata | None:
        """Look for a record registered under the path's lexical absolute form."""
        try:
            lexical_path = lexical_absolute_path(original_path)
        except OSError as e:
            # Relative path with a deleted working directory
            logger.debug('No lexical form for %s: %s', original_path, e)
            return None
        project_hash = hash_project_path(lexical_path)
        try:
            return self.store.load(project_hash)
        except ProjectNotFoundError:
            return None

    def _register(self, project_hash: str, canonical_path: str) -> ProjectStorage:
        now = self.clock()
        metadata = ProjectMetadata(
            project_hash=project_hash,
            project_path=canonical_path,
            name=Path(canonical_path).name or canonical_path,
            created_at=now,
            last_accessed=now,
            session_count=1,
            size_bytes=0,
            git_remote=self._detect_git_remote(canonical_path),
        )
        self.store.upsert(metadata)
        logger.info('Registered project %s at %s', project_hash, canonical_path)
        return ProjectStorage(metadata=metadata, directory=self.root.project_dir(project_hash), created=True)

    def _detect_git_remote(self, canonical_path: str) -> str | None:
        if self.git_remote_resolver is None:
            return None
        try:
            return self.git_remote_resolver(canonical_path)
        except Exception as e:
            logger.warning('Git remote detection failed for %s: %s', canonical_path, e)
            return None

    def _record_access(self, metadata: ProjectMetadata) -> ProjectStorage:
        updated = metadata.model_copy(
            update={'last_accessed': self.clock(), 'session_count': metadata.session_count + 1}
        )
        try:
            self.store.upsert(updated)
        except StorageIOError as e:
            logger.warning('Could not record access for project %s: %s', metadata.project_hash, e)
        return ProjectStorage(metadata=updated, directory=self.root.project_dir(metadata.project_hash))

    # ==========================================================================
    # Lookup by hash (no filesystem dependency on the project path)
    # ==========================================================================

    def get_project_storage_by_hash(self, project_hash: str) -> ProjectStorage:
        """
        Get storage for an already registered project by hash alone.

        Never canonicalizes or stats the recorded project_path; works after
        the original directory has been moved or deleted.

        Raises:
            ProjectNotFoundError: No record for project_hash
            CorruptEntryError: Record present but unparseable
            StorageIOError: Record present but unreadable
        """
        metadata = self.store.load(project_hash)
        return ProjectStorage(metadata=metadata, directory=self.root.project_dir(project_hash))

    def resolve_hash(self, prefix: str) -> str:
        """
        Expand a hash prefix (as shown in listings) to a full project hash.

        Uses directory names only; no record is parsed.

        Raises:
            ProjectNotFoundError: No project matches
            AmbiguousProjectHashError: More than one project matches
        """
        prefix = prefix.strip().lower()
        if is_project_hash(prefix):
            return prefix
        if not prefix or any(c not in '0123456789abcdef' for c in prefix):
            raise ProjectNotFoundError(prefix, reason='not a valid project hash prefix')

        matches = sorted(h for h in self.store.iter_hashes() if is_project_hash(h) and h.startswith(prefix))
        if not matches:
            raise ProjectNotFoundError(prefix)
        if len(matches) > 1:
            raise AmbiguousProjectHashError(prefix, matches)
        return matches[0]

    def touch(self, project_hash: str) -> bool:
        """
        Best-effort refresh of last_accessed.

        I/O failures are logged and swallowed; concurrent touches are
        last-writer-wins and always leave a complete record.

        Returns:
            True if the new timestamp was persisted

        Raises:
            ProjectNotFoundError: No record for project_hash
            CorruptEntryError: Record present but unparseable
        """
        try:
            metadata = self.store.load(project_hash)
            self.store.upsert(metadata.model_copy(update={'last_accessed': self.clock()}))
        except StorageIOError as e:
            logger.warning('touch failed for project %s: %s', project_hash, e)
            return False
        return True

    def refresh_usage(self, project_hash: str) -> ProjectMetadata:
        """
        Recompute size_bytes from the project's storage directory.

        Counts every file under the project's subdirectory except the
        metadata record itself and in-flight temp files.

        Raises:
            ProjectNotFoundError: No record for project_hash
            CorruptEntryError: Record present but unparseable
            StorageIOError: Record cannot be read or written
        """
        metadata = self.store.load(project_hash)
        project_dir = self.root.project_dir(project_hash)
        updated = metadata.model_copy(update={'size_bytes': _directory_size(project_dir)})
        self.store.upsert(updated)
        return updated

    # ==========================================================================
    # Enumeration (per-entry failures never abort the call)
    # ==========================================================================

    def iter_projects(self) -> Iterator[ProjectSummary | SkippedEntry]:
        """
        Lazily yield a summary or a skip reason for every project directory.

        Unordered. Entries are read and parsed one at a time as the caller
        consumes them, so stopping early costs nothing for the rest.

        Raises:
            StorageRootInaccessibleError: The root exists but cannot be opened
        """
        for record in self.store.iter_raw():
            if record.raw is None:
                skipped = _skipped_from_error(record)
                logger.warning('Skipping project entry %s: %s', skipped.project_hash, skipped.detail)
                yield skipped
                continue

            try:
                metadata = self.store.parse(record.project_hash, record.raw)
            except CorruptEntryError as e:
                logger.warning('Skipping corrupt project entry %s: %s', record.project_hash, e.detail)
                yield SkippedEntry(project_hash=record.project_hash, reason='corrupt', detail=e.detail)
                continue

            logger.debug('Listed project %s', metadata.project_hash)
            yield ProjectSummary.from_metadata(metadata)

    def list_projects(self) -> ProjectListing:
        """
        Summaries of every valid project, most recently accessed first.

        Corrupt, unreadable or unrecognized entries are skipped and counted.

        Raises:
            StorageRootInaccessibleError: The root exists but cannot be opened
        """
        projects: list[ProjectSummary] = []
        skipped: list[SkippedEntry] = []
        for entry in self.iter_projects():
            if isinstance(entry, SkippedEntry):
                skipped.append(entry)
            else:
                projects.append(entry)

        projects.sort(key=lambda p: (p.last_accessed, p.project_hash), reverse=True)
        if skipped:
            logger.warning('Listed %d project(s), skipped %d entry(ies)', len(projects), len(skipped))
        return ProjectListing(projects=projects, skipped=skipped)


def _skipped_from_error(record: RawRecord) -> SkippedEntry:
    if isinstance(record.error, StorageIOError):
        return SkippedEntry(project_hash=record.project_hash, reason='unreadable', detail=str(record.error))
    if not is_project_hash(record.project_hash):
        return SkippedEntry(project_hash=record.project_hash, reason='invalid_name', detail='not a project hash')
    return SkippedEntry(project_hash=record.project_hash, reason='missing_metadata', detail=str(record.error))


def _directory_size(directory: Path) -> int:
    total = 0
    for dirpath, _dirnames, filenames in os.walk(directory):
        for filename in filenames:
            if filename.startswith('.tmp_'):
                continue
            if dirpath == str(directory) and filename == METADATA_FILENAME:
                continue
            try:
                total += os.stat(os.path.join(dirpath, filename)).st_size
            except OSError:
                continue
    return total
