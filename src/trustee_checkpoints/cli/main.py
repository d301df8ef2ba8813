#!/usr/bin/env python3
"""
Command-line interface for trustee-checkpoints.

Provides commands to register projects, list resumable ones and resume
them by hash.
"""

from __future__ import annotations

import functools
import traceback
from pathlib import Path
from typing import Literal, TypeGuard

import typer

from trustee_checkpoints.cli.logger import configure_logging
from trustee_checkpoints.config.cli import settings
from trustee_checkpoints.exceptions import CheckpointStoreError, StorageRootInaccessibleError
from trustee_checkpoints.services.git_remote import detect_git_remote
from trustee_checkpoints.services.resume import ResumeCoordinator
from trustee_checkpoints.services.storage_manager import CheckpointStorageManager
from trustee_checkpoints.storage.root import StorageRoot
from trustee_checkpoints.storage.sessions import LocalSessionStore

app = typer.Typer(
    name='trustee-checkpoints',
    help='Register, list and resume project checkpoints',
    add_completion=False,
)

# Type aliases and validators
OutputFormat = Literal['text', 'json']


def _is_output_format(value: str) -> TypeGuard[OutputFormat]:
    """Type guard for valid output formats."""
    return value in ('text', 'json')


def _validate_output_format(value: str) -> OutputFormat:
    """Validate and narrow output format for typer callback."""
    if _is_output_format(value):
        return value
    raise typer.BadParameter("Must be 'text' or 'json'")


def _storage_root(root: Path | None) -> StorageRoot:
    return StorageRoot(root if root is not None else settings.STORAGE_ROOT)


def _build_manager(storage_root: StorageRoot) -> CheckpointStorageManager:
    resolver = None
    if settings.DETECT_GIT_REMOTE:
        resolver = functools.partial(detect_git_remote, timeout=settings.GIT_TIMEOUT_SECONDS)
    return CheckpointStorageManager(storage_root, git_remote_resolver=resolver)


def _fail(message: str, verbose: bool = False) -> typer.Exit:
    typer.secho(f'Error: {message}', fg=typer.colors.RED, err=True)
    if verbose:
        traceback.print_exc()
    return typer.Exit(1)


def _short(project_hash: str) -> str:
    return project_hash[: settings.HASH_DISPLAY_LENGTH]


@app.command()
def start(
    path: Path = typer.Argument(Path('.'), help='Project directory (default: current)'),
    root: Path | None = typer.Option(None, '--root', help='Storage root (default: TRUSTEE_STORAGE_ROOT)'),
    session: bool = typer.Option(True, '--session/--no-session', help='Record a new session for this project'),
    verbose: bool = typer.Option(False, '--verbose', '-v', help='Verbose output'),
) -> None:
    """Register a project (if new) and begin work on it."""
    configure_logging(verbose)
    storage_root = _storage_root(root)
    manager = _build_manager(storage_root)

    try:
        storage = manager.get_or_create_project_storage(path)
        record = LocalSessionStore(storage_root).begin_session(storage.project_hash) if session else None
    except CheckpointStoreError as e:
        raise _fail(str(e), verbose)

    metadata = storage.metadata
    if storage.created:
        typer.secho('✓ Project registered', fg=typer.colors.GREEN)
    else:
        typer.secho('✓ Project found', fg=typer.colors.GREEN)
    typer.echo(f'  Hash: {metadata.project_hash}')
    typer.echo(f'  Path: {metadata.project_path}')
    typer.echo(f'  Storage: {storage.directory}')
    typer.echo(f'  Sessions: {metadata.session_count}')
    if metadata.git_remote:
        typer.echo(f'  Remote: {metadata.git_remote}')
    if record is not None:
        typer.echo(f'  Session ID: {record.session_id}')


@app.command('list')
def list_projects(
    root: Path | None = typer.Option(None, '--root', help='Storage root (default: TRUSTEE_STORAGE_ROOT)'),
    format: str = typer.Option(
        'text', '--format', '-f', help='Output format: text or json', callback=_validate_output_format
    ),
    verbose: bool = typer.Option(False, '--verbose', '-v', help='Verbose output'),
) -> None:
    """List resumable projects, most recently accessed first.

    Projects whose directories were moved or deleted are still listed.
    Unreadable entries are skipped and counted.
    """
    configure_logging(verbose)
    storage_root = _storage_root(root)
    coordinator = ResumeCoordinator(_build_manager(storage_root), LocalSessionStore(storage_root))

    try:
        listing = coordinator.list_resumable()
    except StorageRootInaccessibleError as e:
        raise _fail(str(e), verbose)

    if format == 'json':
        typer.echo(listing.model_dump_json(indent=2))
        return

    if not listing.projects:
        typer.secho(f'No projects found in {storage_root.path}', fg=typer.colors.YELLOW)

    for item in listing.projects:
        project = item.project
        sessions = f'{len(item.sessions)} session(s)' if item.sessions is not None else 'sessions unavailable'
        typer.echo(f'{_short(project.project_hash)}  {project.name}  ({sessions})')
        typer.echo(f'    Path: {project.project_path}')
        typer.echo(f'    Last accessed: {project.last_accessed.isoformat(timespec="seconds")}')

    if listing.skipped_count:
        typer.echo()
        typer.secho(f'Skipped {listing.skipped_count} unreadable entry(ies)', fg=typer.colors.YELLOW)
    if verbose:
        for diagnostic in listing.diagnostics:
            typer.echo(f'  [{diagnostic.stage}] {diagnostic.project_hash}: {diagnostic.message}')


@app.command()
def resume(
    project_hash: str = typer.Argument(..., help='Project hash (full or prefix)'),
    root: Path | None = typer.Option(None, '--root', help='Storage root (default: TRUSTEE_STORAGE_ROOT)'),
    verbose: bool = typer.Option(False, '--verbose', '-v', help='Verbose output'),
) -> None:
    """Resume a registered project by hash, even if its directory is gone.

    Examples:
        trustee-checkpoints resume 5c0b1e2f
    """
    configure_logging(verbose)
    storage_root = _storage_root(root)
    coordinator = ResumeCoordinator(_build_manager(storage_root), LocalSessionStore(storage_root))

    try:
        target = coordinator.select(project_hash)
    except CheckpointStoreError as e:
        raise _fail(str(e), verbose)

    metadata = target.storage.metadata
    typer.secho(f'✓ Resuming {metadata.name}', fg=typer.colors.GREEN)
    typer.echo(f'  Hash: {metadata.project_hash}')
    typer.echo(f'  Path: {metadata.project_path}')
    typer.echo(f'  Storage: {target.storage.directory}')

    if target.sessions is None:
        typer.secho('  Sessions: unavailable', fg=typer.colors.YELLOW)
        return

    typer.echo(f'  Sessions: {len(target.sessions)}')
    for record in target.sessions:
        ended = record.ended_at.isoformat(timespec='seconds') if record.ended_at else 'open'
        typer.echo(f'    - {record.session_id}  {record.started_at.isoformat(timespec="seconds")} → {ended}')


@app.command()
def show(
    project_hash: str = typer.Argument(..., help='Project hash (full or prefix)'),
    root: Path | None = typer.Option(None, '--root', help='Storage root (default: TRUSTEE_STORAGE_ROOT)'),
    format: str = typer.Option(
        'text', '--format', '-f', help='Output format: text or json', callback=_validate_output_format
    ),
    verbose: bool = typer.Option(False, '--verbose', '-v', help='Verbose output'),
) -> None:
    """Display stored metadata for a project."""
    configure_logging(verbose)
    manager = _build_manager(_storage_root(root))

    try:
        storage = manager.get_project_storage_by_hash(manager.resolve_hash(project_hash))
    except CheckpointStoreError as e:
        raise _fail(str(e), verbose)

    metadata = storage.metadata
    if format == 'json':
        typer.echo(metadata.model_dump_json(indent=2))
        return

    typer.echo(f'Project: {metadata.name}')
    typer.echo(f'Hash: {metadata.project_hash}')
    typer.echo(f'Path: {metadata.project_path}')
    typer.echo(f'Created: {metadata.created_at.isoformat(timespec="seconds")}')
    typer.echo(f'Last accessed: {metadata.last_accessed.isoformat(timespec="seconds")}')
    typer.echo(f'Sessions: {metadata.session_count}')
    typer.echo(f'Size: {metadata.size_bytes:,} bytes')
    typer.echo(f'Remote: {metadata.git_remote or "-"}')


@app.command()
def version() -> None:
    """Show application name and version."""
    typer.echo(f'{settings.APP_NAME} {settings.VERSION}')


def main() -> None:
    """Entry point for CLI."""
    app()


if __name__ == '__main__':
    main()
