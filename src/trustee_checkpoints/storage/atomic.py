"""
Atomic file writes.

Data is written to a uniquely named temp file in the target's directory,
fsynced, then moved into place with os.replace(). Readers see either the
old or the new complete file. Concurrent writers never share a temp file;
the last rename wins.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any

__all__ = ['write_bytes_atomic', 'write_json_atomic']


def write_bytes_atomic(path: Path, data: bytes) -> None:
    """Write bytes to path atomically via temp file + rename.

    Raises:
        OSError: If the temp file cannot be written or renamed (temp file is removed)
    """
    fd, temp_path = tempfile.mkstemp(dir=path.parent, prefix=f'.tmp_{path.stem}_', suffix=path.suffix)
    fd_owned_by_file = False
    try:
        with os.fdopen(fd, 'wb') as f:
            fd_owned_by_file = True  # fdopen took ownership, will close on exit
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(temp_path, path)
    except BaseException:
        if not fd_owned_by_file:
            os.close(fd)
        if os.path.exists(temp_path):
            os.unlink(temp_path)
        raise


def write_json_atomic(path: Path, data: dict[str, Any]) -> None:
    """Serialize data as indented JSON and write it atomically."""
    payload = json.dumps(data, indent=2, default=str) + '\n'
    write_bytes_atomic(path, payload.encode('utf-8'))
