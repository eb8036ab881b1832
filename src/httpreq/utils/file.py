"""File operation utilities."""

import io
import os
import shutil
from pathlib import Path, PurePosixPath, PureWindowsPath
from typing import Union

PathLike = Union[str, os.PathLike]


def is_safe_filename(filename: str) -> bool:
    """Check that a server-suggested filename names a single path component.

    Rejects empty names, '.', '..', absolute paths and anything containing a
    POSIX or Windows path separator or drive.

    Args:
        filename: Filename to check

    Returns:
        True if the name stays inside any directory it is joined onto
    """
    if not filename or filename in ('.', '..') or '\x00' in filename:
        return False

    for flavour in (PurePosixPath, PureWindowsPath):
        path = flavour(filename)
        if path.anchor or len(path.parts) != 1 or path.name != filename:
            return False

    return True


def write_file_synced(path: PathLike, data: bytes) -> Path:
    """Create or truncate path, write data and flush it to stable storage.

    Args:
        path: Destination file path
        data: Bytes to write

    Returns:
        The destination as a Path object

    Raises:
        OSError: If the file cannot be created, written or synced
    """
    dest = Path(path)
    with open(dest, 'wb') as f:
        shutil.copyfileobj(io.BytesIO(data), f)
        f.flush()
        os.fsync(f.fileno())
    return dest
