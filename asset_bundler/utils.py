"""Utility helpers for archive path handling."""

from __future__ import annotations

import os
import posixpath
from pathlib import Path, PurePosixPath
from typing import Optional


def to_posix(path: str) -> str:
    """Normalize platform separators to the forward slashes used in archives."""
    return path.replace(os.sep, "/") if os.sep != "/" else path


def absolute_path(path: Path) -> Path:
    """Make a path absolute and collapse ``..`` segments without following symlinks."""
    return Path(os.path.abspath(path))


def relative_inside(path: Path, base_dir: Path) -> Optional[str]:
    """Return ``path`` relative to ``base_dir`` in posix form, or None if it escapes."""
    try:
        rel = os.path.relpath(path, base_dir)
    except ValueError:
        # Different drives on Windows.
        return None
    if os.path.isabs(rel) or rel == os.pardir or rel.startswith(os.pardir + os.sep):
        return None
    return to_posix(rel)


def relative_ref(target: str, start_dir: str) -> str:
    """Express an archive path relative to a directory inside the same archive."""
    return posixpath.relpath(target, start_dir or ".")


def with_counter(filename: str, counter: int) -> str:
    """Insert ``_<counter>`` before the file extension."""
    pure = PurePosixPath(filename)
    return f"{pure.stem}_{counter}{pure.suffix}"
