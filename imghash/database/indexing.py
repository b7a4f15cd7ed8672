"""
Helpers for keeping a database in sync with individual image files.

These functions take explicit file paths; deciding which files to visit
is left to the caller.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from ..hashing import Hasher, AverageHasher, hash_file
from .core import Database


logger = logging.getLogger(__name__)


def get_modified_time(filepath: str | Path) -> int:
    """
    Get a file's modification time as whole epoch seconds.

    Raises:
        OSError: If the file cannot be stat'ed
    """
    return int(os.stat(filepath).st_mtime)


def relative_path(database: Database, filepath: str | Path) -> str:
    """
    Express a file path relative to the database root.

    Paths outside the root (or any path when the root is empty) are
    stored as given, with forward slashes.
    """
    path = Path(filepath)
    if database.root:
        try:
            path = path.resolve().relative_to(Path(database.root).resolve())
        except ValueError:
            pass
    return path.as_posix()


def index_file(
    database: Database,
    filepath: str | Path,
    hasher: Optional[Hasher] = None,
    force: bool = False,
) -> bool:
    """
    Hash a file into the database if it is new or has changed.

    Args:
        database: Database to update
        filepath: Image file to index
        hasher: Algorithm to use (default: AverageHasher)
        force: Rehash even when the stored modification time matches

    Returns:
        True if the entry was added or updated, False if it was up to date

    Raises:
        OSError: If the file cannot be read or decoded
    """
    modified_at = get_modified_time(filepath)
    key = relative_path(database, filepath)

    if not force and not database.is_stale(key, modified_at):
        logger.debug(f"Unchanged: {key}")
        return False

    fingerprint = hash_file(filepath, hasher or AverageHasher())
    database.upsert(key, modified_at, fingerprint)
    logger.debug(f"Indexed {key}: {fingerprint:016x}")
    return True


__all__ = ['get_modified_time', 'relative_path', 'index_file']
