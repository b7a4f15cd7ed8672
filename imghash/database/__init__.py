"""
Fingerprint database for imghash.

Stores perceptual fingerprints keyed by image path and modification time,
detects changed files, and answers nearest-neighbor queries by Hamming
distance with a linear scan. Persists to a line-oriented text file.

Public API:
- Database: In-memory collection with upsert, lookup and search
- load / save / loads / dumps: Text file codec
- index_file: Hash one file into a database if it changed
- DatabaseError, InvalidDatabaseError, DatabaseParseError: Load failures
"""

from __future__ import annotations

from .core import Database
from .codec import load, save, loads, dumps
from .errors import DatabaseError, InvalidDatabaseError, DatabaseParseError
from .indexing import get_modified_time, relative_path, index_file


__all__ = [
    'Database',
    'load',
    'save',
    'loads',
    'dumps',
    'DatabaseError',
    'InvalidDatabaseError',
    'DatabaseParseError',
    'get_modified_time',
    'relative_path',
    'index_file',
]
