"""
Text file format for fingerprint databases.

Layout (UTF-8, one record per line; undecodable path bytes are carried
through as surrogate escapes so they round-trip unchanged):

    <root path>
    <16 hex: fingerprint> <15 hex: modified_at> <path>
    ...

The hash and timestamp fields are fixed width so a line can be sliced by
offset; everything after the 33-character prefix is the path. Lines too
short to carry a path are skipped on load. A blank root line is rejected.
"""

from __future__ import annotations

import io
import logging
import re
from pathlib import Path
from typing import Iterable, TYPE_CHECKING

from ..config import (
    FINGERPRINT_MASK,
    FINGERPRINT_WIDTH,
    MODIFIED_AT_WIDTH,
    ENTRY_PREFIX_LENGTH,
    MIN_ENTRY_LINE_LENGTH,
    MIN_MODIFIED_AT,
    MAX_MODIFIED_AT,
)
from ..models import Entry
from .errors import InvalidDatabaseError, DatabaseParseError

if TYPE_CHECKING:
    from .core import Database


logger = logging.getLogger(__name__)

_FINGERPRINT_FIELD = slice(0, FINGERPRINT_WIDTH)
_MODIFIED_AT_FIELD = slice(FINGERPRINT_WIDTH + 1, FINGERPRINT_WIDTH + 1 + MODIFIED_AT_WIDTH)

_HEX = re.compile(r'[0-9a-fA-F]+')
_SIGNED_HEX = re.compile(r'[+-]?[0-9a-fA-F]+')


def _strip_terminator(line: str) -> str:
    return line.rstrip('\r\n')


def parse_entry(line: str, line_number: int = 0) -> Entry:
    """
    Parse one entry line (without its terminator).

    Args:
        line: Line of at least MIN_ENTRY_LINE_LENGTH characters
        line_number: Position in the file, for error messages

    Returns:
        Parsed Entry

    Raises:
        DatabaseParseError: If a fixed-width field is not hex
    """
    hash_field = line[_FINGERPRINT_FIELD]
    if not _HEX.fullmatch(hash_field):
        raise DatabaseParseError("Invalid fingerprint field", line_number, line)

    time_field = line[_MODIFIED_AT_FIELD]
    if not _SIGNED_HEX.fullmatch(time_field):
        raise DatabaseParseError("Invalid modification time field", line_number, line)

    return Entry(
        path=line[ENTRY_PREFIX_LENGTH:],
        fingerprint=int(hash_field, 16),
        modified_at=int(time_field, 16),
    )


def format_entry(entry: Entry) -> str:
    """
    Format one entry line (without its terminator).

    Raises:
        ValueError: If a field cannot be represented in the file format
    """
    if not 0 <= entry.fingerprint <= FINGERPRINT_MASK:
        raise ValueError(f"Fingerprint out of 64-bit range for {entry.path!r}: {entry.fingerprint}")
    if not MIN_MODIFIED_AT <= entry.modified_at <= MAX_MODIFIED_AT:
        raise ValueError(
            f"Modification time does not fit {MODIFIED_AT_WIDTH} hex digits "
            f"for {entry.path!r}: {entry.modified_at}"
        )
    if not entry.path or '\n' in entry.path or '\r' in entry.path:
        raise ValueError(f"Path cannot be stored: {entry.path!r}")

    return f"{entry.fingerprint:016x} {entry.modified_at:015x} {entry.path}"


def read_lines(database: Database, lines: Iterable[str]) -> int:
    """
    Populate a database from an iterable of text lines.

    The root is replaced and parsed entries are appended. Entries parsed
    before a failing line stay in the database.

    Returns:
        Number of entries appended

    Raises:
        InvalidDatabaseError: If the root line is blank
        DatabaseParseError: If an entry line has non-hex fields
    """
    lines = iter(lines)
    first = next(lines, None)
    if first is None:
        return 0

    root = _strip_terminator(first)
    if not root.strip():
        raise InvalidDatabaseError("Invalid database file: blank root line")
    database.root = root

    count = 0
    for line_number, raw in enumerate(lines, start=2):
        line = _strip_terminator(raw)
        if len(line) < MIN_ENTRY_LINE_LENGTH:
            continue
        database.entries.append(parse_entry(line, line_number))
        count += 1

    return count


def encode_lines(database: Database) -> list[str]:
    """
    Format the whole database as newline-terminated lines.

    Raises:
        InvalidDatabaseError: If the root is blank (the file could not be loaded back)
        ValueError: If any entry cannot be represented
    """
    if not database.root.strip() or '\n' in database.root or '\r' in database.root:
        raise InvalidDatabaseError(f"Database root cannot be stored: {database.root!r}")

    lines = [database.root + '\n']
    lines.extend(format_entry(entry) + '\n' for entry in database.entries)
    return lines


def load(database: Database, file_path: str | Path) -> int:
    """
    Load a database file into ``database``.

    Args:
        database: Database to populate (root replaced, entries appended)
        file_path: Path to the database file

    Returns:
        Number of entries appended

    Raises:
        OSError: If the file cannot be opened
        InvalidDatabaseError: If the root line is blank
        DatabaseParseError: If an entry line has non-hex fields
    """
    with open(file_path, 'r', encoding='utf-8', errors='surrogateescape', newline='\n') as f:
        count = read_lines(database, f)
    logger.debug(f"Loaded {count:,} entries from {file_path}")
    return count


def save(database: Database, file_path: str | Path) -> int:
    """
    Write ``database`` to a file, replacing any previous contents.

    All lines are formatted and encoded before the file is opened, so a database that
    cannot be represented leaves the existing file untouched.

    Returns:
        Number of entries written

    Raises:
        OSError: If the file cannot be created
        InvalidDatabaseError: If the root is blank
        ValueError: If any entry cannot be represented
    """
    lines = encode_lines(database)
    data = ''.join(lines).encode('utf-8', 'surrogateescape')
    with open(file_path, 'wb') as f:
        f.write(data)
    logger.debug(f"Saved {len(lines) - 1:,} entries to {file_path}")
    return len(lines) - 1


def loads(text: str, database: Database) -> int:
    """Populate ``database`` from the text form of a database file."""
    return read_lines(database, io.StringIO(text, newline='\n'))


def dumps(database: Database) -> str:
    """Return the text form of ``database``."""
    return ''.join(encode_lines(database))


__all__ = [
    'parse_entry',
    'format_entry',
    'read_lines',
    'encode_lines',
    'load',
    'save',
    'loads',
    'dumps',
]
