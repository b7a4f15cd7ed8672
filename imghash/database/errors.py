"""
Exceptions raised by the database layer.
"""

from __future__ import annotations


class DatabaseError(Exception):
    """Base class for database file problems."""


class InvalidDatabaseError(DatabaseError):
    """The file header (root line) is present but blank."""


class DatabaseParseError(DatabaseError, ValueError):
    """
    An entry line has non-hex content in its fixed-width fields.

    Attributes:
        line_number: 1-based line number within the file
        line: The offending line, without its terminator
    """

    def __init__(self, message: str, line_number: int = 0, line: str = ""):
        super().__init__(f"{message} (line {line_number}: {line!r})")
        self.line_number = line_number
        self.line = line


__all__ = ['DatabaseError', 'InvalidDatabaseError', 'DatabaseParseError']
