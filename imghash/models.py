"""
Data models for imghash.

Contains dataclasses for database entries and search results.
"""

from dataclasses import dataclass


def format_fingerprint(fingerprint: int) -> str:
    """Format a fingerprint as 16 lowercase hex digits."""
    return f"{fingerprint:016x}"


@dataclass
class Entry:
    """
    One indexed image.

    Attributes:
        path: Image path, relative to the database root
        fingerprint: 64-bit perceptual hash
        modified_at: Last observed modification time of the source file
    """
    path: str
    fingerprint: int = 0
    modified_at: int = 0

    @property
    def fingerprint_hex(self) -> str:
        return format_fingerprint(self.fingerprint)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'path': self.path,
            'fingerprint': self.fingerprint_hex,
            'modified_at': self.modified_at,
        }


@dataclass
class SearchResult:
    """
    A single match returned by Database.search.

    Attributes:
        path: Image path, relative to the database root
        fingerprint: Stored fingerprint of the match
        distance: Hamming distance to the query fingerprint
    """
    path: str
    fingerprint: int
    distance: int

    @property
    def fingerprint_hex(self) -> str:
        return format_fingerprint(self.fingerprint)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            'path': self.path,
            'fingerprint': self.fingerprint_hex,
            'distance': self.distance,
        }
