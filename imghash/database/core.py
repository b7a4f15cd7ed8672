"""
In-memory fingerprint database.

A naive linear-scan collection of Entry records keyed by path. All
operations are O(n); search additionally sorts its matches. The class is
not thread-safe; callers sharing an instance must serialize access.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Optional

from ..hashing.distance import distance
from ..models import Entry, SearchResult
from . import codec


logger = logging.getLogger(__name__)


class Database:
    """
    A listing of perceptual fingerprints mapped to image paths.

    Usage:
        db = Database.from_file(path)

        if db.is_stale(relpath, mtime):
            db.upsert(relpath, mtime, hash_file(fullpath))

        for result in db.search(fingerprint, max_distance=5):
            print(result.distance, result.path)

        db.save(path)
    """

    def __init__(self, root: str = "", entries: Optional[list[Entry]] = None):
        """
        Initialize a database.

        Args:
            root: Base path all entry paths are relative to (stored, never interpreted)
            entries: Initial entries, in order
        """
        self.root = root
        self.entries: list[Entry] = list(entries) if entries else []

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self) -> Iterator[Entry]:
        return iter(self.entries)

    def __repr__(self) -> str:
        return f"Database(root={self.root!r}, entries={len(self.entries)})"

    @classmethod
    def from_file(cls, file_path: str | Path) -> 'Database':
        """Create a database from a file written by save()."""
        database = cls()
        codec.load(database, file_path)
        return database

    def load(self, file_path: str | Path) -> int:
        """
        Load entries from a file, appending them to this database.

        Entries parsed before a malformed line remain loaded when the
        error is raised.

        Returns:
            Number of entries loaded
        """
        return codec.load(self, file_path)

    def save(self, file_path: str | Path) -> int:
        """
        Write the root and every entry, in order, to a file.

        Returns:
            Number of entries written
        """
        return codec.save(self, file_path)

    def find_by_path(self, path: str) -> Optional[int]:
        """Index of the first entry whose path equals ``path``, or None."""
        for index, entry in enumerate(self.entries):
            if entry.path == path:
                return index
        return None

    def find_by_fingerprint(self, fingerprint: int) -> list[int]:
        """Indices of all entries with exactly this fingerprint."""
        return [
            index for index, entry in enumerate(self.entries)
            if entry.fingerprint == fingerprint
        ]

    def get(self, path: str) -> Optional[Entry]:
        """Entry stored for ``path``, or None."""
        index = self.find_by_path(path)
        return None if index is None else self.entries[index]

    def upsert(self, path: str, modified_at: int, fingerprint: int) -> Entry:
        """
        Insert or update the entry for a path.

        An existing entry keeps its position; a new one is appended.

        Returns:
            The stored Entry
        """
        index = self.find_by_path(path)
        if index is None:
            entry = Entry(path=path, fingerprint=fingerprint, modified_at=modified_at)
            self.entries.append(entry)
            return entry

        entry = self.entries[index]
        entry.modified_at = modified_at
        entry.fingerprint = fingerprint
        return entry

    def is_stale(self, path: str, modified_at: int) -> bool:
        """
        Check whether a file needs (re)hashing.

        Returns:
            True if the path is unknown or its stored modification time
            differs from ``modified_at``
        """
        index = self.find_by_path(path)
        if index is None:
            return True
        return self.entries[index].modified_at != modified_at

    def search(self, fingerprint: int, max_distance: int) -> list[SearchResult]:
        """
        Find entries within a Hamming distance of a fingerprint.

        Args:
            fingerprint: Query fingerprint
            max_distance: Largest distance to include (0-64)

        Returns:
            Matches sorted by distance, then path
        """
        results = []
        for entry in self.entries:
            dist = distance(entry.fingerprint, fingerprint)
            if dist <= max_distance:
                results.append(SearchResult(
                    path=entry.path,
                    fingerprint=entry.fingerprint,
                    distance=dist,
                ))

        results.sort(key=lambda r: (r.distance, r.path))
        logger.debug(
            f"Search for {fingerprint:016x} within {max_distance}: "
            f"{len(results):,} of {len(self.entries):,} entries"
        )
        return results

    def duplicate_groups(self) -> list[list[Entry]]:
        """
        Group entries that share an identical fingerprint.

        Returns:
            Groups of two or more entries, ordered by first appearance
        """
        groups: dict[int, list[Entry]] = {}
        for entry in self.entries:
            if entry.fingerprint not in groups:
                groups[entry.fingerprint] = [
                    self.entries[i] for i in self.find_by_fingerprint(entry.fingerprint)
                ]

        return [group for group in groups.values() if len(group) > 1]


__all__ = ['Database']
