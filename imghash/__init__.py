"""
imghash
=======
Perceptual image fingerprints with a searchable fingerprint database.

Features:
- 64-bit average hash (plus dHash/pHash alternatives via imagehash)
- Hamming distance search over a plain-text database
- Change detection by file modification time
- CLI for indexing and near-duplicate lookup
"""

__version__ = "1.0.0"

from .models import Entry, SearchResult
from .config import HASH_SIZE, FINGERPRINT_BITS, DB_ENV_VAR
from .hashing import (
    Hasher,
    AverageHasher,
    DifferenceHasher,
    PerceptualHasher,
    get_hasher,
    hash_file,
    distance,
)
from .database import (
    Database,
    DatabaseError,
    InvalidDatabaseError,
    DatabaseParseError,
    index_file,
)

__all__ = [
    "Entry",
    "SearchResult",
    "HASH_SIZE",
    "FINGERPRINT_BITS",
    "DB_ENV_VAR",
    "Hasher",
    "AverageHasher",
    "DifferenceHasher",
    "PerceptualHasher",
    "get_hasher",
    "hash_file",
    "distance",
    "Database",
    "DatabaseError",
    "InvalidDatabaseError",
    "DatabaseParseError",
    "index_file",
]
