"""
Configuration constants for imghash.

This module contains the fixed settings shared by the hashing and
database layers:
- Fingerprint geometry
- Database file field widths
- Default locations and search parameters
"""

import os

# Fingerprints are built from an 8x8 grid, one bit per sample
HASH_SIZE = 8
FINGERPRINT_BITS = HASH_SIZE * HASH_SIZE
FINGERPRINT_MASK = (1 << FINGERPRINT_BITS) - 1

# Database file layout: "<16 hex> <15 hex> <path>"
FINGERPRINT_WIDTH = 16
MODIFIED_AT_WIDTH = 15
ENTRY_PREFIX_LENGTH = FINGERPRINT_WIDTH + 1 + MODIFIED_AT_WIDTH + 1  # 33
MIN_ENTRY_LINE_LENGTH = ENTRY_PREFIX_LENGTH + 1  # at least one path character

# Largest/smallest modified_at values that fit the fixed-width field
MAX_MODIFIED_AT = 16 ** MODIFIED_AT_WIDTH - 1
MIN_MODIFIED_AT = -(16 ** (MODIFIED_AT_WIDTH - 1) - 1)

# Environment variable naming the database file
DB_ENV_VAR = 'IMGHASH_DB'

# Default search radius (Hamming distance, 0-64)
# Recommended: 0-10 for near-duplicates
DEFAULT_MAX_DISTANCE = 5

# Default fingerprint algorithm
DEFAULT_HASHER = 'average'

# Database file used when nothing else is configured
DEFAULT_DB_FILE = os.path.join(os.path.expanduser('~'), '.imghash.db')
