"""
Hashing package for imghash.

Turns decoded images into 64-bit perceptual fingerprints and measures the
Hamming distance between them.

Public API:
- Hasher: Interface implemented by every fingerprint algorithm
- AverageHasher: Default average hash over an 8x8 grayscale thumbnail
- DifferenceHasher, PerceptualHasher: imagehash-backed alternatives
- get_hasher / available_hashers: Look up algorithms by name
- hash_file: Decode an image file and fingerprint it
- distance: Hamming distance between two fingerprints
- has_heif_support: Check if HEIC/HEIF support is available
"""

from __future__ import annotations

from .distance import distance
from .hashers import (
    Hasher,
    AverageHasher,
    DifferenceHasher,
    PerceptualHasher,
    available_hashers,
    get_hasher,
    hash_file,
    fingerprint_to_hex,
    fingerprint_from_hex,
)
from .dependencies import HAS_HEIF_SUPPORT


def has_heif_support() -> bool:
    """Check if HEIC/HEIF support is available."""
    return HAS_HEIF_SUPPORT


__all__ = [
    'distance',
    'Hasher',
    'AverageHasher',
    'DifferenceHasher',
    'PerceptualHasher',
    'available_hashers',
    'get_hasher',
    'hash_file',
    'fingerprint_to_hex',
    'fingerprint_from_hex',
    'has_heif_support',
]
