"""
Hamming distance between fingerprints.
"""

from __future__ import annotations

from ..config import FINGERPRINT_MASK


def distance(a: int, b: int) -> int:
    """
    Count the bit positions in which two 64-bit fingerprints differ.

    Args:
        a: First fingerprint
        b: Second fingerprint

    Returns:
        Hamming distance in the range 0-64

    Examples:
        >>> distance(0x0, 0xFFFFFFFFFFFFFFFF)
        64
        >>> distance(0b1010, 0b0110)
        2
    """
    return bin((a ^ b) & FINGERPRINT_MASK).count('1')


__all__ = ['distance']
