"""
Perceptual fingerprint algorithms.

Every algorithm implements the Hasher interface and produces a 64-bit
unsigned integer, so the database never needs to know which one was used.
The default AverageHasher is computed directly with Pillow and numpy; the
alternatives delegate to the imagehash library.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ..config import HASH_SIZE, FINGERPRINT_WIDTH, DEFAULT_HASHER
from ..models import format_fingerprint
from .dependencies import Image, imagehash, np, _logger


_HEX_FINGERPRINT = re.compile(r'[0-9a-fA-F]{1,%d}' % FINGERPRINT_WIDTH)


class Hasher(ABC):
    """Computes a 64-bit perceptual fingerprint for a decoded image."""

    name = ''

    @abstractmethod
    def compute(self, image: Image.Image) -> int:
        """Return the fingerprint of ``image``."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class AverageHasher(Hasher):
    """
    Average hash over an 8x8 grayscale thumbnail.

    The image is resampled to 8x8 with nearest-neighbor sampling on each
    axis (aspect ratio is not preserved) and reduced to intensity with
    Pillow's own "L" conversion. Integer grayscale ("I;16", "I") keeps
    the high byte of each 16-bit sample instead, since Pillow's "L"
    conversion clips those values at 255. Bit i of the fingerprint
    (value 1 << i, row-major sample order) is set when sample i is at least
    the truncated mean of all 64 samples. A uniform image therefore
    hashes to all ones.
    """

    name = 'average'

    def compute(self, image: Image.Image) -> int:
        width, height = image.size
        if width < 1 or height < 1:
            raise ValueError(f"Cannot hash an empty image ({width}x{height})")

        thumb = image.resize((HASH_SIZE, HASH_SIZE), Image.NEAREST)
        samples = _intensities(thumb)
        mean = int(samples.sum()) // samples.size

        fingerprint = 0
        for bit, value in enumerate(samples.tolist()):
            if value >= mean:
                fingerprint |= 1 << bit
        return fingerprint


def _intensities(image: Image.Image) -> np.ndarray:
    """Flattened 0-255 intensities of an image."""
    if image.mode == 'I' or image.mode.startswith('I;16'):
        wide = np.asarray(image, dtype=np.int64)
        return (np.clip(wide, 0, 0xFFFF) >> 8).ravel()
    return np.asarray(image.convert('L'), dtype=np.uint32).ravel()


class _ImageHashHasher(Hasher):
    """Adapts an imagehash function to the Hasher interface."""

    def compute(self, image: Image.Image) -> int:
        if image.mode not in ('RGB', 'L'):
            image = image.convert('RGB')
        return int(str(self._hash(image)), 16)

    @abstractmethod
    def _hash(self, image: Image.Image) -> imagehash.ImageHash:
        ...


class DifferenceHasher(_ImageHashHasher):
    """Gradient hash (imagehash.dhash) at 8x8."""

    name = 'difference'

    def _hash(self, image):
        return imagehash.dhash(image, hash_size=HASH_SIZE)


class PerceptualHasher(_ImageHashHasher):
    """DCT-based hash (imagehash.phash) at 8x8."""

    name = 'perceptual'

    def _hash(self, image):
        return imagehash.phash(image, hash_size=HASH_SIZE)


_HASHERS = {
    cls.name: cls
    for cls in (AverageHasher, DifferenceHasher, PerceptualHasher)
}


def available_hashers() -> list[str]:
    """Names accepted by get_hasher()."""
    return sorted(_HASHERS)


def get_hasher(name: str = DEFAULT_HASHER) -> Hasher:
    """
    Create a hasher by name.

    Args:
        name: One of available_hashers()

    Returns:
        A new Hasher instance

    Raises:
        ValueError: If the name is unknown
    """
    try:
        return _HASHERS[name]()
    except KeyError:
        raise ValueError(
            f"Unknown hasher: {name!r}. Use one of: {', '.join(available_hashers())}"
        ) from None


def hash_file(filepath: str | Path, hasher: Optional[Hasher] = None) -> int:
    """
    Decode an image file and compute its fingerprint.

    Args:
        filepath: Path to the image
        hasher: Algorithm to use (default: AverageHasher)

    Returns:
        64-bit fingerprint

    Raises:
        OSError: If the file cannot be read or decoded
    """
    hasher = hasher or AverageHasher()
    with Image.open(filepath) as img:
        img.load()  # Force decode so truncated files fail here
        fingerprint = hasher.compute(img)
    _logger.debug(f"{hasher.name} hash of {filepath}: {format_fingerprint(fingerprint)}")
    return fingerprint


def fingerprint_to_hex(fingerprint: int) -> str:
    """Format a fingerprint as 16 lowercase hex digits."""
    return format_fingerprint(fingerprint)


def fingerprint_from_hex(text: str) -> int:
    """
    Parse a fingerprint written as up to 16 hex digits.

    Raises:
        ValueError: If the text is not plain hex of the right length
    """
    text = text.strip()
    if not _HEX_FINGERPRINT.fullmatch(text):
        raise ValueError(f"Invalid fingerprint: {text!r}")
    return int(text, 16)


__all__ = [
    'Hasher',
    'AverageHasher',
    'DifferenceHasher',
    'PerceptualHasher',
    'available_hashers',
    'get_hasher',
    'hash_file',
    'fingerprint_to_hex',
    'fingerprint_from_hex',
]
