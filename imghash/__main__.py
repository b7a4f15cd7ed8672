"""
Allow running the package with: python -m imghash

Examples:
    python -m imghash hash photo.jpg
    python -m imghash add --root ~/photos ~/photos/*.jpg
    python -m imghash search photo.jpg --distance 8
    python -m imghash config --init
"""

import sys

from .cli import main


if __name__ == '__main__':
    sys.exit(main())
