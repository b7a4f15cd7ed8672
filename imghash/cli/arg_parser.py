"""
Argument parsing for the CLI interface.

Provides functions to create and configure the argument parser for the
imghash command-line interface.
"""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional, Sequence

from ..config import DB_ENV_VAR, FINGERPRINT_BITS
from ..hashing import available_hashers


def distance_type(value: str) -> int:
    """argparse type for a Hamming distance in the range 0-64."""
    try:
        distance = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}")
    if not 0 <= distance <= FINGERPRINT_BITS:
        raise argparse.ArgumentTypeError(f"must be between 0 and {FINGERPRINT_BITS}: {distance}")
    return distance


def create_parser() -> argparse.ArgumentParser:
    """
    Create and configure the argument parser for the CLI.

    Returns:
        Configured ArgumentParser instance
    """
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        '--db',
        default=None,
        help=f'Database file. Default: ${DB_ENV_VAR}, then config file, then ~/.imghash.db'
    )
    common.add_argument(
        '--hasher',
        choices=available_hashers(),
        default=None,
        help='Fingerprint algorithm. Default: from config (average)'
    )
    common.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging'
    )

    parser = argparse.ArgumentParser(
        prog='imghash',
        description='Perceptual image fingerprints and near-duplicate search',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s hash photo.jpg
      Print the fingerprint of an image

  %(prog)s add --root ~/photos ~/photos/*.jpg
      Index images (only new or modified files are rehashed)

  %(prog)s search ~/Downloads/copy.jpg --distance 8
      List indexed images within 8 bits of the query

  %(prog)s dupes
      List indexed images with identical fingerprints
        """
    )
    subparsers = parser.add_subparsers(dest='command', metavar='COMMAND')
    subparsers.required = True

    hash_parser = subparsers.add_parser(
        'hash', parents=[common], help='Print fingerprints of image files'
    )
    hash_parser.add_argument('files', type=Path, nargs='+', help='Image files')

    add_parser = subparsers.add_parser(
        'add', parents=[common], help='Add or update images in the database'
    )
    add_parser.add_argument('files', type=Path, nargs='+', help='Image files')
    add_parser.add_argument(
        '--root',
        default=None,
        help='Root directory for stored paths (new databases only). Default: current directory'
    )
    add_parser.add_argument(
        '-f', '--force',
        action='store_true',
        help='Rehash files even if their modification time is unchanged'
    )
    add_parser.add_argument(
        '--no-progress',
        action='store_true',
        help='Disable progress bar'
    )

    search_parser = subparsers.add_parser(
        'search', parents=[common], help='Find images similar to a file or fingerprint'
    )
    query = search_parser.add_mutually_exclusive_group(required=True)
    query.add_argument('file', type=Path, nargs='?', default=None, help='Query image')
    query.add_argument('--fingerprint', default=None, help='Query fingerprint (16 hex digits)')
    search_parser.add_argument(
        '-d', '--distance',
        type=distance_type,
        default=None,
        help=f'Maximum Hamming distance (0-{FINGERPRINT_BITS}). Default: from config (5)'
    )
    search_parser.add_argument(
        '--json',
        action='store_true',
        help='Print results as JSON'
    )

    dupes_parser = subparsers.add_parser(
        'dupes', parents=[common], help='List images with identical fingerprints'
    )
    dupes_parser.add_argument(
        '--json',
        action='store_true',
        help='Print groups as JSON'
    )

    config_parser = subparsers.add_parser(
        'config', parents=[common], help='Show configuration'
    )
    config_parser.add_argument(
        '-i', '--init',
        action='store_true',
        help='Create an example configuration file'
    )

    return parser


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Args:
        argv: Argument list (default: sys.argv[1:])

    Returns:
        Parsed arguments namespace
    """
    parser = create_parser()
    return parser.parse_args(argv)


__all__ = ['create_parser', 'parse_arguments', 'distance_type']
