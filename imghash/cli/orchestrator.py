"""
CLI workflow orchestration for imghash.

Provides the CLIOrchestrator class that resolves configuration once, loads
and saves the database at the boundary, and dispatches each subcommand.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Optional, Sequence

from ..database import Database, DatabaseError, index_file
from ..hashing import Hasher, get_hasher, hash_file, fingerprint_from_hex, has_heif_support
from ..hashing.dependencies import Image, HAS_TQDM, _tqdm_class
from ..user_config import get_user_config, resolve_database_file
from .arg_parser import parse_arguments


# Errors a single unreadable image can raise while being decoded and hashed
IMAGE_ERRORS = (OSError, ValueError, Image.DecompressionBombError)


def setup_logging(verbose: bool = False) -> logging.Logger:
    """
    Configure logging for the CLI.

    Args:
        verbose: Enable verbose (DEBUG level) logging

    Returns:
        Configured logger instance
    """
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    return logging.getLogger(__name__)


class CLIOrchestrator:
    """
    Runs one imghash subcommand.

    Configuration (database path, hasher, search distance) is resolved
    here and passed explicitly to the hashing and database layers.
    """

    def __init__(self, argv: Optional[Sequence[str]] = None):
        """
        Initialize the orchestrator.

        Args:
            argv: Argument list (default: sys.argv[1:])
        """
        self.argv = argv
        self.args = None
        self.logger = logging.getLogger(__name__)
        self.config = get_user_config()
        self.db_file = ""
        self.hasher: Optional[Hasher] = None

    def run(self) -> int:
        """
        Execute the selected subcommand.

        Returns:
            Exit code (0 for success, 1 for error)
        """
        self.args = parse_arguments(self.argv)
        self.logger = setup_logging(self.args.verbose)

        try:
            self.db_file = resolve_database_file(self.args.db)
            self.hasher = get_hasher(self.args.hasher or self.config.hasher)
        except ValueError as e:
            self.logger.error(str(e))
            return 1

        handler = getattr(self, f"_cmd_{self.args.command}")
        try:
            return handler()
        except (DatabaseError, OSError) as e:
            self.logger.error(f"{self.db_file}: {e}")
            return 1

    def _load_database(self, must_exist: bool = True) -> Database:
        """Load the configured database, or start an empty one."""
        if not must_exist and not os.path.exists(self.db_file):
            self.logger.info(f"Creating new database: {self.db_file}")
            return Database()

        database = Database.from_file(self.db_file)
        self.logger.debug(f"Loaded {len(database):,} entries from {self.db_file}")
        return database

    def _cmd_hash(self) -> int:
        exit_code = 0
        for filepath in self.args.files:
            try:
                fingerprint = hash_file(filepath, self.hasher)
            except IMAGE_ERRORS as e:
                self.logger.error(f"Cannot hash {filepath}: {e}")
                exit_code = 1
                continue
            print(f"{fingerprint:016x} {filepath}")
        return exit_code

    def _cmd_add(self) -> int:
        database = self._load_database(must_exist=False)

        if not database.root:
            database.root = str(Path(self.args.root or os.getcwd()).resolve())
            self.logger.info(f"Database root: {database.root}")
        elif self.args.root and Path(self.args.root).resolve() != Path(database.root).resolve():
            self.logger.error(
                f"Database root is {database.root}; cannot re-root to {self.args.root}"
            )
            return 1

        files = self.args.files
        pbar = None
        if HAS_TQDM and not self.args.no_progress and len(files) > 1 and _tqdm_class is not None:
            pbar = _tqdm_class(total=len(files), desc="Hashing images", unit="img", ncols=80)

        updated = errors = 0
        try:
            for filepath in files:
                try:
                    if index_file(database, filepath, self.hasher, force=self.args.force):
                        updated += 1
                except IMAGE_ERRORS as e:
                    self.logger.warning(f"Skipping {filepath}: {e}")
                    errors += 1
                if pbar is not None:
                    pbar.update(1)
        finally:
            if pbar is not None:
                pbar.close()

        database.save(self.db_file)
        self.logger.info(
            f"Updated {updated:,} of {len(files):,} files "
            f"({len(database):,} entries, {errors:,} errors)"
        )
        return 1 if errors else 0

    def _cmd_search(self) -> int:
        database = self._load_database()

        try:
            if self.args.fingerprint is not None:
                query = fingerprint_from_hex(self.args.fingerprint)
            else:
                query = hash_file(self.args.file, self.hasher)
        except IMAGE_ERRORS as e:
            self.logger.error(f"Invalid query: {e}")
            return 1

        max_distance = self.args.distance
        if max_distance is None:
            max_distance = self.config.max_distance

        results = database.search(query, max_distance)
        if self.args.json:
            print(json.dumps({
                'root': database.root,
                'query': f"{query:016x}",
                'max_distance': max_distance,
                'results': [r.to_dict() for r in results],
            }, indent=2))
        else:
            for result in results:
                print(f"{result.distance:2d} {result.fingerprint_hex} {result.path}")
            self.logger.info(f"{len(results):,} matches within distance {max_distance}")
        return 0

    def _cmd_dupes(self) -> int:
        database = self._load_database()
        groups = database.duplicate_groups()

        if self.args.json:
            print(json.dumps([[e.to_dict() for e in group] for group in groups], indent=2))
        else:
            for i, group in enumerate(groups, 1):
                print(f"Group {i} ({group[0].fingerprint_hex}):")
                for entry in group:
                    print(f"  {entry.path}")
            self.logger.info(f"Found {len(groups):,} duplicate groups")
        return 0

    def _cmd_config(self) -> int:
        if self.args.init:
            if not self.config.create_example_config():
                return 1
            print(f"Created example configuration file at:\n  {self.config.config_file_path}")
            return 0

        print(f"Configuration file: {self.config.config_file_path}")
        print(f"Status: {'found' if self.config.config_file_path.exists() else 'not found (using defaults)'}")
        print(f"\nCurrent settings:")
        print(f"  database_file: {self.db_file}")
        print(f"  max_distance: {self.config.max_distance}")
        print(f"  hasher: {self.hasher.name}")
        print(f"  heif_support: {'yes' if has_heif_support() else 'no (pip install pillow-heif)'}")
        return 0


__all__ = ['CLIOrchestrator', 'setup_logging']
