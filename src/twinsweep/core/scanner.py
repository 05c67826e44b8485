"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/scanner.py
Implements the directory walk that feeds the fingerprinting stage.
Features:
- Recursively scans every root with os.walk (symlinked directories are not followed)
- Keeps only regular, readable, non-symlink files
- Applies the size threshold, reporting oversized files
- De-duplicates by (device, inode) so overlapping or symlinked roots never
  yield the same file twice
- Treats any traversal error as fatal for the scan
"""

import os
import stat
import time
import logging
from pathlib import Path
from typing import Callable, List, Optional, Set, Tuple

from twinsweep.core.errors import RootTraversalError
from twinsweep.core.interfaces import ActivityRecorder, FileScanner
from twinsweep.core.models import DEFAULT_MAX_FILE_SIZE, ScannedFile
from twinsweep.core.recorders import GuardedRecorder

logger = logging.getLogger(__name__)


def _raise_walk_error(error: OSError) -> None:
    raise error


class FileScannerImpl(FileScanner):
    """
    Walks root directories and collects candidate files for fingerprinting.

    Attributes:
        max_size: Files larger than this (bytes) are excluded
        min_size: Files smaller than this (bytes) are excluded
        files_seen: Number of directory entries examined by the last scan
        files_skipped: Number of entries rejected by the last scan
        cancelled: True if the last scan was stopped through `stopped_flag`
    """

    def __init__(
        self,
        max_size: int = DEFAULT_MAX_FILE_SIZE,
        min_size: int = 0,
        recorder: Optional[ActivityRecorder] = None
    ):
        self.max_size = max_size
        self.min_size = min_size
        self.recorder = recorder if isinstance(recorder, GuardedRecorder) else GuardedRecorder(recorder)
        self.files_seen = 0
        self.files_skipped = 0
        self.cancelled = False

    def scan(self,
             roots: List[str],
             stopped_flag: Optional[Callable[[], bool]] = None,
             progress_callback: Optional[Callable[[str, int, object], None]] = None) -> List[ScannedFile]:
        """
        Sequential walk over all roots.
        Returns the accepted files, or an empty list if cancelled.

        Raises:
            RootTraversalError: a root is missing, not a directory, or some
                directory inside it can't be listed.
        """
        self.files_seen = 0
        self.files_skipped = 0
        self.cancelled = False

        found_files: List[ScannedFile] = []
        seen_paths: Set[str] = set()
        # (st_dev, st_ino) of accepted files: the same file reached through a
        # symlinked root or a hard link is indexed once
        seen_ids: Set[Tuple[int, int]] = set()

        # Progress throttling: update every N files
        progress_interval = 1000
        progress_counter = 0
        start_time = time.time()

        for root in roots:
            if stopped_flag and stopped_flag():
                logger.debug("Scan interrupted by user")
                self.cancelled = True
                return []

            root_path = self._validate_root(root)
            logger.debug(f"Scanning directory: {root_path}")

            try:
                for dirpath, dirs, files in os.walk(root_path, onerror=_raise_walk_error):
                    if stopped_flag and stopped_flag():
                        logger.debug("Scan interrupted by user")
                        self.cancelled = True
                        return []

                    for filename in files:
                        path = os.path.join(dirpath, filename)
                        if path in seen_paths:
                            continue
                        seen_paths.add(path)
                        self.files_seen += 1

                        scanned = self._process_file(path, seen_ids)
                        if scanned:
                            found_files.append(scanned)
                        else:
                            self.files_skipped += 1

                        progress_counter += 1
                        if progress_callback and progress_counter >= progress_interval:
                            progress_callback('scanning', self.files_seen, None)
                            progress_counter = 0
            except OSError as e:
                self.recorder.record(f"Error scanning directory {root}: {e}")
                logger.error(f"Cannot traverse {root}: {e}")
                raise RootTraversalError(root, e) from e

        if progress_callback and progress_counter > 0:
            progress_callback('scanning', self.files_seen, None)

        logger.debug(f"Walk finished in {time.time() - start_time:.2f} seconds, "
                     f"{len(found_files)} of {self.files_seen} files accepted")
        return found_files

    def _validate_root(self, root: str) -> str:
        """Returns the absolute, normalized root or raises RootTraversalError."""
        root_path = Path(root).expanduser()
        if not root_path.exists():
            error = FileNotFoundError(f"Directory does not exist: {root}")
        elif not root_path.is_dir():
            error = NotADirectoryError(f"Not a directory: {root}")
        else:
            return os.path.abspath(str(root_path))

        self.recorder.record(f"Error scanning directory {root}: {error}")
        logger.error(str(error))
        raise RootTraversalError(root, error)

    def _process_file(self, path: str, seen_ids: Set[Tuple[int, int]]) -> Optional[ScannedFile]:
        """
        Checks one directory entry. A file whose (device, inode) pair is
        already in `seen_ids` is an alias of an accepted file and is skipped.
        Returns:
            ScannedFile if the entry passes all filters, else None
        """
        try:
            if os.path.islink(path):
                logger.debug(f"Skipping symbolic link: {path}")
                return None
            stat_result = os.stat(path)
        except OSError as e:
            self.recorder.record(f"Error checking size of file {path}: {e}")
            return None

        if not stat.S_ISREG(stat_result.st_mode):
            logger.debug(f"Skipping non-regular file: {path}")
            return None

        if not os.access(path, os.R_OK):
            logger.debug(f"Skipping unreadable file: {path}")
            return None

        size = stat_result.st_size
        if not self._size_passes(size):
            if self.max_size is not None and size > self.max_size:
                self.recorder.record(f"Skipping large file: {path} ({size} bytes)")
            else:
                logger.debug(f"Skipping {path} (size {size} bytes below minimum)")
            return None

        identity = (stat_result.st_dev, stat_result.st_ino)
        if stat_result.st_ino and identity in seen_ids:
            logger.debug(f"Skipping {path}: same file already indexed under another path")
            return None
        seen_ids.add(identity)

        return ScannedFile(path=path, size=size)

    def _size_passes(self, size: int) -> bool:
        """
        Check if file size is within configured limits.
        """
        if self.min_size is not None and size < self.min_size:
            return False
        if self.max_size is not None and size > self.max_size:
            return False
        return True
