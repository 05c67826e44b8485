"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/cache.py
In-memory index of scanned files and the duplicate groups derived from it.

Two indexes are kept side by side:
  • fingerprint index: fingerprint → ordered set of paths (a "bucket")
  • category index:    path → category

A third, private map (path → fingerprint) locates the owning bucket of a path
directly, so removing a path never has to walk the buckets.

Writes use lock striping: each fingerprint hashes to one of N locks, so workers
folding records with different fingerprints don't contend. Operations that
touch everything (clear) take all stripes in a fixed order.
"""

import logging
import threading
from contextlib import ExitStack
from typing import Dict, List, Optional, Tuple

from twinsweep.core.models import DuplicateGroup, DuplicateMember, FileRecord

logger = logging.getLogger(__name__)

DEFAULT_LOCK_STRIPES = 64


class DuplicateCache:
    """
    Owns the fingerprint and category indexes.

    Invariants:
      • every indexed path belongs to exactly one bucket, once
      • every path in a bucket has a category
    """

    def __init__(self, stripes: int = DEFAULT_LOCK_STRIPES):
        if stripes < 1:
            raise ValueError("At least one lock stripe is required")
        self._stripes = [threading.Lock() for _ in range(stripes)]
        self._buckets: Dict[str, Dict[str, None]] = {}
        self._categories: Dict[str, str] = {}
        self._owners: Dict[str, str] = {}

    def _lock_for(self, fingerprint: str) -> threading.Lock:
        return self._stripes[hash(fingerprint) % len(self._stripes)]

    # =============================
    # Mutation
    # =============================
    def add(self, record: FileRecord) -> None:
        """
        Atomic insert-or-append of one record into its bucket.
        The category is stored before the path becomes visible in the bucket.

        Raises:
            ValueError: if the path is already indexed under another fingerprint.
        """
        with self._lock_for(record.fingerprint):
            owner = self._owners.get(record.path)
            if owner is not None and owner != record.fingerprint:
                raise ValueError(f"Path already indexed with a different fingerprint: {record.path}")

            self._categories[record.path] = record.category
            self._owners[record.path] = record.fingerprint
            self._buckets.setdefault(record.fingerprint, {})[record.path] = None

    def remove_path(self, path: str) -> bool:
        """
        Removes a path from both indexes.

        If its bucket is left with fewer than two members, the bucket is dropped
        entirely together with the remaining file's entries: a lone file is no
        longer a duplicate.

        Returns:
            True if the path was indexed.
        """
        fingerprint = self._owners.get(path)
        if fingerprint is None:
            return False

        with self._lock_for(fingerprint):
            bucket = self._buckets.get(fingerprint, {})
            bucket.pop(path, None)
            self._owners.pop(path, None)
            self._categories.pop(path, None)

            if len(bucket) < 2:
                for survivor in bucket:
                    self._owners.pop(survivor, None)
                    self._categories.pop(survivor, None)
                self._buckets.pop(fingerprint, None)
                logger.debug(f"Dropped bucket {fingerprint} after removing {path}")
        return True

    def clear(self) -> None:
        """Empties both indexes."""
        with ExitStack() as stack:
            for lock in self._stripes:
                stack.enter_context(lock)
            self._buckets.clear()
            self._categories.clear()
            self._owners.clear()

    # =============================
    # Views
    # =============================
    def materialize(self) -> List[DuplicateGroup]:
        """
        Builds the externally visible duplicate groups: buckets with two or
        more paths, each member paired with its category.
        """
        groups = []
        for fingerprint in list(self._buckets):
            with self._lock_for(fingerprint):
                bucket = self._buckets.get(fingerprint)
                if not bucket or len(bucket) < 2:
                    continue
                members = tuple(
                    DuplicateMember(path=path, category=self._categories[path])
                    for path in bucket
                )
            groups.append(DuplicateGroup(fingerprint=fingerprint, members=members))
        return groups

    def group_count(self) -> int:
        """Number of buckets that currently form a duplicate group."""
        return sum(1 for bucket in list(self._buckets.values()) if len(bucket) >= 2)

    def bucket(self, fingerprint: str) -> Tuple[str, ...]:
        with self._lock_for(fingerprint):
            return tuple(self._buckets.get(fingerprint, ()))

    def category_of(self, path: str) -> Optional[str]:
        return self._categories.get(path)

    def fingerprint_of(self, path: str) -> Optional[str]:
        return self._owners.get(path)

    def __contains__(self, path: str) -> bool:
        return path in self._owners

    def __len__(self) -> int:
        """Number of indexed paths."""
        return len(self._owners)
