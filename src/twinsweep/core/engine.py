"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/engine.py
Duplicate detection engine: the single entry point used by the CLI and any
other caller.

PIPELINE
--------
1. Clear the duplicate cache
2. Walk the roots sequentially (FileScannerImpl), keeping regular readable
   files within the size threshold
3. Fingerprint and classify every candidate on a thread pool; each worker
   folds its own FileRecord into the cache with a per-bucket atomic upsert
4. Materialize the duplicate groups (buckets with two or more files)

STATE & LOCKING
---------------
The engine owns the RuleStore and the DuplicateCache. One re-entrant state
lock serializes whole scans, rule additions, cache clearing and path removal,
so a removal or a new rule lands either fully before or fully after a scan's
fold phase. Inside a scan, workers only contend on the cache's lock stripes.

Adding a rule ALWAYS clears the cache: categories of already indexed files may
have changed, and a stale view is worse than forcing a rescan.
"""

import logging
import os
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Any, Callable, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from twinsweep.core.cache import DEFAULT_LOCK_STRIPES, DuplicateCache
from twinsweep.core.classifier import Classifier
from twinsweep.core.errors import InvalidRuleError
from twinsweep.core.hasher import Fingerprinter, algorithm_by_name
from twinsweep.core.interfaces import ActivityRecorder
from twinsweep.core.models import (
    DeletionResult, DuplicateGroup, FileRecord, Rule, ScanParams, ScanStats, ScannedFile)
from twinsweep.core.recorders import GuardedRecorder
from twinsweep.core.rules import RuleStore
from twinsweep.core.scanner import FileScannerImpl
from twinsweep.services.file_service import FileService

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, Optional[int]], None]


class DeduplicationEngine:
    """
    Finds byte-identical files under a set of roots, classifies them and
    keeps the resulting duplicate groups consistent across deletions and
    rule changes.

    Usage:
        engine = DeduplicationEngine(ScanParams(roots=["~/Downloads"]), recorder=LoggingActivityRecorder())
        engine.add_rule(Rule(RuleKind.FILE_EXTENSION, ".log", "Logs"))
        groups = engine.scan()
        result = engine.delete_paths([groups[0].members[1].path])
    """

    def __init__(
            self,
            params: Optional[ScanParams] = None,
            recorder: Optional[ActivityRecorder] = None,
            file_service=FileService,
            stripes: int = DEFAULT_LOCK_STRIPES,
    ):
        self.params = params or ScanParams()
        self.recorder = recorder if isinstance(recorder, GuardedRecorder) else GuardedRecorder(recorder)
        self.file_service = file_service

        self.rule_store = RuleStore()
        self.cache = DuplicateCache(stripes)
        self.classifier = Classifier(self.rule_store, self.recorder)
        self.fingerprinter = Fingerprinter(algorithm_by_name(self.params.algorithm), self.params.chunk_size)
        self.scanner = FileScannerImpl(
            max_size=self.params.max_size_bytes,
            min_size=self.params.min_size_bytes,
            recorder=self.recorder,
        )
        self.last_stats = ScanStats()
        self._state_lock = threading.RLock()

        for rule in self.params.rules:
            self.rule_store.add(rule)

        self.recorder.record(f"Engine initialized with target directories: {self.params.roots}")

    # =============================
    # Rules
    # =============================
    def add_rule(self, rule: Union[Rule, Mapping[str, Any]]) -> None:
        """
        Appends a classification rule and clears the duplicate cache.

        Args:
            rule: Rule instance or mapping with kind (or type), pattern and category

        Raises:
            InvalidRuleError: if the rule is incomplete; nothing is changed.
        """
        try:
            if isinstance(rule, Mapping):
                rule = Rule.from_dict(rule)
            with self._state_lock:
                self.rule_store.add(rule)
                self.cache.clear()
        except InvalidRuleError:
            self.recorder.record(f"Attempted to add invalid rule: {rule!r}")
            raise

        self.recorder.record(
            f"Added new rule - Type: {rule.kind.value}, Pattern: {rule.pattern}, Category: {rule.category}")

    def list_rules(self) -> Tuple[Rule, ...]:
        """Rules in evaluation order."""
        return self.rule_store.list()

    # =============================
    # Scanning
    # =============================
    def scan(
            self,
            roots: Optional[Sequence[str]] = None,
            stopped_flag: Optional[Callable[[], bool]] = None,
            progress_callback: Optional[ProgressCallback] = None
    ) -> List[DuplicateGroup]:
        """
        Rebuilds the cache from scratch and returns the duplicate groups.

        Args:
            roots: Directories to scan; defaults to the configured roots
            stopped_flag: Returns True if the scan should be cancelled
            progress_callback: (stage, current, total) with stages 'scanning' and 'hashing'

        Returns:
            Duplicate groups, or an empty list if cancelled (partial results are discarded)

        Raises:
            RootTraversalError: a root could not be fully traversed
            ValueError: no roots given or configured
        """
        if roots is None:
            roots = self.params.roots
        elif isinstance(roots, (str, os.PathLike)):
            roots = [roots]
        roots = [os.fspath(r) for r in roots]
        if not roots:
            raise ValueError("No root directories to scan")

        self.recorder.record(f"Starting duplicate file scan in directories: {roots}")
        start_time = time.time()

        with self._state_lock:
            self.cache.clear()
            try:
                candidates = self.scanner.scan(roots, stopped_flag=stopped_flag,
                                               progress_callback=progress_callback)
                indexed, fold_cancelled = self._fold(
                    candidates, self.rule_store.list(), stopped_flag, progress_callback)
            except BaseException:
                self.cache.clear()
                raise

            if self.scanner.cancelled or fold_cancelled:
                self.cache.clear()
                self.recorder.record("Scan cancelled, partial results discarded")
                return []

            groups = self.cache.materialize()

        grouped_files = sum(group.duplicate_count for group in groups)
        elapsed = time.time() - start_time
        self.last_stats = ScanStats(
            elapsed=elapsed,
            files_seen=self.scanner.files_seen,
            files_indexed=indexed,
            files_skipped=self.scanner.files_seen - indexed,
            groups=len(groups),
            grouped_files=grouped_files,
        )
        self.recorder.record(
            f"Scan completed in {int(elapsed * 1000)} ms. "
            f"Found {len(groups)} duplicate groups containing {grouped_files} files total")
        return groups

    def _fold(
            self,
            candidates: List[ScannedFile],
            rules: Sequence[Rule],
            stopped_flag: Optional[Callable[[], bool]],
            progress_callback: Optional[ProgressCallback]
    ) -> Tuple[int, bool]:
        """
        Processes candidates in parallel. Each candidate is handled on its own;
        completion order does not matter because folding is keyed by fingerprint.

        Returns:
            (number of files indexed, whether stopped_flag interrupted the fold)
        """
        if not candidates:
            return 0, False

        workers = self.params.workers or os.cpu_count() or 1
        total = len(candidates)
        processed = 0
        indexed = 0
        cancelled = False

        with ThreadPoolExecutor(max_workers=min(workers, total)) as executor:
            futures = [executor.submit(self._process_candidate, c, rules) for c in candidates]
            for future in as_completed(futures):
                if future.result():
                    indexed += 1
                processed += 1

                if progress_callback:
                    progress_callback('hashing', processed, total)

                if stopped_flag and stopped_flag():
                    logger.debug("Hashing interrupted by user")
                    cancelled = True
                    for pending in futures:
                        pending.cancel()
                    break

        return indexed, cancelled

    def _process_candidate(self, candidate: ScannedFile, rules: Sequence[Rule]) -> bool:
        """Fingerprints, classifies and folds one file. Returns False if it was skipped."""
        try:
            fingerprint = self.fingerprinter.fingerprint(candidate.path)
        except OSError as e:
            self.recorder.record(f"Error processing file: {candidate.path} - {e}")
            return False

        category = self.classifier.classify(candidate.path, candidate.name, rules)
        self.cache.add(FileRecord(
            path=candidate.path,
            fingerprint=fingerprint,
            category=category,
            size=candidate.size,
        ))
        logger.debug(f"Processed file: {candidate.path} (Hash: {fingerprint}, Category: {category})")
        return True

    # =============================
    # Cache views & deletion
    # =============================
    def duplicate_groups(self) -> List[DuplicateGroup]:
        """Current duplicate groups, reflecting deletions since the last scan."""
        with self._state_lock:
            return self.cache.materialize()

    def cache_size(self) -> int:
        """Number of duplicate groups currently cached."""
        return self.cache.group_count()

    def clear_cache(self) -> None:
        with self._state_lock:
            self.cache.clear()
        self.recorder.record("Cleared duplicate caches")

    def delete_paths(self, paths: Iterable[str]) -> DeletionResult:
        """
        Deletes files from disk and prunes them from the cache.

        Every path is attempted; failures don't stop the batch. A path that
        doesn't exist is reported as failed and leaves the cache untouched.
        """
        if isinstance(paths, (str, os.PathLike)):
            paths = [paths]
        requested = list(dict.fromkeys(os.fspath(p) for p in (paths or [])))
        if not requested:
            self.recorder.record("Delete operation called with empty file list")
            return DeletionResult()

        self.recorder.record(f"Attempting to delete {len(requested)} files")
        deleted = set()
        failed = set()

        for path in requested:
            try:
                self.file_service.delete_file(path, use_trash=self.params.use_trash)
            except FileNotFoundError:
                self.recorder.record(f"File not found for deletion: {path}")
                failed.add(path)
                continue
            except (RuntimeError, OSError) as e:
                self.recorder.record(f"Failed to delete {path}: {e}")
                failed.add(path)
                continue

            with self._state_lock:
                self.cache.remove_path(os.path.abspath(path))
            deleted.add(path)
            self.recorder.record(f"Deleted file: {path}")

        if failed:
            self.recorder.record(
                f"Failed to delete {len(failed)} files: {', '.join(sorted(failed))}")
        self.recorder.record(
            f"Delete operation completed. Successfully deleted {len(deleted)} of {len(requested)} files")

        return DeletionResult(deleted=frozenset(deleted), failed=frozenset(failed))
