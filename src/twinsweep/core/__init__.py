"""
Core duplicate detection engine — scanner, fingerprinter, classifier and cache.

This package contains the performance-critical foundation of TwinSweep:
- FileScannerImpl: recursive directory traversal with size filters
- Fingerprinter + Md5AlgorithmImpl / XXHash128AlgorithmImpl: streaming content hashing
- RuleStore + Classifier: user rules with a built-in fallback taxonomy
- DuplicateCache: fingerprint and category indexes, duplicate group views
- DeduplicationEngine: scan / rule / deletion API tying it all together

All components are pure Python with no UI dependencies.
"""

from .errors import TwinSweepError, InvalidRuleError, RootTraversalError
from .models import (
    RuleKind, Rule, ScannedFile, FileRecord, DuplicateMember, DuplicateGroup,
    DeletionResult, ScanStats, ScanParams)
from .rules import RuleStore
from .classifier import Classifier, categorize_by_name, UNCATEGORIZED
from .hasher import Fingerprinter, Md5AlgorithmImpl, XXHash128AlgorithmImpl
from .scanner import FileScannerImpl
from .cache import DuplicateCache
from .engine import DeduplicationEngine

__all__ = [
    "TwinSweepError",
    "InvalidRuleError",
    "RootTraversalError",
    "RuleKind",
    "Rule",
    "ScannedFile",
    "FileRecord",
    "DuplicateMember",
    "DuplicateGroup",
    "DeletionResult",
    "ScanStats",
    "ScanParams",
    "RuleStore",
    "Classifier",
    "categorize_by_name",
    "UNCATEGORIZED",
    "Fingerprinter",
    "Md5AlgorithmImpl",
    "XXHash128AlgorithmImpl",
    "FileScannerImpl",
    "DuplicateCache",
    "DeduplicationEngine",
]
