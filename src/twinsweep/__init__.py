"""
TwinSweep — duplicate file finder with rule-based classification.

Core features:
- Content fingerprinting (MD5 or xxHash128) streamed in fixed-size chunks
- Parallel hashing and classification of candidate files
- User classification rules (path substring, extension, filename regex) with
  a built-in fallback taxonomy
- Duplicate groups kept consistent across deletions and rule changes
- Permanent deletion or safe deletion to system trash (via send2trash)
"""

from importlib.metadata import PackageNotFoundError, version as _version

try:
    __version__ = _version("twinsweep")
except PackageNotFoundError:
    __version__ = "0.0.0"

# Public API: only what users should import directly
from twinsweep.core import (
    DeduplicationEngine, ScanParams, Rule, RuleKind, DuplicateGroup, DuplicateMember,
    DeletionResult, InvalidRuleError, RootTraversalError)
from twinsweep.services import LoggingActivityRecorder, FileService
from twinsweep.utils.convert_utils import ConvertUtils

__all__ = [
    "DeduplicationEngine",
    "ScanParams",
    "Rule",
    "RuleKind",
    "DuplicateGroup",
    "DuplicateMember",
    "DeletionResult",
    "InvalidRuleError",
    "RootTraversalError",
    "LoggingActivityRecorder",
    "FileService",
    "ConvertUtils",
    "__version__",
]
