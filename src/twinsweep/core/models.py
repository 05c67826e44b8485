"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/models.py
Data models for scanning, classification and duplicate grouping.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, FrozenSet, List, Mapping, Optional, Tuple

from twinsweep.core.errors import InvalidRuleError
from twinsweep.utils.convert_utils import ConvertUtils


# =============================
# Enums
# =============================

class RuleKind(Enum):
    """
    Kind of a user classification rule. The set is closed: every kind is
    handled explicitly by the classifier.
    """
    PATH_CONTAINS = "path-contains"
    FILE_EXTENSION = "file-extension"
    NAME_REGEX = "name-regex"

    @property
    def display_name(self) -> str:
        """Human-readable name for console output."""
        mapping = {
            RuleKind.PATH_CONTAINS: "Path contains",
            RuleKind.FILE_EXTENSION: "File extension",
            RuleKind.NAME_REGEX: "Filename regex",
        }
        return mapping.get(self, self.value)

    @classmethod
    def parse(cls, value: Any) -> "RuleKind":
        """
        Accepts a RuleKind, its value ("file-extension") or its name
        ("FILE_EXTENSION"), case-insensitively. "FILE_NAME_REGEX" is accepted
        as an alias of NAME_REGEX.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str) or not value.strip():
            raise InvalidRuleError(f"Unknown rule kind: {value!r}")

        normalized = value.strip().lower().replace("_", "-")
        if normalized == "file-name-regex":
            return cls.NAME_REGEX
        for kind in cls:
            if kind.value == normalized:
                return kind
        raise InvalidRuleError(
            f"Unknown rule kind: {value!r}. "
            f"Valid kinds: {', '.join(k.value for k in cls)}"
        )

    def __repr__(self) -> str:
        return self.value


# ======================
#  Core Data Models
# ======================

@dataclass(frozen=True)
class Rule:
    """
    A user-defined classification rule. Immutable once created; a rule
    without kind, pattern or category can't be constructed.
    """
    kind: RuleKind
    pattern: str
    category: str

    def __post_init__(self):
        if self.kind is None:
            raise InvalidRuleError("Rule must have type, pattern, and category")
        object.__setattr__(self, "kind", RuleKind.parse(self.kind))

        if not isinstance(self.pattern, str) or not self.pattern:
            raise InvalidRuleError("Rule must have type, pattern, and category")
        if not isinstance(self.category, str) or not self.category.strip():
            raise InvalidRuleError("Rule must have type, pattern, and category")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Rule":
        """Builds a rule from a JSON-like mapping with kind (or type), pattern and category."""
        if not isinstance(data, Mapping):
            raise InvalidRuleError(f"Rule definition must be a mapping, got {type(data).__name__}")
        kind = data.get("kind", data.get("type"))
        return cls(kind=kind, pattern=data.get("pattern"), category=data.get("category"))

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "pattern": self.pattern, "category": self.category}

    def __str__(self) -> str:
        return f"{self.kind.display_name} '{self.pattern}' -> {self.category}"


@dataclass(frozen=True)
class ScannedFile:
    """A regular, readable file accepted by the scanner for fingerprinting."""
    path: str
    size: int

    @property
    def name(self) -> str:
        return os.path.basename(self.path)


@dataclass(frozen=True)
class FileRecord:
    """
    Result of processing one scanned file. Folded into the duplicate cache
    and then discarded.
    """
    path: str
    fingerprint: str
    category: str
    size: int = 0

    @property
    def name(self) -> str:
        return os.path.basename(self.path)


@dataclass(frozen=True)
class DuplicateMember:
    """One file of a duplicate group together with its category."""
    path: str
    category: str

    @property
    def name(self) -> str:
        return os.path.basename(self.path)


@dataclass(frozen=True)
class DuplicateGroup:
    """
    Files sharing one content fingerprint. Read-only snapshot of the cache;
    only produced for fingerprints with at least two files.
    """
    fingerprint: str
    members: Tuple[DuplicateMember, ...]

    @property
    def duplicate_count(self) -> int:
        """How many files are in this group."""
        return len(self.members)

    @property
    def paths(self) -> List[str]:
        return [m.path for m in self.members]

    def is_duplicate(self) -> bool:
        """True if this group contains at least two files."""
        return self.duplicate_count >= 2

    def __repr__(self):
        return f"<DuplicateGroup fingerprint={self.fingerprint}, count={len(self.members)}>"


@dataclass(frozen=True)
class DeletionResult:
    """Outcome of a deletion batch: every requested path lands in exactly one set."""
    deleted: FrozenSet[str] = frozenset()
    failed: FrozenSet[str] = frozenset()

    @property
    def total(self) -> int:
        return len(self.deleted) + len(self.failed)


@dataclass
class ScanStats:
    """
    Statistics collected during the last scan.
    """
    elapsed: float = 0.0
    files_seen: int = 0
    files_indexed: int = 0
    files_skipped: int = 0
    groups: int = 0
    grouped_files: int = 0

    def print_summary(self) -> str:
        lines = [
            "Scan Statistics:",
            f"Total Execution Time: {self.elapsed:.3f}s",
            f"Files seen / indexed / skipped: {self.files_seen} / {self.files_indexed} / {self.files_skipped}",
            f"Duplicate groups: {self.groups} ({self.grouped_files} files)",
        ]
        return "\n".join(lines)


"""
Scan parameters with built-in validation.
"""

DEFAULT_MAX_FILE_SIZE = 100 * 1024 * 1024  # 100MB
DEFAULT_CHUNK_SIZE = 8192  # 8KB read buffer for hashing
SUPPORTED_ALGORITHMS = ("md5", "xxh128")


@dataclass
class ScanParams:
    """Parameters for a scan, validated on creation."""
    roots: List[str] = field(default_factory=list)
    max_size_bytes: int = DEFAULT_MAX_FILE_SIZE
    min_size_bytes: int = 0
    chunk_size: int = DEFAULT_CHUNK_SIZE
    algorithm: str = "md5"
    workers: Optional[int] = None
    rules: List[Rule] = field(default_factory=list)
    use_trash: bool = False

    def __post_init__(self):
        """Validate parameters immediately after creation."""
        if isinstance(self.roots, (str, os.PathLike)):
            self.roots = [self.roots]
        self.roots = [os.fspath(r) for r in (self.roots or []) if r]

        if self.min_size_bytes < 0:
            raise ValueError("Minimum size cannot be negative")

        if self.max_size_bytes < self.min_size_bytes:
            raise ValueError("Maximum size cannot be less than minimum size")

        if self.chunk_size <= 0:
            raise ValueError("Chunk size must be positive")

        if self.workers is not None and self.workers < 1:
            raise ValueError("Worker count must be at least 1")

        self.algorithm = self.algorithm.strip().lower()
        if self.algorithm not in SUPPORTED_ALGORITHMS:
            raise ValueError(
                f"Unsupported hash algorithm: '{self.algorithm}'. "
                f"Supported: {', '.join(SUPPORTED_ALGORITHMS)}"
            )

    @staticmethod
    def from_human_readable(
            roots: List[str],
            max_size_str: str = "100MB",
            min_size_str: str = "0",
            algorithm: str = "md5",
            workers: Optional[int] = None,
            rules: Optional[List[Rule]] = None,
            use_trash: bool = False,
    ) -> 'ScanParams':
        """
        Factory method to create params from human-readable inputs.
        Useful for CLI argument parsing.
        """
        return ScanParams(
            roots=roots,
            max_size_bytes=ConvertUtils.human_to_bytes(max_size_str),
            min_size_bytes=ConvertUtils.human_to_bytes(min_size_str),
            algorithm=algorithm,
            workers=workers,
            rules=list(rules or []),
            use_trash=use_trash,
        )
