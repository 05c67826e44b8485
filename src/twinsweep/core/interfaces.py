"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

interfaces.py

Defines core interfaces (Protocols) used throughout the engine.
Structural typing lets callers plug in their own collaborators
(activity sinks, hash functions, scanners) without inheriting from anything.

Key Components:
---------------
- ActivityRecorder: Fire-and-forget sink for human-readable activity messages.
- HashAlgorithm: Factory for incremental hash objects (MD5, xxHash128, ...).
- FileScanner: Walks root directories and returns candidate file paths.
"""

from typing import Callable, List, Optional, Protocol

from twinsweep.core.models import ScannedFile


class ActivityRecorder(Protocol):
    """
    Receives activity messages from the engine.
    Implementations must not block. Any exception raised here is logged by
    the engine and otherwise ignored.
    """
    def record(self, message: str) -> None:
        ...


class HashState(Protocol):
    """Incremental hash object as returned by hashlib / xxhash constructors."""
    def update(self, data: bytes) -> None: ...
    def hexdigest(self) -> str: ...


class HashAlgorithm(Protocol):
    """
    Interface for content hash algorithms.

    Allows plugging in different hashing functions like MD5 or xxHash128
    without affecting the rest of the fingerprinting logic.
    """
    name: str

    def new(self) -> HashState:
        """Returns a fresh incremental hash object."""
        ...


class FileScanner(Protocol):
    """
    Interface for collecting candidate files under a set of roots.
    """
    def scan(
        self,
        roots: List[str],
        stopped_flag: Optional[Callable[[], bool]] = None,
        progress_callback: Optional[Callable[[str, int, object], None]] = None
    ) -> List[ScannedFile]:
        """
        Return regular, readable files within size limits, with absolute paths.

        Raises:
            RootTraversalError: if any root cannot be fully traversed.
        """
        ...
