"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/errors.py
Exception types raised by the duplicate detection engine.
"""


class TwinSweepError(Exception):
    """Base class for all engine errors."""


class InvalidRuleError(TwinSweepError, ValueError):
    """A classification rule is missing its kind, pattern or category."""


class RootTraversalError(TwinSweepError, RuntimeError):
    """
    A root directory could not be fully traversed.

    Raised instead of returning a partial result: a half-scanned root may hide
    duplicates and mislead a deletion decision.
    """

    def __init__(self, root: str, cause: BaseException):
        self.root = root
        self.cause = cause
        super().__init__(f"Cannot traverse directory '{root}': {cause}")
