"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/rules.py
Ordered, append-only store of user classification rules.
"""

import logging
import threading
from typing import Tuple

from twinsweep.core.errors import InvalidRuleError
from twinsweep.core.models import Rule

logger = logging.getLogger(__name__)


class RuleStore:
    """
    Keeps user rules in insertion order; evaluation order is insertion order
    and the first matching rule wins.

    Writers are serialized by a lock. The rules live in an immutable tuple that
    is swapped on every append, so a reader sees either the old or the new
    sequence and never a partially appended rule.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._rules: Tuple[Rule, ...] = ()

    def add(self, rule: Rule) -> None:
        """
        Appends a rule.

        Raises:
            InvalidRuleError: if `rule` is not a complete Rule.
        """
        if not isinstance(rule, Rule):
            raise InvalidRuleError(f"Rule must have type, pattern, and category, got {rule!r}")

        with self._lock:
            self._rules = self._rules + (rule,)
        logger.debug(f"Rule added: {rule}")

    def list(self) -> Tuple[Rule, ...]:
        """Read-only snapshot of the rules in evaluation order."""
        return self._rules

    def clear(self) -> None:
        with self._lock:
            self._rules = ()

    def __len__(self) -> int:
        return len(self._rules)

    def __iter__(self):
        return iter(self._rules)
