"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/classifier.py
Assigns a human-meaningful category to a file.

User rules are evaluated first, in insertion order; the first matching rule
decides the category. When no rule matches, a built-in taxonomy of filename
and extension patterns is applied, ending at "Uncategorized".
"""

import os
import re
from functools import lru_cache
from typing import Optional, Pattern, Sequence, Tuple

from twinsweep.core.interfaces import ActivityRecorder
from twinsweep.core.models import Rule, RuleKind
from twinsweep.core.recorders import GuardedRecorder
from twinsweep.core.rules import RuleStore

UNCATEGORIZED = "Uncategorized"

# Order matters: the first matching entry wins.
_FALLBACK_TAXONOMY: Tuple[Tuple[str, Pattern], ...] = (
    ("Build Config", re.compile(r'(package\.json|dockerfile|webpack\.config\.js|\.env|pom\.xml)')),
    ("Web Frontend", re.compile(r'.*\.(html|css|js|jsx|ts|tsx|vue)')),
    ("Web Backend", re.compile(r'.*\.(py|java|php|rb|go|cs)')),
    ("Data Files", re.compile(r'.*\.(json|xml|csv|yaml|yml)')),
    ("Database", re.compile(r'.*\.sql')),
    ("Documents", re.compile(r'.*\.(pdf|docx?|txt|rtf|odt|md)')),
    ("Images", re.compile(r'.*\.(jpg|jpeg|png|gif|svg|webp)')),
    ("Videos", re.compile(r'.*\.(mp4|mov|avi|mkv|wmv|flv)')),
    ("Audio", re.compile(r'.*\.(mp3|wav|aac|flac|ogg)')),
    ("Archives", re.compile(r'.*\.(zip|rar|7z|tar|gz)')),
    ("Executables", re.compile(r'.*\.(exe|msi|bat|sh|dll)')),
)


@lru_cache(maxsize=1024)
def _compile(pattern: str) -> Pattern:
    return re.compile(pattern)


def categorize_by_name(filename: str) -> str:
    """
    Built-in category for a file name.

    Examples:
        "package.json" → "Build Config"
        "App.TSX" → "Web Frontend"
        "notes.txt" → "Documents"
        "server.log" → "Uncategorized"
    """
    if not filename:
        return UNCATEGORIZED

    name = filename.lower()
    for category, pattern in _FALLBACK_TAXONOMY:
        if pattern.fullmatch(name):
            return category
    return UNCATEGORIZED


class Classifier:
    """
    Evaluates RuleStore rules against a file, falling back to the built-in taxonomy.
    Never raises for a bad rule: a regex that doesn't compile is treated as
    non-matching and reported to the activity recorder.
    """

    def __init__(self, rule_store: RuleStore, recorder: Optional[ActivityRecorder] = None):
        self.rule_store = rule_store
        self.recorder = recorder if isinstance(recorder, GuardedRecorder) else GuardedRecorder(recorder)

    def classify(self, path: str, filename: Optional[str] = None,
                 rules: Optional[Sequence[Rule]] = None) -> str:
        """
        Returns exactly one category for the file.

        Args:
            path: Full path of the file
            filename: Base name; derived from `path` when omitted
            rules: Rule snapshot to evaluate; defaults to the store's current rules
        """
        if filename is None:
            filename = os.path.basename(path)
        if rules is None:
            rules = self.rule_store.list()

        for rule in rules:
            if self.matches(rule, path, filename):
                return rule.category

        return categorize_by_name(filename)

    def matches(self, rule: Rule, path: str, filename: str) -> bool:
        if rule.kind is RuleKind.PATH_CONTAINS:
            return rule.pattern in path
        if rule.kind is RuleKind.FILE_EXTENSION:
            return filename.lower().endswith(rule.pattern.lower())
        if rule.kind is RuleKind.NAME_REGEX:
            try:
                return _compile(rule.pattern).search(filename) is not None
            except re.error as e:
                self.recorder.record(f"Error applying rule {rule} to file {filename}: {e}")
                return False
        raise AssertionError(f"Unhandled rule kind: {rule.kind!r}")
