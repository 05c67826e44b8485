"""
Tests for rule and parameter models — rules must be complete before they can be stored.
"""
import pytest
from twinsweep.core.errors import InvalidRuleError
from twinsweep.core.models import (
    DuplicateGroup, DuplicateMember, Rule, RuleKind, ScanParams, DEFAULT_MAX_FILE_SIZE)


class TestRuleKind:
    """Test parsing of rule kinds from user input."""

    def test_parses_values_and_names(self):
        assert RuleKind.parse("file-extension") is RuleKind.FILE_EXTENSION
        assert RuleKind.parse("FILE_EXTENSION") is RuleKind.FILE_EXTENSION
        assert RuleKind.parse("Path_Contains") is RuleKind.PATH_CONTAINS
        assert RuleKind.parse(RuleKind.NAME_REGEX) is RuleKind.NAME_REGEX

    def test_accepts_file_name_regex_alias(self):
        assert RuleKind.parse("FILE_NAME_REGEX") is RuleKind.NAME_REGEX

    @pytest.mark.parametrize("value", ["", "   ", "glob", None, 42])
    def test_rejects_unknown_kinds(self, value):
        with pytest.raises(InvalidRuleError):
            RuleKind.parse(value)


class TestRule:
    """Test rule validation — invalid rules are rejected before insertion."""

    def test_valid_rule_is_created(self):
        rule = Rule(RuleKind.FILE_EXTENSION, ".log", "Logs")
        assert rule.kind is RuleKind.FILE_EXTENSION
        assert rule.pattern == ".log"
        assert rule.category == "Logs"

    def test_kind_given_as_string_is_coerced(self):
        rule = Rule("name-regex", r"^IMG_\d+", "Camera")
        assert rule.kind is RuleKind.NAME_REGEX

    @pytest.mark.parametrize("kind, pattern, category", [
        (None, ".log", "Logs"),
        (RuleKind.FILE_EXTENSION, "", "Logs"),
        (RuleKind.FILE_EXTENSION, None, "Logs"),
        (RuleKind.FILE_EXTENSION, ".log", ""),
        (RuleKind.FILE_EXTENSION, ".log", "   "),
        (RuleKind.FILE_EXTENSION, ".log", None),
    ])
    def test_incomplete_rule_is_rejected(self, kind, pattern, category):
        with pytest.raises(InvalidRuleError, match="type, pattern, and category"):
            Rule(kind, pattern, category)

    def test_invalid_rule_error_is_a_value_error(self):
        with pytest.raises(ValueError):
            Rule(None, ".log", "Logs")

    def test_rule_is_immutable(self):
        rule = Rule(RuleKind.PATH_CONTAINS, "backup", "Backups")
        with pytest.raises(AttributeError):
            rule.category = "Other"

    def test_from_dict_accepts_type_key(self):
        rule = Rule.from_dict({"type": "PATH_CONTAINS", "pattern": "/tmp/", "category": "Temp"})
        assert rule == Rule(RuleKind.PATH_CONTAINS, "/tmp/", "Temp")

    def test_from_dict_rejects_missing_fields(self):
        with pytest.raises(InvalidRuleError):
            Rule.from_dict({"kind": "file-extension", "category": "Logs"})
        with pytest.raises(InvalidRuleError):
            Rule.from_dict({"pattern": ".log", "category": "Logs"})

    def test_from_dict_rejects_non_mapping(self):
        with pytest.raises(InvalidRuleError):
            Rule.from_dict(["file-extension", ".log", "Logs"])

    def test_to_dict_round_trips(self):
        rule = Rule(RuleKind.NAME_REGEX, r"\.bak$", "Backups")
        assert Rule.from_dict(rule.to_dict()) == rule


class TestDuplicateGroup:
    def test_paths_and_count(self):
        group = DuplicateGroup("abc", (
            DuplicateMember("/a/x.txt", "Documents"),
            DuplicateMember("/b/x.txt", "Documents"),
        ))
        assert group.duplicate_count == 2
        assert group.paths == ["/a/x.txt", "/b/x.txt"]
        assert group.is_duplicate()
        assert group.members[0].name == "x.txt"


class TestScanParams:
    """Test parameter validation and defaults."""

    def test_defaults(self):
        params = ScanParams(roots=["/data"])
        assert params.max_size_bytes == DEFAULT_MAX_FILE_SIZE == 100 * 1024 * 1024
        assert params.min_size_bytes == 0
        assert params.chunk_size == 8192
        assert params.algorithm == "md5"
        assert params.workers is None

    def test_single_root_string_is_wrapped(self):
        assert ScanParams(roots="/data").roots == ["/data"]

    def test_rejects_negative_min_size(self):
        with pytest.raises(ValueError, match="cannot be negative"):
            ScanParams(roots=["/data"], min_size_bytes=-1)

    def test_rejects_max_below_min(self):
        with pytest.raises(ValueError, match="less than minimum"):
            ScanParams(roots=["/data"], min_size_bytes=100, max_size_bytes=10)

    def test_rejects_unknown_algorithm(self):
        with pytest.raises(ValueError, match="Unsupported hash algorithm"):
            ScanParams(roots=["/data"], algorithm="crc32")

    def test_rejects_zero_workers(self):
        with pytest.raises(ValueError):
            ScanParams(roots=["/data"], workers=0)

    def test_from_human_readable(self):
        params = ScanParams.from_human_readable(["/data"], max_size_str="10MB", min_size_str="1K",
                                                algorithm="XXH128")
        assert params.max_size_bytes == 10 * 1024 * 1024
        assert params.min_size_bytes == 1024
        assert params.algorithm == "xxh128"
