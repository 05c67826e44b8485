from twinsweep.core.models import RuleKind, SUPPORTED_ALGORITHMS

RULE_KIND_ALIASES = {
    "path": RuleKind.PATH_CONTAINS,
    "path-contains": RuleKind.PATH_CONTAINS,
    "ext": RuleKind.FILE_EXTENSION,
    "extension": RuleKind.FILE_EXTENSION,
    "file-extension": RuleKind.FILE_EXTENSION,
    "regex": RuleKind.NAME_REGEX,
    "name-regex": RuleKind.NAME_REGEX,
}

ALGORITHM_CHOICES = list(SUPPORTED_ALGORITHMS)

RULE_HELP_TEXT = (
    "Classification rule KIND:PATTERN:CATEGORY (repeatable, first match wins):\n"
    "  path    : full path contains PATTERN (case-sensitive)\n"
    "  ext     : filename ends with PATTERN (case-insensitive)\n"
    "  regex   : PATTERN matches anywhere in the filename\n"
    "Example   : %(prog)s -i ~/Downloads -r ext:.log:Logs -r 'regex:^IMG_\\d+:Camera'\n"
)

ALGORITHM_HELP_TEXT = (
    "Content hash used as the duplicate fingerprint:\n"
    "  md5     : 128-bit MD5 (default)\n"
    "  xxh128  : 128-bit xxHash3, much faster on large files\n"
)

EPILOG_TEXT = """
Examples:
  Basic usage - find duplicates in Downloads folder
  %(prog)s -i ~/Downloads

  Scan two folders, ignore files bigger than 10MB
  %(prog)s -i ~/Downloads ~/Desktop -M 10MB

  Put all .log files into a "Logs" category
  %(prog)s -i ~/Downloads -r ext:.log:Logs

  Keep one file per group and delete the rest (with confirmation prompt)
  %(prog)s -i ~/Downloads --keep-one

  Same as above, moving files to trash without confirmation (for scripts)
  %(prog)s -i ~/Downloads --keep-one --trash --force > ~/Downloads/report.txt
"""
