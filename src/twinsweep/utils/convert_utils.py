"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

utils/convert_utils.py
Size and time formatting shared by the CLI, ScanParams and the activity log.
Units are binary: 1K == 1KB == 1024 bytes.
"""
import re
import time

_UNIT_FACTORS = {"": 1, "K": 1024, "M": 1024 ** 2, "G": 1024 ** 3, "T": 1024 ** 4, "P": 1024 ** 5}
_HUMAN_UNITS = ("B", "KB", "MB", "GB", "TB", "PB")

# "<number><prefix>[B]", e.g. 100MB, 1.5G, 512K, 2048B, 1000
_SIZE_RE = re.compile(r"(?P<sign>-?)(?P<value>\d+(?:\.\d+)?)\s*(?P<prefix>[KMGTP]?)B?")


class ConvertUtils:
    @staticmethod
    def bytes_to_human(size_bytes: int) -> str:
        """
        Bytes as a short string with two decimals: 1536 → "1.50KB".
        """
        if size_bytes < 0:
            return "0B"

        value = float(size_bytes)
        for unit in _HUMAN_UNITS:
            if value < 1024:
                return f"{value:.2f}{unit}"
            value /= 1024
        return f"{value:.2f}EB"

    @staticmethod
    def human_to_bytes(size_str: str) -> int:
        """
        Parses '1.5GB', '2048KB', '1000', '1K', '100mb' and the like.

        Raises:
            ValueError: empty, malformed or negative sizes.
        """
        text = str(size_str).strip().upper()
        if not text:
            raise ValueError("Empty size string")

        match = _SIZE_RE.fullmatch(text)
        if match is None:
            raise ValueError(
                f"Invalid size format: '{text}'. "
                f"Supported formats: 1.5GB, 2048KB, 1000, 1K, 1M, etc."
            )
        if match.group("sign"):
            raise ValueError(f"Negative size not allowed: '{text}'")

        return int(float(match.group("value")) * _UNIT_FACTORS[match.group("prefix")])

    @staticmethod
    def timestamp_to_human(timestamp: float, fmt: str = "%Y-%m-%d %H:%M:%S") -> str:
        """Local-time rendering of a Unix timestamp, as used by the activity log."""
        try:
            return time.strftime(fmt, time.localtime(timestamp))
        except (OverflowError, OSError, ValueError):
            return "Invalid timestamp"

    @staticmethod
    def seconds_to_human(seconds: float) -> str:
        """Format an elapsed duration: '850 ms', '12.40s' or '3m 05s'."""
        if seconds < 1:
            return f"{int(seconds * 1000)} ms"
        if seconds < 60:
            return f"{seconds:.2f}s"
        minutes, secs = divmod(int(seconds), 60)
        return f"{minutes}m {secs:02d}s"
