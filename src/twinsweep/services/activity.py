"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

services/activity.py
Default ActivityRecorder: keeps a timestamped in-memory activity log and
forwards every entry to the standard logging system.
"""
import logging
import threading
import time
from collections import deque
from typing import List, Optional

from twinsweep.utils.convert_utils import ConvertUtils

logger = logging.getLogger("twinsweep.activity")


class LoggingActivityRecorder:
    """
    Records engine activity as "[YYYY-mm-dd HH:MM:SS] message" entries.
    When `max_entries` is set, only the most recent entries are kept.
    """

    def __init__(self, max_entries: Optional[int] = None, level: int = logging.INFO):
        if max_entries is not None and max_entries < 1:
            raise ValueError("max_entries must be positive")
        self.level = level
        self._entries = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    def record(self, message: str) -> None:
        entry = f"[{ConvertUtils.timestamp_to_human(time.time())}] {message}"
        with self._lock:
            self._entries.append(entry)
        logger.log(self.level, message)

    def entries(self) -> List[str]:
        """Copy of the activity log, oldest first."""
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
