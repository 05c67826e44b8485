"""
Copyright (c) 2025 initumX (initum.x@gmail.com)
Licensed under the MIT License

core/recorders.py
Adapters around ActivityRecorder implementations used inside the engine.
"""

import logging
from typing import Optional

from twinsweep.core.interfaces import ActivityRecorder

logger = logging.getLogger(__name__)


class NullRecorder:
    """Recorder that drops every message."""

    def record(self, message: str) -> None:
        pass


class GuardedRecorder:
    """
    Wraps a caller-supplied recorder so that its failures never reach the
    engine. Messages are mirrored to the module logger at DEBUG level.
    """

    def __init__(self, recorder: Optional[ActivityRecorder] = None):
        self._recorder = recorder if recorder is not None else NullRecorder()

    def record(self, message: str) -> None:
        logger.debug(message)
        try:
            self._recorder.record(message)
        except Exception as e:
            logger.warning(f"Activity recorder failed: {e}")
