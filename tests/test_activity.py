"""
Tests for LoggingActivityRecorder.
"""
import logging
import re
import threading

import pytest
from twinsweep.services.activity import LoggingActivityRecorder


class TestLoggingActivityRecorder:

    def test_entries_are_timestamped(self):
        recorder = LoggingActivityRecorder()
        recorder.record("Cleared duplicate caches")

        [entry] = recorder.entries()
        assert re.fullmatch(r"\[\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}\] Cleared duplicate caches", entry)

    def test_entries_keep_order_and_are_copied(self):
        recorder = LoggingActivityRecorder()
        recorder.record("first")
        recorder.record("second")

        snapshot = recorder.entries()
        snapshot.clear()

        assert [e.split("] ", 1)[1] for e in recorder.entries()] == ["first", "second"]
        assert len(recorder) == 2

    def test_max_entries_keeps_most_recent(self):
        recorder = LoggingActivityRecorder(max_entries=2)
        for msg in ("a", "b", "c"):
            recorder.record(msg)

        assert [e.split("] ", 1)[1] for e in recorder.entries()] == ["b", "c"]

    def test_rejects_non_positive_capacity(self):
        with pytest.raises(ValueError):
            LoggingActivityRecorder(max_entries=0)

    def test_forwards_to_logging(self, caplog):
        recorder = LoggingActivityRecorder(level=logging.WARNING)
        with caplog.at_level(logging.WARNING, logger="twinsweep.activity"):
            recorder.record("Deleted file: /tmp/x")

        assert caplog.records[-1].name == "twinsweep.activity"
        assert caplog.records[-1].levelno == logging.WARNING
        assert caplog.records[-1].getMessage() == "Deleted file: /tmp/x"

    def test_clear(self):
        recorder = LoggingActivityRecorder()
        recorder.record("x")
        recorder.clear()
        assert recorder.entries() == []

    def test_concurrent_records_are_not_lost(self):
        recorder = LoggingActivityRecorder()

        def spam():
            for i in range(200):
                recorder.record(f"msg {i}")

        threads = [threading.Thread(target=spam) for _ in range(4)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(recorder) == 800
