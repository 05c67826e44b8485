"""
Shared fixtures for duplicate detection engine tests.
Creates isolated temporary directories with controlled test files.
"""
import pytest
import tempfile
from pathlib import Path
from typing import Dict, List
import sys

# Add src/ to sys.path so 'twinsweep' is importable without installation
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from twinsweep.core.engine import DeduplicationEngine
from twinsweep.core.models import ScanParams


class ListRecorder:
    """ActivityRecorder that keeps messages in a list for assertions."""

    def __init__(self):
        self.messages: List[str] = []

    def record(self, message: str) -> None:
        self.messages.append(message)

    def contains(self, fragment: str) -> bool:
        return any(fragment in m for m in self.messages)


@pytest.fixture
def temp_dir():
    """Creates isolated temporary directory, auto-cleanup after test."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def recorder() -> ListRecorder:
    return ListRecorder()


@pytest.fixture
def test_files(temp_dir) -> Dict[str, Path]:
    """
    Creates controlled test files for deduplication scenarios:
    - 3 identical .txt files (two at top level, one in subdir/)
    - 2 identical .txt files with different content
    - 2 unique .txt files
    - 1 empty file
    - 1 unique file with unknown extension
    """
    files = {}

    # Duplicate triple #1 (1KB of 'A')
    content_a = b"A" * 1024
    files["dup1_a"] = temp_dir / "dup1_a.txt"
    files["dup1_b"] = temp_dir / "dup1_b.txt"
    files["dup1_a"].write_bytes(content_a)
    files["dup1_b"].write_bytes(content_a)

    # Duplicate pair #2 (2KB of 'B')
    content_b = b"B" * 2048
    files["dup2_a"] = temp_dir / "dup2_a.txt"
    files["dup2_b"] = temp_dir / "dup2_b.txt"
    files["dup2_a"].write_bytes(content_b)
    files["dup2_b"].write_bytes(content_b)

    # Unique files
    files["unique1"] = temp_dir / "unique1.txt"
    files["unique1"].write_bytes(b"C" * 1500)
    files["unique2"] = temp_dir / "unique2.txt"
    files["unique2"].write_bytes(b"D" * 2500)

    # Empty file (single, so never part of a group)
    files["empty"] = temp_dir / "empty.txt"
    files["empty"].write_bytes(b"")

    # Unknown extension
    files["other"] = temp_dir / "notes.tmp"
    files["other"].write_bytes(b"E" * 1024)

    # Subdirectory with a third copy of dup1
    subdir = temp_dir / "subdir"
    subdir.mkdir()
    files["sub_dup"] = subdir / "dup_in_subdir.txt"
    files["sub_dup"].write_bytes(content_a)

    return files


@pytest.fixture
def engine(temp_dir, recorder) -> DeduplicationEngine:
    """Engine configured to scan temp_dir with default parameters."""
    return DeduplicationEngine(ScanParams(roots=[str(temp_dir)]), recorder=recorder)
