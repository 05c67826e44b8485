"""
Unit tests for FileScannerImpl.
Verifies file discovery with size filters, traversal errors, and edge cases.
"""
import os
import sys
from unittest import mock

import pytest
from twinsweep.core.errors import RootTraversalError
from twinsweep.core.scanner import FileScannerImpl


def scanned_paths(files):
    return {f.path for f in files}


class TestFileScannerImpl:
    """Test file scanning with filters and error handling."""

    def test_scans_all_files_recursively(self, test_files, temp_dir):
        """Every regular file is found, including the empty one and the one in subdir/."""
        files = FileScannerImpl().scan([str(temp_dir)])

        assert scanned_paths(files) == {str(p) for p in test_files.values()}
        assert all(os.path.isabs(f.path) for f in files)

    def test_reports_sizes(self, test_files, temp_dir):
        files = {f.path: f.size for f in FileScannerImpl().scan([str(temp_dir)])}
        assert files[str(test_files["dup2_a"])] == 2048
        assert files[str(test_files["empty"])] == 0

    def test_excludes_files_over_max_size(self, test_files, temp_dir, recorder):
        scanner = FileScannerImpl(max_size=2000, recorder=recorder)
        files = scanner.scan([str(temp_dir)])

        # dup2_a, dup2_b (2048B) and unique2 (2500B) are too large
        assert all(f.size <= 2000 for f in files)
        assert str(test_files["unique2"]) not in scanned_paths(files)
        assert recorder.contains(f"Skipping large file: {test_files['unique2']} (2500 bytes)")
        assert scanner.files_skipped == 3

    def test_file_exactly_at_threshold_is_kept(self, temp_dir):
        (temp_dir / "edge.bin").write_bytes(b"x" * 100)
        files = FileScannerImpl(max_size=100).scan([str(temp_dir)])
        assert len(files) == 1

    def test_excludes_files_under_min_size(self, test_files, temp_dir):
        files = FileScannerImpl(min_size=1025).scan([str(temp_dir)])

        # dup1 copies, notes.tmp (1024B) and empty.txt are excluded
        assert len(files) == 4
        assert all(f.size >= 1025 for f in files)

    def test_overlapping_roots_yield_each_file_once(self, test_files, temp_dir):
        scanner = FileScannerImpl()
        files = scanner.scan([str(temp_dir), str(temp_dir / "subdir"), str(temp_dir) + os.sep])

        paths = [f.path for f in files]
        assert len(paths) == len(set(paths)) == len(test_files)

    @pytest.mark.skipif(sys.platform == "win32", reason="Symlinks require privileges on Windows")
    def test_symlinked_root_does_not_index_the_same_file_twice(self, temp_dir):
        """A root and a link to it reach the same files under two path strings."""
        real = temp_dir / "real"
        real.mkdir()
        (real / "only.txt").write_bytes(b"the only copy")
        alias = temp_dir / "alias"
        alias.symlink_to(real, target_is_directory=True)

        files = FileScannerImpl().scan([str(real), str(alias)])

        assert scanned_paths(files) == {str(real / "only.txt")}

    @pytest.mark.skipif(not hasattr(os, "link"), reason="Hard links not supported")
    def test_hard_links_are_indexed_once(self, temp_dir):
        original = temp_dir / "original.bin"
        original.write_bytes(b"data")
        os.link(original, temp_dir / "linked.bin")

        files = FileScannerImpl().scan([str(temp_dir)])
        assert len(files) == 1

    def test_relative_root_is_made_absolute(self, test_files, temp_dir, monkeypatch):
        monkeypatch.chdir(temp_dir)
        files = FileScannerImpl().scan(["subdir"])

        assert len(files) == 1
        assert os.path.isabs(files[0].path)
        assert files[0].path == os.path.abspath(os.path.join("subdir", "dup_in_subdir.txt"))

    @pytest.mark.skipif(sys.platform == "win32", reason="Symlinks require privileges on Windows")
    def test_skips_symlinked_files(self, temp_dir):
        target = temp_dir / "real.txt"
        target.write_bytes(b"data")
        (temp_dir / "link.txt").symlink_to(target)

        files = FileScannerImpl().scan([str(temp_dir)])
        assert scanned_paths(files) == {str(target)}

    @pytest.mark.skipif(sys.platform == "win32", reason="Symlinks require privileges on Windows")
    def test_does_not_follow_symlinked_directories(self, temp_dir):
        real_dir = temp_dir / "real"
        real_dir.mkdir()
        (real_dir / "a.txt").write_bytes(b"data")
        (temp_dir / "loop").symlink_to(temp_dir, target_is_directory=True)

        files = FileScannerImpl().scan([str(temp_dir)])
        assert scanned_paths(files) == {str(real_dir / "a.txt")}


class TestTraversalErrors:
    """Traversal failures are fatal: a partial scan could hide duplicates."""

    def test_missing_root_raises(self, temp_dir, recorder):
        missing = temp_dir / "does_not_exist"
        with pytest.raises(RootTraversalError) as exc_info:
            FileScannerImpl(recorder=recorder).scan([str(missing)])

        assert exc_info.value.root == str(missing)
        assert isinstance(exc_info.value.cause, FileNotFoundError)
        assert recorder.contains("Error scanning directory")

    def test_file_as_root_raises(self, test_files):
        with pytest.raises(RootTraversalError) as exc_info:
            FileScannerImpl().scan([str(test_files["dup1_a"])])
        assert isinstance(exc_info.value.cause, NotADirectoryError)

    def test_error_inside_tree_raises(self, test_files, temp_dir, recorder):
        """An unreadable directory anywhere under the root aborts the scan."""
        def failing_walk(top, onerror=None, **kwargs):
            yield str(temp_dir), ["subdir"], ["dup1_a.txt"]
            onerror(PermissionError(13, "Permission denied", str(temp_dir / "subdir")))

        with mock.patch("twinsweep.core.scanner.os.walk", side_effect=failing_walk):
            with pytest.raises(RootTraversalError) as exc_info:
                FileScannerImpl(recorder=recorder).scan([str(temp_dir)])

        assert isinstance(exc_info.value.cause, PermissionError)
        assert exc_info.value.__cause__ is exc_info.value.cause
        assert recorder.contains("Permission denied")

    def test_valid_roots_before_bad_root_do_not_hide_the_error(self, test_files, temp_dir):
        with pytest.raises(RootTraversalError):
            FileScannerImpl().scan([str(temp_dir), str(temp_dir / "missing")])


class TestCancellationAndProgress:

    def test_cancelled_before_start_returns_empty(self, test_files, temp_dir):
        scanner = FileScannerImpl()
        files = scanner.scan([str(temp_dir)], stopped_flag=lambda: True)
        assert files == []
        assert scanner.cancelled

    def test_completed_scan_is_not_cancelled(self, test_files, temp_dir):
        scanner = FileScannerImpl()
        scanner.scan([str(temp_dir)], stopped_flag=lambda: False)
        assert not scanner.cancelled

    def test_progress_reports_scanning_stage(self, test_files, temp_dir):
        calls = []
        FileScannerImpl().scan([str(temp_dir)], progress_callback=lambda *args: calls.append(args))

        assert calls
        stage, current, total = calls[-1]
        assert stage == "scanning"
        assert current == len(test_files)
        assert total is None
