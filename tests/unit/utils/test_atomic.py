"""Tests for atomic file replacement."""

from pathlib import Path

import pytest

from castlog.utils.atomic import atomic_write, write_text_atomic


class TestAtomicWrite:
    """Tests for atomic_write context manager."""

    def test_creates_file(self, tmp_path: Path) -> None:
        target = tmp_path / "guests.yaml"
        write_text_atomic(target, "- name: Someone\n")
        assert target.read_text() == "- name: Someone\n"

    def test_replaces_existing(self, tmp_path: Path) -> None:
        target = tmp_path / "episode.md"
        target.write_text("Original")
        write_text_atomic(target, "Replaced")
        assert target.read_text() == "Replaced"

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        write_text_atomic(tmp_path / "episode.md", "Content")
        assert list(tmp_path.glob(".tmp_*")) == []

    def test_error_keeps_original_and_removes_temp(self, tmp_path: Path) -> None:
        """Test that a failing block leaves the target untouched."""
        target = tmp_path / "episode.md"
        target.write_text("Original")

        with pytest.raises(RuntimeError):
            with atomic_write(target) as f:
                f.write("Partial")
                raise RuntimeError("boom")

        assert target.read_text() == "Original"
        assert list(tmp_path.glob(".tmp_*")) == []

    def test_sets_mode(self, tmp_path: Path) -> None:
        target = tmp_path / "episode.md"
        write_text_atomic(target, "x")
        assert target.stat().st_mode & 0o777 == 0o644

    def test_preserves_unicode(self, tmp_path: Path) -> None:
        target = tmp_path / "episode.md"
        write_text_atomic(target, "Señor Café ✓\n")
        assert target.read_text(encoding="utf-8") == "Señor Café ✓\n"
