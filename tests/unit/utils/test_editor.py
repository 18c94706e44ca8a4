"""Tests for opening files in the user's editor."""

from pathlib import Path
from unittest.mock import MagicMock, Mock, patch

import pytest

from castlog.utils.editor import EditorError, edit_files


class TestEditFiles:
    """Tests for edit_files function."""

    def test_no_editor(self, monkeypatch):
        monkeypatch.delenv("EDITOR", raising=False)

        with pytest.raises(EditorError):
            edit_files([Path("a.md")])

    def test_runs_editor_on_tty(self):
        tty = MagicMock()
        with patch("castlog.utils.editor.open", create=True, return_value=tty), patch(
            "castlog.utils.editor.subprocess.run", return_value=Mock(returncode=0)
        ) as run:
            edit_files([Path("a.md"), Path("b.yaml")], editor="vi")

        args, kwargs = run.call_args
        assert args[0] == ["vi", "a.md", "b.yaml"]
        assert kwargs["stdin"] is tty.__enter__.return_value

    def test_editor_failure(self):
        with patch("castlog.utils.editor.open", create=True, return_value=MagicMock()), patch(
            "castlog.utils.editor.subprocess.run",
            return_value=Mock(returncode=1, stderr="E325: ATTENTION\n"),
        ):
            with pytest.raises(EditorError, match="E325"):
                edit_files([Path("a.md")], editor="vi")

    def test_no_terminal(self):
        with patch("castlog.utils.editor.open", create=True, side_effect=OSError("No such device")):
            with pytest.raises(EditorError):
                edit_files([Path("a.md")], editor="vi")
