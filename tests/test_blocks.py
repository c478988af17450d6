"""Tests for the managed-block writer."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest

from devmux.blocks import (
    marker_lines,
    read_block,
    remove_block,
    render_block,
    strip_block,
    write_block,
)
from devmux.errors import MergeIOError


def _mode(path: Path) -> int:
    return stat.S_IMODE(path.stat().st_mode)


class TestMarkers:
    """Test marker line construction."""

    def test_with_suffix(self) -> None:
        assert marker_lines("devmux", "aliases") == (
            "# BEGIN devmux-managed-aliases",
            "# END devmux-managed-aliases",
        )

    def test_without_suffix(self) -> None:
        assert marker_lines("devmux") == ("# BEGIN devmux-managed", "# END devmux-managed")


class TestTextTransforms:
    """Test the pure strip/render functions."""

    BEGIN, END = marker_lines("devmux", "x")

    def test_render_into_empty(self) -> None:
        assert render_block("", self.BEGIN, self.END, "a=1") == f"{self.BEGIN}\na=1\n{self.END}\n"

    def test_trailing_newline_in_content_not_doubled(self) -> None:
        assert render_block("", self.BEGIN, self.END, "a=1\n") == f"{self.BEGIN}\na=1\n{self.END}\n"

    def test_newline_added_to_unterminated_buffer(self) -> None:
        result = render_block("x", self.BEGIN, self.END, "c")
        assert result == f"x\n{self.BEGIN}\nc\n{self.END}\n"

    def test_unterminated_begin_drops_to_eof(self) -> None:
        text = f"keep\n{self.BEGIN}\nlost\nalso lost\n"
        assert strip_block(text, self.BEGIN, self.END) == "keep\n"

    def test_duplicate_blocks_all_removed(self) -> None:
        text = f"a\n{self.BEGIN}\n1\n{self.END}\nb\n{self.BEGIN}\n2\n{self.END}\nc\n"
        assert strip_block(text, self.BEGIN, self.END) == "a\nb\nc\n"

    def test_other_namespace_markers_are_content(self) -> None:
        other_begin, other_end = marker_lines("devmux", "y")
        text = f"{other_begin}\nkeep\n{other_end}\n"
        assert strip_block(text, self.BEGIN, self.END) == text

    def test_marker_match_is_exact(self) -> None:
        text = f"  {self.BEGIN}\n{self.BEGIN} extra\n"
        assert strip_block(text, self.BEGIN, self.END) == text

    def test_crlf_markers_recognised(self) -> None:
        text = f"a\r\n{self.BEGIN}\r\nold\r\n{self.END}\r\nb\r\n"
        assert strip_block(text, self.BEGIN, self.END) == "a\r\nb\r\n"


class TestWriteBlock:
    """Test write_block on real files."""

    def test_relocates_block_to_end(self, tmp_path: Path) -> None:
        path = tmp_path / "rc"
        path.write_text(
            "line1\n# BEGIN devmux-managed-x\nold\n# END devmux-managed-x\nline2\n"
        )
        write_block(path, "devmux", "x", "new")
        assert path.read_text() == (
            "line1\nline2\n# BEGIN devmux-managed-x\nnew\n# END devmux-managed-x\n"
        )

    def test_idempotent(self, tmp_path: Path) -> None:
        path = tmp_path / "rc"
        path.write_text("user stuff\n")
        write_block(path, "devmux", "x", "content")
        first = path.read_bytes()
        write_block(path, "devmux", "x", "content")
        assert path.read_bytes() == first

    def test_duplicates_collapse(self, tmp_path: Path) -> None:
        path = tmp_path / "rc"
        path.write_text(
            "# BEGIN devmux-managed-x\n1\n# END devmux-managed-x\n"
            "mid\n"
            "# BEGIN devmux-managed-x\n2\n# END devmux-managed-x\n"
        )
        write_block(path, "devmux", "x", "3")
        text = path.read_text()
        assert text.count("# BEGIN devmux-managed-x") == 1
        assert text == "mid\n# BEGIN devmux-managed-x\n3\n# END devmux-managed-x\n"

    def test_blocks_with_different_suffixes_coexist(self, tmp_path: Path) -> None:
        path = tmp_path / "rc"
        write_block(path, "devmux", "a", "A")
        write_block(path, "devmux", "b", "B")
        write_block(path, "devmux", "a", "A2")
        assert read_block(path, "devmux", "a") == "A2\n"
        assert read_block(path, "devmux", "b") == "B\n"
        assert path.read_text().index("managed-b") < path.read_text().index("managed-a")

    def test_creates_parent_directory(self, tmp_path: Path) -> None:
        path = tmp_path / "deep" / "er" / "tmux.conf"
        write_block(path, "devmux", "tmux", "set -g mouse on")
        assert path.read_text().startswith("# BEGIN devmux-managed-tmux\n")

    def test_private_mode(self, tmp_path: Path) -> None:
        path = tmp_path / "config"
        path.write_text("Host a\n")
        path.chmod(0o644)
        write_block(path, "devmux", None, "Host b\n", private=True)
        assert _mode(path) == 0o600

    def test_existing_mode_preserved(self, tmp_path: Path) -> None:
        path = tmp_path / "rc"
        path.write_text("x\n")
        path.chmod(0o640)
        write_block(path, "devmux", "x", "y")
        assert _mode(path) == 0o640

    def test_writes_through_symlink(self, tmp_path: Path) -> None:
        real = tmp_path / "dotfiles" / "bashrc"
        real.parent.mkdir()
        real.write_text("mine\n")
        link = tmp_path / ".bashrc"
        link.symlink_to(real)
        write_block(link, "devmux", "x", "y")
        assert link.is_symlink()
        assert "devmux-managed-x" in real.read_text()

    def test_undecodable_bytes_preserved(self, tmp_path: Path) -> None:
        path = tmp_path / "rc"
        path.write_bytes(b"caf\xe9\n")
        write_block(path, "devmux", "x", "y")
        assert path.read_bytes().startswith(b"caf\xe9\n")

    def test_no_temp_files_left(self, tmp_path: Path) -> None:
        path = tmp_path / "work" / "rc"
        write_block(path, "devmux", "x", "y")
        assert os.listdir(path.parent) == ["rc"]

    @pytest.mark.skipif(os.geteuid() == 0, reason="root ignores directory permissions")
    def test_unwritable_directory_raises(self, tmp_path: Path) -> None:
        locked = tmp_path / "locked"
        locked.mkdir()
        (locked / "rc").write_text("x\n")
        locked.chmod(0o500)
        try:
            with pytest.raises(MergeIOError):
                write_block(locked / "rc", "devmux", "x", "y")
            assert (locked / "rc").read_text() == "x\n"
        finally:
            locked.chmod(0o700)


class TestRemoveBlock:
    """Test remove_block and read_block."""

    def test_round_trip_restores_original(self, tmp_path: Path) -> None:
        path = tmp_path / "rc"
        original = "alias ll='ls -l'\nexport X=1\n"
        path.write_text(original)
        write_block(path, "devmux", "x", "content")
        remove_block(path, "devmux", "x")
        assert path.read_text() == original

    def test_missing_file_not_created(self, tmp_path: Path) -> None:
        path = tmp_path / "nope"
        remove_block(path, "devmux", "x")
        assert not path.exists()

    def test_absent_block_leaves_file_untouched(self, tmp_path: Path) -> None:
        path = tmp_path / "rc"
        path.write_text("x")
        before = path.stat().st_mtime_ns
        remove_block(path, "devmux", "x")
        assert path.read_text() == "x"
        assert path.stat().st_mtime_ns == before

    def test_read_block_absent(self, tmp_path: Path) -> None:
        assert read_block(tmp_path / "nope", "devmux", "x") is None
