from pathlib import Path

import pytest

from leakprobe.fingerprint import FINGERPRINT_LINES, read_head
from leakprobe.models import FileUnreadable


def test_reads_at_most_eleven_lines(tmp_path: Path) -> None:
    f = tmp_path / "long.txt"
    f.write_text("".join(f"line {i}\n" for i in range(30)), encoding="utf-8")

    head = read_head(f)

    assert FINGERPRINT_LINES == 11
    assert len(head) == 11
    assert head[0] == b"line 0"
    assert head[-1] == b"line 10"


def test_strips_line_endings(tmp_path: Path) -> None:
    f = tmp_path / "crlf.txt"
    f.write_bytes(b"alpha\r\nbeta\n\ngamma")

    assert read_head(f) == (b"alpha", b"beta", b"", b"gamma")


def test_empty_file_gives_empty_fingerprint(tmp_path: Path) -> None:
    f = tmp_path / "empty.txt"
    f.write_bytes(b"")

    assert read_head(f) == ()


def test_missing_file_is_unreadable(tmp_path: Path) -> None:
    with pytest.raises(FileUnreadable):
        read_head(tmp_path / "nope.txt")


def test_directory_is_unreadable(tmp_path: Path) -> None:
    with pytest.raises(FileUnreadable):
        read_head(tmp_path)


def test_oversized_line_is_unreadable(tmp_path: Path) -> None:
    f = tmp_path / "blob.bin"
    f.write_bytes(b"x" * 100)

    with pytest.raises(FileUnreadable):
        read_head(f, max_line_bytes=64)


def test_line_at_the_size_cap_is_accepted(tmp_path: Path) -> None:
    f = tmp_path / "edge.txt"
    f.write_bytes(b"y" * 64 + b"\nnext\n")

    assert read_head(f, max_line_bytes=64) == (b"y" * 64, b"next")
