from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Union

from .models import FileUnreadable, Fingerprint

# Reading stops once more than 10 lines are collected, so at most 11 lines
# make up a fingerprint.
FINGERPRINT_LINES = 11
MAX_LINE_BYTES = 1 << 20


def read_head(
    path: Union[str, Path],
    max_lines: int = FINGERPRINT_LINES,
    max_line_bytes: int = MAX_LINE_BYTES,
) -> Fingerprint:
    """Read the first ``max_lines`` lines of a local file.

    Lines are returned as raw bytes in file order with the trailing ``\\n``
    (and a ``\\r`` before it) removed. An empty file gives an empty
    fingerprint. A line longer than ``max_line_bytes`` raises
    FileUnreadable instead of being buffered whole.
    """
    log = logging.getLogger(__name__)
    lines: List[bytes] = []
    try:
        with open(path, "rb") as fp:
            while len(lines) < max_lines:
                line = fp.readline(max_line_bytes + 1)
                if not line:
                    break
                if len(line) > max_line_bytes and not line.endswith(b"\n"):
                    raise FileUnreadable(
                        f"{path}: line {len(lines) + 1} exceeds {max_line_bytes} bytes"
                    )
                lines.append(_strip_eol(line))
    except OSError as e:
        raise FileUnreadable(f"{path}: {e.strerror or e}") from e
    log.debug("Read %d fingerprint lines from %s", len(lines), path)
    return tuple(lines)


def _strip_eol(line: bytes) -> bytes:
    if line.endswith(b"\n"):
        line = line[:-1]
        if line.endswith(b"\r"):
            line = line[:-1]
    return line
