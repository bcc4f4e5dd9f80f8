"""Map a line of unified diff text back to a line of the compared file.

The scan is a single forward fold over the diff: file headers set the current
paths, hunk headers reset the two line counters, and hunk body lines advance
them. Only body lines map to a source line; everything else is a no-op jump.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

_HUNK_RE = re.compile(r"^@@ -(\d+)(?:,(\d+))? \+(\d+)(?:,(\d+))? @@")
_DIFF_GIT_RE = re.compile(r'^diff --git ("(?:[^"\\]|\\.)*"|\S+) ("(?:[^"\\]|\\.)*"|\S+)$')
_DEV_NULL = "/dev/null"
OLD_PREFIX = "a/"
NEW_PREFIX = "b/"


class Side(Enum):
    OLD = "old"
    NEW = "new"


@dataclass(frozen=True)
class Jump:
    """Repository-relative path and 1-based line number on one side of a diff."""

    path: str
    lnum: int


def _unquote_path(raw: str) -> str:
    """Undo git's C-style quoting (``"a/t\\303\\251st"``) of unusual paths."""
    if len(raw) < 2 or raw[0] != '"' or raw[-1] != '"':
        return raw
    unescaped = raw[1:-1].encode("utf-8").decode("unicode_escape")
    return unescaped.encode("latin-1").decode("utf-8", errors="replace")


def _header_path(raw: str) -> str | None:
    # GNU diff appends "\t<timestamp>" to ---/+++ paths.
    path = _unquote_path(raw.split("\t", 1)[0].rstrip("\r"))
    if path == _DEV_NULL:
        return None
    return path


def _strip_prefix(path: str, prefix: str) -> str:
    if path.startswith(prefix):
        return path[len(prefix):]
    return path


def find_jump(content: Sequence[str], index: int, side: Side) -> Jump | None:
    """Return where diff line ``index`` (0-based) lives on ``side``, or ``None``.

    Header lines, hunk headers, lines outside a hunk, additions when looking
    at the old side and removals when looking at the new side never map.
    """
    if index < 0 or index >= len(content):
        return None

    old_path: str | None = None
    new_path: str | None = None
    old_lnum = new_lnum = 0
    old_remaining = new_remaining = 0

    for line_idx in range(index + 1):
        line = content[line_idx]
        old_hit: int | None = None
        new_hit: int | None = None

        if old_remaining > 0 or new_remaining > 0:
            marker = line[:1]
            if marker == " " or line == "":
                old_hit, new_hit = old_lnum, new_lnum
                old_lnum += 1
                new_lnum += 1
                old_remaining -= 1
                new_remaining -= 1
            elif marker == "-":
                old_hit = old_lnum
                old_lnum += 1
                old_remaining -= 1
            elif marker == "+":
                new_hit = new_lnum
                new_lnum += 1
                new_remaining -= 1
            elif marker == "\\":
                pass
            else:
                old_remaining = new_remaining = 0

        if old_hit is None and new_hit is None and old_remaining <= 0 and new_remaining <= 0:
            hunk = _HUNK_RE.match(line)
            if hunk is not None:
                old_lnum = int(hunk.group(1))
                old_remaining = int(hunk.group(2) or "1")
                new_lnum = int(hunk.group(3))
                new_remaining = int(hunk.group(4) or "1")
            elif line.startswith("diff --git "):
                old_remaining = new_remaining = 0
                header = _DIFF_GIT_RE.match(line.rstrip("\r"))
                if header is not None:
                    old_path = _unquote_path(header.group(1))
                    new_path = _unquote_path(header.group(2))
                else:
                    old_path = new_path = None
            elif line.startswith("--- "):
                old_path = _header_path(line[4:])
            elif line.startswith("+++ "):
                new_path = _header_path(line[4:])

        if line_idx == index:
            if side is Side.OLD:
                if old_hit is None or old_path is None:
                    return None
                return Jump(_strip_prefix(old_path, OLD_PREFIX), old_hit)
            if new_hit is None or new_path is None:
                return None
            return Jump(_strip_prefix(new_path, NEW_PREFIX), new_hit)

    return None


def find_jump_old(index: int, content: Sequence[str]) -> Jump | None:
    return find_jump(content, index, Side.OLD)


def find_jump_new(index: int, content: Sequence[str]) -> Jump | None:
    return find_jump(content, index, Side.NEW)
