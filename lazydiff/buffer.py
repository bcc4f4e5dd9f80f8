"""In-memory editor buffers used by the terminal front end and tests.

Models just enough of an editor for diff navigation: named buffers holding
lines and local options, a current buffer with a 1-based cursor, and
buffer-local key mappings bound to callbacks.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable


@dataclass
class Buffer:
    """One named buffer with its lines, cursor and local state."""

    name: str
    lines: list[str] = field(default_factory=list)
    cursor: int = 1
    options: dict[str, object] = field(default_factory=dict)
    mappings: dict[str, Callable[[], object]] = field(default_factory=dict)
    path: Path | None = None

    def text(self) -> str:
        if not self.lines:
            return ""
        return "\n".join(self.lines) + "\n"


def split_lines(text: str) -> list[str]:
    """Split text into buffer lines on ``\\n`` only.

    A trailing ``\\r`` is dropped from each line. Form feeds and other
    characters ``str.splitlines`` treats as breaks stay inside the line.
    """
    lines = text.split("\n")
    if lines[-1] == "":
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


class BufferStore:
    """Named buffers plus the notion of a current buffer."""

    def __init__(self) -> None:
        self.buffers: dict[str, Buffer] = {}
        self.current_buffer: Buffer | None = None

    def open(self, name: str, path: Path | None = None) -> Buffer:
        """Create (or reuse) buffer ``name`` and make it current."""
        buffer = self.buffers.get(name)
        if buffer is None:
            buffer = Buffer(name=name, path=path)
            self.buffers[name] = buffer
        self.current_buffer = buffer
        return buffer

    def get(self, name: str) -> Buffer:
        try:
            return self.buffers[name]
        except KeyError:
            raise LookupError(f"No buffer named {name!r}") from None

    def current(self) -> Buffer:
        if self.current_buffer is None:
            raise LookupError("No current buffer")
        return self.current_buffer

    def write(
        self,
        name: str,
        lines: Iterable[str],
        options: dict[str, object] | None = None,
    ) -> Buffer:
        """Replace the content of buffer ``name`` and apply local options.

        The cursor is clamped into the new content.
        """
        buffer = self.buffers.get(name) or self.open(name)
        buffer.lines = list(lines)
        if options:
            buffer.options.update(options)
        buffer.cursor = max(1, min(buffer.cursor, len(buffer.lines) or 1))
        return buffer

    def map(self, name: str, lhs: str, rhs: Callable[[], object]) -> None:
        self.get(name).mappings[lhs] = rhs

    def feed(self, lhs: str) -> object:
        """Invoke the current buffer's mapping for ``lhs``."""
        mapping = self.current().mappings.get(lhs)
        if mapping is None:
            raise LookupError(f"No mapping for {lhs!r} in {self.current().name!r}")
        return mapping()

    def current_name(self) -> str:
        return self.current().name

    def current_lines(self) -> list[str]:
        return list(self.current().lines)

    def current_cursor(self) -> int:
        return self.current().cursor

    def set_cursor(self, lnum: int) -> None:
        buffer = self.current()
        buffer.cursor = max(1, min(lnum, len(buffer.lines) or 1))
