"""Load the worktree, index or commit version of a file into a buffer.

Worktree buffers are backed by the file on disk. Index and commit buffers
hold ``git show`` output and are named with the ``lazyshow://`` scheme so the
same target always reuses the same buffer.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

from .buffer import Buffer, BufferStore, split_lines
from .bufname import BufferDescriptor, format_bufname
from .commitish import Commit, ComparisonTarget, Index, Worktree, describe_target
from .highlight import read_text

SHOW_SCHEME = "lazyshow"


def show_bufname(target: Index | Commit, root: str, path: str) -> str:
    """Buffer name for index/commit content of ``path``."""
    if isinstance(target, Index):
        params: tuple[tuple[str, str | None], ...] = (("cached", None),)
    else:
        params = (("commitish", target.ref),)
    return format_bufname(BufferDescriptor(root=root, fragment=path, params=params, scheme=SHOW_SCHEME))


def show_spec(target: Index | Commit, path: str) -> str:
    """``git show`` argument naming ``path`` in the index or a commit."""
    if isinstance(target, Index):
        return f":{path}"
    return f"{target.ref or 'HEAD'}:{path}"


class FileOpener:
    """``open_file_at`` collaborator backed by a ``BufferStore``.

    ``show`` is called as ``show(root, spec)`` and returns file content.
    """

    def __init__(self, store: BufferStore, show: Callable[[str, str], str]) -> None:
        self.store = store
        self.show = show

    def open_file_at(self, target: ComparisonTarget, root: str, path: str) -> Buffer:
        if isinstance(target, Worktree):
            file_path = Path(root) / path
            buffer = self.store.open(str(file_path), path=file_path)
            text = read_text(file_path) if file_path.is_file() else ""
        else:
            buffer = self.store.open(show_bufname(target, root, path))
            text = self.show(root, show_spec(target, path))
        self.store.write(buffer.name, split_lines(text), {"lazydiff_target": describe_target(target)})
        return buffer
