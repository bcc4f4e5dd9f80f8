"""Open, render and navigate diff buffers.

``DiffViewController`` wires the buffer-name codec, the revision resolver and
the diff line locator to external collaborators (git, editor buffers, file
opener) passed in as a ``DiffViewDeps`` bundle of callables.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import NamedTuple

from .buffer import BufferStore, split_lines
from .bufname import BufferDescriptor, Param, format_bufname, parse_bufname
from .commitish import ComparisonTarget, parse_commitish
from .errors import MalformedBufname
from .git import DIFF_FLAGS
from .jump import Jump, Side, find_jump

JUMP_OLD_PLUG = "<Plug>(lazydiff-jump-old)"
JUMP_NEW_PLUG = "<Plug>(lazydiff-jump-new)"
DEFAULT_JUMP_OLD_KEY = "g<CR>"
DEFAULT_JUMP_NEW_KEY = "<CR>"

DIFF_BUFFER_OPTIONS: dict[str, object] = {
    "filetype": "diff",
    "buftype": "nofile",
    "bufhidden": "unload",
    "swapfile": False,
    "modifiable": False,
}


class DiffRequest(NamedTuple):
    """Arguments handed to ``run_diff`` for one render."""

    root: str
    commitish: str
    flags: tuple[Param, ...]
    path: str


@dataclass(frozen=True)
class DiffViewDeps:
    """Collaborators the controller delegates all I/O to."""

    run_diff: Callable[[str, str, tuple[Param, ...], str], str]
    open_buffer: Callable[[str], object]
    write_buffer: Callable[[str, list[str], dict[str, object]], object]
    map_key: Callable[[str, str, Callable[[], object]], None]
    current_name: Callable[[], str]
    current_lines: Callable[[], list[str]]
    current_cursor: Callable[[], int]
    open_file_at: Callable[[ComparisonTarget, str, str], object]
    set_cursor: Callable[[int], None]
    disable_default_mappings: Callable[[], bool] = lambda: False

    @classmethod
    def for_store(
        cls,
        store: BufferStore,
        run_diff: Callable[[str, str, tuple[Param, ...], str], str],
        open_file_at: Callable[[ComparisonTarget, str, str], object],
        disable_default_mappings: Callable[[], bool] = lambda: False,
    ) -> DiffViewDeps:
        """Bind buffer access to an in-memory ``BufferStore``."""
        return cls(
            run_diff=run_diff,
            open_buffer=store.open,
            write_buffer=store.write,
            map_key=store.map,
            current_name=store.current_name,
            current_lines=store.current_lines,
            current_cursor=store.current_cursor,
            open_file_at=open_file_at,
            set_cursor=store.set_cursor,
            disable_default_mappings=disable_default_mappings,
        )


def _relative_fragment(root: Path, path: Path | str) -> str:
    candidate = Path(path)
    if candidate.is_absolute():
        try:
            candidate = candidate.relative_to(root)
        except ValueError:
            raise ValueError(f"{path} is outside of worktree {root}") from None
    return candidate.as_posix()


def _commitish_of(descriptor: BufferDescriptor) -> str:
    return (descriptor.get("commitish") or "").strip()


def _check_params(bufname: str, descriptor: BufferDescriptor) -> None:
    """Reject parameters that ``git diff`` should never see as options."""
    for key, _value in descriptor.params:
        if key != "commitish" and key not in DIFF_FLAGS:
            raise MalformedBufname(f"Buffer {bufname!r} carries unsupported option {key!r}")


class DiffViewController:
    def __init__(self, deps: DiffViewDeps) -> None:
        self.deps = deps

    def open(
        self,
        root: Path | str,
        path: Path | str,
        commitish: str | None = None,
        cached: bool = False,
        flags: Sequence[Param] = (),
    ) -> str:
        """Build the diff buffer name for ``path`` and ask the editor to open it.

        Revisions are not resolved here; the raw expression is stored in the
        name and resolved again on every render and jump.
        """
        root_path = Path(root)
        params: list[Param] = [(key, value) for key, value in flags if key != "commitish"]
        if cached and not any(key == "cached" for key, _value in params):
            params.append(("cached", None))
        commitish = (commitish or "").strip()
        if commitish:
            params.append(("commitish", commitish))
        descriptor = BufferDescriptor(
            root=str(root_path),
            fragment=_relative_fragment(root_path, path),
            params=tuple(params),
        )
        bufname = format_bufname(descriptor)
        _check_params(bufname, descriptor)
        self.deps.open_buffer(bufname)
        return bufname

    def render(self, bufname: str) -> DiffRequest:
        """Fill buffer ``bufname`` with diff text and install jump mappings.

        An unsupported option, an invalid revision expression or a failing git
        command raises before the buffer is modified.
        """
        descriptor = parse_bufname(bufname)
        _check_params(bufname, descriptor)
        commitish = _commitish_of(descriptor)
        parse_commitish(commitish, descriptor.has("cached"))

        request = DiffRequest(
            root=descriptor.root,
            commitish=commitish,
            flags=descriptor.flags(exclude=("commitish",)),
            path=descriptor.fragment,
        )
        text = self.deps.run_diff(*request)

        self.deps.write_buffer(bufname, split_lines(text), dict(DIFF_BUFFER_OPTIONS))
        self.deps.map_key(bufname, JUMP_OLD_PLUG, self.jump_current_old)
        self.deps.map_key(bufname, JUMP_NEW_PLUG, self.jump_current_new)
        if not self.deps.disable_default_mappings():
            self.deps.map_key(bufname, DEFAULT_JUMP_OLD_KEY, self.jump_current_old)
            self.deps.map_key(bufname, DEFAULT_JUMP_NEW_KEY, self.jump_current_new)
        return request

    def jump(self, side: Side, bufname: str, content: Sequence[str], index: int) -> Jump | None:
        """Open the ``side`` version of the file at the line under ``index``.

        ``index`` is the 0-based cursor line in ``content``. Returns ``None``
        and does nothing when the line has no counterpart on ``side``.
        """
        descriptor = parse_bufname(bufname)
        jump = find_jump(content, index, side)
        if jump is None:
            return None

        old, new = parse_commitish(_commitish_of(descriptor), descriptor.has("cached"))
        # "git diff -R" prints the new target on the "-" side.
        if descriptor.has("R"):
            old, new = new, old
        target = old if side is Side.OLD else new
        self.deps.open_file_at(target, descriptor.root, jump.path)
        self.deps.set_cursor(jump.lnum)
        return jump

    def jump_old(self, bufname: str, content: Sequence[str], index: int) -> Jump | None:
        return self.jump(Side.OLD, bufname, content, index)

    def jump_new(self, bufname: str, content: Sequence[str], index: int) -> Jump | None:
        return self.jump(Side.NEW, bufname, content, index)

    def jump_current(self, side: Side) -> Jump | None:
        """Jump from the cursor position of the current buffer."""
        return self.jump(
            side,
            self.deps.current_name(),
            self.deps.current_lines(),
            self.deps.current_cursor() - 1,
        )

    def jump_current_old(self) -> Jump | None:
        return self.jump_current(Side.OLD)

    def jump_current_new(self) -> Jump | None:
        return self.jump_current(Side.NEW)
