"""Command-line front door for lazydiff.

``open`` prints the diff buffer name for a file, ``render`` prints the diff a
buffer name describes, and ``jump`` renders it and opens the old or new
version of the file in ``$EDITOR`` at the line under a diff line. ``config``
shows or changes the persisted settings.
"""

from __future__ import annotations

import argparse
import sys
from functools import partial
from pathlib import Path
from typing import Sequence

from . import config
from .buffer import BufferStore
from .bufname import Param
from .commitish import parse_commitish
from .controller import JUMP_NEW_PLUG, JUMP_OLD_PLUG, DiffViewController, DiffViewDeps
from .edit import FileOpener
from .editor import edit_buffer
from .errors import LazyDiffError
from .git import DIFF_FLAGS, find_worktree, run_diff, show_file
from .highlight import colorize_diff, normalize_style, sanitize_terminal_text

# argparse dest for each forwarded git diff option.
_FLAG_DESTS = {flag: flag.replace("-", "_") for flag in DIFF_FLAGS}


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _build_controller(store: BufferStore, verbose: bool = False) -> DiffViewController:
    """Wire a controller to git and the in-memory buffer store."""
    timeout_seconds = config.load_git_timeout_seconds()
    opener = FileOpener(
        store,
        show=partial(show_file, timeout_seconds=timeout_seconds, verbose=verbose),
    )
    deps = DiffViewDeps.for_store(
        store,
        run_diff=partial(run_diff, timeout_seconds=timeout_seconds, verbose=verbose),
        open_file_at=opener.open_file_at,
        disable_default_mappings=config.load_disable_default_mappings,
    )
    return DiffViewController(deps)


def _parse_residue(residue: Sequence[str]) -> tuple[str | None, str]:
    # lazydiff open [options] [commitish] path
    if len(residue) == 1:
        return None, residue[0]
    if len(residue) == 2:
        return residue[0], residue[1]
    raise SystemExit("Invalid number of arguments")


def _collect_flags(args: argparse.Namespace) -> list[Param]:
    """Return forwarded git diff options in a stable order."""
    flags: list[Param] = []
    for flag in DIFF_FLAGS:
        if flag == "cached":
            continue
        value = getattr(args, _FLAG_DESTS[flag])
        if value is None or value is False:
            continue
        flags.append((flag, None if value is True else str(value)))
    return flags


def _add_diff_flag_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--cached", "--staged", dest="cached", action="store_true", help="Diff the index.")
    parser.add_argument("-R", dest="R", action="store_true", help="Swap the two sides of the diff.")
    parser.add_argument("-b", dest="b", action="store_true", help="Ignore changes in amount of whitespace.")
    parser.add_argument("-w", dest="w", action="store_true", help="Ignore all whitespace.")
    parser.add_argument("-I", dest="I", metavar="REGEX", help="Ignore changes whose lines match REGEX.")
    parser.add_argument("--renames", action="store_true", help="Detect renames.")
    parser.add_argument("--diff-filter", metavar="FILTER", help="Select files by change type.")
    for name in (
        "ignore-cr-at-eol",
        "ignore-space-at-eol",
        "ignore-space-change",
        "ignore-all-space",
        "ignore-blank-lines",
    ):
        parser.add_argument(f"--{name}", action="store_true")
    parser.add_argument("--ignore-matching-lines", metavar="REGEX")
    parser.add_argument(
        "--ignore-submodules",
        nargs="?",
        const=True,
        default=None,
        metavar="WHEN",
        help="Ignore submodule changes (none, untracked, dirty, all).",
    )


def _cmd_open(args: argparse.Namespace) -> int:
    commitish, raw_path = _parse_residue(args.residue)
    abspath = Path(raw_path).resolve()
    worktree = find_worktree(Path(args.worktree).resolve() if args.worktree else abspath)
    if commitish:
        parse_commitish(commitish, args.cached)

    store = BufferStore()
    controller = _build_controller(store, args.verbose)
    bufname = controller.open(
        worktree,
        abspath,
        commitish=commitish,
        cached=args.cached,
        flags=_collect_flags(args),
    )
    sys.stdout.write(bufname + "\n")
    return 0


def _cmd_render(args: argparse.Namespace) -> int:
    store = BufferStore()
    controller = _build_controller(store, args.verbose)
    controller.render(args.bufname)
    text = store.get(args.bufname).text()
    if args.no_color or not sys.stdout.isatty():
        sys.stdout.write(sanitize_terminal_text(text))
    else:
        sys.stdout.write(colorize_diff(text, args.style or config.load_style()))
    return 0


def _cmd_jump(args: argparse.Namespace) -> int:
    store = BufferStore()
    controller = _build_controller(store, args.verbose)
    store.open(args.bufname)
    controller.render(args.bufname)
    line_count = len(store.current_lines())
    if args.line > line_count:
        raise SystemExit(f"Line {args.line} is past the end of the diff ({line_count} lines)")
    store.set_cursor(args.line)

    jump = store.feed(JUMP_OLD_PLUG if args.side == "old" else JUMP_NEW_PLUG)
    if jump is None:
        return 0

    buffer = store.current()
    if args.no_editor:
        target = buffer.options.get("lazydiff_target", "")
        sys.stdout.write(f"{target}\t{jump.path}:{jump.lnum}\n")
        return 0
    error = edit_buffer(buffer, filename=jump.path)
    if error:
        raise SystemExit(error)
    return 0


def _cmd_config(args: argparse.Namespace) -> int:
    if args.style is not None:
        if normalize_style(args.style) != args.style:
            raise SystemExit(f"Unknown Pygments style: {args.style}")
        config.save_style(args.style)
    if args.default_mappings is not None:
        config.save_disable_default_mappings(args.default_mappings == "off")

    mappings = "off" if config.load_disable_default_mappings() else "on"
    sys.stdout.write(f"style\t{config.load_style()}\n")
    sys.stdout.write(f"default-mappings\t{mappings}\n")
    sys.stdout.write(f"git-timeout-seconds\t{config.load_git_timeout_seconds():g}\n")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazydiff",
        description="Navigable git diff buffers: encode, render and jump from diff lines to source lines.",
    )
    parser.add_argument("--verbose", action="store_true", help="Echo git commands to stderr.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    open_parser = subparsers.add_parser("open", help="Print the diff buffer name for a file.")
    _add_diff_flag_arguments(open_parser)
    open_parser.add_argument("--worktree", metavar="DIR", help="Repository working tree (default: from PATH).")
    open_parser.add_argument("residue", nargs="+", metavar="[COMMITISH] PATH")
    open_parser.set_defaults(handler=_cmd_open)

    render_parser = subparsers.add_parser("render", help="Print the diff described by a buffer name.")
    render_parser.add_argument("bufname")
    render_parser.add_argument("--style", default=None, help="Pygments style name.")
    render_parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    render_parser.set_defaults(handler=_cmd_render)

    jump_parser = subparsers.add_parser("jump", help="Open the old/new file at the line under a diff line.")
    jump_parser.add_argument("side", choices=("old", "new"))
    jump_parser.add_argument("bufname")
    jump_parser.add_argument("line", type=_positive_int, help="1-based line in the rendered diff.")
    jump_parser.add_argument(
        "--no-editor",
        action="store_true",
        help="Print '<target>\\t<path>:<line>' instead of launching $EDITOR.",
    )
    jump_parser.set_defaults(handler=_cmd_jump)

    config_parser = subparsers.add_parser("config", help="Show or change persisted settings.")
    config_parser.add_argument("--style", default=None, help="Pygments style used by 'render'.")
    config_parser.add_argument(
        "--default-mappings",
        choices=("on", "off"),
        default=None,
        help="Map <CR>/g<CR> in diff buffers (the <Plug> mappings are always installed).",
    )
    config_parser.set_defaults(handler=_cmd_config)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Parse arguments and run one subcommand.

    Any ``LazyDiffError`` (bad revision, foreign buffer name, failing git)
    becomes ``SystemExit`` with its message.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        return args.handler(args)
    except LazyDiffError as exc:
        raise SystemExit(str(exc)) from exc
    except ValueError as exc:
        raise SystemExit(str(exc)) from exc
