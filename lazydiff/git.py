"""Thin wrappers around the ``git`` executable.

Every call runs ``git -C <root>`` with a timeout, decodes output as UTF-8 with
replacement, and raises ``ProcessFailure`` carrying stderr on a non-zero exit.
"""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import Iterable, Sequence

from .errors import NotAWorktree, ProcessFailure

DEFAULT_TIMEOUT_SECONDS = 10.0

# Options accepted by ``lazydiff open`` and forwarded to ``git diff``.
DIFF_FLAGS = (
    "R",
    "b",
    "w",
    "I",
    "cached",
    "renames",
    "diff-filter",
    "ignore-cr-at-eol",
    "ignore-space-at-eol",
    "ignore-space-change",
    "ignore-all-space",
    "ignore-blank-lines",
    "ignore-matching-lines",
    "ignore-submodules",
)


def format_flags(flags: Iterable[tuple[str, str | None]]) -> list[str]:
    """Turn ``(key, value)`` pairs into command-line options.

    Single-letter keys become short options (``-R``, ``-Ipattern``); longer
    keys become ``--key`` or ``--key=value``. A ``None`` value is a bare flag.
    """
    args: list[str] = []
    for key, value in flags:
        if len(key) == 1:
            args.append(f"-{key}" if value is None else f"-{key}{value}")
        else:
            args.append(f"--{key}" if value is None else f"--{key}={value}")
    return args


def run_git(
    root: Path | str,
    args: Sequence[str],
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    verbose: bool = False,
) -> str:
    """Run ``git -C root <args>`` and return stdout.

    Raises ``ProcessFailure`` when git is missing, times out, or exits
    non-zero.
    """
    cmd = ["git", "--no-optional-locks", "-C", str(root), *args]
    if verbose:
        sys.stderr.write(" ".join(cmd) + "\n")
    try:
        proc = subprocess.run(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
            timeout=timeout_seconds,
        )
    except FileNotFoundError as exc:
        raise ProcessFailure(cmd, 127, f"git executable not found: {exc}") from exc
    except subprocess.TimeoutExpired as exc:
        raise ProcessFailure(cmd, -1, f"git timed out after {timeout_seconds:g}s") from exc
    if proc.returncode != 0:
        raise ProcessFailure(cmd, proc.returncode, proc.stderr)
    return proc.stdout


def diff_args(commitish: str, flags: Iterable[tuple[str, str | None]], path: str) -> list[str]:
    """Build ``git diff`` arguments for one file.

    Prefixes are pinned to ``a/``/``b/`` so user config such as
    ``diff.noprefix`` or ``diff.mnemonicPrefix`` cannot change header paths.
    """
    return [
        "diff",
        "--no-color",
        "--no-ext-diff",
        "--src-prefix=a/",
        "--dst-prefix=b/",
        *format_flags(flags),
        *([commitish] if commitish else []),
        "--",
        path,
    ]


def run_diff(
    root: Path | str,
    commitish: str,
    flags: Iterable[tuple[str, str | None]],
    path: str,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    verbose: bool = False,
) -> str:
    """Return raw unified diff text for ``path`` inside ``root``."""
    return run_git(root, diff_args(commitish, flags, path), timeout_seconds, verbose)


def show_file(
    root: Path | str,
    spec: str,
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
    verbose: bool = False,
) -> str:
    """Return ``git show <spec>`` output, e.g. ``:path`` or ``HEAD~1:path``."""
    return run_git(root, ["show", "--no-color", spec], timeout_seconds, verbose)


def find_worktree(path: Path, timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS) -> Path:
    """Return the top-level directory of the working tree containing ``path``."""
    start = path if path.is_dir() else path.parent
    try:
        stdout = run_git(start, ["rev-parse", "--show-toplevel"], timeout_seconds)
    except ProcessFailure as exc:
        raise NotAWorktree(str(path)) from exc
    lines = [line.strip() for line in stdout.splitlines() if line.strip()]
    if not lines:
        raise NotAWorktree(str(path))
    return Path(lines[0]).resolve()
