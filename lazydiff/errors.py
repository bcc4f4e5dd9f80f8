"""Error kinds raised by lazydiff.

Parsing failures also subclass ``ValueError`` so generic callers can catch them.
The CLI turns any ``LazyDiffError`` into a one-line exit message.
"""

from __future__ import annotations


class LazyDiffError(Exception):
    """Base class for all lazydiff failures."""


class InvalidRevisionExpression(LazyDiffError, ValueError):
    """Revision expression names more than two revisions or is not a valid range."""

    def __init__(self, commitish: str, reason: str) -> None:
        super().__init__(f"Invalid revision expression {commitish!r}: {reason}")
        self.commitish = commitish
        self.reason = reason


class BufnameError(LazyDiffError, ValueError):
    """Buffer name cannot be decoded into a diff descriptor."""


class UnrecognizedScheme(BufnameError):
    def __init__(self, bufname: str, expected: str) -> None:
        super().__init__(f"Buffer {bufname!r} is not a '{expected}://' buffer")
        self.bufname = bufname
        self.expected = expected


class MissingFragment(BufnameError):
    def __init__(self, bufname: str) -> None:
        super().__init__(f"Buffer {bufname!r} requires a fragment part")
        self.bufname = bufname


class MalformedBufname(BufnameError):
    pass


class ProcessFailure(LazyDiffError):
    """External git command exited unsuccessfully."""

    def __init__(self, command: list[str], returncode: int, stderr: str) -> None:
        message = stderr.strip() or f"git exited with status {returncode}"
        super().__init__(message)
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr


class NotAWorktree(LazyDiffError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Not a git working tree: {path}")
        self.path = path
