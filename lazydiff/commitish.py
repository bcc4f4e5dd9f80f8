"""Resolve a revision expression into the two sides of a diff.

``git diff`` compares different things depending on how many revisions it is
given and whether ``--cached`` is set. ``parse_commitish`` reproduces that
choice so a diff line can be traced back to the content it came from.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .errors import InvalidRevisionExpression

DEFAULT_REF = "HEAD"
RANGE_SEPARATOR = ".."


@dataclass(frozen=True)
class Worktree:
    """File as currently present on disk."""


@dataclass(frozen=True)
class Index:
    """File as staged in the index."""


@dataclass(frozen=True)
class Commit:
    """File as recorded by revision ``ref``."""

    ref: str

    def __post_init__(self) -> None:
        if not self.ref:
            raise ValueError("Commit target requires a non-empty ref")


ComparisonTarget = Union[Worktree, Index, Commit]

WORKTREE = Worktree()
INDEX = Index()


def parse_commitish(commitish: str, cached: bool) -> tuple[ComparisonTarget, ComparisonTarget]:
    """Return ``(old, new)`` targets compared by ``git diff [--cached] <commitish>``.

    An empty expression compares index to worktree, or ``HEAD`` to index when
    ``cached`` is set. A single revision is always the old side. A ``A..B``
    range compares two commits and ignores ``cached``; an empty side of the
    range means ``HEAD``.
    """
    expr = commitish.strip()
    if not expr:
        if cached:
            return Commit(DEFAULT_REF), INDEX
        return INDEX, WORKTREE

    if any(ch.isspace() for ch in expr):
        raise InvalidRevisionExpression(commitish, "revisions must not be separated by whitespace")
    if "..." in expr:
        raise InvalidRevisionExpression(commitish, "merge-base ranges ('A...B') are not supported")

    parts = expr.split(RANGE_SEPARATOR)
    if any(part.startswith("-") for part in parts):
        raise InvalidRevisionExpression(commitish, "revisions must not start with '-'")
    if len(parts) == 1:
        return Commit(expr), (INDEX if cached else WORKTREE)
    if len(parts) > 2:
        raise InvalidRevisionExpression(commitish, "more than two revisions")

    lhs, rhs = parts
    if not lhs and not rhs:
        raise InvalidRevisionExpression(commitish, "range names no revision")
    return Commit(lhs or DEFAULT_REF), Commit(rhs or DEFAULT_REF)


def describe_target(target: ComparisonTarget) -> str:
    """Human-readable label used in buffer names and status messages."""
    if isinstance(target, Worktree):
        return "worktree"
    if isinstance(target, Index):
        return "index"
    return target.ref
