"""Editor launch helper for jump targets.

Runs ``$EDITOR +<line>`` on a worktree file, or on a temporary snapshot when
the buffer holds index or commit content. Returns an error message string
instead of raising so the CLI can report it directly.
"""

from __future__ import annotations

import os
import shlex
import subprocess
import tempfile
from pathlib import Path

from .buffer import Buffer


def launch_editor(target: Path, lnum: int = 1) -> str | None:
    editor_env = os.environ.get("EDITOR", "").strip()
    if not editor_env:
        return "Cannot edit: $EDITOR is not set."
    cmd = shlex.split(editor_env)
    if not cmd:
        return "Cannot edit: $EDITOR is empty."

    try:
        subprocess.run([*cmd, f"+{max(1, lnum)}", str(target)], check=False)
    except OSError as exc:
        return f"Failed to launch editor: {exc}"
    return None


def edit_buffer(buffer: Buffer, filename: str = "snapshot") -> str | None:
    """Open ``buffer`` in ``$EDITOR`` at its cursor line.

    Buffers without a backing file are written to a temporary file first;
    edits to that snapshot are discarded.
    """
    if buffer.path is not None:
        return launch_editor(buffer.path, buffer.cursor)

    with tempfile.TemporaryDirectory(prefix="lazydiff-") as tmp:
        snapshot = Path(tmp) / (Path(filename).name or "snapshot")
        snapshot.write_text(buffer.text(), encoding="utf-8")
        return launch_editor(snapshot, buffer.cursor)
