"""
Line Store: newline-delimited text files.

Deck files hold one entry per line. Reads drop blank lines and surrounding
whitespace; writes go through a temporary sibling file that is renamed over
the destination, so a crash mid-write never leaves a half-written deck.
"""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from loguru import logger


def read_nonempty_lines(path: Path | str) -> list[str]:
    """
    Read a UTF-8 text file as a list of trimmed, non-empty lines.

    Args:
        path: File to read

    Returns:
        Lines in file order, whitespace-trimmed, blanks removed

    Raises:
        OSError: If the file cannot be opened or read
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    lines = [line.strip() for line in text.splitlines()]
    return [line for line in lines if line]


def stage_lines(path: Path | str, lines: list[str]) -> Path:
    """
    Write ``lines`` to a temporary sibling of ``path`` and return its path.

    The destination is not touched; pass the result to ``commit_staged`` to
    replace it, or to ``discard_staged`` to drop it.

    Raises:
        OSError: If the temporary file cannot be written
    """
    path = Path(path)
    fd, tmp_name = tempfile.mkstemp(
        dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as f:
            for line in lines:
                f.write(f"{line}\n")
            f.flush()
            os.fsync(f.fileno())
    except BaseException:
        discard_staged(Path(tmp_name))
        raise
    return Path(tmp_name)


def commit_staged(staged: Path, path: Path | str) -> None:
    """Atomically rename a staged file over ``path``."""
    try:
        os.replace(staged, path)
    except BaseException:
        discard_staged(staged)
        raise


def discard_staged(staged: Path) -> None:
    try:
        os.unlink(staged)
    except FileNotFoundError:
        pass


def write_atomic(path: Path | str, lines: list[str]) -> None:
    """
    Replace ``path`` with ``lines``, each terminated by a newline.

    The destination is either the old content or the complete new content,
    never a mix. On failure the temporary file is removed and the error is
    re-raised with the original file untouched.

    Raises:
        OSError: If the temporary file cannot be written or renamed
    """
    commit_staged(stage_lines(path, lines), path)
    logger.debug(f"Wrote {len(lines)} lines to {path}")
