"""
EditCommitter: Apply a batch of non-overlapping byte-range edits in one pass.

Also provides the write-back helpers used by drivers: atomic writes
(temp file + rename) behind an optimistic content-hash check.
"""

import hashlib
import os
import tempfile
from pathlib import Path
from typing import Iterable, List, Optional

from arkmod.exceptions import EditOverlapError
from arkmod.logging_config import logger
from arkmod.schemas import EditOp


def ordered_edits(edits: Iterable[EditOp]) -> List[EditOp]:
    """
    Sort edits by position and verify that no two overlap.

    Raises:
        EditOverlapError: If two edits touch the same range.
    """
    ordered = sorted(edits, key=lambda e: (e.start, e.end))
    for previous, current in zip(ordered, ordered[1:]):
        if previous.overlaps(current):
            raise EditOverlapError(previous, current)
    return ordered


def apply_edits(data: bytes, edits: Iterable[EditOp], start: int = 0, end: Optional[int] = None) -> bytes:
    """
    Apply edits to data[start:end]; edit offsets are absolute.
    """
    end = len(data) if end is None else end
    pieces = []
    cursor = start
    for edit in ordered_edits(edits):
        if edit.start < start or edit.end > end:
            raise ValueError(f"Edit [{edit.start}, {edit.end}) outside window [{start}, {end})")
        pieces.append(data[cursor:edit.start])
        pieces.append(edit.text.encode('utf-8'))
        cursor = edit.end
    pieces.append(data[cursor:end])
    return b"".join(pieces)


class EditCommitter:
    """
    Accumulates edits for one file and applies them as a single rewrite.
    """

    def __init__(self):
        self._edits: List[EditOp] = []

    def add(self, edit: EditOp) -> None:
        self._edits.append(edit)

    @property
    def edits(self) -> List[EditOp]:
        return list(self._edits)

    def commit(self, data: bytes) -> Optional[str]:
        """
        Returns:
            The rewritten text, or None when there is nothing to apply.
        """
        if not self._edits:
            return None
        rewritten = apply_edits(data, self._edits)
        logger.debug(f"Committed {len(self._edits)} edit(s)")
        return rewritten.decode('utf-8')


def content_hash(content: str) -> str:
    return hashlib.sha256(content.encode('utf-8')).hexdigest()


def atomic_write(file_path: str, content: str) -> bool:
    """
    Write file atomically using temp file + rename.

    Returns:
        True if successful
    """
    path = Path(file_path)

    try:
        # Temp file in the target directory keeps the rename on one filesystem
        fd, temp_path = tempfile.mkstemp(
            dir=str(path.parent),
            prefix=f".{path.name}.",
            suffix=".tmp"
        )
    except OSError as e:
        logger.error(f"Failed to create temp file: {e}")
        return False

    try:
        with os.fdopen(fd, 'w', encoding='utf-8', newline='') as f:
            f.write(content)
        if path.exists():
            os.chmod(temp_path, path.stat().st_mode & 0o777)
        os.replace(temp_path, str(path))
        logger.debug(f"Atomic write completed: {file_path}")
        return True
    except OSError as e:
        try:
            os.unlink(temp_path)
        except OSError:
            pass
        logger.error(f"Failed during atomic write: {e}")
        return False


def read_source(file_path: str) -> str:
    """Read a file keeping its line endings untouched."""
    with open(file_path, "r", encoding="utf-8", newline="") as f:
        return f.read()


def write_back(file_path: str, original: str, new_content: str) -> bool:
    """
    Write new_content if the file still holds `original` (optimistic lock).
    """
    try:
        current = read_source(file_path)
    except OSError as e:
        logger.error(f"Failed to re-read {file_path}: {e}")
        return False
    if content_hash(current) != content_hash(original):
        logger.error(f"{file_path} changed on disk since it was read, not writing")
        return False
    return atomic_write(file_path, new_content)
