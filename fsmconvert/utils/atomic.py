"""Atomic file operations for writing manifests and machine bundles.

A bundle export either lands completely or leaves the destination as it was.
"""

from __future__ import annotations

import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import IO, Any, Generator

from fsmconvert.utils.logging import get_logger

logger = get_logger("utils.atomic")


class AtomicWriteError(Exception):
    """Raised when an atomic write operation fails."""

    pass


def _temp_sibling(target: Path) -> Path:
    """Create an empty temp file next to ``target`` and return its path."""
    target.parent.mkdir(parents=True, exist_ok=True)
    fd, name = tempfile.mkstemp(dir=target.parent, prefix=f".{target.name}.", suffix=".tmp")
    os.close(fd)
    return Path(name)


@contextmanager
def atomic_write(
    path: Path,
    mode: str = "w",
    encoding: str = "utf-8",
) -> Generator[IO[Any], None, None]:
    """
    Open ``path`` for writing so that readers see the old or the new content.

    Writes go to a temp sibling that replaces ``path`` when the block exits
    without an exception. Text is written with ``"\\n"`` line endings.

    Raises:
        AtomicWriteError: If the block or the final rename fails
    """
    path = Path(path)
    temp_path = _temp_sibling(path)
    text_options = {} if "b" in mode else {"encoding": encoding, "newline": ""}

    try:
        with open(temp_path, mode, **text_options) as f:
            yield f
        temp_path.replace(path)
    except Exception as e:
        temp_path.unlink(missing_ok=True)
        logger.error("atomic_write_failed", path=str(path), error=str(e))
        raise AtomicWriteError(f"Failed to atomically write {path}: {e}") from e

    logger.debug("atomic_write_success", path=str(path))


def atomic_write_text(path: Path, content: str, encoding: str = "utf-8") -> None:
    """Atomically write text content to a file."""
    with atomic_write(path, encoding=encoding) as f:
        f.write(content)


class AtomicFileWriter:
    """
    Batch writer: either every queued file is written or none is.

    Files are written to temp files next to their targets first and only
    renamed into place once all of them have been written.
    """

    def __init__(self, base_path: Path) -> None:
        self.base_path = Path(base_path)
        self._pending_writes: list[tuple[Path, str | bytes]] = []
        self._temp_files: list[tuple[Path, Path]] = []

    @property
    def pending(self) -> list[str]:
        """Relative names of the files queued so far."""
        return [str(target.relative_to(self.base_path)) for target, _ in self._pending_writes]

    def add_text(self, relative_path: str, content: str) -> None:
        """Queue a text file for writing."""
        self._pending_writes.append((self.base_path / relative_path, content))

    def add_bytes(self, relative_path: str, content: bytes) -> None:
        """Queue a binary file for writing."""
        self._pending_writes.append((self.base_path / relative_path, content))

    def commit(self) -> int:
        """
        Write all queued files.

        Returns:
            Number of files written

        Raises:
            AtomicWriteError: If any file could not be written
        """
        self._temp_files = []
        count = len(self._pending_writes)

        try:
            # Nothing is renamed until every temp file is written
            for target, content in self._pending_writes:
                temp_path = _temp_sibling(target)
                self._temp_files.append((temp_path, target))
                data = content if isinstance(content, bytes) else content.encode("utf-8")
                temp_path.write_bytes(data)

            for temp_path, target in self._temp_files:
                temp_path.replace(target)

            logger.debug("atomic_batch_commit_success", file_count=count)

        except Exception as e:
            self._cleanup()
            raise AtomicWriteError(f"Batch atomic write failed: {e}") from e

        finally:
            self._pending_writes = []
            self._temp_files = []

        return count

    def _cleanup(self) -> None:
        for temp_path, _ in self._temp_files:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError as e:
                logger.warning("atomic_cleanup_failed", path=str(temp_path), error=str(e))

    def __enter__(self) -> "AtomicFileWriter":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is None:
            self.commit()
        else:
            self._cleanup()
            self._pending_writes = []
