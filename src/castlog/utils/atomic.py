"""Atomic file replacement.

Readers of a catalog file must see either the old or the new content,
never a partial write.
"""

import logging
import os
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import TextIO

logger = logging.getLogger(__name__)


@contextmanager
def atomic_write(path: Path | str, mode: int = 0o644) -> Iterator[TextIO]:
    """Open a temporary file that replaces path when the block completes.

    The implementation follows these steps:
    1. Write content to a temporary file in the same directory
    2. Flush Python buffers and fsync the file
    3. Atomically rename temp to final (POSIX guarantee)
    4. Sync the directory to persist the rename (best effort)

    If the block raises, the temporary file is removed and the target is
    left untouched.

    Example:
        >>> with atomic_write(Path("_data/guests.yaml")) as f:
        ...     f.write(content)

    Args:
        path: Target file path
        mode: Permission bits for the new file

    Raises:
        OSError: If write or sync fails
    """
    path = Path(path)
    temp_fd, temp_name = tempfile.mkstemp(
        dir=path.parent, prefix=".tmp_", suffix=path.suffix
    )
    temp_path = Path(temp_name)

    try:
        with open(temp_fd, "w", encoding="utf-8", newline="") as f:
            yield f
            f.flush()
            os.fsync(f.fileno())

        os.chmod(temp_path, mode)
        temp_path.replace(path)
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise

    try:
        dir_fd = os.open(path.parent, os.O_RDONLY)
        try:
            os.fsync(dir_fd)
        finally:
            os.close(dir_fd)
    except (OSError, AttributeError) as e:
        # Directory fsync is not supported on every platform
        logger.debug(f"Directory fsync not supported: {e}")


def write_text_atomic(path: Path | str, content: str) -> None:
    """Replace the contents of path with content, atomically."""
    with atomic_write(path) as f:
        f.write(content)
