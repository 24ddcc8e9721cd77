"""Utility functions for reading Rust sources and writing generated files.

Both directions report failures as :class:`PropsIOError` so callers can
handle a missing source and an unwritable destination the same way.
"""

import contextlib
import os
import stat
import tempfile
from pathlib import Path

from .logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_FILE_MODE = 0o644


class PropsIOError(Exception):
    """Raised when a source cannot be read or an output cannot be written."""

    def __init__(self, message: str, path: str | Path | None = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None


def read_source(file_path: str | Path, encoding: str = "utf-8") -> str:
    """Read a Rust source file.

    Args:
        file_path: Path to the source file.
        encoding: Text encoding of the file.

    Returns:
        The full source text.

    Raises:
        PropsIOError: If the file is missing, unreadable or not decodable.
    """
    file_path = Path(file_path)
    logger.debug("Reading source file: %s", file_path)

    try:
        with file_path.open("r", encoding=encoding) as f:
            source = f.read()
    except UnicodeDecodeError as e:
        logger.error("Cannot decode %s as %s: %s", file_path, encoding, e)
        raise PropsIOError(
            f"Cannot decode source file {file_path} as {encoding}: {e}", file_path
        ) from e
    except OSError as e:
        logger.error("Error reading source file %s: %s", file_path, e)
        raise PropsIOError(f"Error reading source file {file_path}: {e}", file_path) from e

    logger.info("Read %d characters from %s", len(source), file_path)
    return source


def write_output(
    file_path: str | Path,
    content: str,
    encoding: str = "utf-8",
    atomic: bool = True,
) -> Path:
    """Write a generated document, replacing any existing file.

    With ``atomic`` the content goes to a temporary file in the destination
    directory first and is moved into place with ``os.replace``, so readers
    never observe a half-written file.

    Args:
        file_path: Destination path.
        content: Text to write. Line endings are written unchanged.
        encoding: Text encoding.
        atomic: Write through a temporary file.

    Returns:
        The destination path.

    Raises:
        PropsIOError: If the destination cannot be created or written.
    """
    file_path = Path(file_path)
    logger.debug("Writing %d characters to %s (atomic=%s)", len(content), file_path, atomic)

    try:
        if atomic:
            _write_atomic(file_path, content, encoding)
        else:
            with file_path.open("w", encoding=encoding, newline="") as f:
                f.write(content)
    except OSError as e:
        logger.error("Error writing output file %s: %s", file_path, e)
        raise PropsIOError(f"Error writing output file {file_path}: {e}", file_path) from e

    logger.info("Wrote %s", file_path)
    return file_path


def _write_atomic(file_path: Path, content: str, encoding: str) -> None:
    """Write through a sibling temporary file and rename it into place."""
    directory = file_path.parent if str(file_path.parent) else Path(".")
    fd, tmp_name = tempfile.mkstemp(
        dir=directory, prefix=f".{file_path.name}.", suffix=".tmp"
    )
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as f:
            f.write(content)
        if file_path.is_file():
            mode = stat.S_IMODE(file_path.stat().st_mode)
        else:
            mode = DEFAULT_FILE_MODE
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, file_path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise
