"""Filesystem helpers for shedoc."""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path
from typing import TextIO

from .constants import DEFAULT_MAX_FILE_SIZE

MAX_FILE_SIZE_ENV_VAR = "SHEDOC_MAX_FILE_SIZE"


def get_max_file_size(default: int = DEFAULT_MAX_FILE_SIZE) -> int:
    """Return the largest script, in bytes, that the CLI agrees to parse.

    ``SHEDOC_MAX_FILE_SIZE`` takes precedence over `default`, which normally
    comes from ``max_file_size`` in the configuration file.

    Raises:
        ValueError: If ``SHEDOC_MAX_FILE_SIZE`` is not a positive integer.

    Examples:
        os.environ["SHEDOC_MAX_FILE_SIZE"] = "65536"
        limit = get_max_file_size()  # 65536
    """
    raw_limit = os.environ.get(MAX_FILE_SIZE_ENV_VAR)
    if raw_limit is None:
        return default

    try:
        limit = int(raw_limit)
    except ValueError as error:
        error_message = f"{MAX_FILE_SIZE_ENV_VAR} must be a number of bytes, got {raw_limit!r}"
        raise ValueError(error_message) from error

    if limit <= 0:
        error_message = f"{MAX_FILE_SIZE_ENV_VAR} must be a positive number of bytes, got {limit}"
        raise ValueError(error_message)

    return limit


def enforce_file_size(filepath: Path, max_size: int) -> None:
    """Guard against scripts that exceed the configured maximum size.

    Raises:
        IOError: If the file cannot be inspected, is not a regular file, or is
            larger than `max_size` bytes.
    """
    try:
        stat_result = os.stat(filepath)
    except OSError as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error

    if not stat.S_ISREG(stat_result.st_mode):
        error_message = f"{filepath} is not a regular file."
        raise IOError(error_message)

    if stat_result.st_size > max_size:
        error_message = f"{filepath} exceeds the maximum allowed size of {max_size} bytes."
        raise IOError(error_message)


def safe_read(filepath: Path) -> TextIO:
    """Open a shell script as UTF-8 text for line-by-line parsing.

    Only ``\\n`` ends a line, so a stray ``\\r`` stays part of the line it
    appears on; the parser strips the ``\\r`` of CRLF endings itself.

    Raises:
        IOError: If the script is missing, unreadable, or a directory.

    Examples:
        with safe_read(Path("deploy.sh")) as script:
            shebang = script.readline()
    """
    try:
        return open(filepath, "r", encoding="UTF-8", newline="\n")
    except (
        FileNotFoundError,
        PermissionError,
        IsADirectoryError,
        NotADirectoryError,
    ) as error:
        error_message = f"Error accessing {filepath}: {error}"
        raise IOError(error_message) from error


def write_output(filepath: Path, content: str) -> None:
    """Write rendered output to a file atomically.

    The content goes to a temporary file in the target directory which then
    replaces `filepath`.

    Raises:
        IOError: If the temporary file cannot be written or moved into place.

    Examples:
        write_output(Path("deploy.1"), rendered_man_page)
    """
    temp_path: Path | None = None
    try:
        with tempfile.NamedTemporaryFile(
            mode="w", encoding="UTF-8", delete=False, dir=filepath.parent
        ) as tmp_file:
            temp_path = Path(tmp_file.name)
            tmp_file.write(content)
            tmp_file.flush()
            os.fsync(tmp_file.fileno())

        os.chmod(temp_path, 0o644)
        os.replace(temp_path, filepath)
    except OSError as error:
        error_message = f"Failed to write output file {filepath}: {error}"
        raise IOError(error_message) from error
    finally:
        if temp_path is not None:
            try:
                temp_path.unlink(missing_ok=True)
            except OSError:
                pass
