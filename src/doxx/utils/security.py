#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doxx/utils/security.py
"""Package validation for Word documents.

This module performs the fatal checks that run before a package is handed to
python-docx: the file must exist, carry a ``.docx`` extension, be a readable
and safe ZIP archive, and contain the main ``word/document.xml`` part.
Spreadsheets renamed or mistaken for Word documents are reported with an
actionable message.

"""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path, PurePosixPath

from doxx.constants import (
    DEFAULT_MAX_COMPRESSION_RATIO,
    DEFAULT_MAX_UNCOMPRESSED_SIZE,
    DEFAULT_MAX_ZIP_ENTRIES,
    DOCX_EXTENSION,
    DOCX_MAIN_PART,
    XLSX_WORKBOOK_PART,
)
from doxx.exceptions import FileNotFoundError, FormatError, MalformedFileError, ZipFileSecurityError

logger = logging.getLogger(__name__)


def _is_unsafe_member(name: str) -> bool:
    """Return True for absolute member names and names that climb out of the archive."""
    normalized = name.replace("\\", "/")
    if normalized.startswith("/") or (len(normalized) >= 2 and normalized[1] == ":"):
        return True
    return ".." in PurePosixPath(normalized).parts


def validate_zip_archive(
    file_path: str | Path,
    max_compression_ratio: float = DEFAULT_MAX_COMPRESSION_RATIO,
    max_uncompressed_size: int = DEFAULT_MAX_UNCOMPRESSED_SIZE,
    max_entries: int = DEFAULT_MAX_ZIP_ENTRIES,
) -> None:
    """Reject ZIP containers that are unsafe to open.

    Only the central directory is read; no member is decompressed.

    Parameters
    ----------
    file_path : str or Path
        Archive to inspect
    max_compression_ratio : float, default 100.0
        Largest accepted ratio of total uncompressed to compressed bytes
    max_uncompressed_size : int, default 1GB
        Largest accepted total of uncompressed member sizes
    max_entries : int, default 10000
        Largest accepted number of members

    Raises
    ------
    ZipFileSecurityError
        If a limit is exceeded or a member path is unsafe
    MalformedFileError
        If the file is not a readable ZIP archive

    """
    try:
        with zipfile.ZipFile(file_path, "r") as zf:
            entries = zf.infolist()
    except zipfile.BadZipFile as e:
        raise MalformedFileError(f"Invalid ZIP archive: {e}", file_path=str(file_path), original_error=e) from e
    except OSError as e:
        raise MalformedFileError(f"Could not read ZIP archive: {e}", file_path=str(file_path), original_error=e) from e

    if len(entries) > max_entries:
        raise ZipFileSecurityError(f"ZIP archive has too many entries: {len(entries)} > {max_entries}")

    unsafe = [entry.filename for entry in entries if _is_unsafe_member(entry.filename)]
    if unsafe:
        raise ZipFileSecurityError(f"ZIP archive contains suspicious path: {unsafe[0]}")

    uncompressed = sum(entry.file_size for entry in entries)
    compressed = sum(entry.compress_size for entry in entries)
    if uncompressed > max_uncompressed_size:
        raise ZipFileSecurityError(
            f"ZIP archive uncompressed size {uncompressed} bytes exceeds the {max_uncompressed_size} byte limit"
        )
    if compressed and uncompressed / compressed > max_compression_ratio:
        raise ZipFileSecurityError(f"ZIP archive compression ratio {uncompressed / compressed:.1f}:1 is suspicious")


def validate_docx_package(file_path: str | Path) -> None:
    """Check that ``file_path`` is a loadable Word package.

    Parameters
    ----------
    file_path : str or Path
        Path to the candidate ``.docx`` file

    Raises
    ------
    FileNotFoundError
        If the file does not exist
    FormatError
        If the extension is not ``.docx``
    MalformedFileError
        If the archive is unreadable or lacks ``word/document.xml``. The message
        identifies Excel workbooks explicitly.
    ZipFileSecurityError
        If the archive fails the ZIP security checks

    """
    path = Path(file_path)
    if not path.exists():
        raise FileNotFoundError(str(path))

    suffix = path.suffix.lower()
    if suffix != DOCX_EXTENSION:
        raise FormatError(format_type=suffix or path.name)

    validate_zip_archive(path)

    with zipfile.ZipFile(path, "r") as zf:
        names = set(zf.namelist())

    if DOCX_MAIN_PART not in names:
        if XLSX_WORKBOOK_PART in names:
            message = (
                "This appears to be an Excel file (.xlsx), not a Word document. "
                "Please convert it to .docx or open it with a spreadsheet viewer."
            )
        else:
            message = f"Invalid .docx file: missing {DOCX_MAIN_PART}"
        raise MalformedFileError(message, file_path=str(path))

    logger.debug(f"Validated Word package: {path}")
