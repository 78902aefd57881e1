"""Logging setup for applications embedding doxx."""

#  Copyright (c) 2025 Tom Villani, Ph.D.

from __future__ import annotations

import logging
import sys
from typing import Optional

PACKAGE_LOGGER = "doxx"


def _resolve_level(log_level: int | str) -> int:
    if isinstance(log_level, int):
        return log_level
    return getattr(logging, str(log_level).upper(), logging.INFO)


def configure_logging(
    log_level: int | str,
    log_file: Optional[str] = None,
    trace_mode: bool = False,
) -> logging.Logger:
    """Route doxx log records to stderr and, optionally, a file.

    Only the ``doxx`` package logger is touched: its handlers are replaced and
    propagation to the root logger is switched off, so the embedding
    application's own logging setup is left alone. Calling this again
    reconfigures the same logger.

    Parameters
    ----------
    log_level : int | str
        Numeric logging level or string name (e.g., "DEBUG"). Unknown names
        resolve to INFO.
    log_file : str, optional
        Path of a file that receives a copy of every record.
    trace_mode : bool, default False
        Include timestamps and logger names, which makes the per-module
        debug output of a load easy to follow.

    Returns
    -------
    logging.Logger
        The configured ``doxx`` logger.

    Examples
    --------
        >>> logger = configure_logging("DEBUG", trace_mode=True)
        >>> document = load_document("report.docx")  # logs "Reconstruction (docx) completed in ..."

    """
    resolved_level = _resolve_level(log_level)

    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(resolved_level)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()
    package_logger.propagate = False

    format_str = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s" if trace_mode else "%(levelname)s: %(message)s"
    date_format = "%Y-%m-%d %H:%M:%S" if trace_mode else None
    formatter = logging.Formatter(format_str, datefmt=date_format)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(resolved_level)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        except OSError as exc:
            package_logger.warning(f"Could not create log file {log_file}: {exc}")
        else:
            file_handler.setLevel(resolved_level)
            file_handler.setFormatter(formatter)
            package_logger.addHandler(file_handler)
            package_logger.debug(f"Logging to file: {log_file}")

    return package_logger
