#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doxx/utils/decorators.py
"""Decorators and context managers wrapped around loader entry points."""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from functools import wraps
from typing import Any, Callable, Generator, List, Tuple

from doxx.exceptions import DependencyError
from doxx.utils.packages import check_dependencies


def requires_dependencies(converter_name: str, packages: List[Tuple[str, str, str]]) -> Callable:
    """Refuse to run the decorated loader unless its packages are importable.

    The check runs on every call, so a missing package surfaces as a
    ``DependencyError`` with an install hint instead of an ``ImportError``
    deep inside reconstruction.

    Parameters
    ----------
    converter_name : str
        Format name shown in the error message (e.g., "docx")
    packages : list of tuple
        ``(install_name, import_name, version_spec)`` entries; an empty
        ``version_spec`` accepts any version

    Returns
    -------
    Callable
        Decorator

    Examples
    --------
        >>> @requires_dependencies("docx", [("python-docx", "docx", ">=1.1.0")])
        ... def parse(self, input_data):
        ...     import docx

    """

    def decorator(method: Callable) -> Callable:
        @wraps(method)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            report = check_dependencies(packages)
            if not report.ok:
                raise DependencyError(
                    converter_name=converter_name,
                    missing_packages=report.missing,
                    version_mismatches=report.version_mismatches,
                    original_import_error=report.first_import_error,
                ) from report.first_import_error
            return method(*args, **kwargs)

        return wrapper

    return decorator


@contextmanager
def debug_timer(logger: logging.Logger, operation: str) -> Generator[None, None, None]:
    """Log the wall time of the enclosed block at DEBUG level.

    Nothing is measured when ``logger`` is not enabled for DEBUG.
    """
    if not logger.isEnabledFor(logging.DEBUG):
        yield
        return

    start_time = time.perf_counter()
    yield
    logger.debug(f"{operation} completed in {time.perf_counter() - start_time:.2f}s")
