"""Test utilities for the doxx test suite.

This module provides helpers for temporary directories, raw ZIP packages and
a minimal image payload.
"""

import base64
import tempfile
import zipfile
from pathlib import Path

# Base64 encoded 1x1 pixel PNG for testing
MINIMAL_PNG_B64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAQAAAC1HAwCAAAAC0lEQVR42mP8/w8AAn8B9FpQHLwAAAAASUVORK5CYII="
MINIMAL_PNG_BYTES = base64.b64decode(MINIMAL_PNG_B64)


def create_test_temp_dir() -> Path:
    """Create a temporary directory for test files."""
    return Path(tempfile.mkdtemp())


def cleanup_test_dir(temp_dir: Path) -> None:
    """Clean up test directory and files."""
    import shutil
    if temp_dir.exists():
        shutil.rmtree(temp_dir)


def write_zip(path: Path, members: dict[str, str]) -> Path:
    """Write a ZIP archive whose members hold the given text contents."""
    with zipfile.ZipFile(path, "w") as zf:
        for name, content in members.items():
            zf.writestr(name, content)
    return path
