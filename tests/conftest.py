"""Shared fixtures and Hypothesis profiles for the doxx test suite."""

import os
from pathlib import Path
from typing import Generator

import pytest
from hypothesis import Verbosity, settings
from utils import cleanup_test_dir, create_test_temp_dir

# Select with HYPOTHESIS_PROFILE=ci for a longer property-based run
settings.register_profile("ci", max_examples=100, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=20)
settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "dev"))


def pytest_configure(config):
    """Register the suite's markers."""
    config.addinivalue_line("markers", "unit: isolated tests of one reconstruction stage")
    config.addinivalue_line("markers", "integration: tests that load complete .docx packages from disk")


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Yield a fresh directory that is removed after the test."""
    temp_path = create_test_temp_dir()
    try:
        yield temp_path
    finally:
        cleanup_test_dir(temp_path)
