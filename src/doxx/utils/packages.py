#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doxx/utils/packages.py
"""Installed-distribution checks for the loader's third-party stack."""

from __future__ import annotations

import importlib
from dataclasses import dataclass, field
from importlib import metadata
from typing import Iterable, Optional, Tuple

from packaging import version
from packaging.specifiers import SpecifierSet


def get_package_version(package_name: str) -> Optional[str]:
    """Return the installed version of distribution ``package_name``, or None."""
    try:
        return metadata.version(package_name)
    except metadata.PackageNotFoundError:
        return None


def check_version_requirement(package_name: str, version_spec: str) -> Tuple[bool, Optional[str]]:
    """Check an installed distribution against a PEP 440 specifier.

    Parameters
    ----------
    package_name : str
        Distribution name (e.g. ``python-docx``)
    version_spec : str
        Specifier such as ``">=1.1.0"``

    Returns
    -------
    tuple
        ``(meets_requirement, installed_version)``; a missing distribution
        gives ``(False, None)``

    """
    installed_version = get_package_version(package_name)
    if not installed_version:
        return False, None
    return version.parse(installed_version) in SpecifierSet(version_spec), installed_version


@dataclass
class DependencyReport:
    """Outcome of checking a list of ``(install_name, import_name, version_spec)`` entries."""

    missing: list[tuple[str, str]] = field(default_factory=list)
    version_mismatches: list[tuple[str, str, str]] = field(default_factory=list)
    first_import_error: Optional[ImportError] = None

    @property
    def ok(self) -> bool:
        return not self.missing and not self.version_mismatches


def check_dependencies(packages: Iterable[tuple[str, str, str]]) -> DependencyReport:
    """Import each module and verify its distribution version.

    Every entry is checked so that a single error can list all problems.
    """
    report = DependencyReport()
    for install_name, import_name, version_spec in packages:
        try:
            importlib.import_module(import_name)
        except ImportError as e:
            report.missing.append((install_name, version_spec))
            if report.first_import_error is None:
                report.first_import_error = e
            continue

        if version_spec:
            meets_requirement, installed_version = check_version_requirement(install_name, version_spec)
            if not meets_requirement:
                report.version_mismatches.append((install_name, version_spec, installed_version or "unknown"))
    return report
