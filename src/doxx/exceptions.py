#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doxx/exceptions.py
"""Exceptions raised by doxx.

Only failures that make a package unloadable are raised. Degraded content
such as a malformed equation, an unknown numbering definition or an
unparseable color falls back to a safe value and is logged instead.

Exception Hierarchy
-------------------
- DoxxError

  - ValidationError
    - InvalidOptionsError (options object of the wrong class)

  - FileError
    - FileNotFoundError (path does not exist)
    - MalformedFileError (unreadable ZIP, missing ``word/document.xml``)

  - FormatError (not a ``.docx`` file)

  - ParsingError (unexpected failure while rebuilding elements)

  - SecurityError
    - ZipFileSecurityError (zip bombs, path traversal)

  - DependencyError (python-docx or lxml unavailable)

"""

from typing import Any


class DoxxError(Exception):
    """Root of every doxx exception.

    Parameters
    ----------
    message : str
        Description of the failure
    original_error : Exception, optional
        Lower-level exception being wrapped

    """

    def __init__(self, message: str, original_error: Exception | None = None):
        """Store the message and the wrapped exception."""
        super().__init__(message)
        self.message = message
        self.original_error = original_error


class ValidationError(DoxxError):
    """An argument passed to doxx was rejected.

    Parameters
    ----------
    message : str
        Description of the problem
    parameter_name : str, optional
        Name of the rejected argument
    parameter_value : Any, optional
        The rejected value
    original_error : Exception, optional
        Lower-level exception being wrapped

    """

    def __init__(
        self,
        message: str,
        parameter_name: str | None = None,
        parameter_value: Any = None,
        original_error: Exception | None = None,
    ):
        """Store the rejected parameter alongside the message."""
        super().__init__(message, original_error=original_error)
        self.parameter_name = parameter_name
        self.parameter_value = parameter_value


class InvalidOptionsError(ValidationError):
    """A loader received an options object of the wrong class.

    Parameters
    ----------
    converter_name : str
        Format name of the loader (e.g. "docx")
    expected_type : type
        Options class the loader accepts
    received_type : type
        Class of the object that was passed

    """

    def __init__(self, converter_name: str, expected_type: type, received_type: type):
        """Build the message from the expected and received classes."""
        super().__init__(
            f"The {converter_name} loader takes {expected_type.__name__}, not {received_type.__name__}",
            parameter_name="options",
            parameter_value=received_type,
        )
        self.converter_name = converter_name
        self.expected_type = expected_type
        self.received_type = received_type


class FileError(DoxxError):
    """A source file could not be used.

    Parameters
    ----------
    message : str
        Description of the problem
    file_path : str, optional
        The offending path
    original_error : Exception, optional
        Lower-level exception being wrapped

    """

    def __init__(self, message: str, file_path: str | None = None, original_error: Exception | None = None):
        """Store the offending path alongside the message."""
        super().__init__(message, original_error=original_error)
        self.file_path = file_path


class FileNotFoundError(FileError):
    """The path passed to a loader does not exist."""

    def __init__(self, file_path: str):
        """Build the message from ``file_path``."""
        super().__init__(f"File not found: {file_path}", file_path=file_path)


class MalformedFileError(FileError):
    """The package is not a readable Word document."""


class FormatError(DoxxError):
    """The input does not have a ``.docx`` extension.

    Parameters
    ----------
    format_type : str, optional
        The extension (or file name) that was rejected
    message : str, optional
        Replaces the default message

    """

    def __init__(self, format_type: str | None = None, message: str | None = None):
        """Build the message from the rejected extension unless one is given."""
        if message is None:
            message = f"Unsupported format: '{format_type}'. Only .docx files are supported"
        super().__init__(message)
        self.format_type = format_type


class ParsingError(DoxxError):
    """Rebuilding the element sequence failed unexpectedly.

    ``parsing_stage`` names the step that failed; ``original_error`` holds
    the exception it raised.
    """

    def __init__(self, message: str, parsing_stage: str | None = None, original_error: Exception | None = None):
        """Store the failing stage alongside the message."""
        super().__init__(message, original_error)
        self.parsing_stage = parsing_stage


class SecurityError(DoxxError):
    """Input was refused because processing it would be unsafe."""


class ZipFileSecurityError(SecurityError):
    """The ZIP container looks like a zip bomb or carries unsafe member paths."""


class DependencyError(DoxxError):
    """Packages a loader needs are missing or too old.

    Parameters
    ----------
    converter_name : str
        Format name of the loader (e.g. "docx")
    missing_packages : list[tuple[str, str]]
        ``(install_name, version_spec)`` of packages that failed to import
    version_mismatches : list[tuple[str, str, str]], optional
        ``(install_name, required, installed)`` of packages present at the
        wrong version
    original_import_error : ImportError, optional
        Error raised by the first failed import

    """

    def __init__(
        self,
        converter_name: str,
        missing_packages: list[tuple[str, str]],
        version_mismatches: list[tuple[str, str, str]] | None = None,
        original_import_error: ImportError | None = None,
    ):
        """Compose a message that ends with a pip command fixing every problem."""
        version_mismatches = version_mismatches or []
        lines = []
        if missing_packages:
            names = ", ".join(f"{name}{spec}" for name, spec in missing_packages)
            lines.append(f"Loading {converter_name} files requires: {names}")
        for name, required, installed in version_mismatches:
            lines.append(f"{name}{required} is required but {installed} is installed")

        requirements = missing_packages + [(name, required) for name, required, _ in version_mismatches]
        lines.append("Install with: pip install --upgrade " + " ".join(f'"{n}{s}"' if s else n for n, s in requirements))

        super().__init__("\n".join(lines), original_error=original_import_error)
        self.converter_name = converter_name
        self.missing_packages = missing_packages
        self.version_mismatches = version_mismatches
        self.original_import_error = original_import_error
