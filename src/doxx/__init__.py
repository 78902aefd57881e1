"""doxx - Word document reconstruction.

doxx reads ``.docx`` packages and rebuilds them as an ordered, render-ready
document model: headings with their numbers, paragraphs of formatted runs,
lists, tables with inferred column types, images, page breaks and equations
rendered to LaTeX and Unicode.

Examples
--------
Load a document and walk its outline:

    >>> from doxx import load_document, outline
    >>> document = load_document("report.docx")
    >>> [item.title for item in outline(document)]
    ['1 Introduction', '1.1 Scope', '2 Results']

From asynchronous code:

    >>> import asyncio
    >>> from doxx import load
    >>> document = asyncio.run(load("report.docx"))

"""

#  Copyright (c) 2025 Tom Villani, Ph.D.

# Check Python version before any imports
import sys

if sys.version_info < (3, 10):
    raise ImportError(
        "doxx requires Python 3.10 or later. "
        f"You are using Python {sys.version_info.major}.{sys.version_info.minor}."
    )

__version__ = "0.1.0"

from doxx.api import load, load_document, outline, search
from doxx.ast import Document, OutlineItem, SearchResult
from doxx.exceptions import DependencyError, DoxxError, FileError, FormatError, MalformedFileError, ParsingError
from doxx.logging_utils import configure_logging
from doxx.options import DocxOptions, ImageOptions
from doxx.progress import ProgressCallback, ProgressEvent

__all__ = [
    "__version__",
    "load",
    "load_document",
    "search",
    "outline",
    "configure_logging",
    "Document",
    "OutlineItem",
    "SearchResult",
    "DocxOptions",
    "ImageOptions",
    "DoxxError",
    "DependencyError",
    "FileError",
    "FormatError",
    "MalformedFileError",
    "ParsingError",
    "ProgressCallback",
    "ProgressEvent",
]
