#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doxx/api.py
"""Public entry points for loading and querying Word documents.

``load`` is the asynchronous entry point; it runs the synchronous
``load_document`` in a worker thread so an event loop is not blocked while
the package is read. ``search`` and ``outline`` operate on a loaded
``Document`` and never touch the source file.

"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Optional, Union

from doxx.ast.document_utils import OutlineItem, SearchResult, generate_outline, search_document
from doxx.ast.nodes import Document
from doxx.options.docx import DocxOptions, ImageOptions
from doxx.parsers.docx import DocxParser
from doxx.progress import ProgressCallback

logger = logging.getLogger(__name__)


def _build_options(
    image_options: Optional[ImageOptions], parser_options: Optional[DocxOptions], **kwargs: Any
) -> DocxOptions:
    options = parser_options or DocxOptions()
    if image_options is not None:
        kwargs["images"] = image_options
    if kwargs:
        options = options.create_updated(**kwargs)
    return options


def load_document(
    file_path: Union[str, Path],
    image_options: Optional[ImageOptions] = None,
    *,
    parser_options: Optional[DocxOptions] = None,
    progress_callback: Optional[ProgressCallback] = None,
    **kwargs: Any,
) -> Document:
    """Load and reconstruct a ``.docx`` file.

    Parameters
    ----------
    file_path : str or Path
        Word document to load
    image_options : ImageOptions, optional
        Image extraction settings; overrides ``parser_options.images``
    parser_options : DocxOptions, optional
        Pre-configured reconstruction options
    progress_callback : ProgressCallback, optional
        Receives ``ProgressEvent`` objects while the document is built
    kwargs : Any
        Individual ``DocxOptions`` fields that override ``parser_options``

    Returns
    -------
    Document
        Reconstructed document

    Raises
    ------
    FileNotFoundError
        If the file does not exist
    FormatError
        If the file is not a ``.docx`` file
    MalformedFileError
        If the package cannot be read or is not a Word document

    Examples
    --------
        >>> document = load_document("report.docx", include_equations=False)
        >>> document.metadata.page_count
        3

    """
    options = _build_options(image_options, parser_options, **kwargs)
    logger.debug(f"Loading {file_path}")
    parser = DocxParser(options, progress_callback=progress_callback)
    return parser.parse(file_path)


async def load(
    file_path: Union[str, Path],
    image_options: Optional[ImageOptions] = None,
    *,
    parser_options: Optional[DocxOptions] = None,
    progress_callback: Optional[ProgressCallback] = None,
    **kwargs: Any,
) -> Document:
    """Asynchronously load a ``.docx`` file.

    Accepts the same arguments as :func:`load_document`. The work runs in a
    worker thread; nothing is shared between concurrent loads.

    Examples
    --------
        >>> document = asyncio.run(load("report.docx"))

    """
    return await asyncio.to_thread(
        load_document,
        file_path,
        image_options,
        parser_options=parser_options,
        progress_callback=progress_callback,
        **kwargs,
    )


def search(document: Document, query: str) -> list[SearchResult]:
    """Case-insensitive text search over every element of ``document``."""
    return search_document(document, query)


def outline(document: Document) -> list[OutlineItem]:
    """Heading outline of ``document``."""
    return generate_outline(document)
