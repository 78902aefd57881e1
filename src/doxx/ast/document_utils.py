#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doxx/ast/document_utils.py
"""Read-only queries over a reconstructed document.

This module provides full-text search and outline generation. Both walk
``Document.elements`` in order and report positions by element index, so
consumers can scroll to a hit or a heading without re-deriving layout.

"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Iterator

from doxx.ast.nodes import (
    Document,
    DocumentElement,
    Equation,
    Heading,
    Image,
    List,
    Paragraph,
    Table,
)


@dataclass(frozen=True)
class SearchResult:
    """A single search hit.

    Parameters
    ----------
    element_index : int
        Index into ``Document.elements`` of the matching element
    text : str
        The searched text fragment (a heading, a paragraph, a list item, a
        table cell, an image description or an equation's LaTeX)
    start_pos : int
        Character offset of the first match within ``text``
    end_pos : int
        ``start_pos + len(query)``

    """

    element_index: int
    text: str
    start_pos: int
    end_pos: int


@dataclass(frozen=True)
class OutlineItem:
    """Entry of the document outline, one per heading."""

    title: str
    level: int
    element_index: int


def iter_searchable_text(element: DocumentElement) -> Iterator[str]:
    """Yield the text fragments of ``element`` that search considers.

    Tables and lists yield one fragment per cell or item; page breaks yield
    nothing.
    """
    if isinstance(element, Heading):
        yield element.text
    elif isinstance(element, Paragraph):
        yield element.text
    elif isinstance(element, List):
        for item in element.items:
            yield item.text
    elif isinstance(element, Table):
        for header in element.table.headers:
            yield header.content
        for row in element.table.rows:
            for cell in row:
                yield cell.content
    elif isinstance(element, Image):
        yield element.description
    elif isinstance(element, Equation):
        yield element.latex


def search_document(document: Document, query: str) -> list[SearchResult]:
    """Find case-insensitive occurrences of ``query``.

    Each text fragment contributes at most one result, for its first match.

    Parameters
    ----------
    document : Document
        Document to search
    query : str
        Text to look for. Empty and whitespace-only queries match nothing.

    Returns
    -------
    list of SearchResult
        Hits in document order

    Examples
    --------
        >>> results = search_document(document, "revenue")
        >>> [(r.element_index, r.text[r.start_pos:r.end_pos]) for r in results]
        [(3, 'Revenue'), (7, 'revenue')]

    """
    if not query or not query.strip():
        return []

    pattern = re.compile(re.escape(query), re.IGNORECASE)
    results: list[SearchResult] = []
    for element_index, element in enumerate(document.elements):
        for text in iter_searchable_text(element):
            match = pattern.search(text)
            if match is not None:
                start_pos = match.start()
                results.append(
                    SearchResult(
                        element_index=element_index,
                        text=text,
                        start_pos=start_pos,
                        end_pos=match.end(),
                    )
                )
    return results


def generate_outline(document: Document) -> list[OutlineItem]:
    """List every heading, prefixing its number when it has one."""
    outline: list[OutlineItem] = []
    for index, element in enumerate(document.elements):
        if isinstance(element, Heading):
            title = f"{element.number} {element.text}" if element.number else element.text
            outline.append(OutlineItem(title=title, level=element.level, element_index=index))
    return outline
