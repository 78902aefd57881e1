#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doxx/ast/__init__.py
"""Document model for reconstructed Word documents."""

from doxx.ast.document_utils import OutlineItem, SearchResult, generate_outline, search_document
from doxx.ast.nodes import (
    CellDataType,
    Document,
    DocumentElement,
    DocumentMetadata,
    Equation,
    FormattedRun,
    Heading,
    Image,
    List,
    ListItem,
    PageBreak,
    Paragraph,
    Table,
    TableCell,
    TableData,
    TableMetadata,
    TextAlignment,
    TextFormatting,
    consolidate_runs,
    runs_text,
)

__all__ = [
    "CellDataType",
    "Document",
    "DocumentElement",
    "DocumentMetadata",
    "Equation",
    "FormattedRun",
    "Heading",
    "Image",
    "List",
    "ListItem",
    "OutlineItem",
    "PageBreak",
    "Paragraph",
    "SearchResult",
    "Table",
    "TableCell",
    "TableData",
    "TableMetadata",
    "TextAlignment",
    "TextFormatting",
    "consolidate_runs",
    "generate_outline",
    "runs_text",
    "search_document",
]
