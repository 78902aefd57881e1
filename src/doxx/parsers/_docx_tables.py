#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doxx/parsers/_docx_tables.py
"""Table extraction for DOCX documents.

Tables are read cell by cell from the underlying ``w:tc`` elements so that
horizontally merged cells appear once rather than once per grid column. The
first row becomes the header when it looks like one; otherwise it is promoted
anyway so every table has a header row. Column widths and alignments are
derived from the cell contents.

"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from docx.table import _Cell

from doxx.ast.nodes import (
    CellDataType,
    TableCell,
    TableData,
    TableMetadata,
    TextAlignment,
    TextFormatting,
)
from doxx.constants import (
    BOOLEAN_VALUES,
    COLUMN_ALIGNMENT_THRESHOLD,
    CURRENCY_SYMBOLS,
    HEADER_KEYWORDS,
    HEADER_MAX_AVERAGE_LENGTH,
    HEADER_MAX_WORDS,
    MIN_COLUMN_WIDTH,
)
from doxx.parsers._docx_formatting import extract_run_formatting, iter_paragraph_runs, run_element_text
from doxx.utils.text import display_width

if TYPE_CHECKING:
    from docx.table import Table

logger = logging.getLogger(__name__)


def _parses_as_float(value: str) -> bool:
    # float() also accepts digit-group underscores and surrounding whitespace
    if "_" in value or value != value.strip():
        return False
    try:
        float(value)
    except ValueError:
        return False
    return True


def detect_cell_data_type(content: str) -> CellDataType:
    """Infer the data type of a cell's text.

    Checks run in order: empty, currency, percentage, boolean, number
    (thousands separators allowed), date (three numeric parts separated by
    ``/`` or ``-``), and finally text.

    Examples
    --------
        >>> detect_cell_data_type("$1,200")
        <CellDataType.CURRENCY: 'currency'>
        >>> detect_cell_data_type("2024-01-15")
        <CellDataType.DATE: 'date'>

    """
    trimmed = content.strip()
    if not trimmed:
        return CellDataType.EMPTY
    if trimmed.startswith(CURRENCY_SYMBOLS):
        return CellDataType.CURRENCY
    if trimmed.endswith("%"):
        return CellDataType.PERCENTAGE
    if trimmed.lower() in BOOLEAN_VALUES:
        return CellDataType.BOOLEAN
    if _parses_as_float(trimmed.replace(",", "")):
        return CellDataType.NUMBER
    if "/" in trimmed or "-" in trimmed:
        parts = trimmed.replace("/", "-").split("-")
        if len(parts) == 3 and all(part.isascii() and part.isdigit() for part in parts):
            return CellDataType.DATE
    return CellDataType.TEXT


def build_cell(content: str, formatting: Optional[TextFormatting] = None) -> TableCell:
    """Create a cell whose data type and alignment are inferred from ``content``."""
    data_type = detect_cell_data_type(content)
    return TableCell(
        content=content,
        alignment=data_type.default_alignment,
        formatting=formatting or TextFormatting(),
        data_type=data_type,
    )


def appears_to_be_header(row: list[str]) -> bool:
    """Judge whether a row of cell texts reads like a header row.

    Rows whose cells average more than 50 characters are rejected. Otherwise
    a cell counts toward the header when it is a short phrase of at most
    three words or contains a typical column keyword; more than half of the
    cells must count.
    """
    if not row:
        return False

    average_length = sum(len(cell) for cell in row) // len(row)
    if average_length > HEADER_MAX_AVERAGE_LENGTH:
        return False

    indicators = 0
    for cell in row:
        lowered = cell.lower()
        if len(cell.split()) <= HEADER_MAX_WORDS and cell.strip():
            indicators += 1
        elif any(keyword in lowered for keyword in HEADER_KEYWORDS):
            indicators += 1

    return indicators > len(row) // 2


def calculate_column_widths(headers: list[TableCell], rows: list[list[TableCell]], column_count: int) -> list[int]:
    """Per-column maximum display width, never narrower than 3."""
    widths = [0] * column_count
    for row in [headers, *rows]:
        for index, cell in enumerate(row):
            widths[index] = max(widths[index], display_width(cell.content))
    return [max(width, MIN_COLUMN_WIDTH) for width in widths]


def determine_column_alignments(rows: list[list[TableCell]], column_count: int) -> list[TextAlignment]:
    """Align a column right when over 70% of its data cells are numeric.

    Columns that are over 70% boolean are centered; everything else is left
    aligned. The header row does not vote.
    """
    alignments: list[TextAlignment] = []
    for index in range(column_count):
        cells = [row[index] for row in rows if index < len(row)]
        alignment = TextAlignment.LEFT
        if cells:
            numeric_ratio = sum(cell.data_type.is_numeric for cell in cells) / len(cells)
            boolean_ratio = sum(cell.data_type is CellDataType.BOOLEAN for cell in cells) / len(cells)
            if numeric_ratio > COLUMN_ALIGNMENT_THRESHOLD:
                alignment = TextAlignment.RIGHT
            elif boolean_ratio > COLUMN_ALIGNMENT_THRESHOLD:
                alignment = TextAlignment.CENTER
        alignments.append(alignment)
    return alignments


def build_table_data(headers: list[TableCell], rows: list[list[TableCell]]) -> TableData:
    """Assemble ``TableData`` and derive its layout metadata."""
    column_count = max([len(headers), *(len(row) for row in rows)])
    metadata = TableMetadata(
        column_count=column_count,
        row_count=len(rows),
        has_headers=bool(headers),
        column_widths=calculate_column_widths(headers, rows, column_count),
        column_alignments=determine_column_alignments(rows, column_count),
    )
    return TableData(headers=headers, rows=rows, metadata=metadata)


def _extract_cell(cell: _Cell) -> TableCell:
    text = ""
    formatting: Optional[TextFormatting] = None
    for paragraph in cell.paragraphs:
        for run in iter_paragraph_runs(paragraph):
            run_text = run_element_text(run._r)
            if not run_text:
                continue
            if formatting is None:
                formatting = extract_run_formatting(run)
            if text and not text[-1].isspace() and not run_text[0].isspace():
                text += " "
            text += run_text
    return build_cell(text.strip(), formatting)


def extract_table(table: "Table") -> Optional[TableData]:
    """Extract a python-docx table into ``TableData``.

    Parameters
    ----------
    table : docx.table.Table
        Table to read

    Returns
    -------
    TableData or None
        The extracted table, or None when it has no cells

    """
    raw_rows: list[list[TableCell]] = []
    for tr in table._tbl.tr_lst:
        cells = [_extract_cell(_Cell(tc, table)) for tc in tr.tc_lst]
        if cells:
            raw_rows.append(cells)

    if not raw_rows:
        return None

    headers, rows = raw_rows[0], raw_rows[1:]
    if not appears_to_be_header([cell.content for cell in headers]):
        logger.debug("No header row detected; promoting first row to headers")

    return build_table_data(headers, rows)
