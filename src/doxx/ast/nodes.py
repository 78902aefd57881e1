#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doxx/ast/nodes.py
"""Element classes for the reconstructed document model.

This module defines the render-ready model produced by the DOCX parser. A
``Document`` holds an ordered list of block elements whose order is the
reading order of the source package.

Element Types
-------------
Block-level elements (the ``DocumentElement`` union):
    - Heading, Paragraph, List, Table, Image, Equation, PageBreak

Value objects shared by the elements:
    - TextFormatting, FormattedRun, ListItem
    - TableCell, TableMetadata, TableData

"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

from doxx.constants import MIN_COLUMN_WIDTH

if TYPE_CHECKING:
    from doxx.options.docx import ImageOptions


class TextAlignment(Enum):
    """Horizontal alignment of a table cell or column."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class CellDataType(Enum):
    """Inferred data type of a table cell's content."""

    TEXT = "text"
    NUMBER = "number"
    CURRENCY = "currency"
    PERCENTAGE = "percentage"
    DATE = "date"
    BOOLEAN = "boolean"
    EMPTY = "empty"

    @property
    def is_numeric(self) -> bool:
        """Return True for types rendered right-aligned."""
        return self in (CellDataType.NUMBER, CellDataType.CURRENCY, CellDataType.PERCENTAGE)

    @property
    def default_alignment(self) -> TextAlignment:
        """Alignment used for a cell of this type unless overridden."""
        if self.is_numeric:
            return TextAlignment.RIGHT
        if self is CellDataType.BOOLEAN:
            return TextAlignment.CENTER
        return TextAlignment.LEFT


@dataclass(frozen=True)
class TextFormatting:
    """Character formatting of a run.

    Parameters
    ----------
    bold, italic, underline, strikethrough : bool, default False
        Style bits; absent properties are off.
    font_size : float or None, default None
        Font size in points.
    color : str or None, default None
        Hex RGB color such as ``"FF0000"``.

    """

    bold: bool = False
    italic: bool = False
    underline: bool = False
    strikethrough: bool = False
    font_size: Optional[float] = None
    color: Optional[str] = None


@dataclass(frozen=True)
class FormattedRun:
    """A span of text sharing one ``TextFormatting``."""

    text: str
    formatting: TextFormatting = field(default_factory=TextFormatting)


def consolidate_runs(runs: list[FormattedRun]) -> list[FormattedRun]:
    """Merge adjacent runs that carry identical formatting.

    Parameters
    ----------
    runs : list of FormattedRun
        Runs in reading order

    Returns
    -------
    list of FormattedRun
        Runs with equal-formatted neighbours merged. The concatenated text is
        unchanged and consolidating the result again is a no-op.

    """
    consolidated: list[FormattedRun] = []
    for run in runs:
        if consolidated and consolidated[-1].formatting == run.formatting:
            previous = consolidated.pop()
            consolidated.append(FormattedRun(previous.text + run.text, previous.formatting))
        else:
            consolidated.append(run)
    return consolidated


def runs_text(runs: list[FormattedRun]) -> str:
    """Concatenate the text of ``runs``."""
    return "".join(run.text for run in runs)


@dataclass
class ListItem:
    """A single list entry.

    Parameters
    ----------
    runs : list of FormattedRun
        Item content with the bullet or number prefix removed
    level : int, default 0
        Nesting depth, 0 being the outermost level

    """

    runs: list[FormattedRun] = field(default_factory=list)
    level: int = 0

    @property
    def text(self) -> str:
        """Plain text of the item."""
        return runs_text(self.runs)


@dataclass(frozen=True)
class TableCell:
    """One table cell.

    ``alignment`` defaults from ``data_type`` unless explicitly overridden,
    see :attr:`CellDataType.default_alignment`.

    """

    content: str
    alignment: TextAlignment = TextAlignment.LEFT
    formatting: TextFormatting = field(default_factory=TextFormatting)
    data_type: CellDataType = CellDataType.TEXT


@dataclass
class TableMetadata:
    """Layout information derived from a table's content.

    Parameters
    ----------
    column_count : int
        ``max(len(headers), longest row)``
    row_count : int
        Number of data rows (headers excluded)
    has_headers : bool
        Whether ``headers`` is populated
    column_widths : list of int
        Display width per column, at least 3
    column_alignments : list of TextAlignment
        Alignment per column
    title : str or None, default None
        Optional caption

    """

    column_count: int
    row_count: int
    has_headers: bool
    column_widths: list[int] = field(default_factory=list)
    column_alignments: list[TextAlignment] = field(default_factory=list)
    title: Optional[str] = None

    def __post_init__(self) -> None:
        """Check the per-column invariants."""
        if len(self.column_widths) != self.column_count or len(self.column_alignments) != self.column_count:
            raise ValueError(
                f"Expected {self.column_count} column widths and alignments, got "
                f"{len(self.column_widths)} and {len(self.column_alignments)}"
            )
        if any(width < MIN_COLUMN_WIDTH for width in self.column_widths):
            raise ValueError(f"Column widths must be at least {MIN_COLUMN_WIDTH}: {self.column_widths}")


@dataclass
class TableData:
    """Cells of a table split into a header row and data rows."""

    headers: list[TableCell]
    rows: list[list[TableCell]]
    metadata: TableMetadata


@dataclass
class Heading:
    """Section heading.

    Parameters
    ----------
    level : int
        Heading level from 1 to 6
    text : str
        Heading text with any literal number removed
    number : str or None, default None
        Literal, reconstructed or automatic number such as ``"2.1"``

    """

    level: int
    text: str
    number: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate the heading level."""
        if not 1 <= self.level <= 6:
            raise ValueError(f"Heading level must be 1-6, got {self.level}")


@dataclass
class Paragraph:
    """Block of formatted runs."""

    runs: list[FormattedRun] = field(default_factory=list)

    @property
    def text(self) -> str:
        """Plain text of the paragraph."""
        return runs_text(self.runs)


@dataclass
class List:
    """Grouped list items."""

    items: list[ListItem] = field(default_factory=list)
    ordered: bool = False


@dataclass
class Table:
    """Table element wrapping the extracted ``TableData``."""

    table: TableData


@dataclass
class Image:
    """Embedded picture.

    Parameters
    ----------
    description : str
        Alt text from the drawing, or ``"Image N"``
    width, height : int or None
        Reported size in pixels
    relationship_id : str or None
        Relationship id of the image part
    image_path : str or None
        Where the image bytes were extracted to

    """

    description: str
    width: Optional[int] = None
    height: Optional[int] = None
    relationship_id: Optional[str] = None
    image_path: Optional[str] = None


@dataclass
class Equation:
    """Display equation.

    Parameters
    ----------
    latex : str
        LaTeX rendering
    fallback : str
        Concatenated plain text of the equation
    unicode : str, default ""
        Unicode rendering for plain-text consumers

    """

    latex: str
    fallback: str
    unicode: str = ""


@dataclass
class PageBreak:
    """Explicit page break."""


DocumentElement = Union[Heading, Paragraph, List, Table, Image, Equation, PageBreak]


@dataclass
class DocumentMetadata:
    """Package-level facts about a loaded document."""

    file_path: str = ""
    file_size: int = 0
    word_count: int = 0
    page_count: int = 0
    author: Optional[str] = None
    created: Optional[str] = None
    modified: Optional[str] = None


@dataclass
class Document:
    """A reconstructed Word document.

    Parameters
    ----------
    title : str
        Document title
    metadata : DocumentMetadata
        File and content statistics
    elements : list of DocumentElement
        Block elements in reading order
    image_options : ImageOptions or None
        Image settings the document was loaded with

    """

    title: str
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)
    elements: list[DocumentElement] = field(default_factory=list)
    image_options: Optional[ImageOptions] = None
