#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doxx/parsers/_docx_equations.py
"""Equation positions in the raw document part and their merge into the element stream.

python-docx does not surface OMML, so equations are located by a separate
streaming pass over ``word/document.xml``. Every ``w:p`` start tag advances a
1-based paragraph counter; the parser numbers body paragraphs the same way,
which lets the two passes be joined by index alone.

An ``m:oMath`` wrapped in ``m:oMathPara`` is a display equation and becomes
an ``Equation`` element of its own. Any other ``m:oMath`` is inline and is
spliced into its paragraph's runs as ``$latex$``.

"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import Iterable, Union

from lxml import etree

from doxx.ast.nodes import DocumentElement, Equation, FormattedRun, Heading, Paragraph
from doxx.constants import (
    MATH_OMATH_PARA_TAG,
    MATH_OMATH_TAG,
    WORD_LIST_MARKER,
    WORD_PARAGRAPH_TAG,
)
from doxx.parsers._docx_formatting import RUN_TAG, is_visible_run, run_element_text
from doxx.utils.omml import render_equation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EquationInfo:
    """An equation located by the scan.

    Parameters
    ----------
    latex : str
        LaTeX rendering
    fallback : str
        Plain leaf text
    is_inline : bool
        False for equations wrapped in ``m:oMathPara``
    paragraph_index : int
        1-based index of the enclosing ``w:p``; 0 when outside any paragraph
    unicode : str
        Unicode rendering

    """

    latex: str
    fallback: str
    is_inline: bool
    paragraph_index: int
    unicode: str = ""


@dataclass(frozen=True)
class TextContent:
    """Plain text between inline equations."""

    text: str


@dataclass(frozen=True)
class InlineEquationContent:
    """An inline equation at its position within a paragraph."""

    latex: str
    fallback: str


ParagraphContent = Union[TextContent, InlineEquationContent]


@dataclass
class EquationScan:
    """Result of :func:`scan_document_xml`."""

    equations: list[EquationInfo] = field(default_factory=list)
    paragraphs: dict[int, list[ParagraphContent]] = field(default_factory=dict)

    @property
    def display_equations(self) -> list[EquationInfo]:
        """Display equations in ascending paragraph order."""
        return sorted((eq for eq in self.equations if not eq.is_inline), key=lambda eq: eq.paragraph_index)

    def inline_contents(self, paragraph_index: int) -> list[ParagraphContent]:
        """Interleaved text and inline equations of one paragraph, or ``[]`` when it has none."""
        contents = self.paragraphs.get(paragraph_index, [])
        if any(isinstance(content, InlineEquationContent) for content in contents):
            return contents
        return []


def _append_text(contents: list[ParagraphContent], text: str) -> None:
    if contents and isinstance(contents[-1], TextContent):
        contents[-1] = TextContent(contents[-1].text + text)
    else:
        contents.append(TextContent(text))


def scan_document_xml(xml_bytes: bytes) -> EquationScan:
    """Locate every equation in a serialized document part.

    Parameters
    ----------
    xml_bytes : bytes
        Contents of ``word/document.xml``

    Returns
    -------
    EquationScan
        Equations in document order plus the text/equation interleaving of
        each paragraph that has content. Malformed XML yields an empty scan.

    """
    scan = EquationScan()
    paragraph_stack: list[int] = []
    paragraph_count = 0
    math_depth = 0
    display_depth = 0

    try:
        for event, elem in etree.iterparse(
            io.BytesIO(xml_bytes), events=("start", "end"), recover=True, resolve_entities=False
        ):
            tag = elem.tag
            if event == "start":
                if tag == WORD_PARAGRAPH_TAG:
                    paragraph_count += 1
                    paragraph_stack.append(paragraph_count)
                elif tag == MATH_OMATH_PARA_TAG:
                    display_depth += 1
                elif tag == MATH_OMATH_TAG:
                    math_depth += 1
                continue

            current = paragraph_stack[-1] if paragraph_stack else 0

            if tag == MATH_OMATH_TAG:
                math_depth -= 1
                if math_depth > 0:
                    continue
                rendered = render_equation(elem)
                is_inline = display_depth == 0
                scan.equations.append(
                    EquationInfo(
                        latex=rendered.latex,
                        fallback=rendered.fallback,
                        is_inline=is_inline,
                        paragraph_index=current,
                        unicode=rendered.unicode,
                    )
                )
                if is_inline and current:
                    scan.paragraphs.setdefault(current, []).append(
                        InlineEquationContent(latex=rendered.latex, fallback=rendered.fallback)
                    )
            elif tag == MATH_OMATH_PARA_TAG:
                display_depth -= 1
            elif tag == RUN_TAG:
                text = run_element_text(elem) if current and math_depth == 0 and is_visible_run(elem) else ""
                if text:
                    _append_text(scan.paragraphs.setdefault(current, []), text)
            elif tag == WORD_PARAGRAPH_TAG:
                paragraph_stack.pop()
                if not paragraph_stack:
                    elem.clear()
    except etree.XMLSyntaxError as e:
        logger.debug(f"Equation scan aborted on malformed XML: {e}")
        return EquationScan()

    logger.debug(
        f"Equation scan: {paragraph_count} paragraphs, "
        f"{sum(eq.is_inline for eq in scan.equations)} inline and "
        f"{sum(not eq.is_inline for eq in scan.equations)} display equations"
    )
    return scan


def splice_inline_equations(runs: list[FormattedRun], contents: list[ParagraphContent]) -> list[FormattedRun]:
    """Insert inline equations into paragraph runs at their text offsets.

    Offsets come from the text that precedes each equation in the scan. A
    run that straddles an offset is split in two with its formatting kept on
    both halves. A leading Word-list marker run stays first. Equations past
    the end of the text are appended.

    Examples
    --------
        >>> runs = [FormattedRun("Area is  here")]
        >>> contents = [TextContent("Area is "), InlineEquationContent("r^{2}", "r2"), TextContent(" here")]
        >>> [run.text for run in splice_inline_equations(runs, contents)]
        ['Area is ', '$r^{2}$', ' here']

    """
    marker = runs[:1] if runs and runs[0].text.startswith(WORD_LIST_MARKER) else []
    body = runs[len(marker) :]

    pending: list[tuple[int, FormattedRun]] = []
    position = 0
    for content in contents:
        if isinstance(content, TextContent):
            position += len(content.text)
        else:
            pending.append((position, FormattedRun(text=f"${content.latex}$")))

    result = list(marker)
    index = 0
    offset = 0
    for run in body:
        cut = 0
        while index < len(pending) and pending[index][0] - offset < len(run.text):
            split = max(pending[index][0] - offset, cut)
            if split > cut:
                result.append(FormattedRun(text=run.text[cut:split], formatting=run.formatting))
            result.append(pending[index][1])
            cut = split
            index += 1
        if cut < len(run.text):
            result.append(FormattedRun(text=run.text[cut:], formatting=run.formatting))
        offset += len(run.text)

    result.extend(equation_run for _, equation_run in pending[index:])
    return result


def splice_heading_text(title: str, contents: list[ParagraphContent]) -> str:
    """Write inline equations into a heading title at their text positions.

    ``title`` is the heading text as classified, which may lack a literal
    number that opens the paragraph. That leading text is dropped from the
    spliced result; whitespace at both ends is trimmed.

    Examples
    --------
        >>> contents = [TextContent("2. Area "), InlineEquationContent("r^{2}", "r2"), TextContent(" bound")]
        >>> splice_heading_text("Area  bound", contents)
        'Area $r^{2}$ bound'

    """
    raw = "".join(content.text for content in contents if isinstance(content, TextContent))
    start = raw.find(title) if title else -1
    prefix = raw[:start] if start > 0 else ""

    spliced = "".join(
        content.text if isinstance(content, TextContent) else f"${content.latex}$" for content in contents
    )
    if prefix and spliced.startswith(prefix):
        spliced = spliced[len(prefix) :]
    return spliced.strip()


def apply_inline_equations(element: DocumentElement, contents: list[ParagraphContent]) -> DocumentElement:
    """Splice inline equations into a paragraph-derived element.

    Headings carry plain text, so their equations are written into the title
    where they occur. Other element kinds are returned unchanged.
    """
    if not contents:
        return element
    if isinstance(element, Paragraph):
        return Paragraph(runs=splice_inline_equations(element.runs, contents))
    if isinstance(element, Heading):
        return Heading(level=element.level, text=splice_heading_text(element.text, contents), number=element.number)
    return element


def insert_display_equations(
    blocks: Iterable[tuple[int, list[DocumentElement]]], equations: list[EquationInfo]
) -> list[DocumentElement]:
    """Flatten anchored blocks, placing display equations by paragraph index.

    Parameters
    ----------
    blocks : iterable of (int, list of DocumentElement)
        Elements produced per body block, each with the 1-based index of its
        first paragraph, in document order
    equations : list of EquationInfo
        Display equations in ascending paragraph order

    Returns
    -------
    list of DocumentElement
        Each equation sits before the first block anchored after its
        paragraph; equations past the last block are appended at the end.

    """
    result: list[DocumentElement] = []
    pending = list(equations)
    position = 0
    for anchor, elements in blocks:
        while position < len(pending) and pending[position].paragraph_index < anchor:
            result.append(_to_element(pending[position]))
            position += 1
        result.extend(elements)
    result.extend(_to_element(eq) for eq in pending[position:])
    return result


def _to_element(info: EquationInfo) -> Equation:
    return Equation(latex=info.latex, fallback=info.fallback, unicode=info.unicode)
