#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doxx/parsers/_docx_formatting.py
"""Run-level text and formatting extraction for DOCX paragraphs.

The visible runs of a paragraph and the text of each run are defined here
once. The raw-XML equation scan reads runs through the same two functions,
so text offsets computed by either pass agree.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterator

from docx.oxml.ns import qn
from docx.text.run import Run

from doxx.ast.nodes import FormattedRun, TextFormatting

if TYPE_CHECKING:
    from docx.text.paragraph import Paragraph

logger = logging.getLogger(__name__)

# Paragraph descendants whose runs are part of the visible text
RUN_CONTAINERS = frozenset(
    {
        qn("w:ins"),
        qn("w:hyperlink"),
        qn("w:smartTag"),
        qn("w:fldSimple"),
        qn("w:customXml"),
        qn("w:sdt"),
        qn("w:sdtContent"),
    }
)
RUN_TAG = qn("w:r")
_PARAGRAPH_TAG = qn("w:p")
_TEXT_TAG = qn("w:t")
_BREAK_TAG = qn("w:br")
_BREAK_TYPE_ATTR = qn("w:type")

# Run children rendered as fixed text, matching python-docx's ``Run.text``
_TEXT_EQUIVALENTS = {
    qn("w:tab"): "\t",
    qn("w:ptab"): "\t",
    qn("w:cr"): "\n",
    qn("w:noBreakHyphen"): "-",
}


def run_element_text(run_element: Any) -> str:
    """Visible text of a ``w:r`` element.

    ``w:t`` contributes its text, tabs and carriage returns their characters,
    a non-breaking hyphen ``"-"`` and a text-wrapping break ``"\\n"``. Page
    and column breaks contribute nothing.
    """
    parts: list[str] = []
    for child in run_element.iterchildren():
        tag = child.tag
        if tag == _TEXT_TAG:
            parts.append(child.text or "")
        elif tag == _BREAK_TAG:
            if child.get(_BREAK_TYPE_ATTR, "textWrapping") == "textWrapping":
                parts.append("\n")
        elif tag in _TEXT_EQUIVALENTS:
            parts.append(_TEXT_EQUIVALENTS[tag])
    return "".join(parts)


def is_visible_run(run_element: Any) -> bool:
    """True when every ancestor between ``run_element`` and its ``w:p`` is a run container."""
    parent = run_element.getparent()
    while parent is not None:
        if parent.tag == _PARAGRAPH_TAG:
            return True
        if parent.tag not in RUN_CONTAINERS:
            return False
        parent = parent.getparent()
    return False


def extract_run_formatting(run: Run) -> TextFormatting:
    """Read the direct formatting of a python-docx run.

    Properties that are absent or explicitly off resolve to ``False``/``None``;
    there is no failure mode.

    Parameters
    ----------
    run : docx.text.run.Run
        Run to inspect

    Returns
    -------
    TextFormatting
        Flat formatting value object

    """
    font = run.font

    color = None
    try:
        rgb = font.color.rgb if font.color is not None else None
        if rgb is not None:
            color = str(rgb)
    except ValueError as e:
        logger.debug(f"Ignoring unparseable run color: {e}")

    font_size = font.size.pt if font.size is not None else None

    return TextFormatting(
        bold=bool(run.bold),
        italic=bool(run.italic),
        underline=bool(run.underline),
        strikethrough=bool(font.strike) or bool(font.double_strike),
        font_size=font_size,
        color=color,
    )


def _iter_run_elements(container: Any) -> Iterator[Any]:
    for child in container.iterchildren():
        if child.tag == RUN_TAG:
            yield child
        elif child.tag in RUN_CONTAINERS:
            yield from _iter_run_elements(child)


def iter_paragraph_runs(paragraph: "Paragraph") -> Iterator[Run]:
    """Yield the runs of ``paragraph`` in order.

    Runs nested in insertions, hyperlinks, fields and inline content
    controls are included; deleted runs are skipped.
    """
    for run_element in _iter_run_elements(paragraph._p):
        yield Run(run_element, paragraph)


def extract_formatted_runs(paragraph: "Paragraph") -> list[FormattedRun]:
    """Collect the non-empty runs of ``paragraph`` with their formatting."""
    runs: list[FormattedRun] = []
    for run in iter_paragraph_runs(paragraph):
        text = run_element_text(run._r)
        if text:
            runs.append(FormattedRun(text=text, formatting=extract_run_formatting(run)))
    return runs


def extract_paragraph_text(paragraph: "Paragraph") -> str:
    """Return the trimmed plain text of ``paragraph``."""
    return "".join(run_element_text(run._r) for run in iter_paragraph_runs(paragraph)).strip()


def first_run_formatting(paragraph: "Paragraph") -> TextFormatting:
    """Formatting of the first run carrying text, or the default formatting."""
    for run in iter_paragraph_runs(paragraph):
        if run_element_text(run._r):
            return extract_run_formatting(run)
    return TextFormatting()
