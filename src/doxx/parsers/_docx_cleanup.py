#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doxx/parsers/_docx_cleanup.py
"""Final pass over the reconstructed element stream."""

from __future__ import annotations

from doxx.ast.nodes import DocumentElement, FormattedRun, List, ListItem, Paragraph
from doxx.constants import WORD_LIST_MARKER


def _strip_marker(run: FormattedRun) -> FormattedRun:
    if run.text.startswith(WORD_LIST_MARKER):
        return FormattedRun(text=run.text[len(WORD_LIST_MARKER) :], formatting=run.formatting)
    return run


def clean_word_list_markers(elements: list[DocumentElement]) -> list[DocumentElement]:
    """Remove the internal Word-list tag from paragraphs and list items.

    Every tagged paragraph run is cleaned; for list items only the first run
    can carry the tag.
    """
    cleaned: list[DocumentElement] = []
    for element in elements:
        if isinstance(element, Paragraph):
            cleaned.append(Paragraph(runs=[_strip_marker(run) for run in element.runs]))
        elif isinstance(element, List):
            items = []
            for item in element.items:
                runs = list(item.runs)
                if runs:
                    runs[0] = _strip_marker(runs[0])
                items.append(ListItem(runs=runs, level=item.level))
            cleaned.append(List(items=items, ordered=element.ordered))
        else:
            cleaned.append(element)
    return cleaned

