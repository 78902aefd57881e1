#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doxx/parsers/_docx_lists.py
"""List detection and grouping for DOCX paragraphs.

Word lists (paragraphs with numbering properties) are rendered one paragraph
at a time: the visible number is computed by the list numbering manager and
stored in a synthetic leading run tagged with ``WORD_LIST_MARKER`` so the
cleanup pass can find it without touching the real text runs.

Lists typed by hand (``"- item"``, ``"1. item"``) are detected from their
text and coalesced into ``List`` elements after the main pass.

"""

from __future__ import annotations

import logging

from doxx.ast.nodes import DocumentElement, FormattedRun, List, ListItem, Paragraph, TextFormatting, runs_text
from doxx.constants import (
    BULLET_PREFIX,
    NUMBERED_ITEM_MIN_CONTENT,
    SPACES_PER_LIST_LEVEL,
    TEXT_BULLET_PREFIXES,
    WORD_LIST_INDENT,
    WORD_LIST_MARKER,
)
from doxx.parsers._docx_numbering import (
    ListNumberingManager,
    NumberingInfo,
    get_numbering_format,
    is_ordered_list,
)

logger = logging.getLogger(__name__)


def _is_ascii_letter(char: str) -> bool:
    return char.isascii() and char.isalpha()


def is_likely_list_item(text: str) -> bool:
    """Recognize a hand-typed list item from its text.

    Parameters
    ----------
    text : str
        Paragraph text

    Returns
    -------
    bool
        True for text starting with a bullet glyph (``"• "``, ``"- "``,
        ``"* "``), a number followed by a period and more than 20 characters
        of content, or a single letter followed by a period. Word list
        paragraphs, which carry the internal marker, are never matched.

    """
    text = text.strip()
    if not text or text.startswith(WORD_LIST_MARKER):
        return False

    if text[0].isdigit() and "." in text:
        after_dot = text[text.index(".") + 1 :].strip()
        if len(after_dot) > NUMBERED_ITEM_MIN_CONTENT:
            return True

    if text.startswith(TEXT_BULLET_PREFIXES):
        return True

    return len(text) > 3 and text[1] == "." and _is_ascii_letter(text[0])


def list_level_from_indent(text: str) -> int:
    """Nesting level from leading whitespace, two spaces per level."""
    leading = len(text) - len(text.lstrip())
    return leading // SPACES_PER_LIST_LEVEL


def _list_prefix(text: str) -> str:
    """Bullet or number prefix at the start of already-trimmed ``text``."""
    for bullet in TEXT_BULLET_PREFIXES:
        if text.startswith(bullet):
            return bullet

    dot_pos = text.find(".")
    if dot_pos < 0:
        return ""

    if all(char.isascii() and char.isdigit() for char in text[:dot_pos]):
        end = dot_pos + 2 if text[dot_pos + 1 : dot_pos + 2] == " " else dot_pos + 1
        return text[:end]

    if len(text) > 2 and text[1] == "." and _is_ascii_letter(text[0]):
        return text[:3] if text[2] == " " else text[:2]

    return ""


def clean_list_item_runs(runs: list[FormattedRun]) -> list[FormattedRun]:
    """Strip the list prefix from ``runs`` without merging their formatting.

    The prefix is removed character by character across run boundaries. A
    run consumed entirely is dropped; a run consumed in part is truncated and
    left-stripped.
    """
    if not runs:
        return runs

    combined = runs_text(runs)
    trimmed = combined.strip()
    prefix = _list_prefix(trimmed)
    if not prefix:
        return list(runs)

    leading = len(combined) - len(combined.lstrip())
    to_remove = leading + len(prefix)

    cleaned: list[FormattedRun] = []
    for run in runs:
        if to_remove == 0:
            cleaned.append(run)
            continue
        if len(run.text) <= to_remove:
            to_remove -= len(run.text)
            continue
        keep = run.text[to_remove:].lstrip()
        if keep:
            cleaned.append(FormattedRun(text=keep, formatting=run.formatting))
        to_remove = 0
    return cleaned


def group_list_items(elements: list[DocumentElement]) -> list[DocumentElement]:
    """Coalesce consecutive hand-typed list paragraphs into ``List`` elements.

    A new list starts whenever a non-list element intervenes or the list
    switches between ordered (leading digit) and unordered.
    """
    result: list[DocumentElement] = []
    current_items: list[ListItem] = []
    current_ordered = False

    def flush() -> None:
        nonlocal current_items
        if current_items:
            result.append(List(items=current_items, ordered=current_ordered))
            current_items = []

    for element in elements:
        if isinstance(element, Paragraph):
            text = element.text
            if is_likely_list_item(text):
                ordered = text.strip()[0].isdigit()
                if current_items and ordered != current_ordered:
                    flush()
                current_ordered = ordered
                current_items.append(
                    ListItem(runs=clean_list_item_runs(element.runs), level=list_level_from_indent(text))
                )
                continue
        flush()
        result.append(element)

    flush()
    return result


def word_list_prefix(info: NumberingInfo, manager: ListNumberingManager) -> str:
    """Visible number or bullet for a Word list paragraph."""
    if info.num_id is not None and is_ordered_list(info.num_id, info.level):
        fmt = get_numbering_format(info.num_id, info.level)
        return manager.generate_number(info.num_id, info.level, fmt)
    return BULLET_PREFIX


def build_word_list_runs(
    info: NumberingInfo, runs: list[FormattedRun], manager: ListNumberingManager
) -> list[FormattedRun]:
    """Prepend the tagged numbering run to a Word list paragraph's runs.

    The numbering run has default formatting so the number does not inherit
    the color or weight of the item text.
    """
    indent = WORD_LIST_INDENT * info.level
    prefix = word_list_prefix(info, manager)
    marker_run = FormattedRun(text=f"{WORD_LIST_MARKER}{indent}{prefix}", formatting=TextFormatting())
    return [marker_run, *runs]
