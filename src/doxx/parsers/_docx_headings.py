#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doxx/parsers/_docx_headings.py
"""Heading detection and numbering for DOCX paragraphs.

A paragraph is classified as a heading through an ordered chain of checks:

1. Its style is a ``Heading`` style, which fixes the level.
2. A literal number typed into the text (``"2.1 Scope"``) wins.
3. Otherwise Word numbering properties yield a reconstructed number.
4. Otherwise the document-wide heading tracker may supply one.

Paragraphs without a heading style fall back to a conservative text-shape
heuristic that must never promote an ordinary sentence.

"""

from __future__ import annotations

import logging
import re
import string
from dataclasses import dataclass
from typing import TYPE_CHECKING, Iterable, Optional

from doxx.ast.nodes import TextFormatting
from doxx.constants import (
    HEADING_SECTION_PREFIXES,
    HEADING_STOP_WORDS,
    MAX_HEADING_LEVEL,
    MIN_HEADINGS_FOR_AUTO_NUMBERING,
    SENTENCE_CONJUNCTIONS,
    SENTENCE_MIN_LENGTH,
    TEXT_HEADING_MAX_LENGTH,
)
from doxx.parsers._docx_formatting import extract_paragraph_text
from doxx.parsers._docx_lists import is_likely_list_item
from doxx.parsers._docx_numbering import HeadingNumberTracker, extract_numbering_info

if TYPE_CHECKING:
    from docx.text.paragraph import Paragraph

logger = logging.getLogger(__name__)

_HEADING_NUMBER_PATTERNS = (
    # "1. Intro", "1.2 Scope", "1.2.3. Details"
    re.compile(r"^(\d+(?:\.\d+)+\.?|\d+\.)\s+(.+)$"),
    re.compile(r"^((?:Section|Chapter|Part)\s+\d+(?:\.\d+)*\.?)\s+(.+)$"),
    re.compile(r"^([A-Z]\.)\s+(.+)$"),
    re.compile(r"^([IVX]+\.)\s+(.+)$"),
)

_RECONSTRUCTED_NUMBERS = {1: "1", 2: "1.1", 3: "1.1.1"}


@dataclass(frozen=True)
class HeadingInfo:
    """Result of classifying a styled heading paragraph.

    Parameters
    ----------
    level : int
        Heading level from 1 to 6
    number : str or None
        Literal or reconstructed number
    clean_text : str or None
        Text with the literal number removed; None keeps the paragraph text

    """

    level: int
    number: Optional[str] = None
    clean_text: Optional[str] = None


def heading_level_from_style(style_id: Optional[str]) -> Optional[int]:
    """Map a ``Heading`` style id or name to a heading level.

    ``"Heading3"`` and ``"heading 3"`` give 3; a trailing digit above 6 is
    clamped to 6; a heading style without a digit is level 1.
    """
    if not style_id or not (style_id.startswith("Heading") or style_id.startswith("heading")):
        return None
    last = style_id[-1]
    if last.isdigit():
        return max(min(int(last), MAX_HEADING_LEVEL), 1)
    return 1


def paragraph_heading_level(paragraph: "Paragraph") -> Optional[int]:
    """Heading level of ``paragraph`` from its direct style reference."""
    style_id = paragraph._p.style
    level = heading_level_from_style(style_id)
    if level is None and style_id:
        # Style ids of localized templates differ from their names
        try:
            level = heading_level_from_style(paragraph.style.name if paragraph.style is not None else None)
        except KeyError:
            level = None
    return level


def extract_heading_number_from_text(text: str) -> Optional[tuple[str, str]]:
    """Split a literal heading number from its title.

    Parameters
    ----------
    text : str
        Paragraph text

    Returns
    -------
    tuple of (str, str) or None
        ``(number, title)`` with the number's trailing period removed, or None
        when the text carries no recognizable numbering.

    Examples
    --------
        >>> extract_heading_number_from_text("1.1 Project Overview")
        ('1.1', 'Project Overview')
        >>> extract_heading_number_from_text("Section 1.2 Overview")
        ('Section 1.2', 'Overview')
        >>> extract_heading_number_from_text("Version 2") is None
        True

    """
    stripped = text.strip()
    for pattern in _HEADING_NUMBER_PATTERNS:
        match = pattern.match(stripped)
        if match is None:
            continue
        number = match.group(1).rstrip(".")
        title = match.group(2).strip()
        if number and title:
            return number, title
    return None


def reconstruct_heading_number(num_id: Optional[int], level: int, heading_level: int) -> str:
    """Approximate the visible number of a heading driven by Word numbering.

    The number definitions are not read, so every heading at a given depth
    reconstructs to the first number of that depth.
    """
    if level == heading_level - 1 and 0 <= level <= 3:
        return ".".join(["1"] * heading_level)
    return _RECONSTRUCTED_NUMBERS.get(heading_level, "1.1.1.1")


def detect_heading_with_numbering(paragraph: "Paragraph") -> Optional[HeadingInfo]:
    """Classify a paragraph with a heading style, or return None."""
    heading_level = paragraph_heading_level(paragraph)
    if heading_level is None:
        return None

    text = extract_paragraph_text(paragraph)

    literal = extract_heading_number_from_text(text)
    if literal is not None:
        number, clean_text = literal
        return HeadingInfo(level=heading_level, number=number, clean_text=clean_text)

    numbering = extract_numbering_info(paragraph)
    if numbering is not None:
        number = reconstruct_heading_number(numbering.num_id, numbering.level, heading_level)
        return HeadingInfo(level=heading_level, number=number, clean_text=text)

    return HeadingInfo(level=heading_level)


def analyze_heading_structure(paragraphs: Iterable["Paragraph"]) -> bool:
    """Decide whether headings should receive automatic numbers.

    Automatic numbering is enabled only when the document has at least three
    styled headings, none of them numbered by hand, spread over more than one
    level.
    """
    levels: list[int] = []
    for paragraph in paragraphs:
        level = paragraph_heading_level(paragraph)
        if level is None:
            continue
        if extract_heading_number_from_text(extract_paragraph_text(paragraph)) is not None:
            logger.debug("Document numbers its own headings; automatic numbering disabled")
            return False
        levels.append(level)

    if len(levels) < MIN_HEADINGS_FOR_AUTO_NUMBERING:
        return False
    return len(set(levels)) > 1


def resolve_heading_number(info: HeadingInfo, tracker: HeadingNumberTracker) -> Optional[str]:
    """Number for a classified heading, consulting the tracker last."""
    if info.number is not None:
        return info.number
    return tracker.get_number(info.level) or None


def is_likely_sentence(text: str) -> bool:
    """Heuristic for running prose: several clauses, a long terminated line, or conjunctions."""
    if text.count(". ") > 1:
        return True
    if len(text) > SENTENCE_MIN_LENGTH and text.endswith((".", "!", "?")):
        return True
    return any(conjunction in text for conjunction in SENTENCE_CONJUNCTIONS)


def heading_level_from_length(text: str) -> int:
    """Shorter text ranks higher: under 20 characters is 1, under 40 is 2, else 3."""
    if len(text) < 20:
        return 1
    if len(text) < 40:
        return 2
    return 3


def _is_caps_char(char: str) -> bool:
    return char.isupper() or char.isspace() or char.isnumeric() or char in string.punctuation


def detect_heading_from_text(text: str, formatting: TextFormatting) -> Optional[int]:
    """Guess a heading level for an unstyled paragraph.

    Parameters
    ----------
    text : str
        Paragraph text
    formatting : TextFormatting
        Formatting of the paragraph's first run

    Returns
    -------
    int or None
        Heading level, or None when the text should stay a paragraph

    """
    text = text.strip()
    if len(text) >= TEXT_HEADING_MAX_LENGTH or "\n" in text:
        return None

    if is_likely_list_item(text) or is_likely_sentence(text):
        return None
    if any(word in text for word in HEADING_STOP_WORDS):
        return None

    length = len(text)

    if formatting.bold and 5 < length < 60 and not text.endswith((".", ",", ";", ":")):
        return heading_level_from_length(text)

    if 15 < length < 50 and all(_is_caps_char(char) for char in text):
        return 1

    if text.startswith(HEADING_SECTION_PREFIXES):
        return heading_level_from_length(text)

    if 10 < length < 40 and not text.endswith(".") and not any(char in text for char in ",(:"):
        words = text.split()
        if 2 <= len(words) <= 5:
            has_meaningful_word = any(len(word) > 3 and word.isalpha() for word in words)
            if has_meaningful_word and text[0].isupper():
                return heading_level_from_length(text)

    return None
