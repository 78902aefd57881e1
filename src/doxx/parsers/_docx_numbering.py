#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doxx/parsers/_docx_numbering.py
"""Numbering state for Word lists and headings.

Two independent counters live here. ``ListNumberingManager`` reproduces the
visible prefixes of Word's automatic list numbering, keyed by numbering id and
level. ``HeadingNumberTracker`` generates hierarchical heading numbers for
documents whose headings carry no numbering of their own.

Both are created fresh for every document load. Word's numbering-definition
part is not read: formats are chosen from a fixed table of known
``(num_id, level)`` pairs with a level-based fallback.

"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

from docx.oxml.ns import qn

from doxx.constants import BULLET_PREFIX, MAX_HEADING_LEVEL

if TYPE_CHECKING:
    from docx.text.paragraph import Paragraph

logger = logging.getLogger(__name__)


class NumberingFormat(Enum):
    """Visible style of an automatic list number."""

    DECIMAL = "decimal"
    LOWER_LETTER = "lowerLetter"
    UPPER_LETTER = "upperLetter"
    LOWER_ROMAN = "lowerRoman"
    UPPER_ROMAN = "upperRoman"
    PAREN_LOWER_LETTER = "parenLowerLetter"
    PAREN_LOWER_ROMAN = "parenLowerRoman"
    BULLET = "bullet"


_KNOWN_FORMATS: dict[tuple[int, int], NumberingFormat] = {
    # Main multilevel list: 1., 2.1., i.
    (4, 0): NumberingFormat.DECIMAL,
    (4, 1): NumberingFormat.DECIMAL,
    (4, 2): NumberingFormat.LOWER_ROMAN,
    (5, 2): NumberingFormat.PAREN_LOWER_LETTER,
    (2, 0): NumberingFormat.DECIMAL,
    (2, 3): NumberingFormat.PAREN_LOWER_ROMAN,
    # Word's default multilevel scheme
    (1, 0): NumberingFormat.DECIMAL,
    (1, 1): NumberingFormat.LOWER_LETTER,
    (1, 2): NumberingFormat.LOWER_ROMAN,
    (1, 3): NumberingFormat.PAREN_LOWER_LETTER,
    (1, 4): NumberingFormat.PAREN_LOWER_ROMAN,
}

_LEVEL_FORMATS: dict[int, NumberingFormat] = {
    0: NumberingFormat.DECIMAL,
    1: NumberingFormat.LOWER_LETTER,
    2: NumberingFormat.LOWER_ROMAN,
    3: NumberingFormat.UPPER_LETTER,
    4: NumberingFormat.UPPER_ROMAN,
}

# (num_id, level) pairs rendered as "<parent>.<child>. "
_HIERARCHICAL_LEVELS = frozenset({(4, 1)})

_ROMAN_NUMERALS = (
    (1000, "M"),
    (900, "CM"),
    (500, "D"),
    (400, "CD"),
    (100, "C"),
    (90, "XC"),
    (50, "L"),
    (40, "XL"),
    (10, "X"),
    (9, "IX"),
    (5, "V"),
    (4, "IV"),
    (1, "I"),
)


@dataclass(frozen=True)
class NumberingInfo:
    """Numbering properties of a paragraph.

    Parameters
    ----------
    num_id : int or None
        Numbering definition id; None when ``w:numId`` is absent
    level : int
        Zero-based list level from ``w:ilvl``

    """

    num_id: Optional[int]
    level: int = 0


def extract_numbering_info(paragraph: "Paragraph") -> Optional[NumberingInfo]:
    """Read ``w:numPr`` from a paragraph's direct properties.

    Returns None when the paragraph has no numbering properties or when
    ``w:numId`` is 0, which Word uses to switch numbering off.
    """
    p_pr = paragraph._p.pPr
    if p_pr is None:
        return None
    num_pr = p_pr.find(qn("w:numPr"))
    if num_pr is None:
        return None

    level = _int_val(num_pr.find(qn("w:ilvl")), default=0)
    num_id_elem = num_pr.find(qn("w:numId"))
    num_id = _int_val(num_id_elem, default=None) if num_id_elem is not None else None
    if num_id == 0:
        return None
    return NumberingInfo(num_id=num_id, level=max(level or 0, 0))


def _int_val(element, default: Optional[int]) -> Optional[int]:
    if element is None:
        return default
    raw = element.get(qn("w:val"))
    try:
        return int(raw)
    except (TypeError, ValueError):
        logger.debug(f"Ignoring non-integer numbering value: {raw!r}")
        return default


def to_roman(number: int) -> str:
    """Encode ``number`` in classical subtractive Roman numerals.

    Examples
    --------
        >>> to_roman(1994)
        'MCMXCIV'

    """
    result = []
    remaining = number
    for value, numeral in _ROMAN_NUMERALS:
        while remaining >= value:
            result.append(numeral)
            remaining -= value
    return "".join(result)


def _to_letter(number: int) -> Optional[str]:
    if 1 <= number <= 26:
        return chr(ord("a") + number - 1)
    return None


def get_numbering_format(num_id: int, level: int) -> NumberingFormat:
    """Choose the number format for a ``(num_id, level)`` pair."""
    known = _KNOWN_FORMATS.get((num_id, level))
    if known is not None:
        return known
    return _LEVEL_FORMATS.get(level, NumberingFormat.DECIMAL)


def is_ordered_list(num_id: Optional[int], level: int) -> bool:
    """Decide whether a Word list level renders numbers or bullets.

    Numbering id 1 is Word's default mixed list: its first three levels are
    numbered and deeper levels alternate. Every other id is numbered. A
    paragraph with no numbering id is a bullet.
    """
    if num_id is None:
        return False
    if num_id == 1:
        return level <= 2 or level % 2 == 1
    return True


class ListNumberingManager:
    """Running counters for automatic list numbering.

    Counters are keyed by ``(num_id, level)``. Incrementing a level removes
    every deeper counter for the same numbering id, so a nested list restarts
    from 1 under each new parent item.

    Examples
    --------
        >>> manager = ListNumberingManager()
        >>> manager.generate_number(1, 0, NumberingFormat.DECIMAL)
        '1. '
        >>> manager.generate_number(1, 1, NumberingFormat.LOWER_LETTER)
        'a. '
        >>> manager.generate_number(1, 0, NumberingFormat.DECIMAL)
        '2. '
        >>> manager.generate_number(1, 1, NumberingFormat.LOWER_LETTER)
        'a. '

    """

    def __init__(self) -> None:
        self._counters: dict[tuple[int, int], int] = {}

    def counter(self, num_id: int, level: int) -> Optional[int]:
        """Current value for ``(num_id, level)``, or None if never incremented or reset."""
        return self._counters.get((num_id, level))

    def generate_number(self, num_id: int, level: int, fmt: NumberingFormat) -> str:
        """Advance ``(num_id, level)`` and return its visible prefix."""
        key = (num_id, level)
        current = self._counters.get(key, 0) + 1
        self._counters[key] = current

        for deeper in [k for k in self._counters if k[0] == num_id and k[1] > level]:
            del self._counters[deeper]

        return self._format_number(num_id, level, current, fmt)

    def _format_number(self, num_id: int, level: int, counter: int, fmt: NumberingFormat) -> str:
        if (num_id, level) in _HIERARCHICAL_LEVELS:
            parts = []
            parent = self._counters.get((num_id, level - 1))
            if parent is not None:
                parts.append(str(parent))
            parts.append(str(counter))
            return ".".join(parts) + ". "

        if fmt is NumberingFormat.DECIMAL:
            return f"{counter}. "
        if fmt in (NumberingFormat.LOWER_LETTER, NumberingFormat.UPPER_LETTER):
            letter = _to_letter(counter)
            if letter is None:
                return f"{counter}. "
            return f"{letter.upper() if fmt is NumberingFormat.UPPER_LETTER else letter}. "
        if fmt is NumberingFormat.LOWER_ROMAN:
            return f"{to_roman(counter).lower()}. "
        if fmt is NumberingFormat.UPPER_ROMAN:
            return f"{to_roman(counter)}. "
        if fmt is NumberingFormat.PAREN_LOWER_LETTER:
            letter = _to_letter(counter)
            return f"({letter})" if letter is not None else f"({counter})"
        if fmt is NumberingFormat.PAREN_LOWER_ROMAN:
            return f"({to_roman(counter).lower()})"
        return BULLET_PREFIX


class HeadingNumberTracker:
    """Hierarchical heading counters, one slot per heading level.

    The tracker is disabled until :meth:`enable` is called; while disabled,
    :meth:`get_number` returns an empty string.

    Examples
    --------
        >>> tracker = HeadingNumberTracker()
        >>> tracker.enable()
        >>> [tracker.get_number(level) for level in (1, 2, 2, 1, 2)]
        ['1', '1.1', '1.2', '2', '2.1']

    """

    def __init__(self) -> None:
        self._counters = [0] * MAX_HEADING_LEVEL
        self._enabled = False

    @property
    def enabled(self) -> bool:
        """Whether automatic heading numbers are generated."""
        return self._enabled

    def enable(self) -> None:
        """Switch automatic numbering on for the rest of the load."""
        self._enabled = True

    def get_number(self, level: int) -> str:
        """Advance ``level`` and return the dotted number for it."""
        if not self._enabled or not 1 <= level <= MAX_HEADING_LEVEL:
            return ""

        index = level - 1
        self._counters[index] += 1
        for deeper in range(index + 1, MAX_HEADING_LEVEL):
            self._counters[deeper] = 0

        return ".".join(str(count) for count in self._counters[:level] if count > 0)
