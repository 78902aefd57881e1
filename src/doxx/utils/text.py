#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doxx/utils/text.py
"""Text measurement helpers."""

from __future__ import annotations

import math

import regex

from doxx.constants import WORDS_PER_PAGE

_GRAPHEME_CLUSTER = regex.compile(r"\X")


def display_width(text: str) -> int:
    """Count user-perceived characters in ``text``.

    Extended grapheme clusters (UAX #29) are counted, so ``"e\\u0301"``,
    ``"é"``, a flag and a skin-toned emoji each measure 1.

    Parameters
    ----------
    text : str
        Text to measure

    Returns
    -------
    int
        Number of extended grapheme clusters

    """
    return len(_GRAPHEME_CLUSTER.findall(text))


def count_words(text: str) -> int:
    """Count whitespace-separated tokens."""
    return len(text.split())


def estimate_page_count(word_count: int) -> int:
    """Estimate printed pages at a fixed words-per-page rate."""
    return math.ceil(word_count / WORDS_PER_PAGE)
