#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for doxx.

Options are frozen dataclasses; use ``create_updated`` to derive modified
copies.
"""

from __future__ import annotations

from doxx.options.base import BaseParserOptions, CloneFrozenMixin
from doxx.options.docx import DocxOptions, ImageOptions

__all__ = [
    "BaseParserOptions",
    "CloneFrozenMixin",
    "DocxOptions",
    "ImageOptions",
]
