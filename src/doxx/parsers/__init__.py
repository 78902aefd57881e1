#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doxx/parsers/__init__.py
"""Document parsers.

``DocxParser`` drives reconstruction; the private ``_docx_*`` modules hold
the individual stages it composes (formatting, numbering, headings, lists,
tables, equations and cleanup).
"""

from doxx.parsers.base import BaseParser
from doxx.parsers.docx import DocxParser

__all__ = ["BaseParser", "DocxParser"]
