#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doxx/constants.py
"""Constants shared across the doxx reconstruction pipeline.

This module centralizes the namespaces, tags, thresholds and default values
used by the parser, the classifiers and the equation engine. Thresholds used
by the heuristics are behavioral contracts: changing them changes how
paragraphs are classified.

"""

from __future__ import annotations

# =============================================================================
# Dependencies
# =============================================================================

# (install_name, import_name, version_spec)
DEPS_DOCX = [("python-docx", "docx", ""), ("lxml", "lxml", "")]

# =============================================================================
# XML namespaces
# =============================================================================

WORDPROCESSING_NS = "http://schemas.openxmlformats.org/wordprocessingml/2006/main"
MATH_NS = "http://schemas.openxmlformats.org/officeDocument/2006/math"
DRAWING_NS = "http://schemas.openxmlformats.org/drawingml/2006/main"
WP_DRAWING_NS = "http://schemas.openxmlformats.org/drawingml/2006/wordprocessingDrawing"
RELATIONSHIPS_NS = "http://schemas.openxmlformats.org/officeDocument/2006/relationships"

WORD_TAG_PREFIX = f"{{{WORDPROCESSING_NS}}}"
MATH_TAG_PREFIX = f"{{{MATH_NS}}}"

WORD_PARAGRAPH_TAG = f"{WORD_TAG_PREFIX}p"
WORD_TABLE_TAG = f"{WORD_TAG_PREFIX}tbl"
MATH_OMATH_TAG = f"{MATH_TAG_PREFIX}oMath"
MATH_OMATH_PARA_TAG = f"{MATH_TAG_PREFIX}oMathPara"

# =============================================================================
# Package validation
# =============================================================================

DOCX_EXTENSION = ".docx"
DOCX_MAIN_PART = "word/document.xml"
XLSX_WORKBOOK_PART = "xl/workbook.xml"

DEFAULT_MAX_COMPRESSION_RATIO = 100.0  # Maximum compression ratio (uncompressed/compressed)
DEFAULT_MAX_UNCOMPRESSED_SIZE = 1024 * 1024 * 1024  # 1GB maximum uncompressed size
DEFAULT_MAX_ZIP_ENTRIES = 10000  # Maximum number of entries in a ZIP archive

# =============================================================================
# Document model defaults
# =============================================================================

DEFAULT_DOCUMENT_TITLE = "Untitled Document"
DEFAULT_EXTRACT_METADATA = True
WORDS_PER_PAGE = 250
MAX_HEADING_LEVEL = 6

# Prepended to the synthetic numbering run of Word list paragraphs and removed
# by the final cleanup pass
WORD_LIST_MARKER = "__WORD_LIST__"
WORD_LIST_INDENT = "  "
BULLET_PREFIX = "* "

# =============================================================================
# Heading heuristics
# =============================================================================

MIN_HEADINGS_FOR_AUTO_NUMBERING = 3
TEXT_HEADING_MAX_LENGTH = 100
SENTENCE_MIN_LENGTH = 80
SENTENCE_CONJUNCTIONS = (" and ", " but ", " however ", " therefore ")
HEADING_STOP_WORDS = (" the ", " and ", " with ", " for ")
HEADING_SECTION_PREFIXES = ("Chapter ", "Section ", "Part ")

# =============================================================================
# List heuristics
# =============================================================================

TEXT_BULLET_PREFIXES = ("• ", "- ", "* ")
NUMBERED_ITEM_MIN_CONTENT = 20
SPACES_PER_LIST_LEVEL = 2

# =============================================================================
# Table heuristics
# =============================================================================

HEADER_MAX_AVERAGE_LENGTH = 50
HEADER_MAX_WORDS = 3
HEADER_KEYWORDS = ("name", "date", "amount", "type", "status", "id", "description", "count")
COLUMN_ALIGNMENT_THRESHOLD = 0.7
MIN_COLUMN_WIDTH = 3
CURRENCY_SYMBOLS = ("$", "€", "£")
BOOLEAN_VALUES = frozenset({"true", "false", "yes", "no", "y", "n"})

# =============================================================================
# Images
# =============================================================================

EMUS_PER_PIXEL = 9525
DEFAULT_IMAGE_EXTENSION = "png"
