#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doxx/parsers/docx.py
"""DOCX document reconstruction.

This module turns a Word package into the ordered ``Document.elements``
sequence. Paragraphs are classified as headings, Word list entries or plain
paragraphs; tables are extracted cell by cell; equations found by a raw XML
scan are merged back in by paragraph index; finally hand-typed lists are
grouped and internal markers are stripped.

"""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path
from typing import TYPE_CHECKING, Iterator, Optional, Union

from docx.oxml.ns import qn
from docx.table import Table as DocxTable
from docx.text.paragraph import Paragraph as DocxParagraph
from lxml import etree

from doxx.ast.nodes import (
    Document,
    DocumentElement,
    DocumentMetadata,
    Heading,
    Image,
    PageBreak,
    Paragraph,
    Table,
    consolidate_runs,
)
from doxx.constants import (
    DEFAULT_DOCUMENT_TITLE,
    DEPS_DOCX,
    DOCX_MAIN_PART,
    WORD_PARAGRAPH_TAG,
    WORD_TABLE_TAG,
)
from doxx.exceptions import MalformedFileError, ParsingError
from doxx.options.docx import DocxOptions
from doxx.parsers._docx_cleanup import clean_word_list_markers
from doxx.parsers._docx_equations import (
    EquationScan,
    apply_inline_equations,
    insert_display_equations,
    scan_document_xml,
)
from doxx.parsers._docx_formatting import extract_formatted_runs, extract_paragraph_text, first_run_formatting
from doxx.parsers._docx_headings import (
    analyze_heading_structure,
    detect_heading_from_text,
    detect_heading_with_numbering,
    resolve_heading_number,
)
from doxx.parsers._docx_lists import build_word_list_runs, group_list_items
from doxx.parsers._docx_numbering import HeadingNumberTracker, ListNumberingManager, extract_numbering_info
from doxx.parsers._docx_tables import extract_table
from doxx.parsers.base import BaseParser
from doxx.progress import ProgressCallback
from doxx.utils.decorators import debug_timer, requires_dependencies
from doxx.utils.images import ImageExtractor, build_image, iter_drawings
from doxx.utils.security import validate_docx_package
from doxx.utils.text import count_words, estimate_page_count

if TYPE_CHECKING:
    import docx.document

logger = logging.getLogger(__name__)

_SDT_TAG = qn("w:sdt")
_SDT_CONTENT_TAG = qn("w:sdtContent")
_BREAK_TAG = qn("w:br")
_BREAK_TYPE_ATTR = qn("w:type")


def _count_paragraphs(element: etree._Element) -> int:
    return sum(1 for _ in element.iter(WORD_PARAGRAPH_TAG))


def _iter_block_items(
    doc: "docx.document.Document",
) -> Iterator[tuple[int, Union[DocxParagraph, DocxTable]]]:
    """Yield body paragraphs and tables in order, each with its paragraph anchor.

    The anchor is the 1-based index of the block's first ``w:p`` in document
    order, counting nested paragraphs (table cells, text boxes) exactly as a
    streaming pass over the raw XML does. Content controls are descended
    into.
    """
    counter = 0

    def walk(container: etree._Element) -> Iterator[tuple[int, Union[DocxParagraph, DocxTable]]]:
        nonlocal counter
        for child in container.iterchildren():
            if child.tag == _SDT_TAG:
                content = child.find(_SDT_CONTENT_TAG)
                if content is not None:
                    yield from walk(content)
                continue

            anchor = counter + 1
            counter += _count_paragraphs(child)
            if child.tag == WORD_PARAGRAPH_TAG:
                yield anchor, DocxParagraph(child, doc)  # type: ignore[arg-type]
            elif child.tag == WORD_TABLE_TAG:
                yield anchor, DocxTable(child, doc)  # type: ignore[arg-type]

    yield from walk(doc.element.body)


def _has_page_break(paragraph: DocxParagraph) -> bool:
    return any(br.get(_BREAK_TYPE_ATTR) == "page" for br in paragraph._p.iter(_BREAK_TAG))


class DocxParser(BaseParser):
    """Reconstruct Word documents as ordered ``Document`` elements.

    Every call to :meth:`convert_to_ast` starts from fresh list and heading
    numbering state, so one parser instance can load several documents.

    Parameters
    ----------
    options : DocxOptions or None, default = None
        Reconstruction options
    progress_callback : ProgressCallback or None, default = None
        Optional callback receiving ``started``, ``detected`` and ``finished``
        events

    Examples
    --------
        >>> parser = DocxParser(DocxOptions(include_equations=False))
        >>> document = parser.parse("report.docx")
        >>> [type(element).__name__ for element in document.elements][:3]
        ['Heading', 'Paragraph', 'Table']

    """

    def __init__(self, options: DocxOptions | None = None, progress_callback: ProgressCallback | None = None):
        """Initialize the DOCX parser with options and progress callback."""
        BaseParser._validate_options_type(options, DocxOptions, "docx")
        options = options or DocxOptions()
        super().__init__(options, progress_callback)
        self.options: DocxOptions = options

        # Per-load state, reset by convert_to_ast
        self._list_manager = ListNumberingManager()
        self._heading_tracker = HeadingNumberTracker()
        self._image_extractor: Optional[ImageExtractor] = None
        self._image_count = 0
        self._word_count = 0

    @requires_dependencies("docx", DEPS_DOCX)
    def parse(self, input_data: Union[str, Path]) -> Document:
        """Validate, open and reconstruct the Word package at ``input_data``.

        Parameters
        ----------
        input_data : str or Path
            Path to a ``.docx`` file

        Returns
        -------
        Document
            Reconstructed document titled after the file stem

        Raises
        ------
        FileNotFoundError
            If the file does not exist
        FormatError
            If the extension is not ``.docx``
        MalformedFileError
            If the package is unreadable or lacks ``word/document.xml``
        ParsingError
            If reconstruction fails unexpectedly
        DependencyError
            If python-docx or lxml is not installed

        """
        import docx

        path = Path(input_data)
        validate_docx_package(path)

        try:
            with zipfile.ZipFile(path, "r") as zf:
                document_xml = zf.read(DOCX_MAIN_PART)
        except (zipfile.BadZipFile, KeyError, OSError) as e:
            raise MalformedFileError(
                f"Failed to read {DOCX_MAIN_PART}: {e}", file_path=str(path), original_error=e
            ) from e

        try:
            doc = docx.Document(str(path))
        except Exception as e:
            raise MalformedFileError(
                f"Failed to open DOCX document: {str(e)}",
                file_path=str(path),
                original_error=e,
            ) from e

        try:
            document = self.convert_to_ast(doc, path.stem, document_xml=document_xml)
        except Exception as e:
            raise ParsingError(
                f"Failed to reconstruct {path.name}: {e}", parsing_stage="reconstruction", original_error=e
            ) from e

        document.metadata.file_path = str(path)
        document.metadata.file_size = path.stat().st_size
        return document

    def extract_metadata(self, document: "docx.document.Document") -> DocumentMetadata:
        """Read author and dates from the core properties.

        Returns empty metadata when ``extract_metadata`` is disabled. Counts
        and file facts are filled in by the caller.
        """
        metadata = DocumentMetadata()
        if not self.options.extract_metadata:
            return metadata

        props = document.core_properties
        metadata.author = props.author or None
        metadata.created = props.created.isoformat() if props.created else None
        metadata.modified = props.modified.isoformat() if props.modified else None
        return metadata

    def convert_to_ast(
        self,
        doc: "docx.document.Document",
        base_filename: Optional[str] = None,
        document_xml: Optional[bytes] = None,
    ) -> Document:
        """Reconstruct an opened python-docx document.

        Parameters
        ----------
        doc : docx.document.Document
            Document to reconstruct
        base_filename : str or None
            Title and image file stem; the core title is used when None
        document_xml : bytes or None
            Raw ``word/document.xml`` for the equation scan. When None the
            in-memory tree of ``doc`` is serialized instead.

        Returns
        -------
        Document
            Elements in reading order with word and page counts

        """
        self._reset_state(doc, base_filename)
        title = self._resolve_title(doc, base_filename)

        with debug_timer(logger, "Reconstruction (docx)"):
            blocks = list(_iter_block_items(doc))
            self._emit_progress("started", f"Reconstructing {title}", total=len(blocks))

            paragraphs = [block for _, block in blocks if isinstance(block, DocxParagraph)]
            if analyze_heading_structure(paragraphs):
                logger.debug("Enabling automatic heading numbering")
                self._heading_tracker.enable()

            scan = self._scan_equations(doc, document_xml)

            anchored: list[tuple[int, list[DocumentElement]]] = []
            for anchor, block in blocks:
                if isinstance(block, DocxTable):
                    anchored.append((anchor, self._process_table(block)))
                else:
                    anchored.append((anchor, self._process_paragraph(block, anchor, scan)))

            elements = insert_display_equations(anchored, scan.display_equations)
            elements = group_list_items(elements)
            elements = clean_word_list_markers(elements)

        metadata = self.extract_metadata(doc)
        metadata.word_count = self._word_count
        metadata.page_count = estimate_page_count(metadata.word_count)

        self._emit_progress(
            "finished",
            f"Reconstructed {len(elements)} elements",
            current=len(blocks),
            total=len(blocks),
        )
        return Document(title=title, metadata=metadata, elements=elements, image_options=self.options.images)

    def _reset_state(self, doc: "docx.document.Document", base_filename: Optional[str]) -> None:
        self._list_manager = ListNumberingManager()
        self._heading_tracker = HeadingNumberTracker()
        self._image_count = 0
        self._word_count = 0
        self._image_extractor = None
        if self.options.images.enabled:
            self._image_extractor = ImageExtractor(
                doc.part, base_filename or "document", output_dir=self.options.images.output_dir
            )

    @staticmethod
    def _resolve_title(doc: "docx.document.Document", base_filename: Optional[str]) -> str:
        if base_filename:
            return base_filename
        core_title = (doc.core_properties.title or "").strip()
        return core_title or DEFAULT_DOCUMENT_TITLE

    def _scan_equations(self, doc: "docx.document.Document", document_xml: Optional[bytes]) -> EquationScan:
        if not self.options.include_equations:
            return EquationScan()

        if document_xml is None:
            document_xml = etree.tostring(doc.element)
        scan = scan_document_xml(document_xml)
        if scan.equations:
            self._emit_progress(
                "detected",
                f"Found {len(scan.equations)} equations",
                detected_type="equation",
                equation_count=len(scan.equations),
            )
        return scan

    def _process_paragraph(
        self, paragraph: DocxParagraph, anchor: int, scan: EquationScan
    ) -> list[DocumentElement]:
        elements: list[DocumentElement] = []
        if self.options.images.enabled:
            elements.extend(self._extract_images(paragraph))

        contents = scan.inline_contents(anchor)
        element = self._classify_paragraph(paragraph, has_equations=bool(contents))
        if element is not None:
            elements.append(apply_inline_equations(element, contents))

        if _has_page_break(paragraph):
            elements.append(PageBreak())
        return elements

    def _classify_paragraph(self, paragraph: DocxParagraph, has_equations: bool) -> Optional[DocumentElement]:
        """Classify one paragraph: Word list, then heading style, then text heuristics.

        Word numbering wins over a heading style, so a numbered "Heading 1"
        paragraph is emitted as a list entry.
        """
        text = extract_paragraph_text(paragraph)
        if not text and not has_equations:
            return None
        self._word_count += count_words(text)

        runs = consolidate_runs(extract_formatted_runs(paragraph))

        numbering = extract_numbering_info(paragraph)
        if numbering is not None:
            return Paragraph(runs=build_word_list_runs(numbering, runs, self._list_manager))

        heading = detect_heading_with_numbering(paragraph)
        if heading is not None:
            number = resolve_heading_number(heading, self._heading_tracker)
            return Heading(level=heading.level, text=heading.clean_text or text, number=number)

        if self.options.detect_text_headings and text:
            level = detect_heading_from_text(text, first_run_formatting(paragraph))
            if level is not None:
                return Heading(level=level, text=text)

        return Paragraph(runs=runs)

    def _process_table(self, table: DocxTable) -> list[DocumentElement]:
        data = extract_table(table)
        if data is None:
            return []
        self._emit_progress(
            "detected",
            "Table found",
            detected_type="table",
            rows=data.metadata.row_count,
            columns=data.metadata.column_count,
        )
        return [Table(table=data)]

    def _extract_images(self, paragraph: DocxParagraph) -> list[DocumentElement]:
        images: list[DocumentElement] = []
        for drawing in iter_drawings(paragraph._p):
            self._image_count += 1
            image: Image = build_image(drawing, self._image_count, self.options.images)
            if image.relationship_id and self._image_extractor is not None:
                image.image_path = self._image_extractor.extract(image.relationship_id)
            images.append(image)
            self._emit_progress("detected", image.description, detected_type="image", image_index=self._image_count)
        return images
