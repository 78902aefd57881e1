#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doxx/utils/images.py
"""Image discovery and extraction for DOCX paragraphs.

Each ``w:drawing`` in a paragraph becomes an ``Image`` element. Its alt text
and reported size come from the drawing's ``wp:docPr`` and ``wp:extent``;
the picture bytes are looked up through the ``a:blip`` relationship id and
written to disk on demand.

"""

from __future__ import annotations

import logging
import tempfile
from pathlib import Path
from typing import Any, Iterator, Optional

from doxx.ast.nodes import Image
from doxx.constants import (
    DEFAULT_IMAGE_EXTENSION,
    DRAWING_NS,
    EMUS_PER_PIXEL,
    RELATIONSHIPS_NS,
    WORD_TAG_PREFIX,
    WP_DRAWING_NS,
)
from doxx.options.docx import ImageOptions

logger = logging.getLogger(__name__)

_DRAWING_TAG = f"{WORD_TAG_PREFIX}drawing"
_DOC_PR_TAG = f"{{{WP_DRAWING_NS}}}docPr"
_EXTENT_TAG = f"{{{WP_DRAWING_NS}}}extent"
_BLIP_TAG = f"{{{DRAWING_NS}}}blip"
_EMBED_ATTR = f"{{{RELATIONSHIPS_NS}}}embed"

_CONTENT_TYPE_EXTENSIONS = (
    ("jpeg", "jpg"),
    ("jpg", "jpg"),
    ("gif", "gif"),
    ("png", "png"),
    ("bmp", "bmp"),
    ("tiff", "tiff"),
)


def iter_drawings(paragraph_element: Any) -> Iterator[Any]:
    """Yield every ``w:drawing`` below a ``w:p`` element, in document order."""
    yield from paragraph_element.iter(_DRAWING_TAG)


def _emu_to_pixels(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return int(value) // EMUS_PER_PIXEL
    except ValueError:
        logger.debug(f"Ignoring non-integer drawing extent: {value!r}")
        return None


def compute_image_size(
    width: Optional[int], height: Optional[int], options: ImageOptions
) -> tuple[Optional[int], Optional[int]]:
    """Apply the size limits and scale factor of ``options``.

    Limits shrink the image proportionally so the aspect ratio is kept; the
    scale factor is applied last.

    Examples
    --------
        >>> compute_image_size(1600, 900, ImageOptions(max_width=800))
        (800, 450)

    """
    if width is None or height is None:
        return width, height

    ratio = 1.0
    if options.max_width is not None and width > options.max_width:
        ratio = min(ratio, options.max_width / width)
    if options.max_height is not None and height > options.max_height:
        ratio = min(ratio, options.max_height / height)
    if options.scale is not None:
        ratio *= options.scale

    if ratio == 1.0:
        return width, height
    return max(round(width * ratio), 1), max(round(height * ratio), 1)


def build_image(drawing: Any, sequence_num: int, options: ImageOptions) -> Image:
    """Describe one drawing as an ``Image`` element (without extracting it).

    Parameters
    ----------
    drawing : lxml element
        ``w:drawing`` element
    sequence_num : int
        1-based position of the image in the document, used for the
        ``"Image N"`` fallback description
    options : ImageOptions
        Size limits and scale

    Returns
    -------
    Image
        Element with description, size and relationship id filled in

    """
    description = ""
    doc_pr = next(drawing.iter(_DOC_PR_TAG), None)
    if doc_pr is not None:
        description = (doc_pr.get("descr") or "").strip()
    if not description:
        description = f"Image {sequence_num}"

    width = height = None
    extent = next(drawing.iter(_EXTENT_TAG), None)
    if extent is not None:
        width, height = compute_image_size(_emu_to_pixels(extent.get("cx")), _emu_to_pixels(extent.get("cy")), options)

    blip = next(drawing.iter(_BLIP_TAG), None)
    relationship_id = blip.get(_EMBED_ATTR) if blip is not None else None

    return Image(description=description, width=width, height=height, relationship_id=relationship_id)


def _detect_extension(image_part: Any) -> str:
    content_type = (getattr(image_part, "content_type", "") or "").lower()
    for marker, extension in _CONTENT_TYPE_EXTENSIONS:
        if marker in content_type:
            return extension
    partname = str(getattr(image_part, "partname", "") or "")
    suffix = Path(partname).suffix.lstrip(".").lower()
    return suffix or DEFAULT_IMAGE_EXTENSION


class ImageExtractor:
    """Write image parts of one document to disk, keyed by relationship id.

    Each relationship is written once; later lookups of the same id return
    the cached path. Failures are logged and reported as None so a broken
    image never aborts a load.

    Parameters
    ----------
    document_part : docx.parts.document.DocumentPart
        Part whose relationships own the images
    base_filename : str
        Stem used for the generated file names
    output_dir : str or None
        Destination directory; a temporary directory is created on first
        use when None

    """

    def __init__(self, document_part: Any, base_filename: str, output_dir: Optional[str] = None) -> None:
        self._part = document_part
        self._base_filename = base_filename
        self._output_dir = Path(output_dir) if output_dir else None
        self._paths: dict[str, Optional[str]] = {}

    @property
    def output_dir(self) -> Path:
        """Directory receiving the images, created on first access."""
        if self._output_dir is None:
            self._output_dir = Path(tempfile.mkdtemp(prefix="doxx_images_"))
        self._output_dir.mkdir(parents=True, exist_ok=True)
        return self._output_dir

    @property
    def extracted(self) -> dict[str, Optional[str]]:
        """Relationship id to file path for every image seen so far."""
        return dict(self._paths)

    def extract(self, relationship_id: str) -> Optional[str]:
        """Write the image behind ``relationship_id`` and return its path."""
        if relationship_id in self._paths:
            return self._paths[relationship_id]

        path: Optional[str] = None
        try:
            image_part = self._part.related_parts[relationship_id]
            blob = image_part.blob
        except KeyError:
            logger.warning(f"Skipping image: relationship '{relationship_id}' not found")
        except AttributeError as e:
            logger.warning(f"Skipping image '{relationship_id}': {e}")
        else:
            filename = f"{self._base_filename}_img{len(self._paths) + 1}.{_detect_extension(image_part)}"
            target = self.output_dir / filename
            try:
                target.write_bytes(blob)
                path = str(target)
                logger.debug(f"Extracted image {relationship_id} to {path}")
            except OSError as e:
                logger.warning(f"Could not write image '{relationship_id}' to {target}: {e}")

        self._paths[relationship_id] = path
        return path
