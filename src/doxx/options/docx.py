#  Copyright (c) 2025 Tom Villani, Ph.D.
"""Configuration options for DOCX loading.

This module defines the image handling options consumed by the image
extractor and the parser options that toggle optional reconstruction passes.
"""

from dataclasses import dataclass, field
from typing import Optional

from doxx.options.base import BaseParserOptions, CloneFrozenMixin


# src/doxx/options/docx.py
@dataclass(frozen=True)
class ImageOptions(CloneFrozenMixin):
    """Options controlling how embedded images are surfaced.

    Parameters
    ----------
    enabled : bool, default False
        Emit ``Image`` elements and extract their bytes to disk.
    max_width : int or None, default None
        Upper bound, in pixels, applied to reported image widths.
    max_height : int or None, default None
        Upper bound, in pixels, applied to reported image heights.
    scale : float or None, default None
        Multiplier applied to reported image dimensions.
    output_dir : str or None, default None
        Directory that receives extracted images. A temporary directory is
        created when unset.

    Examples
    --------
        >>> options = ImageOptions(enabled=True, max_width=800)

    """

    enabled: bool = field(
        default=False,
        metadata={"help": "Extract embedded images and emit Image elements", "importance": "core"},
    )
    max_width: Optional[int] = field(
        default=None,
        metadata={"help": "Maximum reported image width in pixels", "type": int, "importance": "advanced"},
    )
    max_height: Optional[int] = field(
        default=None,
        metadata={"help": "Maximum reported image height in pixels", "type": int, "importance": "advanced"},
    )
    scale: Optional[float] = field(
        default=None,
        metadata={"help": "Scale factor applied to reported image dimensions", "type": float, "importance": "advanced"},
    )
    output_dir: Optional[str] = field(
        default=None,
        metadata={"help": "Directory to write extracted images to", "importance": "advanced"},
    )

    def __post_init__(self) -> None:
        """Validate numeric ranges for image options.

        Raises
        ------
        ValueError
            If any field value is outside its valid range.

        """
        if self.max_width is not None and self.max_width <= 0:
            raise ValueError(f"max_width must be positive, got {self.max_width}")
        if self.max_height is not None and self.max_height <= 0:
            raise ValueError(f"max_height must be positive, got {self.max_height}")
        if self.scale is not None and self.scale <= 0:
            raise ValueError(f"scale must be positive, got {self.scale}")


@dataclass(frozen=True)
class DocxOptions(BaseParserOptions):
    """Configuration options for DOCX reconstruction.

    Parameters
    ----------
    include_equations : bool, default True
        Scan the raw document part for OMML equations and merge them into
        the element stream.
    detect_text_headings : bool, default True
        Apply the text-shape heuristic to unstyled paragraphs.
    images : ImageOptions
        Image extraction settings.

    Examples
    --------
        >>> options = DocxOptions(images=ImageOptions(enabled=True))

    """

    include_equations: bool = field(
        default=True,
        metadata={"help": "Merge OMML equations into the element stream", "importance": "core"},
    )
    detect_text_headings: bool = field(
        default=True,
        metadata={"help": "Detect headings in unstyled paragraphs from their text shape", "importance": "advanced"},
    )
    images: ImageOptions = field(
        default_factory=ImageOptions,
        metadata={"help": "Image extraction settings", "importance": "core"},
    )
