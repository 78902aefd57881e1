#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doxx/parsers/base.py
"""Interface shared by doxx loaders.

A loader turns one source file into a ``Document``. The base class owns the
options object, checks that it has the right class, and forwards progress
events to an optional callback.

"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Union

from doxx.ast.nodes import Document, DocumentMetadata
from doxx.exceptions import InvalidOptionsError
from doxx.options.base import BaseParserOptions
from doxx.progress import EventType, ProgressCallback, ProgressEvent

logger = logging.getLogger(__name__)


class BaseParser(ABC):
    """Abstract loader.

    Parameters
    ----------
    options : BaseParserOptions or None, default = None
        Loader options
    progress_callback : ProgressCallback or None, default = None
        Receives ``ProgressEvent`` objects while a file is loaded

    """

    def __init__(self, options: BaseParserOptions | None = None, progress_callback: Optional[ProgressCallback] = None):
        """Store options and the progress callback."""
        self.options: BaseParserOptions | None = options
        self.progress_callback: Optional[ProgressCallback] = progress_callback

    @staticmethod
    def _validate_options_type(options: BaseParserOptions | None, expected_type: type, parser_name: str) -> None:
        """Raise ``InvalidOptionsError`` unless ``options`` is None or an ``expected_type``."""
        if options is not None and not isinstance(options, expected_type):
            raise InvalidOptionsError(
                converter_name=parser_name,
                expected_type=expected_type,
                received_type=type(options),
            )

    @abstractmethod
    def parse(self, input_data: Union[str, Path]) -> Document:
        """Load ``input_data`` and return the reconstructed ``Document``."""
        raise NotImplementedError

    @abstractmethod
    def extract_metadata(self, document: Any) -> DocumentMetadata:
        """Read package-level properties; missing properties stay None."""
        raise NotImplementedError

    def _emit_progress(
        self, event_type: EventType, message: str, current: int = 0, total: int = 0, **metadata: Any
    ) -> None:
        """Send a ``ProgressEvent`` to the callback, if one is registered.

        A failing callback is logged at WARNING and never aborts the load.

        Examples
        --------
            >>> self._emit_progress("detected", "Table found", detected_type="table", rows=4)

        """
        if self.progress_callback is None:
            return

        event = ProgressEvent(event_type=event_type, message=message, current=current, total=total, metadata=metadata)
        try:
            self.progress_callback(event)
        except Exception as e:
            logger.warning(f"Progress callback raised exception: {e}", exc_info=True)
