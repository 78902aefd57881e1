#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doxx/progress.py
"""Progress callback system for document loading.

This module provides a standardized way to report load progress to embedders,
for example a terminal UI that wants to show a spinner while a large document
is being reconstructed.

Examples
--------
    >>> from doxx import load_document
    >>> from doxx.progress import ProgressEvent
    >>>
    >>> def my_progress_handler(event: ProgressEvent):
    ...     print(f"{event.event_type}: {event.message} ({event.current}/{event.total})")
    >>>
    >>> document = load_document("report.docx", progress_callback=my_progress_handler)

"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Literal

EventType = Literal["started", "detected", "finished"]


@dataclass
class ProgressEvent:
    """Progress event for document loading.

    Parameters
    ----------
    event_type : EventType
        Type of progress event:

        - "started": loading has begun; ``total`` is the number of body blocks
        - "detected": a notable structure was found (``metadata["detected_type"]``
          is ``"table"``, ``"equation"`` or ``"image"``)
        - "finished": the document was built; ``current == total``

    message : str
        Human-readable description of the event
    current : int, default 0
        Current progress position
    total : int, default 0
        Total items to process. Set to 0 if unknown.
    metadata : dict, default empty
        Additional event-specific information

    """

    event_type: EventType
    message: str
    current: int = 0
    total: int = 0
    metadata: dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        """Return human-readable string representation."""
        progress = f"({self.current}/{self.total})" if self.total > 0 else ""
        return f"[{self.event_type.upper()}] {self.message} {progress}".strip()


ProgressCallback = Callable[[ProgressEvent], None]
"""Type alias for progress callback functions.

A progress callback is any callable that accepts a ProgressEvent and returns None.
Callbacks should not raise exceptions; if they do, the error is logged and
loading continues.
"""
