#  Copyright (c) 2025 Tom Villani, Ph.D.
#
# src/doxx/options/base.py
"""Immutable option objects shared by the doxx loaders.

Every options class is a frozen dataclass. Loaders never mutate the options
they are given; ``load_document`` keyword overrides go through
``create_updated`` and produce a validated copy.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass, field, fields, replace
from typing import Any

if sys.version_info >= (3, 11):
    from typing import Self
else:
    from typing_extensions import Self

from doxx.constants import DEFAULT_EXTRACT_METADATA


@dataclass(frozen=True)
class CloneFrozenMixin:
    """Copy-on-write support for frozen option dataclasses."""

    @classmethod
    def option_names(cls) -> list[str]:
        """Return the names of all configurable fields, in declaration order."""
        return [f.name for f in fields(cls)]  # type: ignore[arg-type]

    def create_updated(self, **kwargs: Any) -> Self:
        """Return a copy of these options with ``kwargs`` applied.

        The copy runs the class's ``__post_init__`` validation again, so an
        out-of-range override fails here rather than during loading.

        Parameters
        ----------
        **kwargs : Any
            Field names and their new values

        Returns
        -------
        Self
            Updated copy

        Raises
        ------
        TypeError
            If a keyword does not name a field of this options class
        ValueError
            If a new value fails validation

        Examples
        --------
            >>> DocxOptions().create_updated(include_equations=False).include_equations
            False

        """
        valid = self.option_names()
        unknown = sorted(name for name in kwargs if name not in valid)
        if unknown:
            raise TypeError(
                f"Unknown {type(self).__name__} field(s): {', '.join(unknown)}. Valid fields: {', '.join(valid)}"
            )
        return replace(self, **kwargs)


@dataclass(frozen=True)
class BaseParserOptions(CloneFrozenMixin):
    """Options common to every document loader.

    Parameters
    ----------
    extract_metadata : bool, default True
        Read author and creation/modification dates from the package's core
        properties. Word and page counts are always computed.

    """

    extract_metadata: bool = field(
        default=DEFAULT_EXTRACT_METADATA,
        metadata={"help": "Read author and creation/modification dates from core properties", "importance": "core"},
    )
