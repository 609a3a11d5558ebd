"""Errors raised by the cleaning pipeline."""

from __future__ import annotations

from typing import Dict, Hashable


class CleaningError(Exception):
    """Base class for fatal pipeline errors."""


class PreconditionError(CleaningError):
    """A table the run expects to create already exists, or one it reads is missing."""


class ParseError(CleaningError):
    def __init__(self, column: str, fmt: str, offending: Dict[Hashable, str]):
        self.column = column
        self.fmt = fmt
        self.offending = dict(offending)
        sample = ", ".join(f"{k}={v!r}" for k, v in list(self.offending.items())[:5])
        super().__init__(
            f"{len(self.offending)} value(s) in column '{column}' do not match {fmt!r}: {sample}"
        )


class AmbiguousBackfillWarning(UserWarning):
    """Several distinct values were available to backfill the same entity."""
