"""Exceptions raised while parsing inputs and computing statistics."""

from __future__ import annotations

from pathlib import Path
from typing import Optional


class GenomicDistError(Exception):
    """Base class for all genomicdist errors."""


class _RecordError(GenomicDistError, ValueError):
    """Error tied to a specific record of an input file."""

    def __init__(
        self,
        message: str,
        path: Optional[Path] = None,
        line_number: Optional[int] = None,
    ) -> None:
        self.path = path
        self.line_number = line_number
        location = ""
        if path is not None:
            location = f"{path}"
            if line_number is not None:
                location += f":{line_number}"
            location += ": "
        super().__init__(f"{location}{message}")


class FormatError(_RecordError):
    """Malformed record or unreadable file content (too few fields, bad identifier
    line, invalid UTF-8, truncated gzip)."""


class ParseError(_RecordError):
    """Numeric field is not a valid unsigned 32-bit integer."""


class UnknownChromosomeError(GenomicDistError, LookupError):
    """Chromosome is absent from the genome or the TSS index."""

    def __init__(self, chrom: str) -> None:
        self.chrom = chrom
        super().__init__(f"Unknown chromosome: '{chrom}'")


class OutOfBoundsError(GenomicDistError, IndexError):
    """Requested slice falls outside the stored sequence."""


class PreconditionViolation(GenomicDistError, RuntimeError):
    """A computation was called with inputs that break its contract."""


class NoMatchFoundError(GenomicDistError, LookupError):
    """An index query returned no hits where at least one was required."""


class EmptyRegionError(GenomicDistError, ValueError):
    """A zero-length region was given to a per-base statistic."""
