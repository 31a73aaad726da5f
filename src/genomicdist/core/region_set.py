"""
RegionSet - Core container for genomic regions parsed from BED files.

Regions are grouped by chromosome. Sortedness is tracked by type: only a
SortedRegionSet, produced by RegionSet.sort(), reports is_sorted() as True,
and neither type exposes a mutation API, so the flag can never go stale.

Key Features:
- Transparent gzip decompression for ``.gz`` inputs
- Errors carry the offending path and line number
- Memory-efficient Region storage with __slots__
- Chromosome iteration order is unspecified; callers must not rely on it
"""

from __future__ import annotations

import gzip
import logging
import zlib
from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Iterable, Iterator, Union

from genomicdist.core.errors import FormatError, ParseError

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

UINT32_MAX = 2**32 - 1

# BED header lines that carry no records
_HEADER_PREFIXES = ("#", "track ", "browser ")


@dataclass(slots=True, frozen=True)
class Region:
    """
    Immutable half-open genomic interval ``[start, end)``.

    ``start <= end`` is not enforced; the BED parser only checks that both
    coordinates are unsigned 32-bit integers.
    """

    chrom: str
    start: int  # 0-based, inclusive
    end: int    # 0-based, exclusive (BED format)

    @property
    def width(self) -> int:
        """Return region width in base pairs."""
        return self.end - self.start

    @property
    def midpoint(self) -> int:
        """Return the midpoint, rounded down."""
        return (self.start + self.end) // 2

    def to_bed_string(self) -> str:
        """Convert to a 3-column BED line."""
        return f"{self.chrom}\t{self.start}\t{self.end}"


def open_maybe_gzip(path: Path) -> IO[bytes]:
    """Open a file for binary reading, gunzipping it when the name ends with ``.gz``."""
    if path.suffix == ".gz":
        return gzip.open(path, "rb")
    return open(path, "rb")


def _parse_coordinate(value: str, path: Path, line_number: int) -> int:
    if not (value.isascii() and value.isdigit()):
        raise ParseError(
            f"Invalid coordinate '{value}': expected an unsigned integer",
            path=path,
            line_number=line_number,
        )
    coord = int(value)
    if coord > UINT32_MAX:
        raise ParseError(
            f"Invalid coordinate '{value}': expected an unsigned 32-bit integer",
            path=path,
            line_number=line_number,
        )
    return coord


class RegionSet:
    """
    Collection of Regions grouped by chromosome.

    Example:
        >>> rs = RegionSet.from_bed("peaks.bed.gz")
        >>> sorted_rs = rs.sort()
        >>> for chrom in sorted_rs.chromosomes():
        ...     starts = [r.start for r in sorted_rs.regions_for(chrom)]
    """

    def __init__(self, regions: dict[str, list[Region]]) -> None:
        self._regions = regions
        self._n_regions = sum(len(v) for v in regions.values())

    @classmethod
    def from_bed(cls, path: PathLike) -> RegionSet:
        """
        Parse a BED-like file into an unsorted RegionSet.

        Args:
            path: Plain or gzip-compressed (``.gz``) tab-separated file
                with at least ``chrom``, ``start`` and ``end`` columns

        Returns:
            Unsorted RegionSet

        Raises:
            FileNotFoundError: If the file does not exist
            FormatError: If a record has fewer than 3 fields
            ParseError: If start/end are not unsigned 32-bit integers
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"BED file not found: {path}")

        regions: defaultdict[str, list[Region]] = defaultdict(list)

        # Lines are decoded one at a time so decode errors know their line
        line_number = 0
        try:
            with open_maybe_gzip(path) as f:
                for line_number, raw in enumerate(f, start=1):
                    line = raw.decode("utf-8", errors="strict").rstrip("\r\n")
                    if not line or line.startswith(_HEADER_PREFIXES):
                        continue

                    fields = line.split("\t")
                    if len(fields) < 3:
                        raise FormatError(
                            f"Expected at least 3 tab-separated fields, found {len(fields)}",
                            path=path,
                            line_number=line_number,
                        )

                    chrom = fields[0]
                    start = _parse_coordinate(fields[1], path, line_number)
                    end = _parse_coordinate(fields[2], path, line_number)
                    regions[chrom].append(Region(chrom, start, end))
        except UnicodeDecodeError as e:
            raise FormatError(
                f"Not valid UTF-8 text ({e.reason})",
                path=path,
                line_number=line_number,
            ) from e
        except (EOFError, zlib.error, gzip.BadGzipFile) as e:
            raise FormatError(
                f"Corrupt or truncated compressed data ({e})",
                path=path,
                line_number=line_number + 1,
            ) from e

        region_set = cls(dict(regions))
        logger.info(
            f"Loaded {len(region_set):,} regions across "
            f"{len(region_set._regions)} chromosomes from {path}"
        )
        return region_set

    @classmethod
    def from_regions(cls, regions: Iterable[Region]) -> RegionSet:
        """Build an unsorted RegionSet, keeping the given order per chromosome."""
        grouped: defaultdict[str, list[Region]] = defaultdict(list)
        for region in regions:
            grouped[region.chrom].append(region)
        return cls(dict(grouped))

    def sort(self) -> SortedRegionSet:
        """
        Return a sorted copy.

        Every chromosome's regions are ordered by ascending start. The sort
        is stable, so ties are broken by original file order.
        """
        return SortedRegionSet(
            {
                chrom: sorted(regions, key=lambda r: r.start)
                for chrom, regions in self._regions.items()
            }
        )

    def is_sorted(self) -> bool:
        return False

    def chromosomes(self) -> Iterator[str]:
        """Iterate over chromosome names. Order is unspecified."""
        return iter(self._regions.keys())

    def regions_for(self, chrom: str) -> Iterator[Region]:
        """
        Iterate over the regions of one chromosome.

        Callers must take ``chrom`` from chromosomes(); an absent chromosome
        is a programming error and raises KeyError.
        """
        return iter(self._regions[chrom])

    def is_empty(self) -> bool:
        return self._n_regions == 0

    def to_bed_file(self, output_path: PathLike) -> None:
        """
        Write regions to a 3-column BED file.

        Chromosomes are written in name order, regions in stored order.
        """
        with open(output_path, "w") as f:
            for chrom in sorted(self._regions):
                for region in self._regions[chrom]:
                    f.write(region.to_bed_string() + "\n")

        logger.info(f"Wrote regions to {output_path}")

    def __len__(self) -> int:
        return self._n_regions

    def __iter__(self) -> Iterator[Region]:
        for regions in self._regions.values():
            yield from regions

    def __contains__(self, chrom: object) -> bool:
        return chrom in self._regions

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(chromosomes={len(self._regions)}, "
            f"regions={self._n_regions})"
        )


class SortedRegionSet(RegionSet):
    """RegionSet whose per-chromosome regions are ascending by start."""

    def sort(self) -> SortedRegionSet:
        return self

    def is_sorted(self) -> bool:
        return True
