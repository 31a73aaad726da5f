"""
TSSIndex - Interval-tree index over transcription start sites.

One intervaltree.IntervalTree per chromosome is built up front; overlap
queries are then logarithmic in the number of indexed sites.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from pathlib import Path
from typing import Iterable, Iterator, Optional, Union

from intervaltree import Interval, IntervalTree

from genomicdist.core.region_set import Region, RegionSet

logger = logging.getLogger(__name__)


def _tree_bounds(start: int, end: int) -> tuple[int, int]:
    # IntervalTree rejects null intervals; a zero-width site covers one base
    if end <= start:
        return start, start + 1
    return start, end


class TSSIndex:
    """
    Per-chromosome overlap index over TSS regions.

    Example:
        >>> index = TSSIndex.from_bed("gencode_tss.bed.gz")
        >>> hits = index.query(Region("chr1", 11000, 12000))
        >>> if hits is None:
        ...     print("chromosome not indexed")
    """

    def __init__(self, regions: Iterable[Region]) -> None:
        """
        Build the index.

        Args:
            regions: TSS regions; each is stored as the data of its Interval
        """
        trees: defaultdict[str, IntervalTree] = defaultdict(IntervalTree)
        for region in regions:
            start, end = _tree_bounds(region.start, region.end)
            trees[region.chrom].add(Interval(start, end, region))

        self._trees: dict[str, IntervalTree] = dict(trees)
        logger.info(
            f"Indexed {len(self):,} TSS regions across {len(self._trees)} chromosomes"
        )

    @classmethod
    def from_region_set(cls, region_set: RegionSet) -> TSSIndex:
        return cls(iter(region_set))

    @classmethod
    def from_bed(cls, path: Union[str, Path]) -> TSSIndex:
        """Build the index from a BED file of TSS annotations."""
        return cls.from_region_set(RegionSet.from_bed(path))

    def query(self, region: Region) -> Optional[list[Region]]:
        """
        Find TSS regions overlapping ``[region.start, region.end)``.

        Args:
            region: Query region; a zero-width region is queried as the
                single base at ``region.start``

        Returns:
            None if the chromosome has no index entry, otherwise the
            (possibly empty) list of overlapping TSS regions
        """
        tree = self._trees.get(region.chrom)
        if tree is None:
            logger.debug(f"No TSS index for chromosome '{region.chrom}'")
            return None

        start, end = _tree_bounds(region.start, region.end)
        return [interval.data for interval in tree.overlap(start, end)]

    def has_chromosome(self, chrom: str) -> bool:
        return chrom in self._trees

    def chromosomes(self) -> Iterator[str]:
        return iter(self._trees.keys())

    def __len__(self) -> int:
        return sum(len(tree) for tree in self._trees.values())

    def __repr__(self) -> str:
        return f"TSSIndex(chromosomes={len(self._trees)}, sites={len(self)})"
