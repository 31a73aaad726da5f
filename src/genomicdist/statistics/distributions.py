"""
Region set statistics.

All functions are pure: they read a RegionSet (and a GenomeAssembly or
TSSIndex where needed) and never mutate them. Results that hold one value
per region follow region iteration order, which is grouped by chromosome in
an unspecified chromosome order.

Missing-data policy differs per function:
- calc_gc_content: ``ignore_unk_chroms`` chooses between skipping and failing
- calc_dinucl_freq: any sequence lookup failure is raised
- calc_tss_dist: regions on unindexed chromosomes are skipped, but a region
  without any overlapping TSS is an error
"""

from __future__ import annotations

import logging

import numpy as np

from genomicdist.core.dinucleotide import Dinucleotide
from genomicdist.core.errors import (
    EmptyRegionError,
    GenomicDistError,
    NoMatchFoundError,
    PreconditionViolation,
)
from genomicdist.core.genome_assembly import GenomeAssembly
from genomicdist.core.region_set import Region, RegionSet
from genomicdist.core.tss_index import TSSIndex

logger = logging.getLogger(__name__)

_GC_BYTES = np.frombuffer(b"GCgc", dtype=np.uint8)

# A=0, C=1, G=2, T=3 in either case; anything else is -1
_BASE_CODES = np.full(256, -1, dtype=np.int8)
for _code, _base in enumerate(b"ACGT"):
    _BASE_CODES[_base] = _code
    _BASE_CODES[_base + 32] = _code

# Enum order is AA, AC, ..., TT, matching first * 4 + second
_DINUCLEOTIDES = list(Dinucleotide)


def calc_widths(region_set: RegionSet) -> list[int]:
    """Return ``end - start`` for every region."""
    return [region.width for region in region_set]


def calc_neighbor_distances(region_set: RegionSet) -> list[int]:
    """
    Calculate gaps between consecutive regions on each chromosome.

    Args:
        region_set: Sorted region set (see RegionSet.sort)

    Returns:
        ``next.start - prev.end`` for every adjacent pair; overlapping
        neighbours give negative values. Chromosomes with fewer than two
        regions contribute nothing.

    Raises:
        PreconditionViolation: If the region set is not sorted
    """
    if not region_set.is_sorted():
        raise PreconditionViolation(
            "RegionSet must be sorted to compute neighbor distances; call sort() first"
        )

    distances: list[int] = []
    for chrom in region_set.chromosomes():
        regions = list(region_set.regions_for(chrom))
        if len(regions) < 2:
            continue
        for prev, nxt in zip(regions, regions[1:]):
            distances.append(nxt.start - prev.end)

    return distances


def gc_fraction(seq: bytes) -> float:
    """
    Fraction of G/C bases in a sequence, case-insensitive.

    Every byte, including N and other symbols, counts toward the total.

    Raises:
        EmptyRegionError: If the sequence is empty
    """
    if not seq:
        raise EmptyRegionError("GC content is undefined for an empty sequence")
    bases = np.frombuffer(seq, dtype=np.uint8)
    return int(np.isin(bases, _GC_BYTES).sum()) / len(bases)


def _describe(region: Region) -> str:
    return f"{region.chrom}:{region.start}-{region.end}"


def calc_gc_content(
    region_set: RegionSet,
    genome: GenomeAssembly,
    ignore_unk_chroms: bool = False,
) -> list[float]:
    """
    Calculate the GC fraction of every region.

    Args:
        region_set: Regions to measure
        genome: Reference sequences
        ignore_unk_chroms: Skip regions whose chromosome is missing from the
            genome or whose sequence cannot be used (out of bounds, zero
            length) instead of failing

    Returns:
        One GC fraction in ``[0, 1]`` per measured region

    Raises:
        UnknownChromosomeError, OutOfBoundsError, EmptyRegionError: On the
            first unusable region when ``ignore_unk_chroms`` is False
    """
    gc_contents: list[float] = []
    n_skipped = 0

    for chrom in region_set.chromosomes():
        if ignore_unk_chroms and not genome.has_chromosome(chrom):
            logger.debug(f"Skipping chromosome '{chrom}': not in genome")
            n_skipped += sum(1 for _ in region_set.regions_for(chrom))
            continue

        for region in region_set.regions_for(chrom):
            try:
                gc_contents.append(gc_fraction(genome.sequence_for(region)))
            except GenomicDistError as e:
                if not ignore_unk_chroms:
                    raise
                logger.debug(f"Skipping region {_describe(region)}: {e}")
                n_skipped += 1

    if n_skipped:
        logger.info(f"Skipped {n_skipped:,} regions without usable sequence")

    return gc_contents


def calc_dinucl_freq(
    region_set: RegionSet, genome: GenomeAssembly
) -> dict[Dinucleotide, int]:
    """
    Count dinucleotides over every region's sequence.

    Uses an overlapping window of width 2, so a region of n bases yields
    n - 1 windows. Windows containing anything other than A, C, G or T
    (in either case) are not counted. Counts are raw, not normalized.

    Raises:
        UnknownChromosomeError, OutOfBoundsError: On any failed lookup
    """
    totals = np.zeros(len(_DINUCLEOTIDES), dtype=np.int64)

    for region in region_set:
        codes = _BASE_CODES[np.frombuffer(genome.sequence_for(region), dtype=np.uint8)]
        if len(codes) < 2:
            continue
        first, second = codes[:-1], codes[1:]
        valid = (first >= 0) & (second >= 0)
        pairs = first[valid].astype(np.intp) * 4 + second[valid]
        totals += np.bincount(pairs, minlength=len(_DINUCLEOTIDES))

    return {
        dinucl: int(count)
        for dinucl, count in zip(_DINUCLEOTIDES, totals)
        if count
    }


def calc_tss_dist(region_set: RegionSet, tss_index: TSSIndex) -> list[int]:
    """
    Distance from each region to its nearest overlapping TSS.

    The distance is ``min(|region.midpoint - tss.midpoint|)`` over the TSS
    regions returned by TSSIndex.query. Regions on chromosomes missing from
    the index are skipped.

    Raises:
        NoMatchFoundError: If a region on an indexed chromosome has no
            overlapping TSS
    """
    tss_dists: list[int] = []

    for chrom in region_set.chromosomes():
        if not tss_index.has_chromosome(chrom):
            logger.debug(f"Skipping chromosome '{chrom}': not in TSS index")
            continue

        for region in region_set.regions_for(chrom):
            tsses = tss_index.query(region)
            if not tsses:
                raise NoMatchFoundError(
                    f"No TSS found for region {_describe(region)}. "
                    f"Check your index!"
                )
            midpoint = region.midpoint
            tss_dists.append(min(abs(midpoint - tss.midpoint) for tss in tsses))

    return tss_dists
