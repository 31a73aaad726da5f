"""Core data structures: regions, genome sequences and the TSS index."""

from genomicdist.core.dinucleotide import Dinucleotide
from genomicdist.core.errors import (
    EmptyRegionError,
    FormatError,
    GenomicDistError,
    NoMatchFoundError,
    OutOfBoundsError,
    ParseError,
    PreconditionViolation,
    UnknownChromosomeError,
)
from genomicdist.core.genome_assembly import GenomeAssembly
from genomicdist.core.region_set import Region, RegionSet, SortedRegionSet
from genomicdist.core.tss_index import TSSIndex

__all__ = [
    "Dinucleotide",
    "EmptyRegionError",
    "FormatError",
    "GenomeAssembly",
    "GenomicDistError",
    "NoMatchFoundError",
    "OutOfBoundsError",
    "ParseError",
    "PreconditionViolation",
    "Region",
    "RegionSet",
    "SortedRegionSet",
    "TSSIndex",
    "UnknownChromosomeError",
]
