"""
genomicdist: Genomic distribution statistics

Descriptive statistics over sets of genomic regions: widths, neighbor
distances, GC content, dinucleotide counts and distances to TSSs.
"""

__version__ = "0.1.0"

from genomicdist.core.genome_assembly import GenomeAssembly
from genomicdist.core.region_set import Region, RegionSet, SortedRegionSet
from genomicdist.core.tss_index import TSSIndex
from genomicdist.statistics.distributions import (
    calc_dinucl_freq,
    calc_gc_content,
    calc_neighbor_distances,
    calc_tss_dist,
    calc_widths,
)

__all__ = [
    "GenomeAssembly",
    "Region",
    "RegionSet",
    "SortedRegionSet",
    "TSSIndex",
    "calc_dinucl_freq",
    "calc_gc_content",
    "calc_neighbor_distances",
    "calc_tss_dist",
    "calc_widths",
]
