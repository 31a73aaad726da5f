"""Statistics computed over region sets."""

from genomicdist.statistics.distributions import (
    calc_dinucl_freq,
    calc_gc_content,
    calc_neighbor_distances,
    calc_tss_dist,
    calc_widths,
)
from genomicdist.statistics.profiler import ProfileConfig, RegionSetProfiler

__all__ = [
    "calc_dinucl_freq",
    "calc_gc_content",
    "calc_neighbor_distances",
    "calc_tss_dist",
    "calc_widths",
    "ProfileConfig",
    "RegionSetProfiler",
]
