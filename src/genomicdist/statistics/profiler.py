"""
Region set profiling - batch statistics with shared reference data.

The genome and TSS index are loaded once per RegionSetProfiler and reused
for every BED file profiled, which is what batch drivers want when
walking a directory of region sets.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

import numpy as np
import pandas as pd

from genomicdist.core.dinucleotide import Dinucleotide
from genomicdist.core.genome_assembly import GenomeAssembly
from genomicdist.core.region_set import RegionSet
from genomicdist.core.tss_index import TSSIndex
from genomicdist.statistics.distributions import (
    calc_dinucl_freq,
    calc_gc_content,
    calc_neighbor_distances,
    calc_tss_dist,
    calc_widths,
)

logger = logging.getLogger(__name__)

SUMMARY_COLUMNS = ["statistic", "count", "mean", "std", "min", "median", "max"]


@dataclass
class ProfileConfig:
    """Configuration for region set profiling."""

    genome_fasta: Optional[Path] = None  # Enables GC content
    tss_bed: Optional[Path] = None  # Enables TSS distances
    ignore_unk_chroms: bool = True  # Skip regions missing from the genome
    validate_inputs: bool = True

    def __post_init__(self) -> None:
        """Validate that provided reference files exist."""
        if self.validate_inputs:
            for attr in ["genome_fasta", "tss_bed"]:
                path = getattr(self, attr)
                if path is not None and not Path(path).exists():
                    raise FileNotFoundError(f"{attr} not found: {path}")


def summarize_distribution(values: Iterable[float]) -> dict[str, float]:
    """
    Summarize a distribution of values.

    Returns:
        Dictionary with count, mean, std (population), min, median and max.
        Statistics of an empty distribution are NaN.
    """
    arr = np.asarray(list(values), dtype=float)
    if arr.size == 0:
        nan = float("nan")
        return {"count": 0, "mean": nan, "std": nan, "min": nan, "median": nan, "max": nan}

    return {
        "count": int(arr.size),
        "mean": float(arr.mean()),
        "std": float(arr.std()),
        "min": float(arr.min()),
        "median": float(np.median(arr)),
        "max": float(arr.max()),
    }


class RegionSetProfiler:
    """
    Compute every available statistic for region sets.

    Example:
        >>> config = ProfileConfig(genome_fasta=Path("hg38.fa.gz"))
        >>> profiler = RegionSetProfiler(config)
        >>> profile = profiler.profile(Path("peaks.bed"))
        >>> profiler.summary_table(profile)
    """

    def __init__(self, config: ProfileConfig) -> None:
        self.config = config
        self.genome: Optional[GenomeAssembly] = None
        self.tss_index: Optional[TSSIndex] = None

        if config.genome_fasta is not None:
            self.genome = GenomeAssembly.from_fasta(config.genome_fasta)
        if config.tss_bed is not None:
            self.tss_index = TSSIndex.from_bed(config.tss_bed)

        logger.info("RegionSetProfiler initialized successfully")

    def profile(self, bed_path: Path) -> dict[str, list]:
        """
        Compute all statistics for one BED file.

        Args:
            bed_path: Region set file

        Returns:
            Mapping of statistic name to its per-region (or per-pair) values.
            ``gc_content`` and ``tss_distance`` are present only when the
            genome or TSS index is configured.
        """
        logger.info(f"Profiling {bed_path}")
        region_set = RegionSet.from_bed(bed_path).sort()

        profile: dict[str, list] = {
            "width": calc_widths(region_set),
            "neighbor_distance": calc_neighbor_distances(region_set),
        }
        if self.genome is not None:
            profile["gc_content"] = calc_gc_content(
                region_set, self.genome, ignore_unk_chroms=self.config.ignore_unk_chroms
            )
        if self.tss_index is not None:
            profile["tss_distance"] = calc_tss_dist(region_set, self.tss_index)

        return profile

    def dinucleotide_table(self, region_set: RegionSet) -> pd.DataFrame:
        """
        Tabulate dinucleotide counts, including zero counts.

        Raises:
            ValueError: If no genome is configured
        """
        if self.genome is None:
            raise ValueError("A genome FASTA is required for dinucleotide counts")

        counts = calc_dinucl_freq(region_set, self.genome)
        return dinucleotide_frame(counts)

    @staticmethod
    def summary_table(profile: dict[str, list]) -> pd.DataFrame:
        """One summary row per statistic in a profile."""
        rows = [
            {"statistic": name, **summarize_distribution(values)}
            for name, values in profile.items()
        ]
        return pd.DataFrame(rows, columns=SUMMARY_COLUMNS)


def dinucleotide_frame(counts: dict[Dinucleotide, int]) -> pd.DataFrame:
    """Convert dinucleotide counts into a table with a row for all 16 pairs."""
    rows = [
        {"dinucleotide": str(dinucl), "count": counts.get(dinucl, 0)}
        for dinucl in Dinucleotide
    ]
    return pd.DataFrame(rows, columns=["dinucleotide", "count"])
