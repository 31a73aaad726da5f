"""
CLI for region set statistics.

Usage:
    genomicdist nd <bed_file_or_dir>
    genomicdist gc <bed_file> --genome <genome.fa>
    genomicdist profile <bed_file_or_dir> --genome <genome.fa> --tss <tss.bed>

Statistic values are written to stdout, one per line; messages, warnings
and progress bars go to stderr.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, NoReturn, Optional

import pandas as pd
import typer
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import track

from genomicdist import __version__
from genomicdist.core.errors import GenomicDistError
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
from genomicdist.statistics.profiler import (
    ProfileConfig,
    RegionSetProfiler,
    dinucleotide_frame,
)

# Messages go to stderr so stdout carries only results
console = Console(stderr=True)
app = typer.Typer(
    help="Calculate statistics for a collection of genomic regions.",
    no_args_is_help=True,
)

logging.basicConfig(
    level=logging.INFO,
    format="%(message)s",
    handlers=[RichHandler(console=console, rich_tracebacks=True)],
)
logger = logging.getLogger(__name__)

DEFAULT_PATTERN = "*.bed*"

# Per-file failures that batch mode logs and skips
FILE_ERRORS = (GenomicDistError, OSError, ValueError, EOFError)


def _set_verbosity(verbose: bool) -> None:
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


def _fail(message: str, error: Exception) -> NoReturn:
    """Report an error and exit; call from inside an except block."""
    console.print(f"[bold red]Error:[/bold red] {message}: {error}")
    if logger.isEnabledFor(logging.DEBUG):
        logger.exception(message)
    raise typer.Exit(1)


def _echo_values(values) -> None:
    for value in values:
        typer.echo(value)


def _load_region_set(path: Path) -> RegionSet:
    if path.is_dir():
        console.print(
            f"[bold red]Error:[/bold red] Expected a BED file, got a directory: {path}"
        )
        raise typer.Exit(1)
    try:
        return RegionSet.from_bed(path)
    except (GenomicDistError, OSError) as e:
        _fail(f"Failed to parse BED file '{path}'", e)


def _load_genome(path: Path) -> GenomeAssembly:
    try:
        return GenomeAssembly.from_fasta(path)
    except (GenomicDistError, OSError) as e:
        _fail(f"Failed to read genome file '{path}'", e)


def _find_bed_files(directory: Path, pattern: str) -> list[Path]:
    bed_files = sorted(p for p in directory.glob(pattern) if p.is_file())
    if not bed_files:
        console.print(
            f"[bold red]Error:[/bold red] No files matching '{pattern}' in {directory}"
        )
        raise typer.Exit(1)
    console.print(f"Found {len(bed_files)} BED files")
    return bed_files


def _neighbor_distances_for(path: Path) -> list[int]:
    return calc_neighbor_distances(RegionSet.from_bed(path).sort())


def _run_batch(
    bed_files: list[Path], compute: Callable[[Path], list], description: str
) -> None:
    """Compute a statistic per file, skipping files that fail."""
    n_failed = 0
    for bed_file in track(bed_files, description=description, console=console):
        try:
            values = compute(bed_file)
        except FILE_ERRORS as e:
            logger.warning(f"Error reading file {bed_file}: {e}... skipping")
            n_failed += 1
            continue
        _echo_values(values)

    if n_failed:
        console.print(f"[yellow]Skipped {n_failed} of {len(bed_files)} files[/yellow]")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"genomicdist {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=_version_callback,
        is_eager=True,
        help="Show the version and exit",
    ),
) -> None:
    """Calculate statistics for a collection of genomic regions."""


@app.command("nd")
def neighbor_distances(
    path: Path = typer.Argument(..., help="Path to BED file OR folder of BED files"),
    pattern: str = typer.Option(
        DEFAULT_PATTERN, help="File pattern to match when PATH is a directory"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """
    Calculate distances between consecutive regions.

    Regions are sorted before distances are computed. With a directory,
    every matching file is processed and files that fail to parse are
    skipped with a warning.

    Example:
        genomicdist nd peaks.bed.gz > distances.txt
    """
    _set_verbosity(verbose)

    if path.is_dir():
        bed_files = _find_bed_files(path, pattern)
        _run_batch(bed_files, _neighbor_distances_for, "Calculating distances...")
        return

    region_set = _load_region_set(path).sort()
    try:
        distances = calc_neighbor_distances(region_set)
    except GenomicDistError as e:
        _fail("Error calculating neighbor distances", e)
    _echo_values(distances)


@app.command("gc")
def gc_content(
    path: Path = typer.Argument(..., help="Path to BED file"),
    genome: Path = typer.Option(..., "--genome", "-g", help="Genome assembly FASTA file"),
    ignore_unk_chroms: bool = typer.Option(
        False,
        "--ignore-unk-chroms/--strict",
        help="Skip regions on chromosomes missing from the genome",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """
    Compute the GC content of every region.

    Example:
        genomicdist gc peaks.bed --genome hg38.fa.gz --ignore-unk-chroms
    """
    _set_verbosity(verbose)

    region_set = _load_region_set(path)
    assembly = _load_genome(genome)
    try:
        gc_values = calc_gc_content(region_set, assembly, ignore_unk_chroms=ignore_unk_chroms)
    except GenomicDistError as e:
        _fail("Error calculating GC content", e)
    _echo_values(gc_values)


@app.command("widths")
def widths(
    path: Path = typer.Argument(..., help="Path to BED file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Report the width of every region."""
    _set_verbosity(verbose)
    _echo_values(calc_widths(_load_region_set(path)))


@app.command("dinucl")
def dinucleotides(
    path: Path = typer.Argument(..., help="Path to BED file"),
    genome: Path = typer.Option(..., "--genome", "-g", help="Genome assembly FASTA file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """
    Count dinucleotides across all regions.

    Writes a two-column TSV (dinucleotide, count) with all 16 pairs.
    """
    _set_verbosity(verbose)

    region_set = _load_region_set(path)
    assembly = _load_genome(genome)
    try:
        counts = calc_dinucl_freq(region_set, assembly)
    except GenomicDistError as e:
        _fail("Error counting dinucleotides", e)
    typer.echo(dinucleotide_frame(counts).to_csv(sep="\t", index=False), nl=False)


@app.command("tss")
def tss_distances(
    path: Path = typer.Argument(..., help="Path to BED file"),
    tss: Path = typer.Option(..., "--tss", "-t", help="BED file of TSS annotations"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Calculate the distance from each region to its nearest TSS."""
    _set_verbosity(verbose)

    region_set = _load_region_set(path)
    try:
        index = TSSIndex.from_bed(tss)
        distances = calc_tss_dist(region_set, index)
    except (GenomicDistError, OSError) as e:
        _fail("Error calculating TSS distances", e)
    _echo_values(distances)


@app.command("profile")
def profile(
    path: Path = typer.Argument(..., help="Path to BED file OR folder of BED files"),
    genome: Optional[Path] = typer.Option(
        None, "--genome", "-g", help="Genome assembly FASTA file (enables GC content)"
    ),
    tss: Optional[Path] = typer.Option(
        None, "--tss", "-t", help="BED file of TSS annotations (enables TSS distances)"
    ),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Output TSV (default: stdout)"
    ),
    pattern: str = typer.Option(
        DEFAULT_PATTERN, help="File pattern to match when PATH is a directory"
    ),
    ignore_unk_chroms: bool = typer.Option(
        True,
        "--ignore-unk-chroms/--strict",
        help="Skip regions on chromosomes missing from the genome",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """
    Summarize every available statistic per BED file.

    Output columns: file, statistic, count, mean, std, min, median, max.

    Example:
        genomicdist profile ./beds/ \\
            --genome hg38.fa.gz \\
            --tss gencode_tss.bed.gz \\
            --output summary.tsv
    """
    _set_verbosity(verbose)

    try:
        config = ProfileConfig(
            genome_fasta=genome, tss_bed=tss, ignore_unk_chroms=ignore_unk_chroms
        )
    except FileNotFoundError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)

    console.print("[yellow]Loading reference data...[/yellow]")
    try:
        profiler = RegionSetProfiler(config)
    except (GenomicDistError, OSError) as e:
        _fail("Error loading reference data", e)

    batch = path.is_dir()
    bed_files = _find_bed_files(path, pattern) if batch else [path]

    tables = []
    for bed_file in track(bed_files, description="Profiling...", console=console):
        try:
            table = profiler.summary_table(profiler.profile(bed_file))
        except FILE_ERRORS as e:
            if not batch:
                _fail(f"Failed to profile '{bed_file}'", e)
            logger.warning(f"Error profiling {bed_file}: {e}... skipping")
            continue
        table.insert(0, "file", bed_file.name)
        tables.append(table)

    if not tables:
        console.print("[bold red]Error:[/bold red] No BED files could be profiled")
        raise typer.Exit(1)

    summary = pd.concat(tables, ignore_index=True)
    if output is None:
        typer.echo(summary.to_csv(sep="\t", index=False), nl=False)
    else:
        summary.to_csv(output, sep="\t", index=False)
        console.print(f"Output saved to: {output}")


if __name__ == "__main__":
    app()
