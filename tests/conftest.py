"""Pytest configuration and fixtures for genomicdist tests."""

import gzip
import tempfile
from pathlib import Path

import pytest

from genomicdist import GenomeAssembly, Region, RegionSet, TSSIndex

# chr1 = GCGCAATT NNacgtGG, chr2 = ATATATAT
GENOME_FASTA = """>chr1 first test chromosome
GCGCAATT
NNacgtGG
>chr2
ATATATAT
"""


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def neighbor_bed(temp_dir):
    """BED file with out-of-order chr1 regions and a lone chr2 region."""
    path = temp_dir / "neighbors.bed"
    content = """chr1\t700\t900
chr1\t100\t200
chr2\t50\t80
chr1\t500\t650\tpeak3\t0\t+
"""
    path.write_text(content)
    return path


@pytest.fixture
def neighbor_bed_gz(temp_dir):
    """Gzip-compressed copy of the neighbor BED file."""
    path = temp_dir / "neighbors.bed.gz"
    with gzip.open(path, "wt") as f:
        f.write("chr1\t700\t900\nchr1\t100\t200\nchr2\t50\t80\nchr1\t500\t650\n")
    return path


@pytest.fixture
def genome_fasta(temp_dir):
    """Small two-chromosome FASTA file."""
    path = temp_dir / "genome.fa"
    path.write_text(GENOME_FASTA)
    return path


@pytest.fixture
def genome_fasta_gz(temp_dir):
    """Gzip-compressed copy of the test FASTA file."""
    path = temp_dir / "genome.fa.gz"
    with gzip.open(path, "wt") as f:
        f.write(GENOME_FASTA)
    return path


@pytest.fixture
def genome():
    """In-memory genome matching genome_fasta."""
    return GenomeAssembly.from_sequences({"chr1": "GCGCAATTNNacgtGG", "chr2": "ATATATAT"})


@pytest.fixture
def gc_bed(temp_dir):
    """Four 4bp windows tiling chr1 of the test genome."""
    path = temp_dir / "gc.bed"
    content = """chr1\t0\t4
chr1\t4\t8
chr1\t8\t12
chr1\t12\t16
"""
    path.write_text(content)
    return path


@pytest.fixture
def tss_regions():
    """TSS annotations on chr1 and chr2."""
    return [
        Region("chr1", 1000, 1001),
        Region("chr1", 5000, 5001),
        Region("chr2", 300, 301),
    ]


@pytest.fixture
def tss_index(tss_regions):
    return TSSIndex(tss_regions)


@pytest.fixture
def tss_bed(temp_dir, tss_regions):
    """TSS annotations written as BED."""
    path = temp_dir / "tss.bed"
    RegionSet.from_regions(tss_regions).to_bed_file(path)
    return path
