"""Unit tests for GenomeAssembly."""

import logging

import pytest

from genomicdist import GenomeAssembly, Region
from genomicdist.core.errors import OutOfBoundsError, UnknownChromosomeError


class TestGenomeAssemblyLoading:
    """Tests for FASTA parsing."""

    def test_from_fasta(self, genome_fasta):
        genome = GenomeAssembly.from_fasta(genome_fasta)
        assert len(genome) == 2
        assert set(genome.chromosomes()) == {"chr1", "chr2"}
        assert genome.chromosome_length("chr1") == 16
        assert genome.sequence_for(Region("chr1", 0, 16)) == b"GCGCAATTNNacgtGG"

    def test_from_gzipped_fasta(self, genome_fasta_gz):
        genome = GenomeAssembly.from_fasta(genome_fasta_gz)
        assert genome.sequence_for(Region("chr2", 0, 4)) == b"ATAT"

    def test_duplicate_identifier_last_wins(self, temp_dir, caplog):
        path = temp_dir / "dup.fa"
        path.write_text(">chr1\nAAAA\n>chr1\nCCCCCC\n")
        with caplog.at_level(logging.WARNING):
            genome = GenomeAssembly.from_fasta(path)
        assert genome.chromosome_length("chr1") == 6
        assert "Duplicate record 'chr1'" in caplog.text

    def test_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError, match="nope.fa"):
            GenomeAssembly.from_fasta(temp_dir / "nope.fa")


class TestGenomeAssemblySlicing:
    """Tests for sequence_for."""

    def test_slice(self, genome):
        assert genome.sequence_for(Region("chr1", 0, 4)) == b"GCGC"
        assert genome.sequence_for(Region("chr1", 10, 14)) == b"acgt"

    def test_slice_to_end(self, genome):
        assert genome.sequence_for(Region("chr2", 6, 8)) == b"AT"

    def test_empty_slice(self, genome):
        assert genome.sequence_for(Region("chr1", 3, 3)) == b""

    def test_unknown_chromosome(self, genome):
        with pytest.raises(UnknownChromosomeError) as exc_info:
            genome.sequence_for(Region("chr99", 0, 4))
        assert exc_info.value.chrom == "chr99"

    def test_end_past_sequence(self, genome):
        with pytest.raises(OutOfBoundsError, match="length 8"):
            genome.sequence_for(Region("chr2", 4, 9))

    def test_start_after_end(self, genome):
        with pytest.raises(OutOfBoundsError):
            genome.sequence_for(Region("chr1", 5, 2))

    def test_has_chromosome(self, genome):
        assert genome.has_chromosome("chr1")
        assert not genome.has_chromosome("chr99")

    def test_chromosome_length_unknown(self, genome):
        with pytest.raises(UnknownChromosomeError):
            genome.chromosome_length("chrUn")
