"""
GenomeAssembly - In-memory chromosome sequence store.

Sequences are read once from a FASTA file (plain or gzip) with pysam and
kept as raw bytes, keyed by record name. Slicing is bounds-checked: an
unknown chromosome or a slice past the end of the sequence is reported as
an error instead of being silently truncated.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterator, Mapping, Union

import pysam

from genomicdist.core.errors import FormatError, OutOfBoundsError, UnknownChromosomeError
from genomicdist.core.region_set import Region

logger = logging.getLogger(__name__)


class GenomeAssembly:
    """
    Chromosome-name to sequence mapping supporting region slicing.

    Load the genome once and reuse it across statistic calls.

    Example:
        >>> genome = GenomeAssembly.from_fasta("hg38.fa.gz")
        >>> genome.sequence_for(Region("chr1", 10000, 10010))
        b'TAACCCTAAC'
    """

    def __init__(self, sequences: dict[str, bytes]) -> None:
        self._sequences = sequences

    @classmethod
    def from_fasta(cls, path: Union[str, Path]) -> GenomeAssembly:
        """
        Load every record of a FASTA file.

        Args:
            path: FASTA file, optionally gzip-compressed

        Returns:
            GenomeAssembly with one entry per record

        Raises:
            FileNotFoundError: If the file does not exist
            FormatError: If a record has no identifier

        Duplicate identifiers overwrite earlier records (last one wins).
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Genome FASTA not found: {path}")

        logger.info(f"Loading genome from {path}")

        sequences: dict[str, bytes] = {}
        with pysam.FastxFile(str(path)) as fasta:
            for record_number, record in enumerate(fasta, start=1):
                if not record.name:
                    raise FormatError(
                        f"Record {record_number} has an empty identifier",
                        path=path,
                    )
                if record.name in sequences:
                    logger.warning(
                        f"Duplicate record '{record.name}' in {path}; "
                        f"keeping the last occurrence"
                    )
                sequences[record.name] = (record.sequence or "").encode("ascii")

        total_bp = sum(len(seq) for seq in sequences.values())
        logger.info(f"Loaded {len(sequences)} chromosomes ({total_bp:,} bp)")

        return cls(sequences)

    @classmethod
    def from_sequences(cls, sequences: Mapping[str, Union[str, bytes]]) -> GenomeAssembly:
        """Build from an in-memory mapping of chromosome to sequence."""
        return cls(
            {
                chrom: seq.encode("ascii") if isinstance(seq, str) else bytes(seq)
                for chrom, seq in sequences.items()
            }
        )

    def sequence_for(self, region: Region) -> bytes:
        """
        Return ``sequence[start:end]`` for the region's chromosome.

        Raises:
            UnknownChromosomeError: If the chromosome is not in the genome
            OutOfBoundsError: If the region does not fit inside the sequence
        """
        seq = self._sequences.get(region.chrom)
        if seq is None:
            raise UnknownChromosomeError(region.chrom)

        if region.start > region.end or region.end > len(seq):
            raise OutOfBoundsError(
                f"Region {region.chrom}:{region.start}-{region.end} is out of "
                f"bounds for sequence of length {len(seq)}"
            )

        return seq[region.start:region.end]

    def has_chromosome(self, chrom: str) -> bool:
        return chrom in self._sequences

    def chromosomes(self) -> Iterator[str]:
        return iter(self._sequences.keys())

    def chromosome_length(self, chrom: str) -> int:
        """Return the length of a chromosome's sequence."""
        seq = self._sequences.get(chrom)
        if seq is None:
            raise UnknownChromosomeError(chrom)
        return len(seq)

    def __len__(self) -> int:
        return len(self._sequences)

    def __repr__(self) -> str:
        return f"GenomeAssembly(chromosomes={len(self._sequences)})"
