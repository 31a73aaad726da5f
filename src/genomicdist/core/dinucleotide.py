"""The 16 ordered pairs of DNA bases, used as aggregation keys."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class Dinucleotide(Enum):
    AA = "AA"
    AC = "AC"
    AG = "AG"
    AT = "AT"
    CA = "CA"
    CC = "CC"
    CG = "CG"
    CT = "CT"
    GA = "GA"
    GC = "GC"
    GG = "GG"
    GT = "GT"
    TA = "TA"
    TC = "TC"
    TG = "TG"
    TT = "TT"

    @classmethod
    def from_bytes(cls, pair: bytes) -> Optional[Dinucleotide]:
        """
        Match two bases case-insensitively.

        Returns None for anything that is not two of A, C, G or T.
        """
        return _BY_BYTES.get(pair.upper())

    def __str__(self) -> str:
        return self.value


_BY_BYTES: dict[bytes, Dinucleotide] = {d.value.encode("ascii"): d for d in Dinucleotide}
