"""Canonical in-memory data models for variants, regions and aggregate units."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from burdenunits.config import OUTPUT_COLUMNS


@dataclass(frozen=True)
class VariantRecord:
    """Single annotated variant.

    Identity is the ``(chrom, pos, ref, alt)`` tuple; annotation fields may be
    absent (``None``) when the source file carried the missing token.
    """

    chrom: str
    pos: int
    ref: str
    alt: str
    gene_id: str | None = None
    consequence: str | None = None
    score: float | None = None

    def key(self) -> tuple[str, int, str, str]:
        """Stable identity of the variant."""

        return (self.chrom, self.pos, self.ref, self.alt)

    def to_row(self, group_id: str) -> dict[str, Any]:
        """Serialize into the output contract row for ``group_id``."""

        return {
            "group_id": group_id,
            "chr": self.chrom,
            "pos": self.pos,
            "ref": self.ref,
            "alt": self.alt,
        }


@dataclass(frozen=True)
class GeneRegion:
    """Merged genomic interval covering one or more overlapping transcripts."""

    chrom: str
    start: int
    end: int
    transcripts: frozenset[str] = field(default_factory=frozenset)

    @property
    def label(self) -> str:
        """Synthesized group identifier, e.g. ``1:1000-2000``."""

        return f"{self.chrom}:{self.start}-{self.end}"

    def contains(self, chrom: str, pos: int) -> bool:
        return chrom == self.chrom and self.start <= pos <= self.end

    def overlaps(self, other: GeneRegion) -> bool:
        return (
            self.chrom == other.chrom
            and self.start <= other.end
            and other.start <= self.end
        )


@dataclass(frozen=True)
class AggregateUnit:
    """Named group of variants tested jointly by a burden test."""

    group_id: str
    variants: tuple[VariantRecord, ...] = ()

    def __len__(self) -> int:
        return len(self.variants)

    def to_rows(self) -> list[dict[str, Any]]:
        return [variant.to_row(self.group_id) for variant in self.variants]

    def to_frame(self) -> pd.DataFrame:
        """Return the unit as an output contract table."""

        return pd.DataFrame(self.to_rows(), columns=list(OUTPUT_COLUMNS))
