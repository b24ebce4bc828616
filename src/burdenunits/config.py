"""Configuration contracts for aggregate unit pipelines."""

from __future__ import annotations

from dataclasses import dataclass


DEFAULT_MISSING_TOKEN = "."

OUTPUT_COLUMNS: tuple[str, ...] = (
    "group_id",
    "chr",
    "pos",
    "ref",
    "alt",
)


@dataclass(frozen=True)
class ColumnMapping:
    """Names of the source columns that feed each logical variant field."""

    chrom: str = "CHROM"
    pos: str = "POS"
    ref: str = "REF"
    alt: str = "ALT"
    gene_id: str = "Gene"
    score: str = "CADD_phred"
    consequence: str = "Consequence"

    def required(self) -> tuple[str, ...]:
        """Columns every annotation table must carry for aggregation."""

        return (
            self.chrom,
            self.pos,
            self.ref,
            self.alt,
            self.gene_id,
            self.score,
            self.consequence,
        )


@dataclass(frozen=True)
class FilterSettings:
    """Deleteriousness and consequence filters applied inside each gene group.

    ``consequence_pattern`` is matched as a literal, case-sensitive substring
    unless ``regex`` or ``case_sensitive=False`` say otherwise.
    """

    score_threshold: float
    consequence_pattern: str
    regex: bool = False
    case_sensitive: bool = True
