"""Group, filter and project annotated variants into aggregate units."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from burdenunits.config import OUTPUT_COLUMNS, ColumnMapping, FilterSettings
from burdenunits.errors import MalformedInputError
from burdenunits.models import AggregateUnit, VariantRecord
from burdenunits.quality import ColumnContract, ContractValidator

logger = logging.getLogger(__name__)


def drop_missing_groups(table: pd.DataFrame, group_column: str) -> pd.DataFrame:
    """Discard rows without a group assignment."""

    return table.loc[table[group_column].notna()]


def partition(table: pd.DataFrame, group_column: str) -> dict[str, pd.DataFrame]:
    """Split rows by distinct group id, keeping first-seen group order."""

    return {
        str(group_id): frame
        for group_id, frame in table.groupby(group_column, sort=False)
    }


def filter_by_score(frame: pd.DataFrame, score_column: str, threshold: float) -> pd.DataFrame:
    """Keep rows whose score is strictly above ``threshold``.

    Absent scores never pass.
    """

    try:
        scores = pd.to_numeric(frame[score_column], errors="raise")
    except (TypeError, ValueError) as exc:
        raise MalformedInputError(
            f"Column '{score_column}' holds a non-numeric score"
        ) from exc

    return frame.loc[scores > threshold]


def filter_by_consequence(
    frame: pd.DataFrame,
    consequence_column: str,
    pattern: str,
    *,
    regex: bool = False,
    case_sensitive: bool = True,
) -> pd.DataFrame:
    """Keep rows whose consequence annotation contains ``pattern``."""

    matches = frame[consequence_column].astype("string").str.contains(
        pattern,
        case=case_sensitive,
        regex=regex,
        na=False,
    )
    return frame.loc[matches.astype(bool)]


def project_unit(frame: pd.DataFrame, group_id: str, columns: ColumnMapping) -> AggregateUnit:
    """Build one aggregate unit from the rows that survived filtering."""

    variants = tuple(
        _to_variant(row, group_id, columns)
        for row in frame.to_dict(orient="records")
    )
    return AggregateUnit(group_id=group_id, variants=variants)


def units_to_frame(units: list[AggregateUnit]) -> pd.DataFrame:
    """Flatten units into the ``group_id, chr, pos, ref, alt`` output table."""

    rows = [row for unit in units for row in unit.to_rows()]
    frame = pd.DataFrame(rows, columns=list(OUTPUT_COLUMNS))
    return frame.astype({"pos": "int64"})


def _to_variant(row: dict[str, Any], group_id: str, columns: ColumnMapping) -> VariantRecord:
    values: dict[str, str] = {}
    for attribute in ("chrom", "ref", "alt"):
        column = getattr(columns, attribute)
        value = _to_string(row.get(column))
        if value is None:
            raise MalformedInputError(
                f"Group '{group_id}': variant has no value in column '{column}'"
            )
        values[attribute] = value

    return VariantRecord(
        chrom=values["chrom"],
        pos=_to_position(row.get(columns.pos), group_id, columns.pos),
        ref=values["ref"],
        alt=values["alt"],
        gene_id=group_id,
        consequence=_to_string(row.get(columns.consequence)),
        score=_to_float(row.get(columns.score)),
    )


def _to_position(value: Any, group_id: str, column: str) -> int:
    try:
        position = float(value)
    except (TypeError, ValueError):
        position = float("nan")

    if pd.isna(position) or position % 1 != 0:
        raise MalformedInputError(
            f"Group '{group_id}': column '{column}' must hold an integer position, got {value!r}"
        )
    return int(position)


def _to_string(value: Any) -> str | None:
    if value is None or pd.isna(value):
        return None
    return str(value)


def _to_float(value: Any) -> float | None:
    if value is None or pd.isna(value):
        return None
    return float(value)


@dataclass
class AggregationResult:
    """Aggregate units plus per-stage row accounting for one run."""

    units: list[AggregateUnit] = field(default_factory=list)
    input_rows: int = 0
    dropped_missing_group: int = 0
    dropped_by_score: int = 0
    dropped_by_consequence: int = 0
    omitted_groups: int = 0

    @property
    def retained_rows(self) -> int:
        return sum(len(unit) for unit in self.units)


class AggregationPipeline:
    """Run the drop, partition, score filter, consequence filter chain.

    ``group_column`` defaults to the gene id column of ``columns``; providers
    that synthesize their own group labels pass the label column instead.
    """

    def __init__(
        self,
        *,
        columns: ColumnMapping,
        settings: FilterSettings,
        group_column: str | None = None,
    ) -> None:
        self.columns = columns
        self.settings = settings
        self.group_column = group_column or columns.gene_id

    def run(self, table: pd.DataFrame) -> AggregationResult:
        required = (
            self.group_column,
            self.columns.chrom,
            self.columns.pos,
            self.columns.ref,
            self.columns.alt,
            self.columns.score,
            self.columns.consequence,
        )
        ContractValidator(ColumnContract(required=required)).check_required(
            list(table.columns),
            "annotation table",
        )

        result = AggregationResult(input_rows=len(table))

        assigned = drop_missing_groups(table, self.group_column)
        result.dropped_missing_group = len(table) - len(assigned)

        for group_id, group_rows in partition(assigned, self.group_column).items():
            scored = filter_by_score(group_rows, self.columns.score, self.settings.score_threshold)
            result.dropped_by_score += len(group_rows) - len(scored)

            matched = filter_by_consequence(
                scored,
                self.columns.consequence,
                self.settings.consequence_pattern,
                regex=self.settings.regex,
                case_sensitive=self.settings.case_sensitive,
            )
            result.dropped_by_consequence += len(scored) - len(matched)

            if matched.empty:
                result.omitted_groups += 1
                continue

            result.units.append(project_unit(matched, group_id, self.columns))

        logger.info(
            "Aggregated %d of %d rows into %d units (%d groups emptied by filters)",
            result.retained_rows,
            result.input_rows,
            len(result.units),
            result.omitted_groups,
        )
        return result


def aggregate(
    table: pd.DataFrame,
    gene_id_column: str,
    score_column: str,
    score_threshold: float,
    consequence_column: str,
    consequence_pattern: str,
    *,
    columns: ColumnMapping | None = None,
    regex: bool = False,
    case_sensitive: bool = True,
) -> list[AggregateUnit]:
    """Filter and group ``table`` into aggregate units keyed by gene id.

    Units come out in the order their gene id first appears in ``table``.
    An empty list means no group kept any variant.
    """

    mapping = dataclasses.replace(
        columns or ColumnMapping(),
        gene_id=gene_id_column,
        score=score_column,
        consequence=consequence_column,
    )
    settings = FilterSettings(
        score_threshold=score_threshold,
        consequence_pattern=consequence_pattern,
        regex=regex,
        case_sensitive=case_sensitive,
    )
    return AggregationPipeline(columns=mapping, settings=settings).run(table).units
