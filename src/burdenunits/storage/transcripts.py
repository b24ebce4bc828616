"""DuckDB-backed transcript coordinate database with an overlap query."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import duckdb
import pandas as pd

from burdenunits.adapters.common import check_field_counts
from burdenunits.errors import MalformedInputError
from burdenunits.quality import ColumnContract, ContractValidator

logger = logging.getLogger(__name__)

TRANSCRIPT_COLUMNS: tuple[str, ...] = (
    "tx_name",
    "chrom",
    "tx_start",
    "tx_end",
    "strand",
    "gene_id",
)

GTF_COLUMNS: tuple[str, ...] = (
    "seqname",
    "source",
    "feature",
    "start",
    "end",
    "score",
    "strand",
    "frame",
    "attribute",
)


@dataclass(frozen=True)
class Transcript:
    """Named transcript feature with closed 1-based coordinates."""

    tx_name: str
    chrom: str
    start: int
    end: int
    strand: str | None = None
    gene_id: str | None = None

    def as_interval(self) -> tuple[str, int, int, str]:
        return (self.chrom, self.start, self.end, self.tx_name)


class TranscriptDatabase:
    """Queryable transcript table held in a DuckDB database.

    Use as a context manager: the connection is opened on entry, seeded from
    ``source_frame`` when one is given, and closed on exit.
    """

    table_name = "transcripts"

    def __init__(
        self,
        db_path: str | Path = ":memory:",
        *,
        source_frame: pd.DataFrame | None = None,
    ) -> None:
        self.db_path = db_path
        self.source_frame = source_frame
        self._connection: Any = None

    @classmethod
    def from_table(
        cls,
        path: str | Path,
        db_path: str | Path = ":memory:",
        *,
        missing_token: str = ".",
    ) -> TranscriptDatabase:
        """Seed the database from a tab-separated transcript table."""

        source = Path(path)
        check_field_counts(source)
        try:
            frame = pd.read_csv(
                source,
                sep="\t",
                dtype=str,
                index_col=False,
                na_values=[missing_token],
                keep_default_na=False,
            )
        except pd.errors.EmptyDataError as exc:
            raise MalformedInputError(f"{source}: transcript table is empty") from exc
        except pd.errors.ParserError as exc:
            raise MalformedInputError(f"{source}: cannot parse transcript table: {exc}") from exc

        ContractValidator(
            ColumnContract(required=("tx_name", "chrom", "tx_start", "tx_end"))
        ).check_required(list(frame.columns), source)

        for optional in ("strand", "gene_id"):
            if optional not in frame.columns:
                frame[optional] = None

        return cls(db_path, source_frame=_with_coordinates(frame[list(TRANSCRIPT_COLUMNS)], source))

    @classmethod
    def from_gtf(cls, path: str | Path, db_path: str | Path = ":memory:") -> TranscriptDatabase:
        """Seed the database from the ``transcript`` features of a GTF file."""

        source = Path(path)
        try:
            frame = pd.read_csv(
                source,
                sep="\t",
                header=None,
                names=list(GTF_COLUMNS),
                comment="#",
                dtype=str,
            )
        except pd.errors.EmptyDataError as exc:
            raise MalformedInputError(f"{source}: GTF file is empty") from exc
        except pd.errors.ParserError as exc:
            raise MalformedInputError(f"{source}: cannot parse GTF file: {exc}") from exc

        frame = frame.loc[frame["feature"] == "transcript"]
        attributes = frame["attribute"].fillna("")
        transcripts = pd.DataFrame(
            {
                "tx_name": attributes.str.extract(r'transcript_id "([^"]+)"', expand=False),
                "chrom": frame["seqname"],
                "tx_start": frame["start"],
                "tx_end": frame["end"],
                "strand": frame["strand"].where(frame["strand"] != "."),
                "gene_id": attributes.str.extract(r'gene_id "([^"]+)"', expand=False),
            }
        )

        if transcripts["tx_name"].isna().any():
            raise MalformedInputError(f"{source}: transcript feature without transcript_id")

        return cls(db_path, source_frame=_with_coordinates(transcripts, source))

    def open(self) -> TranscriptDatabase:
        self._connection = duckdb.connect(str(self.db_path))
        try:
            if self.source_frame is not None:
                self._load(self.source_frame)
            elif not self._has_table():
                raise MalformedInputError(
                    f"{self.db_path}: database has no '{self.table_name}' table"
                )
        except BaseException:
            self.close()
            raise
        return self

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def __enter__(self) -> TranscriptDatabase:
        return self.open()

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def transcripts(self, chrom: str | None = None) -> list[Transcript]:
        """Return stored transcripts, optionally restricted to one chromosome."""

        query = f"SELECT {', '.join(TRANSCRIPT_COLUMNS)} FROM {self.table_name}"
        params: list[Any] = []
        if chrom is not None:
            query += " WHERE chrom = ?"
            params.append(str(chrom))
        query += " ORDER BY chrom, tx_start, tx_name"
        return [Transcript(*row) for row in self._require_connection().execute(query, params).fetchall()]

    def overlapping(self, ranges: Iterable[Sequence[Any]]) -> list[Transcript]:
        """Return transcripts overlapping any ``(chrom, start, end)`` range."""

        range_frame = pd.DataFrame(
            [(str(item[0]), int(item[1]), int(item[2])) for item in ranges],
            columns=["chrom", "range_start", "range_end"],
        )
        if range_frame.empty:
            return []

        connection = self._require_connection()
        connection.register("query_ranges", range_frame)
        try:
            rows = connection.execute(
                f"""
                SELECT DISTINCT t.tx_name, t.chrom, t.tx_start, t.tx_end, t.strand, t.gene_id
                FROM {self.table_name} AS t
                JOIN query_ranges AS r
                  ON t.chrom = r.chrom
                 AND t.tx_start <= r.range_end
                 AND t.tx_end >= r.range_start
                ORDER BY t.chrom, t.tx_start, t.tx_name
                """
            ).fetchall()
        finally:
            connection.unregister("query_ranges")

        logger.info("Found %d transcripts overlapping %d ranges", len(rows), len(range_frame))
        return [Transcript(*row) for row in rows]

    def _load(self, frame: pd.DataFrame) -> None:
        connection = self._require_connection()
        connection.register("transcript_frame", frame)
        try:
            connection.execute(
                f"""
                CREATE OR REPLACE TABLE {self.table_name} AS
                SELECT
                    CAST(tx_name AS VARCHAR) AS tx_name,
                    CAST(chrom AS VARCHAR) AS chrom,
                    CAST(tx_start AS BIGINT) AS tx_start,
                    CAST(tx_end AS BIGINT) AS tx_end,
                    CAST(strand AS VARCHAR) AS strand,
                    CAST(gene_id AS VARCHAR) AS gene_id
                FROM transcript_frame
                """
            )
        finally:
            connection.unregister("transcript_frame")

    def _has_table(self) -> bool:
        count = self._require_connection().execute(
            "SELECT count(*) FROM information_schema.tables WHERE table_name = ?",
            [self.table_name],
        ).fetchone()[0]
        return count > 0

    def _require_connection(self) -> Any:
        if self._connection is None:
            raise RuntimeError("TranscriptDatabase is not open; use it as a context manager.")
        return self._connection


def _with_coordinates(frame: pd.DataFrame, source: Path) -> pd.DataFrame:
    try:
        starts = pd.to_numeric(frame["tx_start"], errors="raise")
        ends = pd.to_numeric(frame["tx_end"], errors="raise")
    except (TypeError, ValueError) as exc:
        raise MalformedInputError(f"{source}: transcript coordinates must be integers") from exc

    if starts.isna().any() or ends.isna().any():
        raise MalformedInputError(f"{source}: transcript coordinates must be integers")
    if not ((starts % 1 == 0).all() and (ends % 1 == 0).all()):
        raise MalformedInputError(f"{source}: transcript coordinates must be integers")
    if (starts > ends).any():
        raise MalformedInputError(f"{source}: transcript start exceeds end")

    text = {
        column: frame[column].astype(object).where(frame[column].notna(), None)
        for column in ("tx_name", "chrom", "strand", "gene_id")
    }
    return frame.assign(
        tx_start=starts.astype("int64"),
        tx_end=ends.astype("int64"),
        **text,
    ).reset_index(drop=True)
