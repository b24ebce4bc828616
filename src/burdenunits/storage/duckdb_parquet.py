"""DuckDB + Parquet storage backend for aggregate unit rows."""

from __future__ import annotations

import re
from collections.abc import Sequence
from pathlib import Path

import duckdb

from burdenunits.aggregation import units_to_frame
from burdenunits.models import AggregateUnit
from burdenunits.storage.base import UnitStorage

_TABLE_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class DuckDBParquetStorage(UnitStorage):
    """Persist unit rows in a queryable DB and a portable Parquet file."""

    def __init__(
        self,
        *,
        db_path: str | Path,
        parquet_path: str | Path,
        table_name: str = "aggregate_units",
    ) -> None:
        if not _TABLE_RE.match(table_name):
            raise ValueError(f"Unsafe table name: {table_name}")

        self.db_path = Path(db_path)
        self.parquet_path = Path(parquet_path)
        self.table_name = table_name

    def persist(self, units: Sequence[AggregateUnit]) -> None:
        frame = units_to_frame(list(units))

        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.parquet_path.parent.mkdir(parents=True, exist_ok=True)

        connection = duckdb.connect(str(self.db_path))
        try:
            connection.register("unit_frame", frame)
            connection.execute(
                f"""
                CREATE OR REPLACE TABLE {self.table_name} AS
                SELECT
                    CAST(group_id AS VARCHAR) AS group_id,
                    CAST(chr AS VARCHAR) AS chr,
                    CAST(pos AS BIGINT) AS pos,
                    CAST(ref AS VARCHAR) AS ref,
                    CAST(alt AS VARCHAR) AS alt
                FROM unit_frame
                """
            )

            if self.parquet_path.exists():
                self.parquet_path.unlink()

            parquet_target = self.parquet_path.as_posix().replace("'", "''")
            connection.execute(
                f"COPY {self.table_name} TO '{parquet_target}' (FORMAT PARQUET)"
            )
        finally:
            connection.close()
