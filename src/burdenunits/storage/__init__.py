"""Storage backends: transcript coordinates and aggregate unit persistence."""

from .base import UnitStorage
from .duckdb_parquet import DuckDBParquetStorage
from .transcripts import Transcript, TranscriptDatabase

__all__ = ["UnitStorage", "DuckDBParquetStorage", "Transcript", "TranscriptDatabase"]
