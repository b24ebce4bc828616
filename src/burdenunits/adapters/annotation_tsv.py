"""Adapter that loads per-variant annotation TSV files into one table."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

import pandas as pd

from burdenunits.adapters.base import AnnotationAdapter
from burdenunits.adapters.common import check_field_counts, expand_input_paths
from burdenunits.config import DEFAULT_MISSING_TOKEN
from burdenunits.errors import MalformedInputError
from burdenunits.quality import ColumnContract, ContractValidator

logger = logging.getLogger(__name__)


class AnnotationTableLoader(AnnotationAdapter):
    """Read delimited annotation files and concatenate them row-wise.

    Cells equal to ``missing_token`` become absent values (``NaN``); no other
    string is treated as missing. All columns are kept as text except
    ``position_column``, which must hold integers in every row.
    """

    name = "annotation_tsv"

    def __init__(
        self,
        *,
        input_paths: str | Path | Iterable[str | Path],
        missing_token: str = DEFAULT_MISSING_TOKEN,
        required_columns: Iterable[str] = (),
        position_column: str | None = None,
        sep: str = "\t",
    ) -> None:
        self.input_paths = expand_input_paths(input_paths)
        self.missing_token = missing_token
        self.required_columns = tuple(required_columns)
        self.position_column = position_column
        self.sep = sep

    def read(self) -> pd.DataFrame:
        if not self.input_paths:
            raise MalformedInputError("No annotation files matched the configured input paths.")

        validator = ContractValidator(ColumnContract(required=self.required_columns))
        frames: list[pd.DataFrame] = []
        columns: list[str] | None = None

        for input_path in self.input_paths:
            frame = self._read_one(input_path)
            validator.validate(list(frame.columns), input_path)
            if columns is None:
                columns = list(frame.columns)
            else:
                frame = frame[columns]

            if self.position_column is not None:
                frame = self._parse_positions(frame, input_path)

            logger.info("Loaded %d annotation rows from %s", len(frame), input_path)
            frames.append(frame)

        return pd.concat(frames, ignore_index=True)

    def _read_one(self, input_path: Path) -> pd.DataFrame:
        check_field_counts(input_path, self.sep)
        try:
            return pd.read_csv(
                input_path,
                sep=self.sep,
                dtype=str,
                index_col=False,
                na_values=[self.missing_token],
                keep_default_na=False,
            )
        except pd.errors.EmptyDataError as exc:
            raise MalformedInputError(f"{input_path}: file is empty, expected a header row") from exc
        except (pd.errors.ParserError, UnicodeDecodeError) as exc:
            raise MalformedInputError(f"{input_path}: cannot parse delimited table: {exc}") from exc

    def _parse_positions(self, frame: pd.DataFrame, input_path: Path) -> pd.DataFrame:
        column = self.position_column
        values = frame[column]
        if values.isna().any():
            raise MalformedInputError(f"{input_path}: column '{column}' has missing positions")

        try:
            positions = pd.to_numeric(values, errors="raise")
        except (TypeError, ValueError) as exc:
            raise MalformedInputError(
                f"{input_path}: column '{column}' must hold integer positions"
            ) from exc

        if not (positions % 1 == 0).all():
            raise MalformedInputError(
                f"{input_path}: column '{column}' must hold integer positions"
            )

        return frame.assign(**{column: positions.astype("int64")})


def load_annotation_table(
    paths: str | Path | Iterable[str | Path],
    missing_token: str = DEFAULT_MISSING_TOKEN,
    *,
    required_columns: Iterable[str] = (),
    position_column: str | None = None,
    sep: str = "\t",
) -> pd.DataFrame:
    """Load one or more annotation files into a unified table."""

    return AnnotationTableLoader(
        input_paths=paths,
        missing_token=missing_token,
        required_columns=required_columns,
        position_column=position_column,
        sep=sep,
    ).read()
