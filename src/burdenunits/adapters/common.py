"""Shared utilities for tabular annotation adapters."""

from __future__ import annotations

import csv
import glob
import gzip
import os
from pathlib import Path
from typing import Iterable

from burdenunits.errors import MalformedInputError

TABULAR_SUFFIXES: tuple[str, ...] = (".tsv", ".tsv.gz", ".txt", ".txt.gz")


def _is_tabular(path: Path) -> bool:
    """Return True if the file looks like a tab-separated table."""

    name = path.name.lower()
    return any(name.endswith(suffix) for suffix in TABULAR_SUFFIXES)


def expand_input_paths(input_paths: str | Path | Iterable[str | Path]) -> list[Path]:
    """Expand file, directory, or glob inputs into concrete table paths.

    A named file that does not exist, or a glob that matches no table, is an
    error rather than a silently shorter input list.
    """

    if isinstance(input_paths, (str, Path)):
        items: list[str | Path] = [input_paths]
    else:
        items = list(input_paths)

    resolved: list[Path] = []
    for item in items:
        expanded_item = os.path.expandvars(os.path.expanduser(str(item)))
        item_path = Path(expanded_item)

        if item_path.is_dir():
            resolved.extend(
                sorted(
                    path
                    for path in item_path.iterdir()
                    if path.is_file() and _is_tabular(path)
                )
            )
            continue

        if item_path.exists():
            resolved.append(item_path)
            continue

        matches = sorted(
            match for match in map(Path, glob.glob(expanded_item)) if _is_tabular(match)
        )
        if not matches:
            raise MalformedInputError(f"{item}: no such annotation file")
        resolved.extend(matches)

    return resolved


def check_field_counts(path: Path, sep: str = "\t") -> None:
    """Raise ``MalformedInputError`` when a data row is wider or narrower than the header.

    ``pandas.read_csv`` pads short rows and turns an extra leading field into
    an index, so widths are checked on the raw lines.
    Blank lines are skipped, as pandas does.
    """

    opener = gzip.open if path.name.lower().endswith(".gz") else open
    try:
        with opener(path, "rt", newline="") as stream:
            rows = csv.reader(stream, delimiter=sep)
            header = next((row for row in rows if row), None)
            if header is None:
                return
            for row in rows:
                if row and len(row) != len(header):
                    raise MalformedInputError(
                        f"{path}: line {rows.line_num} has {len(row)} fields, "
                        f"header has {len(header)}"
                    )
    except (csv.Error, UnicodeDecodeError, gzip.BadGzipFile) as exc:
        raise MalformedInputError(f"{path}: cannot parse delimited table: {exc}") from exc
