"""Schema validation for annotation tables."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

from burdenunits.errors import MalformedInputError, SchemaMismatchError


@dataclass(frozen=True)
class ColumnContract:
    """Columns an annotation table has to declare in its header."""

    required: tuple[str, ...] = field(default_factory=tuple)


class ContractValidator:
    """Apply a column contract to the headers of loaded annotation files.

    The first validated file fixes the expected column set; every later file
    must declare exactly the same set.
    """

    def __init__(self, contract: ColumnContract | None = None) -> None:
        self.contract = contract or ColumnContract()
        self._reference: tuple[str, ...] | None = None
        self._reference_source: str | None = None

    def validate(self, columns: Sequence[str], source: str | Path) -> None:
        self.check_required(columns, source)
        self.check_consistent(columns, source)

    def check_required(self, columns: Sequence[str], source: str | Path) -> None:
        missing = [name for name in self.contract.required if name not in columns]
        if missing:
            raise MalformedInputError(
                f"{source}: header is missing required column(s): {', '.join(missing)}"
            )

    def check_consistent(self, columns: Sequence[str], source: str | Path) -> None:
        if self._reference is None:
            self._reference = tuple(columns)
            self._reference_source = str(source)
            return

        expected = set(self._reference)
        found = set(columns)
        if expected == found:
            return

        only_reference = sorted(expected - found)
        only_current = sorted(found - expected)
        raise SchemaMismatchError(
            f"Column sets differ between {self._reference_source} and {source}: "
            f"missing={only_reference} unexpected={only_current}"
        )
