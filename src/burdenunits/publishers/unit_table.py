"""Tab-separated aggregate unit table consumed by burden test pipelines."""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

from burdenunits.aggregation import units_to_frame
from burdenunits.models import AggregateUnit
from burdenunits.publishers.base import Publisher


class AggregateTablePublisher(Publisher):
    """Write one ``group_id, chr, pos, ref, alt`` row per retained variant.

    An empty unit collection still writes the header row.
    """

    def __init__(self, *, output_path: str | Path, sep: str = "\t") -> None:
        self.output_path = Path(output_path)
        self.sep = sep

    def publish(self, units: Sequence[AggregateUnit]) -> None:
        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        units_to_frame(list(units)).to_csv(self.output_path, sep=self.sep, index=False)
