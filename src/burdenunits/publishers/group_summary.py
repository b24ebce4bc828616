"""JSON summary of aggregate unit sizes."""

from __future__ import annotations

import json
from collections.abc import Sequence
from pathlib import Path

from burdenunits.models import AggregateUnit
from burdenunits.publishers.base import Publisher
from burdenunits.summary import size_distribution, summarize, unique_group_count


class GroupSummaryPublisher(Publisher):
    """Write group counts and the units-by-size distribution as JSON."""

    def __init__(self, *, output_path: str | Path) -> None:
        self.output_path = Path(output_path)

    def publish(self, units: Sequence[AggregateUnit]) -> None:
        payload = {
            "unique_group_count": unique_group_count(units),
            "counts": summarize(units),
            "size_distribution": {
                str(size): count for size, count in size_distribution(units).items()
            },
        }

        self.output_path.parent.mkdir(parents=True, exist_ok=True)
        with self.output_path.open("w") as stream:
            json.dump(payload, stream, indent=4)
