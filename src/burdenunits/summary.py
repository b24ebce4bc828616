"""Per-group cardinality statistics over aggregate units."""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence

import pandas as pd

from burdenunits.models import AggregateUnit


def summarize(units: Sequence[AggregateUnit]) -> dict[str, int]:
    """Map each group id to the number of variants assigned to it."""

    return {unit.group_id: len(unit) for unit in units}


def unique_group_count(units: Sequence[AggregateUnit]) -> int:
    return len(summarize(units))


def size_distribution(units: Sequence[AggregateUnit]) -> dict[int, int]:
    """Count units by how many variants they hold, smallest size first."""

    counts = Counter(len(unit) for unit in units)
    return dict(sorted(counts.items()))


def summary_frame(units: Sequence[AggregateUnit]) -> pd.DataFrame:
    return pd.DataFrame(
        list(summarize(units).items()),
        columns=["group_id", "n_variants"],
    )
