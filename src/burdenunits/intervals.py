"""Collapse overlapping transcript intervals into disjoint gene regions."""

from __future__ import annotations

import bisect
from collections.abc import Iterable, Sequence
from typing import Any, Union

import pandas as pd

from burdenunits.errors import MalformedInputError
from burdenunits.models import GeneRegion

IntervalLike = Union[GeneRegion, Sequence[Any]]


def _as_region(interval: IntervalLike) -> GeneRegion:
    if isinstance(interval, GeneRegion):
        region = interval
    else:
        if len(interval) not in (3, 4):
            raise MalformedInputError(
                f"Interval must be (chrom, start, end) or (chrom, start, end, name): {interval!r}"
            )
        names = frozenset({str(interval[3])}) if len(interval) == 4 else frozenset()
        region = GeneRegion(
            chrom=str(interval[0]),
            start=int(interval[1]),
            end=int(interval[2]),
            transcripts=names,
        )

    if region.start > region.end:
        raise MalformedInputError(
            f"Interval start exceeds end: {region.chrom}:{region.start}-{region.end}"
        )
    return region


def reduce_intervals(intervals: Iterable[IntervalLike]) -> list[GeneRegion]:
    """Merge overlapping or touching intervals into maximal disjoint regions.

    Intervals are grouped by chromosome and swept left to right in start
    order. The next interval is merged into the accumulator whenever its start
    does not exceed the accumulator's end. Chromosomes are emitted in the order
    they are first seen; regions within a chromosome are sorted by start.
    """

    by_chrom: dict[str, list[GeneRegion]] = {}
    for interval in intervals:
        region = _as_region(interval)
        by_chrom.setdefault(region.chrom, []).append(region)

    reduced: list[GeneRegion] = []
    for chrom, regions in by_chrom.items():
        regions.sort(key=lambda item: item.start)

        current = regions[0]
        for region in regions[1:]:
            if region.start <= current.end:
                current = GeneRegion(
                    chrom=chrom,
                    start=current.start,
                    end=max(current.end, region.end),
                    transcripts=current.transcripts | region.transcripts,
                )
                continue
            reduced.append(current)
            current = region
        reduced.append(current)

    return reduced


def assign_regions(
    frame: pd.DataFrame,
    regions: Sequence[GeneRegion],
    *,
    chrom_column: str,
    pos_column: str,
) -> pd.Series:
    """Return the label of the region holding each row's position.

    ``regions`` must be disjoint, as produced by :func:`reduce_intervals`.
    Rows outside every region get an absent value.
    """

    starts: dict[str, list[int]] = {}
    ordered: dict[str, list[GeneRegion]] = {}
    for region in sorted(regions, key=lambda item: (item.chrom, item.start)):
        starts.setdefault(region.chrom, []).append(region.start)
        ordered.setdefault(region.chrom, []).append(region)

    labels: list[str | None] = []
    for chrom, pos in zip(frame[chrom_column], frame[pos_column]):
        chrom_key = str(chrom)
        index = bisect.bisect_right(starts.get(chrom_key, []), int(pos)) - 1
        if index < 0:
            labels.append(None)
            continue
        region = ordered[chrom_key][index]
        labels.append(region.label if region.contains(chrom_key, int(pos)) else None)

    return pd.Series(labels, index=frame.index, dtype="object")
