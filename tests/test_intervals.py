import sys
from pathlib import Path

import pandas as pd
import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from burdenunits import GeneRegion, MalformedInputError  # noqa: E402
from burdenunits.intervals import assign_regions, reduce_intervals  # noqa: E402


INTERVALS = [
    ("1", 500, 700, "tx4"),
    ("1", 100, 200, "tx1"),
    ("2", 10, 20, "tx5"),
    ("1", 150, 300, "tx2"),
    ("1", 300, 320, "tx3"),
    ("1", 900, 900, "tx6"),
]


def _covered(intervals) -> set[tuple[str, int]]:
    return {
        (chrom, position)
        for chrom, start, end, *_ in intervals
        for position in range(start, end + 1)
    }


def test_reduce_merges_overlapping_and_touching_intervals() -> None:
    regions = reduce_intervals(INTERVALS)

    assert [(r.chrom, r.start, r.end) for r in regions] == [
        ("1", 100, 320),
        ("1", 500, 700),
        ("1", 900, 900),
        ("2", 10, 20),
    ]
    assert regions[0].transcripts == frozenset({"tx1", "tx2", "tx3"})
    assert regions[0].label == "1:100-320"


def test_reduced_regions_cover_each_point_exactly_once() -> None:
    regions = reduce_intervals(INTERVALS)

    for chrom, position in _covered(INTERVALS):
        holders = [region for region in regions if region.contains(chrom, position)]
        assert len(holders) == 1

    region_points = _covered((r.chrom, r.start, r.end) for r in regions)
    assert region_points == _covered(INTERVALS)


def test_reduced_regions_are_disjoint_and_maximal() -> None:
    regions = reduce_intervals(INTERVALS)

    for index, left in enumerate(regions):
        for right in regions[index + 1:]:
            assert not left.overlaps(right)
            if left.chrom == right.chrom:
                assert right.start > left.end


def test_reduce_is_idempotent() -> None:
    once = reduce_intervals(INTERVALS)
    twice = reduce_intervals(once)

    assert twice == once


def test_reduce_handles_empty_and_point_inputs() -> None:
    assert reduce_intervals([]) == []
    assert reduce_intervals([("X", 5, 5)]) == [GeneRegion(chrom="X", start=5, end=5)]


def test_reduce_equal_starts_keep_widest_end() -> None:
    regions = reduce_intervals([("1", 10, 15, "a"), ("1", 10, 40, "b"), ("1", 10, 12, "c")])

    assert len(regions) == 1
    assert (regions[0].start, regions[0].end) == (10, 40)
    assert regions[0].transcripts == frozenset({"a", "b", "c"})


def test_reduce_rejects_inverted_interval() -> None:
    with pytest.raises(MalformedInputError):
        reduce_intervals([("1", 20, 10)])


def test_assign_regions_labels_positions_inside_regions() -> None:
    regions = reduce_intervals(INTERVALS)
    frame = pd.DataFrame(
        {
            "CHROM": ["1", "1", "1", "2", "3"],
            "POS": [100, 400, 320, 15, 15],
        }
    )

    labels = assign_regions(frame, regions, chrom_column="CHROM", pos_column="POS")

    assert labels.tolist() == ["1:100-320", None, "1:100-320", "2:10-20", None]
