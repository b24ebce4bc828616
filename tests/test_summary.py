import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from burdenunits import (  # noqa: E402
    AggregateUnit,
    VariantRecord,
    size_distribution,
    summarize,
    summary_frame,
    unique_group_count,
)


def _unit(group_id: str, size: int) -> AggregateUnit:
    return AggregateUnit(
        group_id=group_id,
        variants=tuple(
            VariantRecord(chrom="1", pos=index + 1, ref="A", alt="G", gene_id=group_id)
            for index in range(size)
        ),
    )


UNITS = [_unit("G1", 3), _unit("G2", 1), _unit("G3", 3)]


def test_summary_counts_variants_per_group() -> None:
    assert summarize(UNITS) == {"G1": 3, "G2": 1, "G3": 3}
    assert unique_group_count(UNITS) == len(summarize(UNITS)) == 3


def test_size_distribution_is_sorted_by_size() -> None:
    assert list(size_distribution(UNITS).items()) == [(1, 1), (3, 2)]


def test_summary_frame_matches_summary() -> None:
    frame = summary_frame(UNITS)

    assert frame.columns.tolist() == ["group_id", "n_variants"]
    assert dict(zip(frame["group_id"], frame["n_variants"])) == summarize(UNITS)


def test_empty_collection_summarizes_to_nothing() -> None:
    assert summarize([]) == {}
    assert unique_group_count([]) == 0
    assert size_distribution([]) == {}
    assert summary_frame([]).empty
