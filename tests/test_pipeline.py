import csv
import json
import sys
from pathlib import Path

import duckdb
import pandas as pd
import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from burdenunits import (  # noqa: E402
    AggregateUnitIterator,
    AggregationProfileLoader,
    AnnotatedGeneProvider,
    AssociationResult,
    AssociationTest,
    BurdenUnitPipeline,
    run_association,
)
from burdenunits.publishers import AggregateTablePublisher, GroupSummaryPublisher  # noqa: E402
from burdenunits.storage import DuckDBParquetStorage  # noqa: E402

FIELDS = ["CHROM", "POS", "REF", "ALT", "Gene", "CADD_phred", "Consequence"]


def _write_annotations(tmp_path: Path) -> list[Path]:
    chunks = {
        "chr1.tsv": [
            ("1", "1000", "A", "G", "G1", "5.0", "intron_variant"),
            ("1", "2000", "C", "T", "G1", "2.0", "intron_variant"),
            ("1", "3000", "G", "A", ".", "10.0", "intron_variant"),
        ],
        "chr2.tsv": [
            ("2", "500", "T", "C", "G2", "12.5", "intron_variant&non_coding_transcript_variant"),
            ("2", "600", "T", "G", "G2", ".", "intron_variant"),
            ("2", "700", "A", "C", "G3", "8.0", "missense_variant"),
        ],
    }

    paths = []
    for name, rows in chunks.items():
        path = tmp_path / name
        with path.open("w", newline="") as stream:
            writer = csv.writer(stream, delimiter="\t")
            writer.writerow(FIELDS)
            writer.writerows(rows)
        paths.append(path)
    return paths


class _CountingTest(AssociationTest):
    def __init__(self) -> None:
        self.seen: list[str] = []

    def run(self, units, null_model, max_allele_frequency):
        rows = []
        for unit in units:
            self.seen.append(unit.group_id)
            rows.append(
                {
                    "group_id": unit.group_id,
                    "n_site": len(unit),
                    "null_model": null_model,
                    "max_af": max_allele_frequency,
                }
            )
        return AssociationResult(
            results=pd.DataFrame(rows),
            variant_info={unit.group_id: unit.to_frame() for unit in _units_of(units)},
        )


def _units_of(iterator: AggregateUnitIterator):
    iterator.reset()
    return list(iterator)


def test_pipeline_publishes_table_summary_and_storage(tmp_path: Path) -> None:
    paths = _write_annotations(tmp_path)
    profile = AggregationProfileLoader().load("cadd_intronic")
    table_path = tmp_path / "out" / "units.tsv"
    summary_path = tmp_path / "out" / "summary.json"
    db_path = tmp_path / "out" / "units.duckdb"
    parquet_path = tmp_path / "out" / "units.parquet"

    report = BurdenUnitPipeline(
        provider=AnnotatedGeneProvider(input_paths=paths, profile=profile),
        publishers=[
            AggregateTablePublisher(output_path=table_path),
            GroupSummaryPublisher(output_path=summary_path),
        ],
        storage=DuckDBParquetStorage(db_path=db_path, parquet_path=parquet_path),
    ).run()

    assert report.provider == "annotated_genes"
    assert report.input_rows == 6
    assert report.retained_rows == 2
    assert report.dropped_missing_group == 1
    assert report.dropped_by_score == 2
    assert report.dropped_by_consequence == 1
    assert report.unique_group_count == 2
    assert report.counts == {"G1": 1, "G2": 1}
    assert report.association is None

    with table_path.open() as stream:
        rows = list(csv.DictReader(stream, delimiter="\t"))
    assert list(rows[0].keys()) == ["group_id", "chr", "pos", "ref", "alt"]
    assert [(row["group_id"], row["chr"], row["pos"]) for row in rows] == [
        ("G1", "1", "1000"),
        ("G2", "2", "500"),
    ]

    summary = json.loads(summary_path.read_text())
    assert summary == {
        "unique_group_count": 2,
        "counts": {"G1": 1, "G2": 1},
        "size_distribution": {"1": 2},
    }

    connection = duckdb.connect(str(db_path))
    try:
        stored = connection.execute(
            "SELECT group_id, pos FROM aggregate_units ORDER BY pos"
        ).fetchall()
    finally:
        connection.close()
    assert stored == [("G2", 500), ("G1", 1000)]
    parquet_rows = duckdb.sql(f"SELECT count(*) FROM '{parquet_path.as_posix()}'").fetchone()[0]
    assert parquet_rows == 2


def test_pipeline_hands_units_to_association_test(tmp_path: Path) -> None:
    paths = _write_annotations(tmp_path)
    profile = AggregationProfileLoader().load("cadd_intronic")
    test = _CountingTest()

    report = BurdenUnitPipeline(
        provider=AnnotatedGeneProvider(input_paths=paths, profile=profile),
        association_test=test,
        null_model="null-model",
        max_allele_frequency=0.01,
    ).run()

    assert test.seen == ["G1", "G2"]
    assert report.association is not None
    assert report.association.results["max_af"].tolist() == [0.01, 0.01]
    assert set(report.association.variant_info) == {"G1", "G2"}


def test_empty_result_is_published_as_header_only_table(tmp_path: Path) -> None:
    paths = _write_annotations(tmp_path)
    profile = AggregationProfileLoader().load("cadd_missense")
    table_path = tmp_path / "units.tsv"
    test = _CountingTest()

    report = BurdenUnitPipeline(
        provider=AnnotatedGeneProvider(input_paths=paths, profile=profile),
        publishers=[AggregateTablePublisher(output_path=table_path)],
        association_test=test,
    ).run()

    assert report.units == []
    assert report.unique_group_count == 0
    assert test.seen == []
    assert report.association is not None and report.association.results.empty
    assert table_path.read_text().strip() == "group_id\tchr\tpos\tref\talt"


def test_association_rejects_out_of_range_allele_frequency() -> None:
    with pytest.raises(ValueError):
        run_association(_CountingTest(), [], None, max_allele_frequency=0)


def test_unit_iterator_tracks_position_and_resets(tmp_path: Path) -> None:
    paths = _write_annotations(tmp_path)
    units = AnnotatedGeneProvider(
        input_paths=paths,
        profile=AggregationProfileLoader().load("cadd_intronic"),
    ).units()

    iterator = AggregateUnitIterator(units)
    assert iterator.current is None
    assert len(iterator) == 2

    first = next(iterator)
    assert first.group_id == "G1"
    assert iterator.current == 0
    assert [unit.group_id for unit in iterator] == ["G2"]

    iterator.reset()
    assert iterator.group_ids == [unit.group_id for unit in iterator]
