import csv
import json
import subprocess
import sys
from pathlib import Path


def _write_annotations(path: Path) -> None:
    with path.open("w", newline="") as stream:
        writer = csv.writer(stream, delimiter="\t")
        writer.writerow(["CHROM", "POS", "REF", "ALT", "Gene", "CADD_phred", "Consequence"])
        writer.writerow(["1", "1000", "A", "G", "G1", "5.0", "intron_variant"])
        writer.writerow(["1", "2000", "C", "T", "G1", "2.0", "intron_variant"])
        writer.writerow(["1", "3000", "G", "T", ".", "10.0", "intron_variant"])


def test_run_aggregation_script_executes_pipeline(tmp_path: Path) -> None:
    repo_root = Path(__file__).resolve().parents[1]
    annotations = tmp_path / "chr1.tsv"
    output_path = tmp_path / "output" / "units.tsv"
    summary_path = tmp_path / "output" / "summary.json"
    config_path = tmp_path / "run.json"

    _write_annotations(annotations)

    config_path.write_text(
        json.dumps(
            {
                "profile": "cadd_intronic",
                "provider": {
                    "name": "annotated_genes",
                    "params": {"input_paths": [str(annotations)]},
                },
                "publishers": [
                    {"name": "unit_table", "params": {"output_path": str(output_path)}},
                    {"name": "group_summary", "params": {"output_path": str(summary_path)}},
                ],
            }
        )
    )

    result = subprocess.run(
        [sys.executable, "scripts/run_aggregation.py", "--config", str(config_path)],
        cwd=repo_root,
        text=True,
        capture_output=True,
        check=False,
    )

    assert result.returncode == 0, result.stderr
    payload = json.loads(result.stdout)
    assert payload["profile"] == "cadd_intronic"
    assert payload["provider"] == "annotated_genes"
    assert payload["input_rows"] == 3
    assert payload["retained_rows"] == 1
    assert payload["unique_group_count"] == 1

    assert output_path.read_text().splitlines() == [
        "group_id\tchr\tpos\tref\talt",
        "G1\t1\t1000\tA\tG",
    ]
    assert json.loads(summary_path.read_text())["counts"] == {"G1": 1}


def test_run_aggregation_rejects_unknown_publisher(tmp_path: Path) -> None:
    repo_root = Path(__file__).resolve().parents[1]
    annotations = tmp_path / "chr1.tsv"
    config_path = tmp_path / "run.json"
    _write_annotations(annotations)

    config_path.write_text(
        json.dumps(
            {
                "provider": {
                    "name": "annotated_genes",
                    "params": {"input_paths": str(annotations)},
                },
                "publishers": [{"name": "redis", "params": {}}],
            }
        )
    )

    result = subprocess.run(
        [sys.executable, "scripts/run_aggregation.py", "--config", str(config_path)],
        cwd=repo_root,
        text=True,
        capture_output=True,
        check=False,
    )

    assert result.returncode != 0
    assert "Unknown publisher: redis" in result.stderr
