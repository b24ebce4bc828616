import csv
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))

from burdenunits import (  # noqa: E402
    AggregationProfile,
    FilterSettings,
    TranscriptRegionProvider,
    summarize,
)

FIELDS = ["CHROM", "POS", "REF", "ALT", "Gene", "CADD_phred", "Consequence"]


def _profile() -> AggregationProfile:
    return AggregationProfile(
        name="test",
        filters=FilterSettings(score_threshold=3, consequence_pattern="intron_variant"),
    )


def _write_inputs(tmp_path: Path) -> tuple[Path, Path]:
    variants = tmp_path / "variants.tsv"
    rows = [
        ("1", "120", "A", "G", ".", "5.0", "intron_variant"),
        ("1", "290", "C", "T", ".", "6.0", "intron_variant"),
        ("1", "250", "G", "A", ".", "1.0", "intron_variant"),
        ("1", "500", "T", "C", "G5", "9.0", "intron_variant"),
        ("2", "60", "A", "C", ".", "4.0", "missense_variant"),
        ("2", "70", "A", "T", ".", "4.0", "intron_variant"),
    ]
    with variants.open("w", newline="") as stream:
        writer = csv.writer(stream, delimiter="\t")
        writer.writerow(FIELDS)
        writer.writerows(rows)

    transcripts = tmp_path / "transcripts.tsv"
    transcripts.write_text(
        "tx_name\tchrom\ttx_start\ttx_end\tstrand\tgene_id\n"
        "tx1\t1\t100\t200\t+\tG1\n"
        "tx2\t1\t150\t300\t+\tG1\n"
        "tx3\t1\t2000\t3000\t+\tG3\n"
        "tx4\t2\t50\t80\t-\tG4\n"
    )
    return variants, transcripts


def test_region_provider_groups_by_reduced_transcript_regions(tmp_path: Path) -> None:
    variants, transcripts = _write_inputs(tmp_path)
    provider = TranscriptRegionProvider(
        input_paths=variants,
        profile=_profile(),
        transcript_table=transcripts,
    )

    result = provider.aggregate()

    assert summarize(result.units) == {"1:100-300": 2, "2:50-80": 1}
    assert [(r.chrom, r.start, r.end) for r in provider.regions] == [("1", 100, 300), ("2", 50, 80)]
    assert result.dropped_missing_group == 1
    assert result.dropped_by_score == 1
    assert result.dropped_by_consequence == 1


def test_region_provider_accepts_gtf(tmp_path: Path) -> None:
    variants, _ = _write_inputs(tmp_path)
    gtf = tmp_path / "genes.gtf"
    gtf.write_text(
        '1\tsrc\ttranscript\t100\t200\t.\t+\t.\tgene_id "G1"; transcript_id "tx1";\n'
        '1\tsrc\ttranscript\t250\t300\t.\t+\t.\tgene_id "G1"; transcript_id "tx2";\n'
    )

    units = TranscriptRegionProvider(
        input_paths=variants,
        profile=_profile(),
        gtf_path=gtf,
    ).units()

    assert summarize(units) == {"1:100-200": 1, "1:250-300": 1}


def test_region_provider_requires_one_transcript_source(tmp_path: Path) -> None:
    variants, transcripts = _write_inputs(tmp_path)

    with pytest.raises(ValueError):
        TranscriptRegionProvider(input_paths=variants, profile=_profile())

    with pytest.raises(ValueError):
        TranscriptRegionProvider(
            input_paths=variants,
            profile=_profile(),
            transcript_table=transcripts,
            gtf_path=transcripts,
        )
