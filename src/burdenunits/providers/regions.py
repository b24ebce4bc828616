"""Provider that derives unit boundaries from a transcript coordinate database."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from burdenunits.adapters.annotation_tsv import AnnotationTableLoader
from burdenunits.aggregation import AggregationPipeline, AggregationResult
from burdenunits.intervals import assign_regions, reduce_intervals
from burdenunits.models import GeneRegion
from burdenunits.profiles import AggregationProfile
from burdenunits.providers.base import AggregateUnitProvider
from burdenunits.storage.transcripts import TranscriptDatabase

logger = logging.getLogger(__name__)


class TranscriptRegionProvider(AggregateUnitProvider):
    """Group variants by merged transcript regions instead of annotated genes.

    Transcripts overlapping any variant position are fetched from the
    coordinate database, reduced into disjoint gene regions, and each variant
    is labelled with the region holding its position. Variants outside every
    region are dropped in the same stage as variants without a gene id.

    Exactly one of ``transcript_table``, ``gtf_path`` or ``database_path`` must
    be given.
    """

    name = "transcript_regions"

    def __init__(
        self,
        *,
        input_paths: str | Path | Iterable[str | Path],
        profile: AggregationProfile,
        transcript_table: str | Path | None = None,
        gtf_path: str | Path | None = None,
        database_path: str | Path | None = None,
        group_column: str = "region_id",
        sep: str = "\t",
    ) -> None:
        sources = [item for item in (transcript_table, gtf_path, database_path) if item is not None]
        if len(sources) != 1:
            raise ValueError(
                "Provide exactly one of transcript_table, gtf_path or database_path"
            )

        self.profile = profile
        self.transcript_table = transcript_table
        self.gtf_path = gtf_path
        self.database_path = database_path
        self.group_column = group_column
        self.regions: list[GeneRegion] = []

        columns = profile.columns
        self.loader = AnnotationTableLoader(
            input_paths=input_paths,
            missing_token=profile.missing_token,
            required_columns=(
                columns.chrom,
                columns.pos,
                columns.ref,
                columns.alt,
                columns.score,
                columns.consequence,
            ),
            position_column=columns.pos,
            sep=sep,
        )

    def database(self) -> TranscriptDatabase:
        if self.transcript_table is not None:
            return TranscriptDatabase.from_table(
                self.transcript_table,
                missing_token=self.profile.missing_token,
            )
        if self.gtf_path is not None:
            return TranscriptDatabase.from_gtf(self.gtf_path)
        return TranscriptDatabase(self.database_path)

    def aggregate(self) -> AggregationResult:
        table = self.loader.read()
        columns = self.profile.columns
        if self.group_column in table.columns:
            raise ValueError(
                f"Group column '{self.group_column}' already exists in the annotation table"
            )

        positions = {
            (str(chrom), int(pos), int(pos))
            for chrom, pos in zip(table[columns.chrom], table[columns.pos])
        }
        with self.database() as database:
            transcripts = database.overlapping(sorted(positions))

        self.regions = reduce_intervals(item.as_interval() for item in transcripts)
        logger.info(
            "Reduced %d transcripts into %d gene regions",
            len(transcripts),
            len(self.regions),
        )

        labelled = table.assign(
            **{
                self.group_column: assign_regions(
                    table,
                    self.regions,
                    chrom_column=columns.chrom,
                    pos_column=columns.pos,
                )
            }
        )
        pipeline = AggregationPipeline(
            columns=columns,
            settings=self.profile.filters,
            group_column=self.group_column,
        )
        return pipeline.run(labelled)
