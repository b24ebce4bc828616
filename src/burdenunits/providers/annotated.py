"""Provider that groups variants by their pre-annotated gene id."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from burdenunits.adapters.annotation_tsv import AnnotationTableLoader
from burdenunits.aggregation import AggregationPipeline, AggregationResult
from burdenunits.profiles import AggregationProfile
from burdenunits.providers.base import AggregateUnitProvider


class AnnotatedGeneProvider(AggregateUnitProvider):
    """Build one unit per gene id found in the annotation files."""

    name = "annotated_genes"

    def __init__(
        self,
        *,
        input_paths: str | Path | Iterable[str | Path],
        profile: AggregationProfile,
        sep: str = "\t",
    ) -> None:
        self.profile = profile
        self.loader = AnnotationTableLoader(
            input_paths=input_paths,
            missing_token=profile.missing_token,
            required_columns=profile.columns.required(),
            position_column=profile.columns.pos,
            sep=sep,
        )

    def aggregate(self) -> AggregationResult:
        table = self.loader.read()
        pipeline = AggregationPipeline(
            columns=self.profile.columns,
            settings=self.profile.filters,
        )
        return pipeline.run(table)
