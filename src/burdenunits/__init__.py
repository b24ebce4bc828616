"""Aggregate unit preparation for rare variant burden tests.

This package loads per-variant annotation tables, groups variants into genes
or merged transcript regions, filters them by consequence and
deleteriousness score, and formats the result for an external burden test.
"""

from .adapters import AnnotationTableLoader, load_annotation_table
from .aggregation import AggregationPipeline, AggregationResult, aggregate, units_to_frame
from .association import (
    AggregateUnitIterator,
    AssociationResult,
    AssociationTest,
    run_association,
)
from .config import DEFAULT_MISSING_TOKEN, OUTPUT_COLUMNS, ColumnMapping, FilterSettings
from .errors import BurdenUnitsError, MalformedInputError, SchemaMismatchError
from .intervals import assign_regions, reduce_intervals
from .models import AggregateUnit, GeneRegion, VariantRecord
from .pipeline import BurdenUnitPipeline, BurdenUnitRunReport
from .profiles import AggregationProfile, AggregationProfileLoader
from .providers import AggregateUnitProvider, AnnotatedGeneProvider, TranscriptRegionProvider
from .registry import ProviderPluginSpec, ProviderRegistry, build_default_provider_registry
from .summary import size_distribution, summarize, summary_frame, unique_group_count

__all__ = [
    "AggregateUnit",
    "AggregateUnitIterator",
    "AggregateUnitProvider",
    "AggregationPipeline",
    "AggregationProfile",
    "AggregationProfileLoader",
    "AggregationResult",
    "AnnotatedGeneProvider",
    "AnnotationTableLoader",
    "AssociationResult",
    "AssociationTest",
    "BurdenUnitPipeline",
    "BurdenUnitRunReport",
    "BurdenUnitsError",
    "ColumnMapping",
    "DEFAULT_MISSING_TOKEN",
    "FilterSettings",
    "GeneRegion",
    "MalformedInputError",
    "OUTPUT_COLUMNS",
    "ProviderPluginSpec",
    "ProviderRegistry",
    "SchemaMismatchError",
    "TranscriptRegionProvider",
    "VariantRecord",
    "aggregate",
    "assign_regions",
    "build_default_provider_registry",
    "load_annotation_table",
    "reduce_intervals",
    "run_association",
    "size_distribution",
    "summarize",
    "summary_frame",
    "unique_group_count",
    "units_to_frame",
]
