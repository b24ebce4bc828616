"""Aggregate unit providers."""

from .annotated import AnnotatedGeneProvider
from .base import AggregateUnitProvider
from .regions import TranscriptRegionProvider

__all__ = [
    "AggregateUnitProvider",
    "AnnotatedGeneProvider",
    "TranscriptRegionProvider",
]
