"""Input adapters for annotation tables."""

from .annotation_tsv import AnnotationTableLoader, load_annotation_table
from .base import AnnotationAdapter
from .common import check_field_counts, expand_input_paths

__all__ = [
    "AnnotationAdapter",
    "AnnotationTableLoader",
    "check_field_counts",
    "expand_input_paths",
    "load_annotation_table",
]
