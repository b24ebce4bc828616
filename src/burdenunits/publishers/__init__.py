"""Aggregate unit output publishers."""

from .base import Publisher
from .group_summary import GroupSummaryPublisher
from .unit_table import AggregateTablePublisher

__all__ = [
    "Publisher",
    "AggregateTablePublisher",
    "GroupSummaryPublisher",
]
