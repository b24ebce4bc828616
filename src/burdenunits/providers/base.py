"""Base interface for aggregate unit providers."""

from __future__ import annotations

from abc import ABC, abstractmethod

from burdenunits.aggregation import AggregationResult
from burdenunits.models import AggregateUnit


class AggregateUnitProvider(ABC):
    """Source of aggregate units, whatever defines the unit boundaries."""

    name: str

    @abstractmethod
    def aggregate(self) -> AggregationResult:
        """Load inputs and return the filtered aggregate units with row accounting."""

    def units(self) -> list[AggregateUnit]:
        return self.aggregate().units
