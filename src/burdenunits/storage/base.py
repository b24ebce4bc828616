"""Base class for aggregate unit storage backends."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from burdenunits.models import AggregateUnit


class UnitStorage(ABC):
    """Persists aggregate units for reproducible downstream testing."""

    @abstractmethod
    def persist(self, units: Sequence[AggregateUnit]) -> None:
        """Persist units in backend-specific format."""
