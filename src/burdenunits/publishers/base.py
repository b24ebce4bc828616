"""Publisher interface for aggregate unit outputs."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence

from burdenunits.models import AggregateUnit


class Publisher(ABC):
    """Publishes aggregate units into consumer-facing artifacts."""

    @abstractmethod
    def publish(self, units: Sequence[AggregateUnit]) -> None:
        """Publish units into output targets."""
