"""Base interface for annotation table adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod

import pandas as pd


class AnnotationAdapter(ABC):
    """Adapter that materializes a source dataset as one annotation table."""

    name: str

    @abstractmethod
    def read(self) -> pd.DataFrame:
        """Return the full annotation table from the adapter source."""
