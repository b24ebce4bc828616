"""Seam between aggregate units and an external burden test routine."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from burdenunits.models import AggregateUnit

logger = logging.getLogger(__name__)


class AggregateUnitIterator:
    """Walk aggregate units one at a time, the way a burden test consumes them.

    ``current`` is the index of the unit returned by the last ``next()`` call,
    or ``None`` before iteration starts. ``reset()`` rewinds to the first unit.
    """

    def __init__(self, units: Sequence[AggregateUnit]) -> None:
        self._units = tuple(units)
        self._position = 0

    def __len__(self) -> int:
        return len(self._units)

    def __iter__(self) -> Iterator[AggregateUnit]:
        return self

    def __next__(self) -> AggregateUnit:
        if self._position >= len(self._units):
            raise StopIteration
        unit = self._units[self._position]
        self._position += 1
        return unit

    @property
    def current(self) -> int | None:
        return self._position - 1 if self._position else None

    @property
    def group_ids(self) -> list[str]:
        return [unit.group_id for unit in self._units]

    def reset(self) -> None:
        self._position = 0


@dataclass
class AssociationResult:
    """Per-unit statistics and per-variant metadata returned by a burden test."""

    results: pd.DataFrame = field(default_factory=pd.DataFrame)
    variant_info: dict[str, pd.DataFrame] = field(default_factory=dict)


class AssociationTest(ABC):
    """External statistical test run over aggregate units against a null model."""

    @abstractmethod
    def run(
        self,
        units: AggregateUnitIterator,
        null_model: Any,
        max_allele_frequency: float,
    ) -> AssociationResult:
        """Test every unit yielded by ``units``."""


def run_association(
    test: AssociationTest,
    units: Sequence[AggregateUnit],
    null_model: Any,
    max_allele_frequency: float = 1.0,
) -> AssociationResult:
    """Hand units to ``test``; no units means an empty result without a call."""

    if not 0 < max_allele_frequency <= 1:
        raise ValueError(
            f"max_allele_frequency must be in (0, 1], got {max_allele_frequency}"
        )

    if not units:
        logger.info("No aggregate units to test")
        return AssociationResult()

    logger.info(
        "Running %s on %d units (max allele frequency %s)",
        type(test).__name__,
        len(units),
        max_allele_frequency,
    )
    return test.run(AggregateUnitIterator(units), null_model, max_allele_frequency)
