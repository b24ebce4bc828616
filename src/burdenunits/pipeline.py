"""Composable aggregate unit pipeline orchestrator."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from burdenunits.association import AssociationResult, AssociationTest, run_association
from burdenunits.models import AggregateUnit
from burdenunits.providers.base import AggregateUnitProvider
from burdenunits.publishers.base import Publisher
from burdenunits.storage.base import UnitStorage
from burdenunits.summary import summarize, unique_group_count

logger = logging.getLogger(__name__)


@dataclass
class BurdenUnitRunReport:
    """Execution summary for a pipeline run."""

    provider: str
    input_rows: int
    retained_rows: int
    dropped_missing_group: int
    dropped_by_score: int
    dropped_by_consequence: int
    unique_group_count: int
    counts: dict[str, int] = field(default_factory=dict)
    units: list[AggregateUnit] = field(default_factory=list)
    association: AssociationResult | None = None


class BurdenUnitPipeline:
    """Run a provider, then association testing, storage and publication in order."""

    def __init__(
        self,
        *,
        provider: AggregateUnitProvider,
        publishers: list[Publisher] | None = None,
        storage: UnitStorage | None = None,
        association_test: AssociationTest | None = None,
        null_model: Any = None,
        max_allele_frequency: float = 1.0,
    ) -> None:
        self.provider = provider
        self.publishers = publishers or []
        self.storage = storage
        self.association_test = association_test
        self.null_model = null_model
        self.max_allele_frequency = max_allele_frequency

    def run(self) -> BurdenUnitRunReport:
        logger.info("Building aggregate units with provider %s", self.provider.name)
        result = self.provider.aggregate()
        units = result.units

        if not units:
            logger.warning("No aggregate units survived filtering")

        association = None
        if self.association_test is not None:
            association = run_association(
                self.association_test,
                units,
                self.null_model,
                self.max_allele_frequency,
            )

        if self.storage is not None:
            self.storage.persist(units)

        for publisher in self.publishers:
            logger.info("Publishing %d units with %s", len(units), type(publisher).__name__)
            publisher.publish(units)

        return BurdenUnitRunReport(
            provider=self.provider.name,
            input_rows=result.input_rows,
            retained_rows=result.retained_rows,
            dropped_missing_group=result.dropped_missing_group,
            dropped_by_score=result.dropped_by_score,
            dropped_by_consequence=result.dropped_by_consequence,
            unique_group_count=unique_group_count(units),
            counts=summarize(units),
            units=units,
            association=association,
        )
