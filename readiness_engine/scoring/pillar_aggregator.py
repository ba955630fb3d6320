"""
Pillar Aggregator
readiness_engine/scoring/pillar_aggregator.py

Groups indicator scores by pillar and applies the pillar weight.

Formula:
    average  = mean(member scores)
    average  = 11 − average          (price-sensitivity pillar only)
    weighted = average × pillar.weight
    raw      = Σ weighted            (nominal max ≈ 90 with the default weights)

Pillars with no scored members are left out of the result: absence means
"no data", never zero.
"""
import structlog
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple

from readiness_engine.models.enumerations import PillarCode
from readiness_engine.models.taxonomy import Pillar
from readiness_engine.scoring.indicator_scorer import IndicatorScore
from readiness_engine.scoring.utils import mean

logger = structlog.get_logger(__name__)

INVERSION_CONSTANT = Decimal("11")


@dataclass(frozen=True)
class PillarScore:
    """Aggregate for one pillar. average_score is post-inversion."""
    id: str
    name: str
    average_score: Decimal
    weighted_score: Decimal
    weight: Decimal
    indicators: Tuple[IndicatorScore, ...]


def find_pillar(pillars: Sequence[PillarScore], pillar_id: str) -> Optional[PillarScore]:
    """Lookup by id; None when the pillar had no scored members."""
    for pillar in pillars:
        if pillar.id == pillar_id:
            return pillar
    return None


def raw_price_sensitivity(
    pillars: Sequence[PillarScore],
    pillar_id: str = PillarCode.PRICE_SENSITIVITY.value,
    default: Decimal = Decimal("5"),
) -> Decimal:
    """Undo the inversion: 11 − average, or the neutral default when absent."""
    pillar = find_pillar(pillars, pillar_id)
    if pillar is None:
        return default
    return INVERSION_CONSTANT - pillar.average_score


class PillarAggregator:
    """Aggregate indicator scores into weighted pillar scores."""

    def __init__(self, price_sensitivity_pillar_id: str = PillarCode.PRICE_SENSITIVITY.value):
        self.price_sensitivity_pillar_id = price_sensitivity_pillar_id

    def aggregate(
        self,
        pillars: Sequence[Pillar],
        indicator_scores: Sequence[IndicatorScore],
    ) -> List[PillarScore]:
        """
        Args:
            pillars: Taxonomy pillars in display order.
            indicator_scores: Output of IndicatorScorer.score().

        Returns:
            PillarScore per pillar that has at least one scored indicator.
        """
        results: List[PillarScore] = []
        skipped: List[str] = []

        for pillar in pillars:
            members = tuple(s for s in indicator_scores if s.pillar_id == pillar.id)
            if not members:
                skipped.append(pillar.id)
                continue

            average = mean(s.score for s in members)
            if pillar.id == self.price_sensitivity_pillar_id:
                average = INVERSION_CONSTANT - average

            weight = Decimal(str(pillar.weight))
            results.append(
                PillarScore(
                    id=pillar.id,
                    name=pillar.name,
                    average_score=average,
                    weighted_score=average * weight,
                    weight=weight,
                    indicators=members,
                )
            )

        logger.info(
            "pillars_aggregated",
            pillars=len(results),
            skipped=skipped,
            raw_score=float(self.get_raw_score(results)),
        )
        return results

    @staticmethod
    def get_raw_score(pillar_scores: Sequence[PillarScore]) -> Decimal:
        """Σ weighted_score across the pillars present."""
        return sum((p.weighted_score for p in pillar_scores), Decimal("0"))

    @staticmethod
    def get_pillar_score(
        pillar_scores: Sequence[PillarScore],
        pillar_id: str,
    ) -> Optional[PillarScore]:
        return find_pillar(pillar_scores, pillar_id)
