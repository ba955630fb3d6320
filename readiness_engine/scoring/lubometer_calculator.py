"""
Lubometer Calculator
readiness_engine/scoring/lubometer_calculator.py

Composite readiness score, zone and price-tier readiness.

Formula:
    raw      = Σ pillar weighted_score
    penalty  = Σ triggered truth-index penalties
    final    = max(0, raw − penalty)

Zones (lower bound inclusive):
    final ≥ 70 green | ≥ 50 yellow | ≥ 30 red | else no-go

Price tiers:
    base         = min(100, final / 90 × 100)
    Starter      = min(100, base × 1.1)
    Professional = base × 0.85 if money (P4) < 6
    Elite        = base × 0.7 if money < 7, then × 0.8 if price sensitivity (P6) > 7
    each tier clamped to [0, 100] and rounded half-up

Close blockers are a separate check (check_close_blockers) and use the raw,
pre-inversion price sensitivity.
"""
import structlog
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence, Tuple

from readiness_engine.models.enumerations import PillarCode, ReadinessZone
from readiness_engine.scoring.pillar_aggregator import (
    PillarAggregator,
    PillarScore,
    find_pillar,
    raw_price_sensitivity,
)
from readiness_engine.scoring.truth_index import TruthIndexResult
from readiness_engine.scoring.utils import clamp, round_half_up

logger = structlog.get_logger(__name__)

NOMINAL_MAX_SCORE = Decimal("90")
NEUTRAL_PILLAR_AVERAGE = Decimal("5")

ZONE_THRESHOLDS: Tuple[Tuple[Decimal, ReadinessZone], ...] = (
    (Decimal("70"), ReadinessZone.GREEN),
    (Decimal("50"), ReadinessZone.YELLOW),
    (Decimal("30"), ReadinessZone.RED),
)

BLOCKER_LOW_PAIN_URGENCY = "Not enough pain or urgency"
BLOCKER_PRICE_VS_MONEY = "High price sensitivity with low money availability"


@dataclass(frozen=True)
class PriceTier:
    price: int
    readiness: int      # [0, 100]
    label: str


PRICE_TIERS: Tuple[Tuple[int, str], ...] = (
    (2997, "Starter"),
    (7997, "Professional"),
    (15997, "Elite"),
)


@dataclass(frozen=True)
class LubometerResult:
    """Output of LubometerCalculator.calculate()."""
    raw_score: Decimal
    penalties: int
    final_score: Decimal
    readiness_zone: ReadinessZone
    price_tiers: Tuple[PriceTier, ...]


@dataclass(frozen=True)
class CloseCheck:
    can_close: bool
    reason: Optional[str] = None


def readiness_zone(final_score: Decimal) -> ReadinessZone:
    for threshold, zone in ZONE_THRESHOLDS:
        if final_score >= threshold:
            return zone
    return ReadinessZone.NO_GO


def baseline_price_tiers() -> Tuple[PriceTier, ...]:
    """Every tier at zero readiness."""
    return tuple(PriceTier(price=price, readiness=0, label=label) for price, label in PRICE_TIERS)


class LubometerCalculator:
    """Combine pillar scores and truth-index penalties into readiness."""

    def __init__(self, price_sensitivity_pillar_id: str = PillarCode.PRICE_SENSITIVITY.value):
        self.price_sensitivity_pillar_id = price_sensitivity_pillar_id

    def calculate(
        self,
        pillars: Sequence[PillarScore],
        truth_index: TruthIndexResult,
    ) -> LubometerResult:
        """
        Args:
            pillars: Output of PillarAggregator.aggregate().
            truth_index: Output of TruthIndexEvaluator.evaluate(). Penalties
                         are re-summed from the triggered entries.

        Returns:
            LubometerResult with zone and the three price tiers.
        """
        raw = PillarAggregator.get_raw_score(pillars)
        penalties = sum(p.penalty for p in truth_index.penalties if p.triggered)
        final = max(Decimal("0"), raw - Decimal(penalties))
        zone = readiness_zone(final)
        tiers = self.price_tier_readiness(final, pillars)

        logger.info(
            "lubometer_calculated",
            raw_score=float(raw),
            penalties=penalties,
            final_score=float(final),
            readiness_zone=zone.value,
            tiers={t.label: t.readiness for t in tiers},
        )

        return LubometerResult(
            raw_score=raw,
            penalties=penalties,
            final_score=final,
            readiness_zone=zone,
            price_tiers=tiers,
        )

    def price_tier_readiness(
        self,
        final_score: Decimal,
        pillars: Sequence[PillarScore],
    ) -> Tuple[PriceTier, ...]:
        money = self._average(pillars, PillarCode.AVAILABLE_MONEY.value)
        price_sensitivity = self._average(pillars, self.price_sensitivity_pillar_id)

        base = min(Decimal("100"), final_score / NOMINAL_MAX_SCORE * Decimal("100"))

        starter = min(Decimal("100"), base * Decimal("1.1"))

        professional = base
        if money < 6:
            professional *= Decimal("0.85")

        elite = base
        if money < 7:
            elite *= Decimal("0.7")
        if price_sensitivity > 7:
            elite *= Decimal("0.8")

        readiness = (starter, professional, elite)
        return tuple(
            PriceTier(
                price=price,
                readiness=round_half_up(clamp(value)),
                label=label,
            )
            for (price, label), value in zip(PRICE_TIERS, readiness)
        )

    def check_close_blockers(self, pillars: Sequence[PillarScore]) -> CloseCheck:
        """Hard business rules that veto a close regardless of score."""
        pain = find_pillar(pillars, PillarCode.PERCEIVED_SPREAD.value)
        urgency = find_pillar(pillars, PillarCode.URGENCY.value)
        if pain and urgency and pain.average_score <= 6 and urgency.average_score <= 5:
            return CloseCheck(can_close=False, reason=BLOCKER_LOW_PAIN_URGENCY)

        raw_price = raw_price_sensitivity(pillars, self.price_sensitivity_pillar_id)
        money = find_pillar(pillars, PillarCode.AVAILABLE_MONEY.value)
        if raw_price >= 7 and money and money.average_score <= 5:
            return CloseCheck(can_close=False, reason=BLOCKER_PRICE_VS_MONEY)

        return CloseCheck(can_close=True)

    @staticmethod
    def _average(pillars: Sequence[PillarScore], pillar_id: str) -> Decimal:
        pillar = find_pillar(pillars, pillar_id)
        return pillar.average_score if pillar else NEUTRAL_PILLAR_AVERAGE
