"""
Red Flag Detector
readiness_engine/scoring/red_flags.py

Default detector: surfaces triggered truth-index rules plus the push/delay
rules (low pain and urgency, price sensitivity against money, low ownership,
desire without decisiveness). Flags are unique by text, most severe first.
"""
import structlog
from dataclasses import dataclass
from decimal import Decimal
from typing import List, Protocol, Sequence

from readiness_engine.models.enumerations import PillarCode, Severity
from readiness_engine.scoring.indicator_scorer import IndicatorScore
from readiness_engine.scoring.pillar_aggregator import (
    PillarScore,
    find_pillar,
    raw_price_sensitivity,
)
from readiness_engine.scoring.truth_index import TruthIndexResult

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class RedFlag:
    text: str
    severity: Severity


class RedFlagDetector(Protocol):
    def detect(
        self,
        indicators: Sequence[IndicatorScore],
        pillars: Sequence[PillarScore],
        truth_index: TruthIndexResult,
    ) -> List[RedFlag]: ...


def penalty_severity(penalty: int) -> Severity:
    if penalty >= 15:
        return Severity.HIGH
    if penalty >= 10:
        return Severity.MEDIUM
    return Severity.LOW


class PushDelayRedFlagDetector:
    """Truth-index penalties and push/delay business rules as red flags."""

    def __init__(self, price_sensitivity_pillar_id: str = PillarCode.PRICE_SENSITIVITY.value):
        self.price_sensitivity_pillar_id = price_sensitivity_pillar_id

    def detect(
        self,
        indicators: Sequence[IndicatorScore],
        pillars: Sequence[PillarScore],
        truth_index: TruthIndexResult,
    ) -> List[RedFlag]:
        flags: List[RedFlag] = [
            RedFlag(text=f"Truth Index: {p.description}", severity=penalty_severity(p.penalty))
            for p in truth_index.penalties
            if p.triggered
        ]

        pain = find_pillar(pillars, PillarCode.PERCEIVED_SPREAD.value)
        urgency = find_pillar(pillars, PillarCode.URGENCY.value)
        decisiveness = find_pillar(pillars, PillarCode.DECISIVENESS.value)
        money = find_pillar(pillars, PillarCode.AVAILABLE_MONEY.value)
        responsibility = find_pillar(pillars, PillarCode.RESPONSIBILITY.value)

        if pain and urgency and pain.average_score <= 6 and urgency.average_score <= 5:
            flags.append(RedFlag(
                text="Not enough pain or urgency detected - prospect may not be ready",
                severity=Severity.HIGH,
            ))

        raw_price = raw_price_sensitivity(pillars, self.price_sensitivity_pillar_id)
        if raw_price >= Decimal("7") and money and money.average_score <= 5:
            flags.append(RedFlag(
                text="High price sensitivity combined with low money availability",
                severity=Severity.HIGH,
            ))

        if responsibility and responsibility.average_score <= 4:
            flags.append(RedFlag(
                text="Low responsibility and ownership - prospect may not follow through",
                severity=Severity.MEDIUM,
            ))

        # first desire indicator in list order, not the higher of the two
        desire = next((ind for ind in indicators if ind.id in (3, 4)), None)
        if desire and desire.score >= 7 and decisiveness and decisiveness.average_score <= 4:
            flags.append(RedFlag(
                text="High desire but low decisiveness - may need more coaching",
                severity=Severity.MEDIUM,
            ))

        unique = list({flag.text: flag for flag in flags}.values())
        unique.sort(key=lambda f: f.severity.rank, reverse=True)

        logger.info(
            "red_flags_detected",
            flags=len(unique),
            high=sum(1 for f in unique if f.severity is Severity.HIGH),
        )
        return unique
