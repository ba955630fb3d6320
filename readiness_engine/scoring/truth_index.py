"""
Truth Index Evaluator
readiness_engine/scoring/truth_index.py

Cross-pillar inconsistency rules. Each triggered rule subtracts a fixed
penalty from 100:

    T1 (15)  pain (ind 1) ≥ 7            and urgency (P2) ≤ 4
    T2 (15)  desire (ind 3 or 4) ≥ 7     and decisiveness (P3) ≤ 4
    T3 (10)  money (P4) ≥ 7              and raw price sensitivity ≥ 8
    T4 (10)  authority (ind 9) ≥ 7       and any of ind 9/10/11 < 5
    T5 (15)  desire (ind 3 or 4) ≥ 7     and responsibility (P5) ≤ 5

    score = max(0, 100 − Σ triggered penalties)

Rules are independent: every predicate reads the same pillar/indicator
snapshot and none depends on another firing. A rule whose pillar or
indicator is missing from the snapshot does not fire.
"""
import structlog
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from readiness_engine.models.enumerations import PillarCode
from readiness_engine.scoring.indicator_scorer import IndicatorScore
from readiness_engine.scoring.pillar_aggregator import PillarScore, raw_price_sensitivity

logger = structlog.get_logger(__name__)

MAX_TRUTH_SCORE = 100

EXPLANATION_NO_PENALTIES = "Authentic, vulnerable responses. Low people-pleasing."
EXPLANATION_MOSTLY_HONEST = "Mostly honest with some guarded responses."
EXPLANATION_MIXED = "Some inconsistency detected. Mixed signals present."
EXPLANATION_DEFENSIVE = (
    "Defensive patterns detected. Surface-level responses. Multiple contradictions found."
)


@dataclass(frozen=True)
class TruthPenalty:
    rule_id: str
    description: str
    penalty: int
    triggered: bool = True


@dataclass(frozen=True)
class TruthIndexResult:
    """Output of TruthIndexEvaluator.evaluate()."""
    score: int                            # [0, 100]
    penalties: Tuple[TruthPenalty, ...]   # triggered rules only
    explanation: str


class TruthContext:
    """Read-only lookups over one pillar/indicator snapshot."""

    def __init__(
        self,
        pillars: Sequence[PillarScore],
        indicators: Sequence[IndicatorScore],
        price_sensitivity_pillar_id: str = PillarCode.PRICE_SENSITIVITY.value,
    ):
        self._pillars: Dict[str, PillarScore] = {p.id: p for p in pillars}
        self._indicators: Dict[int, IndicatorScore] = {}
        for ind in indicators:
            self._indicators.setdefault(ind.id, ind)
        self.raw_price_sensitivity = raw_price_sensitivity(pillars, price_sensitivity_pillar_id)

    def pillar(self, pillar_id: str) -> Optional[Decimal]:
        p = self._pillars.get(pillar_id)
        return p.average_score if p else None

    def indicator(self, indicator_id: int) -> Optional[int]:
        ind = self._indicators.get(indicator_id)
        return ind.score if ind else None

    def indicator_at_least(self, indicator_id: int, threshold: int) -> bool:
        score = self.indicator(indicator_id)
        return score is not None and score >= threshold

    def pillar_at_most(self, pillar_id: str, threshold: int) -> bool:
        avg = self.pillar(pillar_id)
        return avg is not None and avg <= threshold

    def pillar_at_least(self, pillar_id: str, threshold: int) -> bool:
        avg = self.pillar(pillar_id)
        return avg is not None and avg >= threshold

    def has_high_desire(self) -> bool:
        return self.indicator_at_least(3, 7) or self.indicator_at_least(4, 7)


@dataclass(frozen=True)
class TruthRule:
    id: str
    description: str
    penalty: int
    predicate: Callable[[TruthContext], bool]


def _approval_revealed(ctx: TruthContext) -> bool:
    if not ctx.indicator_at_least(9, 7):
        return False
    scores = [ctx.indicator(i) for i in (9, 10, 11)]
    return any(s is not None and s < 5 for s in scores)


TRUTH_RULES: Tuple[TruthRule, ...] = (
    TruthRule(
        id="T1",
        description="High Pain + Low Urgency",
        penalty=15,
        predicate=lambda ctx: ctx.indicator_at_least(1, 7) and ctx.pillar_at_most("P2", 4),
    ),
    TruthRule(
        id="T2",
        description="High Desire + Low Decisiveness",
        penalty=15,
        predicate=lambda ctx: ctx.has_high_desire() and ctx.pillar_at_most("P3", 4),
    ),
    TruthRule(
        id="T3",
        description="High Money Access + High Price Sensitivity",
        penalty=10,
        predicate=lambda ctx: ctx.pillar_at_least("P4", 7) and ctx.raw_price_sensitivity >= 8,
    ),
    TruthRule(
        id="T4",
        description="Claims Authority + Reveals Need for Approval",
        penalty=10,
        predicate=_approval_revealed,
    ),
    TruthRule(
        id="T5",
        description="High Desire + Low Responsibility",
        penalty=15,
        predicate=lambda ctx: ctx.has_high_desire() and ctx.pillar_at_most("P5", 5),
    ),
)


def explain(score: int, penalty_count: int) -> str:
    """First matching band wins."""
    if penalty_count == 0:
        return EXPLANATION_NO_PENALTIES
    if score >= 75:
        return EXPLANATION_MOSTLY_HONEST
    if score >= 50:
        return EXPLANATION_MIXED
    return EXPLANATION_DEFENSIVE


class TruthIndexEvaluator:
    """Apply the rule table to a pillar/indicator snapshot."""

    def __init__(
        self,
        rules: Sequence[TruthRule] = TRUTH_RULES,
        price_sensitivity_pillar_id: str = PillarCode.PRICE_SENSITIVITY.value,
    ):
        self.rules = tuple(rules)
        self.price_sensitivity_pillar_id = price_sensitivity_pillar_id

    def evaluate(
        self,
        pillars: Sequence[PillarScore],
        indicators: Sequence[IndicatorScore],
    ) -> TruthIndexResult:
        ctx = TruthContext(pillars, indicators, self.price_sensitivity_pillar_id)

        penalties: List[TruthPenalty] = [
            TruthPenalty(rule_id=rule.id, description=rule.description, penalty=rule.penalty)
            for rule in self.rules
            if rule.predicate(ctx)
        ]
        total = sum(p.penalty for p in penalties)
        score = max(0, MAX_TRUTH_SCORE - total)

        logger.info(
            "truth_index_evaluated",
            score=score,
            penalties=[p.rule_id for p in penalties],
            total_penalty=total,
        )

        return TruthIndexResult(
            score=score,
            penalties=tuple(penalties),
            explanation=explain(score, len(penalties)),
        )
