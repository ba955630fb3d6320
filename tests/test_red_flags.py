# tests/test_red_flags.py
"""
Red Flag Detector - truth-index flags, push/delay rules, de-duplication.
"""

import pytest

from readiness_engine.models.enumerations import Severity
from readiness_engine.scoring.red_flags import PushDelayRedFlagDetector, penalty_severity
from readiness_engine.scoring.truth_index import (
    TruthIndexEvaluator,
    TruthIndexResult,
    TruthPenalty,
)

from conftest import pillar_overrides

NO_PAIN = "Not enough pain or urgency detected - prospect may not be ready"
PRICE_VS_MONEY = "High price sensitivity combined with low money availability"
LOW_OWNERSHIP = "Low responsibility and ownership - prospect may not follow through"
DESIRE_NO_DECISION = "High desire but low decisiveness - may need more coaching"


def _clean_truth() -> TruthIndexResult:
    return TruthIndexResult(score=100, penalties=(), explanation="")


class TestPenaltySeverity:

    @pytest.mark.parametrize(
        "penalty,severity",
        [(15, Severity.HIGH), (20, Severity.HIGH), (10, Severity.MEDIUM), (14, Severity.MEDIUM), (5, Severity.LOW)],
    )
    def test_thresholds(self, penalty, severity):
        assert penalty_severity(penalty) is severity


class TestPushDelayRedFlagDetector:

    def test_neutral_prospect_lacks_pain_and_urgency(self, snapshot):
        indicators, pillars = snapshot()
        flags = PushDelayRedFlagDetector().detect(indicators, pillars, _clean_truth())

        assert [(f.text, f.severity) for f in flags] == [(NO_PAIN, Severity.HIGH)]

    def test_truth_penalties_and_rules_sorted_by_severity(self, snapshot):
        indicators, pillars = snapshot({3: 8, **pillar_overrides("P3", 3)})
        truth = TruthIndexEvaluator().evaluate(pillars, indicators)
        flags = PushDelayRedFlagDetector().detect(indicators, pillars, truth)

        assert [(f.text, f.severity) for f in flags] == [
            ("Truth Index: High Desire + Low Decisiveness", Severity.HIGH),
            ("Truth Index: High Desire + Low Responsibility", Severity.HIGH),
            (NO_PAIN, Severity.HIGH),
            (DESIRE_NO_DECISION, Severity.MEDIUM),
        ]

    def test_price_sensitivity_and_low_ownership(self, snapshot):
        indicators, pillars = snapshot({
            **pillar_overrides("P1", 8),
            **pillar_overrides("P4", 4),
            **pillar_overrides("P5", 3),
            **pillar_overrides("P6", 9),
        })
        flags = PushDelayRedFlagDetector().detect(indicators, pillars, _clean_truth())

        assert [f.text for f in flags] == [PRICE_VS_MONEY, LOW_OWNERSHIP]

    def test_only_first_desire_indicator_is_checked(self, snapshot):
        # indicator 3 comes first and is low, so a high indicator 4 is not considered
        indicators, pillars = snapshot({**pillar_overrides("P1", 8), 3: 2, 4: 9, **pillar_overrides("P3", 3)})
        flags = PushDelayRedFlagDetector().detect(indicators, pillars, _clean_truth())

        assert flags == []

    def test_duplicate_texts_collapse(self, snapshot):
        indicators, pillars = snapshot(pillar_overrides("P1", 8))
        truth = TruthIndexResult(
            score=80,
            penalties=(
                TruthPenalty(rule_id="T1", description="Same", penalty=10),
                TruthPenalty(rule_id="T1", description="Same", penalty=10),
                TruthPenalty(rule_id="T9", description="Ignored", penalty=15, triggered=False),
            ),
            explanation="",
        )
        flags = PushDelayRedFlagDetector().detect(indicators, pillars, truth)

        assert [(f.text, f.severity) for f in flags] == [("Truth Index: Same", Severity.MEDIUM)]

    def test_no_pillars_no_rule_flags(self):
        assert PushDelayRedFlagDetector().detect([], [], _clean_truth()) == []
