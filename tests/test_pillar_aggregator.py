# tests/test_pillar_aggregator.py
"""
Pillar Aggregator - grouping, inversion, weighting, absence handling.
"""

from decimal import Decimal

from readiness_engine.models.taxonomy import Pillar
from readiness_engine.scoring.indicator_scorer import IndicatorScore
from readiness_engine.scoring.pillar_aggregator import (
    PillarAggregator,
    find_pillar,
    raw_price_sensitivity,
)

from conftest import build_indicator_scores, pillar_overrides


def _score(ind_id: int, pillar_id: str, score: int) -> IndicatorScore:
    return IndicatorScore(id=ind_id, name=f"Indicator {ind_id}", pillar_id=pillar_id, score=score)


PILLARS = [
    Pillar(id="P1", name="Perceived Spread", weight=1.5, indicator_ids=(1, 2)),
    Pillar(id="P2", name="Urgency", weight=1.0, indicator_ids=(5,)),
    Pillar(id="P6", name="Price Sensitivity", weight=1.0, indicator_ids=(21, 22)),
]


class TestPillarAggregator:

    def test_weighted_average(self):
        result = PillarAggregator().aggregate(PILLARS, [_score(1, "P1", 8), _score(2, "P1", 6)])

        [p1] = result
        assert p1.id == "P1"
        assert p1.average_score == Decimal("7")
        assert p1.weighted_score == Decimal("10.5")
        assert p1.weight == Decimal("1.5")
        assert [s.id for s in p1.indicators] == [1, 2]

    def test_price_sensitivity_is_inverted(self):
        result = PillarAggregator().aggregate(PILLARS, [_score(21, "P6", 7), _score(22, "P6", 8)])

        [p6] = result
        assert p6.average_score == Decimal("3.5")
        assert p6.weighted_score == Decimal("3.5")

    def test_pillars_without_members_are_skipped(self):
        result = PillarAggregator().aggregate(PILLARS, [_score(5, "P2", 4)])
        assert [p.id for p in result] == ["P2"]

    def test_membership_is_by_pillar_id(self):
        # indicator 9 is not listed by P2 but claims it
        result = PillarAggregator().aggregate(PILLARS, [_score(5, "P2", 4), _score(9, "P2", 8)])
        assert result[0].average_score == Decimal("6")

    def test_configurable_inverted_pillar(self):
        aggregator = PillarAggregator(price_sensitivity_pillar_id="P2")
        [p2] = aggregator.aggregate(PILLARS, [_score(5, "P2", 4)])
        assert p2.average_score == Decimal("7")

    def test_raw_score_over_default_taxonomy(self, default_pillars):
        pillars = PillarAggregator().aggregate(default_pillars, build_indicator_scores())

        # 7.5 + 5 + 5 + 7.5 + 5 + 6 (inverted) + 5
        assert PillarAggregator.get_raw_score(pillars) == Decimal("41")
        assert len(pillars) == 7

    def test_raw_score_of_nothing_is_zero(self):
        assert PillarAggregator.get_raw_score([]) == Decimal("0")

    def test_get_pillar_score(self, default_pillars):
        pillars = PillarAggregator().aggregate(default_pillars, build_indicator_scores(pillar_overrides("P4", 8)))
        assert PillarAggregator.get_pillar_score(pillars, "P4").average_score == Decimal("8")
        assert PillarAggregator.get_pillar_score(pillars, "P9") is None


class TestRawPriceSensitivity:

    def test_undoes_inversion(self, default_pillars):
        pillars = PillarAggregator().aggregate(default_pillars, build_indicator_scores(pillar_overrides("P6", 9)))
        assert find_pillar(pillars, "P6").average_score == Decimal("2")
        assert raw_price_sensitivity(pillars) == Decimal("9")

    def test_absent_pillar_is_neutral(self):
        assert raw_price_sensitivity([]) == Decimal("5")
