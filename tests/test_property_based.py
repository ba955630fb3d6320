# tests/test_property_based.py
"""
Property-Based Tests - scoring invariants

Hypothesis tests covering:
  - indicator scores stay integral in [1, 10] for any text
  - price-sensitivity inversion identity
  - truth index arithmetic and rule soundness
  - lubometer clamp, zone consistency, tier range
  - objection / dial ranking shape
"""

from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st

from readiness_engine.models.enumerations import ReadinessZone
from readiness_engine.models.taxonomy import HotButtonFlag, Pillar
from readiness_engine.scoring.indicator_scorer import IndicatorScore, IndicatorScorer
from readiness_engine.scoring.lubometer_calculator import LubometerCalculator
from readiness_engine.scoring.objection_ranker import ObjectionRanker
from readiness_engine.scoring.pillar_aggregator import PillarAggregator
from readiness_engine.scoring.psychological_dials import PsychologicalDialMapper
from readiness_engine.scoring.truth_index import TRUTH_RULES, TruthContext, TruthIndexEvaluator
from readiness_engine.scoring.utils import mean, round_half_up
from readiness_engine.taxonomy.provider import JsonTaxonomyProvider

from conftest import build_indicator_scores

# ---------------------------------------------------------------------------
# Shared strategies
# ---------------------------------------------------------------------------

DEFAULT_PROVIDER = JsonTaxonomyProvider()

score_st = st.integers(min_value=1, max_value=10)


@st.composite
def score_overrides(draw):
    """Draw a score for every one of the 27 default indicators."""
    return {i: draw(score_st) for i in range(1, 28)}


def _snapshot(overrides):
    indicators = build_indicator_scores(overrides)
    pillars = PillarAggregator().aggregate(DEFAULT_PROVIDER.list_pillars(), indicators)
    return indicators, pillars


class TestIndicatorScorerProperties:

    @given(st.text(max_size=400))
    @settings(max_examples=200, deadline=None)
    def test_scores_are_integers_in_range(self, text):
        scores = IndicatorScorer().score(DEFAULT_PROVIDER.list_indicators(), text.lower())

        assert len(scores) == 27
        for s in scores:
            assert isinstance(s.score, int)
            assert 1 <= s.score <= 10
            assert all(len(e) <= 150 for e in s.evidence)


class TestPillarProperties:

    @given(st.lists(score_st, min_size=1, max_size=6))
    @settings(max_examples=500)
    def test_price_sensitivity_inversion_identity(self, raw_scores):
        pillar = Pillar(id="P6", name="Price Sensitivity", weight=1.0)
        members = [
            IndicatorScore(id=i, name="x", pillar_id="P6", score=s)
            for i, s in enumerate(raw_scores, start=21)
        ]
        [p6] = PillarAggregator().aggregate([pillar], members)

        assert p6.average_score == Decimal("11") - mean(raw_scores)
        assert p6.weighted_score == p6.average_score


class TestTruthIndexProperties:

    @given(score_overrides())
    @settings(max_examples=500)
    def test_score_is_100_minus_penalties(self, overrides):
        indicators, pillars = _snapshot(overrides)
        result = TruthIndexEvaluator().evaluate(pillars, indicators)

        assert result.score == max(0, 100 - sum(p.penalty for p in result.penalties))
        assert 0 <= result.score <= 100

    @given(score_overrides())
    @settings(max_examples=500)
    def test_listed_penalties_are_exactly_the_holding_rules(self, overrides):
        indicators, pillars = _snapshot(overrides)
        result = TruthIndexEvaluator().evaluate(pillars, indicators)
        ctx = TruthContext(pillars, indicators)

        assert [p.rule_id for p in result.penalties] == [r.id for r in TRUTH_RULES if r.predicate(ctx)]
        assert all(p.triggered for p in result.penalties)


class TestLubometerProperties:

    @given(score_overrides())
    @settings(max_examples=500)
    def test_final_score_and_zone(self, overrides):
        indicators, pillars = _snapshot(overrides)
        truth = TruthIndexEvaluator().evaluate(pillars, indicators)
        result = LubometerCalculator().calculate(pillars, truth)

        assert result.final_score == max(Decimal("0"), result.raw_score - result.penalties)
        if result.final_score >= 70:
            assert result.readiness_zone is ReadinessZone.GREEN
        elif result.final_score >= 50:
            assert result.readiness_zone is ReadinessZone.YELLOW
        elif result.final_score >= 30:
            assert result.readiness_zone is ReadinessZone.RED
        else:
            assert result.readiness_zone is ReadinessZone.NO_GO
        assert all(0 <= t.readiness <= 100 for t in result.price_tiers)

    @given(st.decimals(min_value=0, max_value=200, places=2))
    @settings(max_examples=500)
    def test_starter_never_below_other_tiers(self, final_score):
        _, pillars = _snapshot({})
        starter, professional, elite = LubometerCalculator().price_tier_readiness(final_score, pillars)

        assert starter.readiness >= professional.readiness >= elite.readiness


class TestRankingProperties:

    @given(score_overrides())
    @settings(max_examples=500)
    def test_objections_shape(self, overrides):
        ranked = ObjectionRanker().rank(build_indicator_scores(overrides))
        probabilities = [o.probability for o in ranked]

        assert len(ranked) <= 5
        assert all(30 <= p <= 100 for p in probabilities)
        assert probabilities == sorted(probabilities, reverse=True)

    @given(score_overrides(), st.sets(st.integers(min_value=1, max_value=27)))
    @settings(max_examples=500)
    def test_dials_shape(self, overrides, hot_ids):
        hot = [HotButtonFlag(indicator_id=i, is_hot_button=True) for i in hot_ids]
        dials = PsychologicalDialMapper().map(build_indicator_scores(overrides), hot)
        intensities = [d.intensity for d in dials]

        assert len(dials) <= 5
        assert all(0 <= i <= 100 for i in intensities)
        assert intensities == sorted(intensities, reverse=True)


class TestRoundingProperties:

    @given(st.integers(min_value=0, max_value=1000))
    @settings(max_examples=500)
    def test_halves_round_up(self, n):
        assert round_half_up(Decimal(n) + Decimal("0.5")) == n + 1
        assert round_half_up(Decimal(n) + Decimal("0.49")) == n
