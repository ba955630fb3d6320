# tests/conftest.py

"""
Pytest Fixtures - Shared taxonomy, score snapshots and API client

DEFAULT TAXONOMY REFERENCE:
- P1 Perceived Spread (w 1.5): indicators 1-4
- P2 Urgency:                  indicators 5-8
- P3 Decisiveness:             indicators 9-12
- P4 Available Money (w 1.5):  indicators 13-16
- P5 Responsibility:           indicators 17-20
- P6 Price Sensitivity:        indicators 21-23 (inverted)
- P7 Trust:                    indicators 24-27
"""

import pytest
from typing import Dict, List, Optional, Tuple
from fastapi.testclient import TestClient

from readiness_engine.core.dependencies import get_analysis_engine, get_session_store
from readiness_engine.main import app
from readiness_engine.models.enumerations import Speaker
from readiness_engine.models.taxonomy import (
    HotButtonFlag,
    Indicator,
    Pillar,
    ScoringCriterion,
    Taxonomy,
)
from readiness_engine.models.transcript import TranscriptChunk
from readiness_engine.scoring.analysis_engine import AnalysisEngine
from readiness_engine.scoring.indicator_scorer import IndicatorScore
from readiness_engine.scoring.pillar_aggregator import PillarAggregator, PillarScore
from readiness_engine.services.session_store import SessionStore
from readiness_engine.taxonomy.provider import InMemoryTaxonomyProvider, JsonTaxonomyProvider

FIXED_NOW = 1_700_000_000_000

PILLAR_MEMBERS: Dict[str, Tuple[int, ...]] = {
    "P1": (1, 2, 3, 4),
    "P2": (5, 6, 7, 8),
    "P3": (9, 10, 11, 12),
    "P4": (13, 14, 15, 16),
    "P5": (17, 18, 19, 20),
    "P6": (21, 22, 23),
    "P7": (24, 25, 26, 27),
}


def fixed_clock() -> int:
    return FIXED_NOW


# =============================================================================
# TAXONOMY FIXTURES
# =============================================================================

@pytest.fixture(scope="session")
def default_provider():
    """The bundled 7-pillar / 27-indicator taxonomy."""
    return JsonTaxonomyProvider()


@pytest.fixture(scope="session")
def default_pillars(default_provider):
    return default_provider.list_pillars()


@pytest.fixture
def pain_indicator():
    """Single indicator with one criterion per band."""
    return Indicator(
        id=1,
        name="Pain Intensity",
        pillar_id="P1",
        scoring_criteria=(
            ScoringCriterion(score_level="Low", example_answer="never thought about it"),
            ScoringCriterion(score_level="Mid (4–6)", example_answer="somewhat frustrating"),
            ScoringCriterion(
                score_level="High (7–10)",
                example_answer="painful exhausting sleepless",
            ),
        ),
    )


@pytest.fixture
def mini_taxonomy(pain_indicator):
    """Two pillars, three indicators, one hot button."""
    return Taxonomy(
        pillars=(
            Pillar(id="P1", name="Perceived Spread", weight=1.5, indicator_ids=(1,)),
            Pillar(id="P6", name="Price Sensitivity", weight=1.0, indicator_ids=(21, 22)),
        ),
        indicators=(
            pain_indicator,
            Indicator(
                id=21,
                name="Emotional Response to Spending",
                pillar_id="P6",
                scoring_criteria=(
                    ScoringCriterion(score_level="High", example_answer="anxious guilty spending"),
                ),
            ),
            Indicator(id=22, name="Negotiation Reflex", pillar_id="P6"),
        ),
        hot_buttons=(HotButtonFlag(indicator_id=21, is_hot_button=True),),
    )


@pytest.fixture
def mini_provider(mini_taxonomy):
    return InMemoryTaxonomyProvider(mini_taxonomy)


# =============================================================================
# SCORE SNAPSHOT FACTORIES
# =============================================================================

def build_indicator_scores(
    overrides: Optional[Dict[int, int]] = None,
    default: int = 5,
) -> List[IndicatorScore]:
    """All 27 default-taxonomy indicators at `default`, with overrides applied."""
    overrides = overrides or {}
    scores = []
    for pillar_id, members in PILLAR_MEMBERS.items():
        for ind_id in members:
            scores.append(
                IndicatorScore(
                    id=ind_id,
                    name=f"Indicator {ind_id}",
                    pillar_id=pillar_id,
                    score=overrides.get(ind_id, default),
                )
            )
    return scores


def pillar_overrides(pillar_id: str, score: int) -> Dict[int, int]:
    """Set every member of a pillar to the same score."""
    return {ind_id: score for ind_id in PILLAR_MEMBERS[pillar_id]}


@pytest.fixture
def snapshot(default_pillars):
    """
    Factory: snapshot({1: 8, **pillar_overrides("P2", 3)}) →
    (indicator_scores, pillar_scores) over the default taxonomy pillars.
    """
    def _build(
        overrides: Optional[Dict[int, int]] = None,
        default: int = 5,
    ) -> Tuple[List[IndicatorScore], List[PillarScore]]:
        indicators = build_indicator_scores(overrides, default)
        pillars = PillarAggregator().aggregate(default_pillars, indicators)
        return indicators, pillars

    return _build


# =============================================================================
# TRANSCRIPT FIXTURES
# =============================================================================

def make_transcript(*texts: str) -> List[TranscriptChunk]:
    return [
        TranscriptChunk(
            timestamp=FIXED_NOW + i * 1000,
            speaker=Speaker.PROSPECT if i % 2 else Speaker.CLOSER,
            text=text,
        )
        for i, text in enumerate(texts)
    ]


@pytest.fixture
def neutral_transcript():
    """Three chunks sharing no keyword with any default criterion."""
    return make_transcript("zzz qqq", "qqq zzz", "zzz zzz qqq")


# =============================================================================
# ENGINE / STORE FIXTURES
# =============================================================================

@pytest.fixture
def engine(default_provider):
    return AnalysisEngine(default_provider, clock=fixed_clock)


@pytest.fixture
def session_store():
    return SessionStore(max_sessions=5, clock=fixed_clock)


# =============================================================================
# FASTAPI TEST CLIENT FIXTURE
# =============================================================================

@pytest.fixture
def client(session_store, default_provider):
    """TestClient with a fresh session store and a fixed-clock engine."""
    app.dependency_overrides[get_session_store] = lambda: session_store
    app.dependency_overrides[get_analysis_engine] = lambda: AnalysisEngine(
        default_provider, clock=fixed_clock
    )
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
