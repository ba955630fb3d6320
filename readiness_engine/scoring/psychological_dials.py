"""
Psychological Dial Mapper
readiness_engine/scoring/psychological_dials.py

Maps six behavioural archetypes onto three indicators each.

Formula:
    intensity = round_half_up(mean(related scores) / 10 × 100)   missing → 5
    intensity = min(100, intensity + 10)    if any related indicator is a hot button

Clamped to [0, 100], ranked descending (stable), top 5 returned.
"""
import structlog
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, Iterable, List, Sequence, Set, Tuple

from readiness_engine.models.taxonomy import HotButtonFlag
from readiness_engine.scoring.indicator_scorer import IndicatorScore
from readiness_engine.scoring.utils import mean, round_half_up

logger = structlog.get_logger(__name__)

NEUTRAL_SCORE = 5
HOT_BUTTON_BOOST = 10
MAX_DIALS = 5


@dataclass(frozen=True)
class DialArchetype:
    name: str
    indicator_ids: Tuple[int, int, int]
    color: str


DIAL_ARCHETYPES: Tuple[DialArchetype, ...] = (
    DialArchetype("Validation Seeker", (11, 12, 26), "from-fuchsia-500 to-pink-500"),
    DialArchetype("Status Conscious", (15, 21, 24), "from-cyan-500 to-blue-500"),
    DialArchetype("Fear of Missing Out", (5, 6, 7), "from-rose-500 to-pink-500"),
    DialArchetype("Control Oriented", (10, 23, 27), "from-blue-500 to-indigo-500"),
    DialArchetype("Analytical Thinker", (10, 19, 27), "from-emerald-500 to-teal-500"),
    DialArchetype("Procrastination Pattern", (5, 7, 11), "from-orange-500 to-red-500"),
)


@dataclass(frozen=True)
class PsychologicalDial:
    name: str
    intensity: int      # [0, 100]
    color: str


def hot_button_ids(hot_buttons: Iterable[HotButtonFlag]) -> Set[int]:
    return {hb.indicator_id for hb in hot_buttons if hb.is_hot_button}


class PsychologicalDialMapper:
    """Score behavioural archetypes from indicator scores."""

    def __init__(self, archetypes: Sequence[DialArchetype] = DIAL_ARCHETYPES):
        self.archetypes = tuple(archetypes)

    def map(
        self,
        indicator_scores: Sequence[IndicatorScore],
        hot_buttons: Iterable[HotButtonFlag] = (),
    ) -> List[PsychologicalDial]:
        """
        Args:
            indicator_scores: Output of IndicatorScorer.score().
            hot_buttons: Taxonomy hot-button flags; only is_hot_button entries boost.

        Returns:
            Up to five dials, highest intensity first.
        """
        scores: Dict[int, int] = {}
        for s in indicator_scores:
            scores.setdefault(s.id, s.score)
        hot = hot_button_ids(hot_buttons)

        dials = []
        for archetype in self.archetypes:
            avg = mean(scores.get(i, NEUTRAL_SCORE) for i in archetype.indicator_ids)
            intensity = round_half_up(avg / Decimal("10") * Decimal("100"))
            if hot.intersection(archetype.indicator_ids):
                intensity = min(100, intensity + HOT_BUTTON_BOOST)
            dials.append(
                PsychologicalDial(
                    name=archetype.name,
                    intensity=max(0, min(100, intensity)),
                    color=archetype.color,
                )
            )

        ranked = sorted(dials, key=lambda d: d.intensity, reverse=True)[:MAX_DIALS]

        logger.info(
            "psychological_dials_mapped",
            dials={d.name: d.intensity for d in ranked},
            hot_buttons=len(hot),
        )
        return ranked
