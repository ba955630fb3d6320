"""
Objection Ranker
readiness_engine/scoring/objection_ranker.py

Predicts the objections a prospect is most likely to raise.

Each archetype is bound to a small indicator group (missing indicators
count as a neutral 5):

    price archetype:  probability = round(mean × 10)
    all others:       probability = round((10 − mean) × 10)

Probabilities are clamped to [0, 100]; anything under 30 is dropped and
the rest are ranked descending (stable), top 5 returned.

Rebuttal scripts exist for archetypes '1' and '2' only; other ids have no
script.
"""
import structlog
from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

from readiness_engine.scoring.indicator_scorer import IndicatorScore
from readiness_engine.scoring.utils import clamp, mean, round_half_up

logger = structlog.get_logger(__name__)

NEUTRAL_SCORE = 5
MIN_PROBABILITY = 30
MAX_OBJECTIONS = 5
DEFAULT_CUSTOMER_NAME = "Customer"


@dataclass(frozen=True)
class ObjectionArchetype:
    id: str
    text: str
    indicator_ids: Tuple[int, ...]
    price_based: bool = False


OBJECTION_ARCHETYPES: Tuple[ObjectionArchetype, ...] = (
    # Commitment to Decide, Decision-Making Style
    ObjectionArchetype("1", "I need to think about it", (11, 10)),
    # Emotional Response to Spending, Negotiation Reflex, Structural Rigidity
    ObjectionArchetype("2", "It's too expensive", (21, 22, 23), price_based=True),
    # Decision-Making Authority, Commitment to Decide
    ObjectionArchetype("3", "I need to talk to my therapist first", (9, 11)),
    # Belief in Ability to Solve, Internal Trust, Risk Tolerance
    ObjectionArchetype("4", "What if it doesn't work for me?", (19, 26, 27)),
    # Time Pressure, Cost of Delay, Internal Timing Activation
    ObjectionArchetype("5", "Can I start next month instead?", (5, 6, 7)),
)


@dataclass(frozen=True)
class Objection:
    id: str
    text: str
    probability: int                      # [30, 100] once ranked
    related_indicator_ids: Tuple[int, ...]


@dataclass(frozen=True)
class ScriptStep:
    step: int
    text: str
    pause: Optional[str] = None
    note: Optional[str] = None


@dataclass(frozen=True)
class ObjectionScript:
    title: str
    dial_trigger: str
    truth_level: int
    money_style: str
    steps: Tuple[ScriptStep, ...]


@dataclass(frozen=True)
class _ScriptTemplate:
    title: str
    dial_trigger: str
    truth_level: int
    money_style: str
    steps: Tuple[ScriptStep, ...]   # "{name}" is replaced with the customer name


SCRIPT_TEMPLATES: Dict[str, _ScriptTemplate] = {
    "1": _ScriptTemplate(
        title='"I need to think about it"',
        dial_trigger="Validation Seeker + Status Conscious",
        truth_level=78,
        money_style="Investment-minded, seeks premium solutions",
        steps=(
            ScriptStep(
                step=1,
                text="{name}, I totally get that… and thank you for being honest with me.",
                pause="1s",
            ),
            ScriptStep(
                step=2,
                text=(
                    "Based on what you shared earlier, this isn't really about needing time "
                    "to think. It's about whether you truly believe this is the solution that "
                    "will finally break that cycle."
                ),
                pause="1.5s",
            ),
            ScriptStep(
                step=3,
                text=(
                    "So let me ask you this directly… if that fear of repeating the past "
                    "wasn't there, would this be the right solution for you?"
                ),
                pause="2s",
                note="Wait for response - this is the pivot moment",
            ),
        ),
    ),
    "2": _ScriptTemplate(
        title='"It\'s too expensive"',
        dial_trigger="Status Conscious + Investment-minded",
        truth_level=78,
        money_style="Has capital, questions ROI",
        steps=(
            ScriptStep(
                step=1,
                text="I appreciate you being direct about that, {name}.",
                pause="1s",
            ),
            ScriptStep(
                step=2,
                text=(
                    "And you know what? You're right — it is expensive. It's supposed to be. "
                    "Because what we're talking about isn't a cost… it's an investment in the "
                    "version of yourself who doesn't have to worry about money anymore."
                ),
                pause="1.5s",
            ),
            ScriptStep(
                step=3,
                text=(
                    'So the real question isn\'t "can I afford this?" '
                    'The real question is: "can I afford not to do this?"'
                ),
                pause="2s",
            ),
        ),
    ),
}


class ObjectionRanker:
    """Rank objection archetypes by probability."""

    def __init__(self, archetypes: Sequence[ObjectionArchetype] = OBJECTION_ARCHETYPES):
        self.archetypes = tuple(archetypes)

    def rank(self, indicator_scores: Sequence[IndicatorScore]) -> List[Objection]:
        scores = {}
        for s in indicator_scores:
            scores.setdefault(s.id, s.score)

        candidates: List[Objection] = []
        for archetype in self.archetypes:
            probability = self._probability(archetype, scores)
            if probability < MIN_PROBABILITY:
                continue
            candidates.append(
                Objection(
                    id=archetype.id,
                    text=archetype.text,
                    probability=probability,
                    related_indicator_ids=archetype.indicator_ids,
                )
            )

        ranked = sorted(candidates, key=lambda o: o.probability, reverse=True)[:MAX_OBJECTIONS]

        logger.info(
            "objections_ranked",
            objections={o.id: o.probability for o in ranked},
            dropped=len(self.archetypes) - len(candidates),
        )
        return ranked

    @staticmethod
    def _probability(archetype: ObjectionArchetype, scores: Dict[int, int]) -> int:
        avg = mean(scores.get(i, NEUTRAL_SCORE) for i in archetype.indicator_ids)
        if archetype.price_based:
            raw = avg * Decimal("10")
        else:
            raw = (Decimal("10") - avg) * Decimal("10")
        return int(clamp(Decimal(round_half_up(raw))))

    @staticmethod
    def generate_script(
        objection_id: str,
        customer_name: str = DEFAULT_CUSTOMER_NAME,
    ) -> Optional[ObjectionScript]:
        """Fill the objection's script template; None when no template exists."""
        template = SCRIPT_TEMPLATES.get(objection_id)
        if template is None:
            logger.debug("objection_script_missing", objection_id=objection_id)
            return None

        return ObjectionScript(
            title=template.title,
            dial_trigger=template.dial_trigger,
            truth_level=template.truth_level,
            money_style=template.money_style,
            steps=tuple(
                ScriptStep(
                    step=s.step,
                    text=s.text.replace("{name}", customer_name),
                    pause=s.pause,
                    note=s.note,
                )
                for s in template.steps
            ),
        )
