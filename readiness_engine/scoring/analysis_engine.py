"""
Analysis Engine (pipeline orchestrator)
readiness_engine/scoring/analysis_engine.py

Runs the scoring stages in fixed order over the full transcript-to-date:

    1. IndicatorScorer           transcript text → indicator scores
    2. PillarAggregator          indicator scores → pillar scores
    3. TruthIndexEvaluator       pillars + indicators → truth index
    4. LubometerCalculator       pillars + truth index → readiness
    5. ObjectionRanker           indicator scores → likely objections
    6. PsychologicalDialMapper   indicator scores + hot buttons → dials
    7. RedFlagDetector           indicators + pillars + truth index → flags

The engine keeps no per-conversation state; every call builds a fresh
immutable AnalysisResult. Per-session bookkeeping lives in
services.session_store.

Usage:
    engine = AnalysisEngine(JsonTaxonomyProvider())
    result = engine.analyze_incremental(chunks)
"""
import time
import structlog
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING, Callable, Optional, Sequence, Tuple

from readiness_engine.models.enumerations import PillarCode, ReadinessZone
from readiness_engine.models.transcript import TranscriptChunk
from readiness_engine.scoring.indicator_scorer import (
    IndicatorScore,
    IndicatorScorer,
    build_conversation_text,
)
from readiness_engine.scoring.lubometer_calculator import (
    CloseCheck,
    LubometerCalculator,
    LubometerResult,
    baseline_price_tiers,
)
from readiness_engine.scoring.objection_ranker import Objection, ObjectionRanker
from readiness_engine.scoring.pillar_aggregator import PillarAggregator, PillarScore
from readiness_engine.scoring.psychological_dials import PsychologicalDial, PsychologicalDialMapper
from readiness_engine.scoring.red_flags import PushDelayRedFlagDetector, RedFlag, RedFlagDetector
from readiness_engine.scoring.truth_index import TruthIndexEvaluator, TruthIndexResult
from readiness_engine.taxonomy.provider import TaxonomyProvider

if TYPE_CHECKING:
    from readiness_engine.services.session_store import ConversationSession

logger = structlog.get_logger(__name__)

MIN_TRANSCRIPT_CHUNKS = 3
BASELINE_EXPLANATION = "Analysis pending - insufficient conversation data"


def epoch_millis() -> int:
    return int(time.time() * 1000)


@dataclass(frozen=True)
class AnalysisResult:
    """Composite output of one analysis pass."""
    timestamp: int                      # epoch ms
    conversation_length: int            # number of transcript chunks
    indicators: Tuple[IndicatorScore, ...]
    pillars: Tuple[PillarScore, ...]
    lubometer: LubometerResult
    truth_index: TruthIndexResult
    objections: Tuple[Objection, ...]
    psychological_dials: Tuple[PsychologicalDial, ...]
    red_flags: Tuple[RedFlag, ...]


class AnalysisEngine:
    """Sequence the scoring stages over one transcript."""

    def __init__(
        self,
        taxonomy: TaxonomyProvider,
        red_flag_detector: Optional[RedFlagDetector] = None,
        min_transcript_chunks: int = MIN_TRANSCRIPT_CHUNKS,
        price_sensitivity_pillar_id: str = PillarCode.PRICE_SENSITIVITY.value,
        clock: Callable[[], int] = epoch_millis,
    ):
        self.taxonomy = taxonomy
        self.min_transcript_chunks = min_transcript_chunks
        self.clock = clock

        self.scorer = IndicatorScorer()
        self.aggregator = PillarAggregator(price_sensitivity_pillar_id)
        self.truth_evaluator = TruthIndexEvaluator(
            price_sensitivity_pillar_id=price_sensitivity_pillar_id
        )
        self.lubometer = LubometerCalculator(price_sensitivity_pillar_id)
        self.objection_ranker = ObjectionRanker()
        self.dial_mapper = PsychologicalDialMapper()
        self.red_flag_detector = red_flag_detector or PushDelayRedFlagDetector(
            price_sensitivity_pillar_id
        )

    def analyze(self, transcript: Sequence[TranscriptChunk]) -> AnalysisResult:
        """
        Full pipeline, regardless of transcript length.

        Raises:
            TaxonomyNotInitializedException: taxonomy could not be loaded.
        """
        indicators = self.taxonomy.list_indicators()
        pillars = self.taxonomy.list_pillars()
        hot_buttons = self.taxonomy.list_hot_buttons()

        text = build_conversation_text(transcript)

        indicator_scores = self.scorer.score(indicators, text)
        pillar_scores = self.aggregator.aggregate(pillars, indicator_scores)
        truth_index = self.truth_evaluator.evaluate(pillar_scores, indicator_scores)
        lubometer = self.lubometer.calculate(pillar_scores, truth_index)
        objections = self.objection_ranker.rank(indicator_scores)
        dials = self.dial_mapper.map(indicator_scores, hot_buttons)
        red_flags = self.red_flag_detector.detect(indicator_scores, pillar_scores, truth_index)

        result = AnalysisResult(
            timestamp=self.clock(),
            conversation_length=len(transcript),
            indicators=tuple(indicator_scores),
            pillars=tuple(pillar_scores),
            lubometer=lubometer,
            truth_index=truth_index,
            objections=tuple(objections),
            psychological_dials=tuple(dials),
            red_flags=tuple(red_flags),
        )

        logger.info(
            "analysis_completed",
            conversation_length=result.conversation_length,
            final_score=float(lubometer.final_score),
            readiness_zone=lubometer.readiness_zone.value,
            truth_index=truth_index.score,
            objections=len(result.objections),
            red_flags=len(result.red_flags),
        )
        return result

    def analyze_incremental(self, transcript: Sequence[TranscriptChunk]) -> AnalysisResult:
        """Baseline result below the minimum transcript length, full pipeline otherwise."""
        if len(transcript) < self.min_transcript_chunks:
            logger.debug(
                "analysis_baseline",
                conversation_length=len(transcript),
                min_chunks=self.min_transcript_chunks,
            )
            return self.baseline()
        return self.analyze(transcript)

    def baseline(self) -> AnalysisResult:
        return AnalysisResult(
            timestamp=self.clock(),
            conversation_length=0,
            indicators=(),
            pillars=(),
            lubometer=LubometerResult(
                raw_score=Decimal("0"),
                penalties=0,
                final_score=Decimal("0"),
                readiness_zone=ReadinessZone.NO_GO,
                price_tiers=baseline_price_tiers(),
            ),
            truth_index=TruthIndexResult(
                score=100,
                penalties=(),
                explanation=BASELINE_EXPLANATION,
            ),
            objections=(),
            psychological_dials=(),
            red_flags=(),
        )

    def check_close_blockers(self, transcript: Sequence[TranscriptChunk]) -> CloseCheck:
        """Score the transcript and apply the close-blocker rules to its pillars."""
        text = build_conversation_text(transcript)
        indicator_scores = self.scorer.score(self.taxonomy.list_indicators(), text)
        pillar_scores = self.aggregator.aggregate(self.taxonomy.list_pillars(), indicator_scores)
        return self.lubometer.check_close_blockers(pillar_scores)

    def analyze_session(self, session: "ConversationSession") -> AnalysisResult:
        """Incremental analysis of one session's transcript, recorded on that session only."""
        log = logger.bind(session_id=session.session_id)
        revision, transcript = session.snapshot()
        result = self.analyze_incremental(transcript)
        if session.record(result, revision):
            log.info("session_analyzed", conversation_length=result.conversation_length)
        else:
            log.info("session_result_superseded", revision=revision)
        return result
