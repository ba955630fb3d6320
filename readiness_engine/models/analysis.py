#readiness_engine/models/analysis.py
"""
Request / response schemas for the analysis API.

Decimals from the scoring stages are exposed as floats.
"""
from pydantic import BaseModel, Field
from typing import List, Optional

from readiness_engine.models.enumerations import ReadinessZone, Severity
from readiness_engine.models.transcript import TranscriptChunk
from readiness_engine.scoring.analysis_engine import AnalysisResult
from readiness_engine.scoring.indicator_scorer import IndicatorScore
from readiness_engine.scoring.lubometer_calculator import CloseCheck
from readiness_engine.scoring.objection_ranker import ObjectionScript
from readiness_engine.scoring.pillar_aggregator import PillarScore


# =====================================================================
# Requests
# =====================================================================

class TranscriptRequest(BaseModel):
    transcript: List[TranscriptChunk] = Field(default_factory=list)


class AppendTranscriptRequest(BaseModel):
    chunks: List[TranscriptChunk] = Field(min_length=1)


# =====================================================================
# Responses
# =====================================================================

class IndicatorScoreResponse(BaseModel):
    id: int
    name: str
    pillar_id: str
    score: int
    evidence: List[str] = []

    @classmethod
    def from_score(cls, s: IndicatorScore) -> "IndicatorScoreResponse":
        return cls(
            id=s.id,
            name=s.name,
            pillar_id=s.pillar_id,
            score=s.score,
            evidence=list(s.evidence),
        )


class PillarScoreResponse(BaseModel):
    id: str
    name: str
    average_score: float
    weighted_score: float
    weight: float
    indicators: List[IndicatorScoreResponse]

    @classmethod
    def from_score(cls, p: PillarScore) -> "PillarScoreResponse":
        return cls(
            id=p.id,
            name=p.name,
            average_score=float(p.average_score),
            weighted_score=float(p.weighted_score),
            weight=float(p.weight),
            indicators=[IndicatorScoreResponse.from_score(s) for s in p.indicators],
        )


class PriceTierResponse(BaseModel):
    price: int
    readiness: int
    label: str


class LubometerResponse(BaseModel):
    raw_score: float
    penalties: int
    final_score: float
    readiness_zone: ReadinessZone
    price_tiers: List[PriceTierResponse]


class TruthPenaltyResponse(BaseModel):
    rule_id: str
    description: str
    penalty: int
    triggered: bool


class TruthIndexResponse(BaseModel):
    score: int
    penalties: List[TruthPenaltyResponse]
    explanation: str


class ObjectionResponse(BaseModel):
    id: str
    text: str
    probability: int
    related_indicator_ids: List[int]


class PsychologicalDialResponse(BaseModel):
    name: str
    intensity: int
    color: str


class RedFlagResponse(BaseModel):
    text: str
    severity: Severity


class AnalysisResponse(BaseModel):
    timestamp: int
    conversation_length: int
    indicators: List[IndicatorScoreResponse]
    pillars: List[PillarScoreResponse]
    lubometer: LubometerResponse
    truth_index: TruthIndexResponse
    objections: List[ObjectionResponse]
    psychological_dials: List[PsychologicalDialResponse]
    red_flags: List[RedFlagResponse]

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AnalysisResponse":
        lub = result.lubometer
        truth = result.truth_index
        return cls(
            timestamp=result.timestamp,
            conversation_length=result.conversation_length,
            indicators=[IndicatorScoreResponse.from_score(s) for s in result.indicators],
            pillars=[PillarScoreResponse.from_score(p) for p in result.pillars],
            lubometer=LubometerResponse(
                raw_score=float(lub.raw_score),
                penalties=lub.penalties,
                final_score=float(lub.final_score),
                readiness_zone=lub.readiness_zone,
                price_tiers=[
                    PriceTierResponse(price=t.price, readiness=t.readiness, label=t.label)
                    for t in lub.price_tiers
                ],
            ),
            truth_index=TruthIndexResponse(
                score=truth.score,
                penalties=[
                    TruthPenaltyResponse(
                        rule_id=p.rule_id,
                        description=p.description,
                        penalty=p.penalty,
                        triggered=p.triggered,
                    )
                    for p in truth.penalties
                ],
                explanation=truth.explanation,
            ),
            objections=[
                ObjectionResponse(
                    id=o.id,
                    text=o.text,
                    probability=o.probability,
                    related_indicator_ids=list(o.related_indicator_ids),
                )
                for o in result.objections
            ],
            psychological_dials=[
                PsychologicalDialResponse(name=d.name, intensity=d.intensity, color=d.color)
                for d in result.psychological_dials
            ],
            red_flags=[
                RedFlagResponse(text=f.text, severity=f.severity) for f in result.red_flags
            ],
        )


class CloseCheckResponse(BaseModel):
    can_close: bool
    reason: Optional[str] = None

    @classmethod
    def from_check(cls, check: CloseCheck) -> "CloseCheckResponse":
        return cls(can_close=check.can_close, reason=check.reason)


class ScriptStepResponse(BaseModel):
    step: int
    text: str
    pause: Optional[str] = None
    note: Optional[str] = None


class ObjectionScriptResponse(BaseModel):
    objection_id: str
    title: str
    dial_trigger: str
    truth_level: int
    money_style: str
    steps: List[ScriptStepResponse]

    @classmethod
    def from_script(cls, objection_id: str, script: ObjectionScript) -> "ObjectionScriptResponse":
        return cls(
            objection_id=objection_id,
            title=script.title,
            dial_trigger=script.dial_trigger,
            truth_level=script.truth_level,
            money_style=script.money_style,
            steps=[
                ScriptStepResponse(step=s.step, text=s.text, pause=s.pause, note=s.note)
                for s in script.steps
            ],
        )


class SessionCreatedResponse(BaseModel):
    session_id: str
    created_at: int


class TranscriptAppendedResponse(BaseModel):
    session_id: str
    conversation_length: int
