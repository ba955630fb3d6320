#readiness_engine/models/taxonomy.py
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Dict, Tuple

from readiness_engine.models.enumerations import ScoreBand


class ScoringCriterion(BaseModel):
    """One band of an indicator's rubric with its keyword templates."""
    model_config = ConfigDict(frozen=True)

    score_level: str                      # "Low", "Mid (4–6)", ...
    domain: Optional[str] = None          # Personal Dev, B2B, Real Estate
    sample_question: str = ""
    example_answer: str = ""
    keywords: Tuple[str, ...] = ()        # extra match hints

    @property
    def band(self) -> Optional[ScoreBand]:
        return ScoreBand.parse(self.score_level)


class Indicator(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    pillar_id: str
    scoring_criteria: Tuple[ScoringCriterion, ...] = ()


class Pillar(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    weight: float = Field(default=1.0, ge=0)
    indicator_ids: Tuple[int, ...] = ()


class ObjectionMapping(BaseModel):
    """Objection matrix row keyed by indicator id."""
    model_config = ConfigDict(frozen=True)

    id: str
    indicator_id: int
    pillar: str = ""
    indicator: str = ""
    example_objection: str = ""
    prompts: Dict[str, str] = Field(default_factory=dict)


class HotButtonFlag(BaseModel):
    model_config = ConfigDict(frozen=True)

    indicator_id: int
    is_hot_button: bool = False
    pillar: str = ""
    indicator: str = ""
    smart_closing_prompt: str = ""
    example_language: str = ""


class Taxonomy(BaseModel):
    """The full taxonomy document as loaded from its source."""
    model_config = ConfigDict(frozen=True)

    pillars: Tuple[Pillar, ...]
    indicators: Tuple[Indicator, ...]
    objection_mappings: Tuple[ObjectionMapping, ...] = ()
    hot_buttons: Tuple[HotButtonFlag, ...] = ()
