"""
Indicator Scorer
readiness_engine/scoring/indicator_scorer.py

Turns the conversation text into a 1-10 score per taxonomy indicator by
keyword-matching each scoring criterion's sample question / example answer.

Per criterion:
    keywords  = extract(example_answer) + extract(sample_question) + hints
    matches   = #{k ∈ keywords : k is a substring of the conversation}
                (a word in both question and answer counts twice)
    sub_score = Low  → 1 if matches == 1 else 2
                Mid  → 4 if matches < 2  else 5
                High → 7 if matches < 3  else 9
                ?    → 5
    (criteria with zero matches contribute nothing)

Per indicator:
    score = round_half_up(Σ sub_score / #matched)   default 5, clamped to [1, 10]

Evidence: the first sentence (split on .!?, strictly longer than 10 chars
once stripped) containing at least two of the de-duplicated criterion
keywords, cut to 150 chars.

Usage:
    scorer = IndicatorScorer()
    scores = scorer.score(provider.list_indicators(), build_conversation_text(chunks))
"""

import re
import structlog
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Optional, Sequence, Tuple

from readiness_engine.models.enumerations import ScoreBand
from readiness_engine.models.taxonomy import Indicator, ScoringCriterion
from readiness_engine.models.transcript import TranscriptChunk
from readiness_engine.scoring.utils import round_half_up

logger = structlog.get_logger(__name__)

DEFAULT_SCORE = 5
MIN_SCORE = 1
MAX_SCORE = 10

MIN_KEYWORD_LENGTH = 3
MIN_SENTENCE_LENGTH = 10          # evidence sentences must be strictly longer
MIN_EVIDENCE_OVERLAP = 2
MAX_EVIDENCE_LENGTH = 150

STOP_WORDS = frozenset({
    "a", "an", "the", "is", "are", "was", "were", "be", "been", "being",
    "have", "has", "had", "do", "does", "did", "will", "would", "should",
    "could", "may", "might", "must", "can", "to", "from", "in", "on", "at",
    "by", "for", "with", "about", "of", "as", "it", "this", "that", "these",
    "those", "i", "you", "he", "she", "we", "they", "what", "which", "who",
    "when", "where", "why", "how", "and", "or", "but", "not", "so", "if",
    "than", "just", "more", "most", "very", "really", "quite", "too", "also",
})

_PUNCTUATION = re.compile(r"[^\w\s]", flags=re.ASCII)
_SENTENCE_SPLIT = re.compile(r"[.!?]+")


@dataclass(frozen=True)
class IndicatorScore:
    """Score for one indicator, recomputed wholesale every pass."""
    id: int
    name: str
    pillar_id: str
    score: int                      # integer in [1, 10]
    evidence: Tuple[str, ...] = ()


def build_conversation_text(transcript: Iterable[TranscriptChunk]) -> str:
    """Space-join every chunk's text in order and lower-case the result."""
    return " ".join(chunk.text for chunk in transcript).lower()


def extract_keywords(text: str) -> List[str]:
    """
    Lower-case, strip punctuation, split on whitespace, drop short tokens
    and stop words. Order of first appearance is kept; duplicates dropped.
    """
    cleaned = _PUNCTUATION.sub(" ", text.lower())
    seen = {}
    for token in cleaned.split():
        if len(token) >= MIN_KEYWORD_LENGTH and token not in STOP_WORDS:
            seen.setdefault(token, None)
    return list(seen)


def criterion_keywords(criterion: ScoringCriterion) -> List[str]:
    """
    Answer keywords, then question keywords, then hints.

    Each source is de-duplicated on its own, but a word present in both the
    answer and the question appears twice and so counts as two matches.
    """
    hints = list(dict.fromkeys(h.strip().lower() for h in criterion.keywords if h.strip()))
    return (
        extract_keywords(criterion.example_answer)
        + extract_keywords(criterion.sample_question)
        + hints
    )


def evidence_keywords(criterion: ScoringCriterion) -> List[str]:
    """De-duplicated union of the criterion keywords, used for evidence overlap."""
    return list(dict.fromkeys(criterion_keywords(criterion)))


def band_sub_score(band: Optional[ScoreBand], matches: int) -> int:
    """Map a positive match count to a sub-score within the band's range."""
    if band is ScoreBand.LOW:
        return 1 if matches == 1 else 2
    if band is ScoreBand.MID:
        return 4 if matches < 2 else 5
    if band is ScoreBand.HIGH:
        return 7 if matches < 3 else 9
    return DEFAULT_SCORE


def split_sentences(text: str) -> List[str]:
    """Sentences strictly longer than MIN_SENTENCE_LENGTH once stripped."""
    return [
        s.strip()
        for s in _SENTENCE_SPLIT.split(text)
        if len(s.strip()) > MIN_SENTENCE_LENGTH
    ]


class IndicatorScorer:
    """Keyword-overlap scorer. Holds no per-conversation state."""

    def score(
        self,
        indicators: Sequence[Indicator],
        conversation_text: str,
    ) -> List[IndicatorScore]:
        """
        Args:
            indicators: Taxonomy indicators, each carrying its scoring criteria.
            conversation_text: Lower-cased, space-joined transcript text.

        Returns:
            One IndicatorScore per indicator, in taxonomy order.
        """
        text = conversation_text.lower()
        sentences = split_sentences(text)

        results = [self._score_indicator(ind, text, sentences) for ind in indicators]

        logger.info(
            "indicators_scored",
            indicators=len(results),
            evidence_snippets=sum(len(r.evidence) for r in results),
            text_length=len(text),
        )
        return results

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _score_indicator(
        self,
        indicator: Indicator,
        text: str,
        sentences: List[str],
    ) -> IndicatorScore:
        total = 0
        matched_criteria = 0
        evidence: List[str] = []

        for criterion in indicator.scoring_criteria:
            keywords = criterion_keywords(criterion)
            matches = sum(1 for kw in keywords if kw in text)
            if matches == 0:
                continue

            total += band_sub_score(criterion.band, matches)
            matched_criteria += 1

            snippet = self._find_evidence(evidence_keywords(criterion), sentences)
            if snippet and snippet not in evidence:
                evidence.append(snippet)

        if matched_criteria:
            score = round_half_up(Decimal(total) / Decimal(matched_criteria))
        else:
            score = DEFAULT_SCORE
        score = max(MIN_SCORE, min(MAX_SCORE, score))

        return IndicatorScore(
            id=indicator.id,
            name=indicator.name,
            pillar_id=indicator.pillar_id,
            score=score,
            evidence=tuple(evidence),
        )

    @staticmethod
    def _find_evidence(keywords: List[str], sentences: List[str]) -> Optional[str]:
        for sentence in sentences:
            overlap = sum(1 for kw in keywords if kw in sentence)
            if overlap >= MIN_EVIDENCE_OVERLAP:
                return sentence[:MAX_EVIDENCE_LENGTH]
        return None
