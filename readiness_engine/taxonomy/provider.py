"""
Taxonomy Provider
readiness_engine/taxonomy/provider.py

Supplies pillars, indicators (with their scoring criteria), objection
mappings and hot-button flags to the scoring pipeline.

A provider loads once and is immutable afterwards; list order is stable
for the life of the process. Loading is the only I/O in the pipeline.

Usage:
    provider = JsonTaxonomyProvider()          # bundled default taxonomy
    pillars = provider.list_pillars()           # triggers the one-time load
"""

import json
import threading
from pathlib import Path
from typing import Optional, Protocol, Tuple, Union

import structlog
from pydantic import ValidationError

from readiness_engine.core.exceptions import (
    TaxonomyNotInitializedException,
    TaxonomyValidationException,
)
from readiness_engine.models.taxonomy import (
    HotButtonFlag,
    Indicator,
    ObjectionMapping,
    Pillar,
    Taxonomy,
)

logger = structlog.get_logger(__name__)

DEFAULT_TAXONOMY_PATH = Path(__file__).resolve().parent / "data" / "default_taxonomy.json"


class TaxonomyProvider(Protocol):
    def list_pillars(self) -> Tuple[Pillar, ...]: ...

    def list_indicators(self) -> Tuple[Indicator, ...]: ...

    def list_objection_mappings(self) -> Tuple[ObjectionMapping, ...]: ...

    def list_hot_buttons(self) -> Tuple[HotButtonFlag, ...]: ...


def validate_taxonomy(taxonomy: Taxonomy) -> Taxonomy:
    """
    Check the id/ownership invariants.

    - indicator ids are globally unique
    - every indicator names an existing pillar
    - a pillar's indicator_ids agree with the indicators' pillar_id,
      and no indicator is listed by two pillars
    """
    pillar_ids = [p.id for p in taxonomy.pillars]
    if len(set(pillar_ids)) != len(pillar_ids):
        raise TaxonomyValidationException("Duplicate pillar ids in taxonomy")

    owners = {}
    for ind in taxonomy.indicators:
        if ind.id in owners:
            raise TaxonomyValidationException(f"Duplicate indicator id {ind.id}")
        if ind.pillar_id not in pillar_ids:
            raise TaxonomyValidationException(
                f"Indicator {ind.id} belongs to unknown pillar '{ind.pillar_id}'"
            )
        owners[ind.id] = ind.pillar_id

    listed_by = {}
    for pillar in taxonomy.pillars:
        for ind_id in pillar.indicator_ids:
            if ind_id not in owners:
                raise TaxonomyValidationException(
                    f"Pillar {pillar.id} lists unknown indicator {ind_id}"
                )
            if ind_id in listed_by:
                raise TaxonomyValidationException(
                    f"Indicator {ind_id} is listed by pillars {listed_by[ind_id]} and {pillar.id}"
                )
            if owners[ind_id] != pillar.id:
                raise TaxonomyValidationException(
                    f"Pillar {pillar.id} lists indicator {ind_id} owned by {owners[ind_id]}"
                )
            listed_by[ind_id] = pillar.id

    return taxonomy


class InMemoryTaxonomyProvider:
    """Provider over an already-built Taxonomy."""

    def __init__(self, taxonomy: Taxonomy):
        self._taxonomy = validate_taxonomy(taxonomy)

    def list_pillars(self) -> Tuple[Pillar, ...]:
        return self._taxonomy.pillars

    def list_indicators(self) -> Tuple[Indicator, ...]:
        return self._taxonomy.indicators

    def list_objection_mappings(self) -> Tuple[ObjectionMapping, ...]:
        return self._taxonomy.objection_mappings

    def list_hot_buttons(self) -> Tuple[HotButtonFlag, ...]:
        return self._taxonomy.hot_buttons


class JsonTaxonomyProvider:
    """
    Lazily loads a JSON taxonomy document on first use.

    The load happens exactly once per instance (guarded by a lock). A failed
    load raises TaxonomyNotInitializedException and is not cached.
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = Path(path) if path else DEFAULT_TAXONOMY_PATH
        self._taxonomy: Optional[Taxonomy] = None
        self._lock = threading.Lock()

    @property
    def is_loaded(self) -> bool:
        return self._taxonomy is not None

    def load(self) -> Taxonomy:
        if self._taxonomy is not None:
            return self._taxonomy

        with self._lock:
            if self._taxonomy is None:
                self._taxonomy = self._read()
        return self._taxonomy

    def list_pillars(self) -> Tuple[Pillar, ...]:
        return self.load().pillars

    def list_indicators(self) -> Tuple[Indicator, ...]:
        return self.load().indicators

    def list_objection_mappings(self) -> Tuple[ObjectionMapping, ...]:
        return self.load().objection_mappings

    def list_hot_buttons(self) -> Tuple[HotButtonFlag, ...]:
        return self.load().hot_buttons

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _read(self) -> Taxonomy:
        source = str(self.path)
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            logger.error("taxonomy_load_failed", path=source, reason="file not found")
            raise TaxonomyNotInitializedException(source, "file not found")
        except (OSError, json.JSONDecodeError) as e:
            logger.error("taxonomy_load_failed", path=source, reason=str(e))
            raise TaxonomyNotInitializedException(source, str(e)) from e

        try:
            taxonomy = Taxonomy.model_validate(raw)
        except ValidationError as e:
            logger.error("taxonomy_load_failed", path=source, errors=e.error_count())
            raise TaxonomyNotInitializedException(source, f"invalid document ({e.error_count()} errors)") from e

        if not taxonomy.pillars or not taxonomy.indicators:
            logger.error("taxonomy_load_failed", path=source, reason="empty taxonomy")
            raise TaxonomyNotInitializedException(source, "taxonomy has no pillars or indicators")

        validate_taxonomy(taxonomy)

        logger.info(
            "taxonomy_loaded",
            path=source,
            pillars=len(taxonomy.pillars),
            indicators=len(taxonomy.indicators),
            objection_mappings=len(taxonomy.objection_mappings),
            hot_buttons=sum(1 for hb in taxonomy.hot_buttons if hb.is_hot_button),
        )
        return taxonomy
