from readiness_engine.taxonomy.provider import (
    DEFAULT_TAXONOMY_PATH,
    InMemoryTaxonomyProvider,
    JsonTaxonomyProvider,
    TaxonomyProvider,
    validate_taxonomy,
)

__all__ = [
    "DEFAULT_TAXONOMY_PATH",
    "InMemoryTaxonomyProvider",
    "JsonTaxonomyProvider",
    "TaxonomyProvider",
    "validate_taxonomy",
]
