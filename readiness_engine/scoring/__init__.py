"""
scoring/ - Readiness Scoring Pipeline

Modules:
    utils.py                  - Decimal utilities
    indicator_scorer.py       - Keyword-overlap Indicator Scorer
    pillar_aggregator.py      - Pillar Aggregator (price-sensitivity inversion)
    truth_index.py            - Truth Index rule table
    lubometer_calculator.py   - Lubometer readiness, zones, price tiers, close blockers
    objection_ranker.py       - Objection Ranker + rebuttal scripts
    psychological_dials.py    - Psychological Dial Mapper
    red_flags.py              - Default Red Flag Detector
    analysis_engine.py        - Pipeline orchestrator
"""
