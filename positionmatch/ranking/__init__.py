"""PositionMatch Ranking Components.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from positionmatch.ranking.explanation import Explanation
from positionmatch.ranking.scorer import (
    NO_MORE_DOCS,
    DocIdSetIterator,
    Explainable,
    ListDocIdSetIterator,
    Scorer,
)
from positionmatch.ranking.position import (
    HALF_SCORE_POSITION,
    NOT_FOUND_POSITION,
    LookupStatus,
    PositionLookup,
    PositionMatchConfig,
    PositionMatchScorer,
    PositionResolver,
    decay_formula,
    position_decay,
)
from positionmatch.ranking.weight import (
    MatchScorer,
    MatchWeight,
    PositionMatchWeight,
    ScorerConstructionError,
    Weight,
    create_weight,
)

__all__ = [
    "Explanation",
    "NO_MORE_DOCS",
    "DocIdSetIterator",
    "Explainable",
    "ListDocIdSetIterator",
    "Scorer",
    "HALF_SCORE_POSITION",
    "NOT_FOUND_POSITION",
    "LookupStatus",
    "PositionLookup",
    "PositionMatchConfig",
    "PositionMatchScorer",
    "PositionResolver",
    "decay_formula",
    "position_decay",
    "MatchScorer",
    "MatchWeight",
    "PositionMatchWeight",
    "ScorerConstructionError",
    "Weight",
    "create_weight",
]
