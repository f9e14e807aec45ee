"""PositionMatch - Position-Decay Relevance Scoring.

Ranks documents by how early the query terms first appear in their
fields. Each term contributes ``k / (k + position)`` (k = 5), so a term
that opens the field scores 1.0 and one at position 5 scores 0.5;
contributions are summed and multiplied by a positive boost. Every score
can be accounted for with an explanation tree.

Architecture:
┌─────────────────────────────────────────────────────────────────────────────┐
│                              SearchEngine                                   │
├─────────────────────────────────────────────────────────────────────────────┤
│                                                                             │
│   ┌─────────────────────────────────────────────────────────────────────┐   │
│   │                          Query Pipeline                             │   │
│   │  ┌────────────┐  ┌────────────┐  ┌────────────┐  ┌────────────┐    │   │
│   │  │   Parse    │→ │   Weight   │→ │  Iterate   │→ │  Collect   │    │   │
│   │  └────────────┘  └────────────┘  └────────────┘  └────────────┘    │   │
│   └─────────────────────────────────────────────────────────────────────┘   │
│                                                                             │
│   ┌─────────────────────────────────────────────────────────────────────┐   │
│   │                           Ranking                                   │   │
│   │  ┌────────────┐  ┌────────────┐  ┌────────────┐  ┌────────────┐    │   │
│   │  │   Match    │  │  Position  │  │  Position  │  │ Explanation│    │   │
│   │  │   Scorer   │  │   Scorer   │  │  Resolver  │  │    Tree    │    │   │
│   │  └────────────┘  └────────────┘  └────────────┘  └────────────┘    │   │
│   └─────────────────────────────────────────────────────────────────────┘   │
│                                                                             │
│   ┌─────────────────────────────────────────────────────────────────────┐   │
│   │                            Index                                    │   │
│   │  ┌────────────┐  ┌────────────┐  ┌────────────┐  ┌────────────┐    │   │
│   │  │  Analysis  │  │  Inverted  │  │    Term    │  │   Index    │    │   │
│   │  │            │  │   Index    │  │  Vectors   │  │   Reader   │    │   │
│   │  └────────────┘  └────────────┘  └────────────┘  └────────────┘    │   │
│   └─────────────────────────────────────────────────────────────────────┘   │
│                                                                             │
└─────────────────────────────────────────────────────────────────────────────┘

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

__version__ = "1.0.0"
__author__ = "BlackRoad OS"
__license__ = "Proprietary"

# Core engine
from positionmatch.engine import (
    SearchEngine,
    SearchConfig,
    FieldMapping,
    Document,
    SearchResult,
    SearchHit,
)

# Index components
from positionmatch.index.inverted import InvertedIndex, Posting, PostingList, Term
from positionmatch.index.term_vectors import CorruptVectorError, TermVectorStore
from positionmatch.index.reader import IndexReader

# Query components
from positionmatch.query.nodes import (
    BooleanQuery,
    MatchAllQuery,
    PositionMatchQuery,
    TermQuery,
)
from positionmatch.query.parser import ParsedQuery, QueryParser
from positionmatch.query.executor import QueryContext, QueryExecutor

# Analyzers
from positionmatch.analyzers import Analyzer, StandardAnalyzer, get_analyzer

# Ranking
from positionmatch.ranking.explanation import Explanation
from positionmatch.ranking.position import (
    HALF_SCORE_POSITION,
    NOT_FOUND_POSITION,
    PositionMatchConfig,
    PositionMatchScorer,
    PositionResolver,
    position_decay,
)
from positionmatch.ranking.weight import PositionMatchWeight, ScorerConstructionError

__all__ = [
    # Version
    "__version__",
    "__author__",
    "__license__",
    # Core
    "SearchEngine",
    "SearchConfig",
    "FieldMapping",
    "Document",
    "SearchResult",
    "SearchHit",
    # Index
    "InvertedIndex",
    "Posting",
    "PostingList",
    "Term",
    "CorruptVectorError",
    "TermVectorStore",
    "IndexReader",
    # Query
    "BooleanQuery",
    "MatchAllQuery",
    "PositionMatchQuery",
    "TermQuery",
    "ParsedQuery",
    "QueryParser",
    "QueryContext",
    "QueryExecutor",
    # Analyzers
    "Analyzer",
    "StandardAnalyzer",
    "get_analyzer",
    # Ranking
    "Explanation",
    "HALF_SCORE_POSITION",
    "NOT_FOUND_POSITION",
    "PositionMatchConfig",
    "PositionMatchScorer",
    "PositionResolver",
    "position_decay",
    "PositionMatchWeight",
    "ScorerConstructionError",
]
