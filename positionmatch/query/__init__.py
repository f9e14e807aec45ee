"""PositionMatch Query Components.

The executor lives in ``positionmatch.query.executor``; it depends on the
ranking package, which itself builds on the query nodes defined here.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from positionmatch.query.nodes import (
    BooleanQuery,
    MatchAllQuery,
    PositionMatchQuery,
    QueryNode,
    QueryType,
    TermQuery,
)
from positionmatch.query.parser import BooleanOperator, ParsedQuery, QueryLexer, QueryParser

__all__ = [
    "BooleanQuery",
    "MatchAllQuery",
    "PositionMatchQuery",
    "QueryNode",
    "QueryType",
    "TermQuery",
    "BooleanOperator",
    "ParsedQuery",
    "QueryLexer",
    "QueryParser",
]
