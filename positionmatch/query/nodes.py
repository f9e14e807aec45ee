"""PositionMatch Query Nodes - Structured Query Trees.

Every node can report the distinct set of terms it scores through
``extract_terms``; prohibited clauses contribute no terms.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Set

from positionmatch.index.inverted import Term


class QueryType(Enum):
    """Query type classification."""

    TERM = auto()
    BOOLEAN = auto()
    MATCH_ALL = auto()
    POSITION_MATCH = auto()


@dataclass
class QueryNode(ABC):
    """Abstract base class for query nodes."""

    query_type: QueryType = field(init=False)
    boost: float = 1.0

    @abstractmethod
    def to_string(self) -> str:
        """Convert to query string representation."""

    @abstractmethod
    def extract_terms(self, terms: Set[Term]) -> None:
        """Add the terms this query scores to ``terms``."""

    def get_terms(self) -> Set[Term]:
        terms: Set[Term] = set()
        self.extract_terms(terms)
        return terms

    def to_dict(self) -> Dict[str, Any]:
        return {"type": self.query_type.name, "boost": self.boost}

    def _boost_suffix(self) -> str:
        return f"^{self.boost:g}" if self.boost != 1.0 else ""


@dataclass
class TermQuery(QueryNode):
    """Matches documents containing one term in one field."""

    field: str = "_all"
    text: str = ""

    def __post_init__(self):
        self.query_type = QueryType.TERM

    @property
    def term(self) -> Term:
        return Term(self.field, self.text)

    def to_string(self) -> str:
        return f"{self.field}:{self.text}{self._boost_suffix()}"

    def extract_terms(self, terms: Set[Term]) -> None:
        terms.add(self.term)

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "field": self.field, "text": self.text}


@dataclass
class BooleanQuery(QueryNode):
    """Combines clauses.

    With any ``must`` clause a document has to match all of them and the
    ``should`` clauses are optional; without one, a document has to match
    at least ``minimum_should_match`` of the ``should`` clauses. Documents
    matching a ``must_not`` clause never match.
    """

    must: List[QueryNode] = field(default_factory=list)
    should: List[QueryNode] = field(default_factory=list)
    must_not: List[QueryNode] = field(default_factory=list)
    minimum_should_match: int = 1

    def __post_init__(self):
        self.query_type = QueryType.BOOLEAN

    def add_must(self, query: QueryNode) -> "BooleanQuery":
        self.must.append(query)
        return self

    def add_should(self, query: QueryNode) -> "BooleanQuery":
        self.should.append(query)
        return self

    def add_must_not(self, query: QueryNode) -> "BooleanQuery":
        self.must_not.append(query)
        return self

    @property
    def clause_count(self) -> int:
        return len(self.must) + len(self.should) + len(self.must_not)

    def to_string(self) -> str:
        parts = [f"+{q.to_string()}" for q in self.must]
        parts += [q.to_string() for q in self.should]
        parts += [f"-{q.to_string()}" for q in self.must_not]
        return f"({' '.join(parts)}){self._boost_suffix()}"

    def extract_terms(self, terms: Set[Term]) -> None:
        for clause in self.must + self.should:
            clause.extract_terms(terms)

    def to_dict(self) -> Dict[str, Any]:
        return {
            **super().to_dict(),
            "must": [q.to_dict() for q in self.must],
            "should": [q.to_dict() for q in self.should],
            "must_not": [q.to_dict() for q in self.must_not],
            "minimum_should_match": self.minimum_should_match,
        }


@dataclass
class MatchAllQuery(QueryNode):
    """Matches every live document; scores no terms."""

    def __post_init__(self):
        self.query_type = QueryType.MATCH_ALL

    def to_string(self) -> str:
        return "*:*"

    def extract_terms(self, terms: Set[Term]) -> None:
        pass


@dataclass
class PositionMatchQuery(QueryNode):
    """Rescores the documents matched by ``query`` by term position.

    ``query`` decides which documents match; each match is scored by the
    first positions of the terms ``query`` extracts, times ``boost``.
    """

    query: QueryNode = field(default_factory=MatchAllQuery)

    def __post_init__(self):
        self.query_type = QueryType.POSITION_MATCH

    def to_string(self) -> str:
        return f"position_match({self.query.to_string()}){self._boost_suffix()}"

    def extract_terms(self, terms: Set[Term]) -> None:
        self.query.extract_terms(terms)

    def to_dict(self) -> Dict[str, Any]:
        return {**super().to_dict(), "query": self.query.to_dict()}


__all__ = [
    "QueryType",
    "QueryNode",
    "TermQuery",
    "BooleanQuery",
    "MatchAllQuery",
    "PositionMatchQuery",
]
