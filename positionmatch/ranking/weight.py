"""PositionMatch Weights - Per-Query Scorer Factories.

A weight is the query-level state needed to build scorers against an
index reader. ``MatchWeight`` decides which documents match a term or
boolean query; ``PositionMatchWeight`` wraps it and replaces the score
with the position decay score.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections import Counter
from typing import TYPE_CHECKING, List, Optional, Set

from positionmatch.index.inverted import Term
from positionmatch.query.nodes import (
    BooleanQuery,
    MatchAllQuery,
    PositionMatchQuery,
    QueryNode,
    TermQuery,
)
from positionmatch.ranking.explanation import Explanation
from positionmatch.ranking.position import PositionMatchConfig, PositionMatchScorer
from positionmatch.ranking.scorer import (
    DocIdSetIterator,
    ListDocIdSetIterator,
    Scorer,
)

if TYPE_CHECKING:
    from positionmatch.index.reader import IndexReader

logger = logging.getLogger(__name__)


class ScorerConstructionError(RuntimeError):
    """Raised when a scorer cannot be built for an index reader."""


class Weight(ABC):
    """Query state used to build scorers."""

    def __init__(self, query: QueryNode, boost: float = 1.0):
        self.query = query
        self.boost = boost

    def extract_terms(self, terms: Set[Term]) -> None:
        """Add the terms scored by this weight to ``terms``."""
        self.query.extract_terms(terms)

    @abstractmethod
    def scorer(self, reader: "IndexReader") -> Optional[Scorer]:
        """Build a scorer, or return None if no document can match."""

    @abstractmethod
    def explain(self, reader: "IndexReader", doc: int) -> Explanation:
        """Explain the score of ``doc``."""


class MatchScorer(Scorer):
    """Scores a document by how many of the query terms it contains."""

    def __init__(self, reader: "IndexReader", docs: List[int], terms: List[Term]):
        self._reader = reader
        self._iterator = ListDocIdSetIterator(docs)
        self._terms = terms

    def iterator(self) -> DocIdSetIterator:
        return self._iterator

    def max_score(self, up_to: int) -> float:
        return float(len(self._terms))

    def doc_id(self) -> int:
        return self._iterator.doc_id()

    def score(self) -> float:
        return float(self.matched_terms(self.doc_id()))

    def matched_terms(self, doc: int) -> int:
        count = 0
        for term in self._terms:
            postings = self._reader.postings(term)
            if postings is not None and doc in postings:
                count += 1
        return count


class MatchWeight(Weight):
    """Weight of a term, boolean or match-all query."""

    def scorer(self, reader: "IndexReader") -> Optional[MatchScorer]:
        docs = self._matching_docs(self.query, reader)
        if not docs:
            return None
        terms: Set[Term] = set()
        self.extract_terms(terms)
        return MatchScorer(reader, sorted(docs), sorted(terms))

    def explain(self, reader: "IndexReader", doc: int) -> Explanation:
        scorer = self.scorer(reader)
        if scorer is None or scorer.iterator().advance(doc) != doc:
            return Explanation.no_match(f"no match on required clauses of {self.query.to_string()}")
        matched = scorer.matched_terms(doc)
        return Explanation.match(
            matched,
            f"matched {matched} of {len(self.query.get_terms())} terms",
        )

    def _matching_docs(self, node: QueryNode, reader: "IndexReader") -> Set[int]:
        if isinstance(node, TermQuery):
            postings = reader.postings(node.term)
            if postings is None:
                return set()
            return {doc for doc in postings.doc_ids() if reader.is_live(doc)}
        elif isinstance(node, MatchAllQuery):
            return set(reader.live_docs())
        elif isinstance(node, PositionMatchQuery):
            return self._matching_docs(node.query, reader)
        elif isinstance(node, BooleanQuery):
            return self._matching_boolean(node, reader)

        logger.warning(f"Unknown query type: {type(node).__name__}")
        return set()

    def _matching_boolean(self, node: BooleanQuery, reader: "IndexReader") -> Set[int]:
        docs: Optional[Set[int]] = None

        for clause in node.must:
            clause_docs = self._matching_docs(clause, reader)
            docs = clause_docs if docs is None else docs & clause_docs

        if docs is None:
            if node.should:
                counts: Counter = Counter()
                for clause in node.should:
                    counts.update(self._matching_docs(clause, reader))
                required = max(1, node.minimum_should_match)
                docs = {doc for doc, n in counts.items() if n >= required}
            elif node.must_not:
                docs = set(reader.live_docs())
            else:
                docs = set()

        for clause in node.must_not:
            docs -= self._matching_docs(clause, reader)

        return docs


class PositionMatchWeight(Weight):
    """Weight of a ``PositionMatchQuery``."""

    def __init__(
        self,
        query: PositionMatchQuery,
        config: Optional[PositionMatchConfig] = None,
    ):
        super().__init__(query, boost=query.boost)
        self.config = config or PositionMatchConfig()
        self.inner = create_weight(query.query, self.config)

    def extract_terms(self, terms: Set[Term]) -> None:
        self.inner.extract_terms(terms)

    def scorer(self, reader: "IndexReader") -> PositionMatchScorer:
        """Build the position scorer for ``reader``.

        Raises:
            ScorerConstructionError: If the inner scorer cannot be built
        """
        try:
            inner = self.inner.scorer(reader)
        except Exception as e:
            raise ScorerConstructionError(
                f"Cannot build scorer for {self.query.to_string()}: {e}"
            ) from e
        return PositionMatchScorer(self, reader, inner, boost=self.boost, config=self.config)

    def explain(self, reader: "IndexReader", doc: int) -> Explanation:
        return self.scorer(reader).explain(doc)


def create_weight(
    query: QueryNode,
    config: Optional[PositionMatchConfig] = None,
) -> Weight:
    """Build the weight for a query tree."""
    if isinstance(query, PositionMatchQuery):
        return PositionMatchWeight(query, config)
    return MatchWeight(query, boost=query.boost)


__all__ = [
    "MatchScorer",
    "MatchWeight",
    "PositionMatchWeight",
    "ScorerConstructionError",
    "Weight",
    "create_weight",
]
