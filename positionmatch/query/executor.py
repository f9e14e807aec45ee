"""PositionMatch Query Executor - Scorer-Driven Hit Collection.

Builds the weight for a query, walks the scorer's document iterator,
scores every matching document and keeps the best hits in a bounded
heap.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import heapq
import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Dict, List, Optional, Tuple, Union

from positionmatch.index.reader import IndexReader
from positionmatch.query.nodes import QueryNode
from positionmatch.query.parser import ParsedQuery
from positionmatch.ranking.explanation import Explanation
from positionmatch.ranking.position import PositionMatchConfig
from positionmatch.ranking.weight import Weight, create_weight

logger = logging.getLogger(__name__)


class ExecutionPhase(Enum):
    """Query execution phases."""

    WEIGHT = auto()  # Weight and scorer construction
    COLLECT = auto()  # Iteration and scoring
    EXPLAIN = auto()  # Explanations for returned hits


@dataclass
class QueryContext:
    """Context for query execution.

    Attributes:
        start_time: Execution start time
        timeout_ms: Query timeout in milliseconds
        offset: Pagination offset
        limit: Maximum results
        min_score: Minimum score threshold
        explain: Attach a score explanation to each hit
    """

    start_time: datetime = field(default_factory=datetime.now)
    timeout_ms: int = 30000
    offset: int = 0
    limit: int = 10
    min_score: Optional[float] = None
    explain: bool = False

    def elapsed_ms(self) -> float:
        return (datetime.now() - self.start_time).total_seconds() * 1000

    def is_timed_out(self) -> bool:
        return self.elapsed_ms() > self.timeout_ms


@dataclass
class ExecutionStats:
    """Statistics about query execution.

    Attributes:
        total_hits: Documents produced by the scorer's iterator
        collected_hits: Documents kept after the score threshold
        returned_hits: Documents on the returned page
        timed_out: Whether collection stopped on timeout
        phase_times: Time spent in each phase (ms)
    """

    total_hits: int = 0
    collected_hits: int = 0
    returned_hits: int = 0
    timed_out: bool = False
    phase_times: Dict[str, float] = field(default_factory=dict)

    def add_phase_time(self, phase: ExecutionPhase, time_ms: float) -> None:
        self.phase_times[phase.name] = time_ms


@dataclass
class ScoredDocument:
    """A document number with its score.

    Attributes:
        doc: Document number
        score: Relevance score
        explanation: Score explanation, when requested
    """

    doc: int
    score: float
    explanation: Optional[Explanation] = None

    def __lt__(self, other: "ScoredDocument") -> bool:
        # Lower scores first; on ties the later document is the weaker one.
        if self.score != other.score:
            return self.score < other.score
        return self.doc > other.doc


class DocumentCollector:
    """Keeps the top documents by score."""

    def __init__(self, context: QueryContext):
        self.context = context
        self.capacity = max(0, context.offset + context.limit)
        self._heap: List[ScoredDocument] = []
        self._total_hits = 0
        self._collected = 0

    def collect(self, doc: int, score: float) -> bool:
        """Offer a document.

        Returns:
            True if the document is currently among the top hits
        """
        self._total_hits += 1

        if self.context.min_score is not None and score < self.context.min_score:
            return False
        self._collected += 1

        if self.capacity == 0:
            return False

        candidate = ScoredDocument(doc, score)
        if len(self._heap) < self.capacity:
            heapq.heappush(self._heap, candidate)
            return True
        if self._heap[0] < candidate:
            heapq.heapreplace(self._heap, candidate)
            return True
        return False

    def get_results(self) -> List[ScoredDocument]:
        """Collected page, best first, ties by document number."""
        results = sorted(self._heap, key=lambda d: (-d.score, d.doc))
        start = self.context.offset
        return results[start:start + self.context.limit]

    @property
    def total_hits(self) -> int:
        return self._total_hits

    @property
    def collected_hits(self) -> int:
        return self._collected


class QueryExecutor:
    """Executes queries against an index reader."""

    def __init__(
        self,
        reader: IndexReader,
        config: Optional[PositionMatchConfig] = None,
    ):
        """Initialize executor.

        Args:
            reader: Read-only index view
            config: Position decay parameters for position match queries
        """
        self._reader = reader
        self.config = config or PositionMatchConfig()

    def create_weight(self, query: Union[QueryNode, ParsedQuery]) -> Weight:
        root = query.root if isinstance(query, ParsedQuery) else query
        return create_weight(root, self.config)

    def execute(
        self,
        query: Union[QueryNode, ParsedQuery],
        context: Optional[QueryContext] = None,
    ) -> Tuple[List[ScoredDocument], ExecutionStats]:
        """Execute a query.

        Returns:
            (results, stats)

        Raises:
            ScorerConstructionError: If the scorer cannot be built
        """
        context = context or QueryContext()
        stats = ExecutionStats()

        start = time.time()
        weight = self.create_weight(query)
        scorer = weight.scorer(self._reader)
        stats.add_phase_time(ExecutionPhase.WEIGHT, (time.time() - start) * 1000)

        collector = DocumentCollector(context)
        start = time.time()
        if scorer is not None:
            for doc in scorer.iterator():
                if context.is_timed_out():
                    logger.warning(f"Query timed out after {stats.total_hits} hits: {weight.query.to_string()}")
                    stats.timed_out = True
                    break
                stats.total_hits += 1
                collector.collect(doc, scorer.score())
        stats.add_phase_time(ExecutionPhase.COLLECT, (time.time() - start) * 1000)

        results = collector.get_results()
        stats.collected_hits = collector.collected_hits
        stats.returned_hits = len(results)

        if context.explain:
            start = time.time()
            for hit in results:
                hit.explanation = weight.explain(self._reader, hit.doc)
            stats.add_phase_time(ExecutionPhase.EXPLAIN, (time.time() - start) * 1000)

        logger.debug(
            f"Executed {weight.query.to_string()}: {stats.total_hits} hits, "
            f"{stats.returned_hits} returned"
        )
        return results, stats

    def explain(self, query: Union[QueryNode, ParsedQuery], doc: int) -> Explanation:
        """Explain the score of one document for a query."""
        return self.create_weight(query).explain(self._reader, doc)


__all__ = [
    "QueryExecutor",
    "QueryContext",
    "ExecutionStats",
    "ExecutionPhase",
    "ScoredDocument",
    "DocumentCollector",
]
