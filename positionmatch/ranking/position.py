"""PositionMatch Position Scorer - First-Occurrence Position Decay.

Scores a document by where each query term first appears in its field:

    score(term) = k / (k + position)        k = HALF_SCORE_POSITION

A term at position 0 scores 1.0, a term at position k scores 0.5, and a
term that does not occur (or whose position cannot be read) scores 0.0.
Per-term scores are summed and, when the boost is positive, multiplied
by the boost.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Set

from positionmatch.index.inverted import Term
from positionmatch.ranking.explanation import Explanation
from positionmatch.ranking.scorer import DocIdSetIterator, Explainable, Scorer

if TYPE_CHECKING:
    from positionmatch.index.reader import IndexReader

logger = logging.getLogger(__name__)

NOT_FOUND_POSITION = -1
HALF_SCORE_POSITION = 5  # position where the score drops to 0.5


@dataclass
class PositionMatchConfig:
    """Position decay parameters."""
    half_score_position: int = HALF_SCORE_POSITION

    def __post_init__(self):
        if self.half_score_position <= 0:
            raise ValueError(
                f"half_score_position must be positive, got {self.half_score_position}"
            )


class LookupStatus(Enum):
    FOUND = auto()
    NOT_FOUND = auto()
    UNSUPPORTED = auto()


@dataclass(frozen=True)
class PositionLookup:
    """Outcome of resolving a term's first position in a document.

    Attributes:
        status: FOUND, NOT_FOUND (no vector or term absent) or UNSUPPORTED
            (positions not indexed, or the vector could not be read)
        found_position: First position when FOUND
        reason: Why the position is unavailable when UNSUPPORTED
    """

    status: LookupStatus
    found_position: int = NOT_FOUND_POSITION
    reason: Optional[str] = None

    @classmethod
    def found(cls, position: int) -> "PositionLookup":
        return cls(LookupStatus.FOUND, position)

    @classmethod
    def not_found(cls) -> "PositionLookup":
        return cls(LookupStatus.NOT_FOUND)

    @classmethod
    def unsupported(cls, reason: str) -> "PositionLookup":
        return cls(LookupStatus.UNSUPPORTED, reason=reason)

    @property
    def is_found(self) -> bool:
        return self.status is LookupStatus.FOUND

    @property
    def position(self) -> int:
        """The found position, or NOT_FOUND_POSITION."""
        return self.found_position if self.is_found else NOT_FOUND_POSITION


def position_decay(position: int, half_score_position: int = HALF_SCORE_POSITION) -> float:
    """Map a first-occurrence position to a score in (0, 1].

    Any negative position, NOT_FOUND_POSITION included, scores 0.0.
    """
    if position < 0:
        return 0.0
    return half_score_position / (half_score_position + position)


def decay_formula(position: int, half_score_position: int = HALF_SCORE_POSITION) -> str:
    """Render the decay fraction with its numbers, e.g. ``"5/(5+2)"``."""
    return f"{half_score_position}/({half_score_position}+{position})"


class PositionResolver:
    """Finds the first position of a term in one field of a document.

    Never raises: a missing vector, a missing term, a field indexed
    without positions and a failure while reading the vector all resolve
    to NOT_FOUND_POSITION. Only the log output tells them apart.
    """

    def __init__(self, reader: "IndexReader", log: Optional[logging.Logger] = None):
        """Initialize resolver.

        Args:
            reader: Source of per-document field vectors
            log: Diagnostic sink, defaults to this module's logger
        """
        self._reader = reader
        self._log = log or logger

    def lookup(self, doc: int, term: Term) -> PositionLookup:
        """Resolve ``term`` in ``doc`` to a tri-state lookup result."""
        try:
            vector = self._reader.get_field_vector(doc, term.field)
            if vector is None:
                return PositionLookup.not_found()

            entry = vector.seek(term.text)
            if entry is None:
                return PositionLookup.not_found()

            if not entry.has_positions:
                self._log.debug(
                    f"Positions not indexed, returning position = {NOT_FOUND_POSITION} "
                    f"for field = {term.field}"
                )
                return PositionLookup.unsupported("positions not indexed")

            position = entry.first_position()
            if position is None:
                return PositionLookup.not_found()

            return PositionLookup.found(position)
        except Exception as e:
            self._log.error(
                f"Unexpected error reading term vector, returning position = "
                f"{NOT_FOUND_POSITION} for field = {term.field}: {e}"
            )
            return PositionLookup.unsupported(str(e))

    def resolve(self, doc: int, term: Term) -> int:
        """First position of ``term`` in ``doc``, or NOT_FOUND_POSITION."""
        return self.lookup(doc, term).position


class PositionMatchScorer(Scorer, Explainable):
    """Scores documents by the first positions of the query terms.

    Document iteration and max-score estimates come from the inner
    scorer of the wrapped query; this scorer only replaces the score.
    """

    def __init__(
        self,
        weight: Any,
        reader: "IndexReader",
        inner: Optional[Scorer],
        boost: float = 1.0,
        config: Optional[PositionMatchConfig] = None,
        resolver: Optional[PositionResolver] = None,
    ):
        """Initialize scorer.

        Args:
            weight: Supplies the term set through ``extract_terms(set)``
            reader: Index reader for the document being scored
            inner: Scorer of the wrapped query, or None if it matches nothing
            boost: Multiplier applied to the summed score when positive
            config: Decay parameters
            resolver: Position resolver, built from ``reader`` if omitted
        """
        self.weight = weight
        self.boost = boost
        self.config = config or PositionMatchConfig()
        self._inner = inner
        self._resolver = resolver or PositionResolver(reader)

    def iterator(self) -> DocIdSetIterator:
        if self._inner is not None:
            return self._inner.iterator()
        return DocIdSetIterator.empty()

    def max_score(self, up_to: int) -> float:
        if self._inner is not None:
            return self._inner.max_score(up_to)
        return 0.0

    def doc_id(self) -> int:
        if self._inner is not None:
            return self._inner.doc_id()
        return NOT_FOUND_POSITION

    def terms(self) -> List[Term]:
        """The weight's term set in (field, text) order."""
        terms: Set[Term] = set()
        self.weight.extract_terms(terms)
        return sorted(terms)

    def score(self) -> float:
        return self.score_document(self.doc_id())

    def score_document(self, doc: int, terms: Optional[Iterable[Term]] = None) -> float:
        """Summed, boosted position score of ``doc``."""
        total = 0.0
        for term in self.terms() if terms is None else terms:
            total += self.score_term(doc, term)

        if self.boost > 0:
            total *= self.boost
        return total

    def score_term(self, doc: int, term: Term) -> float:
        position = self._resolver.resolve(doc, term)
        return position_decay(position, self.config.half_score_position)

    def explain(self, doc: int, terms: Optional[Iterable[Term]] = None) -> Explanation:
        """Per-term breakdown of the score of ``doc``.

        The total is the plain sum of the term scores; the boost is
        reported in each term's description but not applied.
        """
        details = [
            self.explain_term(doc, term)
            for term in (self.terms() if terms is None else terms)
        ]
        total = 0.0
        for detail in details:
            total += detail.value

        return Explanation.match(total, f"score(doc={doc}), sum of:", details)

    def explain_term(self, doc: int, term: Term) -> Explanation:
        position = self._resolver.resolve(doc, term)
        if position == NOT_FOUND_POSITION:
            return Explanation.no_match(
                f"no matching terms for field={term.field}, term={term.text}"
            )

        k = self.config.half_score_position
        return Explanation.match(
            position_decay(position, k),
            f"score(field={term.field}, term={term.text}, pos={position}, "
            f"func={decay_formula(position, k)}, boost={self.boost:f})",
        )


__all__ = [
    "HALF_SCORE_POSITION",
    "NOT_FOUND_POSITION",
    "LookupStatus",
    "PositionLookup",
    "PositionMatchConfig",
    "PositionMatchScorer",
    "PositionResolver",
    "decay_formula",
    "position_decay",
]
