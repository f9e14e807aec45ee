"""PositionMatch Scorer - Document Iteration and Scoring Capabilities.

A ``Scorer`` is positioned on one document at a time by its
``DocIdSetIterator`` and reports the score of that document. Scorers
that can also account for their score implement ``Explainable``.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import bisect
from abc import ABC, abstractmethod
from typing import Iterable, List

from positionmatch.ranking.explanation import Explanation

# Returned by a DocIdSetIterator once it is exhausted.
NO_MORE_DOCS = 2 ** 31 - 1


class DocIdSetIterator(ABC):
    """Iterates document numbers in ascending order.

    Before the first call to ``next_doc`` or ``advance`` the current
    document is -1; after exhaustion it is ``NO_MORE_DOCS``.
    """

    @abstractmethod
    def doc_id(self) -> int:
        """Current document number."""

    @abstractmethod
    def next_doc(self) -> int:
        """Advance to the next document and return it."""

    @abstractmethod
    def advance(self, target: int) -> int:
        """Advance to the first document >= ``target`` and return it."""

    @abstractmethod
    def cost(self) -> int:
        """Upper bound on the number of documents this iterator yields."""

    def __iter__(self):
        doc = self.next_doc()
        while doc != NO_MORE_DOCS:
            yield doc
            doc = self.next_doc()

    @staticmethod
    def empty() -> "DocIdSetIterator":
        return ListDocIdSetIterator([])


class ListDocIdSetIterator(DocIdSetIterator):
    """Iterator over a precomputed set of document numbers."""

    def __init__(self, docs: Iterable[int]):
        self._docs: List[int] = sorted(set(docs))
        self._index = -1
        self._doc = -1

    def doc_id(self) -> int:
        return self._doc

    def next_doc(self) -> int:
        if self._doc == NO_MORE_DOCS:
            return self._doc
        self._index += 1
        self._doc = self._docs[self._index] if self._index < len(self._docs) else NO_MORE_DOCS
        return self._doc

    def advance(self, target: int) -> int:
        if self._doc == NO_MORE_DOCS:
            return self._doc
        self._index = bisect.bisect_left(self._docs, target, lo=max(self._index, 0))
        self._doc = self._docs[self._index] if self._index < len(self._docs) else NO_MORE_DOCS
        return self._doc

    def cost(self) -> int:
        return len(self._docs)


class Scorer(ABC):
    """Scores the document its iterator is positioned on."""

    @abstractmethod
    def iterator(self) -> DocIdSetIterator:
        """The iterator that positions this scorer."""

    @abstractmethod
    def max_score(self, up_to: int) -> float:
        """Upper bound of scores for documents up to ``up_to`` inclusive."""

    @abstractmethod
    def score(self) -> float:
        """Score of the current document."""

    @abstractmethod
    def doc_id(self) -> int:
        """Current document number."""


class Explainable(ABC):
    """Capability of accounting for a document's score."""

    @abstractmethod
    def explain(self, doc: int) -> Explanation:
        """Explain the score of ``doc``."""


__all__ = [
    "NO_MORE_DOCS",
    "DocIdSetIterator",
    "ListDocIdSetIterator",
    "Scorer",
    "Explainable",
]
