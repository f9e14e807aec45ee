"""PositionMatch Index Reader - Read-Only Index View.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from typing import AbstractSet, Dict, List, Mapping, Optional

from positionmatch.index.inverted import InvertedIndex, PostingList, Term
from positionmatch.index.term_vectors import FieldVector, TermVectorStore


class IndexReader:
    """Read-only view over the field indexes and term vectors.

    Weights and scorers only ever see an ``IndexReader``; they never
    mutate the index.
    """

    def __init__(
        self,
        field_indexes: Mapping[str, InvertedIndex],
        term_vectors: TermVectorStore,
        live_docs: AbstractSet[int],
        max_doc: int,
    ):
        """Initialize reader.

        Args:
            field_indexes: Field name to its inverted index
            term_vectors: Term vector store
            live_docs: Document numbers that are not deleted
            max_doc: One greater than the largest document number ever
                assigned
        """
        self._field_indexes = field_indexes
        self._term_vectors = term_vectors
        self._live_docs = frozenset(live_docs)
        self.max_doc = max_doc

    @property
    def num_docs(self) -> int:
        return len(self._live_docs)

    def live_docs(self) -> List[int]:
        """Live document numbers in ascending order."""
        return sorted(self._live_docs)

    def is_live(self, doc: int) -> bool:
        return doc in self._live_docs

    def field_index(self, field_name: str) -> Optional[InvertedIndex]:
        return self._field_indexes.get(field_name)

    def postings(self, term: Term) -> Optional[PostingList]:
        """Posting list of ``term``, or None if the term is not indexed."""
        index = self._field_indexes.get(term.field)
        if index is None:
            return None
        return index.postings(term.text)

    def get_field_vector(self, doc: int, field_name: str) -> Optional[FieldVector]:
        """Term vector of one field of one document.

        Raises:
            CorruptVectorError: If the stored vector is damaged
        """
        if doc not in self._live_docs:
            return None
        return self._term_vectors.get_field_vector(doc, field_name)

    def field_names(self) -> List[str]:
        return sorted(self._field_indexes)

    def get_stats(self) -> Dict[str, int]:
        return {
            "num_docs": self.num_docs,
            "max_doc": self.max_doc,
            "fields": len(self._field_indexes),
        }


__all__ = ["IndexReader"]
