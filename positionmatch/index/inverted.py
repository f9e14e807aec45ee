"""PositionMatch Inverted Index - Per-Field Term to Document Mapping.

The inverted index maps each term of a field to the documents that
contain it. Documents are identified by dense integer doc numbers
assigned by the engine; postings are kept sorted by doc number so they
can be walked by a doc id iterator.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import bisect
import logging
import threading
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Set, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True, order=True)
class Term:
    """A ``(field, text)`` pair identifying one indexed token.

    Equality and hashing are by value; ordering is by field, then text.

    Attributes:
        field: Field name
        text: Term text as produced by the field's analyzer
    """

    field: str
    text: str

    @classmethod
    def parse(cls, value: str, default_field: str = "_all") -> "Term":
        """Build a term from ``"field:text"`` or a bare ``"text"``."""
        if ":" in value:
            field_name, _, text = value.partition(":")
            if field_name and text:
                return cls(field_name, text)
        return cls(default_field, value)

    def __str__(self) -> str:
        return f"{self.field}:{self.text}"


@dataclass
class Posting:
    """A term's occurrences in one document.

    Attributes:
        doc: Document number
        term_freq: Term frequency in the document
        positions: Term positions in ascending order (empty when the
            field does not store positions)
    """

    doc: int
    term_freq: int = 1
    positions: List[int] = field(default_factory=list)

    def __lt__(self, other: "Posting") -> bool:
        return self.doc < other.doc

    def merge_with(self, other: "Posting") -> None:
        """Merge another posting for the same document into this one."""
        if self.doc != other.doc:
            raise ValueError("Cannot merge postings from different documents")
        self.term_freq += other.term_freq
        self.positions = sorted(self.positions + other.positions)


class PostingList:
    """Postings for one term, sorted by document number."""

    def __init__(self, term: Term, postings: Optional[List[Posting]] = None):
        self.term = term
        self._postings: List[Posting] = sorted(postings or [])
        self._docs: List[int] = [p.doc for p in self._postings]

    def add(self, posting: Posting) -> None:
        """Add a posting, merging with an existing one for the same doc."""
        idx = bisect.bisect_left(self._docs, posting.doc)
        if idx < len(self._docs) and self._docs[idx] == posting.doc:
            self._postings[idx].merge_with(posting)
            return
        self._postings.insert(idx, posting)
        self._docs.insert(idx, posting.doc)

    def remove(self, doc: int) -> bool:
        """Remove the posting for ``doc``.

        Returns:
            True if a posting was removed
        """
        idx = bisect.bisect_left(self._docs, doc)
        if idx < len(self._docs) and self._docs[idx] == doc:
            del self._postings[idx]
            del self._docs[idx]
            return True
        return False

    def get(self, doc: int) -> Optional[Posting]:
        """Get the posting for ``doc`` or None."""
        idx = bisect.bisect_left(self._docs, doc)
        if idx < len(self._docs) and self._docs[idx] == doc:
            return self._postings[idx]
        return None

    def doc_ids(self) -> List[int]:
        """Document numbers in ascending order."""
        return list(self._docs)

    @property
    def doc_freq(self) -> int:
        return len(self._postings)

    @property
    def total_freq(self) -> int:
        return sum(p.term_freq for p in self._postings)

    def __len__(self) -> int:
        return len(self._postings)

    def __iter__(self) -> Iterator[Posting]:
        return iter(self._postings)

    def __contains__(self, doc: int) -> bool:
        return self.get(doc) is not None


class InvertedIndex:
    """Inverted index for a single field."""

    def __init__(
        self,
        field_name: str = "_all",
        store_positions: bool = True,
    ):
        """Initialize inverted index.

        Args:
            field_name: Field name for this index
            store_positions: Keep term positions in postings
        """
        self.field_name = field_name
        self.store_positions = store_positions

        self._posting_lists: Dict[str, PostingList] = {}
        self._field_lengths: Dict[int, int] = {}
        self._lock = threading.RLock()
        self._total_terms = 0

    def index_document(
        self,
        doc: int,
        tokens: List[Tuple[str, int, int]],
    ) -> Dict[str, List[int]]:
        """Index the tokens of one document.

        Args:
            doc: Document number
            tokens: List of (token, position, offset) tuples

        Returns:
            Mapping of term text to its ascending positions in the document
        """
        occurrences: Dict[str, List[int]] = defaultdict(list)
        for token, position, _ in tokens:
            occurrences[token].append(position)

        with self._lock:
            for text, positions in occurrences.items():
                positions.sort()
                posting = Posting(
                    doc=doc,
                    term_freq=len(positions),
                    positions=list(positions) if self.store_positions else [],
                )
                if text not in self._posting_lists:
                    self._posting_lists[text] = PostingList(Term(self.field_name, text))
                self._posting_lists[text].add(posting)

            self._field_lengths[doc] = self._field_lengths.get(doc, 0) + len(tokens)
            self._total_terms += len(tokens)

        return dict(occurrences)

    def delete_document(self, doc: int) -> bool:
        """Remove every posting of ``doc``.

        Returns:
            True if the document was indexed in this field
        """
        with self._lock:
            if doc not in self._field_lengths:
                return False

            empty = []
            for text, posting_list in self._posting_lists.items():
                posting_list.remove(doc)
                if not posting_list:
                    empty.append(text)
            for text in empty:
                del self._posting_lists[text]

            self._total_terms -= self._field_lengths.pop(doc)
            return True

    def postings(self, text: str) -> Optional[PostingList]:
        """Get the posting list for a term text."""
        return self._posting_lists.get(text)

    def doc_freq(self, text: str) -> int:
        pl = self._posting_lists.get(text)
        return len(pl) if pl else 0

    def get_field_length(self, doc: int) -> int:
        """Token count of the field in ``doc``."""
        return self._field_lengths.get(doc, 0)

    def terms(self) -> List[Term]:
        """All terms of this field, sorted."""
        return sorted(pl.term for pl in self._posting_lists.values())

    def docs(self) -> Set[int]:
        """Documents with at least one token in this field."""
        return set(self._field_lengths)

    @property
    def document_count(self) -> int:
        return len(self._field_lengths)

    @property
    def term_count(self) -> int:
        return len(self._posting_lists)

    @property
    def average_field_length(self) -> float:
        return self._total_terms / max(1, len(self._field_lengths))

    def get_stats(self) -> Dict[str, Any]:
        """Get index statistics."""
        return {
            "field_name": self.field_name,
            "document_count": self.document_count,
            "term_count": self.term_count,
            "total_terms": self._total_terms,
            "avg_field_length": self.average_field_length,
            "store_positions": self.store_positions,
        }


__all__ = ["InvertedIndex", "Posting", "PostingList", "Term"]
