"""
Pytest configuration and shared fixtures.
"""

from typing import Dict, Iterable, Optional, Set

import pytest

from positionmatch.analyzers import Analyzer, WhitespaceAnalyzer
from positionmatch.engine import Document, SearchConfig, SearchEngine
from positionmatch.index.inverted import InvertedIndex, Term
from positionmatch.index.reader import IndexReader
from positionmatch.index.term_vectors import TermVectorStore


class TermSet:
    """Stands in for a weight: supplies a fixed term set."""

    def __init__(self, terms: Iterable[Term]):
        self.terms = set(terms)

    def extract_terms(self, terms: Set[Term]) -> None:
        terms.update(self.terms)


def build_reader(
    docs: Dict[int, Dict[str, str]],
    store_positions: bool = True,
    analyzer: Optional[Analyzer] = None,
) -> IndexReader:
    """Index ``{doc: {field: text}}`` and return a reader over it."""
    analyzer = analyzer or WhitespaceAnalyzer()
    indexes: Dict[str, InvertedIndex] = {}
    vectors = TermVectorStore()

    for doc, fields in docs.items():
        for name, text in fields.items():
            index = indexes.setdefault(name, InvertedIndex(name, store_positions))
            occurrences = index.index_document(doc, analyzer.get_tokens_with_positions(text))
            vectors.add(doc, name, occurrences, store_positions)

    return IndexReader(indexes, vectors, set(docs), max(docs, default=-1) + 1)


@pytest.fixture
def corpus() -> Dict[int, Dict[str, str]]:
    """Small corpus with known positions (whitespace analysis)."""
    return {
        # the:0 quick:1 fox:2 jumps:3 over:4 the:5 lazy:6 dog:7
        0: {"body": "the quick fox jumps over the lazy dog", "title": "quick fox"},
        # fox:0 runs:1 and:2 then:3 it:4 jumps:5
        1: {"body": "fox runs and then it jumps", "title": "runner"},
        2: {"body": "nothing to see here", "title": "empty"},
    }


@pytest.fixture
def reader(corpus) -> IndexReader:
    return build_reader(corpus)


@pytest.fixture
def make_reader():
    return build_reader


@pytest.fixture
def term_set():
    return TermSet


@pytest.fixture
def engine() -> SearchEngine:
    """Engine with three documents using the standard analyzer."""
    engine = SearchEngine(SearchConfig(index_name="test", default_field="content"))
    engine.bulk_index([
        # quick:0 fox:1 jumps:2 over:3 (the:4) lazy:5 dog:6
        Document(id="a", fields={"content": "Quick fox jumps over the lazy dog"}),
        # (the:0) lazy:1 dog:2 sleeps:3 while:4 (the:5) fox:6 watches:7
        Document(id="b", fields={"content": "The lazy dog sleeps while the fox watches"}),
        Document(id="c", fields={"content": "Nothing relevant here"}),
    ])
    yield engine
    engine.close()
