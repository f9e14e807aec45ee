"""
Tests for weights, match scoring and scorer construction.
"""

import pytest

from positionmatch.index.inverted import Term
from positionmatch.query.nodes import (
    BooleanQuery,
    MatchAllQuery,
    PositionMatchQuery,
    TermQuery,
)
from positionmatch.ranking.position import PositionMatchScorer
from positionmatch.ranking.scorer import NO_MORE_DOCS, ListDocIdSetIterator
from positionmatch.ranking.weight import (
    MatchWeight,
    PositionMatchWeight,
    ScorerConstructionError,
    create_weight,
)


def body(text):
    return TermQuery(field="body", text=text)


def matching(reader, query):
    scorer = MatchWeight(query).scorer(reader)
    return [] if scorer is None else list(scorer.iterator())


class TestDocIdSetIterator:
    def test_starts_before_first_doc(self):
        """A fresh iterator is positioned on -1."""
        assert ListDocIdSetIterator([3, 1]).doc_id() == -1

    def test_iterates_sorted_unique(self):
        """Documents come out ascending without duplicates."""
        assert list(ListDocIdSetIterator([5, 1, 3, 1])) == [1, 3, 5]

    def test_advance(self):
        """advance() lands on the first document at or after the target."""
        it = ListDocIdSetIterator([1, 4, 9])
        assert it.advance(2) == 4
        assert it.advance(4) == 4
        assert it.advance(10) == NO_MORE_DOCS
        assert it.next_doc() == NO_MORE_DOCS


class TestMatchWeight:
    def test_term_query(self, reader):
        """A term query matches the documents containing the term."""
        assert matching(reader, body("fox")) == [0, 1]

    def test_unknown_term(self, reader):
        """An unindexed term yields no scorer."""
        assert MatchWeight(body("zebra")).scorer(reader) is None

    def test_match_all(self, reader):
        """Match-all matches every live document."""
        assert matching(reader, MatchAllQuery()) == [0, 1, 2]

    def test_should_clauses(self, reader):
        """Should clauses form a union."""
        query = BooleanQuery(should=[body("lazy"), body("runs")])
        assert matching(reader, query) == [0, 1]

    def test_minimum_should_match(self, reader):
        """minimum_should_match requires that many should clauses."""
        query = BooleanQuery(
            should=[body("fox"), body("lazy"), body("zebra")],
            minimum_should_match=2,
        )
        assert matching(reader, query) == [0]

    def test_must_intersects(self, reader):
        """Must clauses form an intersection."""
        query = BooleanQuery(must=[body("fox"), body("runs")])
        assert matching(reader, query) == [1]

    def test_must_not_excludes(self, reader):
        """Must-not clauses remove documents."""
        query = BooleanQuery(
            should=[body("fox")],
            must_not=[body("lazy")],
        )
        assert matching(reader, query) == [1]

    def test_only_must_not(self, reader):
        """A query of only must-not clauses matches everything else."""
        query = BooleanQuery(must_not=[body("fox")])
        assert matching(reader, query) == [2]

    def test_empty_boolean(self, reader):
        """An empty boolean query matches nothing."""
        assert MatchWeight(BooleanQuery()).scorer(reader) is None

    def test_score_counts_matched_terms(self, reader):
        """The match score is the number of query terms present."""
        query = BooleanQuery(should=[body("fox"), body("lazy")])
        scorer = MatchWeight(query).scorer(reader)
        scores = {doc: scorer.score() for doc in scorer.iterator()}

        assert scores == {0: 2.0, 1: 1.0}
        assert scorer.max_score(NO_MORE_DOCS) == 2.0

    def test_explain(self, reader):
        """Explanations report matched terms or a miss."""
        weight = MatchWeight(BooleanQuery(should=[body("fox"), body("lazy")]))

        hit = weight.explain(reader, 0)
        miss = weight.explain(reader, 2)

        assert hit.value == 2.0
        assert hit.description == "matched 2 of 2 terms"
        assert not miss.is_match


class TestPositionMatchWeight:
    def _query(self, boost=1.0):
        inner = BooleanQuery(should=[body("fox"), body("jumps")])
        return PositionMatchQuery(query=inner, boost=boost)

    def test_create_weight_dispatch(self):
        """Position match queries get a position weight."""
        assert isinstance(create_weight(self._query()), PositionMatchWeight)
        assert isinstance(create_weight(body("fox")), MatchWeight)

    def test_extracts_inner_terms(self):
        """The term set comes from the wrapped query."""
        terms = set()
        create_weight(self._query()).extract_terms(terms)
        assert terms == {Term("body", "fox"), Term("body", "jumps")}

    def test_scores_inner_matches(self, reader):
        """Documents come from the inner query, scores from positions."""
        scorer = create_weight(self._query()).scorer(reader)
        scores = {doc: scorer.score() for doc in scorer.iterator()}

        assert isinstance(scorer, PositionMatchScorer)
        assert set(scores) == {0, 1}
        assert scores[0] == pytest.approx(5 / 7 + 5 / 8)
        assert scores[1] == pytest.approx(1.0 + 0.5)

    def test_max_score_passthrough(self, reader):
        """max_score is the inner scorer's estimate."""
        scorer = create_weight(self._query()).scorer(reader)
        assert scorer.max_score(NO_MORE_DOCS) == 2.0

    def test_doc_id_follows_iterator(self, reader):
        """doc_id tracks the inner iterator."""
        scorer = create_weight(self._query()).scorer(reader)
        it = scorer.iterator()

        assert scorer.doc_id() == -1
        assert it.next_doc() == 0
        assert scorer.doc_id() == 0

    def test_no_matches(self, reader):
        """A query that matches nothing still yields a scorer."""
        query = PositionMatchQuery(query=body("zebra"))
        scorer = create_weight(query).scorer(reader)

        assert list(scorer.iterator()) == []
        assert scorer.doc_id() == -1

    def test_boost_from_query(self, reader):
        """The query boost reaches the scorer."""
        scorer = create_weight(self._query(boost=3.0)).scorer(reader)
        assert scorer.score_document(1) == pytest.approx(3 * 1.5)

    def test_explain(self, reader):
        """The weight explains through its scorer."""
        explanation = create_weight(self._query(boost=3.0)).explain(reader, 1)

        assert explanation.value == pytest.approx(1.5)
        assert len(explanation.details) == 2

    def test_construction_failure(self):
        """Failures building the inner scorer are wrapped and raised."""

        class BrokenReader:
            def postings(self, term):
                raise OSError("index unavailable")

        weight = create_weight(PositionMatchQuery(query=body("fox")))

        with pytest.raises(ScorerConstructionError) as exc_info:
            weight.scorer(BrokenReader())

        assert isinstance(exc_info.value.__cause__, OSError)
