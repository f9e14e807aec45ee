"""
Tests for query nodes and the query parser.
"""

import pytest

from positionmatch.analyzers import WhitespaceAnalyzer
from positionmatch.index.inverted import Term
from positionmatch.query.nodes import (
    BooleanQuery,
    MatchAllQuery,
    PositionMatchQuery,
    TermQuery,
)
from positionmatch.query.parser import BooleanOperator, QueryLexer, QueryParser


@pytest.fixture
def parser():
    return QueryParser(default_field="body")


class TestQueryNodes:
    def test_term_query(self):
        """A term query scores its single term."""
        query = TermQuery(field="body", text="fox")
        assert query.get_terms() == {Term("body", "fox")}
        assert query.to_string() == "body:fox"

    def test_boolean_excludes_prohibited_terms(self):
        """Prohibited clauses contribute no terms."""
        query = (
            BooleanQuery()
            .add_must(TermQuery(field="body", text="fox"))
            .add_should(TermQuery(field="body", text="dog"))
            .add_must_not(TermQuery(field="body", text="cat"))
        )
        assert query.get_terms() == {Term("body", "fox"), Term("body", "dog")}
        assert query.to_string() == "(+body:fox body:dog -body:cat)"

    def test_terms_are_distinct(self):
        """A repeated term is extracted once."""
        query = BooleanQuery(should=[
            TermQuery(field="body", text="fox"),
            TermQuery(field="body", text="fox"),
        ])
        assert query.get_terms() == {Term("body", "fox")}

    def test_position_match_query(self):
        """A position match query exposes the wrapped terms."""
        query = PositionMatchQuery(query=TermQuery(field="body", text="fox"), boost=2.0)
        assert query.get_terms() == {Term("body", "fox")}
        assert query.to_string() == "position_match(body:fox)^2"
        assert query.to_dict()["query"]["text"] == "fox"

    def test_match_all_has_no_terms(self):
        """Match-all scores no terms."""
        assert MatchAllQuery().get_terms() == set()


class TestQueryLexer:
    def test_tokens(self):
        """Operators, fields and boosts are lexed."""
        types = [t.type for t in QueryLexer().tokenize('+title:fox AND (dog OR cat^2) -"')]
        assert types == [
            "PLUS", "TERM", "COLON", "TERM", "AND", "LPAREN", "TERM", "OR",
            "TERM", "CARET", "TERM", "RPAREN", "MINUS",
        ]


class TestQueryParser:
    def test_single_term(self, parser):
        """A bare word searches the default field."""
        parsed = parser.parse("Fox")
        assert parsed.root == TermQuery(field="body", text="fox")
        assert parsed.terms == {Term("body", "fox")}
        assert parsed.fields == {"body"}

    def test_fielded_terms(self, parser):
        """field:term targets a field; adjacent clauses are optional."""
        parsed = parser.parse("title:fox dog")

        assert isinstance(parsed.root, BooleanQuery)
        assert parsed.root.should == [
            TermQuery(field="title", text="fox"),
            TermQuery(field="body", text="dog"),
        ]
        assert parsed.fields == {"title", "body"}

    def test_required_and_prohibited(self, parser):
        """+ and - mark required and prohibited clauses."""
        root = parser.parse("+fox -cat jumps").root

        assert root.must == [TermQuery(field="body", text="fox")]
        assert root.must_not == [TermQuery(field="body", text="cat")]
        assert root.should == [TermQuery(field="body", text="jumps")]
        assert Term("body", "cat") not in root.get_terms()

    def test_not_operator(self, parser):
        """NOT prohibits the following clause."""
        root = parser.parse("fox NOT cat").root
        assert root.must_not == [TermQuery(field="body", text="cat")]

    def test_and_or_precedence(self, parser):
        """AND binds tighter than OR."""
        root = parser.parse("fox AND dog OR cat").root

        assert isinstance(root, BooleanQuery)
        assert len(root.should) == 2
        assert root.should[0].must == [
            TermQuery(field="body", text="fox"),
            TermQuery(field="body", text="dog"),
        ]

    def test_field_group(self, parser):
        """field:(a b) applies the field to every clause in the group."""
        root = parser.parse("title:(quick fox)").root
        assert root.get_terms() == {Term("title", "quick"), Term("title", "fox")}

    def test_boost(self, parser):
        """^n sets the clause boost."""
        assert parser.parse("fox^2").root.boost == 2.0

    def test_stopwords_dropped(self, parser):
        """Clauses that analyze to nothing disappear."""
        assert parser.parse("the fox").root == TermQuery(field="body", text="fox")

    def test_only_stopwords(self, parser):
        """A query of only stopwords matches nothing."""
        parsed = parser.parse("the")
        assert parsed.root == BooleanQuery()
        assert parsed.terms == set()

    @pytest.mark.parametrize("query", ["", "*", "*:*"])
    def test_match_all(self, parser, query):
        """Empty and wildcard queries match everything."""
        assert isinstance(parser.parse(query).root, MatchAllQuery)

    def test_default_operator_and(self):
        """With AND as default operator adjacent clauses are required."""
        parser = QueryParser(default_field="body", default_operator=BooleanOperator.AND)
        root = parser.parse("fox dog").root
        assert len(root.must) == 2 and not root.should

    def test_multi_token_clause(self, parser):
        """A clause analyzing to several tokens becomes optional terms."""
        root = parser.parse("title:fox,hound").root
        assert root.should == [
            TermQuery(field="title", text="fox"),
            TermQuery(field="title", text="hound"),
        ]

    def test_hyphen_prohibits(self, parser):
        """A hyphen starts a prohibited clause."""
        root = parser.parse("title:fox-hound").root
        assert root.to_string() == "(title:fox -body:hound)"

    def test_per_field_analyzer(self):
        """Each field is analyzed with its own analyzer."""
        parser = QueryParser(default_field="body", analyzers={"code": WhitespaceAnalyzer()})
        assert parser.parse("code:Foo").root == TermQuery(field="code", text="Foo")

    def test_syntax_error_falls_back(self, parser, caplog):
        """A syntax error degrades to optional terms and is reported."""
        parsed = parser.parse("(fox dog")

        assert parsed.parse_errors
        assert parsed.root.get_terms() == {Term("body", "fox"), Term("body", "dog")}
        assert "Query parse error" in caplog.text
