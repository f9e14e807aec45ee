"""
Tests for tokenizers, token filters and analyzers.
"""

import pytest

from positionmatch.analyzers import (
    KeywordAnalyzer,
    LengthFilter,
    SimpleAnalyzer,
    StandardAnalyzer,
    StandardTokenizer,
    StopwordFilter,
    WhitespaceAnalyzer,
    get_analyzer,
    list_analyzers,
)


class TestStandardTokenizer:
    def test_consecutive_positions(self):
        """Tokens are numbered from 0 with offsets into the text."""
        stream = StandardTokenizer().tokenize("Hello, big world")
        assert [(t.text, t.position, t.start_offset) for t in stream] == [
            ("Hello", 0, 0),
            ("big", 1, 7),
            ("world", 2, 11),
        ]

    def test_emails_and_numbers_whole(self):
        """Emails and decimal numbers are kept as single tokens."""
        stream = StandardTokenizer().tokenize("mail ops@example.com about 3.14")
        assert stream.get_texts() == ["mail", "ops@example.com", "about", "3.14"]

    def test_long_tokens_keep_position(self):
        """An overlong token is skipped but still consumes a position."""
        stream = StandardTokenizer(max_token_length=5).tokenize("a enormous b")
        assert [(t.text, t.position) for t in stream] == [("a", 0), ("b", 2)]


class TestFilters:
    def test_stopwords_leave_gaps(self):
        """Removing stopwords does not shift later positions."""
        stream = StandardAnalyzer().analyze("The quick fox")
        assert [(t.text, t.position) for t in stream] == [("quick", 1), ("fox", 2)]

    def test_consecutive_stopwords(self):
        """A run of stopwords leaves a gap of the same width."""
        stream = StandardAnalyzer().analyze("the a quick fox")
        assert [(t.text, t.position) for t in stream] == [("quick", 2), ("fox", 3)]

    def test_custom_stopwords(self):
        """A custom stopword set replaces the default."""
        stream = StopwordFilter(stopwords={"fox"}).filter(
            WhitespaceAnalyzer().analyze("the fox runs")
        )
        assert stream.get_texts() == ["the", "runs"]

    def test_length_filter(self):
        """Tokens outside the length range are dropped."""
        stream = LengthFilter(min_length=2).filter(WhitespaceAnalyzer().analyze("a bb ccc"))
        assert [(t.text, t.position) for t in stream] == [("bb", 1), ("ccc", 2)]


class TestAnalyzers:
    def test_standard_tokens_with_positions(self):
        """Standard analysis lowercases and keeps original positions."""
        assert StandardAnalyzer().get_tokens_with_positions("The Quick brown fox") == [
            ("quick", 1, 4),
            ("brown", 2, 10),
            ("fox", 3, 16),
        ]

    def test_base_position(self):
        """A base position shifts every token."""
        tokens = WhitespaceAnalyzer().get_tokens_with_positions("a b", base_position=10)
        assert [p for _, p, _ in tokens] == [10, 11]

    def test_simple(self):
        """Simple analysis splits on non-letters."""
        assert SimpleAnalyzer().get_terms("Fox2Hound-x") == ["fox", "hound", "x"]

    def test_whitespace_preserves_case(self):
        """Whitespace analysis keeps case and punctuation."""
        assert WhitespaceAnalyzer().get_terms("The Fox.") == ["The", "Fox."]

    def test_keyword(self):
        """Keyword analysis emits the input as one token."""
        assert KeywordAnalyzer().get_terms("New York") == ["New York"]
        assert KeywordAnalyzer().get_terms("") == []


class TestRegistry:
    def test_builtin_analyzers(self):
        """The built-in analyzers are registered."""
        assert {"standard", "simple", "whitespace", "keyword"} <= set(list_analyzers())

    def test_get_analyzer(self):
        """Lookup returns a fresh analyzer instance."""
        assert isinstance(get_analyzer("standard"), StandardAnalyzer)
        assert get_analyzer("standard") is not get_analyzer("standard")

    def test_unknown_analyzer(self):
        """Unknown names raise ValueError."""
        with pytest.raises(ValueError):
            get_analyzer("klingon")
