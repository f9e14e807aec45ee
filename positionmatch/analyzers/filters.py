"""PositionMatch Token Filters.

Filters that remove tokens leave a hole in the position sequence rather
than shifting later tokens forward, so the first-occurrence position of
a term reflects where it sits in the original text.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from typing import Optional, Set

from positionmatch.analyzers.base import TokenFilter, TokenStream


class LowercaseFilter(TokenFilter):
    """Converts tokens to lowercase."""

    def filter(self, stream: TokenStream) -> TokenStream:
        return stream.transform(str.lower)


class StopwordFilter(TokenFilter):
    """Removes common stopwords."""

    DEFAULT_STOPWORDS = frozenset([
        "a", "an", "and", "are", "as", "at", "be", "but", "by",
        "for", "if", "in", "into", "is", "it", "no", "not", "of",
        "on", "or", "such", "that", "the", "their", "then", "there",
        "these", "they", "this", "to", "was", "will", "with",
    ])

    def __init__(
        self,
        stopwords: Optional[Set[str]] = None,
        ignore_case: bool = True,
    ):
        """Initialize filter.

        Args:
            stopwords: Custom stopword set
            ignore_case: Case-insensitive matching
        """
        words = self.DEFAULT_STOPWORDS if stopwords is None else stopwords
        self.ignore_case = ignore_case
        self.stopwords = frozenset(w.lower() for w in words) if ignore_case else frozenset(words)

    def filter(self, stream: TokenStream) -> TokenStream:
        """Remove stopwords, keeping their positions reserved."""
        if self.ignore_case:
            return stream.drop(lambda t: t.text.lower() in self.stopwords)
        return stream.drop(lambda t: t.text in self.stopwords)


class LengthFilter(TokenFilter):
    """Removes tokens outside a length range."""

    def __init__(self, min_length: int = 1, max_length: int = 255):
        self.min_length = min_length
        self.max_length = max_length

    def filter(self, stream: TokenStream) -> TokenStream:
        return stream.drop(
            lambda t: not self.min_length <= len(t.text) <= self.max_length
        )


__all__ = ["LowercaseFilter", "StopwordFilter", "LengthFilter"]
