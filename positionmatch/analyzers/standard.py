"""PositionMatch Standard Analyzers - Pre-configured Analyzers.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

from typing import Optional, Set

from positionmatch.analyzers.base import Analyzer, register_analyzer
from positionmatch.analyzers.filters import LowercaseFilter, StopwordFilter
from positionmatch.analyzers.tokenizers import (
    KeywordTokenizer,
    LetterTokenizer,
    StandardTokenizer,
    WhitespaceTokenizer,
)


@register_analyzer("standard")
class StandardAnalyzer(Analyzer):
    """Standard analyzer for general text.

    Standard tokenization, lowercasing and stopword removal. Stopwords
    still count towards positions: in "the quick fox", "fox" is at
    position 2.
    """

    def __init__(
        self,
        stopwords: Optional[Set[str]] = None,
        max_token_length: int = 255,
    ):
        super().__init__(
            tokenizer=StandardTokenizer(max_token_length=max_token_length),
            token_filters=[
                LowercaseFilter(),
                StopwordFilter(stopwords=stopwords),
            ],
        )


@register_analyzer("simple")
class SimpleAnalyzer(Analyzer):
    """Letter tokenization and lowercasing."""

    def __init__(self):
        super().__init__(
            tokenizer=LetterTokenizer(),
            token_filters=[LowercaseFilter()],
        )


@register_analyzer("whitespace")
class WhitespaceAnalyzer(Analyzer):
    """Splits only on whitespace, preserves case and punctuation."""

    def __init__(self):
        super().__init__(tokenizer=WhitespaceTokenizer())


@register_analyzer("keyword")
class KeywordAnalyzer(Analyzer):
    """Treats the entire input as a single token."""

    def __init__(self):
        super().__init__(tokenizer=KeywordTokenizer())


__all__ = [
    "StandardAnalyzer",
    "SimpleAnalyzer",
    "WhitespaceAnalyzer",
    "KeywordAnalyzer",
]
