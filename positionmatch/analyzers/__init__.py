"""PositionMatch Text Analysis.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from positionmatch.analyzers.base import (
    Analyzer,
    Token,
    TokenStream,
    Tokenizer,
    TokenFilter,
    get_analyzer,
    list_analyzers,
    register_analyzer,
)
from positionmatch.analyzers.tokenizers import (
    KeywordTokenizer,
    LetterTokenizer,
    StandardTokenizer,
    WhitespaceTokenizer,
)
from positionmatch.analyzers.filters import LengthFilter, LowercaseFilter, StopwordFilter
from positionmatch.analyzers.standard import (
    KeywordAnalyzer,
    SimpleAnalyzer,
    StandardAnalyzer,
    WhitespaceAnalyzer,
)

__all__ = [
    "Analyzer",
    "Token",
    "TokenStream",
    "Tokenizer",
    "TokenFilter",
    "get_analyzer",
    "list_analyzers",
    "register_analyzer",
    "StandardTokenizer",
    "WhitespaceTokenizer",
    "LetterTokenizer",
    "KeywordTokenizer",
    "LowercaseFilter",
    "StopwordFilter",
    "LengthFilter",
    "StandardAnalyzer",
    "SimpleAnalyzer",
    "WhitespaceAnalyzer",
    "KeywordAnalyzer",
]
