"""PositionMatch Tokenizers - Text Tokenization Strategies.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import re

from positionmatch.analyzers.base import (
    Tokenizer,
    Token,
    TokenStream,
)


class StandardTokenizer(Tokenizer):
    """Standard tokenizer.

    Breaks text on whitespace and punctuation while keeping emails,
    URLs, contractions and decimal numbers whole.
    """

    WORD_PATTERN = re.compile(
        r"""
        (?:
            # Email addresses
            [a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}
            |
            # URLs
            (?:https?://)?(?:www\.)?[a-zA-Z0-9][a-zA-Z0-9-]*\.[a-zA-Z]{2,}(?:/[^\s]*)?
            |
            # Numbers with decimals
            \d+\.\d+
            |
            # Words and contractions
            \w+(?:'\w+)?
        )
        """,
        re.VERBOSE | re.UNICODE,
    )

    def __init__(self, max_token_length: int = 255):
        """Initialize tokenizer.

        Args:
            max_token_length: Longer tokens are skipped but still occupy
                a position
        """
        self.max_token_length = max_token_length

    def tokenize(self, text: str) -> TokenStream:
        """Tokenize text."""
        stream = TokenStream()
        position = 0

        for match in self.WORD_PATTERN.finditer(text):
            token_text = match.group()
            if len(token_text) > self.max_token_length:
                position += 1
                continue

            stream.add(Token(
                text=token_text,
                position=position,
                start_offset=match.start(),
                end_offset=match.end(),
            ))
            position += 1

        return stream


class WhitespaceTokenizer(Tokenizer):
    """Splits text on whitespace only, preserving punctuation."""

    def tokenize(self, text: str) -> TokenStream:
        """Tokenize text on whitespace."""
        stream = TokenStream()
        for position, match in enumerate(re.finditer(r"\S+", text)):
            stream.add(Token(
                text=match.group(),
                position=position,
                start_offset=match.start(),
                end_offset=match.end(),
            ))
        return stream


class LetterTokenizer(Tokenizer):
    """Emits maximal runs of letters; everything else is a separator."""

    def tokenize(self, text: str) -> TokenStream:
        stream = TokenStream()
        for position, match in enumerate(re.finditer(r"[^\W\d_]+", text)):
            stream.add(Token(
                text=match.group(),
                position=position,
                start_offset=match.start(),
                end_offset=match.end(),
            ))
        return stream


class KeywordTokenizer(Tokenizer):
    """Emits the whole input as a single token at position 0."""

    def tokenize(self, text: str) -> TokenStream:
        if not text:
            return TokenStream()
        return TokenStream([Token(text=text, position=0, start_offset=0, end_offset=len(text))])


__all__ = [
    "StandardTokenizer",
    "WhitespaceTokenizer",
    "LetterTokenizer",
    "KeywordTokenizer",
]
