"""PositionMatch Analyzer Base - Positioned Token Analysis.

Base classes for the text analysis pipeline. Every token carries the
position it occupies in its field's token stream; filters that drop
tokens leave the positions of the remaining tokens untouched, so
positions stay faithful to the source text.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass
class Token:
    """A token in the analysis stream.

    Attributes:
        text: Token text
        position: Zero-based position in the field's token stream
        start_offset: Start character offset
        end_offset: End character offset
    """

    text: str
    position: int = 0
    start_offset: int = 0
    end_offset: int = 0

    def __repr__(self) -> str:
        return f"Token({self.text!r}, pos={self.position})"

    def clone(self, **changes: Any) -> "Token":
        """Copy this token, optionally overriding some attributes."""
        values = {
            "text": self.text,
            "position": self.position,
            "start_offset": self.start_offset,
            "end_offset": self.end_offset,
        }
        values.update(changes)
        return Token(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "text": self.text,
            "position": self.position,
            "start_offset": self.start_offset,
            "end_offset": self.end_offset,
        }


class TokenStream:
    """An ordered stream of positioned tokens."""

    def __init__(self, tokens: Optional[List[Token]] = None):
        self._tokens: List[Token] = tokens or []

    def add(self, token: Token) -> None:
        """Append a token."""
        self._tokens.append(token)

    def __iter__(self) -> Iterator[Token]:
        return iter(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)

    def __getitem__(self, index: int) -> Token:
        return self._tokens[index]

    def get_texts(self) -> List[str]:
        """Get list of token texts."""
        return [t.text for t in self._tokens]

    def drop(self, predicate: Callable[[Token], bool]) -> "TokenStream":
        """Remove tokens matching ``predicate``, keeping position gaps.

        The positions of the surviving tokens are unchanged.

        Args:
            predicate: Returns True for tokens to remove

        Returns:
            New token stream
        """
        return TokenStream([t for t in self._tokens if not predicate(t)])

    def transform(self, func: Callable[[str], str]) -> "TokenStream":
        """Rewrite token texts, leaving positions untouched."""
        return TokenStream([t.clone(text=func(t.text)) for t in self._tokens])


class Tokenizer(ABC):
    """Breaks text into a positioned token stream."""

    @abstractmethod
    def tokenize(self, text: str) -> TokenStream:
        """Tokenize text.

        Args:
            text: Input text

        Returns:
            Token stream with consecutive positions starting at 0
        """


class TokenFilter(ABC):
    """Transforms or removes tokens in a stream."""

    @abstractmethod
    def filter(self, stream: TokenStream) -> TokenStream:
        """Filter token stream."""


class Analyzer:
    """A tokenizer followed by a chain of token filters."""

    def __init__(
        self,
        tokenizer: Tokenizer,
        token_filters: Optional[List[TokenFilter]] = None,
    ):
        """Initialize analyzer.

        Args:
            tokenizer: Tokenizer to use
            token_filters: Token filters applied in order
        """
        self._tokenizer = tokenizer
        self._token_filters = token_filters or []

    def analyze(self, text: str) -> TokenStream:
        """Analyze text into positioned tokens."""
        stream = self._tokenizer.tokenize(text)
        for token_filter in self._token_filters:
            stream = token_filter.filter(stream)
        return stream

    def get_terms(self, text: str) -> List[str]:
        """Get analyzed term texts."""
        return self.analyze(text).get_texts()

    def get_tokens_with_positions(
        self,
        text: str,
        base_position: int = 0,
    ) -> List[Tuple[str, int, int]]:
        """Get ``(term, position, offset)`` tuples.

        Args:
            text: Input text
            base_position: Added to every position, used when a field has
                several values

        Returns:
            List of (term, position, offset) tuples
        """
        return [
            (t.text, t.position + base_position, t.start_offset)
            for t in self.analyze(text)
        ]


_analyzers: Dict[str, Callable[[], Analyzer]] = {}


def register_analyzer(name: str) -> Callable[[type], type]:
    """Class decorator registering an analyzer factory by name."""
    def decorator(cls: type) -> type:
        _analyzers[name] = cls
        return cls
    return decorator


def get_analyzer(name: str) -> Analyzer:
    """Build a registered analyzer.

    Raises:
        ValueError: If no analyzer is registered under ``name``
    """
    factory = _analyzers.get(name)
    if factory is None:
        raise ValueError(f"Unknown analyzer: {name}")
    return factory()


def list_analyzers() -> List[str]:
    """List registered analyzer names."""
    return sorted(_analyzers)


__all__ = [
    "Analyzer",
    "Token",
    "TokenStream",
    "Tokenizer",
    "TokenFilter",
    "register_analyzer",
    "get_analyzer",
    "list_analyzers",
]
