"""PositionMatch Query Parser - Query String to Query Tree.

Query syntax:
- term: Search the default field
- field:term: Search a specific field
- field:(a b): Group searched in a specific field
- +term / -term: Required / prohibited clause
- a AND b, a OR b, NOT a: Boolean operators (AND binds tighter than OR)
- (a b): Grouping
- term^2: Clause boost

Clause texts go through the field's analyzer, so a stopword clause
disappears and a clause that analyzes into several tokens becomes a
group of optional terms.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set, Tuple

from positionmatch.analyzers import Analyzer, StandardAnalyzer
from positionmatch.index.inverted import Term
from positionmatch.query.nodes import (
    BooleanQuery,
    MatchAllQuery,
    QueryNode,
    TermQuery,
)

logger = logging.getLogger(__name__)


class BooleanOperator(Enum):
    """Operator applied between clauses with no explicit operator."""

    AND = "AND"
    OR = "OR"


@dataclass
class ParsedQuery:
    """Result of query parsing.

    Attributes:
        root: Root query node
        original: Original query string
        fields: Fields referenced by the query's terms
        terms: Distinct terms the query scores
        parse_errors: Errors met while parsing
    """

    root: QueryNode
    original: str = ""
    fields: Set[str] = field(default_factory=set)
    terms: Set[Term] = field(default_factory=set)
    parse_errors: List[str] = field(default_factory=list)

    def __post_init__(self):
        self.terms = self.root.get_terms()
        self.fields = {t.field for t in self.terms}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "original": self.original,
            "root": self.root.to_dict(),
            "fields": sorted(self.fields),
            "terms": [str(t) for t in sorted(self.terms)],
            "parse_errors": self.parse_errors,
        }


class Token:
    """Lexer token."""

    def __init__(self, token_type: str, value: str, position: int):
        self.type = token_type
        self.value = value
        self.position = position

    def __repr__(self) -> str:
        return f"Token({self.type}, {self.value!r})"


class QueryLexer:
    """Tokenizes query strings."""

    PATTERNS = [
        ("WHITESPACE", r"\s+"),
        ("AND", r"\bAND\b|&&"),
        ("OR", r"\bOR\b|\|\|"),
        ("NOT", r"\bNOT\b|!"),
        ("LPAREN", r"\("),
        ("RPAREN", r"\)"),
        ("COLON", r":"),
        ("CARET", r"\^"),
        ("PLUS", r"\+"),
        ("MINUS", r"-"),
        ("TERM", r"[^\s():^+\-!\"&|]+"),
    ]

    def __init__(self):
        self._patterns = [(name, re.compile(pattern)) for name, pattern in self.PATTERNS]

    def tokenize(self, query: str) -> List[Token]:
        tokens = []
        position = 0

        while position < len(query):
            for token_type, pattern in self._patterns:
                match = pattern.match(query, position)
                if match:
                    if token_type != "WHITESPACE":
                        tokens.append(Token(token_type, match.group(0), position))
                    position = match.end()
                    break
            else:
                logger.warning(f"Unknown character at position {position}: {query[position]}")
                position += 1

        return tokens


class QueryParser:
    """Parses query strings into query trees."""

    _STOP_TYPES = {"RPAREN", "AND", "OR"}

    def __init__(
        self,
        default_field: str = "_all",
        default_operator: BooleanOperator = BooleanOperator.OR,
        analyzers: Optional[Dict[str, Analyzer]] = None,
        default_analyzer: Optional[Analyzer] = None,
    ):
        """Initialize parser.

        Args:
            default_field: Field searched by clauses without a field
            default_operator: Operator between adjacent clauses
            analyzers: Per-field analyzers
            default_analyzer: Analyzer for fields without their own
        """
        self.default_field = default_field
        self.default_operator = default_operator
        self.analyzers = analyzers or {}
        self.default_analyzer = default_analyzer or StandardAnalyzer()

        self._lexer = QueryLexer()
        self._tokens: List[Token] = []
        self._position = 0
        self._fields: List[str] = []

    def parse(self, query: str) -> ParsedQuery:
        """Parse a query string.

        An empty query or ``*`` matches all documents. On a syntax error
        the query falls back to optional terms over the default field.
        """
        if not query or query.strip() in ("*", "*:*"):
            return ParsedQuery(root=MatchAllQuery(), original=query)

        self._tokens = self._lexer.tokenize(query)
        self._position = 0
        self._fields = [self.default_field]
        errors: List[str] = []

        try:
            root = self._parse_or_expression()
            if self._current_token() is not None:
                raise ValueError(f"Unexpected {self._current_token()}")
        except ValueError as e:
            logger.error(f"Query parse error: {e}")
            errors.append(str(e))
            root = self._fallback(query)

        return ParsedQuery(
            root=root if root is not None else BooleanQuery(),
            original=query,
            parse_errors=errors,
        )

    def analyzer_for(self, field_name: str) -> Analyzer:
        return self.analyzers.get(field_name, self.default_analyzer)

    def _fallback(self, query: str) -> QueryNode:
        words = re.findall(r"[^\s()\"^:+\-!&|]+", query)
        clauses = []
        for word in words:
            node = self._term_node(self.default_field, word)
            if node is not None:
                clauses.append(node)
        return BooleanQuery(should=clauses)

    def _current_token(self) -> Optional[Token]:
        if self._position < len(self._tokens):
            return self._tokens[self._position]
        return None

    def _advance(self) -> Optional[Token]:
        token = self._current_token()
        self._position += 1
        return token

    def _expect(self, token_type: str) -> Token:
        token = self._current_token()
        if not token or token.type != token_type:
            raise ValueError(f"Expected {token_type}, got {token}")
        return self._advance()

    def _at(self, token_type: str) -> bool:
        token = self._current_token()
        return token is not None and token.type == token_type

    def _parse_or_expression(self) -> Optional[QueryNode]:
        nodes = [self._parse_and_expression()]
        while self._at("OR"):
            self._advance()
            nodes.append(self._parse_and_expression())
        return self._combine(should=nodes)

    def _parse_and_expression(self) -> Optional[QueryNode]:
        nodes = [self._parse_sequence()]
        while self._at("AND"):
            self._advance()
            nodes.append(self._parse_sequence())
        return self._combine(must=nodes)

    def _parse_sequence(self) -> Optional[QueryNode]:
        """Adjacent clauses joined by the default operator."""
        clauses: List[Tuple[str, QueryNode]] = []

        while True:
            token = self._current_token()
            if token is None or token.type in self._STOP_TYPES:
                break
            occur, node = self._parse_clause()
            if node is not None:
                clauses.append((occur, node))

        if len(clauses) == 1 and clauses[0][0] == "default":
            return clauses[0][1]

        query = BooleanQuery()
        for occur, node in clauses:
            if occur == "must_not":
                query.add_must_not(node)
            elif occur == "must" or self.default_operator is BooleanOperator.AND:
                query.add_must(node)
            else:
                query.add_should(node)
        return query if query.clause_count else None

    def _parse_clause(self) -> Tuple[str, Optional[QueryNode]]:
        occur = "default"
        token = self._current_token()
        if token.type == "PLUS":
            self._advance()
            occur = "must"
        elif token.type in ("MINUS", "NOT"):
            self._advance()
            occur = "must_not"

        node = self._parse_primary()

        if self._at("CARET"):
            self._advance()
            boost_token = self._expect("TERM")
            try:
                boost = float(boost_token.value)
            except ValueError:
                raise ValueError(f"Invalid boost: {boost_token.value}")
            if node is not None:
                node.boost = boost

        return occur, node

    def _parse_primary(self) -> Optional[QueryNode]:
        token = self._current_token()
        if token is None:
            raise ValueError("Unexpected end of query")

        if token.type == "LPAREN":
            return self._parse_group()

        text = self._expect("TERM").value
        if self._at("COLON"):
            self._advance()
            if self._at("LPAREN"):
                self._fields.append(text)
                try:
                    return self._parse_group()
                finally:
                    self._fields.pop()
            value = self._expect("TERM").value
            return self._term_node(text, value)

        return self._term_node(self._fields[-1], text)

    def _parse_group(self) -> Optional[QueryNode]:
        self._expect("LPAREN")
        node = self._parse_or_expression()
        self._expect("RPAREN")
        return node

    def _term_node(self, field_name: str, text: str) -> Optional[QueryNode]:
        """Analyze a clause text into a term query or a group of terms."""
        texts = []
        for token_text in self.analyzer_for(field_name).get_terms(text):
            if token_text not in texts:
                texts.append(token_text)

        if not texts:
            return None
        if len(texts) == 1:
            return TermQuery(field=field_name, text=texts[0])
        return BooleanQuery(should=[TermQuery(field=field_name, text=t) for t in texts])

    def _combine(self, must: Optional[List] = None, should: Optional[List] = None) -> Optional[QueryNode]:
        nodes = [n for n in (must or should or []) if n is not None]
        if not nodes:
            return None
        if len(nodes) == 1:
            return nodes[0]
        if must:
            return BooleanQuery(must=nodes)
        return BooleanQuery(should=nodes)


__all__ = [
    "BooleanOperator",
    "ParsedQuery",
    "QueryLexer",
    "QueryParser",
]
