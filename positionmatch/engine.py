"""PositionMatch Engine - Indexing and Position-Ranked Search.

The SearchEngine owns the field indexes and term vectors, and answers
queries by scoring every matching document by the first positions of
the query terms.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum, auto
from typing import Any, Dict, Generator, Iterable, List, Optional, Tuple, Union

from positionmatch.analyzers import Analyzer, get_analyzer
from positionmatch.index.inverted import InvertedIndex
from positionmatch.index.reader import IndexReader
from positionmatch.index.term_vectors import TermVectorStore, encode_field_vector
from positionmatch.query.executor import QueryContext, QueryExecutor
from positionmatch.query.nodes import PositionMatchQuery, QueryNode
from positionmatch.query.parser import BooleanOperator, QueryParser
from positionmatch.ranking.explanation import Explanation
from positionmatch.ranking.position import PositionMatchConfig

logger = logging.getLogger(__name__)


class IndexState(Enum):
    """Index state enumeration."""

    INITIALIZING = auto()
    READY = auto()
    INDEXING = auto()
    CLOSED = auto()


@dataclass
class SearchConfig:
    """Search engine configuration.

    Attributes:
        index_name: Name of the search index
        default_field: Field searched by unqualified query terms
        default_operator: Operator between adjacent query clauses (AND/OR)
        analyzer: Analyzer for fields without a mapping
        default_boost: Boost of position match queries when none is given
        half_score_position: Position at which a term scores 0.5
        default_limit: Hits returned when no limit is given
        max_results: Upper bound on the requested limit
        store_positions: Index positions for fields without a mapping
        position_increment_gap: Positions left between values of a
            multi-valued field
        timeout_ms: Query timeout in milliseconds
    """

    index_name: str = "default"
    default_field: str = "content"
    default_operator: str = "OR"
    analyzer: str = "standard"
    default_boost: float = 1.0
    half_score_position: int = 5
    default_limit: int = 10
    max_results: int = 1000
    store_positions: bool = True
    position_increment_gap: int = 100
    timeout_ms: int = 30000


@dataclass
class FieldMapping:
    """Field mapping definition.

    Attributes:
        name: Field name
        analyzer: Analyzer name
        index: Whether to index this field
        store: Whether to return the original value with hits
        store_positions: Whether to keep term positions; without them
            every term of the field scores 0.0
    """

    name: str
    analyzer: str = "standard"
    index: bool = True
    store: bool = True
    store_positions: bool = True


@dataclass
class Document:
    """Document for indexing.

    Attributes:
        id: Unique document identifier
        fields: Field name to value (string, number or list of them)
        timestamp: Indexing time
    """

    id: str
    fields: Dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=datetime.now)

    def __post_init__(self):
        if not self.id:
            self.id = str(uuid.uuid4())

    def get(self, field_name: str, default: Any = None) -> Any:
        return self.fields.get(field_name, default)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "fields": self.fields,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Document":
        timestamp = data.get("timestamp")
        if isinstance(timestamp, str):
            timestamp = datetime.fromisoformat(timestamp)
        return cls(
            id=data["id"],
            fields=data.get("fields", {}),
            timestamp=timestamp or datetime.now(),
        )


@dataclass
class SearchHit:
    """Single search result hit.

    Attributes:
        id: Document ID
        doc: Internal document number
        score: Relevance score
        fields: Stored fields
        explanation: Score explanation, when requested
    """

    id: str
    doc: int
    score: float
    fields: Dict[str, Any] = field(default_factory=dict)
    explanation: Optional[Explanation] = None

    def get(self, field_name: str, default: Any = None) -> Any:
        return self.fields.get(field_name, default)


@dataclass
class SearchResult:
    """Search result container.

    Attributes:
        hits: Hits on the requested page
        total_hits: Number of matching documents
        took_ms: Execution time in milliseconds
        max_score: Best score on the page
        query: Executed query, as a string
        timed_out: Whether collection stopped on timeout
    """

    hits: List[SearchHit] = field(default_factory=list)
    total_hits: int = 0
    took_ms: float = 0.0
    max_score: float = 0.0
    query: str = ""
    timed_out: bool = False

    def __len__(self) -> int:
        return len(self.hits)

    def __iter__(self) -> Generator[SearchHit, None, None]:
        yield from self.hits

    def __getitem__(self, index: int) -> SearchHit:
        return self.hits[index]


@dataclass
class IndexStats:
    """Index statistics.

    Attributes:
        doc_count: Live documents
        field_count: Indexed fields
        term_count: Distinct terms over all fields
        query_count: Queries executed
        last_modified: Time of the last index change
    """

    doc_count: int = 0
    field_count: int = 0
    term_count: int = 0
    query_count: int = 0
    last_modified: Optional[datetime] = None


class SearchEngine:
    """Main search engine class."""

    def __init__(self, config: Optional[SearchConfig] = None):
        """Initialize search engine.

        Args:
            config: Engine configuration
        """
        self.config = config or SearchConfig()
        self.position_config = PositionMatchConfig(
            half_score_position=self.config.half_score_position,
        )
        self._state = IndexState.INITIALIZING
        self._lock = threading.RLock()

        self._field_mappings: Dict[str, FieldMapping] = {}
        self._analyzers: Dict[str, Analyzer] = {}
        self._field_indexes: Dict[str, InvertedIndex] = {}
        self._term_vectors = TermVectorStore()

        self._documents: Dict[int, Document] = {}
        self._doc_numbers: Dict[str, int] = {}
        self._next_doc = 0

        self._query_count = 0
        self._last_modified: Optional[datetime] = None

        logger.info(f"Initializing search engine: {self.config.index_name}")
        self._state = IndexState.READY

    def close(self) -> None:
        self._state = IndexState.CLOSED
        logger.info(f"Search engine closed: {self.config.index_name}")

    def define_field(self, mapping: FieldMapping) -> None:
        """Define a field mapping.

        Mappings apply to documents indexed afterwards.

        Raises:
            ValueError: If the mapping names an unknown analyzer
        """
        self._get_analyzer(mapping.analyzer)
        with self._lock:
            self._field_mappings[mapping.name] = mapping

    def get_mapping(self, field_name: str) -> FieldMapping:
        """Mapping of a field, or the configured default."""
        mapping = self._field_mappings.get(field_name)
        if mapping is None:
            mapping = FieldMapping(
                name=field_name,
                analyzer=self.config.analyzer,
                store_positions=self.config.store_positions,
            )
        return mapping

    def index(self, document: Document) -> str:
        """Index a document, replacing any document with the same ID.

        Returns:
            Document ID

        Raises:
            TypeError: If a field holds a value that cannot be indexed
            ValueError: If a term cannot be stored in a term vector

        On either error the index is left unchanged.
        """
        self._check_open()
        with self._lock:
            analyzed = []
            for field_name, value in document.fields.items():
                mapping = self.get_mapping(field_name)
                if not mapping.index or value is None:
                    continue
                tokens = self._field_tokens(mapping, value)
                if tokens:
                    analyzed.append((mapping, tokens, self._encode_vector(mapping, tokens)))

            self._state = IndexState.INDEXING
            try:
                if document.id in self._doc_numbers:
                    self._remove(document.id)

                doc = self._next_doc
                self._next_doc += 1
                self._doc_numbers[document.id] = doc
                self._documents[doc] = document

                for mapping, tokens, vector in analyzed:
                    self._index_field(doc, mapping, tokens, vector)

                self._last_modified = datetime.now()
            finally:
                self._state = IndexState.READY

        logger.debug(f"Indexed document: {document.id} as doc {doc}")
        return document.id

    def _index_field(
        self,
        doc: int,
        mapping: FieldMapping,
        tokens: List[Tuple[str, int, int]],
        vector: bytes,
    ) -> None:
        if mapping.name not in self._field_indexes:
            self._field_indexes[mapping.name] = InvertedIndex(
                field_name=mapping.name,
                store_positions=mapping.store_positions,
            )
        index = self._field_indexes[mapping.name]
        index.index_document(doc, tokens)
        self._term_vectors.put_encoded(doc, mapping.name, vector)

    def _encode_vector(self, mapping: FieldMapping, tokens: List[Tuple[str, int, int]]) -> bytes:
        occurrences: Dict[str, List[int]] = {}
        for text, position, _ in tokens:
            occurrences.setdefault(text, []).append(position)
        index = self._field_indexes.get(mapping.name)
        store_positions = index.store_positions if index is not None else mapping.store_positions
        return encode_field_vector(occurrences, store_positions)

    def _field_tokens(self, mapping: FieldMapping, value: Any) -> List[Tuple[str, int, int]]:
        """Analyze a field value into (term, position, offset) tuples."""
        values = value if isinstance(value, (list, tuple)) else [value]
        analyzer = self._get_analyzer(mapping.analyzer)

        tokens: List[Tuple[str, int, int]] = []
        base_position = 0
        for item in values:
            if item is None:
                continue
            if isinstance(item, bool):
                item_tokens = [(str(item).lower(), base_position, 0)]
            elif isinstance(item, (int, float)):
                item_tokens = [(str(item), base_position, 0)]
            elif isinstance(item, str):
                item_tokens = analyzer.get_tokens_with_positions(item, base_position)
            else:
                raise TypeError(
                    f"Unsupported value for field {mapping.name}: {type(item).__name__}"
                )

            if item_tokens:
                tokens.extend(item_tokens)
                base_position = item_tokens[-1][1] + 1 + self.config.position_increment_gap
        return tokens

    def bulk_index(self, documents: Iterable[Document]) -> int:
        """Index several documents.

        Returns:
            Number of documents indexed
        """
        count = 0
        for document in documents:
            try:
                self.index(document)
                count += 1
            except (TypeError, ValueError) as e:
                logger.error(f"Failed to index {document.id}: {e}")
        return count

    def delete(self, doc_id: str) -> bool:
        """Delete a document.

        Returns:
            True if the document existed
        """
        with self._lock:
            if doc_id not in self._doc_numbers:
                return False
            self._remove(doc_id)
            self._last_modified = datetime.now()
        logger.debug(f"Deleted document: {doc_id}")
        return True

    def _remove(self, doc_id: str) -> None:
        doc = self._doc_numbers.pop(doc_id)
        del self._documents[doc]
        for index in self._field_indexes.values():
            index.delete_document(doc)
        self._term_vectors.delete(doc)

    def get(self, doc_id: str) -> Optional[Document]:
        doc = self._doc_numbers.get(doc_id)
        return self._documents.get(doc) if doc is not None else None

    def exists(self, doc_id: str) -> bool:
        return doc_id in self._doc_numbers

    def reader(self) -> IndexReader:
        """Read-only view of the current index."""
        with self._lock:
            return IndexReader(
                field_indexes=dict(self._field_indexes),
                term_vectors=self._term_vectors,
                live_docs=set(self._documents),
                max_doc=self._next_doc,
            )

    def parser(self) -> QueryParser:
        """Query parser using the engine's field analyzers."""
        with self._lock:
            analyzers = {
                name: self._get_analyzer(mapping.analyzer)
                for name, mapping in self._field_mappings.items()
            }
        return QueryParser(
            default_field=self.config.default_field,
            default_operator=BooleanOperator(self.config.default_operator.upper()),
            analyzers=analyzers,
            default_analyzer=self._get_analyzer(self.config.analyzer),
        )

    def build_query(
        self,
        query: Union[str, QueryNode],
        boost: Optional[float] = None,
    ) -> PositionMatchQuery:
        """Wrap a query string or tree in a position match query."""
        if isinstance(query, str):
            parsed = self.parser().parse(query)
            if parsed.parse_errors:
                logger.warning(f"Query parsed with errors: {parsed.parse_errors}")
            query = parsed.root

        if isinstance(query, PositionMatchQuery):
            if boost is not None:
                query = PositionMatchQuery(query=query.query, boost=boost)
            return query

        return PositionMatchQuery(
            query=query,
            boost=self.config.default_boost if boost is None else boost,
        )

    def search(
        self,
        query: Union[str, QueryNode],
        boost: Optional[float] = None,
        limit: Optional[int] = None,
        offset: int = 0,
        min_score: Optional[float] = None,
        explain: bool = False,
    ) -> SearchResult:
        """Search the index.

        Args:
            query: Query string or query tree
            boost: Multiplier for the summed position score; only applied
                when positive
            limit: Maximum hits to return
            offset: Hits to skip
            min_score: Drop hits scoring below this
            explain: Attach an explanation to each hit

        Returns:
            Search result

        Raises:
            ScorerConstructionError: If the query cannot be scored against
                the index
        """
        self._check_open()
        start = time.time()

        position_query = self.build_query(query, boost)
        limit = self.config.default_limit if limit is None else limit
        context = QueryContext(
            timeout_ms=self.config.timeout_ms,
            offset=offset,
            limit=min(limit, self.config.max_results),
            min_score=min_score,
            explain=explain,
        )

        executor = QueryExecutor(self.reader(), self.position_config)
        results, stats = executor.execute(position_query, context)

        hits = []
        for scored in results:
            document = self._documents.get(scored.doc)
            if document is None:
                continue
            hits.append(SearchHit(
                id=document.id,
                doc=scored.doc,
                score=scored.score,
                fields=self._stored_fields(document),
                explanation=scored.explanation,
            ))

        with self._lock:
            self._query_count += 1

        return SearchResult(
            hits=hits,
            total_hits=stats.collected_hits,
            took_ms=(time.time() - start) * 1000,
            max_score=max((h.score for h in hits), default=0.0),
            query=position_query.to_string(),
            timed_out=stats.timed_out,
        )

    def explain(
        self,
        query: Union[str, QueryNode],
        doc_id: str,
        boost: Optional[float] = None,
    ) -> Optional[Explanation]:
        """Explain how a document scores for a query.

        Returns:
            Explanation, or None if the document does not exist
        """
        doc = self._doc_numbers.get(doc_id)
        if doc is None:
            return None
        executor = QueryExecutor(self.reader(), self.position_config)
        return executor.explain(self.build_query(query, boost), doc)

    def _stored_fields(self, document: Document) -> Dict[str, Any]:
        return {
            name: value
            for name, value in document.fields.items()
            if self.get_mapping(name).store
        }

    def _get_analyzer(self, name: str) -> Analyzer:
        if name not in self._analyzers:
            self._analyzers[name] = get_analyzer(name)
        return self._analyzers[name]

    def _check_open(self) -> None:
        if self._state == IndexState.CLOSED:
            raise ValueError(f"Search engine is closed: {self.config.index_name}")

    def get_stats(self) -> IndexStats:
        with self._lock:
            return IndexStats(
                doc_count=len(self._documents),
                field_count=len(self._field_indexes),
                term_count=sum(index.term_count for index in self._field_indexes.values()),
                query_count=self._query_count,
                last_modified=self._last_modified,
            )

    @property
    def state(self) -> IndexState:
        return self._state

    def __enter__(self) -> "SearchEngine":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


__all__ = [
    "SearchEngine",
    "SearchConfig",
    "FieldMapping",
    "Document",
    "SearchHit",
    "SearchResult",
    "IndexStats",
    "IndexState",
]
