"""PositionMatch Index Components.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from positionmatch.index.inverted import InvertedIndex, Posting, PostingList, Term
from positionmatch.index.term_vectors import (
    CorruptVectorError,
    FieldVector,
    TermVectorEntry,
    TermVectorStore,
    decode_field_vector,
    encode_field_vector,
)
from positionmatch.index.reader import IndexReader

__all__ = [
    "InvertedIndex",
    "Posting",
    "PostingList",
    "Term",
    "CorruptVectorError",
    "FieldVector",
    "TermVectorEntry",
    "TermVectorStore",
    "decode_field_vector",
    "encode_field_vector",
    "IndexReader",
]
