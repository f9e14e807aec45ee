"""PositionMatch Term Vectors - Per-Document Token Position Store.

A term vector is the forward view of one document's field: every term
the field contains, with its frequency and (when the field stores them)
its positions. Vectors are kept in a compact binary encoding and decoded
on lookup, so a damaged vector surfaces as ``CorruptVectorError`` at
read time.

Encoding (big-endian)::

    magic "TV" | version u8 | flags u8 | term count u32
    per term: text length u16 | utf-8 text | freq u32 | [freq x position u32]

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import logging
import struct
import threading
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional, Sequence

logger = logging.getLogger(__name__)

_MAGIC = b"TV"
_VERSION = 1
_FLAG_POSITIONS = 0x01

_HEADER = struct.Struct(">2sBBI")
_TEXT_LEN = struct.Struct(">H")
_U32 = struct.Struct(">I")


class CorruptVectorError(ValueError):
    """Raised when an encoded term vector cannot be decoded."""


@dataclass(frozen=True)
class TermVectorEntry:
    """One term of a field vector.

    Attributes:
        text: Term text
        freq: Occurrences in the field
        positions: Ascending positions, or None when positions were not
            indexed for the field
    """

    text: str
    freq: int
    positions: Optional[Sequence[int]] = None

    @property
    def has_positions(self) -> bool:
        return self.positions is not None

    def first_position(self) -> Optional[int]:
        """Position of the first occurrence.

        None when positions were not indexed or the entry has none.
        """
        if not self.positions:
            return None
        return self.positions[0]


class FieldVector:
    """Decoded term vector of one field in one document."""

    def __init__(self, entries: Mapping[str, TermVectorEntry], has_positions: bool):
        self._entries = dict(entries)
        self.has_positions = has_positions

    def seek(self, text: str) -> Optional[TermVectorEntry]:
        """Exact lookup of a term text."""
        return self._entries.get(text)

    def __iter__(self) -> Iterator[TermVectorEntry]:
        for text in sorted(self._entries):
            yield self._entries[text]

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, text: str) -> bool:
        return text in self._entries


def encode_field_vector(
    occurrences: Mapping[str, Sequence[int]],
    store_positions: bool = True,
) -> bytes:
    """Encode ``{term text: positions}`` into the binary vector format."""
    flags = _FLAG_POSITIONS if store_positions else 0
    parts = [_HEADER.pack(_MAGIC, _VERSION, flags, len(occurrences))]

    for text in sorted(occurrences):
        positions = sorted(occurrences[text])
        raw = text.encode("utf-8")
        if len(raw) > 0xFFFF:
            raise ValueError(f"Term too long for term vector: {text[:32]}...")
        parts.append(_TEXT_LEN.pack(len(raw)))
        parts.append(raw)
        parts.append(_U32.pack(len(positions)))
        if store_positions:
            parts.append(struct.pack(f">{len(positions)}I", *positions))

    return b"".join(parts)


def decode_field_vector(data: bytes) -> FieldVector:
    """Decode a binary field vector.

    Raises:
        CorruptVectorError: If the data is truncated, has a bad header or
            contains undecodable text
    """
    try:
        magic, version, flags, count = _HEADER.unpack_from(data, 0)
        if magic != _MAGIC or version != _VERSION:
            raise CorruptVectorError(f"Bad term vector header: {magic!r} v{version}")

        has_positions = bool(flags & _FLAG_POSITIONS)
        offset = _HEADER.size
        entries: Dict[str, TermVectorEntry] = {}

        for _ in range(count):
            (text_len,) = _TEXT_LEN.unpack_from(data, offset)
            offset += _TEXT_LEN.size
            text = data[offset:offset + text_len].decode("utf-8")
            if len(text.encode("utf-8")) != text_len:
                raise CorruptVectorError("Truncated term text")
            offset += text_len
            (freq,) = _U32.unpack_from(data, offset)
            offset += _U32.size

            positions: Optional[List[int]] = None
            if has_positions:
                positions = list(struct.unpack_from(f">{freq}I", data, offset))
                offset += freq * _U32.size

            entries[text] = TermVectorEntry(text, freq, positions)

        if offset != len(data):
            raise CorruptVectorError(f"{len(data) - offset} trailing bytes in term vector")
    except (struct.error, UnicodeDecodeError) as e:
        raise CorruptVectorError(str(e)) from e

    return FieldVector(entries, has_positions)


class TermVectorStore:
    """Stores encoded term vectors keyed by document and field."""

    def __init__(self):
        self._vectors: Dict[int, Dict[str, bytes]] = {}
        self._lock = threading.RLock()

    def add(
        self,
        doc: int,
        field_name: str,
        occurrences: Mapping[str, Sequence[int]],
        store_positions: bool = True,
    ) -> None:
        """Store the vector of one field.

        Args:
            doc: Document number
            field_name: Field name
            occurrences: Term text to its positions in the field
            store_positions: Keep positions, or frequencies only
        """
        if not occurrences:
            return
        encoded = encode_field_vector(occurrences, store_positions)
        with self._lock:
            self._vectors.setdefault(doc, {})[field_name] = encoded

    def put_encoded(self, doc: int, field_name: str, data: bytes) -> None:
        """Store an already encoded vector as-is."""
        with self._lock:
            self._vectors.setdefault(doc, {})[field_name] = data

    def get_encoded(self, doc: int, field_name: str) -> Optional[bytes]:
        with self._lock:
            return self._vectors.get(doc, {}).get(field_name)

    def get_field_vector(self, doc: int, field_name: str) -> Optional[FieldVector]:
        """Decode the vector of ``field_name`` in ``doc``.

        Returns:
            The field vector, or None if the document has no vector for
            the field

        Raises:
            CorruptVectorError: If the stored vector is damaged
        """
        data = self.get_encoded(doc, field_name)
        if data is None:
            return None
        return decode_field_vector(data)

    def fields(self, doc: int) -> List[str]:
        """Fields with a stored vector for ``doc``."""
        with self._lock:
            return sorted(self._vectors.get(doc, {}))

    def delete(self, doc: int) -> bool:
        with self._lock:
            return self._vectors.pop(doc, None) is not None

    def __len__(self) -> int:
        return len(self._vectors)


__all__ = [
    "CorruptVectorError",
    "FieldVector",
    "TermVectorEntry",
    "TermVectorStore",
    "decode_field_vector",
    "encode_field_vector",
]
