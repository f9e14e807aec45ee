"""
Tests for the inverted index, term vectors and the index reader.
"""

import pytest

from positionmatch.index.inverted import InvertedIndex, Posting, PostingList, Term
from positionmatch.index.reader import IndexReader
from positionmatch.index.term_vectors import (
    CorruptVectorError,
    TermVectorStore,
    decode_field_vector,
    encode_field_vector,
)


def tokens(*texts):
    return [(text, position, 0) for position, text in enumerate(texts)]


class TestTerm:
    def test_value_equality(self):
        """Terms with the same field and text are equal and hash alike."""
        assert Term("body", "fox") == Term("body", "fox")
        assert len({Term("body", "fox"), Term("body", "fox")}) == 1

    def test_ordering(self):
        """Terms order by field, then text."""
        terms = [Term("title", "a"), Term("body", "z"), Term("body", "b")]
        assert sorted(terms) == [Term("body", "b"), Term("body", "z"), Term("title", "a")]

    def test_parse(self):
        """Parses field-qualified and bare terms."""
        assert Term.parse("title:fox") == Term("title", "fox")
        assert Term.parse("fox", default_field="body") == Term("body", "fox")
        assert str(Term("title", "fox")) == "title:fox"


class TestPostingList:
    def test_sorted_by_doc(self):
        """Postings stay sorted whatever the insertion order."""
        postings = PostingList(Term("body", "fox"))
        for doc in (7, 2, 5):
            postings.add(Posting(doc=doc))
        assert postings.doc_ids() == [2, 5, 7]

    def test_merge_same_doc(self):
        """Adding to an existing document merges the postings."""
        postings = PostingList(Term("body", "fox"))
        postings.add(Posting(doc=1, term_freq=1, positions=[4]))
        postings.add(Posting(doc=1, term_freq=1, positions=[2]))

        assert len(postings) == 1
        assert postings.get(1).positions == [2, 4]
        assert postings.total_freq == 2

    def test_remove(self):
        """Removed documents are no longer contained."""
        postings = PostingList(Term("body", "fox"), [Posting(doc=1), Posting(doc=3)])
        assert postings.remove(1)
        assert not postings.remove(1)
        assert 1 not in postings and 3 in postings


class TestInvertedIndex:
    def test_index_document_returns_occurrences(self):
        """Indexing reports each term's positions."""
        index = InvertedIndex("body")
        occurrences = index.index_document(0, tokens("the", "fox", "the"))

        assert occurrences == {"the": [0, 2], "fox": [1]}
        assert index.postings("the").get(0).positions == [0, 2]
        assert index.get_field_length(0) == 3

    def test_without_positions(self):
        """Postings carry no positions when the field does not store them."""
        index = InvertedIndex("body", store_positions=False)
        index.index_document(0, tokens("fox", "fox"))

        posting = index.postings("fox").get(0)
        assert posting.positions == []
        assert posting.term_freq == 2

    def test_delete_document(self):
        """Deleting drops the document and any emptied terms."""
        index = InvertedIndex("body")
        index.index_document(0, tokens("fox", "dog"))
        index.index_document(1, tokens("fox"))

        assert index.delete_document(0)
        assert index.postings("dog") is None
        assert index.postings("fox").doc_ids() == [1]
        assert not index.delete_document(0)

    def test_stats(self):
        """Statistics follow indexing."""
        index = InvertedIndex("body")
        index.index_document(0, tokens("a", "b"))
        index.index_document(1, tokens("a", "b", "c", "d"))

        assert index.document_count == 2
        assert index.term_count == 4
        assert index.average_field_length == 3.0
        assert index.terms()[0] == Term("body", "a")


class TestTermVectors:
    def test_encode_decode(self):
        """A decoded vector has the encoded terms and positions."""
        vector = decode_field_vector(encode_field_vector({"fox": [5, 2], "dog": [7]}))

        assert len(vector) == 2
        assert vector.has_positions
        assert vector.seek("fox").positions == [2, 5]
        assert vector.seek("fox").first_position() == 2
        assert [e.text for e in vector] == ["dog", "fox"]
        assert vector.seek("cat") is None

    def test_without_positions(self):
        """Frequency-only vectors have no first position."""
        vector = decode_field_vector(encode_field_vector({"fox": [0, 3]}, store_positions=False))
        entry = vector.seek("fox")

        assert not vector.has_positions
        assert entry.freq == 2
        assert entry.positions is None
        assert entry.first_position() is None

    def test_unicode_terms(self):
        """Non-ASCII term text survives encoding."""
        vector = decode_field_vector(encode_field_vector({"café": [1]}))
        assert "café" in vector

    @pytest.mark.parametrize("mangle", [
        lambda data: b"XX" + data[2:],
        lambda data: data[:-2],
        lambda data: data + b"\x00",
        lambda data: data[:3],
    ], ids=["bad-magic", "truncated", "trailing", "short-header"])
    def test_corrupt(self, mangle):
        """Damaged encodings raise CorruptVectorError."""
        data = encode_field_vector({"fox": [1, 2]})
        with pytest.raises(CorruptVectorError):
            decode_field_vector(mangle(data))

    def test_corrupt_is_value_error(self):
        """CorruptVectorError can be handled as a ValueError."""
        assert issubclass(CorruptVectorError, ValueError)

    def test_store(self):
        """The store decodes on lookup and forgets deleted documents."""
        store = TermVectorStore()
        store.add(0, "body", {"fox": [1]})
        store.add(0, "title", {})

        assert store.fields(0) == ["body"]
        assert store.get_field_vector(0, "body").seek("fox").first_position() == 1
        assert store.get_field_vector(0, "title") is None
        assert store.delete(0)
        assert store.get_field_vector(0, "body") is None


class TestIndexReader:
    def test_postings_and_vectors(self, reader):
        """The reader exposes postings and field vectors."""
        assert reader.postings(Term("body", "fox")).doc_ids() == [0, 1]
        assert reader.postings(Term("missing", "fox")) is None
        assert reader.get_field_vector(1, "body").seek("jumps").first_position() == 5

    def test_deleted_documents_hidden(self):
        """Vectors of documents outside the live set are not returned."""
        store = TermVectorStore()
        store.add(0, "body", {"fox": [0]})
        reader = IndexReader({}, store, set(), 1)

        assert reader.get_field_vector(0, "body") is None
        assert reader.num_docs == 0

    def test_corrupt_vector_raises(self):
        """The reader surfaces damaged vectors to its caller."""
        store = TermVectorStore()
        store.put_encoded(0, "body", b"\x00")
        reader = IndexReader({}, store, {0}, 1)

        with pytest.raises(CorruptVectorError):
            reader.get_field_vector(0, "body")
