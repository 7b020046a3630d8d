"""
Unit tests for Corpus construction, subsetting, KWIC and summaries.
"""

import pytest
from corpuskit.corpus import Corpus, DocumentWarning
from corpuskit.errors import InvalidRangeError, PatternError, SchemaMismatchError
from corpuskit.tokens.tokenizer import TokenizerOptions


def words(tokens):
    return [t.text for t in tokens]


class TestBuild:
    """Test corpus construction"""

    def test_ids_and_order(self, post_corpus, posts):
        """Test ids are 1-based input positions in input order"""
        assert [doc.id for doc in post_corpus] == [1, 2, 3, 4]
        assert post_corpus.texts() == posts
        assert len(post_corpus) == 4

    def test_schema_union_fills_missing(self, post_corpus):
        """Test every document has every schema field, None when missing"""
        assert post_corpus.metadata_schema == ("user", "retweets", "verified")
        for doc in post_corpus:
            assert set(doc.metadata) == {"user", "retweets", "verified"}
        assert post_corpus.get(4).metadata["retweets"] is None
        assert post_corpus.get(3).metadata["verified"] is False

    def test_no_metadata(self):
        """Test metadata rows are optional"""
        corpus = Corpus.build(["a", "b"])
        assert corpus.metadata_schema == ()
        assert dict(corpus.get(1).metadata) == {}

    def test_length_mismatch(self):
        """Test row count must equal text count"""
        with pytest.raises(SchemaMismatchError):
            Corpus.build(["a", "b"], [{"x": 1}])

    def test_non_mapping_row(self):
        """Test metadata rows must be mappings"""
        with pytest.raises(SchemaMismatchError):
            Corpus.build(["a"], [["x", 1]])

    def test_metadata_read_only(self, post_corpus):
        """Test documents cannot be mutated through metadata"""
        with pytest.raises(TypeError):
            post_corpus.get(1).metadata["user"] = "someone"

    def test_metadata_rows_copied(self):
        """Test later changes to input rows do not leak into the corpus"""
        row = {"user": "ann"}
        corpus = Corpus.build(["hi"], [row])
        row["user"] = "bob"
        assert corpus.get(1).metadata["user"] == "ann"

    def test_malformed_documents_skipped(self):
        """Test bad rows are skipped with warnings and the build continues"""
        corpus = Corpus.build(
            ["fine", b"\xff\xfe bad bytes", None, "also fine", "lone \udc80 surrogate"],
            [{"n": 1}, {"n": 2}, {"n": 3}, {"n": 4}, {"n": 5}],
        )
        assert [doc.id for doc in corpus] == [1, 4]
        assert [w.document_id for w in corpus.warnings] == [2, 3, 5]
        assert all(isinstance(w, DocumentWarning) for w in corpus.warnings)
        assert "UTF-8" in corpus.warnings[0].message

    def test_utf8_bytes_decoded(self):
        """Test valid UTF-8 bytes are accepted"""
        corpus = Corpus.build(["plain", "café".encode("utf-8")])
        assert corpus.get(2).raw_text == "café"
        assert corpus.warnings == ()

    def test_documents_hashable(self, post_corpus):
        """Test documents can be set members despite read-only metadata"""
        docs = list(post_corpus)
        assert len({hash(doc) for doc in docs}) == len(docs)
        assert set(docs) == set(post_corpus)
        assert post_corpus.get(1) == docs[0]


class TestSubset:
    """Test metadata predicate subsetting"""

    def test_keeps_ids_and_order(self, post_corpus):
        """Test ids are not renumbered"""
        subset = post_corpus.subset(lambda meta: meta["user"] == "ann")
        assert [doc.id for doc in subset] == [2, 4]
        assert subset.metadata_schema == post_corpus.metadata_schema

    def test_original_untouched(self, post_corpus):
        """Test subsetting returns a new corpus"""
        post_corpus.subset(lambda meta: False)
        assert len(post_corpus) == 4

    def test_predicate_on_missing_field(self, post_corpus):
        """Test None-filled fields are visible to predicates"""
        subset = post_corpus.subset(lambda meta: meta["retweets"] is None)
        assert [doc.id for doc in subset] == [4]


class TestKwic:
    """Test keyword-in-context search"""

    def test_window_context(self):
        """Test two tokens of context on each side"""
        corpus = Corpus.build(["we debated brexit today online"])
        hits = corpus.kwic("brexit", window=2)
        assert len(hits) == 1
        hit = hits[0]
        assert hit.document_id == 1
        assert hit.position == 2
        assert words(hit.pre_context) == ["we", "debated"]
        assert words(hit.match) == ["brexit"]
        assert words(hit.post_context) == ["today", "online"]
        assert hit.keyword == "brexit"

    def test_document_boundaries(self):
        """Test shorter context at start and end of a document"""
        hits = Corpus.build(["brexit now"]).kwic("brexit", window=5)
        assert words(hits[0].pre_context) == []
        assert words(hits[0].post_context) == ["now"]

    def test_every_match_every_document(self, post_corpus):
        """Test hits in corpus order then token order"""
        hits = post_corpus.kwic("brexit", window=1)
        assert [(h.document_id, h.position) for h in hits] == [
            (1, 5), (2, 2), (3, 0), (3, 1), (3, 2),
        ]
        assert words(hits[0].match) == ["#brexit"]

    def test_regex_pattern(self):
        """Test pattern is a regex searched in each token"""
        hits = Corpus.build(["brexiteers love brexit"]).kwic("^brexit$", window=1)
        assert [h.position for h in hits] == [2]

    def test_case_sensitivity(self):
        """Test case_sensitive with lowercase disabled"""
        corpus = Corpus.build(["Brexit brexit"])
        options = TokenizerOptions(lowercase=False)
        assert len(corpus.kwic("brexit", options=options)) == 2
        assert len(corpus.kwic("brexit", case_sensitive=True, options=options)) == 1

    def test_phrase(self):
        """Test whitespace-separated pattern matches consecutive tokens"""
        corpus = Corpus.build(["the european union said the union"])
        hits = corpus.kwic("european union", window=1, phrase=True)
        assert len(hits) == 1
        assert words(hits[0].match) == ["european", "union"]
        assert words(hits[0].pre_context) == ["the"]
        assert words(hits[0].post_context) == ["said"]

    def test_pattern_with_space_class_is_one_regex(self):
        """Test a pattern containing a space is matched whole against each token"""
        hits = Corpus.build(["we debated brexit today"]).kwic(r"^[^ ]+xit$", window=1)
        assert [h.position for h in hits] == [2]
        assert words(hits[0].match) == ["brexit"]

    def test_spaced_pattern_without_phrase_matches_no_token(self):
        """Test tokens never contain spaces, so a literal space finds nothing"""
        corpus = Corpus.build(["the european union said"])
        assert corpus.kwic("european union") == []

    def test_zero_window(self):
        """Test window=0 gives empty contexts"""
        hit = Corpus.build(["a b c"]).kwic("b", window=0)[0]
        assert hit.pre_context == () and hit.post_context == ()

    def test_negative_window(self, post_corpus):
        """Test negative windows are rejected"""
        with pytest.raises(InvalidRangeError):
            post_corpus.kwic("brexit", window=-1)

    def test_malformed_pattern(self):
        """Test PatternError even when there is nothing to search"""
        with pytest.raises(PatternError):
            Corpus.build([]).kwic("([a-z")

    def test_empty_pattern(self, post_corpus):
        """Test blank patterns are rejected"""
        with pytest.raises(PatternError):
            post_corpus.kwic("   ")


class TestSummary:
    """Test per-document diagnostics"""

    def test_token_and_type_counts(self):
        """Test counts use default tokenizer options"""
        corpus = Corpus.build(["The cat saw the dog .", ""])
        summary = corpus.summary()
        assert [(s.document_id, s.tokens, s.types) for s in summary] == [(1, 6, 5), (2, 0, 0)]
