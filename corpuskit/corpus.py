"""
Corpus of short documents with schema-checked metadata.

A Corpus is built once from parallel sequences of texts and metadata rows
and never mutated afterwards. Document ids are the 1-based positions of the
input texts; subsetting keeps the original ids.

Malformed inputs (non-strings, undecodable bytes) do not abort the build:
the document is skipped and a DocumentWarning is recorded, so one bad row
in a large batch does not void the rest.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterator, List, Mapping, Optional, Sequence, Tuple

from .errors import InvalidRangeError, PatternError, SchemaMismatchError
from .patterns import BasePatternMatcher, default_matcher
from .tokens.tokenizer import Token, TokenizerOptions, tokenize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Document:
    """Single document: id, raw text and read-only metadata"""
    id: int
    raw_text: str
    # Metadata proxies are unhashable; hash on id and text only
    metadata: Mapping[str, Any] = field(hash=False)


@dataclass(frozen=True)
class DocumentWarning:
    """Input row skipped during corpus construction"""
    document_id: int
    message: str


@dataclass(frozen=True)
class KwicResult:
    """Keyword-in-context hit"""
    document_id: int
    position: int  # Token index of the first matched token
    pre_context: Tuple[Token, ...]
    match: Tuple[Token, ...]
    post_context: Tuple[Token, ...]

    @property
    def keyword(self) -> str:
        return " ".join(t.text for t in self.match)


@dataclass(frozen=True)
class DocumentSummary:
    """Token diagnostics for one document"""
    document_id: int
    tokens: int
    types: int


def _decode(raw: Any) -> str:
    """Return raw as str or raise ValueError describing why it is unusable"""
    if isinstance(raw, bytes):
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ValueError(f"invalid UTF-8 at byte {e.start}") from e
    if not isinstance(raw, str):
        raise ValueError(f"expected str or bytes, got {type(raw).__name__}")
    try:
        raw.encode("utf-8")
    except UnicodeEncodeError as e:
        # Lone surrogates from a bad upstream decode
        raise ValueError(f"unencodable character at index {e.start}") from e
    return raw


class Corpus:
    """Ordered, immutable collection of documents"""

    def __init__(
        self,
        documents: Sequence[Document],
        metadata_schema: Sequence[str] = (),
        warnings: Sequence[DocumentWarning] = ()
    ):
        self._documents = tuple(documents)
        self._schema = tuple(metadata_schema)
        self._warnings = tuple(warnings)
        self._by_id = {doc.id: doc for doc in self._documents}

    @classmethod
    def build(
        cls,
        texts: Sequence[Any],
        metadata_rows: Optional[Sequence[Mapping[str, Any]]] = None
    ) -> "Corpus":
        """
        Build a corpus from raw texts and parallel metadata rows.

        Args:
            texts: Document texts (str, or UTF-8 bytes)
            metadata_rows: One mapping per text (optional). The schema is the
                union of all keys in first-seen order; missing fields are None.

        Returns:
            Corpus with ids 1..N by input position (skipped rows leave gaps)

        Raises:
            SchemaMismatchError: Row count differs from text count, or a row
                is not a mapping

        Example:
            >>> corpus = Corpus.build(
            ...     ["we debated brexit today", "@bbc live now"],
            ...     [{"user": "ann", "retweets": 3}, {"user": "bbc"}]
            ... )
            >>> corpus.get(2).metadata["retweets"] is None
            True
        """
        texts = list(texts)
        if metadata_rows is None:
            metadata_rows = [{} for _ in texts]
        else:
            metadata_rows = list(metadata_rows)

        if len(metadata_rows) != len(texts):
            logger.error(f"Metadata rows ({len(metadata_rows)}) do not match texts ({len(texts)})")
            raise SchemaMismatchError(
                f"Got {len(texts)} texts but {len(metadata_rows)} metadata rows"
            )

        schema: List[str] = []
        for index, row in enumerate(metadata_rows, start=1):
            if not isinstance(row, Mapping):
                raise SchemaMismatchError(
                    f"Metadata row {index} is {type(row).__name__}, expected a mapping"
                )
            for field in row:
                if field not in schema:
                    schema.append(field)

        documents = []
        warnings = []
        for doc_id, (raw, row) in enumerate(zip(texts, metadata_rows), start=1):
            try:
                text = _decode(raw)
            except ValueError as e:
                logger.warning(f"Skipping document {doc_id}: {e}")
                warnings.append(DocumentWarning(doc_id, str(e)))
                continue

            metadata = MappingProxyType({field: row.get(field) for field in schema})
            documents.append(Document(doc_id, text, metadata))

        logger.debug(f"Built corpus: {len(documents)} documents, {len(warnings)} skipped, schema={schema}")
        return cls(documents, schema, warnings)

    @property
    def documents(self) -> Tuple[Document, ...]:
        return self._documents

    @property
    def metadata_schema(self) -> Tuple[str, ...]:
        return self._schema

    @property
    def warnings(self) -> Tuple[DocumentWarning, ...]:
        return self._warnings

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents)

    def __repr__(self) -> str:
        return f"Corpus(documents={len(self._documents)}, schema={list(self._schema)})"

    def get(self, document_id: int) -> Document:
        """Look up a document by id (KeyError if absent)"""
        return self._by_id[document_id]

    def texts(self) -> List[str]:
        return [doc.raw_text for doc in self._documents]

    def subset(self, predicate: Callable[[Mapping[str, Any]], bool]) -> "Corpus":
        """
        Keep documents whose metadata satisfies predicate.

        Order and ids are preserved; the schema is unchanged.

        Example:
            >>> corpus.subset(lambda meta: meta["user"] == "bbc")
        """
        kept = [doc for doc in self._documents if predicate(doc.metadata)]
        return Corpus(kept, self._schema)

    def kwic(
        self,
        pattern: str,
        window: int = 5,
        case_sensitive: bool = False,
        options: Optional[TokenizerOptions] = None,
        matcher: Optional[BasePatternMatcher] = None,
        phrase: bool = False
    ) -> List[KwicResult]:
        """
        Keyword-in-context search.

        Each token's text is matched with the pattern matcher (regex search,
        not substring search on raw text). The whole pattern is one regex,
        spaces included, unless phrase=True: then it is split on whitespace
        and each part must match consecutive tokens.

        Args:
            pattern: Regex, or whitespace-separated regexes when phrase=True
            window: Max context tokens on each side (shorter at document edges)
            case_sensitive: Case-sensitive token matching
            options: Tokenizer options (default options if None)
            matcher: Pattern matcher backend (default: re-based matcher)
            phrase: Treat whitespace in the pattern as a token boundary

        Returns:
            Hits in corpus order, then token order

        Raises:
            InvalidRangeError: window < 0
            PatternError: Empty or malformed pattern

        Example:
            >>> hit = Corpus.build(["we debated brexit today online"]).kwic("brexit", window=2)[0]
            >>> [t.text for t in hit.pre_context], hit.keyword, [t.text for t in hit.post_context]
            (['we', 'debated'], 'brexit', ['today', 'online'])
        """
        if window < 0:
            raise InvalidRangeError(f"KWIC window must be >= 0, got {window}")
        if not isinstance(pattern, str):
            raise PatternError(repr(pattern), "pattern must be a string")
        if not pattern.strip():
            raise PatternError(pattern, "empty pattern")

        parts = pattern.split() if phrase else [pattern]

        matcher = matcher or default_matcher
        for part in parts:
            # Surface compile errors even for an empty corpus
            matcher.contains("", part, case_sensitive)

        results = []
        span = len(parts)
        for doc in self._documents:
            tokens = tokenize(doc.raw_text, options)
            for i in range(len(tokens) - span + 1):
                if not all(
                    matcher.contains(tokens[i + j].text, part, case_sensitive)
                    for j, part in enumerate(parts)
                ):
                    continue
                results.append(KwicResult(
                    document_id=doc.id,
                    position=i,
                    pre_context=tuple(tokens[max(0, i - window):i]),
                    match=tuple(tokens[i:i + span]),
                    post_context=tuple(tokens[i + span:i + span + window]),
                ))

        logger.debug(f"KWIC '{pattern}': {len(results)} hits in {len(self._documents)} documents")
        return results

    def summary(self) -> List[DocumentSummary]:
        """Token and type counts per document (default tokenizer options)"""
        summaries = []
        for doc in self._documents:
            tokens = tokenize(doc.raw_text)
            summaries.append(DocumentSummary(
                document_id=doc.id,
                tokens=len(tokens),
                types=len({t.text for t in tokens}),
            ))
        return summaries
