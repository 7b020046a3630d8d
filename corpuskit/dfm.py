"""
Sparse document-feature matrix (DFM).

Build pipeline per document:
1. Tokenize (TokenizerOptions)
2. Stem word-kind tokens (if a language is given)
3. Drop stopwords (matched on the lowercased, unstemmed token text)
4. Expand n-grams over the surviving tokens
5. Count features into the document's row

Feature extraction is a pure function of one document's text, so it runs in
a thread pool. Column indices are assigned only by FeatureIndex during the
sequential merge, in corpus order, so two builds from the same corpus and
options always yield the same column order.

Storage is one {column: count} dict per row; zero counts are never stored.
The matrix keeps no reference to the Corpus it was built from.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple

import numpy as np
import scipy.sparse as sp

from .config import get_settings
from .corpus import Corpus
from .errors import InvalidThresholdError
from .tokens.ngrams import expand_tokens, validate_range
from .tokens.stemmer import BaseStemmer, get_stemmer
from .tokens.tokenizer import Token, TokenKind, TokenizerOptions, tokenize

logger = logging.getLogger(__name__)


class FeatureIndex:
    """
    Aggregator assigning column indices in first-seen order.

    Not thread-safe: exactly one merge loop owns an instance.
    """

    def __init__(self):
        self._index: Dict[str, int] = {}
        self._labels: List[str] = []

    def add(self, features: Iterable[str]) -> Dict[int, int]:
        """Register one document's features and return its {column: count} row"""
        row: Dict[int, int] = {}
        for feature in features:
            column = self._index.get(feature)
            if column is None:
                column = len(self._labels)
                self._index[feature] = column
                self._labels.append(feature)
            row[column] = row.get(column, 0) + 1
        return row

    @property
    def labels(self) -> List[str]:
        return list(self._labels)

    def __len__(self) -> int:
        return len(self._labels)


@dataclass(frozen=True)
class FeaturePipeline:
    """Per-document feature extraction with fixed configuration"""
    tokenizer_options: TokenizerOptions
    stemmer: Optional[BaseStemmer] = None
    stopwords: FrozenSet[str] = frozenset()
    min_order: int = 1
    max_order: int = 1
    separator: str = "_"
    mixed_kinds: bool = True

    def tokens(self, text: str) -> List[Token]:
        """Tokens surviving stemming and stopword removal"""
        kept = []
        for token in tokenize(text, self.tokenizer_options):
            if self.stopwords and token.text.lower() in self.stopwords:
                continue
            if self.stemmer is not None and token.kind == TokenKind.WORD:
                token = Token(self.stemmer.stem(token.text), token.kind)
            kept.append(token)
        return kept

    def features(self, text: str) -> List[str]:
        return expand_tokens(
            self.tokens(text),
            self.min_order,
            self.max_order,
            self.separator,
            self.mixed_kinds,
        )


class DocumentFeatureMatrix:
    """Sparse document x feature count matrix (immutable)"""

    def __init__(
        self,
        row_labels: Sequence[int],
        column_labels: Sequence[str],
        rows: Sequence[Mapping[int, int]]
    ):
        if len(rows) != len(row_labels):
            raise ValueError(f"Got {len(rows)} rows for {len(row_labels)} row labels")

        self._row_labels = tuple(row_labels)
        self._column_labels = tuple(column_labels)
        self._rows = tuple({c: v for c, v in row.items() if v > 0} for row in rows)
        self._column_index = {label: i for i, label in enumerate(self._column_labels)}
        self._row_index = {label: i for i, label in enumerate(self._row_labels)}

        if len(self._column_index) != len(self._column_labels):
            raise ValueError("Duplicate column labels")

    @classmethod
    def build(
        cls,
        corpus: Corpus,
        tokenizer_options: Optional[TokenizerOptions] = None,
        language: Optional[str] = None,
        ngram_range: Tuple[int, int] = (1, 1),
        stopwords: Optional[Iterable[str]] = None,
        separator: Optional[str] = None,
        mixed_kind_ngrams: bool = True,
        workers: Optional[int] = None
    ) -> "DocumentFeatureMatrix":
        """
        Build a DFM from a corpus.

        Args:
            corpus: Source corpus (rows follow corpus order, labelled by document id)
            tokenizer_options: TokenizerOptions (default options if None)
            language: Stemmer language code, or None to skip stemming
            ngram_range: (min_order, max_order) inclusive
            stopwords: Words to drop (compared lowercased), or None
            separator: N-gram join string (default: CORPUSKIT_NGRAM_SEPARATOR)
            mixed_kind_ngrams: Allow n-grams spanning tokens of different kinds
            workers: Extraction threads (default: CORPUSKIT_WORKERS; 1 = inline)

        Returns:
            DocumentFeatureMatrix

        Raises:
            InvalidRangeError: Bad ngram_range
            InvalidThresholdError: workers < 1
            UnsupportedLanguageError: Unknown language code
            TypeError: stopwords given as a bare string

        Example:
            >>> corpus = Corpus.build(["Brexit talks", "more brexit news"])
            >>> dfm = DocumentFeatureMatrix.build(corpus)
            >>> dfm.column_labels
            ('brexit', 'talks', 'more', 'news')
        """
        min_order, max_order = ngram_range
        if isinstance(stopwords, str):
            raise TypeError("stopwords must be a collection of words, not a single string")
        validate_range(min_order, max_order)
        stemmer = get_stemmer(language) if language else None

        if workers is None or separator is None:
            settings = get_settings()
            workers = settings.workers if workers is None else workers
            separator = settings.ngram_separator if separator is None else separator
        if workers < 1:
            raise InvalidThresholdError(f"workers must be >= 1, got {workers}")

        pipeline = FeaturePipeline(
            tokenizer_options=tokenizer_options or TokenizerOptions(),
            stemmer=stemmer,
            stopwords=frozenset(w.lower() for w in stopwords) if stopwords else frozenset(),
            min_order=min_order,
            max_order=max_order,
            separator=separator,
            mixed_kinds=mixed_kind_ngrams,
        )

        texts = [doc.raw_text for doc in corpus.documents]
        index = FeatureIndex()
        rows = []

        if workers == 1 or len(texts) <= 1:
            for text in texts:
                rows.append(index.add(pipeline.features(text)))
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                # map() yields in submission order: merge stays sequential and deterministic
                for features in executor.map(pipeline.features, texts):
                    rows.append(index.add(features))

        dfm = cls([doc.id for doc in corpus.documents], index.labels, rows)
        logger.info(
            f"Built DFM: {dfm.row_count} documents x {dfm.column_count} features "
            f"({dfm.nnz} non-zero cells, ngrams={min_order}-{max_order}, language={language}, workers={workers})"
        )
        return dfm

    @property
    def row_labels(self) -> Tuple[int, ...]:
        return self._row_labels

    @property
    def column_labels(self) -> Tuple[str, ...]:
        return self._column_labels

    @property
    def row_count(self) -> int:
        return len(self._row_labels)

    @property
    def column_count(self) -> int:
        return len(self._column_labels)

    @property
    def nnz(self) -> int:
        """Number of stored (non-zero) cells"""
        return sum(len(row) for row in self._rows)

    def __repr__(self) -> str:
        return f"DocumentFeatureMatrix(rows={self.row_count}, columns={self.column_count}, nnz={self.nnz})"

    def __eq__(self, other) -> bool:
        if not isinstance(other, DocumentFeatureMatrix):
            return NotImplemented
        return (
            self._row_labels == other._row_labels
            and self._column_labels == other._column_labels
            and self._rows == other._rows
        )

    def _check_row(self, row: int) -> None:
        if not 0 <= row < len(self._rows):
            raise IndexError(f"Row {row} out of range (0..{len(self._rows) - 1})")

    def get(self, row: int, column: int) -> int:
        """Count at (row, column) by position; 0 when the cell is empty"""
        self._check_row(row)
        if not 0 <= column < len(self._column_labels):
            raise IndexError(f"Column {column} out of range (0..{len(self._column_labels) - 1})")
        return self._rows[row].get(column, 0)

    def row(self, row: int) -> Mapping[int, int]:
        """Read-only {column: count} view of one row"""
        self._check_row(row)
        return MappingProxyType(self._rows[row])

    def count(self, document_id: int, feature: str) -> int:
        """
        Count by labels.

        Raises:
            KeyError: Unknown document id (unknown features count 0)
        """
        column = self._column_index.get(feature)
        if column is None:
            return 0
        return self._rows[self._row_index[document_id]].get(column, 0)

    def document_frequency(self) -> List[int]:
        """Number of rows with a non-zero count, per column"""
        frequencies = [0] * len(self._column_labels)
        for row in self._rows:
            for column in row:
                frequencies[column] += 1
        return frequencies

    def total_counts(self) -> List[int]:
        """Sum of counts over all rows, per column"""
        totals = [0] * len(self._column_labels)
        for row in self._rows:
            for column, value in row.items():
                totals[column] += value
        return totals

    def trim(self, min_document_frequency: int = 1, min_term_frequency: Optional[int] = None) -> "DocumentFeatureMatrix":
        """
        Drop rare features.

        Columns with document frequency below min_document_frequency (or total
        count below min_term_frequency, if given) are removed. All rows are
        kept, even if they end up empty; surviving columns keep their order.

        Raises:
            InvalidThresholdError: A threshold below 1
        """
        if min_document_frequency < 1:
            raise InvalidThresholdError(f"min_document_frequency must be >= 1, got {min_document_frequency}")
        if min_term_frequency is not None and min_term_frequency < 1:
            raise InvalidThresholdError(f"min_term_frequency must be >= 1, got {min_term_frequency}")

        frequencies = self.document_frequency()
        totals = self.total_counts() if min_term_frequency is not None else None

        remap: Dict[int, int] = {}
        for column, df in enumerate(frequencies):
            if df < min_document_frequency:
                continue
            if totals is not None and totals[column] < min_term_frequency:
                continue
            remap[column] = len(remap)

        labels = [self._column_labels[c] for c in remap]
        rows = [
            {remap[c]: v for c, v in row.items() if c in remap}
            for row in self._rows
        ]

        logger.debug(f"Trimmed DFM: {self.column_count} -> {len(labels)} features (min_df={min_document_frequency}, min_tf={min_term_frequency})")
        return DocumentFeatureMatrix(self._row_labels, labels, rows)

    def top_features(self, n: int = 10) -> List[Tuple[str, int]]:
        """
        Most frequent features by total count.

        Ties keep column (first-seen) order. n beyond the column count
        returns every column.

        Raises:
            InvalidThresholdError: n < 0
        """
        if n < 0:
            raise InvalidThresholdError(f"n must be >= 0, got {n}")

        totals = self.total_counts()
        order = sorted(range(len(totals)), key=lambda c: -totals[c])  # sorted() is stable
        return [(self._column_labels[c], totals[c]) for c in order[:n]]

    def to_csr(self) -> sp.csr_matrix:
        """Export as a scipy.sparse CSR matrix (rows x columns, int64)"""
        indptr = [0]
        indices: List[int] = []
        data: List[int] = []
        for row in self._rows:
            for column in sorted(row):
                indices.append(column)
                data.append(row[column])
            indptr.append(len(indices))

        return sp.csr_matrix(
            (np.asarray(data, dtype=np.int64), np.asarray(indices, dtype=np.int64), np.asarray(indptr, dtype=np.int64)),
            shape=(self.row_count, self.column_count),
        )


def build_dfm(corpus: Corpus, **kwargs) -> DocumentFeatureMatrix:
    """Shortcut for DocumentFeatureMatrix.build()"""
    return DocumentFeatureMatrix.build(corpus, **kwargs)


def trim(dfm: DocumentFeatureMatrix, min_document_frequency: int = 1, min_term_frequency: Optional[int] = None) -> DocumentFeatureMatrix:
    return dfm.trim(min_document_frequency, min_term_frequency)


def top_features(dfm: DocumentFeatureMatrix, n: int = 10) -> List[Tuple[str, int]]:
    return dfm.top_features(n)
