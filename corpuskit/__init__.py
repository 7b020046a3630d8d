"""
corpuskit - quantitative text analysis core for short documents.

Turns collections of short texts (e.g. social-media posts) into:
- Corpus: ordered documents with schema-checked metadata, KWIC search
- DocumentFeatureMatrix: sparse document x feature counts with trimming
- Pattern matching: regex extraction/substitution over raw text

Usage:
    from corpuskit import Corpus, DocumentFeatureMatrix, ENGLISH_STOPWORDS

    corpus = Corpus.build(texts, metadata_rows)
    dfm = DocumentFeatureMatrix.build(corpus, language="en", stopwords=ENGLISH_STOPWORDS)
    dfm.trim(min_document_frequency=5).top_features(20)

Logging is opt-in: call configure_logging() once at application start.
"""

from .config import Settings, get_settings
from .corpus import Corpus, Document, DocumentSummary, DocumentWarning, KwicResult
from .dfm import DocumentFeatureMatrix, FeatureIndex, build_dfm, top_features, trim
from .errors import (
    CorpusKitError,
    InvalidRangeError,
    InvalidThresholdError,
    PatternError,
    SchemaMismatchError,
    UnsupportedLanguageError,
)
from .logging_config import configure_logging, setup_logging
from .patterns import BasePatternMatcher, Match, RegexPatternMatcher
from .tokens import (
    ENGLISH_STOPWORDS,
    Token,
    TokenKind,
    TokenizerOptions,
    expand,
    get_stopwords,
    stem,
    supported_languages,
    tokenize,
)

__version__ = "0.1.0"

__all__ = [
    "Corpus",
    "Document",
    "DocumentSummary",
    "DocumentWarning",
    "KwicResult",
    "DocumentFeatureMatrix",
    "FeatureIndex",
    "build_dfm",
    "top_features",
    "trim",
    "CorpusKitError",
    "InvalidRangeError",
    "InvalidThresholdError",
    "PatternError",
    "SchemaMismatchError",
    "UnsupportedLanguageError",
    "BasePatternMatcher",
    "Match",
    "RegexPatternMatcher",
    "ENGLISH_STOPWORDS",
    "Token",
    "TokenKind",
    "TokenizerOptions",
    "expand",
    "get_stopwords",
    "stem",
    "supported_languages",
    "tokenize",
    "Settings",
    "get_settings",
    "configure_logging",
    "setup_logging",
]
