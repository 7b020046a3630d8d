"""
Token-level text processing.

Components:
- tokenizer: Social-media aware tokenization into classified tokens
- stemmer: Snowball stemmers per language code (pluggable backends)
- ngrams: Contiguous n-gram expansion grouped by order
- stopwords: Stopword lists per language
"""

from .tokenizer import Token, TokenKind, TokenizerOptions, tokenize
from .stemmer import (
    BaseStemmer,
    SnowballStemmerBackend,
    get_stemmer,
    register_stemmer,
    stem,
    stem_words,
    supported_languages,
)
from .ngrams import expand, expand_tokens
from .stopwords import ENGLISH_STOPWORDS, get_stopwords

__all__ = [
    "Token",
    "TokenKind",
    "TokenizerOptions",
    "tokenize",
    "BaseStemmer",
    "SnowballStemmerBackend",
    "get_stemmer",
    "register_stemmer",
    "stem",
    "stem_words",
    "supported_languages",
    "expand",
    "expand_tokens",
    "ENGLISH_STOPWORDS",
    "get_stopwords",
]
