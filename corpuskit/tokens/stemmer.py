"""
Snowball stemmers per language (via NLTK).

Uses the Snowball family of affix-stripping algorithms (English is the
Porter2 revision of the Porter stemmer):
https://snowballstem.org/

Languages are selected by short code. Backends are pluggable: anything
implementing BaseStemmer can be registered for a code with
register_stemmer().

Examples (English):
- "winning" → "win"
- "wins" → "win"
- "strategies" → "strategi"
- "communication" → "commun"

Note: NLTK's Snowball stemmers lowercase their input.
"""

import logging
import threading
from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Set

from nltk.stem.snowball import SnowballStemmer

from ..errors import UnsupportedLanguageError

logger = logging.getLogger(__name__)

# Language code -> NLTK Snowball language name
SNOWBALL_LANGUAGES = {
    "ar": "arabic",
    "da": "danish",
    "de": "german",
    "en": "english",
    "es": "spanish",
    "fi": "finnish",
    "fr": "french",
    "hu": "hungarian",
    "it": "italian",
    "nl": "dutch",
    "no": "norwegian",
    "pt": "portuguese",
    "ro": "romanian",
    "ru": "russian",
    "sv": "swedish",
}


class BaseStemmer(ABC):
    """
    Abstract base class for stemmer backends.

    Implementations must be deterministic and safe to call from
    several threads at once.
    """

    language: str

    @abstractmethod
    def stem(self, word: str) -> str:
        """Reduce a single word to its stem"""
        pass


class SnowballStemmerBackend(BaseStemmer):
    """NLTK Snowball stemmer for one language"""

    def __init__(self, language: str):
        if language not in SNOWBALL_LANGUAGES:
            raise UnsupportedLanguageError(language, SNOWBALL_LANGUAGES)
        self.language = language
        self._stemmer = SnowballStemmer(SNOWBALL_LANGUAGES[language])

    def stem(self, word: str) -> str:
        stemmed = self._stemmer.stem(word)
        # A stem never grows the word
        if len(stemmed) > len(word):
            return word
        return stemmed

    def __repr__(self) -> str:
        return f"SnowballStemmerBackend({self.language!r})"


_registry: Dict[str, BaseStemmer] = {}
_registry_lock = threading.Lock()


def supported_languages() -> Set[str]:
    """Language codes accepted by stem() and get_stemmer()"""
    return set(SNOWBALL_LANGUAGES) | set(_registry)


def register_stemmer(language: str, stemmer: BaseStemmer) -> None:
    """Install a stemmer backend for a language code (replaces any existing one)"""
    with _registry_lock:
        _registry[language] = stemmer
    logger.info(f"Registered stemmer for '{language}': {stemmer!r}")


def get_stemmer(language: str) -> BaseStemmer:
    """
    Get the cached stemmer for a language code.

    Raises:
        UnsupportedLanguageError: If no backend exists for the code
    """
    stemmer = _registry.get(language)
    if stemmer is not None:
        return stemmer

    if language not in SNOWBALL_LANGUAGES:
        logger.error(f"No stemmer for language code: {language!r}")
        raise UnsupportedLanguageError(language, supported_languages())

    with _registry_lock:
        if language not in _registry:
            _registry[language] = SnowballStemmerBackend(language)
        return _registry[language]


def stem(word: str, language: str = "en") -> str:
    """
    Stem a single word.

    Args:
        word: Token text
        language: Language code (see supported_languages())

    Returns:
        Stemmed word, never longer than the input

    Examples:
        >>> stem("winning")
        'win'
    """
    return get_stemmer(language).stem(word)


def stem_words(words: Iterable[str], language: str = "en") -> List[str]:
    """Stem each word in order"""
    stemmer = get_stemmer(language)
    return [stemmer.stem(w) for w in words]
