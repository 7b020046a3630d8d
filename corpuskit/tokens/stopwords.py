"""
Stopword lists.

English is built in (NLTK's English list, which also covers the
Elasticsearch/Lucene standard set). Other languages come from NLTK's
stopwords corpus, which must be downloaded separately:

    python -m nltk.downloader stopwords
"""

import logging
from typing import FrozenSet

from ..errors import UnsupportedLanguageError
from .stemmer import SNOWBALL_LANGUAGES

logger = logging.getLogger(__name__)

ENGLISH_STOPWORDS = frozenset([
    'a', 'about', 'above', 'after', 'again', 'against', 'ain', 'all', 'am',
    'an', 'and', 'any', 'are', 'aren', "aren't", 'as', 'at',
    'be', 'because', 'been', 'before', 'being', 'below', 'between', 'both',
    'but', 'by',
    'can', 'couldn', "couldn't",
    'd', 'did', 'didn', "didn't", 'do', 'does', 'doesn', "doesn't", 'doing',
    'don', "don't", 'down', 'during',
    'each',
    'few', 'for', 'from', 'further',
    'had', 'hadn', "hadn't", 'has', 'hasn', "hasn't", 'have', 'haven',
    "haven't", 'having', 'he', 'her', 'here', 'hers', 'herself', 'him',
    'himself', 'his', 'how',
    'i', 'if', 'in', 'into', 'is', 'isn', "isn't", 'it', "it's", 'its',
    'itself',
    'just',
    'll',
    'm', 'ma', 'me', 'mightn', "mightn't", 'more', 'most', 'mustn', "mustn't",
    'my', 'myself',
    'needn', "needn't", 'no', 'nor', 'not', 'now',
    'o', 'of', 'off', 'on', 'once', 'only', 'or', 'other', 'our', 'ours',
    'ourselves', 'out', 'over', 'own',
    're',
    's', 'same', 'shan', "shan't", 'she', "she's", 'should', "should've",
    'shouldn', "shouldn't", 'so', 'some', 'such',
    't', 'than', 'that', "that'll", 'the', 'their', 'theirs', 'them',
    'themselves', 'then', 'there', 'these', 'they', 'this', 'those',
    'through', 'to', 'too',
    'under', 'until', 'up',
    've', 'very',
    'was', 'wasn', "wasn't", 'we', 'were', 'weren', "weren't", 'what', 'when',
    'where', 'which', 'while', 'who', 'whom', 'why', 'will', 'with', 'won',
    "won't", 'wouldn', "wouldn't",
    'y', 'you', "you'd", "you'll", "you're", "you've", 'your', 'yours',
    'yourself', 'yourselves',
])


def get_stopwords(language: str = "en") -> FrozenSet[str]:
    """
    Get the stopword set for a language code.

    Raises:
        UnsupportedLanguageError: Unknown code, or NLTK stopwords corpus
            not installed for a non-English language
    """
    if language == "en":
        return ENGLISH_STOPWORDS

    if language not in SNOWBALL_LANGUAGES:
        raise UnsupportedLanguageError(language, SNOWBALL_LANGUAGES)

    from nltk.corpus import stopwords as nltk_stopwords

    try:
        words = nltk_stopwords.words(SNOWBALL_LANGUAGES[language])
    except (LookupError, OSError) as e:
        logger.error(f"NLTK stopwords unavailable for '{language}': {e}")
        raise UnsupportedLanguageError(language, ["en"]) from e

    return frozenset(w.lower() for w in words)
