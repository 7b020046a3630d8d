"""Unit test configuration - isolated settings, logging and sample data"""

import logging

import pytest

import corpuskit.config as config
from corpuskit.corpus import Corpus
from corpuskit.tokens import stemmer


POSTS = [
    "RT @BBCNews: Parliament debated #Brexit again today https://t.co/abc123",
    "we debated brexit today online",
    "Brexit brexit BREXIT!!! @bbcnews what now?",
    "Nothing to see here.",
]

POST_METADATA = [
    {"user": "bbcnews", "retweets": 120},
    {"user": "ann", "retweets": 2},
    {"user": "bob", "retweets": 0, "verified": False},
    {"user": "ann"},
]


@pytest.fixture(autouse=True)
def reset_settings():
    """
    Drop cached settings around every test.

    Tests that change CORPUSKIT_* variables with monkeypatch must not leak
    the cached Settings into other tests.
    """
    config._settings = None
    yield
    config._settings = None


@pytest.fixture
def restore_root_logger():
    """Put back root logger handlers replaced by setup_logging()"""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield root
    for handler in root.handlers:
        if handler not in saved_handlers:
            handler.close()
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)


@pytest.fixture
def restore_stemmers():
    """Undo register_stemmer() calls made by a test"""
    saved = dict(stemmer._registry)
    yield
    stemmer._registry.clear()
    stemmer._registry.update(saved)


@pytest.fixture
def posts():
    return list(POSTS)


@pytest.fixture
def post_corpus():
    return Corpus.build(POSTS, POST_METADATA)
