"""
Regular-expression matching over raw document text.

Matching always runs against the full raw string, never a tokenized form,
so extraction (e.g. pulling @handles out of posts) does not depend on how
the tokenizer is configured.

The matcher is an interface so alternate regex engines can be swapped in
without touching pipeline code:
- BasePatternMatcher: abstract interface
- RegexPatternMatcher: default backend on Python's re module

Examples:
    >>> [m.matched_text for m in find_all("one user is @one and another user is @another", r"@[0-9_A-Za-z]+")]
    ['@one', '@another']
    >>> replace_all("RT @bob: hi", r"^RT\\s+", "")
    '@bob: hi'
"""

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import lru_cache
from typing import List, Optional

from .errors import PatternError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Match:
    """Single pattern match with character offsets into the searched text"""
    start: int
    end: int
    matched_text: str


class BasePatternMatcher(ABC):
    """
    Abstract interface for pattern matching backends.

    Implementations must raise PatternError for patterns that fail to
    compile instead of reporting "no match".
    """

    @abstractmethod
    def find_first(self, text: str, pattern: str, case_sensitive: bool = True) -> Optional[Match]:
        """Leftmost match, or None"""

    @abstractmethod
    def find_all(self, text: str, pattern: str, case_sensitive: bool = True) -> List[Match]:
        """All non-overlapping matches, left to right"""

    @abstractmethod
    def replace_first(self, text: str, pattern: str, replacement: str, case_sensitive: bool = True) -> str:
        """Replace the leftmost match"""

    @abstractmethod
    def replace_all(self, text: str, pattern: str, replacement: str, case_sensitive: bool = True) -> str:
        """Replace every non-overlapping match"""

    def contains(self, text: str, pattern: str, case_sensitive: bool = True) -> bool:
        return self.find_first(text, pattern, case_sensitive) is not None

    def extract_all(self, text: str, pattern: str, case_sensitive: bool = True) -> List[str]:
        return [m.matched_text for m in self.find_all(text, pattern, case_sensitive)]


@lru_cache(maxsize=512)
def _compile(pattern: str, flags: int) -> re.Pattern:
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        logger.error(f"Pattern failed to compile: {pattern!r} ({e})")
        raise PatternError(pattern, str(e)) from e


class RegexPatternMatcher(BasePatternMatcher):
    """Pattern matcher on Python's re engine (compiled patterns are cached)"""

    def _regex(self, pattern: str, case_sensitive: bool) -> re.Pattern:
        if not isinstance(pattern, str):
            raise PatternError(repr(pattern), "pattern must be a string")
        flags = 0 if case_sensitive else re.IGNORECASE
        return _compile(pattern, flags)

    def find_first(self, text: str, pattern: str, case_sensitive: bool = True) -> Optional[Match]:
        found = self._regex(pattern, case_sensitive).search(text)
        if found is None:
            return None
        return Match(found.start(), found.end(), found.group(0))

    def find_all(self, text: str, pattern: str, case_sensitive: bool = True) -> List[Match]:
        return [
            Match(m.start(), m.end(), m.group(0))
            for m in self._regex(pattern, case_sensitive).finditer(text)
        ]

    def _substitute(self, text: str, pattern: str, replacement: str, case_sensitive: bool, count: int) -> str:
        regex = self._regex(pattern, case_sensitive)
        try:
            return regex.sub(replacement, text, count=count)
        except re.error as e:
            # Bad group reference in the replacement template
            raise PatternError(pattern, f"invalid replacement {replacement!r}: {e}") from e

    def replace_first(self, text: str, pattern: str, replacement: str, case_sensitive: bool = True) -> str:
        return self._substitute(text, pattern, replacement, case_sensitive, count=1)

    def replace_all(self, text: str, pattern: str, replacement: str, case_sensitive: bool = True) -> str:
        return self._substitute(text, pattern, replacement, case_sensitive, count=0)


default_matcher: BasePatternMatcher = RegexPatternMatcher()


def find_first(text: str, pattern: str, case_sensitive: bool = True) -> Optional[Match]:
    return default_matcher.find_first(text, pattern, case_sensitive)


def find_all(text: str, pattern: str, case_sensitive: bool = True) -> List[Match]:
    return default_matcher.find_all(text, pattern, case_sensitive)


def contains(text: str, pattern: str, case_sensitive: bool = True) -> bool:
    return default_matcher.contains(text, pattern, case_sensitive)


def extract_all(text: str, pattern: str, case_sensitive: bool = True) -> List[str]:
    return default_matcher.extract_all(text, pattern, case_sensitive)


def replace_first(text: str, pattern: str, replacement: str, case_sensitive: bool = True) -> str:
    return default_matcher.replace_first(text, pattern, replacement, case_sensitive)


def replace_all(text: str, pattern: str, replacement: str, case_sensitive: bool = True) -> str:
    return default_matcher.replace_all(text, pattern, replacement, case_sensitive)
