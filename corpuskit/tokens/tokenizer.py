"""
Tokenizer for short social-media style documents.

Scanning runs left to right. At each position the first alternative that
matches wins, in this priority order:
1. URL (http://, https://, www.) without trailing sentence punctuation
2. @mention (not preceded by a word character)
3. #hashtag (not preceded by a word character)
4. Word: run of letters, digits, underscores and combining marks
   (digits only -> number)
5. Punctuation: run of one repeated non-word, non-space character

Whitespace only separates tokens and is never emitted. Classification
happens before lowercasing, so "@Handle" is a mention either way.

With preserve_social_tokens=False, alternatives 1-3 are disabled and
mentions, hashtags and URLs fall apart into words and punctuation:
    "@bob" -> "@" (punctuation), "bob" (word)

Re-joining the emitted tokens with single spaces and tokenizing again with
the same options reproduces the same sequence.
"""

import re
import sys
import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class TokenKind(str, Enum):
    """Token classification"""
    WORD = "word"
    MENTION = "mention"
    HASHTAG = "hashtag"
    URL = "url"
    PUNCTUATION = "punctuation"
    NUMBER = "number"


@dataclass(frozen=True)
class Token:
    """Normalized token text with its kind"""
    text: str
    kind: TokenKind

    def __str__(self) -> str:
        return self.text


class TokenizerOptions(BaseModel):
    """Tokenizer configuration (immutable, hashable)"""
    model_config = ConfigDict(frozen=True)

    lowercase: bool = Field(default=True, description="Lowercase token text after classification")
    preserve_social_tokens: bool = Field(
        default=True,
        description="Keep @mentions, #hashtags and URLs as single tokens"
    )
    strip_punctuation: bool = Field(default=False, description="Drop punctuation tokens")
    strip_numbers: bool = Field(default=False, description="Drop number tokens")
    strip_urls: bool = Field(default=False, description="Drop URL tokens")


DEFAULT_OPTIONS = TokenizerOptions()


def _combining_marks() -> str:
    """Character-class body covering every Unicode mark (Mn, Mc, Me)"""
    ranges = []
    start = previous = None
    for code in range(sys.maxunicode + 1):
        if not unicodedata.category(chr(code)).startswith("M"):
            continue
        if previous is not None and code == previous + 1:
            previous = code
            continue
        if start is not None:
            ranges.append((start, previous))
        start = previous = code
    if start is not None:
        ranges.append((start, previous))
    return "".join(
        re.escape(chr(lo)) if lo == hi else f"{re.escape(chr(lo))}-{re.escape(chr(hi))}"
        for lo, hi in ranges
    )


# Marks continue a word: Arabic harakat, Devanagari matras, NFD accents,
# and the U+0307 that "İ".lower() produces
_MARKS = _combining_marks()
_WORD_BODY = rf"\w[\w{_MARKS}]*"

# URL stops before trailing punctuation that is followed by whitespace or end of text
_URL = r"(?:https?://|www\.)\S+?(?=[.,!?;:'\")\]]*(?:\s|$))"
_WORD = rf"(?P<word>{_WORD_BODY})"
_PUNCTUATION = r"(?P<punctuation>(?P<mark>[^\w\s])(?P=mark)*)"

_SOCIAL_PATTERN = re.compile("|".join([
    rf"(?P<url>{_URL})",
    rf"(?P<mention>(?<!\w)@{_WORD_BODY})",
    rf"(?P<hashtag>(?<!\w)#{_WORD_BODY})",
    _WORD,
    _PUNCTUATION,
]))
_PLAIN_PATTERN = re.compile("|".join([_WORD, _PUNCTUATION]))
_NUMBER = re.compile(r"\d+")


def _classify(match: re.Match) -> TokenKind:
    # Outer named group closes last, so lastgroup is never the nested "mark"
    group = match.lastgroup
    if group == "word":
        return TokenKind.NUMBER if _NUMBER.fullmatch(match.group(0)) else TokenKind.WORD
    return TokenKind(group)


def tokenize(text: str, options: Optional[TokenizerOptions] = None) -> List[Token]:
    """
    Split text into classified tokens.

    Args:
        text: Raw document text
        options: TokenizerOptions (default: lowercase, social tokens preserved,
            punctuation kept)

    Returns:
        Ordered list of Token; empty list for empty or whitespace-only text

    Examples:
        >>> [t.text for t in tokenize("Loving #Brexit2019 news via @BBC!!")]
        ['loving', '#brexit2019', 'news', 'via', '@bbc', '!!']

        >>> [t.kind.value for t in tokenize("#1 @ home")]
        ['hashtag', 'punctuation', 'word']

        >>> [t.text for t in tokenize("see https://t.co/x1.", TokenizerOptions(strip_punctuation=True))]
        ['see', 'https://t.co/x1']
    """
    if not text:
        return []

    options = options or DEFAULT_OPTIONS
    pattern = _SOCIAL_PATTERN if options.preserve_social_tokens else _PLAIN_PATTERN

    dropped = set()
    if options.strip_punctuation:
        dropped.add(TokenKind.PUNCTUATION)
    if options.strip_numbers:
        dropped.add(TokenKind.NUMBER)
    if options.strip_urls:
        dropped.add(TokenKind.URL)

    tokens = []
    for match in pattern.finditer(text):
        kind = _classify(match)
        if kind in dropped:
            continue
        token_text = match.group(0)
        if options.lowercase:
            token_text = token_text.lower()
        tokens.append(Token(token_text, kind))

    return tokens
