"""
Typed failures raised by corpuskit.

All errors derive from CorpusKitError so callers can catch the whole family
at once. Numeric configuration errors also derive from ValueError.
"""


class CorpusKitError(Exception):
    """Base class for all corpuskit errors"""


class PatternError(CorpusKitError):
    """Regular expression failed to compile"""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        self.reason = reason
        super().__init__(f"Invalid pattern {pattern!r}: {reason}")


class UnsupportedLanguageError(CorpusKitError):
    """No stemmer or stopword list registered for the language code"""

    def __init__(self, language: str, supported=None):
        self.language = language
        self.supported = sorted(supported) if supported else []
        message = f"Unsupported language: {language!r}"
        if self.supported:
            message += f". Valid options: {', '.join(self.supported)}"
        super().__init__(message)


class InvalidRangeError(CorpusKitError, ValueError):
    """Order range or window size out of bounds"""


class InvalidThresholdError(CorpusKitError, ValueError):
    """Trimming or ranking threshold out of bounds"""


class SchemaMismatchError(CorpusKitError):
    """Metadata rows do not line up with the input texts"""
