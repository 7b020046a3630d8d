"""
Contiguous n-gram expansion.

Output is grouped by order: all unigrams in sequence order, then all
bigrams, and so on. DFM column order is assigned first-seen, so this
traversal order must stay stable.

Example:
    >>> expand(["a", "b", "c"], 1, 2, "_")
    ['a', 'b', 'c', 'a_b', 'b_c']
"""

from typing import List, Sequence

from ..errors import InvalidRangeError
from .tokenizer import Token


def validate_range(min_order: int, max_order: int) -> None:
    """
    Raises:
        InvalidRangeError: If either bound is < 1 or min_order > max_order
    """
    if min_order < 1 or max_order < 1:
        raise InvalidRangeError(f"N-gram orders must be >= 1, got ({min_order}, {max_order})")
    if min_order > max_order:
        raise InvalidRangeError(f"min_order {min_order} exceeds max_order {max_order}")


def expand(tokens: Sequence[str], min_order: int = 1, max_order: int = 1, separator: str = "_") -> List[str]:
    """
    Produce every contiguous window of min_order..max_order tokens.

    Args:
        tokens: Token texts in document order
        min_order: Smallest n-gram size (>= 1)
        max_order: Largest n-gram size (>= min_order)
        separator: String joining tokens of one n-gram

    Returns:
        Features grouped by order; orders longer than the sequence yield nothing
    """
    validate_range(min_order, max_order)

    features = []
    for n in range(min_order, max_order + 1):
        if n > len(tokens):
            break
        for i in range(len(tokens) - n + 1):
            features.append(separator.join(tokens[i:i + n]))
    return features


def expand_tokens(
    tokens: Sequence[Token],
    min_order: int = 1,
    max_order: int = 1,
    separator: str = "_",
    mixed_kinds: bool = True
) -> List[str]:
    """
    Same as expand(), on Token objects.

    With mixed_kinds=False, windows whose tokens are not all of one kind
    (e.g. a mention followed by a word) are skipped. Unigrams are unaffected.
    """
    if mixed_kinds:
        return expand([t.text for t in tokens], min_order, max_order, separator)

    validate_range(min_order, max_order)

    features = []
    for n in range(min_order, max_order + 1):
        if n > len(tokens):
            break
        for i in range(len(tokens) - n + 1):
            window = tokens[i:i + n]
            if any(t.kind != window[0].kind for t in window[1:]):
                continue
            features.append(separator.join(t.text for t in window))
    return features
