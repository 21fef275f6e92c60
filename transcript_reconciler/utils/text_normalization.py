"""
Text normalization and comparison utilities for reconciliation.

This module provides functions to normalize text for cache comparison and to
compute the word-set similarity and length measures the reconciler relies on.
"""

from typing import FrozenSet


def normalize_text(text: str) -> str:
    """
    Normalize text for duplicate comparison.

    Normalization steps:
    1. Strip leading/trailing whitespace
    2. Convert to lowercase

    Punctuation is kept: an inserted period is still text the listener sees.

    Args:
        text: Input text to normalize

    Returns:
        Normalized text string

    Examples:
        >>> normalize_text("  The Weather Is Nice ")
        'the weather is nice'

        >>> normalize_text("Hello, everyone!")
        'hello, everyone!'
    """
    if not text:
        return ""

    return text.strip().lower()


def word_set(text: str) -> FrozenSet[str]:
    """
    Split text on whitespace into a set of tokens.

    Args:
        text: Input text

    Returns:
        Set of non-empty whitespace-separated tokens
    """
    if not text:
        return frozenset()

    return frozenset(text.split())


def jaccard_similarity(text1: str, text2: str) -> float:
    """
    Calculate word-set (Jaccard) similarity between two texts.

    similarity = |intersection| / |union| of the whitespace token sets.

    Args:
        text1: First text
        text2: Second text

    Returns:
        Similarity between 0.0 (disjoint) and 1.0 (identical), 0.0 if either
        text has no tokens

    Examples:
        >>> jaccard_similarity("the weather is nice", "the weather is nice today")
        0.8
        >>> jaccard_similarity("hello", "")
        0.0
    """
    if text1 == text2 and text1:
        return 1.0

    words1 = word_set(text1)
    words2 = word_set(text2)

    if not words1 or not words2:
        return 0.0

    intersection = len(words1 & words2)
    union = len(words1 | words2)

    return intersection / union if union > 0 else 0.0


def length_difference_ratio(text1: str, text2: str) -> float:
    """
    Calculate relative length difference |len1 - len2| / average length.

    Args:
        text1: First text
        text2: Second text

    Returns:
        Relative difference, 0.0 for two empty strings
    """
    average_length = (len(text1) + len(text2)) / 2
    if average_length == 0:
        return 0.0

    return abs(len(text1) - len(text2)) / average_length


def common_prefix_length(text1: str, text2: str) -> int:
    """
    Length of the longest common prefix of two strings.

    Examples:
        >>> common_prefix_length("Hello there how", "Hello there. How")
        11
    """
    limit = min(len(text1), len(text2))
    index = 0
    while index < limit and text1[index] == text2[index]:
        index += 1
    return index


def preview_text(text: str, length: int = 50) -> str:
    """
    Truncate text for log previews.

    Args:
        text: Text to preview
        length: Maximum number of characters kept

    Returns:
        Text unchanged if short enough, otherwise truncated with "..."
    """
    if len(text) <= length:
        return text
    return f"{text[:length]}..."
