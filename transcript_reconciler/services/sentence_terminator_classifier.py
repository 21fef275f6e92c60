"""
Sentence terminator classification.

This module provides the SentenceTerminatorClassifier which decides whether
the trailing punctuation of a candidate span is a genuine sentence end or a
false positive such as an abbreviation, decimal, time or version string.
"""

import logging
import re
from typing import Iterable, List, Optional, Pattern, Tuple

from transcript_reconciler.config.abbreviations import (
    ABBREVIATIONS,
    FALSE_TERMINATOR_PATTERNS
)
from transcript_reconciler.exceptions import PatternMatchError

logger = logging.getLogger(__name__)

SENTENCE_TERMINATORS = ('.', '?', '!')

ABBREVIATION_RULE = 'abbreviation'


class SentenceTerminatorClassifier:
    """
    Stateless classifier for sentence-ending punctuation.

    Rules are checked in order, short-circuiting on the first match:
    1. Suffix match against the abbreviation table (at a word boundary)
    2. Each (name, regex) false-terminator pattern in table order

    A span that matches no rule is a genuine terminator. A rule that cannot
    be evaluated (malformed regex, bad table entry) counts as a match, so
    errors under-split rather than mis-split.

    Attributes:
        abbreviations: Abbreviation table
        patterns: (name, compiled regex or None if it failed to compile)
    """

    def __init__(
        self,
        abbreviations: Iterable[str] = ABBREVIATIONS,
        patterns: Iterable[Tuple[str, str]] = FALSE_TERMINATOR_PATTERNS
    ):
        """
        Initialize classifier and compile the pattern table.

        Args:
            abbreviations: Abbreviation table (default: built-in table)
            patterns: (name, regex) pairs (default: built-in table)
        """
        self.abbreviations = tuple(abbreviations)
        self.patterns: List[Tuple[str, Optional[Pattern]]] = []
        self._pattern_errors = {}

        for name, expression in patterns:
            try:
                self.patterns.append((name, re.compile(expression)))
            except (re.error, TypeError) as e:
                logger.warning(
                    f"Invalid false-terminator pattern '{name}': {e}; "
                    "spans reaching it will not be split"
                )
                self.patterns.append((name, None))
                self._pattern_errors[name] = e

        logger.debug(
            f"SentenceTerminatorClassifier initialized with "
            f"{len(self.abbreviations)} abbreviations, {len(self.patterns)} patterns"
        )

    def is_sentence_terminator(self, candidate_text: str) -> bool:
        """
        Decide whether the span ends at a genuine sentence boundary.

        Args:
            candidate_text: Span ending in '.', '?' or '!'

        Returns:
            True if the trailing punctuation ends a sentence, False if it is
            a false positive or the span could not be classified

        Examples:
            >>> classifier = SentenceTerminatorClassifier()
            >>> classifier.is_sentence_terminator("The meeting is over.")
            True
            >>> classifier.is_sentence_terminator("It costs $19.99.")
            False
        """
        text = candidate_text.strip() if candidate_text else ""
        if not text or not text.endswith(SENTENCE_TERMINATORS):
            return False

        try:
            return self._match_rule(text) is None
        except PatternMatchError as e:
            logger.warning(
                f"{e}; treating '{text[-30:]}' as not a sentence terminator"
            )
            return False

    def match_reason(self, candidate_text: str) -> Optional[str]:
        """
        Name of the first rule rejecting the span.

        Args:
            candidate_text: Span to analyze

        Returns:
            Rule name ('abbreviation', 'decimal', ...), 'error' if a rule
            failed, or None if the span ends a sentence
        """
        text = candidate_text.strip() if candidate_text else ""
        try:
            return self._match_rule(text)
        except PatternMatchError:
            return 'error'

    def _match_rule(self, text: str) -> Optional[str]:
        if self._ends_with_abbreviation(text):
            return ABBREVIATION_RULE

        for name, pattern in self.patterns:
            if pattern is None:
                raise PatternMatchError(name, self._pattern_errors[name])
            try:
                if pattern.search(text):
                    return name
            except (re.error, TypeError, RecursionError) as e:
                raise PatternMatchError(name, e) from e

        return None

    def _ends_with_abbreviation(self, text: str) -> bool:
        """
        Check the abbreviation table against the end of the span.

        An entry only matches where it starts a word, so "system." does not
        match the unit "m." while "5 m." does.
        """
        for abbreviation in self.abbreviations:
            try:
                if not text.endswith(abbreviation):
                    continue
            except TypeError as e:
                raise PatternMatchError(ABBREVIATION_RULE, e) from e

            start = len(text) - len(abbreviation)
            if start == 0 or not text[start - 1].isalnum():
                return True

        return False


_default_classifier: Optional[SentenceTerminatorClassifier] = None


def is_sentence_terminator(candidate_text: str) -> bool:
    """
    Classify a span with the built-in tables.

    Args:
        candidate_text: Span ending in '.', '?' or '!'

    Returns:
        True if the span ends a sentence
    """
    global _default_classifier
    if _default_classifier is None:
        _default_classifier = SentenceTerminatorClassifier()
    return _default_classifier.is_sentence_terminator(candidate_text)
