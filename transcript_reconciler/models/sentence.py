"""
Candidate sentence data model.

Candidate sentences are produced by the SentenceBoundaryDetector and
consumed by the DuplicateReconciler. They are immutable once produced.
"""

from dataclasses import dataclass
from enum import Enum


class SentenceReason(str, Enum):
    """Why the scanner considered a span complete."""

    PUNCTUATION = 'punctuation'
    FORCED = 'forced'
    TRANSITION = 'transition'
    CLAUSE_BREAK = 'clause-break'


@dataclass(frozen=True)
class CandidateSentence:
    """
    A span accepted as a complete sentence.

    Attributes:
        text: Trimmed sentence text
        reason: Detection reason
        label: Free-form trigger label ("punctuation-detected" for
            punctuation, or the caller's reason for forced flushes such as
            "cleanup", "stop", "timeout")
    """

    text: str
    reason: SentenceReason = SentenceReason.PUNCTUATION
    label: str = 'punctuation-detected'

    def __post_init__(self):
        """Validate field constraints."""
        if not self.text or not self.text.strip():
            raise ValueError("text cannot be empty")
