"""
Duplicate detection result data model.

This module defines the tagged result returned by DuplicateReconciler.analyze()
for every candidate text.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

_PREVIEW_LENGTH = 30


class DetectionType(str, Enum):
    """Classification of a candidate text against previously emitted texts."""

    EXACT_DUPLICATE = 'exact_duplicate'
    SUBSET_DUPLICATE = 'subset_duplicate'
    SIMILAR_DUPLICATE = 'similar_duplicate'
    EXPANSION = 'expansion'
    NEW_CONTENT = 'new_content'


@dataclass(frozen=True)
class DuplicateDetectionResult:
    """
    Outcome of duplicate/expansion analysis.

    Attributes:
        detection_type: Which case matched
        similarity: Word-set similarity with the matching previous text
            (0.0 when not applicable)
        previous_text: Normalized text superseded by an expansion
        expansion_ratio: Length ratio candidate/previous for an expansion
        reason: Human-readable explanation for logs
    """

    detection_type: DetectionType
    similarity: float = 0.0
    previous_text: Optional[str] = None
    expansion_ratio: Optional[float] = None
    reason: str = ""

    def __post_init__(self):
        """Validate field constraints."""
        if not 0.0 <= self.similarity <= 1.0:
            raise ValueError(f"similarity must be between 0.0 and 1.0, got {self.similarity}")

        if self.detection_type == DetectionType.EXPANSION and not self.previous_text:
            raise ValueError("previous_text is required for an expansion")

    @property
    def should_process(self) -> bool:
        """Whether the candidate should be emitted downstream."""
        return self.detection_type in (DetectionType.NEW_CONTENT, DetectionType.EXPANSION)

    @property
    def is_duplicate(self) -> bool:
        """Whether the candidate is one of the duplicate kinds."""
        return not self.should_process

    @classmethod
    def exact_duplicate(cls, text: str) -> 'DuplicateDetectionResult':
        return cls(
            detection_type=DetectionType.EXACT_DUPLICATE,
            similarity=1.0,
            reason=f'Exact duplicate detected: "{text[:_PREVIEW_LENGTH]}..."'
        )

    @classmethod
    def subset_duplicate(cls, text: str) -> 'DuplicateDetectionResult':
        return cls(
            detection_type=DetectionType.SUBSET_DUPLICATE,
            reason=f'Subset duplicate detected: "{text[:_PREVIEW_LENGTH]}..."'
        )

    @classmethod
    def similar_duplicate(cls, text: str, similarity: float) -> 'DuplicateDetectionResult':
        return cls(
            detection_type=DetectionType.SIMILAR_DUPLICATE,
            similarity=similarity,
            reason=(
                f'Similar duplicate detected ({int(similarity * 100)}% similar): '
                f'"{text[:_PREVIEW_LENGTH]}..."'
            )
        )

    @classmethod
    def expansion(
        cls,
        previous_text: str,
        similarity: float,
        expansion_ratio: float
    ) -> 'DuplicateDetectionResult':
        return cls(
            detection_type=DetectionType.EXPANSION,
            similarity=similarity,
            previous_text=previous_text,
            expansion_ratio=expansion_ratio,
            reason=f'Text expansion detected: {int(expansion_ratio * 100)}% of previous length'
        )

    @classmethod
    def new_content(cls, text: str) -> 'DuplicateDetectionResult':
        return cls(
            detection_type=DetectionType.NEW_CONTENT,
            reason=f'New content: "{text[:_PREVIEW_LENGTH]}..."'
        )
