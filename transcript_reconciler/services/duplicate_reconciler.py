"""
Duplicate and expansion reconciliation for emitted sentences.

This module provides the DuplicateReconciler which remembers the normalized
text of everything emitted in a session and classifies each new candidate
as a duplicate to drop, an expansion that supersedes an earlier emission,
or new content.
"""

import logging
from typing import Dict, Optional, Set

from transcript_reconciler.models.configuration import ReconcilerConfig
from transcript_reconciler.models.detection_result import DuplicateDetectionResult
from transcript_reconciler.utils.metrics import MetricsEmitter
from transcript_reconciler.utils.text_normalization import (
    jaccard_similarity,
    length_difference_ratio,
    normalize_text,
    preview_text
)

logger = logging.getLogger(__name__)

NEAR_CAPACITY_RATIO = 0.8


class DuplicateReconciler:
    """
    Session cache of emitted texts with duplicate/expansion analysis.

    Entries are keyed by normalized text (trimmed, lowercased) and keep the
    text as originally emitted so replacements can quote it. The cache is
    bounded: an insert that takes it past max_cache_size clears it entirely.

    Attributes:
        config: Reconciler configuration
        session_id: Session identifier used in logs and metrics
        metrics: Optional metrics emitter
    """

    def __init__(
        self,
        config: Optional[ReconcilerConfig] = None,
        session_id: str = "",
        metrics: Optional[MetricsEmitter] = None
    ):
        """
        Initialize reconciler with an empty cache.

        Args:
            config: Reconciler configuration (default: ReconcilerConfig())
            session_id: Session identifier
            metrics: Metrics emitter for cache clears
        """
        self.config = config or ReconcilerConfig()
        self.session_id = session_id
        self.metrics = metrics
        self._entries: Dict[str, str] = {}

        logger.debug(
            f"DuplicateReconciler initialized with "
            f"similarity_threshold={self.config.similarity_threshold}, "
            f"max_cache_size={self.config.max_cache_size}"
        )

    @property
    def seen(self) -> Set[str]:
        """Normalized texts currently considered emitted and live."""
        return set(self._entries)

    def size(self) -> int:
        return len(self._entries)

    def analyze(self, candidate_text: str) -> DuplicateDetectionResult:
        """
        Classify a candidate against every cached text.

        Order of checks:
        1. Exact match of the normalized text
        2. Per cached text: a longer cached text containing the candidate is
           a subset duplicate; a candidate containing a cached text and at
           least min_expansion_ratio times as long is an expansion; otherwise
           a word-set similarity above similarity_threshold with a small
           length difference is a similar duplicate
        3. The expansion with the highest similarity, if any
        4. New content

        Subset and similar duplicates stop the scan immediately. Expansions
        do not, so the best superseded text is found.

        Args:
            candidate_text: Sentence text to classify

        Returns:
            DuplicateDetectionResult describing the match

        Examples:
            >>> reconciler = DuplicateReconciler()
            >>> reconciler.mark_processed("The weather is nice")
            >>> reconciler.analyze("the weather is nice today").detection_type.value
            'expansion'
            >>> reconciler.analyze("weather is nice").detection_type.value
            'subset_duplicate'
        """
        normalized = normalize_text(candidate_text)

        if not self.config.min_text_length <= len(normalized) <= self.config.max_text_length:
            logger.debug(
                f"Skipping analysis of text with length {len(normalized)} "
                f"outside [{self.config.min_text_length}, {self.config.max_text_length}]"
            )
            return DuplicateDetectionResult.new_content(normalized)

        if normalized in self._entries:
            return DuplicateDetectionResult.exact_duplicate(normalized)

        best_expansion: Optional[str] = None
        best_similarity = 0.0
        best_ratio = 0.0

        for existing in self._entries:
            if len(existing) > len(normalized) and normalized in existing:
                return DuplicateDetectionResult.subset_duplicate(normalized)

            if len(normalized) > len(existing) and existing in normalized:
                ratio = len(normalized) / len(existing)
                if ratio >= self.config.min_expansion_ratio:
                    similarity = jaccard_similarity(normalized, existing)
                    if similarity > best_similarity:
                        best_expansion = existing
                        best_similarity = similarity
                        best_ratio = ratio
                    continue

            similarity = jaccard_similarity(normalized, existing)
            if (
                similarity > self.config.similarity_threshold
                and length_difference_ratio(normalized, existing) < self.config.max_length_difference_ratio
            ):
                return DuplicateDetectionResult.similar_duplicate(normalized, similarity)

        if best_expansion is not None:
            return DuplicateDetectionResult.expansion(
                previous_text=best_expansion,
                similarity=best_similarity,
                expansion_ratio=best_ratio
            )

        return DuplicateDetectionResult.new_content(normalized)

    def mark_processed(self, text: str) -> None:
        """
        Record text as emitted.

        Texts outside [min_text_length, max_text_length] are not cached.
        Clears the whole cache when the insert takes it past max_cache_size.

        Args:
            text: Emitted text (any casing)
        """
        normalized = normalize_text(text)
        if not normalized:
            return

        if not self.config.min_text_length <= len(normalized) <= self.config.max_text_length:
            logger.debug(
                f"Not caching text with length {len(normalized)} "
                f"outside [{self.config.min_text_length}, {self.config.max_text_length}]"
            )
            return

        self._entries[normalized] = text.strip()

        if len(self._entries) > self.config.max_cache_size:
            entries = len(self._entries)
            self._entries.clear()
            logger.info(
                f"Reconciliation cache exceeded {self.config.max_cache_size} "
                f"entries, cleared {entries} entries"
            )
            if self.metrics:
                self.metrics.emit_cache_cleared(self.session_id, entries)

    def remove_from_cache(self, text: str) -> bool:
        """
        Remove text from the cache.

        Args:
            text: Text to remove (any casing)

        Returns:
            True if the text was cached
        """
        removed = self._entries.pop(normalize_text(text), None) is not None
        if removed:
            logger.debug(f"Removed '{preview_text(normalize_text(text))}' from cache")
        return removed

    def clear_cache(self) -> None:
        """Remove every entry."""
        entries = len(self._entries)
        self._entries.clear()
        logger.debug(f"Reconciliation cache cleared ({entries} entries)")

    def original_text(self, normalized: str) -> Optional[str]:
        """
        Text as originally emitted for a normalized cache key.

        Args:
            normalized: Normalized cache key

        Returns:
            Original text, or None if not cached
        """
        return self._entries.get(normalized)

    def is_text_in_cache(self, text: str) -> bool:
        return normalize_text(text) in self._entries

    def is_near_capacity(self) -> bool:
        """Whether the next few inserts may trigger a full clear."""
        return len(self._entries) > self.config.max_cache_size * NEAR_CAPACITY_RATIO

    def get_cache_stats(self) -> dict:
        """
        Cache statistics for monitoring.

        Returns:
            Dictionary with size, ceiling, utilization and sample entries
        """
        size = len(self._entries)
        return {
            'size': size,
            'max_size': self.config.max_cache_size,
            'utilization': size / self.config.max_cache_size,
            'near_capacity': self.is_near_capacity(),
            'sample_entries': [preview_text(entry, 30) for entry in list(self._entries)[:5]]
        }
