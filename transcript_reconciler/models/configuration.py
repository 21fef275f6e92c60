"""
Configuration data models for transcript reconciliation.

This module defines the configuration dataclasses that control all tunable
parameters of sentence scanning, duplicate reconciliation and session
orchestration. All values are plain data injected at construction; nothing
here reads the environment.
"""

from dataclasses import dataclass, field
from typing import Optional, Tuple

from transcript_reconciler.config.abbreviations import (
    ABBREVIATIONS,
    FALSE_TERMINATOR_PATTERNS
)
from transcript_reconciler.exceptions import ConfigurationError

REVISION_STRATEGIES = ('common_prefix', 'full_text')


@dataclass
class ScannerConfig:
    """
    Configuration for the sentence boundary scanner.

    Attributes:
        min_sentence_length: Minimum trimmed span length to accept as a sentence (default: 1)
        duplicate_suppression_window_seconds: Window in which an identical
            sentence is suppressed (default: 0.5)
        revision_strategy: How a transcript that does not extend the previous
            one is re-scanned, 'common_prefix' or 'full_text'
        abbreviations: Abbreviation table used by the classifier
        false_terminator_patterns: (name, regex) pairs used by the classifier
        max_remainder_length: Split a remainder longer than this at its last
            clause break or transition word; 0 disables splitting (default: 0)
    """

    min_sentence_length: int = 1
    duplicate_suppression_window_seconds: float = 0.5
    revision_strategy: str = 'common_prefix'
    abbreviations: Tuple[str, ...] = field(default=ABBREVIATIONS)
    false_terminator_patterns: Tuple[Tuple[str, str], ...] = field(
        default=FALSE_TERMINATOR_PATTERNS
    )
    max_remainder_length: int = 0

    @classmethod
    def conservative(cls, **overrides) -> 'ScannerConfig':
        """
        Profile that waits for longer spans before splitting.

        Short fragments such as "Yes." or "Okay." are folded into the next
        sentence instead of being emitted on their own.
        """
        values = {
            'min_sentence_length': 15,
            'duplicate_suppression_window_seconds': 1.0
        }
        values.update(overrides)
        return cls(**values)

    def validate(self) -> None:
        """
        Validate configuration parameters.

        Raises:
            ConfigurationError: If any parameter is outside its valid range
        """
        if self.min_sentence_length < 1:
            raise ConfigurationError(
                f"min_sentence_length must be at least 1, "
                f"got {self.min_sentence_length}"
            )

        if self.duplicate_suppression_window_seconds < 0:
            raise ConfigurationError(
                f"duplicate_suppression_window_seconds must be non-negative, "
                f"got {self.duplicate_suppression_window_seconds}"
            )

        if self.max_remainder_length < 0:
            raise ConfigurationError(
                f"max_remainder_length must be non-negative, "
                f"got {self.max_remainder_length}"
            )

        if self.revision_strategy not in REVISION_STRATEGIES:
            raise ConfigurationError(
                f"revision_strategy must be one of {REVISION_STRATEGIES}, "
                f"got '{self.revision_strategy}'"
            )

    def __post_init__(self):
        """Validate configuration on initialization."""
        self.abbreviations = tuple(self.abbreviations)
        self.false_terminator_patterns = tuple(self.false_terminator_patterns)
        self.validate()


@dataclass
class ReconcilerConfig:
    """
    Configuration for the duplicate/expansion reconciler.

    Attributes:
        similarity_threshold: Word-set similarity above which near-identical
            texts are duplicates (default: 0.85)
        max_length_difference_ratio: Relative length difference below which a
            highly similar text counts as a duplicate (default: 0.1)
        min_expansion_ratio: Minimum candidate/previous length ratio for an
            expansion (default: 1.1)
        max_cache_size: Cache ceiling; exceeding it clears the cache (default: 50)
        min_text_length: Shortest text worth comparing (default: 1)
        max_text_length: Longest text worth comparing (default: 2000)
    """

    similarity_threshold: float = 0.85
    max_length_difference_ratio: float = 0.1
    min_expansion_ratio: float = 1.1
    max_cache_size: int = 50
    min_text_length: int = 1
    max_text_length: int = 2000

    def validate(self) -> None:
        """
        Validate configuration parameters.

        Raises:
            ConfigurationError: If any parameter is outside its valid range
        """
        if not 0.0 < self.similarity_threshold <= 1.0:
            raise ConfigurationError(
                f"similarity_threshold must be between 0.0 and 1.0, "
                f"got {self.similarity_threshold}"
            )

        if not 0.0 <= self.max_length_difference_ratio <= 1.0:
            raise ConfigurationError(
                f"max_length_difference_ratio must be between 0.0 and 1.0, "
                f"got {self.max_length_difference_ratio}"
            )

        if self.min_expansion_ratio <= 1.0:
            raise ConfigurationError(
                f"min_expansion_ratio must be greater than 1.0, "
                f"got {self.min_expansion_ratio}"
            )

        if self.max_cache_size < 1:
            raise ConfigurationError(
                f"max_cache_size must be at least 1, "
                f"got {self.max_cache_size}"
            )

        if self.min_text_length < 1:
            raise ConfigurationError(
                f"min_text_length must be at least 1, "
                f"got {self.min_text_length}"
            )

        if self.max_text_length < self.min_text_length:
            raise ConfigurationError(
                f"max_text_length must be at least min_text_length "
                f"({self.min_text_length}), got {self.max_text_length}"
            )

    def __post_init__(self):
        """Validate configuration on initialization."""
        self.validate()


@dataclass
class SessionConfig:
    """
    Configuration for a speaker session.

    Attributes:
        scanner: Sentence boundary scanner configuration
        reconciler: Duplicate reconciler configuration
        discrepancy_threshold: Edit-distance percentage above which a
            replacement is logged as a significant discrepancy (default: 20.0)
        idle_finalize_seconds: Flush the remainder when no delta arrived for
            this long; None disables the policy
        idle_check_interval_seconds: How often a running session checks the
            idle policy (default: 0.5)
        emission_queue_size: Maximum pending downstream events, 0 for unbounded
    """

    scanner: ScannerConfig = field(default_factory=ScannerConfig)
    reconciler: ReconcilerConfig = field(default_factory=ReconcilerConfig)
    discrepancy_threshold: float = 20.0
    idle_finalize_seconds: Optional[float] = None
    idle_check_interval_seconds: float = 0.5
    emission_queue_size: int = 0

    def validate(self) -> None:
        """
        Validate configuration parameters.

        Raises:
            ConfigurationError: If any parameter is outside its valid range
        """
        self.scanner.validate()
        self.reconciler.validate()

        if not 0.0 <= self.discrepancy_threshold <= 100.0:
            raise ConfigurationError(
                f"discrepancy_threshold must be between 0 and 100, "
                f"got {self.discrepancy_threshold}"
            )

        if self.idle_finalize_seconds is not None and self.idle_finalize_seconds <= 0:
            raise ConfigurationError(
                f"idle_finalize_seconds must be positive, "
                f"got {self.idle_finalize_seconds}"
            )

        if self.idle_check_interval_seconds <= 0:
            raise ConfigurationError(
                f"idle_check_interval_seconds must be positive, "
                f"got {self.idle_check_interval_seconds}"
            )

        if self.emission_queue_size < 0:
            raise ConfigurationError(
                f"emission_queue_size must be non-negative, "
                f"got {self.emission_queue_size}"
            )

    def __post_init__(self):
        """Validate configuration on initialization."""
        self.validate()
