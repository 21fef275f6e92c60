"""
Sentence boundary detection for accumulating transcripts.

This module provides the SentenceBoundaryDetector class which incrementally
scans the full transcript resent by the speech recognizer, splits it into
complete sentences validated by the SentenceTerminatorClassifier, and carries
the unfinished tail over to the next call.
"""

import logging
import re
import time
from typing import Callable, List, Optional, Pattern, Tuple

from transcript_reconciler.config.abbreviations import (
    CLAUSE_BREAK_PATTERN,
    TRANSITION_PATTERN
)
from transcript_reconciler.models.configuration import ScannerConfig
from transcript_reconciler.models.sentence import CandidateSentence, SentenceReason
from transcript_reconciler.models.transcript_state import TranscriptState
from transcript_reconciler.services.sentence_terminator_classifier import (
    SENTENCE_TERMINATORS,
    SentenceTerminatorClassifier
)
from transcript_reconciler.utils.text_normalization import (
    common_prefix_length,
    preview_text
)

logger = logging.getLogger(__name__)

_CLAUSE_BREAK_RE = re.compile(CLAUSE_BREAK_PATTERN)
_TRANSITION_RE = re.compile(TRANSITION_PATTERN)


class SentenceBoundaryDetector:
    """
    Detects sentence boundaries in an accumulating transcript.

    Recognizers resend the whole hypothesis on every callback, so each call
    receives the complete current transcript. The detector keeps:
    - accumulated_text: the last transcript seen
    - committed_offset: where the unconfirmed tail (remainder) starts
    - boundaries: offsets of every confirmed sentence end

    Text before committed_offset is never scanned again while the recognizer
    only appends. When it revises earlier text, the revision_strategy decides
    what is re-scanned:
    - 'common_prefix': re-scan from the last confirmed boundary inside the
      common prefix of the old and new transcript
    - 'full_text': re-scan remainder plus the whole new transcript

    A span rejected by the classifier (abbreviation, decimal, ...) or shorter
    than min_sentence_length is not dropped: it stays in the running span and
    becomes the start of the next sentence.

    Attributes:
        config: Scanner configuration
        classifier: Terminator classifier
        partial_listener: Optional callback receiving every new transcript
        state: Mutable scanning state
    """

    def __init__(
        self,
        config: Optional[ScannerConfig] = None,
        classifier: Optional[SentenceTerminatorClassifier] = None,
        partial_listener: Optional[Callable[[str], None]] = None,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize sentence boundary detector.

        Args:
            config: Scanner configuration (default: ScannerConfig())
            classifier: Classifier to validate spans (default: built from config tables)
            partial_listener: Called with the full transcript after each change
            clock: Time source for duplicate suppression (default: time.time)
        """
        self.config = config or ScannerConfig()
        self.classifier = classifier or SentenceTerminatorClassifier(
            abbreviations=self.config.abbreviations,
            patterns=self.config.false_terminator_patterns
        )
        self.partial_listener = partial_listener
        self.clock = clock
        self.state = TranscriptState()

        logger.debug(
            f"SentenceBoundaryDetector initialized with "
            f"min_sentence_length={self.config.min_sentence_length}, "
            f"revision_strategy={self.config.revision_strategy}"
        )

    def process_transcript_delta(self, new_full_text: str) -> List[CandidateSentence]:
        """
        Scan the latest full transcript for newly completed sentences.

        Args:
            new_full_text: Complete current transcript from the recognizer

        Returns:
            Ordered list of sentences completed by this update (possibly empty)

        Examples:
            >>> detector = SentenceBoundaryDetector()
            >>> detector.process_transcript_delta("Hello there")
            []
            >>> [s.text for s in detector.process_transcript_delta("Hello there. How are you")]
            ['Hello there.']
            >>> detector.state.remainder
            'How are you'
        """
        text = new_full_text.strip() if new_full_text else ""
        if not text or text == self.state.accumulated_text:
            return []

        buffer, base_offset = self._prepare_scan(text)
        self.state.accumulated_text = text

        self._notify_partial(text)

        sentences = self._scan(buffer, base_offset)
        forced_split = self._split_long_remainder()
        if forced_split is not None:
            sentences.append(forced_split)

        return [s for s in sentences if self._passes_suppression(s.text)]

    def force_finalize(self, reason: str = 'cleanup', commit: bool = False) -> Optional[CandidateSentence]:
        """
        Flush the remainder as a sentence.

        The remainder itself is kept unless commit is True; callers tearing
        the session down follow up with reset().

        Args:
            reason: Trigger label ("cleanup", "stop", "timeout", "restart")
            commit: Mark the flushed text as consumed so later transcripts
                do not scan it again

        Returns:
            The flushed sentence, or None if the remainder is empty, too
            short or a suppressed duplicate
        """
        remainder = self.state.remainder
        if not remainder or len(remainder) < self.config.min_sentence_length:
            return None

        if commit:
            self._commit(len(self.state.accumulated_text))

        if not self._passes_suppression(remainder):
            logger.debug(f"Suppressed forced flush of duplicate '{preview_text(remainder)}'")
            return None

        logger.info(
            f"Force finalized remainder ({reason}): '{preview_text(remainder)}'"
        )

        return CandidateSentence(
            text=remainder,
            reason=SentenceReason.FORCED,
            label=reason
        )

    def reset(self) -> None:
        """Clear all scanning state."""
        self.state.clear()
        logger.debug("SentenceBoundaryDetector state reset")

    def get_debug_info(self) -> dict:
        """
        Snapshot of the scanning state for diagnostics.

        Returns:
            Dictionary with lengths, offsets and remainder preview
        """
        return {
            'accumulated_length': len(self.state.accumulated_text),
            'committed_offset': self.state.committed_offset,
            'boundary_count': len(self.state.boundaries),
            'remainder': preview_text(self.state.remainder),
            'has_remainder': self.state.has_remainder,
            'last_emitted_text': preview_text(self.state.last_emitted_text),
            'revision_strategy': self.config.revision_strategy
        }

    def analyze_text(self, text: str) -> dict:
        """
        Dry-run scan of a text without touching session state.

        Useful for tuning the abbreviation and pattern tables.

        Args:
            text: Text to analyze

        Returns:
            Dictionary with the sentences found, the remainder, and each
            terminator the classifier rejected with the rule that matched
        """
        sentences = []
        rejected = []
        span_start = 0

        for index, char in enumerate(text):
            if char not in SENTENCE_TERMINATORS or self._continues_terminator_run(text, index):
                continue

            span = text[span_start:index + 1].strip()
            if len(span) < self.config.min_sentence_length:
                rejected.append({'position': index, 'rule': 'too_short'})
                continue

            rule = self.classifier.match_reason(span)
            if rule is None:
                sentences.append(span)
                span_start = index + 1
            else:
                rejected.append({'position': index, 'rule': rule})

        return {
            'sentences': sentences,
            'remainder': text[span_start:].strip(),
            'rejected_terminators': rejected
        }

    def _prepare_scan(self, text: str) -> Tuple[str, int]:
        """
        Decide which part of the new transcript must be scanned.

        Returns:
            (buffer, base_offset) where buffer[i] corresponds to text[i + base_offset].
            base_offset is negative when a stale remainder is prepended.
        """
        previous = self.state.accumulated_text

        if text.startswith(previous):
            offset = self.state.committed_offset
            carried = self.state.carried_prefix
            if carried:
                return f"{carried} {text[offset:]}", offset - len(carried) - 1
            return text[offset:], offset

        if self.config.revision_strategy == 'full_text':
            remainder = self.state.remainder
            if not remainder:
                self._rollback(0)
                return text, 0
            buffer = f"{remainder} {text}"
            self.state.boundaries = []
            self.state.committed_offset = 0
            logger.info(
                f"Transcript revised, re-scanning full text: '{preview_text(text)}'"
            )
            return buffer, len(text) - len(buffer)

        prefix_length = common_prefix_length(previous, text)
        if prefix_length >= self.state.committed_offset:
            logger.debug(
                f"Transcript revised after committed offset "
                f"{self.state.committed_offset} (common prefix {prefix_length})"
            )
        else:
            self._rollback(prefix_length)
            logger.info(
                f"Transcript revised before committed text, rolled back to "
                f"offset {self.state.committed_offset}"
            )

        return text[self.state.committed_offset:], self.state.committed_offset

    def _rollback(self, limit: int) -> None:
        """Forget boundaries past limit and move the committed offset back."""
        self.state.boundaries = [b for b in self.state.boundaries if b <= limit]
        self.state.committed_offset = self.state.boundaries[-1] if self.state.boundaries else 0

    def _scan(self, buffer: str, base_offset: int) -> List[CandidateSentence]:
        sentences = []
        span_start = 0

        for index, char in enumerate(buffer):
            if char not in SENTENCE_TERMINATORS or self._continues_terminator_run(buffer, index):
                continue

            span = buffer[span_start:index + 1].strip()

            if not any(c.isalnum() for c in span):
                # Stray punctuation left by a revision, nothing to emit
                span_start = index + 1
                self._commit(base_offset + index + 1)
                continue

            if len(span) < self.config.min_sentence_length:
                continue

            if not self.classifier.is_sentence_terminator(span):
                logger.debug(f"Rejected terminator in '{preview_text(span[-30:])}'")
                continue

            sentences.append(CandidateSentence(text=span))
            span_start = index + 1
            self._commit(base_offset + index + 1)

        self.state.remainder = buffer[span_start:].strip()
        tail_start = len(self.state.accumulated_text) - (len(buffer) - span_start)
        self.state.committed_offset = max(0, tail_start)

        stale_length = max(0, -base_offset)
        if span_start < stale_length:
            self.state.carried_prefix = buffer[span_start:stale_length].strip()
            logger.debug(
                f"Carrying superseded text '{preview_text(self.state.carried_prefix)}' "
                f"at the head of the remainder"
            )
        else:
            self.state.carried_prefix = ""

        return sentences

    def _split_long_remainder(self) -> Optional[CandidateSentence]:
        """
        Split an overlong remainder at its last clause break or transition.

        Disabled when max_remainder_length is 0.
        """
        limit = self.config.max_remainder_length
        if not limit or len(self.state.remainder) <= limit:
            return None

        offset = self.state.committed_offset
        tail = self.state.accumulated_text[offset:]

        split = self._find_split(tail, _CLAUSE_BREAK_RE)
        reason = SentenceReason.CLAUSE_BREAK
        if split is None:
            split = self._find_split(tail, _TRANSITION_RE)
            reason = SentenceReason.TRANSITION
        if split is None:
            return None

        head_end, tail_start = split
        head = tail[:head_end].strip().rstrip(',').strip()
        if self.state.carried_prefix:
            head = f"{self.state.carried_prefix} {head}"
            self.state.carried_prefix = ""

        self._commit(offset + tail_start)
        self.state.remainder = tail[tail_start:].strip()

        logger.info(
            f"Split long remainder at {reason.value}: '{preview_text(head)}'"
        )

        return CandidateSentence(text=head, reason=reason, label=reason.value)

    def _find_split(self, tail: str, pattern: Pattern) -> Optional[Tuple[int, int]]:
        """
        Last match of pattern leaving a long enough head and a non-empty tail.

        Returns:
            (head_end, tail_start) offsets within tail, or None
        """
        best = None
        for match in pattern.finditer(tail):
            head = tail[:match.start() + 1].strip().rstrip(',').strip()
            if len(head) < self.config.min_sentence_length or not tail[match.end():].strip():
                continue
            best = (match.start() + 1, match.end())
        return best

    def _commit(self, offset: int) -> None:
        offset = max(0, offset)
        self.state.committed_offset = offset
        if not self.state.boundaries or self.state.boundaries[-1] < offset:
            self.state.boundaries.append(offset)
        if offset >= len(self.state.accumulated_text):
            self.state.remainder = ""
            self.state.carried_prefix = ""

    def _passes_suppression(self, text: str) -> bool:
        """
        Local duplicate suppression against the last emitted sentence.

        Returns:
            False if text equals the last emitted sentence and is within the
            suppression window, otherwise True (and records text as emitted)
        """
        now = self.clock()
        last_at = self.state.last_emitted_at

        if (
            text == self.state.last_emitted_text
            and last_at is not None
            and now - last_at <= self.config.duplicate_suppression_window_seconds
        ):
            logger.debug(f"Suppressed repeated sentence '{preview_text(text)}'")
            return False

        self.state.last_emitted_text = text
        self.state.last_emitted_at = now
        return True

    def _notify_partial(self, text: str) -> None:
        if self.partial_listener is None:
            return
        try:
            self.partial_listener(text)
        except Exception as e:
            logger.warning(f"Partial listener failed: {e}", exc_info=True)

    @staticmethod
    def _continues_terminator_run(text: str, index: int) -> bool:
        """Whether the next character also terminates ("...", "?!")."""
        return index + 1 < len(text) and text[index + 1] in SENTENCE_TERMINATORS
