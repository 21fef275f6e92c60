"""
Speaker session orchestration.

This module provides the SpeakerSession class that drives the sentence
boundary detector and the duplicate reconciler against a live recognizer
event stream, and forwards accepted and replaced sentences downstream.
It is the entry point of the reconciliation pipeline.
"""

import asyncio
import json
import logging
import os
import time
import uuid
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

import Levenshtein

from transcript_reconciler.exceptions import (
    EmissionError,
    RecognizerError,
    SessionStateError
)
from transcript_reconciler.models.configuration import (
    ReconcilerConfig,
    ScannerConfig,
    SessionConfig
)
from transcript_reconciler.models.detection_result import DetectionType
from transcript_reconciler.models.events import (
    AcceptEvent,
    DownstreamEvent,
    RecognitionEvent,
    ReplaceEvent
)
from transcript_reconciler.models.sentence import CandidateSentence
from transcript_reconciler.services.duplicate_reconciler import DuplicateReconciler
from transcript_reconciler.services.result_forwarder import ResultForwarder, ResultSink
from transcript_reconciler.services.sentence_boundary_detector import SentenceBoundaryDetector
from transcript_reconciler.services.transcription_event_handler import TranscriptionEventHandler
from transcript_reconciler.utils.error_codes import ErrorCode, format_error_event
from transcript_reconciler.utils.metrics import MetricsEmitter
from transcript_reconciler.utils.text_normalization import preview_text

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    """Lifecycle state of a speaker session."""

    CREATED = 'created'
    RUNNING = 'running'
    PAUSED = 'paused'
    STOPPED = 'stopped'


def load_config_from_environment() -> SessionConfig:
    """
    Load session configuration from environment variables.

    Environment variables:
    - MIN_SENTENCE_LENGTH: Minimum sentence length (default: 1)
    - DUPLICATE_SUPPRESSION_WINDOW: Local suppression window in seconds (default: 0.5)
    - REVISION_STRATEGY: 'common_prefix' or 'full_text' (default: common_prefix)
    - MAX_REMAINDER_LENGTH: Clause-break split threshold, 0 disables (default: 0)
    - SIMILARITY_THRESHOLD: Similar-duplicate threshold (default: 0.85)
    - MAX_LENGTH_DIFFERENCE_RATIO: Similar-duplicate length tolerance (default: 0.1)
    - MIN_EXPANSION_RATIO: Minimum expansion length ratio (default: 1.1)
    - MAX_CACHE_SIZE: Reconciliation cache ceiling (default: 50)
    - DISCREPANCY_THRESHOLD: Replacement discrepancy warning percentage (default: 20.0)
    - IDLE_FINALIZE_SECONDS: Idle flush delay, unset or empty disables (default: unset)
    - IDLE_CHECK_INTERVAL: Seconds between idle policy checks (default: 0.5)

    Returns:
        SessionConfig with values from environment or defaults

    Raises:
        ConfigurationError: If a value is outside its valid range
        ValueError: If a value cannot be parsed
    """
    idle_seconds = os.getenv('IDLE_FINALIZE_SECONDS', '')

    return SessionConfig(
        scanner=ScannerConfig(
            min_sentence_length=int(os.getenv('MIN_SENTENCE_LENGTH', '1')),
            duplicate_suppression_window_seconds=float(os.getenv('DUPLICATE_SUPPRESSION_WINDOW', '0.5')),
            revision_strategy=os.getenv('REVISION_STRATEGY', 'common_prefix'),
            max_remainder_length=int(os.getenv('MAX_REMAINDER_LENGTH', '0'))
        ),
        reconciler=ReconcilerConfig(
            similarity_threshold=float(os.getenv('SIMILARITY_THRESHOLD', '0.85')),
            max_length_difference_ratio=float(os.getenv('MAX_LENGTH_DIFFERENCE_RATIO', '0.1')),
            min_expansion_ratio=float(os.getenv('MIN_EXPANSION_RATIO', '1.1')),
            max_cache_size=int(os.getenv('MAX_CACHE_SIZE', '50'))
        ),
        discrepancy_threshold=float(os.getenv('DISCREPANCY_THRESHOLD', '20.0')),
        idle_finalize_seconds=float(idle_seconds) if idle_seconds else None,
        idle_check_interval_seconds=float(os.getenv('IDLE_CHECK_INTERVAL', '0.5'))
    )


class SpeakerSession:
    """
    Reconciliation pipeline for one speaker's recognition session.

    This class owns one instance of each sub-component:
    - SentenceBoundaryDetector: splits the accumulating transcript
    - DuplicateReconciler: drops duplicates and detects expansions
    - ResultForwarder: delivers events downstream in order
    - TranscriptionEventHandler: parses raw recognizer payloads
    - MetricsEmitter: session metrics

    All state is mutated from the event loop thread. Recognizer callbacks
    running on other threads go through submit_threadsafe().

    Outcomes per candidate sentence:
    - new content: accept event, text added to the cache
    - expansion: replace event, superseded text swapped for the new one
    - exact/subset/similar duplicate: dropped

    Attributes:
        session_id: Session identifier
        config: Session configuration
        state: Lifecycle state
        sequence: Number of events emitted so far
    """

    def __init__(
        self,
        sink: ResultSink,
        config: Optional[SessionConfig] = None,
        session_id: Optional[str] = None,
        metrics: Optional[MetricsEmitter] = None,
        partial_listener: Optional[Callable[[str], None]] = None,
        clock: Callable[[], float] = time.time
    ):
        """
        Initialize speaker session with all sub-components.

        Args:
            sink: Downstream consumer of accept and replace events
            config: Session configuration (default: loaded from environment)
            session_id: Session identifier (default: generated)
            metrics: Metrics emitter (default: new MetricsEmitter)
            partial_listener: Receives every transcript update for live display
            clock: Time source for suppression and idle checks

        Examples:
            >>> session = SpeakerSession(sink, session_id="golden-eagle-427")
            >>> await session.start()
            >>> session.handle_event(RecognitionEvent('partial', 'Hello there.'))
            >>> await session.stop()
        """
        self.config = config or load_config_from_environment()
        self.session_id = session_id or f"session-{uuid.uuid4().hex[:8]}"
        self.clock = clock

        self.metrics = metrics or MetricsEmitter()

        self.detector = SentenceBoundaryDetector(
            config=self.config.scanner,
            partial_listener=partial_listener,
            clock=clock
        )

        self.reconciler = DuplicateReconciler(
            config=self.config.reconciler,
            session_id=self.session_id,
            metrics=self.metrics
        )

        self.forwarder = ResultForwarder(
            sink=sink,
            session_id=self.session_id,
            max_queue_size=self.config.emission_queue_size
        )

        self.event_handler = TranscriptionEventHandler(session_id=self.session_id)

        self.state = SessionState.CREATED
        self.sequence = 0
        self.last_activity: Optional[float] = None
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self.idle_task: Optional[asyncio.Task] = None

        self.event_count = 0
        self.accepted_count = 0
        self.replaced_count = 0
        self.suppressed_count = 0
        self.error_count = 0
        self.last_error: Optional[Dict[str, Any]] = None

        logger.info(
            f"SpeakerSession {self.session_id} initialized with "
            f"revision_strategy={self.config.scanner.revision_strategy}, "
            f"max_cache_size={self.config.reconciler.max_cache_size}"
        )

    @property
    def is_active(self) -> bool:
        return self.state in (SessionState.RUNNING, SessionState.PAUSED)

    async def start(self) -> None:
        """
        Start the session on the running event loop.

        Raises:
            SessionStateError: If the session is already running or paused
        """
        if self.is_active:
            raise SessionStateError(error_code=ErrorCode.SESSION_ALREADY_STARTED)

        self._loop = asyncio.get_running_loop()
        self.forwarder.start()
        self.state = SessionState.RUNNING
        self.last_activity = self.clock()

        if self.config.idle_finalize_seconds is not None:
            self.idle_task = asyncio.create_task(self._idle_watch_loop())

        logger.info(json.dumps({
            'event': 'session_started',
            'session_id': self.session_id
        }))

    def handle_event(
        self,
        event: Union[RecognitionEvent, Dict[str, Any]]
    ) -> List[DownstreamEvent]:
        """
        Process one recognizer event.

        Partial and final events are handled the same way: the transcript is
        scanned for completed sentences and each sentence is reconciled.
        Error payloads are routed to handle_error(). Malformed payloads are
        logged and ignored.

        Args:
            event: RecognitionEvent or raw recognizer payload

        Returns:
            Events queued for downstream delivery by this call

        Raises:
            SessionStateError: If the session is not started or already stopped
        """
        self._require_active()

        if self.state == SessionState.PAUSED:
            logger.debug(f"Session {self.session_id} paused, ignoring event")
            return []

        if isinstance(event, dict):
            try:
                event = self.event_handler.parse_event(event)
            except RecognizerError as e:
                self.handle_error(e)
                return []
            except ValueError as e:
                logger.warning(f"Ignoring malformed recognizer event: {e}")
                return []

        start_time = time.time()
        self.event_count += 1
        self.last_activity = self.clock()

        sentences = self.detector.process_transcript_delta(event.transcript)
        emitted = self._reconcile_all(sentences)

        latency_ms = (time.time() - start_time) * 1000
        self.metrics.emit_processing_latency(self.session_id, latency_ms)

        return emitted

    def submit_threadsafe(self, event: Union[RecognitionEvent, Dict[str, Any]]) -> None:
        """
        Schedule handle_event() on the session's loop from another thread.

        Args:
            event: RecognitionEvent or raw recognizer payload

        Raises:
            SessionStateError: If the session has not been started
        """
        if self._loop is None:
            raise SessionStateError(error_code=ErrorCode.SESSION_NOT_STARTED)
        self._loop.call_soon_threadsafe(self._handle_event_safely, event)

    def handle_error(self, error: Exception) -> Dict[str, Any]:
        """
        Record a recognizer or platform error.

        Scanner and reconciler state are left untouched so the recognizer
        can recover with its in-flight context.

        Args:
            error: RecognizerError or any exception raised by the recognizer

        Returns:
            Formatted error event
        """
        if isinstance(error, RecognizerError):
            error_code = error.error_code
            recoverable = error.recoverable
        else:
            error_code = ErrorCode.RECOGNIZER_UNKNOWN
            recoverable = True

        self.error_count += 1
        self.last_error = format_error_event(
            error_code,
            details=str(error),
            session_id=self.session_id
        )

        log = logger.warning if recoverable else logger.error
        log(json.dumps({
            'event': 'recognizer_error',
            'session_id': self.session_id,
            'code': error_code.value,
            'recoverable': recoverable,
            'details': str(error),
            'remainder_preserved': self.detector.state.has_remainder
        }))

        return self.last_error

    def pause(self) -> None:
        """Ignore recognizer events until resume()."""
        self._require_active()
        self.state = SessionState.PAUSED
        logger.info(f"Session {self.session_id} paused")

    def resume(self) -> None:
        """Resume processing recognizer events."""
        self._require_active()
        self.state = SessionState.RUNNING
        self.last_activity = self.clock()
        logger.info(f"Session {self.session_id} resumed")

    def check_idle(self, now: Optional[float] = None) -> List[DownstreamEvent]:
        """
        Flush the remainder if no transcript arrived for idle_finalize_seconds.

        The flushed text is marked consumed so the recognizer extending it
        later only yields the new words. When idle_finalize_seconds is set,
        start() schedules this check every idle_check_interval_seconds; it
        can also be called directly.

        Args:
            now: Current clock reading (default: clock())

        Returns:
            Events queued by the flush
        """
        idle_seconds = self.config.idle_finalize_seconds
        if (
            idle_seconds is None
            or self.state != SessionState.RUNNING
            or not self.detector.state.has_remainder
            or self.last_activity is None
        ):
            return []

        now = self.clock() if now is None else now
        if now - self.last_activity < idle_seconds:
            return []

        logger.info(json.dumps({
            'event': 'idle_finalize',
            'session_id': self.session_id,
            'idle_seconds': round(now - self.last_activity, 1)
        }))

        self.last_activity = now
        sentence = self.detector.force_finalize('timeout', commit=True)
        return self._reconcile_all([sentence] if sentence else [])

    def restart_recognition(self) -> List[DownstreamEvent]:
        """
        Prepare for a recognizer restart.

        The remainder is flushed and the scanner reset, since the restarted
        recognizer begins a new transcript. The reconciliation cache is kept
        so sentences the new transcript repeats are still recognized.

        Returns:
            Events queued by the flush
        """
        self._require_active()

        sentence = self.detector.force_finalize('restart')
        emitted = self._reconcile_all([sentence] if sentence else [])
        self.detector.reset()

        logger.info(json.dumps({
            'event': 'recognition_restarted',
            'session_id': self.session_id,
            'cache_size': self.reconciler.size()
        }))

        return emitted

    async def stop(self) -> List[DownstreamEvent]:
        """
        Stop the session.

        The remainder is flushed and every queued event delivered before the
        scanner and cache are cleared. Stopping a session that is not active
        does nothing.

        Returns:
            Events queued by the final flush
        """
        if not self.is_active:
            return []

        if self.idle_task:
            self.idle_task.cancel()
            self.idle_task = None

        sentence = self.detector.force_finalize('cleanup')
        emitted = self._reconcile_all([sentence] if sentence else [])
        self.state = SessionState.STOPPED

        await self.forwarder.stop()

        self.detector.reset()
        self.reconciler.clear_cache()
        self.metrics.flush_metrics()

        logger.info(json.dumps({
            'event': 'session_stopped',
            'session_id': self.session_id,
            'events_processed': self.event_count,
            'sentences_accepted': self.accepted_count,
            'sentences_replaced': self.replaced_count,
            'duplicates_suppressed': self.suppressed_count,
            'delivery_failures': self.forwarder.failed_count
        }))

        return emitted

    def get_stats(self) -> Dict[str, Any]:
        """
        Session statistics for monitoring.

        Returns:
            Dictionary with counters, scanner state and cache statistics
        """
        return {
            'session_id': self.session_id,
            'state': self.state.value,
            'events_processed': self.event_count,
            'events_emitted': self.sequence,
            'sentences_accepted': self.accepted_count,
            'sentences_replaced': self.replaced_count,
            'duplicates_suppressed': self.suppressed_count,
            'errors': self.error_count,
            'pending_deliveries': self.forwarder.pending_count,
            'delivery_failures': self.forwarder.failed_count,
            'scanner': self.detector.get_debug_info(),
            'cache': self.reconciler.get_cache_stats()
        }

    def _require_active(self) -> None:
        if self.state == SessionState.CREATED:
            raise SessionStateError(error_code=ErrorCode.SESSION_NOT_STARTED)
        if self.state == SessionState.STOPPED:
            raise SessionStateError(error_code=ErrorCode.SESSION_STOPPED)

    def _handle_event_safely(self, event: Union[RecognitionEvent, Dict[str, Any]]) -> None:
        try:
            self.handle_event(event)
        except SessionStateError as e:
            logger.warning(f"Dropped event submitted to session {self.session_id}: {e}")

    async def _idle_watch_loop(self) -> None:
        """
        Run the idle policy every idle_check_interval_seconds until stop().
        """
        while True:
            await asyncio.sleep(self.config.idle_check_interval_seconds)
            try:
                self.check_idle()
            except Exception as e:
                # Don't re-raise - log and keep watching
                logger.error(
                    f"Idle check failed for session {self.session_id}: {e}",
                    exc_info=True
                )

    def _reconcile_all(self, sentences: List[CandidateSentence]) -> List[DownstreamEvent]:
        emitted = []
        for sentence in sentences:
            event = self._reconcile(sentence)
            if event is not None:
                emitted.append(event)
        return emitted

    def _reconcile(self, sentence: CandidateSentence) -> Optional[DownstreamEvent]:
        """
        Run one candidate through the reconciler and queue the outcome.

        The cache, sequence and counters change only once the event is
        queued, so a candidate that could not be queued is analyzed afresh
        when the recognizer resends it.

        Returns:
            The queued event, or None if the candidate was a duplicate or
            could not be queued
        """
        result = self.reconciler.analyze(sentence.text)

        if result.detection_type not in (DetectionType.NEW_CONTENT, DetectionType.EXPANSION):
            self.suppressed_count += 1
            logger.debug(json.dumps({
                'event': 'duplicate_suppressed',
                'session_id': self.session_id,
                'detection_type': result.detection_type.value,
                'similarity': round(result.similarity, 3),
                'reason': result.reason
            }))
            self.metrics.emit_duplicate_suppressed(self.session_id, result.detection_type.value)
            return None

        sequence = self.sequence + 1
        if result.detection_type == DetectionType.NEW_CONTENT:
            event = AcceptEvent(
                text=sentence.text,
                reason=sentence.label,
                sequence=sequence,
                session_id=self.session_id
            )
        else:
            old_text = self.reconciler.original_text(result.previous_text) or result.previous_text
            event = ReplaceEvent(
                old_text=old_text,
                new_text=sentence.text,
                similarity=result.similarity,
                sequence=sequence,
                session_id=self.session_id
            )

        try:
            self.forwarder.enqueue(event)
        except EmissionError as e:
            logger.error(
                f"Sentence not queued for session {self.session_id}, "
                f"cache left unchanged: {e}"
            )
            return None

        self.sequence = sequence

        if isinstance(event, AcceptEvent):
            self.reconciler.mark_processed(sentence.text)
            self.accepted_count += 1

            logger.info(json.dumps({
                'event': 'sentence_accepted',
                'session_id': self.session_id,
                'sequence': sequence,
                'reason': sentence.label,
                'text_preview': preview_text(sentence.text, 100)
            }))
            self.metrics.emit_sentence_emitted(self.session_id, sentence.label)
        else:
            self.reconciler.remove_from_cache(result.previous_text)
            self.reconciler.mark_processed(sentence.text)
            self.replaced_count += 1

            logger.info(json.dumps({
                'event': 'sentence_replaced',
                'session_id': self.session_id,
                'sequence': sequence,
                'similarity': round(result.similarity, 3),
                'expansion_ratio': round(result.expansion_ratio, 2),
                'old_text_preview': preview_text(event.old_text, 100),
                'new_text_preview': preview_text(sentence.text, 100)
            }))
            self.metrics.emit_expansion_replaced(self.session_id, result.similarity)
            self._check_discrepancy(event.old_text, sentence.text)

        return event

    def _check_discrepancy(self, old_text: str, new_text: str) -> None:
        """
        Log how much a replacement changed the emitted text.

        Listeners already heard old_text, so a large edit distance marks a
        replacement worth reviewing.
        """
        discrepancy_pct = self._calculate_discrepancy(old_text, new_text)
        self.metrics.emit_replacement_discrepancy(self.session_id, discrepancy_pct)

        if discrepancy_pct > self.config.discrepancy_threshold:
            logger.warning(json.dumps({
                'event': 'significant_discrepancy_detected',
                'session_id': self.session_id,
                'discrepancy_percentage': round(discrepancy_pct, 1),
                'threshold': self.config.discrepancy_threshold,
                'old_text_preview': old_text[:100],
                'new_text_preview': new_text[:100]
            }))
        else:
            logger.debug(json.dumps({
                'event': 'discrepancy_within_threshold',
                'session_id': self.session_id,
                'discrepancy_percentage': round(discrepancy_pct, 1),
                'threshold': self.config.discrepancy_threshold
            }))

    @staticmethod
    def _calculate_discrepancy(old_text: str, new_text: str) -> float:
        """
        Discrepancy percentage: (edit_distance / max_length) * 100.

        Examples:
            >>> SpeakerSession._calculate_discrepancy("hello", "hello world")
            54.54545454545454
        """
        max_length = max(len(old_text), len(new_text))
        if max_length == 0:
            return 0.0

        distance = Levenshtein.distance(old_text, new_text)
        return (distance / max_length) * 100
