"""
Services for transcript reconciliation.

This module provides the sentence terminator classifier, the sentence
boundary detector, the duplicate reconciler, downstream forwarding and the
speaker session that wires them together.
"""

from .sentence_terminator_classifier import (
    SentenceTerminatorClassifier,
    is_sentence_terminator
)
from .sentence_boundary_detector import SentenceBoundaryDetector
from .duplicate_reconciler import DuplicateReconciler
from .result_forwarder import ResultForwarder, ResultSink
from .transcription_event_handler import TranscriptionEventHandler
from .stream_orchestrator import (
    SessionState,
    SpeakerSession,
    load_config_from_environment
)

__all__ = [
    'SentenceTerminatorClassifier',
    'is_sentence_terminator',
    'SentenceBoundaryDetector',
    'DuplicateReconciler',
    'ResultForwarder',
    'ResultSink',
    'TranscriptionEventHandler',
    'SessionState',
    'SpeakerSession',
    'load_config_from_environment'
]
