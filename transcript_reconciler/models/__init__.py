"""
Data models for transcript reconciliation.

This module provides dataclasses for representing scanner state, candidate
sentences, reconciliation outcomes, events and configuration.
"""

from .configuration import ScannerConfig, ReconcilerConfig, SessionConfig
from .transcript_state import TranscriptState
from .sentence import CandidateSentence, SentenceReason
from .detection_result import DuplicateDetectionResult, DetectionType
from .events import RecognitionEvent, AcceptEvent, ReplaceEvent, DownstreamEvent

__all__ = [
    'ScannerConfig',
    'ReconcilerConfig',
    'SessionConfig',
    'TranscriptState',
    'CandidateSentence',
    'SentenceReason',
    'DuplicateDetectionResult',
    'DetectionType',
    'RecognitionEvent',
    'AcceptEvent',
    'ReplaceEvent',
    'DownstreamEvent'
]
