"""
Transcript reconciliation for live speech transcription.

Turns the overlapping, revised partial hypotheses of a speech recognizer
into an ordered stream of complete sentences, with duplicates dropped and
expansions reported as replacements.
"""

__version__ = '1.0.0'

from transcript_reconciler.models import (
    AcceptEvent,
    CandidateSentence,
    DetectionType,
    DuplicateDetectionResult,
    ReconcilerConfig,
    RecognitionEvent,
    ReplaceEvent,
    ScannerConfig,
    SessionConfig
)
from transcript_reconciler.services import (
    DuplicateReconciler,
    SentenceBoundaryDetector,
    SentenceTerminatorClassifier,
    SpeakerSession
)

__all__ = [
    'AcceptEvent',
    'CandidateSentence',
    'DetectionType',
    'DuplicateDetectionResult',
    'ReconcilerConfig',
    'RecognitionEvent',
    'ReplaceEvent',
    'ScannerConfig',
    'SessionConfig',
    'DuplicateReconciler',
    'SentenceBoundaryDetector',
    'SentenceTerminatorClassifier',
    'SpeakerSession'
]
