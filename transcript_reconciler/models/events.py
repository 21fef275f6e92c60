"""
Inbound recognizer events and outbound downstream events.

RecognitionEvent is what the audio/recognition layer hands to a session.
AcceptEvent and ReplaceEvent are what a session hands to translation and
broadcast, in order.
"""

import time
from dataclasses import dataclass, field
from typing import Union

EVENT_TYPES = ('partial', 'final')


@dataclass
class RecognitionEvent:
    """
    A transcript hypothesis from the speech recognizer.

    "final" events are treated exactly like "partial" ones: punctuation, not
    the recognizer's final flag, decides sentence completion.

    Attributes:
        event_type: 'partial' or 'final'
        transcript: Complete current transcript as reported by the recognizer
        timestamp: Unix timestamp (seconds) when the event was produced
    """

    event_type: str
    transcript: str
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self):
        """Validate field constraints."""
        if self.event_type not in EVENT_TYPES:
            raise ValueError(f"event_type must be one of {EVENT_TYPES}, got '{self.event_type}'")

        if self.transcript is None:
            raise ValueError("transcript cannot be None")

        if self.timestamp <= 0:
            raise ValueError(f"timestamp must be positive, got {self.timestamp}")

    @property
    def is_final(self) -> bool:
        return self.event_type == 'final'


@dataclass(frozen=True)
class AcceptEvent:
    """
    New sentence accepted for translation and broadcast.

    Attributes:
        text: Sentence text as spoken (original casing)
        reason: Trigger label ("punctuation-detected", "cleanup", ...)
        sequence: Per-session emission order, starting at 1
        session_id: Session this event belongs to
    """

    text: str
    reason: str
    sequence: int
    session_id: str = ""

    def to_dict(self) -> dict:
        return {
            'type': 'accept',
            'text': self.text,
            'reason': self.reason,
            'sequence': self.sequence,
            'sessionId': self.session_id
        }


@dataclass(frozen=True)
class ReplaceEvent:
    """
    Previously emitted text superseded by an expanded version.

    Attributes:
        old_text: Text previously emitted (original casing)
        new_text: Superseding text
        similarity: Word-set similarity between the two
        sequence: Per-session emission order, starting at 1
        session_id: Session this event belongs to
    """

    old_text: str
    new_text: str
    similarity: float
    sequence: int
    session_id: str = ""

    def to_dict(self) -> dict:
        return {
            'type': 'replace',
            'oldText': self.old_text,
            'newText': self.new_text,
            'similarity': round(self.similarity, 3),
            'sequence': self.sequence,
            'sessionId': self.session_id
        }


DownstreamEvent = Union[AcceptEvent, ReplaceEvent]
