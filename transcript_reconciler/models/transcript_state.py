"""
Transcript state data model.

One TranscriptState is owned by each SentenceBoundaryDetector, i.e. one per
active recognition session.
"""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass
class TranscriptState:
    """
    Mutable scanning state of a recognition session.

    Attributes:
        accumulated_text: Full trimmed transcript observed so far. Replaced,
            not appended, since recognizers resend the whole hypothesis.
        remainder: Trailing text after the last confirmed sentence boundary
        last_emitted_text: Text of the last sentence the scanner emitted
        last_emitted_at: Clock reading when it was emitted (None if never)
        committed_offset: Offset in accumulated_text where remainder starts
        boundaries: Offsets in accumulated_text of every confirmed sentence end
        carried_prefix: Text of a superseded transcript still heading the
            remainder; it has no offset in accumulated_text
    """

    accumulated_text: str = ""
    remainder: str = ""
    last_emitted_text: str = ""
    last_emitted_at: Optional[float] = None
    committed_offset: int = 0
    boundaries: List[int] = field(default_factory=list)
    carried_prefix: str = ""

    @property
    def has_remainder(self) -> bool:
        """Whether buffered text is waiting for a boundary."""
        return bool(self.remainder)

    def clear(self) -> None:
        """Reset every field to its initial value."""
        self.accumulated_text = ""
        self.remainder = ""
        self.last_emitted_text = ""
        self.last_emitted_at = None
        self.committed_offset = 0
        self.boundaries = []
        self.carried_prefix = ""
