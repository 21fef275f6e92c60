"""
Recognizer event parsing.

This module provides the TranscriptionEventHandler class that turns raw
recognizer callback payloads into RecognitionEvent objects, or into a
RecognizerError when the payload reports a platform error.
"""

import logging
import time
from typing import Any, Dict

from transcript_reconciler.exceptions import RecognizerError
from transcript_reconciler.models.events import RecognitionEvent
from transcript_reconciler.utils.error_codes import ErrorCode

logger = logging.getLogger(__name__)

# Recognizer error identifiers mapped to error codes
RECOGNIZER_ERROR_CODES = {
    'unavailable': ErrorCode.RECOGNIZER_UNAVAILABLE,
    'no_match': ErrorCode.RECOGNIZER_NO_MATCH,
    'no-match': ErrorCode.RECOGNIZER_NO_MATCH,
    'timeout': ErrorCode.RECOGNIZER_TIMEOUT,
    'network': ErrorCode.RECOGNIZER_NETWORK,
    'permission_denied': ErrorCode.RECOGNIZER_PERMISSION_DENIED,
    'not-allowed': ErrorCode.RECOGNIZER_PERMISSION_DENIED,
}

UNRECOVERABLE_CODES = (ErrorCode.RECOGNIZER_PERMISSION_DENIED,)


class TranscriptionEventHandler:
    """
    Parser for recognizer callback payloads.

    Two payload shapes are accepted:
    - {'type': 'partial'|'final', 'transcript': str, 'timestamp': float}
    - {'isFinal': bool, 'text': str}

    A payload carrying an 'error' field is converted to RecognizerError.

    Attributes:
        session_id: Session ID used in logs
    """

    def __init__(self, session_id: str = ""):
        self.session_id = session_id

    def parse_event(self, event: Dict[str, Any]) -> RecognitionEvent:
        """
        Parse a recognizer payload.

        Args:
            event: Raw payload dictionary

        Returns:
            RecognitionEvent for the payload

        Raises:
            RecognizerError: If the payload reports a recognizer error
            ValueError: If the payload structure is invalid

        Examples:
            >>> handler = TranscriptionEventHandler()
            >>> handler.parse_event({'type': 'partial', 'transcript': 'hello'}).event_type
            'partial'
            >>> handler.parse_event({'isFinal': True, 'text': 'hello.'}).is_final
            True
        """
        if not isinstance(event, dict) or not event:
            raise ValueError("Invalid event: expected a non-empty dictionary")

        if 'error' in event:
            raise self._parse_error(event['error'])

        if 'type' in event:
            event_type = event['type']
            if 'transcript' not in event:
                raise ValueError("Invalid event: missing 'transcript' field")
            transcript = event['transcript']
        elif 'isFinal' in event:
            event_type = 'final' if event['isFinal'] else 'partial'
            if 'text' not in event:
                raise ValueError("Invalid event: missing 'text' field")
            transcript = event['text']
        else:
            raise ValueError("Invalid event: missing 'type' or 'isFinal' field")

        if not isinstance(transcript, str):
            raise ValueError(
                f"Invalid event: transcript must be a string, got {type(transcript).__name__}"
            )

        timestamp = event.get('timestamp')
        if not isinstance(timestamp, (int, float)) or timestamp <= 0:
            timestamp = time.time()

        return RecognitionEvent(
            event_type=event_type,
            transcript=transcript,
            timestamp=float(timestamp)
        )

    def _parse_error(self, error: Any) -> RecognizerError:
        """
        Build a RecognizerError from the payload's error field.

        The field is either a string identifier or a dictionary with
        'code' and 'message'.
        """
        if isinstance(error, dict):
            identifier = str(error.get('code', '')).lower()
            message = error.get('message')
        else:
            identifier = str(error).lower()
            message = None

        error_code = RECOGNIZER_ERROR_CODES.get(identifier, ErrorCode.RECOGNIZER_UNKNOWN)

        logger.warning(
            f"Recognizer reported error for session {self.session_id}: "
            f"{identifier or 'unknown'} ({error_code.value})"
        )

        return RecognizerError(
            message=message,
            error_code=error_code,
            recoverable=error_code not in UNRECOVERABLE_CODES
        )
