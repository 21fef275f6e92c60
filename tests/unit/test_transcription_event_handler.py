"""
Unit tests for TranscriptionEventHandler class.
"""

import pytest
from transcript_reconciler.exceptions import RecognizerError
from transcript_reconciler.services.transcription_event_handler import TranscriptionEventHandler
from transcript_reconciler.utils.error_codes import ErrorCode


@pytest.fixture
def handler():
    """Create handler for tests."""
    return TranscriptionEventHandler(session_id='test-session-456')


class TestParseEvent:
    """Test suite for payload parsing."""

    def test_typed_payload(self, handler):
        """Test the {'type', 'transcript', 'timestamp'} shape."""
        event = handler.parse_event({
            'type': 'partial',
            'transcript': 'Hello there',
            'timestamp': 1699500000.5
        })

        assert event.event_type == 'partial'
        assert event.transcript == 'Hello there'
        assert event.timestamp == 1699500000.5

    def test_is_final_payload(self, handler):
        """Test the {'isFinal', 'text'} shape."""
        event = handler.parse_event({'isFinal': True, 'text': 'Hello there.'})

        assert event.is_final is True
        assert event.transcript == 'Hello there.'

    def test_missing_timestamp_uses_current_time(self, handler):
        """Test that a missing or invalid timestamp is replaced."""
        event = handler.parse_event({'type': 'final', 'transcript': 'x', 'timestamp': 'soon'})

        assert event.timestamp > 0

    @pytest.mark.parametrize('payload,message', [
        ({}, 'expected a non-empty dictionary'),
        ({'transcript': 'hello'}, "missing 'type' or 'isFinal'"),
        ({'type': 'partial'}, "missing 'transcript'"),
        ({'isFinal': False}, "missing 'text'"),
        ({'type': 'partial', 'transcript': 42}, 'transcript must be a string'),
        ({'type': 'interim', 'transcript': 'hello'}, 'event_type must be one of'),
    ])
    def test_invalid_payloads(self, handler, payload, message):
        """Test that malformed payloads raise ValueError."""
        with pytest.raises(ValueError, match=message):
            handler.parse_event(payload)


class TestErrorPayloads:
    """Test suite for recognizer error payloads."""

    def test_error_dict(self, handler):
        """Test that an error dictionary becomes a RecognizerError."""
        with pytest.raises(RecognizerError) as exc_info:
            handler.parse_event({'error': {'code': 'network', 'message': 'connection reset'}})

        assert exc_info.value.error_code == ErrorCode.RECOGNIZER_NETWORK
        assert exc_info.value.recoverable is True
        assert str(exc_info.value) == 'connection reset'

    def test_error_string(self, handler):
        """Test that an error identifier string is mapped."""
        with pytest.raises(RecognizerError) as exc_info:
            handler.parse_event({'error': 'no-match'})

        assert exc_info.value.error_code == ErrorCode.RECOGNIZER_NO_MATCH
        assert str(exc_info.value) == 'No speech recognized'

    def test_permission_error_is_unrecoverable(self, handler):
        """Test that permission errors are flagged unrecoverable."""
        with pytest.raises(RecognizerError) as exc_info:
            handler.parse_event({'error': 'not-allowed'})

        assert exc_info.value.recoverable is False

    def test_unknown_error(self, handler):
        """Test that unknown identifiers map to RECOGNIZER_UNKNOWN."""
        with pytest.raises(RecognizerError) as exc_info:
            handler.parse_event({'error': {'code': 'aborted'}})

        assert exc_info.value.error_code == ErrorCode.RECOGNIZER_UNKNOWN
