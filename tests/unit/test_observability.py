"""
Unit tests for metrics, error codes, exceptions and structured logging.
"""

import json
import logging
import pytest
from transcript_reconciler.exceptions import (
    ConfigurationError,
    PatternMatchError,
    RecognizerError,
    ReconciliationError,
    SessionStateError
)
from transcript_reconciler.utils.error_codes import (
    ErrorCode,
    format_error_event,
    get_error_message
)
from transcript_reconciler.utils.metrics import MetricsEmitter
from transcript_reconciler.utils.structured_logger import StructuredFormatter


class TestMetricsEmitter:
    """Test suite for MetricsEmitter."""

    def test_emit_sentence_emitted(self, caplog):
        """Test that metrics are logged and buffered."""
        emitter = MetricsEmitter()

        with caplog.at_level(logging.INFO):
            emitter.emit_sentence_emitted('test-session-456', 'punctuation-detected')

        assert 'METRIC SentencesEmitted=1 unit=Count' in caplog.text
        assert emitter.metrics_buffer[0]['dimensions'] == {
            'SessionId': 'test-session-456',
            'Reason': 'punctuation-detected'
        }

    def test_cache_cleared_skips_zero(self):
        """Test that clearing an empty cache emits nothing."""
        emitter = MetricsEmitter()

        emitter.emit_cache_cleared('test-session-456', 0)
        emitter.emit_cache_cleared('test-session-456', 51)

        assert [m['value'] for m in emitter.metrics_buffer] == [51]

    def test_flush_returns_and_resets_buffer(self):
        """Test that flush hands back buffered metrics."""
        emitter = MetricsEmitter(namespace='Test/Namespace')
        emitter.emit_duplicate_suppressed('s', 'exact_duplicate')
        emitter.emit_replacement_discrepancy('s', 26.9)

        flushed = emitter.flush_metrics()

        assert [m['metric_name'] for m in flushed] == ['DuplicatesSuppressed', 'ReplacementDiscrepancy']
        assert flushed[0]['namespace'] == 'Test/Namespace'
        assert emitter.metrics_buffer == []


class TestErrorCodes:
    """Test suite for error codes and error events."""

    def test_every_code_has_message(self):
        """Test that the message map covers the enumeration."""
        for code in ErrorCode:
            assert get_error_message(code) != 'An error occurred'

    def test_format_error_event(self):
        """Test the error event structure."""
        event = format_error_event(
            ErrorCode.RECOGNIZER_TIMEOUT,
            details='no audio for 10s',
            session_id='golden-eagle-427'
        )

        assert event['type'] == 'error'
        assert event['code'] == 'RECOGNIZER_TIMEOUT'
        assert event['message'] == 'Speech recognizer timed out'
        assert event['details'] == 'no audio for 10s'
        assert event['sessionId'] == 'golden-eagle-427'
        assert isinstance(event['timestamp'], int)

    def test_format_error_event_omits_optional_fields(self):
        """Test that details and session are optional."""
        event = format_error_event(ErrorCode.SESSION_STOPPED)

        assert 'details' not in event
        assert 'sessionId' not in event


class TestExceptions:
    """Test suite for the exception hierarchy."""

    def test_default_messages_come_from_error_codes(self):
        """Test that exceptions without a message use the code's message."""
        assert str(SessionStateError()) == 'Session has not been started'
        assert str(SessionStateError(error_code=ErrorCode.SESSION_STOPPED)) == 'Session has been stopped'

    def test_pattern_match_error(self):
        """Test PatternMatchError fields and message."""
        cause = ValueError('bad')
        error = PatternMatchError('decimal', cause)

        assert error.pattern_name == 'decimal'
        assert error.cause is cause
        assert str(error) == "Pattern 'decimal' failed: bad"
        assert error.error_code == ErrorCode.INTERNAL_PATTERN_ERROR

    def test_hierarchy(self):
        """Test base classes."""
        assert issubclass(ConfigurationError, ValueError)
        assert issubclass(RecognizerError, ReconciliationError)
        assert RecognizerError().recoverable is True


class TestStructuredFormatter:
    """Test suite for StructuredFormatter."""

    def _record(self, message, **extra):
        record = logging.LogRecord(
            name='transcript_reconciler.test',
            level=logging.INFO,
            pathname=__file__,
            lineno=1,
            msg=message,
            args=(),
            exc_info=None
        )
        for key, value in extra.items():
            setattr(record, key, value)
        return record

    def test_plain_message(self):
        """Test formatting of a plain message with extra fields."""
        output = json.loads(StructuredFormatter().format(
            self._record('Session paused', session_id='golden-eagle-427')
        ))

        assert output['level'] == 'INFO'
        assert output['component'] == 'transcript_reconciler.test'
        assert output['message'] == 'Session paused'
        assert output['session_id'] == 'golden-eagle-427'
        assert output['timestamp'].endswith('Z')

    def test_json_message_is_merged(self):
        """Test that JSON decision logs become top-level fields."""
        message = json.dumps({'event': 'sentence_accepted', 'sequence': 3})

        output = json.loads(StructuredFormatter().format(self._record(message)))

        assert output['event'] == 'sentence_accepted'
        assert output['sequence'] == 3
        assert 'message' not in output

    def test_unserializable_extra_is_stringified(self):
        """Test that extras that are not JSON serializable are converted."""
        output = json.loads(StructuredFormatter().format(self._record('x', payload={1, 2})))

        assert isinstance(output['payload'], str)
