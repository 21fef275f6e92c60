"""
Custom exceptions for transcript reconciliation.

This module defines specific exception types for the failure scenarios
of the sentence detection and reconciliation pipeline. None of them is
raised out of the Scanner or Reconciler during normal operation; they
mark the seams where the orchestrator and its collaborators meet.
"""

from typing import Optional

from transcript_reconciler.utils.error_codes import ErrorCode, get_error_message


class ReconciliationError(Exception):
    """Base exception for the transcript reconciliation package."""

    error_code: ErrorCode = ErrorCode.INTERNAL_CONFIGURATION_ERROR

    def __init__(self, message: Optional[str] = None, error_code: Optional[ErrorCode] = None):
        if error_code is not None:
            self.error_code = error_code
        super().__init__(message or get_error_message(self.error_code))


class ConfigurationError(ReconciliationError, ValueError):
    """
    Raised when a configuration value is outside its valid range.

    Subclasses ValueError so callers validating plain dataclass
    configuration can catch either.
    """

    error_code = ErrorCode.INTERNAL_CONFIGURATION_ERROR


class PatternMatchError(ReconciliationError):
    """
    Raised when a configured false-terminator pattern cannot be evaluated.

    This can occur due to:
    - A malformed regular expression in the pattern table
    - A non-string entry in the abbreviation table

    The classifier catches it and treats the span as "not a terminator".
    """

    error_code = ErrorCode.INTERNAL_PATTERN_ERROR

    def __init__(self, pattern_name: str, cause: Exception):
        self.pattern_name = pattern_name
        self.cause = cause
        super().__init__(f"Pattern '{pattern_name}' failed: {cause}")


class RecognizerError(ReconciliationError):
    """
    Upstream speech recognizer or platform error.

    Propagated to the orchestrator as-is. It never resets Scanner or
    Reconciler state, so the recognizer can auto-recover with its
    in-flight context intact.
    """

    error_code = ErrorCode.RECOGNIZER_UNKNOWN

    def __init__(
        self,
        message: Optional[str] = None,
        error_code: Optional[ErrorCode] = None,
        recoverable: bool = True
    ):
        self.recoverable = recoverable
        super().__init__(message, error_code)


class SessionStateError(ReconciliationError):
    """Raised when a session operation is invalid for the current lifecycle state."""

    error_code = ErrorCode.SESSION_NOT_STARTED


class EmissionError(ReconciliationError):
    """Raised when the downstream sink fails to deliver an event."""

    error_code = ErrorCode.INTERNAL_EMISSION_ERROR
