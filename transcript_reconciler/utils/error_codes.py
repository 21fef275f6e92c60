"""
Standardized error codes for transcript reconciliation.

This module provides a centralized enumeration of the error codes used
across the reconciliation pipeline to ensure consistency in error
handling and reporting.
"""

import time
from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    """
    Enumeration of all error codes used in the system.

    Error codes are organized by category:
    - Recognizer (RECOGNIZER_*)
    - Session Management (SESSION_*)
    - Validation (VALIDATION_*)
    - Internal Errors (INTERNAL_*)
    """

    # Recognizer Errors
    RECOGNIZER_UNAVAILABLE = 'RECOGNIZER_UNAVAILABLE'
    RECOGNIZER_NO_MATCH = 'RECOGNIZER_NO_MATCH'
    RECOGNIZER_TIMEOUT = 'RECOGNIZER_TIMEOUT'
    RECOGNIZER_NETWORK = 'RECOGNIZER_NETWORK'
    RECOGNIZER_PERMISSION_DENIED = 'RECOGNIZER_PERMISSION_DENIED'
    RECOGNIZER_UNKNOWN = 'RECOGNIZER_UNKNOWN'

    # Session Management Errors
    SESSION_NOT_STARTED = 'SESSION_NOT_STARTED'
    SESSION_ALREADY_STARTED = 'SESSION_ALREADY_STARTED'
    SESSION_STOPPED = 'SESSION_STOPPED'

    # Validation Errors
    VALIDATION_INVALID_EVENT = 'VALIDATION_INVALID_EVENT'
    VALIDATION_INVALID_PARAMETER = 'VALIDATION_INVALID_PARAMETER'

    # Internal Errors
    INTERNAL_PATTERN_ERROR = 'INTERNAL_PATTERN_ERROR'
    INTERNAL_EMISSION_ERROR = 'INTERNAL_EMISSION_ERROR'
    INTERNAL_CONFIGURATION_ERROR = 'INTERNAL_CONFIGURATION_ERROR'


# Error code to user-friendly message mapping
ERROR_CODE_TO_MESSAGE = {
    # Recognizer
    ErrorCode.RECOGNIZER_UNAVAILABLE: 'Speech recognizer unavailable',
    ErrorCode.RECOGNIZER_NO_MATCH: 'No speech recognized',
    ErrorCode.RECOGNIZER_TIMEOUT: 'Speech recognizer timed out',
    ErrorCode.RECOGNIZER_NETWORK: 'Speech recognizer network error',
    ErrorCode.RECOGNIZER_PERMISSION_DENIED: 'Microphone or speech permission denied',
    ErrorCode.RECOGNIZER_UNKNOWN: 'Speech recognizer error',

    # Session Management
    ErrorCode.SESSION_NOT_STARTED: 'Session has not been started',
    ErrorCode.SESSION_ALREADY_STARTED: 'Session already started',
    ErrorCode.SESSION_STOPPED: 'Session has been stopped',

    # Validation
    ErrorCode.VALIDATION_INVALID_EVENT: 'Invalid recognizer event',
    ErrorCode.VALIDATION_INVALID_PARAMETER: 'Invalid parameter value',

    # Internal Errors
    ErrorCode.INTERNAL_PATTERN_ERROR: 'Sentence pattern evaluation failed',
    ErrorCode.INTERNAL_EMISSION_ERROR: 'Failed to deliver result downstream',
    ErrorCode.INTERNAL_CONFIGURATION_ERROR: 'Configuration error',
}


def get_error_message(error_code: ErrorCode) -> str:
    """
    Get user-friendly error message for error code.

    Args:
        error_code: Error code enum value

    Returns:
        User-friendly error message
    """
    return ERROR_CODE_TO_MESSAGE.get(error_code, 'An error occurred')


def format_error_event(
    error_code: ErrorCode,
    details: Optional[str] = None,
    session_id: Optional[str] = None
) -> dict:
    """
    Format standardized error event.

    Args:
        error_code: Error code enum value
        details: Optional additional error details
        session_id: Optional session the error belongs to

    Returns:
        Formatted error event dictionary

    Example:
        >>> format_error_event(
        ...     ErrorCode.RECOGNIZER_TIMEOUT,
        ...     details='no audio for 10s',
        ...     session_id='golden-eagle-427'
        ... )
        {
            'type': 'error',
            'code': 'RECOGNIZER_TIMEOUT',
            'message': 'Speech recognizer timed out',
            'details': 'no audio for 10s',
            'sessionId': 'golden-eagle-427',
            'timestamp': 1699500000000
        }
    """
    event = {
        'type': 'error',
        'code': error_code.value,
        'message': get_error_message(error_code),
        'timestamp': int(time.time() * 1000)
    }

    if details:
        event['details'] = details

    if session_id:
        event['sessionId'] = session_id

    return event
