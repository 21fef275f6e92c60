"""
Utility functions for transcript reconciliation.

This module provides text normalization and similarity helpers, metrics,
error codes and structured logging setup.
"""

from .text_normalization import (
    normalize_text,
    word_set,
    jaccard_similarity,
    length_difference_ratio,
    common_prefix_length,
    preview_text
)
from .metrics import MetricsEmitter
from .error_codes import ErrorCode, get_error_message, format_error_event
from .structured_logger import StructuredFormatter, configure_structured_logging

__all__ = [
    'normalize_text',
    'word_set',
    'jaccard_similarity',
    'length_difference_ratio',
    'common_prefix_length',
    'preview_text',
    'MetricsEmitter',
    'ErrorCode',
    'get_error_message',
    'format_error_event',
    'StructuredFormatter',
    'configure_structured_logging'
]
