"""
Configuration data for transcript reconciliation.
"""

from .abbreviations import (
    ABBREVIATIONS,
    FALSE_TERMINATOR_PATTERNS,
    CLAUSE_BREAK_PATTERN,
    TRANSITION_PATTERN
)

__all__ = [
    'ABBREVIATIONS',
    'FALSE_TERMINATOR_PATTERNS',
    'CLAUSE_BREAK_PATTERN',
    'TRANSITION_PATTERN'
]
