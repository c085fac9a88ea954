"""
Shared utilities for skycast.
"""

from .error_handling import (
    ErrorAggregator,
    ErrorCategory,
    ErrorContext,
    ErrorSeverity,
    get_error_aggregator,
    handle_error,
    safe_execute,
    with_error_handling,
)

__all__ = [
    'ErrorAggregator',
    'ErrorCategory',
    'ErrorContext',
    'ErrorSeverity',
    'get_error_aggregator',
    'handle_error',
    'safe_execute',
    'with_error_handling',
]
