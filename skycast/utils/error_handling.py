"""
Error Handling Utilities for skycast

Consistent, logged error handling for the code around the renderer:
1. Error categorization and severity levels
2. Detailed log messages with context and stack trace
3. Deduplication of repeated errors
4. Retry with exponential backoff

USAGE:
    from skycast.utils.error_handling import (
        handle_error,
        ErrorCategory,
        safe_execute,
        with_error_handling,
    )

    @with_error_handling(category=ErrorCategory.NETWORK, retry_count=2, reraise=True)
    def fetch():
        ...

    with safe_execute("loading config", ErrorCategory.CONFIG) as result:
        result.value = load()
"""

import functools
import logging
import threading
import time
import traceback
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


class ErrorCategory(Enum):
    """Where an error came from."""
    # Weather provider unreachable or timing out
    NETWORK = "network"

    # Config file read/write
    FILESYSTEM = "filesystem"

    # Bad config values
    CONFIG = "configuration"

    # Provider answered with an error or a malformed payload
    PROVIDER = "provider"

    # Drawing or animating a scene
    RENDER = "render"

    # Bad user input
    INPUT = "input"

    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


_LOG_LEVELS = {
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


@dataclass
class ErrorContext:
    """Detailed context information for an error."""
    error: Exception
    category: ErrorCategory
    severity: ErrorSeverity
    operation: str
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    thread_name: str = field(default_factory=lambda: threading.current_thread().name)
    stack_trace: str = ""
    additional_context: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.stack_trace:
            self.stack_trace = traceback.format_exc()

    @property
    def key(self) -> str:
        """Deduplication key."""
        return f"{self.category.value}:{type(self.error).__name__}:{self.operation}"

    def format_log_message(self) -> str:
        """Format a detailed log message."""
        lines = [
            f"{self.severity.value.upper()} in {self.operation}",
            f"  Category: {self.category.value}",
            f"  Type: {type(self.error).__name__}",
            f"  Message: {self.error}",
            f"  Thread: {self.thread_name}",
        ]

        if self.additional_context:
            lines.append("  Context:")
            for key, value in self.additional_context.items():
                lines.append(f"    {key}: {value}")

        # format_exc() yields "NoneType: None" outside an except block
        trace = self.stack_trace.strip()
        if trace and trace != "NoneType: None":
            lines.append("  Stack Trace:")
            for line in trace.split('\n'):
                if line.strip():
                    lines.append(f"    {line}")

        return '\n'.join(lines)


class ErrorAggregator:
    """
    Counts handled errors so repeats can be logged briefly.

    Thread-safe. Repeats of the same error within the dedup window are
    counted but not stored. Counts are kept only for stored errors, so
    memory stays bounded by max_errors.
    """

    def __init__(self, max_errors: int = 200, dedup_window_seconds: float = 60):
        self._errors: List[ErrorContext] = []
        self._lock = threading.Lock()
        self._max_errors = max_errors
        self._dedup_window = dedup_window_seconds
        self._error_counts: Dict[str, int] = {}
        self._last_error_times: Dict[str, float] = {}

    def add_error(self, context: ErrorContext) -> bool:
        """
        Add an error to the aggregator.

        Returns True if error was added, False if deduplicated.
        """
        key = context.key
        now = time.monotonic()

        with self._lock:
            last_time = self._last_error_times.get(key)
            if last_time is not None and now - last_time < self._dedup_window:
                self._error_counts[key] = self._error_counts.get(key, 0) + 1
                return False

            self._errors.append(context)
            self._last_error_times[key] = now
            self._error_counts[key] = 1

            if len(self._errors) > self._max_errors:
                self._errors = self._errors[-self._max_errors:]
                live = {ctx.key for ctx in self._errors}
                self._error_counts = {k: v for k, v in self._error_counts.items() if k in live}
                self._last_error_times = {
                    k: v for k, v in self._last_error_times.items() if k in live
                }
            return True

    def get_error_summary(self) -> Dict[str, Any]:
        """Get a summary of aggregated errors."""
        with self._lock:
            by_category: Dict[str, int] = {}
            for ctx in self._errors:
                cat = ctx.category.value
                by_category[cat] = by_category.get(cat, 0) + 1

            return {
                'total_errors': len(self._errors),
                'by_category': by_category,
                'deduplicated_counts': dict(self._error_counts),
            }


_global_aggregator = ErrorAggregator()


def get_error_aggregator() -> ErrorAggregator:
    """Get the global error aggregator instance."""
    return _global_aggregator


def determine_severity(error: Exception, category: ErrorCategory) -> ErrorSeverity:
    """Pick a severity from the error type and category."""
    if isinstance(error, FileNotFoundError):
        return ErrorSeverity.WARNING

    if category in (ErrorCategory.CONFIG, ErrorCategory.INPUT):
        return ErrorSeverity.WARNING

    # Timeouts are usually transient
    if 'timeout' in type(error).__name__.lower() or 'timed out' in str(error).lower():
        return ErrorSeverity.WARNING

    if isinstance(error, (MemoryError, RecursionError)):
        return ErrorSeverity.CRITICAL

    return ErrorSeverity.ERROR


def handle_error(
    error: Exception,
    operation: str,
    category: ErrorCategory = ErrorCategory.UNKNOWN,
    severity: Optional[ErrorSeverity] = None,
    additional_context: Optional[Dict[str, Any]] = None,
    reraise: bool = False,
    log_level: Optional[int] = None,
) -> ErrorContext:
    """
    Log an error with context and record it.

    Args:
        error: The exception that occurred
        operation: Name of the operation that failed
        category: Category of the error
        severity: Severity level (auto-determined if not provided)
        additional_context: Additional context information
        reraise: Whether to re-raise the exception after handling
        log_level: Override the log level (derived from severity if not provided)

    Returns:
        ErrorContext with full error details
    """
    if severity is None:
        severity = determine_severity(error, category)

    context = ErrorContext(
        error=error,
        category=category,
        severity=severity,
        operation=operation,
        additional_context=additional_context or {},
    )

    was_added = _global_aggregator.add_error(context)

    if log_level is None:
        log_level = _LOG_LEVELS.get(severity, logging.ERROR)

    if was_added:
        logger.log(log_level, context.format_log_message())
    else:
        logger.log(log_level, f"[DEDUPLICATED] {operation}: {type(error).__name__}: {error}")

    if reraise:
        raise error

    return context


class SafeResult:
    """Outcome of a safe_execute block."""

    def __init__(self, default: Any = None):
        self.value = default
        self.error: Optional[ErrorContext] = None
        self.success = True


@contextmanager
def safe_execute(
    operation: str,
    category: ErrorCategory = ErrorCategory.UNKNOWN,
    default_return: Any = None,
    reraise: bool = False,
    additional_context: Optional[Dict[str, Any]] = None,
):
    """
    Context manager that logs and swallows (or re-raises) errors.

    Usage:
        with safe_execute("reading config", ErrorCategory.CONFIG, default_return={}) as result:
            result.value = read()
        data = result.value
    """
    result = SafeResult(default_return)
    try:
        yield result
    except Exception as e:
        result.success = False
        result.value = default_return
        result.error = handle_error(
            e,
            operation,
            category=category,
            additional_context=additional_context,
            reraise=reraise,
        )


def with_error_handling(
    category: ErrorCategory = ErrorCategory.UNKNOWN,
    operation: Optional[str] = None,
    default_return: Any = None,
    reraise: bool = False,
    retry_count: int = 0,
    retry_delay: float = 1.0,
    retry_backoff: float = 2.0,
    retry_exceptions: Optional[Tuple[Type[Exception], ...]] = None,
):
    """
    Decorator for functions with automatic error handling.

    Args:
        category: Error category for this function
        operation: Operation name (defaults to function name)
        default_return: Value to return on error
        reraise: Whether to re-raise the last exception once retries are spent
        retry_count: Number of retries on failure
        retry_delay: Initial delay between retries
        retry_backoff: Multiplier for delay on each retry
        retry_exceptions: Exception types to retry on (defaults to all)
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args, **kwargs) -> T:
            op_name = operation or getattr(func, '__name__', repr(func))
            attempts = 0
            current_delay = retry_delay
            last_error: Optional[Exception] = None

            while attempts <= retry_count:
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    last_error = e
                    attempts += 1

                    should_retry = (
                        attempts <= retry_count and
                        (retry_exceptions is None or isinstance(e, retry_exceptions))
                    )

                    handle_error(
                        e,
                        op_name,
                        category=category,
                        additional_context={
                            'attempt': attempts,
                            'max_attempts': retry_count + 1,
                            'will_retry': should_retry,
                        },
                        # Attempts that will be retried log at DEBUG
                        log_level=logging.DEBUG if should_retry else None,
                    )

                    if not should_retry:
                        break

                    logger.info(
                        f"Retrying {op_name} in {current_delay:.1f}s "
                        f"(attempt {attempts}/{retry_count + 1})"
                    )
                    time.sleep(current_delay)
                    current_delay *= retry_backoff

            if reraise and last_error is not None:
                raise last_error

            return default_return

        return wrapper
    return decorator
