"""
Error codes for skycast.

Provides a central registry of machine-readable error codes, the exception
that carries them, and the process exit code for each.
"""

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class ErrorCode:
    """A single error code with metadata."""
    code: str
    name: str
    message: str
    hint: str = ""
    exit_code: int = 1


# Credentials
API_KEY_MISSING = ErrorCode(
    "E001", "API_KEY_MISSING", "No API key configured",
    "Set WEATHER_API_KEY or pass --api-key.", exit_code=2,
)
API_KEY_INVALID = ErrorCode(
    "E002", "API_KEY_INVALID", "API key rejected by the weather provider",
    "Check WEATHER_API_KEY. New keys can take a few hours to activate.", exit_code=2,
)

# Lookup
LOCATION_NOT_FOUND = ErrorCode(
    "E003", "LOCATION_NOT_FOUND", "Location not found",
    "Try 'City' or 'City,CountryCode', e.g. 'Paris,FR'.", exit_code=3,
)

# Transport
NETWORK_ERROR = ErrorCode(
    "E004", "NETWORK_ERROR", "Could not reach the weather provider",
    "Check your internet connection and try again.", exit_code=4,
)
RATE_LIMIT = ErrorCode(
    "E005", "RATE_LIMIT", "Rate limit exceeded",
    "Wait a minute and retry.", exit_code=5,
)

# Input & configuration
INVALID_INPUT = ErrorCode(
    "E006", "INVALID_INPUT", "Invalid input",
    "Run: skycast --help", exit_code=6,
)
CONFIG_ERROR = ErrorCode(
    "E007", "CONFIG_ERROR", "Configuration error",
    "Check the file at $SKYCAST_CONFIG or ~/.config/skycast/config.yaml.",
)
INTERNAL_ERROR = ErrorCode(
    "E008", "INTERNAL_ERROR", "Internal error",
    "Re-run with --verbose for details.",
)

# Registry for code-based lookup
_ALL: Dict[str, ErrorCode] = {
    ec.code: ec
    for ec in [
        API_KEY_MISSING, API_KEY_INVALID, LOCATION_NOT_FOUND, NETWORK_ERROR,
        RATE_LIMIT, INVALID_INPUT, CONFIG_ERROR, INTERNAL_ERROR,
    ]
}

_BY_NAME: Dict[str, ErrorCode] = {ec.name: ec for ec in _ALL.values()}


def lookup(code: str) -> ErrorCode:
    """Look up an error code by its string code ('E001') or name ('RATE_LIMIT')."""
    return _ALL.get(code) or _BY_NAME.get(code, INTERNAL_ERROR)


class WeatherError(Exception):
    """An expected failure carrying an ErrorCode."""

    def __init__(
        self,
        error_code: ErrorCode,
        detail: str = "",
        status_code: Optional[int] = None,
    ):
        self.error_code = error_code
        self.detail = detail
        self.status_code = status_code
        super().__init__(self.format_message())

    def format_message(self) -> str:
        message = f"{self.error_code.message}"
        if self.detail:
            message += f": {self.detail}"
        return message

    def __repr__(self) -> str:
        return (f"WeatherError({self.error_code.name}, detail={self.detail!r}, "
                f"status_code={self.status_code!r})")


def exit_code_for(exc: BaseException) -> int:
    """Map an exception to a process exit code (1 for anything unexpected)."""
    if isinstance(exc, WeatherError):
        return exc.error_code.exit_code
    return INTERNAL_ERROR.exit_code
