"""
Terminal context detection.

Only two capabilities are checked: the column count and whether color output
is wanted. Everything else is assumed (24-bit color, ANSI cursor control).
"""

import logging
import os
import shutil
from typing import Mapping, Optional

from .constants import DEFAULT_TERM_WIDTH

logger = logging.getLogger(__name__)


def detect_terminal_width(default: int = DEFAULT_TERM_WIDTH) -> int:
    """
    Get the terminal width in columns.

    Falls back to `default` when the width is unreported or reported as 0
    (pipes, some CI runners).
    """
    try:
        columns = shutil.get_terminal_size(fallback=(default, 24)).columns
    except (OSError, ValueError) as e:
        logger.debug(f"Terminal size unavailable: {e}")
        return default
    if columns <= 0:
        return default
    return columns


def color_enabled(environ: Optional[Mapping[str, str]] = None) -> bool:
    """
    Check whether colored output is wanted.

    Disabled when NO_COLOR is set to any value, including empty.
    """
    env = os.environ if environ is None else environ
    return 'NO_COLOR' not in env
