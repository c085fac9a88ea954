"""
Tests for the Constants module.

Tests display limits, timeouts and provider settings.
"""

import os
import sys


# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from skycast.constants import (
    DEFAULT_FRAME_DELAY_MS,
    DEFAULT_TERM_WIDTH,
    MIN_TERM_WIDTH,
    Display,
    Provider,
    Retries,
    Timeouts,
    Units,
)
from skycast.tui.scenes import ALL_SCENES


# ===========================================================================
# Display Constants Tests
# ===========================================================================

class TestDisplay:
    def test_values(self):
        assert Display.MIN_TERM_WIDTH == 50
        assert Display.DEFAULT_TERM_WIDTH == 80
        assert Display.DEFAULT_FRAME_DELAY_MS == 500

    def test_shorthands_match(self):
        assert MIN_TERM_WIDTH == Display.MIN_TERM_WIDTH
        assert DEFAULT_TERM_WIDTH == Display.DEFAULT_TERM_WIDTH
        assert DEFAULT_FRAME_DELAY_MS == Display.DEFAULT_FRAME_DELAY_MS

    def test_default_width_above_floor(self):
        assert DEFAULT_TERM_WIDTH >= MIN_TERM_WIDTH

    def test_scenes_fit_default_width(self):
        for scene in ALL_SCENES:
            assert scene.width <= DEFAULT_TERM_WIDTH


# ===========================================================================
# Timing Constants Tests
# ===========================================================================

class TestTimeouts:
    def test_positive(self):
        assert Timeouts.HTTP_REQUEST > 0

    def test_retry_policy(self):
        assert Retries.COUNT >= 0
        assert Retries.DELAY > 0
        assert Retries.BACKOFF >= 1


# ===========================================================================
# Provider Constants Tests
# ===========================================================================

class TestProvider:
    def test_endpoint(self):
        assert Provider.BASE_URL.startswith("https://")
        assert Provider.API_KEY_ENV == "WEATHER_API_KEY"

    def test_units(self):
        assert Units.AUTO in Units.ALL
        assert set(Units.ALL) == {"auto", "celsius", "fahrenheit", "metric", "imperial"}
