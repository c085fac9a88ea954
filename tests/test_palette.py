"""
Tests for the Palette registry.

Tests role coverage of the built-in themes, name lookup fallback and the
color helpers.
"""

import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from skycast.tui.palette import (
    ANSI_RESET,
    DAY,
    DEFAULT_PALETTE,
    NIGHT,
    PALETTE_NAMES,
    PALETTES,
    RETRO,
    ROLE_KEYS,
    Palette,
    Role,
    colorize,
    get_palette,
    parse_hex_color,
)
from skycast.tui.scenes import ALL_SCENES


# ===========================================================================
# Registry Tests
# ===========================================================================

class TestRegistry:
    def test_three_themes_registered(self):
        assert set(PALETTE_NAMES) == {"day", "night", "retro"}

    @pytest.mark.parametrize("palette", [DAY, NIGHT, RETRO], ids=["day", "night", "retro"])
    def test_theme_defines_every_role(self, palette):
        assert palette.missing_roles() == ()
        for role in ROLE_KEYS:
            assert palette.color(role) is not None

    @pytest.mark.parametrize("palette", [DAY, NIGHT, RETRO], ids=["day", "night", "retro"])
    def test_theme_covers_every_scene_role(self, palette):
        for scene in ALL_SCENES:
            for role in scene.roles():
                assert palette.color(role) is not None, (palette.name, scene.name, role)

    def test_default_is_day(self):
        assert DEFAULT_PALETTE is DAY

    def test_registry_is_read_only(self):
        with pytest.raises(TypeError):
            PALETTES["custom"] = DAY

    def test_colors_are_rgb_triples(self):
        for palette in PALETTES.values():
            for rgb in palette.colors.values():
                assert len(rgb) == 3
                assert all(0 <= channel <= 255 for channel in rgb)

    def test_night_differs_from_day(self):
        assert NIGHT.color(Role.SKY) != DAY.color(Role.SKY)


# ===========================================================================
# Lookup Tests
# ===========================================================================

class TestGetPalette:
    @pytest.mark.parametrize("name", ["day", "night", "retro"])
    def test_known_names(self, name):
        assert get_palette(name).name == name

    def test_lookup_returns_registered_instance(self):
        assert get_palette("night") is NIGHT

    @pytest.mark.parametrize(
        "name",
        ["nonsense", "", None, 42, "dayy"],
        ids=["unknown", "empty", "none", "not-a-string", "typo"],
    )
    def test_unknown_falls_back_to_day(self, name):
        assert get_palette(name) is get_palette("day")

    def test_no_argument_is_day(self):
        assert get_palette() is DAY

    def test_name_is_case_and_space_insensitive(self):
        assert get_palette("  Retro ") is RETRO


# ===========================================================================
# Palette Type Tests
# ===========================================================================

class TestPalette:
    def test_missing_role_color_is_none(self):
        partial = Palette("partial", {Role.SKY: (1, 2, 3)})
        assert partial.color(Role.SKY) == (1, 2, 3)
        assert partial.color(Role.SUN) is None
        assert Role.SUN in partial.missing_roles()

    def test_colors_frozen_after_construction(self):
        source = {Role.SKY: (1, 2, 3)}
        palette = Palette("p", source)
        source[Role.SUN] = (4, 5, 6)
        assert palette.color(Role.SUN) is None
        with pytest.raises(TypeError):
            palette.colors[Role.SUN] = (4, 5, 6)

    def test_from_hex_drops_bad_entries(self):
        palette = Palette.from_hex("p", {Role.SKY: "#FF0000", Role.SUN: "bogus"})
        assert palette.color(Role.SKY) == (255, 0, 0)
        assert palette.color(Role.SUN) is None

    def test_hashable(self):
        assert len({DAY, NIGHT, RETRO}) == 3
        assert hash(DAY) == hash(get_palette("day"))


# ===========================================================================
# Helper Tests
# ===========================================================================

class TestHexParsing:
    @pytest.mark.parametrize(
        "value, expected",
        [
            ("#87CEEB", (135, 206, 235)),
            ("87ceeb", (135, 206, 235)),
            ("#000000", (0, 0, 0)),
            (" #FFFFFF ", (255, 255, 255)),
        ],
        ids=["hash", "bare-lowercase", "black", "padded"],
    )
    def test_valid(self, value, expected):
        assert parse_hex_color(value) == expected

    @pytest.mark.parametrize("value", [None, "", "#FFF", "#GGGGGG", "#1234567"])
    def test_invalid(self, value):
        assert parse_hex_color(value) is None


class TestColorize:
    def test_truecolor_escape(self):
        assert colorize("*", (1, 2, 3)) == "\033[38;2;1;2;3m*" + ANSI_RESET
