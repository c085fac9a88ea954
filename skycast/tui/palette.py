"""
TUI Palettes - Color roles and theme palettes for weather scenes.

Scenes never name concrete colors. Every character of a scene resolves to a
symbolic Role, and a Palette maps each Role to an RGB triple. Swapping the
palette changes the theme without touching scene art.

Three themes are registered: day, night and retro. Lookup by name is total
and falls back to the day palette.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional, Tuple

RGB = Tuple[int, int, int]

# SGR sequences for 24-bit foreground color
ANSI_RESET = '\033[0m'
ANSI_FG_RGB = '\033[38;2;{r};{g};{b}m'


class Role(Enum):
    """Color roles shared by every scene and palette."""
    SKY = "sky"
    SUN = "sun"
    SUN_RAY = "sun_ray"
    CLOUD = "cloud"
    CLOUD_DARK = "cloud_dark"
    RAIN = "rain"
    SNOW = "snow"
    LIGHTNING = "lightning"
    FOG = "fog"
    GROUND = "ground"
    HOUSE_ROOF = "house_roof"
    HOUSE_WALL = "house_wall"
    HOUSE_WINDOW = "house_window"
    HOUSE_DOOR = "house_door"
    MOON = "moon"
    STAR = "star"


ROLE_KEYS: Tuple[Role, ...] = tuple(Role)


def parse_hex_color(hex_str) -> Optional[RGB]:
    """
    Parse a hex color string to an (r, g, b) tuple.
    Accepts: '#RRGGBB' or 'RRGGBB' (case-insensitive).
    Returns: (r, g, b) tuple with values 0-255, or None on failure.
    """
    if hex_str is None:
        return None
    val = str(hex_str).strip().lstrip('#')
    if len(val) != 6:
        return None
    try:
        return (int(val[0:2], 16), int(val[2:4], 16), int(val[4:6], 16))
    except ValueError:
        return None


def colorize(text: str, rgb: RGB) -> str:
    """Wrap text in a 24-bit foreground color escape."""
    r, g, b = rgb
    return ANSI_FG_RGB.format(r=r, g=g, b=b) + text + ANSI_RESET


@dataclass(frozen=True)
class Palette:
    """A named, read-only mapping from Role to RGB color."""
    name: str
    colors: Mapping[Role, RGB] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        # Freeze whatever mapping was handed in
        object.__setattr__(self, 'colors', MappingProxyType(dict(self.colors)))

    def color(self, role: Role) -> Optional[RGB]:
        """Get the color for a role, or None if this palette lacks it."""
        return self.colors.get(role)

    def missing_roles(self) -> Tuple[Role, ...]:
        """Roles this palette does not define."""
        return tuple(role for role in ROLE_KEYS if role not in self.colors)

    @classmethod
    def from_hex(cls, name: str, hex_colors: Dict[Role, str]) -> 'Palette':
        """Build a palette from '#RRGGBB' strings, dropping unparsable entries."""
        colors = {}
        for role, hex_str in hex_colors.items():
            rgb = parse_hex_color(hex_str)
            if rgb is not None:
                colors[role] = rgb
        return cls(name=name, colors=colors)


# Bright daylight theme
DAY = Palette.from_hex("day", {
    Role.SKY: '#87CEEB',
    Role.SUN: '#FFD700',
    Role.SUN_RAY: '#FFA500',
    Role.CLOUD: '#C0C0C0',
    Role.CLOUD_DARK: '#808080',
    Role.RAIN: '#4169E1',
    Role.SNOW: '#F0F8FF',
    Role.LIGHTNING: '#FFFF00',
    Role.FOG: '#A9A9A9',
    Role.GROUND: '#228B22',
    Role.HOUSE_ROOF: '#8B0000',
    Role.HOUSE_WALL: '#D2B48C',
    Role.HOUSE_WINDOW: '#00CED1',
    Role.HOUSE_DOOR: '#8B4513',
    Role.MOON: '#F5F5DC',
    Role.STAR: '#FFFACD',
})

# Same roles, dimmed and shifted toward blue
NIGHT = Palette.from_hex("night", {
    Role.SKY: '#191970',
    Role.SUN: '#FFD700',
    Role.SUN_RAY: '#FFA500',
    Role.CLOUD: '#4A4A4A',
    Role.CLOUD_DARK: '#2F2F2F',
    Role.RAIN: '#4682B4',
    Role.SNOW: '#B0C4DE',
    Role.LIGHTNING: '#FFFFE0',
    Role.FOG: '#3A3A3A',
    Role.GROUND: '#004400',
    Role.HOUSE_ROOF: '#8B008B',
    Role.HOUSE_WALL: '#6B4423',
    Role.HOUSE_WINDOW: '#FFD700',  # lit windows
    Role.HOUSE_DOOR: '#5C3317',
    Role.MOON: '#F5F5DC',
    Role.STAR: '#FFFACD',
})

# Limited 8-bit console look
RETRO = Palette.from_hex("retro", {
    Role.SKY: '#5B6EE1',
    Role.SUN: '#FBF236',
    Role.SUN_RAY: '#FBF236',
    Role.CLOUD: '#9BADB7',
    Role.CLOUD_DARK: '#6B7B8B',
    Role.RAIN: '#3F3FBF',
    Role.SNOW: '#FFFFFF',
    Role.LIGHTNING: '#FBFF86',
    Role.FOG: '#76767B',
    Role.GROUND: '#37946E',
    Role.HOUSE_ROOF: '#AC3232',
    Role.HOUSE_WALL: '#D9A066',
    Role.HOUSE_WINDOW: '#5FCDE4',
    Role.HOUSE_DOOR: '#76428A',
    Role.MOON: '#CBDBFC',
    Role.STAR: '#FFFFFF',
})

DEFAULT_PALETTE = DAY

PALETTES: Mapping[str, Palette] = MappingProxyType({
    p.name: p for p in (DAY, NIGHT, RETRO)
})

PALETTE_NAMES: Tuple[str, ...] = tuple(PALETTES)


def get_palette(name: Optional[str] = None) -> Palette:
    """
    Look up a palette by name.

    Never fails: unknown, empty or missing names resolve to the day palette.
    """
    if not isinstance(name, str):
        return DEFAULT_PALETTE
    return PALETTES.get(name.strip().lower(), DEFAULT_PALETTE)
