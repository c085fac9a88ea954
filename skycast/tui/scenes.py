"""
TUI Scenes - Declarative weather art for the terminal.

Each Scene is a fixed-size block of ASCII art with one or more frames, a
character -> Role map and a default Role. Scenes carry no colors of their own;
the renderer resolves roles through the active Palette.

Library (all 55 columns x 13 rows, 4 frames each):
- clear-day:     sun with pulsing rays over the house
- clear-night:   crescent moon and twinkling stars
- cloudy:        two drifting clouds
- rain:          storm clouds with falling rain
- snow:          clouds with falling flakes
- thunderstorm:  rain with a flickering lightning bolt
- fog:           drifting fog bands over the house

Scenes are built once at import and never mutated. Frame dimensions are an
authoring invariant covered by tests/test_scenes.py.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, Mapping, Sequence, Tuple

from .palette import Role

Frame = Tuple[str, ...]

SCENE_WIDTH = 55


@dataclass(frozen=True)
class Scene:
    """A named weather art asset with one or more frames."""
    name: str
    width: int
    height: int
    default_color: Role
    char_colors: Mapping[str, Role] = field(default_factory=dict, compare=False)
    frames: Tuple[Frame, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, 'char_colors', MappingProxyType(dict(self.char_colors)))
        object.__setattr__(self, 'frames', tuple(tuple(f) for f in self.frames))

    @property
    def frame_count(self) -> int:
        """Number of animation frames (1 for static scenes)."""
        return len(self.frames)

    @property
    def is_animated(self) -> bool:
        return self.frame_count > 1

    def art(self, frame_index: int = 0) -> Frame:
        """Get the lines of a frame. The index wraps, so any integer is valid."""
        return self.frames[frame_index % self.frame_count]

    def role_for(self, char: str) -> Role:
        """Resolve the color role of a single character."""
        return self.char_colors.get(char, self.default_color)

    def roles(self) -> FrozenSet[Role]:
        """Every role this scene can resolve a character to."""
        return frozenset(self.char_colors.values()) | {self.default_color}

    def __repr__(self) -> str:
        return (f"Scene(name={self.name!r}, {self.width}x{self.height}, "
                f"frames={self.frame_count})")


def make_scene(
    name: str,
    default_color: Role,
    char_colors: Dict[str, Role],
    frames: Iterable[Sequence[str]],
    width: int = SCENE_WIDTH,
) -> Scene:
    """Build a Scene, taking its height from the first frame."""
    frames = tuple(tuple(f) for f in frames)
    height = len(frames[0]) if frames else 0
    return Scene(
        name=name,
        width=width,
        height=height,
        default_color=default_color,
        char_colors=char_colors,
        frames=frames,
    )


# Ground, facade and fence shared by every scene (bottom 3 rows)
_STREET: Frame = (
    "   ~~~~~~~~~~~~~~~~~~~~~~~~~~~~~",
    "   | []  []   ___   []  [] |_._._._._.",
    "   |_________|___|__________|=|=|=|=|=|",
)

# Roof line of the house, resting position
_ROOF: Frame = (
    "           ( _ _._",
    "          |_|-'_~_`-._",
    "       .-'-_~_-~_-~-_`-._",
)


def _with_street(*tops: Sequence[str]) -> Tuple[Frame, ...]:
    """Append the shared street rows to each upper frame."""
    return tuple(tuple(top) + _STREET for top in tops)


# === Clear (day) ===

_SUN_A = (
    "       \\   |   /",
    "        .---.",
    "     --( o o )--",
    "        `---'            .-~~~-.",
    "       /   |   \\   .- ~ ~-(       )- ~",
    "                   /                     \\",
    "                          ~",
) + _ROOF

_SUN_B = (
    "        \\  |  /",
    "         .---.",
    "      ---( o o )---",
    "         `---'          .-~~~-.",
    "        /   |   \\ .- ~ ~-(       )- ~",
    "                    /                     \\",
    "                           ~",
    "            ( _ _._",
    "           |_|-'_~_`-._",
    "        .-'-_~_-~_-~-_`-._",
)

# Rays lean the other way
_SUN_C = ("        /  |  \\",) + _SUN_B[1:]

CLEAR_DAY = make_scene(
    "clear-day",
    Role.SKY,
    {
        '\\': Role.SUN_RAY,
        '/': Role.SUN_RAY,
        '|': Role.SUN_RAY,
        '-': Role.SUN,
        '.': Role.SUN,
        '(': Role.SUN,
        ')': Role.SUN,
        'o': Role.SUN,
        '`': Role.SUN,
        "'": Role.SUN,
        '~': Role.GROUND,
        '^': Role.GROUND,
        '[': Role.HOUSE_WINDOW,
        ']': Role.HOUSE_WINDOW,
        '_': Role.HOUSE_WALL,
        '=': Role.HOUSE_DOOR,
    },
    _with_street(_SUN_A, _SUN_B, _SUN_A, _SUN_C),
)


# === Clear (night) ===

_NIGHT_A = (
    "    .    +        .    *        .       +",
    "         .    _.._      .          +        .",
    "   +       .' .-'`    *      .        *",
    "    .     /  /    +       .       .        +",
    "      *  |  |        .       +         .",
    "    .     \\  \\   +      *        .          *",
    "       +  '._'-._ .        .    +       .",
    "    .      ( _ _._      +         .   *    +",
    "     +    |_|-'_~_`-._     .   +      .",
    "   .   .-'-_~_-~_-~-_`-._        .          +",
)

_NIGHT_B = (
    "    *    .        +    .        *       .",
    "         +    _.._      *          .        +",
    "   .       .' .-'`    +      *        .",
    "    +     /  /    *       +       *        .",
    "      .  |  |        *       +         .",
    "    +     \\  \\   .      +        *          .",
    "       *  '._'-._ +        *    .       +",
    "    +      ( _ _._      *         +   .    *",
    "     .    |_|-'_~_`-._     +   *      .",
    "   +   .-'-_~_-~_-~-_`-._        *          .",
)

_NIGHT_C = (
    "    +    .        *    +        .       *",
    "         *    _.._      +          .        *",
    "   .       .' .-'`    .      +        *",
    "    *     /  /    .       +       *        .",
    "      +  |  |        +       *         *",
    "    .     \\  \\   *      .        +          .",
    "       .  '._'-._ .        +    .       .",
    "    .      ( _ _._      *         .   +    .",
    "     +    |_|-'_~_`-._     .   +      *",
    "   .   .-'-_~_-~_-~-_`-._        +          *",
)

CLEAR_NIGHT = make_scene(
    "clear-night",
    Role.SKY,
    {
        '.': Role.STAR,
        '+': Role.STAR,
        '*': Role.STAR,
        '(': Role.MOON,
        ')': Role.MOON,
        "'": Role.MOON,
        '/': Role.MOON,
        '\\': Role.MOON,
        '|': Role.MOON,
        '~': Role.GROUND,
        '[': Role.HOUSE_WINDOW,
        ']': Role.HOUSE_WINDOW,
        '_': Role.HOUSE_WALL,
        '-': Role.HOUSE_WALL,
        '=': Role.HOUSE_DOOR,
    },
    _with_street(_NIGHT_A, _NIGHT_B, _NIGHT_A, _NIGHT_C),
)


# === Clouds ===

_CLOUDS_A = (
    "            .-~~~-.",
    "      .- ~ ~-(       )- ~",
    "     /                     \\      .-~~~-.",
    "    |                       |.- ~-(       )- ~",
    "     \\                     /                  \\",
    "       ~- . _____ . -~      \\                /",
    "                               ~- . ___ . -~",
) + _ROOF

_CLOUDS_B = (
    "          .-~~~-.",
    "     .- ~ ~-(       )- ~",
    "    /                     \\   .-~~~-.",
    "   |                       |.- ~-(       )- ~",
    "    \\                     /                  \\",
    "      ~- . _____ . -~       \\                /",
    "                              ~- . ___ . -~",
    "            ( _ _._",
    "           |_|-'_~_`-._",
    "        .-'-_~_-~_-~-_`-._",
)

CLOUDY = make_scene(
    "cloudy",
    Role.CLOUD_DARK,
    {
        '-': Role.CLOUD,
        '.': Role.CLOUD,
        '(': Role.CLOUD,
        ')': Role.CLOUD,
        '/': Role.CLOUD,
        '\\': Role.CLOUD,
        '~': Role.GROUND,
        '[': Role.HOUSE_WINDOW,
        ']': Role.HOUSE_WINDOW,
        '_': Role.HOUSE_WALL,
        '|': Role.HOUSE_WALL,
        "'": Role.HOUSE_WALL,
        '=': Role.HOUSE_DOOR,
    },
    _with_street(_CLOUDS_A, _CLOUDS_B, _CLOUDS_A, _CLOUDS_B),
)


# === Rain ===

# Cloud bank shared by rain and snow
_STORM_CLOUDS = (
    "            .-~~~-.",
    "      .- ~ ~-(       )- ~       .-~~~-.",
    "     /                     \\.- ~-(       )- ~",
)

_RAIN_A = _STORM_CLOUDS + (
    "    |   , | , |  , | ,   |                  \\",
    "     \\   , |  ,|    / \\                /",
    "       ~- . _____ . -~       ~- . ___ . -~",
    "      |  ,  |  , | , |  , |  ,  |  ,  |",
    "    |  ,  |  ,(  _ _._  |  ,  |  ,  |",
    "      ,  |  , |_|-'_~_`-._  ,  |  ,  |",
    "    |  ,  |.-'-_~_-~_-~-_`-._  |  ,  |  ,",
)

_RAIN_B = _STORM_CLOUDS + (
    "    |                       |   , | , |  , \\",
    "     \\    , | , |  ,   / \\                /",
    "       ~- . _____ . -~       ~- . ___ . -~",
    "      ,  |  , |  , | , |  , |  ,  |  ,  |",
    "    |  ,  |  ,(  _ _._  |  ,  |  ,  |",
    "      ,  |  , |_|-'_~_`-._  ,  |  ,  |",
    "    |  ,  |.-'-_~_-~_-~-_`-._  |  ,  |  ,",
)

_RAIN_C = _STORM_CLOUDS + (
    "    |                       |                  \\",
    "     \\ , | , |  , | ,   / \\                /",
    "       ~- . _____ . -~       ~- . ___ . -~",
    "      ,  |  ,  |  , | , |  , |  ,  |  ,  |",
    "    |  ,  |  ,(  _ _._  |  ,  |  ,  |",
    "      ,  |  , |_|-'_~_`-._  ,  |  ,  |",
    "    |  ,  |.-'-_~_-~_-~-_`-._  |  ,  |  ,",
)

_RAIN_D = _STORM_CLOUDS + (
    "    |   , | , |  , | ,    |  |                  \\",
    "     \\    ,  |  ,|    / \\                /",
    "       ~- . _____ . -~       ~- . ___ . -~",
    "      ,  |  ,  |  ,  | , |  , |  ,  |  ,",
    "    |  ,  |  ,(  _ _._  |  ,  |  ,  |  ,",
    "      ,  |  , |_|-'_~_`-._  ,  |  ,  |  ,",
    "    |  ,  |.-'-_~_-~_-~-_`-._  |  ,  |  ,",
)

RAIN = make_scene(
    "rain",
    Role.CLOUD_DARK,
    {
        '|': Role.RAIN,
        ',': Role.RAIN,
        '-': Role.CLOUD_DARK,
        '.': Role.CLOUD_DARK,
        '(': Role.CLOUD_DARK,
        ')': Role.CLOUD_DARK,
        '/': Role.CLOUD_DARK,
        '\\': Role.CLOUD_DARK,
        '~': Role.RAIN,
        '[': Role.HOUSE_WINDOW,
        ']': Role.HOUSE_WINDOW,
        '_': Role.HOUSE_WALL,
        "'": Role.HOUSE_WALL,
        '=': Role.HOUSE_DOOR,
    },
    _with_street(_RAIN_A, _RAIN_B, _RAIN_C, _RAIN_D),
)


# === Snow ===

_SNOW_A = _STORM_CLOUDS + (
    "    |   * . * . * .   |                  \\",
    "     \\   . * . * .  / \\                /",
    "       ~- . _____ . -~       ~- . ___ . -~",
    "     *    .   *    .   *   .    *    .   *",
    "       .    *   .( _ _._   .    *  .    .",
    "     *   .   * |_|-'_~_`-._   *    .  *",
    "       .   * .-'-_~_-~_-~-_`-._  .    *   .",
)

_SNOW_B = _STORM_CLOUDS + (
    "    |                       |   * . * . * \\",
    "     \\    * . * .   / \\                /",
    "       ~- . _____ . -~       ~- . ___ . -~",
    "       .    *   .   *   .    *   .    *",
    "     *   .    *( _ _._   .    *  .    *",
    "       .   * |_|-'_~_`-._   *    .  *",
    "     *   .-'-_~_-~_-~-_`-._  .    *   .",
)

SNOW = make_scene(
    "snow",
    Role.CLOUD,
    {
        '*': Role.SNOW,
        '.': Role.SNOW,
        '-': Role.CLOUD,
        '(': Role.CLOUD,
        ')': Role.CLOUD,
        '/': Role.CLOUD,
        '\\': Role.CLOUD,
        '~': Role.SNOW,
        '[': Role.HOUSE_WINDOW,
        ']': Role.HOUSE_WINDOW,
        '_': Role.HOUSE_WALL,
        '|': Role.HOUSE_WALL,
        "'": Role.HOUSE_WALL,
        '=': Role.HOUSE_DOOR,
    },
    _with_street(_SNOW_A, _SNOW_B, _SNOW_A, _SNOW_B),
)


# === Thunderstorm ===

_BOLT_DIM = (
    "            .-~~~-.",
    "      .- ~ ~-(       )- ~       .-~~~-.",
    "     /            /\\      \\.- ~-(       )- ~",
    "    |             \\ \\      |                  \\",
    "     \\            / /     / \\                /",
    "       ~- . _____/ /. -~    ~- . ___ . -~",
    "      ,  |  , / /  |  , |  ,  |  ,  |  ,",
    "    |  ,  |  *  ,(  _ _._  |  ,  |  ,  |",
    "      ,  |  ,  |_|-'_~_`-._  ,  |  ,  |",
    "    |  ,  |.-'-_~_-~_-~-_`-._  |  ,  |  ,",
)

# Sparks around the bolt
_BOLT_FLASH = _BOLT_DIM[:3] + (
    "    |           ** \\ \\      |                  \\",
    "     \\          *  / /     / \\                /",
    "       ~- . *_***__/ /. -~    ~- . ___ . -~",
    "      ,  |  , / /*  |  , |  ,  |  ,  |  ,",
    "    |  ,  |  ** ,(  _ _._  |  ,  |  ,  |",
) + _BOLT_DIM[8:]

THUNDERSTORM = make_scene(
    "thunderstorm",
    Role.CLOUD_DARK,
    {
        '/': Role.LIGHTNING,
        '\\': Role.LIGHTNING,
        '*': Role.LIGHTNING,
        '|': Role.RAIN,
        ',': Role.RAIN,
        '-': Role.CLOUD_DARK,
        '.': Role.CLOUD_DARK,
        '(': Role.CLOUD_DARK,
        ')': Role.CLOUD_DARK,
        '~': Role.GROUND,
        '[': Role.HOUSE_WINDOW,
        ']': Role.HOUSE_WINDOW,
        '_': Role.HOUSE_WALL,
        "'": Role.HOUSE_WALL,
        '=': Role.HOUSE_DOOR,
    },
    _with_street(_BOLT_DIM, _BOLT_FLASH, _BOLT_DIM, _BOLT_FLASH),
)


# === Fog ===

_FOG_EVEN = "  = = = = = = = = = = = = = = = = = = = = = ="
_FOG_ODD = "    - - - - - - - - - - - - - - - - - - - -"

_FOG_CENTER = (_FOG_EVEN, _FOG_ODD) * 3 + (_FOG_EVEN,)

# Bands drift left, back to center, right, center
_FOG_LEFT = (
    " = = = = = = = = = = = = = = = = = = = = = =",
    "   - - - - - - - - - - - - - - - - - - - -",
    " = = = = = = = = = = = = = = = = = = = = = =",
    "   - - - - - - - - - - - - - = = = = = = = =",
    " = = = = = = = = = = = = = = = = = = = = = =",
    "   - - - - - - - - - - - - - - - - - - - -",
    " = = = = = = = = = = = = = = = = = = = = = =",
)

_FOG_RIGHT = (
    "   = = = = = = = = = = = = = = = = = = = = = =",
    "     - - - - - - - - - - - - - - - - - - - -",
    "   = = = = = = = = = = = = = = = = = = = = = =",
    "     - - - - - - - - - - - - - - = = = = = = =",
    "   = = = = = = = = = = = = = = = = = = = = = =",
    "     - - - - - - - - - - - - - - - - - - - -",
    "   = = = = = = = = = = = = = = = = = = = = = =",
)

FOG = make_scene(
    "fog",
    Role.FOG,
    {
        '=': Role.FOG,
        '-': Role.FOG,
        '~': Role.FOG,
        '(': Role.HOUSE_WALL,
        ')': Role.HOUSE_WALL,
        '[': Role.HOUSE_WINDOW,
        ']': Role.HOUSE_WINDOW,
        '_': Role.HOUSE_WALL,
        '|': Role.HOUSE_WALL,
        '.': Role.HOUSE_WALL,
        "'": Role.HOUSE_WALL,
    },
    _with_street(*(bands + _ROOF for bands in (_FOG_LEFT, _FOG_CENTER, _FOG_RIGHT, _FOG_CENTER))),
)


ALL_SCENES: Tuple[Scene, ...] = (
    CLEAR_DAY,
    CLEAR_NIGHT,
    CLOUDY,
    RAIN,
    SNOW,
    THUNDERSTORM,
    FOG,
)

SCENES_BY_NAME: Mapping[str, Scene] = MappingProxyType({s.name: s for s in ALL_SCENES})
