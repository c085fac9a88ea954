"""
TUI Scene Selection - Map weather conditions to scenes.

Two pure lookups:
- is_daytime(): is the current instant between sunrise and sunset?
- get_scene(): which Scene depicts an OpenWeatherMap condition code?

Both are total. Missing sun times count as daytime, and any code outside the
table shows the cloudy scene.
"""

from types import MappingProxyType
from typing import Mapping, Optional

from .scenes import (
    CLEAR_DAY,
    CLEAR_NIGHT,
    CLOUDY,
    FOG,
    RAIN,
    SNOW,
    THUNDERSTORM,
    Scene,
)

# The only code whose scene depends on the time of day
CLEAR_SKY_CODE = 800

FALLBACK_SCENE = CLOUDY


def _codes(scene: Scene, *codes: int) -> dict:
    return {code: scene for code in codes}


# Condition code -> Scene, per the provider's published code list.
# 800 is resolved separately in get_scene().
SCENE_TABLE: Mapping[int, Scene] = MappingProxyType({
    # Group 2xx: thunderstorm
    **_codes(THUNDERSTORM, 200, 201, 202, 210, 211, 212, 221, 230, 231, 232),
    # Group 3xx: drizzle
    **_codes(RAIN, 300, 301, 302, 310, 311, 312, 313, 314, 321),
    # Group 5xx: rain
    **_codes(RAIN, 500, 501, 502, 503, 504, 520, 521, 522, 531),
    # Freezing rain
    **_codes(SNOW, 511),
    # Group 6xx: snow
    **_codes(SNOW, 600, 601, 602, 611, 612, 613, 615, 616, 620, 621, 622),
    # Group 7xx: atmosphere
    **_codes(FOG, 701, 711, 721, 731, 741, 751, 761, 762, 771, 781),
    # Group 80x: clouds
    **_codes(CLOUDY, 801, 802, 803, 804),
})


def is_daytime(current: float, sunrise: Optional[float], sunset: Optional[float]) -> bool:
    """
    Check whether `current` falls in the half-open interval [sunrise, sunset).

    All values are Unix epoch seconds. A sunrise or sunset of None (or 0,
    which providers send for "unknown") means there is no usable daylight
    window, and the answer defaults to True.
    """
    if not sunrise or not sunset:
        return True
    return sunrise <= current < sunset


def get_scene(condition_code, is_day: bool = True) -> Scene:
    """
    Pick the scene for a condition code.

    Only a clear sky (800) looks at is_day. Unknown codes, including
    non-integers and None, fall back to the cloudy scene.
    """
    if isinstance(condition_code, bool) or not isinstance(condition_code, int):
        return FALLBACK_SCENE
    if condition_code == CLEAR_SKY_CODE:
        return CLEAR_DAY if is_day else CLEAR_NIGHT
    return SCENE_TABLE.get(condition_code, FALLBACK_SCENE)


def scene_for_weather(snapshot) -> Scene:
    """Pick the scene for a WeatherSnapshot (or anything shaped like one)."""
    is_day = is_daytime(snapshot.observed_at, snapshot.sunrise, snapshot.sunset)
    return get_scene(snapshot.condition_code, is_day)
