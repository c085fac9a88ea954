"""
Terminal scene engine: scenes, palettes, scene selection and rendering.
"""

from .palette import DEFAULT_PALETTE, PALETTE_NAMES, Palette, Role, get_palette
from .renderer import (
    Animation,
    AnimationState,
    AsciiRenderer,
    RenderContext,
    animate,
    render,
    render_to_string,
)
from .scenes import ALL_SCENES, SCENES_BY_NAME, Scene
from .selector import get_scene, is_daytime, scene_for_weather

__all__ = [
    'ALL_SCENES',
    'Animation',
    'AnimationState',
    'AsciiRenderer',
    'DEFAULT_PALETTE',
    'PALETTE_NAMES',
    'Palette',
    'RenderContext',
    'Role',
    'SCENES_BY_NAME',
    'Scene',
    'animate',
    'get_palette',
    'get_scene',
    'is_daytime',
    'render',
    'render_to_string',
    'scene_for_weather',
]
