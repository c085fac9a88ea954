"""
TUI Renderer - Print weather scenes as colored ASCII art.

Provides:
- RenderContext: terminal width, color flag and palette for one render
- render_to_string(): one frame, centered and colored, as a string
- render(): print frame 0 once
- Animation: cancellable frame loop driven by chained threading.Timer steps

Animation lifecycle:
    IDLE --start()--> RUNNING --stop()--> STOPPED

Frame 0 is drawn synchronously by start(). Each later frame erases the
previously drawn block (cursor up + clear to end of screen) and draws the
next frame in order. A per-animation lock serialises drawing against stop(),
so once stop() returns no further frame is drawn.
"""

import logging
import sys
import threading
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional, TextIO, Union

from ..constants import DEFAULT_FRAME_DELAY_MS, DEFAULT_TERM_WIDTH, MIN_TERM_WIDTH
from ..terminal import color_enabled, detect_terminal_width
from ..utils.error_handling import ErrorCategory, handle_error
from .palette import DEFAULT_PALETTE, Palette, colorize, get_palette
from .scenes import Scene

logger = logging.getLogger(__name__)

# Move to column 1, n lines up, then clear to end of screen
ANSI_ERASE_BLOCK = '\033[{n}F\033[J'


@dataclass(frozen=True)
class RenderContext:
    """Everything a render needs to know about the terminal."""
    width: int = DEFAULT_TERM_WIDTH
    use_color: bool = True
    palette: Palette = field(default=DEFAULT_PALETTE)

    @classmethod
    def detect(
        cls,
        palette: Union[str, Palette, None] = None,
        width: Optional[int] = None,
        use_color: Optional[bool] = None,
        environ=None,
    ) -> 'RenderContext':
        """
        Build a context from the live terminal.

        Explicit arguments win over detection. A palette may be given by name
        (unknown names resolve to the day palette) or as a Palette.
        """
        if not isinstance(palette, Palette):
            palette = get_palette(palette)
        if width is None:
            width = detect_terminal_width()
        if use_color is None:
            use_color = color_enabled(environ)
        return cls(width=width, use_color=use_color, palette=palette)


def colorize_line(line: str, scene: Scene, palette: Palette) -> str:
    """
    Color each character of a line by its role.

    Spaces pass through untouched, as does any character whose role the
    palette does not define.
    """
    out = []
    for char in line:
        if char == ' ':
            out.append(char)
            continue
        rgb = palette.color(scene.role_for(char))
        out.append(colorize(char, rgb) if rgb is not None else char)
    return ''.join(out)


def render_to_string(
    scene: Scene,
    frame_index: int = 0,
    context: Optional[RenderContext] = None,
) -> str:
    """
    Render one frame to a string.

    Returns an empty string when the terminal is narrower than
    MIN_TERM_WIDTH. Otherwise every line gets the same left padding to
    center the scene's nominal width.
    """
    if context is None:
        context = RenderContext()
    if context.width < MIN_TERM_WIDTH:
        return ""

    padding = ' ' * max(0, (context.width - scene.width) // 2)
    lines = scene.art(frame_index)
    if context.use_color:
        lines = [colorize_line(line, scene, context.palette) for line in lines]
    return '\n'.join(padding + line for line in lines)


def render(
    scene: Scene,
    context: Optional[RenderContext] = None,
    stream: Optional[TextIO] = None,
) -> str:
    """Print frame 0 of a scene. Prints nothing below the width floor."""
    output = render_to_string(scene, 0, context)
    if output:
        stream = stream or sys.stdout
        stream.write(output + '\n')
        stream.flush()
    return output


class AnimationState(Enum):
    """Lifecycle of an Animation."""
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class Animation:
    """
    A running scene animation.

    The handle is callable: calling it stops the loop, same as stop().
    """

    def __init__(
        self,
        scene: Scene,
        context: Optional[RenderContext] = None,
        frame_delay_ms: int = DEFAULT_FRAME_DELAY_MS,
        on_complete: Optional[Callable[[], None]] = None,
        on_frame: Optional[Callable[[int], None]] = None,
        stream: Optional[TextIO] = None,
    ):
        """
        Initialize an animation. Nothing is drawn until start().

        Args:
            scene: Scene to animate
            context: Render context (defaults to RenderContext())
            frame_delay_ms: Milliseconds between frames
            on_complete: Called once when the animation stops
            on_frame: Called with the frame index after each draw
            stream: Output stream (defaults to sys.stdout at draw time)
        """
        self.scene = scene
        self.context = context or RenderContext()
        self.frame_delay = max(0, frame_delay_ms) / 1000.0
        self._on_complete = on_complete
        self._on_frame = on_frame
        self._stream = stream

        self._state = AnimationState.IDLE
        self._lock = threading.RLock()
        self._stopped = threading.Event()
        self._timer: Optional[threading.Timer] = None
        self._next_frame = 0
        self._frames_drawn = 0
        self._lines_on_screen = 0

    @property
    def state(self) -> AnimationState:
        with self._lock:
            return self._state

    @property
    def is_running(self) -> bool:
        return self.state is AnimationState.RUNNING

    @property
    def frames_drawn(self) -> int:
        """Number of frames drawn so far."""
        with self._lock:
            return self._frames_drawn

    def start(self) -> 'Animation':
        """
        Draw frame 0 and schedule the rest.

        Scenes with a single frame, and output suppressed by the width floor,
        are drawn once (or not at all) and the animation finishes right away
        without starting a timer. Calling start() twice is a no-op.
        """
        with self._lock:
            if self._state is not AnimationState.IDLE:
                return self
            self._state = AnimationState.RUNNING

            static = not self.scene.is_animated
            if static or self.context.width < MIN_TERM_WIDTH:
                logger.debug(f"Rendering {self.scene.name} statically")
                if render(self.scene, self.context, self._stream):
                    self._frames_drawn = 1
                    if self._on_frame:
                        self._on_frame(0)
                finished = True
            else:
                logger.debug(
                    f"Animating {self.scene.name}: {self.scene.frame_count} frames "
                    f"every {self.frame_delay * 1000:.0f}ms"
                )
                self._draw_next()
                self._schedule()
                finished = False

        if finished:
            self.stop()
        return self

    def stop(self):
        """
        Stop the animation.

        Cancels the pending frame and calls on_complete. Safe to call any
        number of times, from any thread; only the first call has an effect.
        """
        with self._lock:
            if self._state is AnimationState.STOPPED:
                return
            self._state = AnimationState.STOPPED
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            frames = self._frames_drawn
            self._stopped.set()

        logger.debug(f"Animation of {self.scene.name} stopped after {frames} frames")
        if self._on_complete:
            self._on_complete()

    __call__ = stop

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait until the animation stops. Returns False on timeout."""
        return self._stopped.wait(timeout)

    def _schedule(self):
        # on_frame may have stopped us during the draw
        if self._state is not AnimationState.RUNNING:
            return
        self._timer = threading.Timer(self.frame_delay, self._step)
        self._timer.daemon = True
        self._timer.start()

    def _step(self):
        """Timer callback: draw the next frame unless stopped meanwhile."""
        try:
            with self._lock:
                if self._state is not AnimationState.RUNNING:
                    return
                self._draw_next()
                self._schedule()
        except Exception as e:
            handle_error(
                e,
                "animation_step",
                ErrorCategory.RENDER,
                additional_context={'scene': self.scene.name},
            )
            self.stop()

    def _draw_next(self):
        """Erase the previous frame and draw the next one. Caller holds the lock."""
        index = self._next_frame
        output = render_to_string(self.scene, index, self.context)

        stream = self._stream or sys.stdout
        if self._lines_on_screen:
            stream.write(ANSI_ERASE_BLOCK.format(n=self._lines_on_screen))
        stream.write(output + '\n')
        stream.flush()

        self._lines_on_screen = output.count('\n') + 1
        self._next_frame = (index + 1) % self.scene.frame_count
        self._frames_drawn += 1
        if self._on_frame:
            self._on_frame(index)

    def __repr__(self) -> str:
        return (f"Animation(scene={self.scene.name!r}, state={self.state.value}, "
                f"frames_drawn={self.frames_drawn})")


def animate(
    scene: Scene,
    frame_delay_ms: int = DEFAULT_FRAME_DELAY_MS,
    on_complete: Optional[Callable[[], None]] = None,
    context: Optional[RenderContext] = None,
    on_frame: Optional[Callable[[int], None]] = None,
    stream: Optional[TextIO] = None,
) -> Animation:
    """Start animating a scene and return its handle."""
    return Animation(
        scene,
        context=context,
        frame_delay_ms=frame_delay_ms,
        on_complete=on_complete,
        on_frame=on_frame,
        stream=stream,
    ).start()


class AsciiRenderer:
    """
    Renders scenes to a terminal.

    A fresh RenderContext is detected for every call, so a resized terminal
    or a changed NO_COLOR is picked up by the next render. Any of palette,
    width and use_color may be pinned instead.
    """

    def __init__(
        self,
        palette: Union[str, Palette, None] = None,
        width: Optional[int] = None,
        use_color: Optional[bool] = None,
        stream: Optional[TextIO] = None,
    ):
        self.palette = palette
        self.width = width
        self.use_color = use_color
        self.stream = stream

    def context(self) -> RenderContext:
        return RenderContext.detect(
            palette=self.palette,
            width=self.width,
            use_color=self.use_color,
        )

    def render_to_string(self, scene: Scene, frame_index: int = 0) -> str:
        return render_to_string(scene, frame_index, self.context())

    def render(self, scene: Scene) -> str:
        """Print frame 0 of a scene."""
        return render(scene, self.context(), self.stream)

    def animate(
        self,
        scene: Scene,
        frame_delay_ms: int = DEFAULT_FRAME_DELAY_MS,
        on_complete: Optional[Callable[[], None]] = None,
        on_frame: Optional[Callable[[int], None]] = None,
    ) -> Animation:
        """Start animating a scene. Call the returned handle to stop it."""
        return animate(
            scene,
            frame_delay_ms=frame_delay_ms,
            on_complete=on_complete,
            context=self.context(),
            on_frame=on_frame,
            stream=self.stream,
        )
