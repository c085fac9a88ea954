"""
skycast command line.

    skycast "Paris,FR"                      # fetch and draw current weather
    skycast --code 500 --animate            # draw the rain scene offline
    skycast --set-default-location Oslo     # remember a location

Exit codes: 0 ok, 1 internal or config, 2 API key, 3 location, 4 network,
5 rate limit, 6 invalid input.
"""

import argparse
import logging
import sys
import time
from typing import List, Optional

from . import __version__
from .cache import WeatherCache
from .config import ConfigStore, resolve_units
from .constants import Cache, Units
from .error_codes import CONFIG_ERROR, INVALID_INPUT, WeatherError, exit_code_for
from .location import normalize_location
from .tui.palette import PALETTE_NAMES
from .tui.renderer import RenderContext, animate, render
from .tui.selector import get_scene, is_daytime, scene_for_weather
from .utils.error_handling import ErrorCategory, get_error_aggregator, handle_error
from .weather import WeatherClient

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='skycast',
        description='Current weather as terminal art',
    )
    parser.add_argument('location', nargs='?',
                        help='City or "City,CountryCode" (defaults to the configured location)')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')

    offline = parser.add_argument_group('offline rendering')
    offline.add_argument('--code', type=int,
                         help='Render this condition code without fetching weather')
    offline.add_argument('--now', type=float, help='Current time (epoch seconds)')
    offline.add_argument('--sunrise', type=float, help='Sunrise (epoch seconds)')
    offline.add_argument('--sunset', type=float, help='Sunset (epoch seconds)')

    display = parser.add_argument_group('display')
    display.add_argument('--palette', help=f'Color theme: {", ".join(PALETTE_NAMES)}')
    display.add_argument('--animate', action='store_true', default=None,
                         help='Animate the scene until --duration elapses or Ctrl-C')
    display.add_argument('--frame-delay', type=_positive_int, metavar='MS',
                         help='Milliseconds between animation frames')
    display.add_argument('--duration', type=float, metavar='S',
                         help='Stop animating after this many seconds')
    display.add_argument('--width', type=int, help='Override the detected terminal width')
    color = display.add_mutually_exclusive_group()
    color.add_argument('--color', dest='color', action='store_true', default=None,
                       help='Force colored output')
    color.add_argument('--no-color', dest='color', action='store_false', default=None,
                       help='Disable colored output')

    provider = parser.add_argument_group('weather provider')
    provider.add_argument('--units', choices=Units.ALL,
                          help='Temperature units (auto follows the location)')
    unit_flags = provider.add_mutually_exclusive_group()
    unit_flags.add_argument('-C', '--celsius', action='store_true', help='Shorthand for --units celsius')
    unit_flags.add_argument('-F', '--fahrenheit', action='store_true', help='Shorthand for --units fahrenheit')
    provider.add_argument('--api-key', help='OpenWeatherMap API key (default: $WEATHER_API_KEY)')
    provider.add_argument('--no-cache', action='store_true',
                          help=f'Always fetch, ignoring responses cached in the last {Cache.TTL_SECONDS // 60} minutes')

    settings = parser.add_argument_group('settings')
    settings.add_argument('--config', help='Config file (.json, .yaml or .yml)')
    settings.add_argument('--set-default-location', metavar='LOCATION',
                          help='Save a default location')
    settings.add_argument('--set-palette', metavar='NAME', help='Save a default palette')
    settings.add_argument('--clear-cache', action='store_true', help='Empty the response cache')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    return parser


def _apply_settings(args, store: ConfigStore) -> bool:
    """Persist --set-* options. Returns True if anything was saved."""
    changes = {}
    if args.set_default_location is not None:
        location = args.set_default_location.strip()
        if not location:
            raise WeatherError(INVALID_INPUT, "default location is empty")
        changes['default_location'] = location
    if args.set_palette is not None:
        name = args.set_palette.strip().lower()
        if name not in PALETTE_NAMES:
            raise WeatherError(INVALID_INPUT, f"unknown palette {args.set_palette!r}")
        changes['palette'] = name

    if not changes:
        return False
    try:
        store.update(**changes)
    except OSError as e:
        raise WeatherError(CONFIG_ERROR, f"could not save {store.path}: {e}") from e
    for key, value in changes.items():
        print(f"Saved {key.replace('_', ' ')}: {value}")
    return True


def _cache_for(store: ConfigStore) -> WeatherCache:
    return WeatherCache(store.path.parent / Cache.FILENAME)


def _log_error_summary():
    """Under --verbose, report what was handled along the way."""
    summary = get_error_aggregator().get_error_summary()
    if summary['total_errors']:
        logger.debug(
            f"Handled {summary['total_errors']} error(s) this run: "
            f"by category {summary['by_category']}, "
            f"repeats {summary['deduplicated_counts']}"
        )


def run(args) -> int:
    store = ConfigStore(args.config)
    config = store.load()

    maintenance = False
    if args.clear_cache:
        _cache_for(store).clear()
        print("Cleared weather cache")
        maintenance = True

    if _apply_settings(args, store):
        config = store.load()
        maintenance = True

    if maintenance and args.location is None and args.code is None:
        return 0

    context = RenderContext.detect(
        palette=args.palette or config.palette,
        width=args.width,
        use_color=args.color,
    )

    summary = None
    if args.code is not None:
        now = args.now if args.now is not None else time.time()
        scene = get_scene(args.code, is_daytime(now, args.sunrise, args.sunset))
    else:
        typed = args.location or config.default_location
        location = normalize_location(typed)
        if not location:
            raise WeatherError(INVALID_INPUT, "no location given and no default location set")
        if location != typed:
            logger.debug(f"Location {typed!r} read as {location!r}")
        units = resolve_units(
            celsius=args.celsius,
            fahrenheit=args.fahrenheit,
            units=args.units or config.default_units,
        )
        client = WeatherClient(
            api_key=args.api_key,
            cache=None if args.no_cache else _cache_for(store),
        )
        snapshot = client.current(location, units)
        scene = scene_for_weather(snapshot)
        summary = snapshot.summary()

    logger.debug(f"Scene {scene.name} with palette {context.palette.name} at width {context.width}")

    should_animate = args.animate if args.animate is not None else config.animate
    if should_animate:
        handle = animate(
            scene,
            frame_delay_ms=args.frame_delay or config.frame_delay_ms,
            context=context,
            stream=sys.stdout,
        )
        try:
            handle.join(args.duration)
        except KeyboardInterrupt:
            pass
        finally:
            handle.stop()
    else:
        render(scene, context, sys.stdout)

    if summary:
        print(summary)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
    )

    try:
        return run(args)
    except WeatherError as e:
        _log_error_summary()
        print(f"Error [{e.error_code.code}]: {e}", file=sys.stderr)
        if e.error_code.hint:
            print(f"  {e.error_code.hint}", file=sys.stderr)
        return exit_code_for(e)
    except OSError as e:
        handle_error(e, "skycast", ErrorCategory.FILESYSTEM)
        _log_error_summary()
        print(f"Error: {e}", file=sys.stderr)
        return exit_code_for(e)


if __name__ == '__main__':
    sys.exit(main())
