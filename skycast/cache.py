"""
On-disk cache of current-weather snapshots.

Entries are keyed by location and requested units and expire after
Cache.TTL_SECONDS. The file is plain JSON, kept beside the config file:

    {
      "london,gb-auto": {"timestamp": 1700000000.0, "data": {...snapshot...}}
    }

A missing or corrupt cache file reads as empty. Write failures are logged
and reported as False, never raised.
"""

import json
import logging
import time
from dataclasses import asdict
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from .config import default_config_path
from .constants import Cache
from .utils.error_handling import ErrorCategory, safe_execute
from .weather import WeatherSnapshot

logger = logging.getLogger(__name__)


def default_cache_path() -> Path:
    """Cache file beside the default config file."""
    return default_config_path().parent / Cache.FILENAME


def cache_key(location: str, units: Optional[str] = None) -> str:
    return f"{location.strip().lower()}-{units or 'auto'}"


class WeatherCache:
    """Expiring JSON store of WeatherSnapshots."""

    def __init__(
        self,
        path: Union[str, Path, None] = None,
        ttl: float = Cache.TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ):
        """
        Args:
            path: Cache file (defaults to weather-cache.json beside the config)
            ttl: Seconds an entry stays fresh
            clock: Source of the current epoch time
        """
        self.path = Path(path).expanduser() if path else default_cache_path()
        self.ttl = ttl
        self._clock = clock

    def get(self, location: str, units: Optional[str] = None) -> Optional[WeatherSnapshot]:
        """Return the cached snapshot, or None if absent, expired or unreadable."""
        entry = self._load().get(cache_key(location, units))
        if not self._is_fresh(entry, self._clock()):
            return None
        try:
            snapshot = WeatherSnapshot(**entry['data'])
        except (KeyError, TypeError) as e:
            logger.debug(f"Discarding unreadable cache entry for {location!r}: {e}")
            return None

        logger.debug(f"Cache hit for {location!r} ({units or 'auto'})")
        return snapshot

    def set(self, location: str, units: Optional[str], snapshot: WeatherSnapshot) -> bool:
        """Store a snapshot, dropping expired entries on the way. Returns False if the write failed."""
        now = self._clock()
        entries = {k: v for k, v in self._load().items() if self._is_fresh(v, now)}
        entries[cache_key(location, units)] = {'timestamp': now, 'data': asdict(snapshot)}
        return self._save(entries)

    def clear(self) -> bool:
        return self._save({})

    def _is_fresh(self, entry: Any, now: float) -> bool:
        if not isinstance(entry, dict):
            return False
        timestamp = entry.get('timestamp')
        if not isinstance(timestamp, (int, float)) or isinstance(timestamp, bool):
            return False
        return now - timestamp < self.ttl

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}

        with safe_execute(
            "load_cache",
            ErrorCategory.FILESYSTEM,
            default_return={},
            additional_context={'path': str(self.path)},
        ) as result:
            data = json.loads(self.path.read_text(encoding='utf-8'))
            result.value = data if isinstance(data, dict) else {}
        return result.value

    def _save(self, entries: Dict[str, Any]) -> bool:
        with safe_execute(
            "save_cache",
            ErrorCategory.FILESYSTEM,
            additional_context={'path': str(self.path)},
        ) as result:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            text = json.dumps(entries, indent=2, sort_keys=True) + '\n'
            self.path.write_text(text, encoding='utf-8')
        return result.success
