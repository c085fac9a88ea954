"""
Tests for the skycast command line.

Offline rendering uses --code; network paths mock WeatherClient.current.
"""

import json
import logging
import os
import re
import sys
from unittest.mock import MagicMock, patch

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from skycast.cli import build_parser, main
from skycast.config import ConfigStore
from skycast.error_codes import LOCATION_NOT_FOUND, NETWORK_ERROR, WeatherError
from skycast.tui.scenes import CLEAR_DAY, CLEAR_NIGHT, RAIN
from skycast.utils import error_handling
from skycast.utils.error_handling import ErrorAggregator, ErrorCategory, handle_error
from skycast.weather import WeatherSnapshot, format_clock

ANSI_SGR = re.compile(r'\x1b\[[0-9;]*m')

CURRENT = 'skycast.cli.WeatherClient.current'
URLOPEN = 'skycast.weather.urllib.request.urlopen'


@pytest.fixture
def config_path(tmp_path):
    return str(tmp_path / "config.yaml")


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    monkeypatch.setenv("SKYCAST_CONFIG", str(tmp_path / "env-config.yaml"))
    monkeypatch.delenv("NO_COLOR", raising=False)
    monkeypatch.delenv("WEATHER_API_KEY", raising=False)


def snapshot(code=500, country="GB"):
    return WeatherSnapshot(
        city="London", country=country, condition_code=code, condition="Rain",
        description="light rain", temperature=12.0, feels_like=11.0, humidity=80,
        wind_speed=3.0, observed_at=1_700_010_000, sunrise=1_700_000_000,
        sunset=1_700_030_000,
    )


def art_lines(output):
    return [line.strip() for line in ANSI_SGR.sub('', output).split('\n') if line.strip()]


# ===========================================================================
# Parser
# ===========================================================================

class TestParser:
    def test_defaults(self):
        args = build_parser().parse_args([])
        assert args.location is None
        assert args.code is None
        assert args.animate is None
        assert args.color is None

    def test_color_flags(self):
        assert build_parser().parse_args(['--color']).color is True
        assert build_parser().parse_args(['--no-color']).color is False

    def test_color_flags_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(['--color', '--no-color'])

    @pytest.mark.parametrize("value", ["0", "-5", "abc"])
    def test_frame_delay_must_be_positive(self, value):
        with pytest.raises(SystemExit):
            build_parser().parse_args(['--frame-delay', value])


# ===========================================================================
# Offline Rendering
# ===========================================================================

class TestOffline:
    def test_renders_code(self, capsys, config_path):
        rc = main(['--code', '500', '--width', '80', '--no-color', '--config', config_path])
        out = capsys.readouterr().out
        assert rc == 0
        assert art_lines(out) == [line.strip() for line in RAIN.art(0) if line.strip()]
        assert '\x1b' not in out

    def test_color_output(self, capsys, config_path):
        main(['--code', '500', '--width', '80', '--color', '--config', config_path])
        assert '\x1b[38;2;' in capsys.readouterr().out

    def test_night_from_sun_times(self, capsys, config_path):
        main(['--code', '800', '--now', '500', '--sunrise', '100', '--sunset', '400',
              '--width', '80', '--no-color', '--config', config_path])
        assert art_lines(capsys.readouterr().out)[0] == CLEAR_NIGHT.art(0)[0].strip()

    def test_day_without_sun_times(self, capsys, config_path):
        main(['--code', '800', '--width', '80', '--no-color', '--config', config_path])
        assert art_lines(capsys.readouterr().out)[0] == CLEAR_DAY.art(0)[0].strip()

    def test_narrow_terminal_prints_nothing(self, capsys, config_path):
        rc = main(['--code', '500', '--width', '40', '--config', config_path])
        assert rc == 0
        assert capsys.readouterr().out == ""

    def test_no_network_used(self, config_path):
        with patch(CURRENT) as current:
            main(['--code', '211', '--width', '80', '--config', config_path])
        current.assert_not_called()

    def test_animate_for_duration(self, capsys, config_path):
        rc = main(['--code', '500', '--animate', '--frame-delay', '10', '--duration', '0.05',
                   '--width', '80', '--no-color', '--config', config_path])
        out = capsys.readouterr().out
        assert rc == 0
        assert '\x1b[13F\x1b[J' in out


# ===========================================================================
# Fetching
# ===========================================================================

class TestFetch:
    def test_location_argument(self, capsys, config_path):
        with patch(CURRENT, return_value=snapshot()) as current:
            rc = main(['London', '--width', '80', '--no-color', '--config', config_path])
        out = capsys.readouterr().out
        assert rc == 0
        current.assert_called_once_with('London,GB', None)
        assert out.rstrip('\n').split('\n')[-1].startswith("London, GB: light rain")

    def test_units_flag(self, config_path):
        with patch(CURRENT, return_value=snapshot()) as current:
            main(['London', '--units', 'imperial', '--width', '80', '--config', config_path])
        current.assert_called_once_with('London,GB', 'fahrenheit')

    def test_fahrenheit_flag_wins(self, config_path):
        with patch(CURRENT, return_value=snapshot()) as current:
            main(['London', '-F', '--units', 'metric', '--width', '80', '--config', config_path])
        current.assert_called_once_with('London,GB', 'fahrenheit')

    def test_default_location_from_config(self, config_path):
        ConfigStore(config_path).update(default_location="Oslo,NO", default_units="celsius")
        with patch(CURRENT, return_value=snapshot()) as current:
            main(['--width', '80', '--config', config_path])
        current.assert_called_once_with('Oslo,NO', 'celsius')

    def test_no_location(self, capsys, config_path):
        rc = main(['--config', config_path])
        assert rc == 6
        assert "no location" in capsys.readouterr().err

    def test_missing_api_key(self, capsys, config_path):
        rc = main(['London', '--config', config_path])
        err = capsys.readouterr().err
        assert rc == 2
        assert "E001" in err
        assert "WEATHER_API_KEY" in err

    @pytest.mark.parametrize(
        "error, expected",
        [(WeatherError(LOCATION_NOT_FOUND, "Atlantis"), 3), (WeatherError(NETWORK_ERROR), 4)],
        ids=["location", "network"],
    )
    def test_weather_errors_map_to_exit_codes(self, capsys, config_path, error, expected):
        with patch(CURRENT, side_effect=error):
            rc = main(['Atlantis', '--config', config_path])
        assert rc == expected
        assert error.error_code.code in capsys.readouterr().err

    def test_location_normalised(self, config_path):
        with patch(CURRENT, return_value=snapshot()) as current:
            main(['Austin Texas', '--width', '80', '--config', config_path])
        current.assert_called_once_with('Austin,TX,US', None)

    def test_configured_location_normalised(self, config_path):
        ConfigStore(config_path).update(default_location="halifax ns")
        with patch(CURRENT, return_value=snapshot()) as current:
            main(['--width', '80', '--config', config_path])
        current.assert_called_once_with('halifax,NS,CA', None)

    def test_sun_times_in_summary(self, capsys, config_path):
        with patch(CURRENT, return_value=snapshot()):
            main(['London', '--width', '80', '--no-color', '--config', config_path])
        last = capsys.readouterr().out.rstrip('\n').split('\n')[-1]
        assert f"sunrise {format_clock(1_700_000_000)}" in last
        assert f"sunset {format_clock(1_700_030_000)}" in last

    def test_verbose_failure_reports_handled_errors(self, caplog, config_path, monkeypatch):
        monkeypatch.setattr(error_handling, '_global_aggregator', ErrorAggregator())

        def failing_fetch(location, units):
            handle_error(ConnectionError("refused"), "fetch_weather", ErrorCategory.NETWORK)
            raise WeatherError(NETWORK_ERROR, "refused")

        with caplog.at_level(logging.DEBUG, logger='skycast.cli'):
            with patch(CURRENT, side_effect=failing_fetch):
                rc = main(['London', '-v', '--config', config_path])
        assert rc == 4
        summary = [r.getMessage() for r in caplog.records if r.name == 'skycast.cli'
                   and r.getMessage().startswith("Handled")]
        assert summary == ["Handled 1 error(s) this run: by category {'network': 1}, "
                           "repeats {'network:ConnectionError:fetch_weather': 1}"]


# ===========================================================================
# Response Cache
# ===========================================================================

def ok_response(payload):
    response = MagicMock()
    response.status = 200
    response.read.return_value = json.dumps(payload).encode('utf-8')
    response.__enter__.return_value = response
    return response


PAYLOAD = {
    "name": "London",
    "dt": 1_700_010_000,
    "weather": [{"id": 500, "main": "Rain", "description": "light rain"}],
    "main": {"temp": 12.0, "feels_like": 11.0, "humidity": 80},
    "wind": {"speed": 3.0},
    "sys": {"country": "GB", "sunrise": 1_700_000_000, "sunset": 1_700_030_000},
}


class TestCache:
    @pytest.fixture(autouse=True)
    def api_key(self, monkeypatch):
        monkeypatch.setenv("WEATHER_API_KEY", "test-key")

    def test_second_run_served_from_cache(self, capsys, tmp_path, config_path):
        with patch(URLOPEN, return_value=ok_response(PAYLOAD)) as urlopen:
            assert main(['London', '--width', '80', '--config', config_path]) == 0
            assert main(['London', '--width', '80', '--config', config_path]) == 0
        assert urlopen.call_count == 1
        assert (tmp_path / "weather-cache.json").exists()
        out = capsys.readouterr().out
        assert out.count("London, GB: light rain") == 2

    def test_no_cache_flag_fetches(self, config_path):
        with patch(URLOPEN, return_value=ok_response(PAYLOAD)) as urlopen:
            main(['London', '--width', '80', '--config', config_path])
            main(['London', '--no-cache', '--width', '80', '--config', config_path])
        assert urlopen.call_count == 2

    def test_clear_cache(self, capsys, tmp_path, config_path):
        with patch(URLOPEN, return_value=ok_response(PAYLOAD)):
            main(['London', '--width', '80', '--config', config_path])
        assert main(['--clear-cache', '--config', config_path]) == 0
        assert "Cleared" in capsys.readouterr().out
        assert json.loads((tmp_path / "weather-cache.json").read_text()) == {}


# ===========================================================================
# Settings
# ===========================================================================

class TestSettings:
    def test_set_default_location(self, capsys, config_path):
        rc = main(['--set-default-location', 'Lima,PE', '--config', config_path])
        assert rc == 0
        assert "Lima,PE" in capsys.readouterr().out
        assert ConfigStore(config_path).load().default_location == "Lima,PE"

    def test_set_palette(self, config_path):
        assert main(['--set-palette', 'Retro', '--config', config_path]) == 0
        assert ConfigStore(config_path).load().palette == "retro"

    def test_set_unknown_palette(self, config_path):
        assert main(['--set-palette', 'neon', '--config', config_path]) == 6
        assert ConfigStore(config_path).load().palette == "day"

    def test_configured_palette_used(self, config_path):
        ConfigStore(config_path).update(palette="night")
        with patch('skycast.cli.render') as render:
            main(['--code', '500', '--width', '80', '--config', config_path])
        context = render.call_args.args[1]
        assert context.palette.name == "night"

    def test_palette_flag_overrides_config(self, config_path):
        ConfigStore(config_path).update(palette="night")
        with patch('skycast.cli.render') as render:
            main(['--code', '500', '--palette', 'retro', '--config', config_path])
        assert render.call_args.args[1].palette.name == "retro"

    def test_env_config_path(self, tmp_path):
        main(['--set-palette', 'night'])
        assert ConfigStore(tmp_path / "env-config.yaml").load().palette == "night"

    def test_unwritable_config_is_config_error(self, capsys, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        rc = main(['--set-palette', 'night', '--config', str(blocker / "config.yaml")])
        assert rc == 1
        assert "E007" in capsys.readouterr().err
