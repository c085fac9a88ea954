"""
Tests for location string normalisation.
"""

import os
import sys

import pytest

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from skycast.location import CA_PROVINCES, MAJOR_CITIES, US_STATES, normalize_location


# ===========================================================================
# Normalisation
# ===========================================================================

class TestNormalizeLocation:
    @pytest.mark.parametrize(
        "typed, expected",
        [
            ("Austin TX", "Austin,TX,US"),
            ("Austin Texas", "Austin,TX,US"),
            ("Santa Cruz New Mexico", "Santa Cruz,NM,US"),
            ("Halifax NS", "Halifax,NS,CA"),
            ("Charlottetown Prince Edward Island", "Charlottetown,PE,CA"),
            ("Lyon FR", "Lyon,FR"),
            ("Leeds UK", "Leeds,GB"),
        ],
        ids=["state-code", "state-name", "two-word-state", "province-code",
             "three-word-province", "country-code", "country-alias"],
    )
    def test_region_suffix(self, typed, expected):
        assert normalize_location(typed) == expected

    @pytest.mark.parametrize(
        "typed, expected",
        [("london", "London,GB"), ("New York", "New York,NY,US"), ("  hong   kong ", "Hong Kong,HK")],
    )
    def test_major_cities(self, typed, expected):
        assert normalize_location(typed) == expected

    def test_region_code_alone(self):
        assert normalize_location("tx") == "Texas,US"
        assert normalize_location("QC") == "Quebec,CA"

    @pytest.mark.parametrize(
        "typed, expected",
        [("paris , fr", "paris,FR"), ("Oslo,NO", "Oslo,NO"), ("Leeds, uk", "Leeds,GB"),
         ("Springfield, IL, US", "Springfield,IL,US"), ("Lima,,PE", "Lima,PE")],
    )
    def test_commas_tidied(self, typed, expected):
        assert normalize_location(typed) == expected

    @pytest.mark.parametrize("typed", ["Atlantis", "Santa Fe", "Kansas City", "Lyon France"])
    def test_unknown_left_alone(self, typed):
        assert normalize_location(typed) == typed

    def test_whitespace_collapsed(self):
        assert normalize_location("  Santa    Fe ") == "Santa Fe"

    @pytest.mark.parametrize("typed", [None, "", "   "])
    def test_blank(self, typed):
        assert normalize_location(typed) == ""

    def test_city_word_always_kept(self):
        # A lone state name is a city, never an empty city plus a state
        assert normalize_location("Washington") == "Washington"


class TestTables:
    def test_table_sizes(self):
        assert len(US_STATES) == 51
        assert len(CA_PROVINCES) == 13

    def test_city_values_are_comma_separated(self):
        for value in MAJOR_CITIES.values():
            assert ' ,' not in value and ', ' not in value
            assert value.split(',')[-1].isupper()

    def test_tables_read_only(self):
        with pytest.raises(TypeError):
            US_STATES['XX'] = 'Nowhere'
