"""
Location string normalisation.

Turns the loose place names people type into the comma-separated form the
provider resolves best:

    "Austin TX"          -> "Austin,TX,US"
    "Austin Texas"       -> "Austin,TX,US"
    "Halifax NS"         -> "Halifax,NS,CA"
    "Lyon France"        -> "Lyon France"       (unknown suffix, left alone)
    "paris , fr"         -> "paris,FR"
    "new york"           -> "New York,NY,US"

A trailing two-letter code is read as a US state first, then a Canadian
province, then a country. Input that already has commas is only tidied.
"""

import logging
from types import MappingProxyType
from typing import List, Optional, Tuple

logger = logging.getLogger(__name__)

US_STATES = MappingProxyType({
    'AL': 'Alabama', 'AK': 'Alaska', 'AZ': 'Arizona', 'AR': 'Arkansas',
    'CA': 'California', 'CO': 'Colorado', 'CT': 'Connecticut', 'DE': 'Delaware',
    'FL': 'Florida', 'GA': 'Georgia', 'HI': 'Hawaii', 'ID': 'Idaho',
    'IL': 'Illinois', 'IN': 'Indiana', 'IA': 'Iowa', 'KS': 'Kansas',
    'KY': 'Kentucky', 'LA': 'Louisiana', 'ME': 'Maine', 'MD': 'Maryland',
    'MA': 'Massachusetts', 'MI': 'Michigan', 'MN': 'Minnesota', 'MS': 'Mississippi',
    'MO': 'Missouri', 'MT': 'Montana', 'NE': 'Nebraska', 'NV': 'Nevada',
    'NH': 'New Hampshire', 'NJ': 'New Jersey', 'NM': 'New Mexico', 'NY': 'New York',
    'NC': 'North Carolina', 'ND': 'North Dakota', 'OH': 'Ohio', 'OK': 'Oklahoma',
    'OR': 'Oregon', 'PA': 'Pennsylvania', 'RI': 'Rhode Island', 'SC': 'South Carolina',
    'SD': 'South Dakota', 'TN': 'Tennessee', 'TX': 'Texas', 'UT': 'Utah',
    'VT': 'Vermont', 'VA': 'Virginia', 'WA': 'Washington', 'WV': 'West Virginia',
    'WI': 'Wisconsin', 'WY': 'Wyoming', 'DC': 'Washington DC',
})

CA_PROVINCES = MappingProxyType({
    'ON': 'Ontario', 'QC': 'Quebec', 'BC': 'British Columbia', 'AB': 'Alberta',
    'MB': 'Manitoba', 'SK': 'Saskatchewan', 'NS': 'Nova Scotia', 'NB': 'New Brunswick',
    'NL': 'Newfoundland', 'PE': 'Prince Edward Island', 'NT': 'Northwest Territories',
    'YT': 'Yukon', 'NU': 'Nunavut',
})

# Common non-ISO spellings
COUNTRY_ALIASES = MappingProxyType({'USA': 'US', 'UK': 'GB', 'UAE': 'AE'})

COUNTRY_CODES = frozenset({
    'US', 'CA', 'GB', 'AE', 'JP', 'FR', 'DE', 'AU', 'NZ', 'IT', 'ES', 'MX',
    'BR', 'IN', 'CN', 'NL', 'SG', 'HK',
})

MAJOR_CITIES = MappingProxyType({
    'san francisco': 'San Francisco,CA,US',
    'los angeles': 'Los Angeles,CA,US',
    'san diego': 'San Diego,CA,US',
    'san jose': 'San Jose,CA,US',
    'new york': 'New York,NY,US',
    'chicago': 'Chicago,IL,US',
    'houston': 'Houston,TX,US',
    'phoenix': 'Phoenix,AZ,US',
    'philadelphia': 'Philadelphia,PA,US',
    'san antonio': 'San Antonio,TX,US',
    'dallas': 'Dallas,TX,US',
    'austin': 'Austin,TX,US',
    'seattle': 'Seattle,WA,US',
    'boston': 'Boston,MA,US',
    'miami': 'Miami,FL,US',
    'london': 'London,GB',
    'paris': 'Paris,FR',
    'tokyo': 'Tokyo,JP',
    'sydney': 'Sydney,AU',
    'toronto': 'Toronto,CA',
    'vancouver': 'Vancouver,CA',
    'berlin': 'Berlin,DE',
    'madrid': 'Madrid,ES',
    'rome': 'Rome,IT',
    'amsterdam': 'Amsterdam,NL',
    'dubai': 'Dubai,AE',
    'singapore': 'Singapore,SG',
    'hong kong': 'Hong Kong,HK',
    'mumbai': 'Mumbai,IN',
    'beijing': 'Beijing,CN',
    'shanghai': 'Shanghai,CN',
})

_STATE_NAMES = {name.lower(): code for code, name in US_STATES.items()}
_PROVINCE_NAMES = {name.lower(): code for code, name in CA_PROVINCES.items()}

# Longest region name is three words ("Prince Edward Island")
_MAX_REGION_WORDS = 3


def _country_code(text: str) -> Optional[str]:
    code = text.upper()
    code = COUNTRY_ALIASES.get(code, code)
    return code if code in COUNTRY_CODES else None


def _region_suffix(words: List[str]) -> Optional[Tuple[int, str]]:
    """
    Match the trailing words against known regions.

    Returns (number of words consumed, suffix) or None. At least one word
    is always left for the city.
    """
    for count in range(min(_MAX_REGION_WORDS, len(words) - 1), 0, -1):
        tail = ' '.join(words[-count:]).lower()
        if tail in _STATE_NAMES:
            return count, f"{_STATE_NAMES[tail]},US"
        if tail in _PROVINCE_NAMES:
            return count, f"{_PROVINCE_NAMES[tail]},CA"

    if len(words) < 2:
        return None
    last = words[-1].upper()
    if last in US_STATES:
        return 1, f"{last},US"
    if last in CA_PROVINCES:
        return 1, f"{last},CA"
    country = _country_code(last)
    if country:
        return 1, country
    return None


def _tidy_commas(text: str) -> str:
    parts = [part.strip() for part in text.split(',') if part.strip()]
    if len(parts) > 1 and parts[-1].isalpha() and len(parts[-1]) <= 3:
        parts[-1] = _country_code(parts[-1]) or parts[-1].upper()
    return ','.join(parts)


def normalize_location(text: Optional[str]) -> str:
    """
    Normalise a user-typed location. Returns "" for blank input.

    Unrecognised input comes back with its whitespace collapsed and is
    otherwise unchanged.
    """
    if not text:
        return ""
    location = ' '.join(text.split())
    if not location:
        return ""

    if ',' in location:
        return _tidy_commas(location)

    upper = location.upper()
    if upper in US_STATES:
        return f"{US_STATES[upper]},US"
    if upper in CA_PROVINCES:
        return f"{CA_PROVINCES[upper]},CA"

    city = MAJOR_CITIES.get(location.lower())
    if city:
        return city

    words = location.split(' ')
    match = _region_suffix(words)
    if match:
        count, suffix = match
        return f"{' '.join(words[:-count])},{suffix}"
    return location
