"""
Reference data for the twelve-country African trade set.

Codes are UN M49 numeric codes as used by Comtrade (zero-padded strings).
"""
from dataclasses import dataclass
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class CountryRef:
    iso_alpha3: str
    numeric_code: str
    display_name: str


AFRICAN_COUNTRIES: Tuple[CountryRef, ...] = (
    CountryRef("DZA", "012", "Algeria"),
    CountryRef("AGO", "024", "Angola"),
    CountryRef("EGY", "818", "Egypt"),
    CountryRef("ETH", "231", "Ethiopia"),
    CountryRef("GHA", "288", "Ghana"),
    CountryRef("KEN", "404", "Kenya"),
    CountryRef("MAR", "504", "Morocco"),
    CountryRef("NGA", "566", "Nigeria"),
    CountryRef("ZAF", "710", "South Africa"),
    CountryRef("TUN", "788", "Tunisia"),
    CountryRef("UGA", "800", "Uganda"),
    CountryRef("ZWE", "716", "Zimbabwe"),
)

_BY_NUMERIC: Dict[str, CountryRef] = {c.numeric_code: c for c in AFRICAN_COUNTRIES}
_BY_ISO3: Dict[str, CountryRef] = {c.iso_alpha3: c for c in AFRICAN_COUNTRIES}

# Clusters with stronger trade ties (synthetic generator only)
REGIONAL_GROUPS: Dict[str, Tuple[str, ...]] = {
    "west": ("566", "288", "788"),   # Nigeria, Ghana, Tunisia
    "east": ("404", "800", "231"),   # Kenya, Uganda, Ethiopia
    "north": ("012", "818", "504"),  # Algeria, Egypt, Morocco
    "south": ("710", "716", "024"),  # South Africa, Zimbabwe, Angola
}

# Approximate GDP (USD), used to scale synthetic trade values
ECONOMIC_SIZES: Dict[str, float] = {
    "012": 200e9,  # Algeria
    "024": 120e9,  # Angola
    "818": 400e9,  # Egypt
    "231": 100e9,  # Ethiopia
    "288": 75e9,   # Ghana
    "404": 110e9,  # Kenya
    "504": 130e9,  # Morocco
    "566": 450e9,  # Nigeria
    "710": 420e9,  # South Africa
    "788": 40e9,   # Tunisia
    "800": 45e9,   # Uganda
    "716": 25e9,   # Zimbabwe
}
DEFAULT_ECONOMIC_SIZE = 50e9


def _normalize_code(code) -> str:
    text = str(code).strip().upper() if code is not None else ""
    if text.isdigit():
        return text.zfill(3)
    return text


def lookup(code) -> Optional[CountryRef]:
    """Resolve an M49 numeric code (int or str) or an ISO3 code."""
    key = _normalize_code(code)
    return _BY_NUMERIC.get(key) or _BY_ISO3.get(key)


def is_african_country(code) -> bool:
    return lookup(code) is not None


def country_name(code) -> str:
    """Display name for a code; unknown codes are returned unchanged."""
    ref = lookup(code)
    if ref:
        return ref.display_name
    return "" if code is None else str(code)


def region_of(code) -> Optional[str]:
    key = _normalize_code(code)
    ref = _BY_ISO3.get(key)
    if ref:
        key = ref.numeric_code
    for region, members in REGIONAL_GROUPS.items():
        if key in members:
            return region
    return None


def numeric_codes() -> Tuple[str, ...]:
    return tuple(c.numeric_code for c in AFRICAN_COUNTRIES)
