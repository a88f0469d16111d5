"""Country registry for office identifiers.

Holds the static table of ISO 3166-1 alpha-2 codes that may prefix an
office identifier, together with display metadata (name, continent and a
list of representative cities used for fallback suggestions).

Usage:
    from officeids.countries import DEFAULT_REGISTRY

    info = DEFAULT_REGISTRY.lookup("gb")
    # CountryInfo(code='GB', name='United Kingdom', ...)
    DEFAULT_REGISTRY.resolve("United Kingdom").code
    # 'GB'
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

import pycountry

from .errors import InvalidCountryCodeError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CountryInfo:
    code: str
    name: str
    continent: str
    major_cities: Tuple[str, ...]

    @property
    def alpha_3(self) -> Optional[str]:
        """ISO 3166-1 alpha-3 code, or None if pycountry does not know the code."""
        try:
            country = pycountry.countries.get(alpha_2=self.code)
        except (AttributeError, LookupError):
            return None
        return country.alpha_3 if country else None


# ============================================================================
# Static country table
# ============================================================================

_COUNTRY_TABLE = [
    # Europe
    ("GB", "United Kingdom", "Europe", ["London", "Manchester", "Birmingham", "Edinburgh", "Glasgow"]),
    ("FR", "France", "Europe", ["Paris", "Lyon", "Marseille", "Toulouse", "Nice"]),
    ("DE", "Germany", "Europe", ["Berlin", "Munich", "Hamburg", "Frankfurt", "Cologne"]),
    ("IT", "Italy", "Europe", ["Rome", "Milan", "Naples", "Turin", "Florence"]),
    ("ES", "Spain", "Europe", ["Madrid", "Barcelona", "Valencia", "Seville", "Bilbao"]),
    ("NL", "Netherlands", "Europe", ["Amsterdam", "Rotterdam", "The Hague", "Utrecht", "Eindhoven"]),
    ("CH", "Switzerland", "Europe", ["Zurich", "Geneva", "Basel", "Bern", "Lausanne"]),
    ("AT", "Austria", "Europe", ["Vienna", "Graz", "Linz", "Salzburg", "Innsbruck"]),
    ("BE", "Belgium", "Europe", ["Brussels", "Antwerp", "Ghent", "Charleroi", "Liège"]),
    ("SE", "Sweden", "Europe", ["Stockholm", "Gothenburg", "Malmö", "Uppsala", "Västerås"]),
    ("NO", "Norway", "Europe", ["Oslo", "Bergen", "Trondheim", "Stavanger", "Kristiansand"]),
    ("DK", "Denmark", "Europe", ["Copenhagen", "Aarhus", "Odense", "Aalborg", "Esbjerg"]),
    ("FI", "Finland", "Europe", ["Helsinki", "Espoo", "Tampere", "Vantaa", "Turku"]),
    ("PL", "Poland", "Europe", ["Warsaw", "Krakow", "Gdansk", "Wroclaw", "Poznan"]),
    ("CZ", "Czech Republic", "Europe", ["Prague", "Brno", "Ostrava", "Plzen", "Liberec"]),
    ("HU", "Hungary", "Europe", ["Budapest", "Debrecen", "Szeged", "Miskolc", "Pécs"]),
    ("RO", "Romania", "Europe", ["Bucharest", "Cluj-Napoca", "Timisoara", "Iasi", "Constanta"]),
    ("GR", "Greece", "Europe", ["Athens", "Thessaloniki", "Patras", "Heraklion", "Larissa"]),
    ("PT", "Portugal", "Europe", ["Lisbon", "Porto", "Vila Nova de Gaia", "Amadora", "Braga"]),
    ("IE", "Ireland", "Europe", ["Dublin", "Cork", "Limerick", "Galway", "Waterford"]),

    # North America
    ("US", "United States", "North America", [
        "New York", "Los Angeles", "Chicago", "Houston", "Phoenix",
        "Philadelphia", "San Antonio", "San Diego", "Dallas", "San Jose",
    ]),
    ("CA", "Canada", "North America", [
        "Toronto", "Montreal", "Vancouver", "Calgary", "Edmonton",
        "Ottawa", "Winnipeg", "Quebec City", "Hamilton", "Kitchener",
    ]),
    ("MX", "Mexico", "North America", [
        "Mexico City", "Guadalajara", "Monterrey", "Puebla", "Tijuana",
        "León", "Juárez", "Zapopan", "Nezahualcóyotl", "Guadalupe",
    ]),

    # Asia
    ("CN", "China", "Asia", [
        "Beijing", "Shanghai", "Guangzhou", "Shenzhen", "Tianjin",
        "Wuhan", "Chengdu", "Nanjing", "Xi'an", "Hangzhou",
    ]),
    ("JP", "Japan", "Asia", [
        "Tokyo", "Osaka", "Nagoya", "Sapporo", "Fukuoka",
        "Kobe", "Kyoto", "Yokohama", "Kawasaki", "Saitama",
    ]),
    ("KR", "South Korea", "Asia", [
        "Seoul", "Busan", "Incheon", "Daegu", "Daejeon",
        "Gwangju", "Ulsan", "Sejong", "Suwon", "Yongin",
    ]),
    ("IN", "India", "Asia", [
        "Mumbai", "Delhi", "Bangalore", "Hyderabad", "Ahmedabad",
        "Chennai", "Kolkata", "Surat", "Pune", "Jaipur",
    ]),
    ("SG", "Singapore", "Asia", ["Singapore"]),
    ("HK", "Hong Kong", "Asia", ["Hong Kong"]),
    ("TW", "Taiwan", "Asia", ["Taipei", "Kaohsiung", "Taichung", "Tainan", "Taoyuan"]),
    ("TH", "Thailand", "Asia", ["Bangkok", "Chiang Mai", "Pattaya", "Phuket", "Hat Yai"]),
    ("MY", "Malaysia", "Asia", ["Kuala Lumpur", "George Town", "Ipoh", "Shah Alam", "Petaling Jaya"]),
    ("ID", "Indonesia", "Asia", ["Jakarta", "Surabaya", "Bandung", "Medan", "Semarang"]),
    ("PH", "Philippines", "Asia", ["Manila", "Quezon City", "Caloocan", "Davao City", "Cebu City"]),
    ("VN", "Vietnam", "Asia", ["Ho Chi Minh City", "Hanoi", "Da Nang", "Hai Phong", "Can Tho"]),

    # Middle East
    ("AE", "United Arab Emirates", "Asia", ["Dubai", "Abu Dhabi", "Sharjah", "Ajman", "Ras Al Khaimah"]),
    ("SA", "Saudi Arabia", "Asia", ["Riyadh", "Jeddah", "Mecca", "Medina", "Dammam"]),
    ("IL", "Israel", "Asia", ["Tel Aviv", "Jerusalem", "Haifa", "Rishon LeZion", "Petah Tikva"]),
    ("TR", "Turkey", "Asia", ["Istanbul", "Ankara", "Izmir", "Bursa", "Antalya"]),

    # Africa
    ("ZA", "South Africa", "Africa", ["Johannesburg", "Cape Town", "Durban", "Pretoria", "Port Elizabeth"]),
    ("EG", "Egypt", "Africa", ["Cairo", "Alexandria", "Giza", "Shubra El Kheima", "Port Said"]),
    ("NG", "Nigeria", "Africa", ["Lagos", "Kano", "Ibadan", "Benin City", "Port Harcourt"]),
    ("KE", "Kenya", "Africa", ["Nairobi", "Mombasa", "Kisumu", "Nakuru", "Eldoret"]),

    # Oceania
    ("AU", "Australia", "Oceania", [
        "Sydney", "Melbourne", "Brisbane", "Perth", "Adelaide",
        "Gold Coast", "Newcastle", "Canberra", "Sunshine Coast", "Wollongong",
    ]),
    ("NZ", "New Zealand", "Oceania", ["Auckland", "Wellington", "Christchurch", "Hamilton", "Tauranga"]),

    # South America
    ("BR", "Brazil", "South America", [
        "São Paulo", "Rio de Janeiro", "Brasília", "Salvador", "Fortaleza",
        "Belo Horizonte", "Manaus", "Curitiba", "Recife", "Porto Alegre",
    ]),
    ("AR", "Argentina", "South America", ["Buenos Aires", "Córdoba", "Rosario", "Mendoza", "La Plata"]),
    ("CL", "Chile", "South America", ["Santiago", "Valparaíso", "Concepción", "La Serena", "Antofagasta"]),
    ("CO", "Colombia", "South America", ["Bogotá", "Medellín", "Cali", "Barranquilla", "Cartagena"]),
    ("PE", "Peru", "South America", ["Lima", "Arequipa", "Trujillo", "Chiclayo", "Piura"]),
]


def _normalize_code(code: str) -> str:
    return (code or "").strip().upper()


class CountryRegistry:
    """
    Immutable mapping of ISO2 code -> CountryInfo.

    Built once and shared read-only; lookups never mutate state, so a
    single instance can be used from any number of threads.
    """

    def __init__(self, countries: Iterable[CountryInfo]):
        table: Dict[str, CountryInfo] = {}
        for info in countries:
            code = _normalize_code(info.code)
            if len(code) != 2 or not code.isalpha():
                raise ValueError(f"Country code must be 2 letters: {info.code!r}")
            if code in table:
                raise ValueError(f"Duplicate country code: {code}")
            if not info.major_cities:
                raise ValueError(f"Country {code} needs at least one major city")
            table[code] = info
        self._countries = table

    def lookup(self, code: str) -> CountryInfo:
        """
        Look up a country by ISO2 code (case-insensitive).

        Raises:
            InvalidCountryCodeError: If the code is not registered
        """
        info = self.get(code)
        if info is None:
            raise InvalidCountryCodeError(
                f"Invalid country code: {code}. Must be a supported ISO 3166-1 alpha-2 code."
            )
        return info

    def get(self, code: str) -> Optional[CountryInfo]:
        """Non-raising variant of lookup()."""
        if not isinstance(code, str):
            return None
        return self._countries.get(_normalize_code(code))

    def contains(self, code: str) -> bool:
        return self.get(code) is not None

    __contains__ = contains

    def __len__(self) -> int:
        return len(self._countries)

    def codes(self) -> List[str]:
        return list(self._countries)

    def countries(self) -> List[CountryInfo]:
        return list(self._countries.values())

    def by_continent(self, continent: str) -> List[CountryInfo]:
        wanted = (continent or "").strip().lower()
        return [c for c in self._countries.values() if c.continent.lower() == wanted]

    def continents(self) -> List[str]:
        return sorted({c.continent for c in self._countries.values()})

    def resolve(self, country_input: str) -> CountryInfo:
        """Resolve an ISO2 code, ISO3 code or country name to a registered country.

        Registered ISO2 codes win immediately. Anything else goes through
        pycountry (alpha-3, exact name, then fuzzy search) and must land on
        a registered code.

        Args:
            country_input: "GB", "GBR", "United Kingdom", ...

        Returns:
            CountryInfo for the resolved code

        Raises:
            InvalidCountryCodeError: If the input cannot be resolved or the
                resolved country is not registered

        Example:
            >>> DEFAULT_REGISTRY.resolve("gbr").code
            'GB'
        """
        if not country_input or not str(country_input).strip():
            raise InvalidCountryCodeError("Country input cannot be empty")

        text = str(country_input).strip()
        info = self.get(text)
        if info is not None:
            return info

        iso2 = self._resolve_iso2(text)
        if iso2 is None:
            raise InvalidCountryCodeError(f"Could not resolve country '{text}' to an ISO2 code")

        info = self.get(iso2)
        if info is None:
            raise InvalidCountryCodeError(
                f"Country '{text}' resolved to {iso2}, which is not a supported country"
            )
        logger.debug(f"Resolved '{text}' → {iso2}")
        return info

    def _resolve_iso2(self, text: str) -> Optional[str]:
        # Local table names first ("South Korea", "Vietnam" differ from ISO names)
        lowered = text.lower()
        for info in self._countries.values():
            if info.name.lower() == lowered:
                return info.code

        try:
            if len(text) == 3 and text.isalpha():
                country = pycountry.countries.get(alpha_3=text.upper())
                if country:
                    return country.alpha_2

            country = pycountry.countries.get(name=text)
            if country:
                return country.alpha_2

            matches = pycountry.countries.search_fuzzy(text)
            if matches:
                return matches[0].alpha_2
        except (AttributeError, LookupError) as e:
            logger.debug(f"pycountry lookup failed for '{text}': {e}")
        return None


def build_default_registry() -> CountryRegistry:
    return CountryRegistry(
        CountryInfo(code=code, name=name, continent=continent, major_cities=tuple(cities))
        for code, name, continent, cities in _COUNTRY_TABLE
    )


DEFAULT_REGISTRY = build_default_registry()


def lookup(code: str) -> CountryInfo:
    """Look up a country in the default registry."""
    return DEFAULT_REGISTRY.lookup(code)
