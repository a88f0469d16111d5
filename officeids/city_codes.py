"""City code derivation.

Turns a free-form city name into an ordered list of 2-letter city code
candidates. The first candidate is the primary code; the rest are fallbacks
tried when every number under the primary prefix keeps colliding.

Rules (applied to the normalized, tokenized name):
- one word: first 2 letters ("London" → "LO")
- two or more words: initials of words 1 and 2 ("New York" → "NY")
- fallbacks, in order, duplicates dropped:
    initials of words 1 and 3 (3+ words)
    first 2 letters of word 2 (2+ words)
    first 2 letters of word 1 (word 1 longer than 2 letters)
"""

import re
from dataclasses import dataclass
from typing import List

from .errors import InvalidCityNameError

_NON_LETTER = re.compile(r"[^A-Z\s]")
_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class CityCodeCandidate:
    code: str
    source_city: str
    country_code: str


def normalize_city_name(city_name: str) -> str:
    """Uppercase, keep only A-Z and whitespace, collapse whitespace."""
    upper = (city_name or "").upper()
    letters = _NON_LETTER.sub("", upper)
    return _WHITESPACE.sub(" ", letters).strip()


def derive_candidates(city_name: str) -> List[str]:
    """
    Derive ranked 2-letter city code candidates.

    Args:
        city_name: City name as entered ("New York", "rio de janeiro")

    Returns:
        Candidate codes, primary first

    Raises:
        InvalidCityNameError: If fewer than 2 letters survive normalization

    Examples:
        >>> derive_candidates("London")
        ['LO']
        >>> derive_candidates("New York")
        ['NY', 'YO', 'NE']
    """
    if not isinstance(city_name, str):
        raise InvalidCityNameError(f"City name must be a string, got {type(city_name).__name__}")

    words = normalize_city_name(city_name).split()
    if sum(len(w) for w in words) < 2:
        raise InvalidCityNameError(
            f"City name must contain at least 2 letters: {city_name!r}"
        )

    if len(words) == 1:
        primary = words[0][:2]
    else:
        primary = words[0][0] + words[1][0]

    ordered = [primary]
    if len(words) >= 3:
        ordered.append(words[0][0] + words[2][0])
    if len(words) >= 2:
        ordered.append(words[1][:2])
    if len(words[0]) > 2:
        ordered.append(words[0][:2])

    candidates: List[str] = []
    for code in ordered:
        if len(code) == 2 and code not in candidates:
            candidates.append(code)
    return candidates


def derive_city_code(city_name: str) -> str:
    """Primary city code only."""
    return derive_candidates(city_name)[0]


def candidates_for(city_name: str, country_code: str) -> List[CityCodeCandidate]:
    """Candidates tagged with their source city and country."""
    country = (country_code or "").strip().upper()
    return [
        CityCodeCandidate(code=code, source_city=city_name, country_code=country)
        for code in derive_candidates(city_name)
    ]


class CityCodeDeriver:
    """Injectable wrapper around the module-level derivation functions."""

    def normalize(self, city_name: str) -> str:
        return normalize_city_name(city_name)

    def derive_candidates(self, city_name: str) -> List[str]:
        return derive_candidates(city_name)

    def derive_city_code(self, city_name: str) -> str:
        return derive_city_code(city_name)

    def candidates_for(self, city_name: str, country_code: str) -> List[CityCodeCandidate]:
        return candidates_for(city_name, country_code)
