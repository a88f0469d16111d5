"""Suggest currently available identifiers for a country/city pair."""

import logging
from typing import List, Optional

from .city_codes import CityCodeDeriver
from .codec import format_id
from .collision import CollisionChecker
from .config import DEFAULT_MAX_SUGGESTIONS, NUMBER_MAX, NUMBER_MIN
from .countries import DEFAULT_REGISTRY, CountryRegistry

logger = logging.getLogger(__name__)


class SuggestionEngine:
    """Scans candidate prefixes in rank order, numbers ascending."""

    def __init__(
        self,
        checker: CollisionChecker,
        registry: Optional[CountryRegistry] = None,
        deriver: Optional[CityCodeDeriver] = None,
    ):
        self.checker = checker
        self.registry = registry or DEFAULT_REGISTRY
        self.deriver = deriver or CityCodeDeriver()

    def suggest(self, country: str, city: str,
                max_suggestions: int = DEFAULT_MAX_SUGGESTIONS) -> List[str]:
        """
        Return up to max_suggestions available ids.

        Walks every city code candidate in rank order and, within each,
        numbers 100..999 ascending. Returns fewer ids when the candidate
        space runs out; never fails on exhaustion.

        Raises:
            InvalidCountryCodeError: Unknown country
            InvalidCityNameError: City name has fewer than 2 letters
        """
        info = self.registry.lookup(country)
        candidates = self.deriver.candidates_for(city, info.code)
        if max_suggestions <= 0:
            return []

        suggestions: List[str] = []
        for candidate in candidates:
            for number in range(NUMBER_MIN, NUMBER_MAX + 1):
                office_id = format_id(candidate.country_code, candidate.code, number)
                if self.checker.is_available(office_id):
                    suggestions.append(office_id)
                    if len(suggestions) >= max_suggestions:
                        return suggestions

        logger.info(
            f"Only {len(suggestions)} of {max_suggestions} suggestions available "
            f"for {info.code}/{city}"
        )
        return suggestions

    def possible_ids(self, country: str, city_code: str) -> List[str]:
        """All 900 ids under the CCcc prefix."""
        info = self.registry.lookup(country)
        code = city_code.upper()
        return [format_id(info.code, code, n) for n in range(NUMBER_MIN, NUMBER_MAX + 1)]

    def available_ids(self, country: str, city_code: str) -> List[str]:
        """Ids under the CCcc prefix the checker reports as free."""
        return [i for i in self.possible_ids(country, city_code) if self.checker.is_available(i)]
