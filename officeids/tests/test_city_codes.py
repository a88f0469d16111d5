"""Tests for city code derivation."""

import pytest

from officeids.city_codes import (
    CityCodeCandidate,
    CityCodeDeriver,
    candidates_for,
    derive_candidates,
    derive_city_code,
    normalize_city_name,
)
from officeids.errors import InvalidCityNameError


class TestNormalization:

    def test_uppercases_and_strips_non_letters(self):
        assert normalize_city_name("Xi'an") == "XIAN"
        assert normalize_city_name("Cluj-Napoca") == "CLUJNAPOCA"

    def test_collapses_whitespace(self):
        assert normalize_city_name("  new   york \t") == "NEW YORK"

    def test_drops_accented_letters(self):
        assert normalize_city_name("Malmö") == "MALM"


class TestDeriveCandidates:

    def test_single_word(self):
        assert derive_candidates("London") == ["LO"]

    def test_two_words(self):
        """Primary initials, then word 2 prefix, then word 1 prefix."""
        assert derive_candidates("New York") == ["NY", "YO", "NE"]

    def test_three_words(self):
        assert derive_candidates("Rio de Janeiro") == ["RD", "RJ", "DE", "RI"]

    def test_short_first_word_has_no_word1_fallback(self):
        assert derive_candidates("La Plata") == ["LP", "PL"]

    def test_duplicates_removed(self):
        # word 1 prefix equals the primary initials
        assert derive_candidates("Santa Ana") == ["SA", "AN"]

    def test_third_word_fallback(self):
        assert derive_candidates("San Antonio Sur") == ["SA", "SS", "AN"]

    def test_one_letter_second_word_fallback_skipped(self):
        assert derive_candidates("Ab C") == ["AC"]

    def test_case_and_punctuation_insensitive(self):
        assert derive_candidates("new-york") == ["NE"]
        assert derive_candidates("  NEW   york ") == ["NY", "YO", "NE"]

    def test_order_is_deterministic(self):
        assert derive_candidates("Ho Chi Minh City") == derive_candidates("Ho Chi Minh City")

    @pytest.mark.parametrize("name", ["", "A", " a ", "1234", "--", None])
    def test_invalid_names(self, name):
        with pytest.raises(InvalidCityNameError):
            derive_candidates(name)

    def test_invalid_name_is_value_error(self):
        with pytest.raises(ValueError):
            derive_candidates("Ö")

    def test_every_major_city_derives(self):
        from officeids.countries import DEFAULT_REGISTRY

        for info in DEFAULT_REGISTRY.countries():
            for city in info.major_cities:
                codes = derive_candidates(city)
                assert codes, city
                assert all(len(c) == 2 and c.isalpha() and c.isupper() for c in codes)


class TestHelpers:

    def test_derive_city_code(self):
        assert derive_city_code("Tel Aviv") == "TA"

    def test_candidates_for(self):
        result = candidates_for("New York", "us")
        assert result[0] == CityCodeCandidate(code="NY", source_city="New York", country_code="US")
        assert [c.code for c in result] == ["NY", "YO", "NE"]

    def test_deriver_class_delegates(self):
        deriver = CityCodeDeriver()
        assert deriver.derive_candidates("London") == ["LO"]
        assert deriver.normalize("São Paulo") == "SO PAULO"
