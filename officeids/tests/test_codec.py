"""Tests for identifier parsing, validation and formatting."""

import pytest

from officeids.codec import (
    IdentifierCodec,
    OfficeIdentifier,
    format_id,
    parse,
    validate,
)
from officeids.countries import CountryInfo, CountryRegistry
from officeids.errors import InvalidFormatError


class TestParse:

    def test_parse_valid(self):
        parsed = parse("GBLO123")
        assert parsed == OfficeIdentifier(raw="GBLO123", country="GB", city="LO", number="123")
        assert parsed.prefix == "GBLO"
        assert parsed.number_value == 123
        assert str(parsed) == "GBLO123"
        assert parsed.country_info().name == "United Kingdom"

    def test_parse_bounds(self):
        assert parse("USNY100").number == "100"
        assert parse("USNY999").number == "999"

    @pytest.mark.parametrize("raw", [
        "INVALID",   # right length, wrong shape
        "GBLO99",    # number too short
        "GBLO1000",  # too long
        "GBLO099",   # below 100
        "gblo123",   # lowercase
        "GBlo123",   # lowercase city
        "XXLO123",   # unknown country
        "GB1O123",   # digit in city code
        "GBLO12A",   # letter in number
        "",
    ])
    def test_parse_invalid(self, raw):
        with pytest.raises(InvalidFormatError):
            parse(raw)

    def test_parse_error_is_value_error(self):
        with pytest.raises(ValueError, match="Invalid office ID format"):
            parse("INVALID")

    def test_round_trip(self):
        for country in ("GB", "US", "JP", "BR"):
            for city in ("LO", "NY", "ZZ"):
                for number in (100, 555, 999):
                    parsed = parse(format_id(country, city, number))
                    assert (parsed.country, parsed.city, parsed.number) == (country, city, str(number))


class TestFormat:

    def test_format_int(self):
        assert format_id("GB", "LO", 123) == "GBLO123"

    def test_format_string(self):
        assert format_id("GB", "LO", "456") == "GBLO456"

    def test_format_does_not_validate(self):
        assert format_id("xx", "l", 5) == "xxl005"


class TestValidate:

    def test_valid(self):
        result = validate("FRPA250")
        assert result.is_valid
        assert result.errors == ()
        assert (result.country, result.city, result.number) == ("FR", "PA", "250")
        assert result.format == "CCccNNN"

    def test_wrong_length_reports_single_error(self):
        result = validate("GBLO12")
        assert not result.is_valid
        assert result.errors == ("Office ID must be exactly 7 characters",)

    def test_collects_multiple_errors(self):
        result = validate("gb lo12")
        assert not result.is_valid
        assert len(result.errors) == 3

    def test_unknown_country_reported(self):
        result = validate("XXLO123")
        assert result.errors == ("Unknown country code: XX",)

    def test_non_string(self):
        assert not validate(1234567).is_valid


class TestCustomRegistry:

    def test_codec_uses_its_registry(self):
        registry = CountryRegistry([
            CountryInfo(code="IS", name="Iceland", continent="Europe", major_cities=("Reykjavik",)),
        ])
        codec = IdentifierCodec(registry)
        assert codec.is_valid("ISRE101")
        assert not codec.is_valid("GBLO123")
        assert codec.format("IS", "RE", 101) == "ISRE101"
