"""Parsing and formatting of CCccNNN office identifiers.

    CC  = ISO 3166-1 alpha-2 country code (must be registered)
    cc  = 2-letter city code (format only)
    NNN = number between 100 and 999
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Tuple, Union

from .config import ID_FORMAT, ID_LENGTH, NUMBER_MAX, NUMBER_MIN
from .countries import DEFAULT_REGISTRY, CountryInfo, CountryRegistry
from .errors import InvalidFormatError

_LETTERS2 = re.compile(r"^[A-Z]{2}$")
_DIGITS3 = re.compile(r"^[0-9]{3}$")


@dataclass(frozen=True)
class OfficeIdentifier:
    raw: str
    country: str
    city: str
    number: str

    @property
    def prefix(self) -> str:
        return self.country + self.city

    @property
    def number_value(self) -> int:
        return int(self.number)

    def country_info(self, registry: CountryRegistry = DEFAULT_REGISTRY) -> CountryInfo:
        return registry.lookup(self.country)

    def __str__(self) -> str:
        return self.raw


@dataclass(frozen=True)
class IdValidation:
    """Detailed validation report for a candidate identifier."""

    raw: str
    is_valid: bool
    country: str = ""
    city: str = ""
    number: str = ""
    errors: Tuple[str, ...] = ()
    format: str = ID_FORMAT


def format_id(country: str, city: str, number: Union[int, str]) -> str:
    """Assemble an identifier. No validation; use parse() for that."""
    if isinstance(number, int):
        number = f"{number:03d}"
    return f"{country}{city}{number}"


class IdentifierCodec:
    """Parse/format identifiers against a country registry."""

    def __init__(self, registry: Optional[CountryRegistry] = None):
        self.registry = registry or DEFAULT_REGISTRY

    def format(self, country: str, city: str, number: Union[int, str]) -> str:
        return format_id(country, city, number)

    def validate(self, raw: str) -> IdValidation:
        """
        Check every part of an identifier and collect all problems.

        Unlike parse(), this never raises; it reports each failed rule so
        callers can show the full list.

        Args:
            raw: Candidate identifier

        Returns:
            IdValidation with is_valid and the list of errors
        """
        if not isinstance(raw, str):
            return IdValidation(raw=str(raw), is_valid=False,
                                errors=("Office ID must be a string",))
        if len(raw) != ID_LENGTH:
            return IdValidation(raw=raw, is_valid=False,
                                errors=(f"Office ID must be exactly {ID_LENGTH} characters",))

        country, city, number = raw[:2], raw[2:4], raw[4:]
        errors: List[str] = []

        if not _LETTERS2.match(country):
            errors.append("Country code must be 2 uppercase letters")
        elif not self.registry.contains(country):
            errors.append(f"Unknown country code: {country}")

        if not _LETTERS2.match(city):
            errors.append("City code must be 2 uppercase letters")

        if not _DIGITS3.match(number) or not NUMBER_MIN <= int(number) <= NUMBER_MAX:
            errors.append(f"Number must be 3 digits between {NUMBER_MIN}-{NUMBER_MAX}")

        return IdValidation(
            raw=raw,
            is_valid=not errors,
            country=country,
            city=city,
            number=number,
            errors=tuple(errors),
        )

    def is_valid(self, raw: str) -> bool:
        return self.validate(raw).is_valid

    def parse(self, raw: str) -> OfficeIdentifier:
        """
        Parse an identifier into its components.

        Raises:
            InvalidFormatError: If raw is not a valid CCccNNN identifier
        """
        validation = self.validate(raw)
        if not validation.is_valid:
            raise InvalidFormatError(
                f"Invalid office ID format {raw!r}: {', '.join(validation.errors)}"
            )
        return OfficeIdentifier(
            raw=raw,
            country=validation.country,
            city=validation.city,
            number=validation.number,
        )


DEFAULT_CODEC = IdentifierCodec()


def parse(raw: str) -> OfficeIdentifier:
    """Parse against the default registry."""
    return DEFAULT_CODEC.parse(raw)


def validate(raw: str) -> IdValidation:
    return DEFAULT_CODEC.validate(raw)
