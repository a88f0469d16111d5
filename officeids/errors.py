"""Error kinds and exceptions for office identifier allocation.

Pure helpers (registry lookup, city code derivation, parsing) raise the
exceptions below. The generator and batch coordinator never raise for
domain errors; they report an ``ErrorKind`` on the returned result.
"""

from enum import Enum


class ErrorKind(str, Enum):
    """Why an allocation or parse did not succeed."""

    INVALID_COUNTRY_CODE = "invalid_country_code"
    INVALID_CITY_NAME = "invalid_city_name"
    INVALID_FORMAT = "invalid_format"
    GENERATION_EXHAUSTED = "generation_exhausted"
    COLLISION_CHECK_FAILED = "collision_check_failed"
    MISSING_LOCATION = "missing_location"
    GENERATION_FAILED = "generation_failed"


class OfficeIdError(Exception):
    """Base class for office identifier errors."""

    kind: ErrorKind = None


class InvalidCountryCodeError(OfficeIdError, ValueError):
    kind = ErrorKind.INVALID_COUNTRY_CODE


class InvalidCityNameError(OfficeIdError, ValueError):
    kind = ErrorKind.INVALID_CITY_NAME


class InvalidFormatError(OfficeIdError, ValueError):
    kind = ErrorKind.INVALID_FORMAT


class RecordStoreError(OfficeIdError):
    """The record store could not answer a query."""


class CollisionCheckFailedError(RecordStoreError):
    """A collision check failed and the checker runs in strict mode."""

    kind = ErrorKind.COLLISION_CHECK_FAILED
