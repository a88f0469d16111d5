"""Office identifier allocation.

Mints CCccNNN identifiers for architecture offices: a 2-letter ISO country
code, a 2-letter city code derived from the city name and a number between
100 and 999, checked against a record store for collisions.

Components:
- countries: registry of supported countries
- city_codes: city name → ranked 2-letter candidates
- codec: parse/validate/format identifiers
- collision: existence checks with the store failure policy
- generator: bounded-retry allocation
- suggestions: enumerate available ids
- statistics: usage counts over the store
- batch: concurrent generation
- service: facade tying it all together
"""

from .batch import BatchCoordinator
from .city_codes import CityCodeCandidate, CityCodeDeriver, derive_candidates
from .codec import IdentifierCodec, IdValidation, OfficeIdentifier, format_id, parse
from .collision import CollisionChecker, CollisionInfo
from .config import Settings
from .countries import DEFAULT_REGISTRY, CountryInfo, CountryRegistry
from .errors import (
    CollisionCheckFailedError,
    ErrorKind,
    InvalidCityNameError,
    InvalidCountryCodeError,
    InvalidFormatError,
    OfficeIdError,
    RecordStoreError,
)
from .generator import GenerationRequest, GenerationResult, IdentifierGenerator
from .service import OfficeIdService
from .statistics import StatisticsEngine, UsageStatistics, compute_stats
from .store import FirestoreRestStore, InMemoryRecordStore, RecordStore
from .suggestions import SuggestionEngine

__all__ = [
    "BatchCoordinator",
    "CityCodeCandidate",
    "CityCodeDeriver",
    "derive_candidates",
    "IdentifierCodec",
    "IdValidation",
    "OfficeIdentifier",
    "format_id",
    "parse",
    "CollisionChecker",
    "CollisionInfo",
    "Settings",
    "DEFAULT_REGISTRY",
    "CountryInfo",
    "CountryRegistry",
    "CollisionCheckFailedError",
    "ErrorKind",
    "InvalidCityNameError",
    "InvalidCountryCodeError",
    "InvalidFormatError",
    "OfficeIdError",
    "RecordStoreError",
    "GenerationRequest",
    "GenerationResult",
    "IdentifierGenerator",
    "OfficeIdService",
    "StatisticsEngine",
    "UsageStatistics",
    "compute_stats",
    "FirestoreRestStore",
    "InMemoryRecordStore",
    "RecordStore",
    "SuggestionEngine",
]
