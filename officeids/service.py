"""
High-level service for office identifier operations.

Wires the registry, deriver, codec, collision checker, generator,
suggestion engine, statistics and batch coordinator around a single record
store, and adds the conveniences the application layer needs: allocation
straight from an office record, availability checks and a cached
statistics snapshot.

Usage:
    from officeids import InMemoryRecordStore, OfficeIdService

    service = OfficeIdService(InMemoryRecordStore())
    result = service.generate_for("GB", "London")
    service.suggest("GB", "London", 3)
"""

import dataclasses
import logging
import random
import threading
import time
from typing import Any, Dict, List, Optional, Sequence

from .batch import BatchCoordinator
from .city_codes import CityCodeDeriver
from .codec import IdentifierCodec, IdValidation, OfficeIdentifier
from .collision import CollisionChecker, CollisionInfo, StoreErrorHook
from .config import DEFAULT_MAX_SUGGESTIONS, Settings
from .countries import DEFAULT_REGISTRY, CountryRegistry
from .errors import ErrorKind, InvalidCountryCodeError, RecordStoreError
from .generator import GenerationRequest, GenerationResult, IdentifierGenerator
from .statistics import StatisticsEngine, UsageStatistics
from .store import RecordStore
from .suggestions import SuggestionEngine

logger = logging.getLogger(__name__)


def _copy_stats(stats: UsageStatistics) -> UsageStatistics:
    """Detach the usage dicts so callers cannot alter a cached snapshot."""
    return dataclasses.replace(
        stats,
        usage_by_country=dict(stats.usage_by_country),
        usage_by_city=dict(stats.usage_by_city),
    )


class OfficeIdService:
    """
    Facade over the allocation components for one record store.

    Attributes:
        store: Record store (read-only from this service's point of view)
        settings: Runtime settings (retry budget, concurrency, cache TTL)
        checker: Collision checker shared by generation and suggestions
    """

    def __init__(
        self,
        store: RecordStore,
        settings: Optional[Settings] = None,
        registry: Optional[CountryRegistry] = None,
        rng: Optional[random.Random] = None,
        on_store_error: Optional[StoreErrorHook] = None,
        strict: bool = False,
        clock=time.monotonic,
    ):
        self.store = store
        self.settings = settings or Settings()
        self.registry = registry or DEFAULT_REGISTRY
        self.deriver = CityCodeDeriver()
        self.codec = IdentifierCodec(self.registry)
        self.checker = CollisionChecker(store, on_store_error=on_store_error,
                                        strict=strict, codec=self.codec)
        self.generator = IdentifierGenerator(
            checker=self.checker,
            registry=self.registry,
            deriver=self.deriver,
            codec=self.codec,
            rng=rng,
        )
        self.suggestions = SuggestionEngine(self.checker, self.registry, self.deriver)
        self.stats_engine = StatisticsEngine(self.registry, self.codec)
        self.batch = BatchCoordinator(self.generator)

        self._clock = clock
        self._cache: Dict[str, Any] = {}
        self._cache_lock = threading.Lock()

    # ------------- validation -------------
    def validate(self, office_id: str) -> IdValidation:
        return self.codec.validate(office_id)

    def parse(self, office_id: str) -> OfficeIdentifier:
        return self.codec.parse(office_id)

    # ------------- generation -------------
    def generate(self, request: GenerationRequest) -> GenerationResult:
        return self.generator.generate(request)

    def generate_for(self, country: str, city: str,
                     max_retries: Optional[int] = None,
                     check_collision: bool = True) -> GenerationResult:
        return self.generator.generate(GenerationRequest(
            country=country,
            city=city,
            max_retries_per_candidate=(
                self.settings.max_retries if max_retries is None else max_retries
            ),
            check_collision=check_collision,
        ))

    def generate_for_office(self, record: Dict[str, Any],
                            check_collision: bool = True) -> GenerationResult:
        """
        Allocate an id from an office record's headquarters location.

        Reads record["location"]["headquarters"]["country"|"city"]. The
        country may be an ISO2 code, ISO3 code or a country name.

        Returns:
            GenerationResult; MISSING_LOCATION when country or city is absent
        """
        headquarters = ((record or {}).get("location") or {}).get("headquarters") or {}
        country = headquarters.get("country")
        city = headquarters.get("city")
        if not country or not city:
            return GenerationResult.failure(
                ErrorKind.MISSING_LOCATION, 0,
                "Office location (country and city) is required for ID generation",
            )

        try:
            info = self.registry.resolve(country)
        except InvalidCountryCodeError as e:
            return GenerationResult.failure(ErrorKind.INVALID_COUNTRY_CODE, 0, str(e))

        return self.generate_for(info.code, city, check_collision=check_collision)

    def generate_many(self, requests: Sequence[GenerationRequest],
                      max_concurrent: Optional[int] = None) -> List[GenerationResult]:
        if max_concurrent is None:
            max_concurrent = self.settings.max_concurrent
        return self.batch.generate_many(requests, max_concurrent)

    # ------------- availability -------------
    def check_availability(self, office_id: str) -> bool:
        """
        True if office_id is well formed and not taken.

        Raises:
            InvalidFormatError: If office_id is malformed
        """
        self.codec.parse(office_id)
        return self.checker.is_available(office_id)

    def collision_info(self, office_id: str) -> CollisionInfo:
        return self.checker.collision_info(office_id)

    def similar_ids(self, country: str, city: str) -> List[CollisionInfo]:
        """Existing ids under the primary prefix for this country/city."""
        info = self.registry.lookup(country)
        return self.checker.similar(info.code, self.deriver.derive_city_code(city))

    def possible_ids(self, country: str, city: str) -> List[str]:
        return self.suggestions.possible_ids(country, self.deriver.derive_city_code(city))

    def available_ids(self, country: str, city: str) -> List[str]:
        return self.suggestions.available_ids(country, self.deriver.derive_city_code(city))

    def suggest(self, country: str, city: str,
                max_suggestions: int = DEFAULT_MAX_SUGGESTIONS) -> List[str]:
        return self.suggestions.suggest(country, city, max_suggestions)

    # ------------- statistics -------------
    def statistics(self, use_cache: bool = True) -> UsageStatistics:
        """
        Usage statistics for the whole store, cached for settings.stats_cache_ttl seconds.

        Never raises for store failures: a RecordStoreError is logged and a
        zeroed snapshot (not cached) is returned. Callers get their own copy
        of the usage dicts.
        """
        key = "office-id-stats"
        if use_cache:
            cached = self._get_cached(key)
            if cached is not None:
                return _copy_stats(cached)

        try:
            stats = self.stats_engine.compute_store_stats(self.store)
        except RecordStoreError as e:
            logger.warning(f"Could not read office ids for statistics: {e}")
            return self.stats_engine.compute_stats([])

        self._set_cached(key, stats)
        return _copy_stats(stats)

    def clear_cache(self) -> None:
        with self._cache_lock:
            self._cache.clear()

    def _get_cached(self, key: str):
        with self._cache_lock:
            entry = self._cache.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._clock() - stored_at < self.settings.stats_cache_ttl:
                return value
            del self._cache[key]
            return None

    def _set_cached(self, key: str, value) -> None:
        with self._cache_lock:
            self._cache[key] = (self._clock(), value)
