"""
Office identifier generation.

Allocates CCccNNN identifiers by walking the ranked city code candidates
and drawing random numbers in [100, 999] for each, until the collision
checker reports one as free or the retry budget runs out.

The attempt ceiling is len(candidates) * max_retries_per_candidate. Draws
are independent, so a number may be drawn (and checked) twice in one call.

Usage:
    from officeids.generator import GenerationRequest, IdentifierGenerator

    generator = IdentifierGenerator(checker=CollisionChecker(store))
    result = generator.generate(GenerationRequest(country="GB", city="London"))
    if result.success:
        print(result.office_id)
"""

import logging
import random
import threading
from dataclasses import dataclass
from typing import Optional

from .city_codes import CityCodeDeriver
from .codec import IdentifierCodec, OfficeIdentifier
from .collision import CollisionChecker
from .config import DEFAULT_MAX_RETRIES, NUMBER_MAX, NUMBER_MIN
from .countries import DEFAULT_REGISTRY, CountryRegistry
from .errors import CollisionCheckFailedError, ErrorKind, OfficeIdError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationRequest:
    country: str
    city: str
    max_retries_per_candidate: int = DEFAULT_MAX_RETRIES
    check_collision: bool = True

    def __post_init__(self):
        if not isinstance(self.max_retries_per_candidate, int) or self.max_retries_per_candidate < 1:
            raise ValueError(
                f"max_retries_per_candidate must be an integer >= 1, "
                f"got {self.max_retries_per_candidate!r}"
            )


@dataclass(frozen=True)
class GenerationResult:
    success: bool
    identifier: Optional[OfficeIdentifier] = None
    attempts: int = 0
    error: Optional[ErrorKind] = None
    message: Optional[str] = None

    @property
    def office_id(self) -> Optional[str]:
        return self.identifier.raw if self.identifier else None

    @classmethod
    def failure(cls, error: ErrorKind, attempts: int, message: str) -> "GenerationResult":
        return cls(success=False, attempts=attempts, error=error, message=message)


class IdentifierGenerator:
    """
    Stateless allocator; safe to share between threads.

    Args:
        checker: Collision checker; required only for requests with
            check_collision=True
        registry: Country registry (default: built-in table)
        deriver: City code deriver
        codec: Identifier codec used to assemble ids
        rng: Random source; pass random.Random(seed) for deterministic runs
    """

    def __init__(
        self,
        checker: Optional[CollisionChecker] = None,
        registry: Optional[CountryRegistry] = None,
        deriver: Optional[CityCodeDeriver] = None,
        codec: Optional[IdentifierCodec] = None,
        rng: Optional[random.Random] = None,
    ):
        self.checker = checker
        self.registry = registry or DEFAULT_REGISTRY
        self.deriver = deriver or CityCodeDeriver()
        self.codec = codec or IdentifierCodec(self.registry)
        self.rng = rng or random.Random()
        self._rng_lock = threading.Lock()

    def _draw_number(self) -> int:
        with self._rng_lock:
            return self.rng.randint(NUMBER_MIN, NUMBER_MAX)

    def generate(self, request: GenerationRequest) -> GenerationResult:
        """
        Allocate an identifier for request.country / request.city.

        Never raises for domain errors; check result.success and result.error.

        Args:
            request: Generation request

        Returns:
            GenerationResult with the identifier on success, or the error kind
            and the number of attempts consumed
        """
        country_info = self.registry.get(request.country)
        if country_info is None:
            return GenerationResult.failure(
                ErrorKind.INVALID_COUNTRY_CODE, 0,
                f"Invalid country code: {request.country}. "
                f"Must be a supported ISO 3166-1 alpha-2 code.",
            )

        country = country_info.code
        try:
            candidates = self.deriver.candidates_for(request.city, country)
        except OfficeIdError as e:
            return GenerationResult.failure(ErrorKind.INVALID_CITY_NAME, 0, str(e))

        if request.check_collision and self.checker is None:
            raise ValueError("check_collision=True requires a CollisionChecker")

        attempts = 0
        for candidate in candidates:
            city_code = candidate.code
            for _ in range(request.max_retries_per_candidate):
                number = self._draw_number()
                raw = self.codec.format(country, city_code, number)
                attempts += 1

                if not request.check_collision:
                    return self._success(raw, country, city_code, number, attempts)

                try:
                    taken = self.checker.exists(raw)
                except CollisionCheckFailedError as e:
                    return GenerationResult.failure(
                        ErrorKind.COLLISION_CHECK_FAILED, attempts, str(e)
                    )

                if not taken:
                    return self._success(raw, country, city_code, number, attempts)
                logger.debug(f"{raw} taken (attempt {attempts})")

        logger.warning(
            f"Exhausted {attempts} attempts for {country}/{request.city} "
            f"(candidates: {', '.join(c.code for c in candidates)})"
        )
        return GenerationResult.failure(
            ErrorKind.GENERATION_EXHAUSTED, attempts,
            f"Failed to generate unique office ID after {attempts} attempts. "
            f"Try increasing max_retries_per_candidate or using a different city name.",
        )

    def generate_for(self, country: str, city: str, **options) -> GenerationResult:
        """Shorthand for generate(GenerationRequest(country, city, **options))."""
        return self.generate(GenerationRequest(country=country, city=city, **options))

    def _success(self, raw: str, country: str, city_code: str, number: int,
                 attempts: int) -> GenerationResult:
        identifier = OfficeIdentifier(raw=raw, country=country, city=city_code,
                                      number=f"{number:03d}")
        logger.info(f"Allocated {raw} after {attempts} attempt(s)")
        return GenerationResult(success=True, identifier=identifier, attempts=attempts)
