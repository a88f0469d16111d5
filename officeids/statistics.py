"""
Usage statistics for allocated office identifiers.

Statistics are recomputed on demand from the ids currently in the record
store. Malformed ids (legacy records, typos) are skipped and counted in
``skipped``; they never make the computation fail.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

import pandas as pd

from .codec import IdentifierCodec
from .config import NUMBERS_PER_PREFIX
from .countries import DEFAULT_REGISTRY, CountryRegistry
from .errors import InvalidFormatError
from .store import RecordStore

logger = logging.getLogger(__name__)

FRAME_COLUMNS = ["office_id", "country", "city", "number", "prefix"]


@dataclass(frozen=True)
class UsageStatistics:
    total_possible: int
    total_used: int
    total_available: int
    usage_by_country: Dict[str, int] = field(default_factory=dict)
    usage_by_city: Dict[str, int] = field(default_factory=dict)
    collision_rate: float = 0.0
    skipped: int = 0


class StatisticsEngine:
    def __init__(self, registry: Optional[CountryRegistry] = None,
                 codec: Optional[IdentifierCodec] = None):
        self.registry = registry or DEFAULT_REGISTRY
        self.codec = codec or IdentifierCodec(self.registry)

    def usage_frame(self, all_ids: Iterable[str]) -> pd.DataFrame:
        """One row per well-formed id; malformed ids are dropped."""
        frame, _ = self._parse_ids(all_ids)
        return frame

    def compute_stats(self, all_ids: Iterable[str]) -> UsageStatistics:
        """
        Aggregate usage counts from a list of ids.

        total_possible is 900 numbers per registered country and
        collision_rate is total_used / total_possible.

        Args:
            all_ids: Every id in the record store

        Returns:
            UsageStatistics
        """
        frame, skipped = self._parse_ids(all_ids)

        total_possible = len(self.registry) * NUMBERS_PER_PREFIX
        total_used = len(frame)

        by_country = frame["country"].value_counts()
        by_city = (frame["country"] + "-" + frame["city"]).value_counts()

        return UsageStatistics(
            total_possible=total_possible,
            total_used=total_used,
            total_available=total_possible - total_used,
            usage_by_country={str(k): int(v) for k, v in by_country.items()},
            usage_by_city={str(k): int(v) for k, v in by_city.items()},
            collision_rate=(total_used / total_possible) if total_possible else 0.0,
            skipped=skipped,
        )

    def compute_store_stats(self, store: RecordStore) -> UsageStatistics:
        return self.compute_stats(store.list_all())

    def _parse_ids(self, all_ids: Iterable[str]):
        rows = []
        skipped = 0
        for office_id in all_ids:
            try:
                parsed = self.codec.parse(office_id)
            except InvalidFormatError:
                skipped += 1
                logger.debug(f"Skipping malformed id {office_id!r}")
                continue
            rows.append({
                "office_id": parsed.raw,
                "country": parsed.country,
                "city": parsed.city,
                "number": parsed.number,
                "prefix": parsed.prefix,
            })

        if skipped:
            logger.warning(f"Skipped {skipped} malformed id(s) while computing statistics")
        return pd.DataFrame(rows, columns=FRAME_COLUMNS), skipped


def compute_stats(all_ids: Iterable[str]) -> UsageStatistics:
    """Compute statistics against the default registry."""
    return StatisticsEngine().compute_stats(all_ids)
