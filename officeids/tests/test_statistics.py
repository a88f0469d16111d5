"""Tests for usage statistics."""

import pytest

from officeids.countries import DEFAULT_REGISTRY
from officeids.statistics import StatisticsEngine, compute_stats
from officeids.store import InMemoryRecordStore


class TestComputeStats:

    def test_synthetic_ids(self):
        stats = compute_stats(["GBLO100", "GBLO101", "USNE200"])
        total_possible = len(DEFAULT_REGISTRY) * 900

        assert stats.total_used == 3
        assert stats.total_possible == total_possible
        assert stats.total_available == total_possible - 3
        assert stats.usage_by_country == {"GB": 2, "US": 1}
        assert stats.usage_by_city == {"GB-LO": 2, "US-NE": 1}
        assert stats.collision_rate == pytest.approx(3 / total_possible)
        assert stats.skipped == 0

    def test_malformed_ids_skipped(self):
        stats = compute_stats(["GBLO100", "legacy-office", "XXLO100", "GBLO050", ""])
        assert stats.total_used == 1
        assert stats.skipped == 4
        assert stats.usage_by_country == {"GB": 1}

    def test_empty(self):
        stats = compute_stats([])
        assert stats.total_used == 0
        assert stats.usage_by_country == {}
        assert stats.usage_by_city == {}
        assert stats.collision_rate == 0.0

    def test_accepts_iterator(self):
        stats = compute_stats(iter(["FRPA100", "FRPA200"]))
        assert stats.usage_by_city == {"FR-PA": 2}

    def test_counts_are_plain_ints(self):
        stats = compute_stats(["GBLO100"])
        assert type(stats.usage_by_country["GB"]) is int


class TestStatisticsEngine:

    def test_usage_frame(self):
        frame = StatisticsEngine().usage_frame(["GBLO100", "bad", "USNY999"])
        assert list(frame.columns) == ["office_id", "country", "city", "number", "prefix"]
        assert frame["office_id"].tolist() == ["GBLO100", "USNY999"]
        assert frame["prefix"].tolist() == ["GBLO", "USNY"]

    def test_compute_store_stats(self):
        store = InMemoryRecordStore.from_ids(["JPTO100", "JPTO101", "JPOS100"])
        stats = StatisticsEngine().compute_store_stats(store)
        assert stats.usage_by_country == {"JP": 3}
        assert stats.usage_by_city == {"JP-TO": 2, "JP-OS": 1}
