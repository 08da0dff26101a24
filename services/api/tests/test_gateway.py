"""
Tests for the cached spreadsheet gateway.

Run with: pytest tests/test_gateway.py -v
"""
import pytest

from conftest import HEADERS, ROW, FakeBackend
from core.errors import UpstreamUnavailable
from core.gateway import SpreadsheetGateway, rows_to_records


class TestRowsToRecords:
    """Tests for row -> record conversion."""

    def test_records_keyed_by_headers(self):
        result = rows_to_records([HEADERS, ROW])
        assert result.headers == HEADERS
        assert result.records == [dict(zip(HEADERS, ROW))]

    def test_short_rows_are_padded(self):
        result = rows_to_records([["A", "B", "C"], ["1"], []])
        assert result.records == [
            {"A": "1", "B": "", "C": ""},
            {"A": "", "B": "", "C": ""},
        ]

    def test_cells_past_headers_are_dropped(self):
        result = rows_to_records([["A"], ["1", "extra"]])
        assert result.records == [{"A": "1"}]

    def test_empty_sheet(self):
        result = rows_to_records([])
        assert result.headers == []
        assert result.records == []

    def test_header_only(self):
        result = rows_to_records([["A", "B"]])
        assert result.headers == ["A", "B"]
        assert result.records == []


class TestFetchAll:
    """Tests for caching and stale fallback."""

    def test_cold_cache_reads_upstream(self, clock):
        backend = FakeBackend()
        gw = SpreadsheetGateway(backend, max_age=5, clock=clock)

        result = gw.fetch_all()
        assert backend.read_calls == 1
        assert result.cached is False
        assert result.stale is False
        assert result.records[0]["Fase"] == "FINAL"

    def test_second_read_within_window_is_cached(self, clock):
        backend = FakeBackend()
        gw = SpreadsheetGateway(backend, max_age=5, clock=clock)

        first = gw.fetch_all()
        clock.advance(4.9)
        second = gw.fetch_all()

        assert backend.read_calls == 1
        assert second.cached is True
        assert second.records == first.records
        assert second.headers is first.headers

    def test_expired_cache_refetches(self, clock):
        backend = FakeBackend()
        gw = SpreadsheetGateway(backend, max_age=5, clock=clock)

        gw.fetch_all()
        clock.advance(5)
        gw.fetch_all()
        assert backend.read_calls == 2

    def test_invalidate_forces_fresh_read(self, clock):
        backend = FakeBackend()
        gw = SpreadsheetGateway(backend, max_age=5, clock=clock)

        gw.fetch_all()
        gw.invalidate()
        gw.fetch_all()
        assert backend.read_calls == 2

    def test_stale_cache_served_on_upstream_failure(self, clock):
        backend = FakeBackend()
        gw = SpreadsheetGateway(backend, max_age=5, clock=clock)

        gw.fetch_all()
        clock.advance(60)
        backend.fail_reads = True

        result = gw.fetch_all()
        assert result.stale is True
        assert result.records == [dict(zip(HEADERS, ROW))]

    def test_failure_without_cache_raises(self, clock):
        backend = FakeBackend()
        backend.fail_reads = True
        gw = SpreadsheetGateway(backend, max_age=5, clock=clock)

        with pytest.raises(UpstreamUnavailable):
            gw.fetch_all()

    def test_unexpected_backend_error_becomes_unavailable(self, clock):
        class Broken(FakeBackend):
            def read_range(self):
                raise ConnectionError("reset by peer")

        gw = SpreadsheetGateway(Broken(), max_age=5, clock=clock)
        with pytest.raises(UpstreamUnavailable) as exc:
            gw.fetch_all()
        assert "reset by peer" in exc.value.detail


class TestCacheSnapshot:
    """Tests for the /health cache view."""

    def test_empty_cache(self, clock):
        gw = SpreadsheetGateway(FakeBackend(), max_age=5, clock=clock)
        assert gw.cache_snapshot() == {"hasData": False, "ageSeconds": None, "maxAgeSeconds": 5}
        assert gw.is_fresh() is False

    def test_age_reported_in_whole_seconds(self, clock):
        gw = SpreadsheetGateway(FakeBackend(), max_age=5, clock=clock)
        gw.fetch_all()
        clock.advance(3.7)

        snap = gw.cache_snapshot()
        assert snap["hasData"] is True
        assert snap["ageSeconds"] == 3
        assert gw.is_fresh() is True
