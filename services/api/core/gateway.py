# services/api/core/gateway.py
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from adapters.base import SpreadsheetBackend
from core.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)

Record = Dict[str, str]


@dataclass
class FetchResult:
    headers: List[str] = field(default_factory=list)
    records: List[Record] = field(default_factory=list)
    # Served from a cache entry still within max-age
    cached: bool = False
    # Served from an expired entry because the upstream read failed
    stale: bool = False


@dataclass
class _CacheEntry:
    headers: List[str]
    records: List[Record]
    fetched_at: float


def rows_to_records(rows: List[List[Any]]) -> FetchResult:
    """
    First row -> headers, every other row -> {header: cell}.
    Short rows are padded with "", cells past the last header are dropped.
    """
    if not rows:
        return FetchResult()

    headers = ["" if h is None else str(h) for h in rows[0]]
    records: List[Record] = []
    for r in rows[1:]:
        records.append(
            {headers[i]: ("" if i >= len(r) or r[i] is None else str(r[i])) for i in range(len(headers))}
        )
    return FetchResult(headers=headers, records=records)


class SpreadsheetGateway:
    """
    Cached read access to the spreadsheet.

    - One cache entry for the whole range, valid for `max_age` seconds
    - Expired entry is kept as a fallback if the next upstream read fails
    - invalidate() drops it entirely (after writes, or on request)
    """

    def __init__(
        self,
        backend: SpreadsheetBackend,
        max_age: float = 5.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.backend = backend
        self.max_age = max_age
        self._clock = clock
        self._entry: Optional[_CacheEntry] = None

    # ========== Cache helpers ==========

    def _age(self) -> Optional[float]:
        if self._entry is None:
            return None
        return self._clock() - self._entry.fetched_at

    def is_fresh(self) -> bool:
        age = self._age()
        return age is not None and age < self.max_age

    def invalidate(self) -> None:
        self._entry = None

    def cache_snapshot(self) -> Dict[str, Any]:
        """Cache state for /health."""
        age = self._age()
        return {
            "hasData": self._entry is not None,
            "ageSeconds": int(age) if age is not None else None,
            "maxAgeSeconds": self.max_age,
        }

    # ========== Reads ==========

    def fetch_all(self) -> FetchResult:
        entry = self._entry
        if entry is not None and self.is_fresh():
            logger.debug("Serving spreadsheet data from memory cache")
            return FetchResult(entry.headers, entry.records, cached=True)

        try:
            logger.info("Fetching fresh data from spreadsheet")
            rows = self.backend.read_range()
        except Exception as e:
            if entry is not None:
                logger.warning(f"Upstream read failed, serving previous cache: {e}")
                return FetchResult(entry.headers, entry.records, stale=True)
            if isinstance(e, UpstreamUnavailable):
                raise
            raise UpstreamUnavailable(detail=str(e)) from e

        result = rows_to_records(rows)
        self._entry = _CacheEntry(result.headers, result.records, self._clock())
        return result
