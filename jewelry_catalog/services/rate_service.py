"""Application service responsible for live metal rate retrieval and caching."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, Iterable, List, Optional, Sequence
import logging
import threading

from jewelry_catalog.config import Config
from jewelry_catalog.sources import AVAILABLE_SOURCES, RateQuote, RateSource, RateSourceError, get_rate_source

logger = logging.getLogger(__name__)

NOT_AVAILABLE = "N/A"
ERROR_VALUE = "Error"


class UnknownSourceError(ValueError):
    """Raised when the configuration references an unsupported rate source."""


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def group_indian(number: int) -> str:
    """Group digits the Indian way: ``115400`` becomes ``1,15,400``."""

    digits = str(number)
    if len(digits) <= 3:
        return digits

    head, tail = digits[:-3], digits[-3:]
    groups: List[str] = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups + [tail])


def format_rate(value: Optional[int]) -> str:
    if not value or value <= 0:
        return NOT_AVAILABLE
    return f"₹ {group_indian(value)}"


@dataclass
class RatesSnapshot:
    """Formatted rates and the time they were fetched."""

    gold_24k: str
    gold_22k: str
    silver: str
    fetched_at: datetime

    @classmethod
    def from_quote(cls, quote: RateQuote, fetched_at: datetime) -> "RatesSnapshot":
        return cls(
            gold_24k=format_rate(quote.gold_24k),
            gold_22k=format_rate(quote.gold_22k),
            silver=format_rate(quote.silver),
            fetched_at=fetched_at,
        )

    def age(self, now: datetime) -> timedelta:
        return now - self.fetched_at

    def to_payload(self, is_cached: bool, cache_age: int) -> Dict:
        return {
            "gold_24k": self.gold_24k,
            "gold_22k": self.gold_22k,
            "silver": self.silver,
            "lastUpdated": format_timestamp(self.fetched_at),
            "isCached": is_cached,
            "cacheAge": cache_age,
        }


class RateService:
    """Facade that orchestrates rate sources and the single-snapshot cache."""

    def __init__(
        self,
        sources: Optional[Sequence[RateSource]] = None,
        source_ids: Optional[Iterable[str]] = None,
        cache_minutes: Optional[int] = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        if sources is None:
            sources = [self._build_source(source_id) for source_id in (source_ids or Config.RATES_SOURCES)]
        self._sources: List[RateSource] = list(sources)
        self._cache_duration = timedelta(
            minutes=Config.RATES_CACHE_MINUTES if cache_minutes is None else cache_minutes
        )
        self._clock = clock
        self._snapshot: Optional[RatesSnapshot] = None
        self._fetch_lock = threading.Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def list_sources(self) -> List[str]:
        """Return the identifiers of the sources consulted, in order."""

        return [source.source_id for source in self._sources]

    def get_rates(self, force_refresh: bool = False) -> Dict:
        """Return the latest rates, preferring a fresh cached snapshot."""

        if not force_refresh:
            cached = self._fresh_payload(self._clock())
            if cached is not None:
                return cached

        with self._fetch_lock:
            now = self._clock()

            # Another request may have refreshed the snapshot while this one waited.
            if not force_refresh:
                cached = self._fresh_payload(now)
                if cached is not None:
                    return cached

            logger.info("Fetching fresh rates from %s", ", ".join(self.list_sources()) or "no sources")
            quote = self._fetch_quote()

            if quote is not None:
                self._snapshot = RatesSnapshot.from_quote(quote, fetched_at=now)
                logger.info("Rates fetched successfully: %s", self._snapshot)
                return self._snapshot.to_payload(is_cached=False, cache_age=0)

            snapshot = self._snapshot
            if snapshot is not None:
                cache_age = self._cache_age_minutes(snapshot, now)
                logger.warning(
                    "Returning expired cached rates due to fetch failure, cache age: %d minutes",
                    cache_age,
                )
                return snapshot.to_payload(is_cached=True, cache_age=cache_age)

            logger.error("Rate fetch failed and no cached rates are available")
            return self.error_payload(now)

    def refresh_rates(self) -> Dict:
        """Bypass the fresh cache; a stale snapshot is still served on failure."""

        return self.get_rates(force_refresh=True)

    def cache_status(self) -> Dict:
        now = self._clock()
        snapshot = self._snapshot
        if snapshot is None:
            return {"cached": False, "fresh": False, "cacheAge": None, "sources": self.list_sources()}
        return {
            "cached": True,
            "fresh": self._is_fresh(snapshot, now),
            "cacheAge": self._cache_age_minutes(snapshot, now),
            "lastUpdated": format_timestamp(snapshot.fetched_at),
            "sources": self.list_sources(),
        }

    @staticmethod
    def error_payload(now: Optional[datetime] = None) -> Dict:
        return {
            "gold_24k": ERROR_VALUE,
            "gold_22k": ERROR_VALUE,
            "silver": ERROR_VALUE,
            "lastUpdated": format_timestamp(now or utc_now()),
            "isCached": False,
            "cacheAge": 0,
        }

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _build_source(source_id: str) -> RateSource:
        try:
            return get_rate_source(source_id)
        except ValueError as exc:
            raise UnknownSourceError(
                f"Unknown rate source '{source_id}'. Supported sources: {list(AVAILABLE_SOURCES.keys())}"
            ) from exc

    def _is_fresh(self, snapshot: RatesSnapshot, now: datetime) -> bool:
        return snapshot.age(now) < self._cache_duration

    @staticmethod
    def _cache_age_minutes(snapshot: RatesSnapshot, now: datetime) -> int:
        return int(snapshot.age(now).total_seconds() // 60)

    def _fresh_payload(self, now: datetime) -> Optional[Dict]:
        snapshot = self._snapshot
        if snapshot is None or not self._is_fresh(snapshot, now):
            return None
        cache_age = self._cache_age_minutes(snapshot, now)
        logger.info("Returning cached rates, cache age: %d minutes", cache_age)
        return snapshot.to_payload(is_cached=True, cache_age=cache_age)

    def _fetch_quote(self) -> Optional[RateQuote]:
        """Merge sources in order; ``None`` when no source answered at all."""

        quote: Optional[RateQuote] = None
        for source in self._sources:
            try:
                result = source.scrape_rates()
            except RateSourceError as exc:
                logger.warning("Rate source '%s' failed: %s", source.source_id, exc)
                continue
            except Exception:
                logger.error("Unexpected error from rate source '%s'", source.source_id, exc_info=True)
                continue

            quote = result if quote is None else quote.merge(result)
            if quote.is_complete():
                break
            logger.info(
                "Rates still missing after '%s': %s", source.source_id, ", ".join(quote.missing())
            )

        return quote

