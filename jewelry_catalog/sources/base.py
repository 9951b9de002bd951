"""
Base interface for metal rate sources
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, fields
from typing import Optional, Tuple
import logging
import re

import requests
from bs4 import BeautifulSoup

from jewelry_catalog.config import Config

logger = logging.getLogger(__name__)

INSTRUMENTS = ("gold_24k", "gold_22k", "silver")


class RateSourceError(RuntimeError):
    """Raised when a source could not retrieve any of its pages."""


@dataclass
class RateQuote:
    """Prices in INR per 10 grams; ``None`` when the source had no figure."""

    gold_24k: Optional[int] = None
    gold_22k: Optional[int] = None
    silver: Optional[int] = None

    def missing(self) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(self) if not getattr(self, f.name))

    def is_complete(self) -> bool:
        return not self.missing()

    def merge(self, other: "RateQuote") -> "RateQuote":
        """Return a quote keeping our values and filling gaps from ``other``."""
        merged = RateQuote()
        for name in INSTRUMENTS:
            value = getattr(self, name) or getattr(other, name)
            setattr(merged, name, value or None)
        return merged


def parse_amount(raw: Optional[str]) -> Optional[int]:
    """Turn ``"1,15,400"`` into ``115400``."""
    if not raw:
        return None
    digits = raw.replace(",", "")
    if not digits.isdigit():
        return None
    return int(digits)


def search_amount(pattern: str, text: str, flags: int = re.IGNORECASE) -> Optional[int]:
    match = re.search(pattern, text, flags)
    if not match:
        return None
    return parse_amount(match.group(1))


def per_kg_to_per_10g(rate_per_kg: int) -> int:
    # Half-up rounding of rate_per_kg / 100
    return (rate_per_kg + 50) // 100


class RateSource(ABC):
    """Abstract base class for gold and silver rate scrapers"""

    GOLD_URL = ""
    SILVER_URL = ""

    def __init__(self, session: Optional[requests.Session] = None, timeout: Optional[int] = None):
        self.source_name = "Unknown"
        self.source_id = "unknown"
        self.timeout = timeout or Config.REQUEST_TIMEOUT_SECONDS
        self.session = session or requests.Session()
        self.session.headers.update({'User-Agent': Config.USER_AGENT})

    @abstractmethod
    def parse_gold(self, page_text: str) -> Tuple[Optional[int], Optional[int]]:
        """
        Extract gold prices from the visible text of the gold page

        Returns:
            Tuple[int, int]: (24K per 10g, 22K per 10g), ``None`` for misses
        """
        pass

    @abstractmethod
    def parse_silver(self, page_text: str) -> Optional[int]:
        """
        Extract the silver price from the visible text of the silver page

        Returns:
            int: Silver per 10g, or None
        """
        pass

    def fetch_page_text(self, url: str) -> Optional[str]:
        """
        Download ``url`` and return the text content of its body

        Returns:
            str: Page text, or None if the page could not be fetched
        """
        try:
            logger.info(f"{self.source_name}: fetching {url}")
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning(f"{self.source_name}: could not fetch {url}: {e}")
            return None

        soup = BeautifulSoup(response.content, 'html.parser')
        root = soup.body or soup
        return root.get_text(separator=' ')

    def scrape_rates(self) -> RateQuote:
        """
        Scrape gold and silver pages into a single quote

        Raises:
            RateSourceError: If neither page could be fetched
        """
        gold_text = self.fetch_page_text(self.GOLD_URL)
        silver_text = self.fetch_page_text(self.SILVER_URL)

        if gold_text is None and silver_text is None:
            raise RateSourceError(f"{self.source_name}: no rate pages could be fetched")

        quote = RateQuote()
        if gold_text is not None:
            quote.gold_24k, quote.gold_22k = self.parse_gold(gold_text)
        if silver_text is not None:
            quote.silver = self.parse_silver(silver_text)

        logger.info(
            f"{self.source_name}: scraped values gold_24k={quote.gold_24k} "
            f"gold_22k={quote.gold_22k} silver={quote.silver}"
        )
        return quote
