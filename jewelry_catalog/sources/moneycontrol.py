"""
Moneycontrol gold and silver rate scrapers

Both strategies read the same two pages; they differ in the heuristics used
to pick figures out of the page text. All results are INR per 10 grams.
"""
import logging
import re
from typing import Optional, Tuple

from .base import RateSource, per_kg_to_per_10g, search_amount

logger = logging.getLogger(__name__)

GOLD_22K_RANGE = (50000, 150000)


def _within(value: Optional[int], bounds: Tuple[int, int]) -> bool:
    low, high = bounds
    return value is not None and low < value < high


class MoneycontrolSource(RateSource):
    """Shared page locations and the 22K table lookup"""

    GOLD_URL = "https://www.moneycontrol.com/news/gold-rates-today/"
    SILVER_URL = "https://www.moneycontrol.com/news/silver-rates-today/"

    def parse_gold_22k(self, page_text: str) -> Optional[int]:
        """Read the 10 gram row of the 22 carat table."""
        # "22 Carat ... 10 Gram ₹ 109,900"; [^\d] keeps us off the 1 gram row
        rate = search_amount(r'22\s+Carat[^\d]*10\s+Gram[^\d]*₹\s*([\d,]+)', page_text)
        if _within(rate, GOLD_22K_RANGE):
            logger.info(f"{self.source_name}: found 22K gold rate from table: {rate} per 10g")
            return rate

        rate = search_amount(
            r'22\s+Carat\s+Gold\s+Rate[\s\S]*?10\s+Gram[^\d]*₹\s*([\d,]+)', page_text
        )
        if _within(rate, GOLD_22K_RANGE):
            logger.info(f"{self.source_name}: found 22K gold rate from section: {rate} per 10g")
            return rate

        logger.info(f"{self.source_name}: 22K gold rate not found")
        return None


class HeadlineSource(MoneycontrolSource):
    """Reads the "GOLD RATE TODAY" / "SILVER RATE TODAY" headline figures"""

    GOLD_24K_RANGE = (10000, 200000)

    def __init__(self, session=None, timeout=None):
        super().__init__(session=session, timeout=timeout)
        self.source_name = "Moneycontrol (headline)"
        self.source_id = "headline"

    def parse_gold(self, page_text: str) -> Tuple[Optional[int], Optional[int]]:
        gold_24k = search_amount(r'GOLD\s+RATE\s+TODAY[^\d]*?₹\s*([\d,]+)', page_text)
        if _within(gold_24k, self.GOLD_24K_RANGE):
            logger.info(f"{self.source_name}: found 24K gold rate: {gold_24k} per 10g")
        else:
            gold_24k = None

        return gold_24k, self.parse_gold_22k(page_text)

    def parse_silver(self, page_text: str) -> Optional[int]:
        per_kg = search_amount(r'SILVER\s+RATE\s+TODAY[^\d]*?₹\s*([\d,]+)', page_text)
        if per_kg and per_kg > 10000:
            per_10g = per_kg_to_per_10g(per_kg)
            logger.info(f"{self.source_name}: found silver rate {per_kg} per kg -> {per_10g} per 10g")
            return per_10g

        per_10g = search_amount(r'10\s+[Gg]rams?[^₹]*₹\s*([\d,]+)', page_text)
        if per_10g:
            logger.info(f"{self.source_name}: found silver rate per 10g from table: {per_10g}")
            return per_10g

        per_gram = search_amount(r'1\s+Gram[^₹]*₹\s*([\d,]+)', page_text)
        if per_gram:
            logger.info(f"{self.source_name}: found silver rate per gram from table: {per_gram}")
            return per_gram * 10

        logger.info(f"{self.source_name}: could not find silver rate")
        return None


class PriceBandSource(MoneycontrolSource):
    """Picks figures by the price band each instrument is expected to sit in"""

    GOLD_24K_BAND = (113000, 130000)
    SILVER_KG_BAND = (100000, 300000)
    SILVER_10G_BAND = (1000, 3000)
    SILVER_GRAM_BAND = (100, 300)

    def __init__(self, session=None, timeout=None):
        super().__init__(session=session, timeout=timeout)
        self.source_name = "Moneycontrol (price band)"
        self.source_id = "price_band"

    def parse_gold(self, page_text: str) -> Tuple[Optional[int], Optional[int]]:
        gold_24k = None
        # 24K sits above the 22K figure on the same page
        for raw in re.findall(r'₹\s*(1[01][0-9],\d{3})', page_text):
            rate = int(raw.replace(',', ''))
            if _within(rate, self.GOLD_24K_BAND):
                gold_24k = rate
                logger.info(f"{self.source_name}: found 24K gold rate: {gold_24k} per 10g")
                break

        return gold_24k, self.parse_gold_22k(page_text)

    def parse_silver(self, page_text: str) -> Optional[int]:
        per_kg = search_amount(r'₹\s*(1[0-9]{2},\d{3})', page_text, flags=0)
        if _within(per_kg, self.SILVER_KG_BAND):
            per_10g = per_kg_to_per_10g(per_kg)
            logger.info(f"{self.source_name}: found silver rate {per_kg} per kg -> {per_10g} per 10g")
            return per_10g

        per_10g = search_amount(r'₹\s*(1,\d{3})\s', page_text, flags=0)
        if _within(per_10g, self.SILVER_10G_BAND):
            logger.info(f"{self.source_name}: found silver rate per 10g: {per_10g}")
            return per_10g

        per_gram = search_amount(r'₹\s*(1[0-9]{2})\s', page_text, flags=0)
        if _within(per_gram, self.SILVER_GRAM_BAND):
            logger.info(f"{self.source_name}: found silver rate per gram: {per_gram}")
            return per_gram * 10

        logger.info(f"{self.source_name}: could not find silver rate")
        return None
