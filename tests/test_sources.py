import pytest
import requests

from jewelry_catalog.sources import (
    HeadlineSource,
    PriceBandSource,
    RateQuote,
    RateSourceError,
    get_rate_source,
)
from jewelry_catalog.sources.base import parse_amount, per_kg_to_per_10g

GOLD_URL = "https://www.moneycontrol.com/news/gold-rates-today/"
SILVER_URL = "https://www.moneycontrol.com/news/silver-rates-today/"

HEADLINE_GOLD_PAGE = """
<html><head><meta charset="utf-8"><title>Gold rate today</title></head>
<body>
  <h2>GOLD RATE TODAY</h2>
  <div class="price">₹ 115,400</div>
  <h3>22 Carat Gold Rate Today</h3>
  <table>
    <tr><th>Gram</th><th>Today</th></tr>
    <tr><td>1 Gram</td><td>₹ 10,990</td></tr>
    <tr><td>10 Gram</td><td>₹ 109,900</td></tr>
  </table>
</body></html>
"""

HEADLINE_SILVER_PAGE = """
<html><head><meta charset="utf-8"></head><body>
  <h2>SILVER RATE TODAY</h2>
  <div class="price">₹ 165,049</div>
  <span>per kg</span>
</body></html>
"""

BAND_GOLD_PAGE = """
<html><head><meta charset="utf-8"></head><body>
  <p>22K: ₹ 109,900</p>
  <p>24K: ₹ 115,400</p>
  <table>
    <tr><td>22 Carat</td><td>10 Gram</td><td>₹ 109,900</td></tr>
  </table>
</body></html>
"""

BAND_SILVER_PAGE = """
<html><head><meta charset="utf-8"></head><body><p>Silver price: ₹ 165,000 per kg</p></body></html>
"""


class FakeResponse:
    def __init__(self, text, status_code=200):
        self.content = text.encode("utf-8")
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")


class FakeSession:
    def __init__(self, pages):
        self.pages = pages
        self.headers = {}
        self.requested = []

    def get(self, url, timeout=None):
        self.requested.append((url, timeout))
        page = self.pages.get(url)
        if page is None:
            raise requests.ConnectionError(f"could not reach {url}")
        if isinstance(page, str):
            return FakeResponse(page)
        return page


def make_source(source_class, gold=None, silver=None):
    session = FakeSession({GOLD_URL: gold, SILVER_URL: silver})
    return source_class(session=session, timeout=5), session


def test_headline_source_reads_all_instruments():
    source, session = make_source(HeadlineSource, HEADLINE_GOLD_PAGE, HEADLINE_SILVER_PAGE)

    quote = source.scrape_rates()

    assert quote == RateQuote(gold_24k=115400, gold_22k=109900, silver=1650)
    assert session.requested == [(GOLD_URL, 5), (SILVER_URL, 5)]
    assert "User-Agent" in session.headers


def test_headline_silver_falls_back_to_ten_gram_row():
    source, _ = make_source(HeadlineSource)
    page_text = "Silver price table 1 Gram ₹ 165 10 Grams ₹ 1,650 1 Kg ₹ 1,65,000"

    assert source.parse_silver(page_text) == 1650


def test_headline_silver_falls_back_to_gram_row():
    source, _ = make_source(HeadlineSource)

    assert source.parse_silver("Silver 1 Gram ₹ 166 today") == 1660


def test_headline_rejects_out_of_range_gold():
    source, _ = make_source(HeadlineSource)

    gold_24k, gold_22k = source.parse_gold("GOLD RATE TODAY ₹ 5,000 22 Carat 10 Gram ₹ 9,000")

    assert gold_24k is None
    assert gold_22k is None


def test_price_band_source_reads_all_instruments():
    source, _ = make_source(PriceBandSource, BAND_GOLD_PAGE, BAND_SILVER_PAGE)

    quote = source.scrape_rates()

    assert quote == RateQuote(gold_24k=115400, gold_22k=109900, silver=1650)


@pytest.mark.parametrize(
    "page_text, expected",
    [
        ("Silver ₹ 1,650 per 10 grams", 1650),
        ("Silver ₹ 165 per gram", 1650),
        ("Silver ₹ 95 per gram", None),
    ],
)
def test_price_band_silver_fallbacks(page_text, expected):
    source, _ = make_source(PriceBandSource)

    assert source.parse_silver(page_text) == expected


def utf8_response(url, html):
    response = requests.Response()
    response.status_code = 200
    response.url = url
    response._content = html.encode("utf-8")
    response.headers["Content-Type"] = "text/html"
    response.encoding = requests.utils.get_encoding_from_headers(response.headers)
    return response


def test_page_charset_wins_over_header_default():
    gold = utf8_response(GOLD_URL, HEADLINE_GOLD_PAGE)
    silver = utf8_response(SILVER_URL, HEADLINE_SILVER_PAGE)
    source, _ = make_source(HeadlineSource, gold, silver)

    assert gold.encoding == "ISO-8859-1"
    assert source.scrape_rates() == RateQuote(gold_24k=115400, gold_22k=109900, silver=1650)


def test_unreachable_gold_page_leaves_gold_missing():
    source, _ = make_source(
        HeadlineSource, FakeResponse("Service Unavailable", status_code=503), HEADLINE_SILVER_PAGE
    )

    quote = source.scrape_rates()

    assert quote.gold_24k is None
    assert quote.gold_22k is None
    assert quote.silver == 1650
    assert quote.missing() == ("gold_24k", "gold_22k")


def test_both_pages_unreachable_raises():
    source, _ = make_source(HeadlineSource)

    with pytest.raises(RateSourceError):
        source.scrape_rates()


def test_page_without_figures_yields_empty_quote():
    source, _ = make_source(HeadlineSource, "<html><body>Maintenance</body></html>", "<html><body></body></html>")

    assert source.scrape_rates() == RateQuote()


def test_quote_merge_prefers_existing_values():
    merged = RateQuote(gold_24k=115400).merge(RateQuote(gold_24k=1, gold_22k=109900))

    assert merged == RateQuote(gold_24k=115400, gold_22k=109900, silver=None)
    assert not merged.is_complete()


def test_get_rate_source_unknown_id():
    with pytest.raises(ValueError):
        get_rate_source("goodreturns")


def test_get_rate_source_builds_registered_class():
    assert isinstance(get_rate_source("price_band", session=FakeSession({})), PriceBandSource)


def test_amount_helpers():
    assert parse_amount("1,15,400") == 115400
    assert parse_amount(",") is None
    assert parse_amount(None) is None
    assert per_kg_to_per_10g(165049) == 1650
    assert per_kg_to_per_10g(165050) == 1651
