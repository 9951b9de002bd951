"""
Gold and silver rate sources
"""
from .base import RateQuote, RateSource, RateSourceError
from .moneycontrol import HeadlineSource, PriceBandSource

__all__ = [
    'RateQuote',
    'RateSource',
    'RateSourceError',
    'HeadlineSource',
    'PriceBandSource',
    'AVAILABLE_SOURCES',
    'get_rate_source',
]

# Registry of all available sources, in default fallback order
AVAILABLE_SOURCES = {
    'headline': HeadlineSource,
    'price_band': PriceBandSource,
}


def get_rate_source(source_id: str, **kwargs) -> RateSource:
    """
    Get a rate source instance by ID

    Args:
        source_id: Source identifier (headline, price_band)

    Returns:
        RateSource: Instance of the matching source

    Raises:
        ValueError: If source_id is not recognized
    """
    source_class = AVAILABLE_SOURCES.get(source_id)
    if source_class is None:
        raise ValueError(f"Unknown rate source: {source_id}. Available sources: {list(AVAILABLE_SOURCES.keys())}")

    return source_class(**kwargs)
