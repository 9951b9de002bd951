"""Jewelry catalog API: MongoDB-backed catalog plus live gold and silver rates."""

__version__ = "1.0.0"
