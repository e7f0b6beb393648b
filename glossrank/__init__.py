"""glossrank - dictionary definition ranking for analyzed Japanese text."""

__version__ = "0.1.0"
