"""
Order ID generation and normalization.

Order IDs look like ``ORD-482913``: a fixed prefix and a numeric suffix.
Customers type them back when tracking an order, so lookups go through
``normalize_order_id`` first.
"""

import secrets

from src.config import settings

SUFFIX_DIGITS = 6


def generate_order_id(prefix: str | None = None) -> str:
    """Generate a new human-presentable order ID."""
    prefix = (prefix or settings.order_id_prefix).upper()
    low = 10 ** (SUFFIX_DIGITS - 1)
    suffix = low + secrets.randbelow(9 * low)
    return f"{prefix}-{suffix}"


def normalize_order_id(raw: str) -> str:
    """Normalize user input for lookup: trim whitespace, upper-case."""
    return raw.strip().upper()
