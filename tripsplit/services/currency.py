"""
Currency conversion between the two tracked currencies.

The exchange rate is always "secondary units per one primary unit"
(e.g. TWD per KRW). Converted values are rounded to whole units with
round-half-up, the same way in both directions.
"""

import logging
import math
from enum import Enum

from tripsplit.core.config import settings

logger = logging.getLogger(__name__)


class Currency(str, Enum):
    KRW = "KRW"
    TWD = "TWD"


PRIMARY = Currency(settings.PRIMARY_CURRENCY)
SECONDARY = Currency(settings.SECONDARY_CURRENCY)


class ConversionError(ValueError):
    """Raised when the exchange rate cannot be used for conversion."""
    pass


def round_half_up(value: float) -> int:
    """Round to the nearest whole unit, halves away from zero."""
    if value < 0:
        return -math.floor(-value + 0.5)
    return math.floor(value + 0.5)


def is_valid_rate(rate) -> bool:
    if isinstance(rate, bool) or not isinstance(rate, (int, float)):
        return False
    return math.isfinite(rate) and rate > 0


def _check_rate(rate) -> float:
    if not is_valid_rate(rate):
        raise ConversionError(f"Exchange rate must be a positive finite number, got {rate!r}")
    return float(rate)


def to_secondary(amount: float, rate: float) -> int:
    """Convert a primary-currency amount into the secondary currency."""
    return round_half_up(amount * _check_rate(rate))


def to_primary(amount: float, rate: float) -> int:
    """Convert a secondary-currency amount into the primary currency."""
    return round_half_up(amount / _check_rate(rate))


def convert(amount: float, from_currency: Currency, to_currency: Currency, rate: float) -> float:
    """
    Convert amount between the tracked currencies.

    Falls back to returning the amount unconverted when the rate is unusable,
    so a broken rate degrades the figures instead of failing the caller.
    """
    from_currency = Currency(from_currency)
    to_currency = Currency(to_currency)
    if from_currency == to_currency:
        return amount

    try:
        if from_currency == PRIMARY:
            return to_secondary(amount, rate)
        return to_primary(amount, rate)
    except ConversionError as exc:
        logger.warning("Skipping %s->%s conversion: %s", from_currency.value, to_currency.value, exc)
        return amount
