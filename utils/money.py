"""
Money helpers.

All engine amounts are Decimal. Add-on lines and money totals are rounded
half-up to config.PRICE_DECIMAL_PLACES. Unit prices may carry fractions of a
cent and are only rounded as part of a total.
"""

from decimal import Decimal, ROUND_HALF_UP

import config

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")


def to_decimal(value) -> Decimal:
    """
    Convert an int, str or Decimal to Decimal.

    Floats go through str() so 1.3 becomes Decimal("1.3") and not its binary expansion.
    """
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def round_money(amount: Decimal, places: int | None = None) -> Decimal:
    """
    Round a money amount half-up.

    Examples:
        >>> round_money(Decimal("1.005"))
        Decimal('1.01')
        >>> round_money(Decimal("29.99"))
        Decimal('29.99')
    """
    if places is None:
        places = config.PRICE_DECIMAL_PLACES
    exponent = Decimal(1).scaleb(-places)
    return to_decimal(amount).quantize(exponent, rounding=ROUND_HALF_UP)


def format_money(amount: Decimal) -> str:
    """
    Format an amount with the configured currency symbol.

    Examples:
        >>> format_money(Decimal("1.3"))
        '$1.30'
    """
    rounded = round_money(amount)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{config.CURRENCY.symbol}{abs(rounded):,.{config.PRICE_DECIMAL_PLACES}f}"


def format_unit_price(amount: Decimal) -> str:
    """
    Format a per-unit price, keeping digits beyond PRICE_DECIMAL_PLACES.

    Examples:
        >>> format_unit_price(Decimal("1.30"))
        '$1.30'
        >>> format_unit_price(Decimal("0.0325"))
        '$0.0325'
    """
    amount = to_decimal(amount)
    places = max(config.PRICE_DECIMAL_PLACES, -amount.normalize().as_tuple().exponent)
    sign = "-" if amount < 0 else ""
    return f"{sign}{config.CURRENCY.symbol}{abs(amount):,.{places}f}"
