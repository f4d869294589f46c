"""Amount parsing and formatting.

Balances are stored as integers in minor units; the console speaks in
decimal major units (``"12.50"``). ``Decimal`` is used for the conversion
so no binary floating point ever touches a balance.
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation, localcontext

from .errors import InvalidInputError


# Largest value a SQLite INTEGER column holds.
MAX_MINOR_UNITS = 2**63 - 1

_MAX_DIGITS = 40


def parse_amount(text: str, places: int = 2) -> int:
    """Convert user input such as ``"12.5"`` into minor units (``1250``).

    Raises ``InvalidInputError`` for anything that is not a finite, positive
    number with at most ``places`` fractional digits and no larger than
    ``MAX_MINOR_UNITS`` once scaled.
    """
    raw = (text or "").strip()
    try:
        value = Decimal(raw)
    except InvalidOperation as exc:
        raise InvalidInputError(f"Invalid amount: {raw!r}") from exc

    if not value.is_finite():
        raise InvalidInputError(f"Invalid amount: {raw!r}")
    if value <= 0:
        raise InvalidInputError("Amount must be greater than zero")

    # bound the exponent before scaling so huge or tiny inputs stay cheap
    if value.adjusted() + places >= len(str(MAX_MINOR_UNITS)):
        raise InvalidInputError("Amount is too large")
    if value.adjusted() < -places:
        raise InvalidInputError(f"Amount cannot have more than {places} decimal places")
    if len(value.as_tuple().digits) > _MAX_DIGITS:
        raise InvalidInputError(f"Invalid amount: {raw!r}")

    with localcontext() as ctx:
        ctx.prec = _MAX_DIGITS + len(str(MAX_MINOR_UNITS))
        scaled = value.scaleb(places)
    if scaled != scaled.to_integral_value():
        raise InvalidInputError(f"Amount cannot have more than {places} decimal places")

    minor_units = int(scaled)
    if minor_units > MAX_MINOR_UNITS:
        raise InvalidInputError("Amount is too large")
    return minor_units


def format_amount(minor_units: int, places: int = 2) -> str:
    value = Decimal(minor_units).scaleb(-places)
    return f"{value:.{places}f}"
