"""Helpers for converting monetary amounts between dollars and cents."""

from __future__ import annotations

from decimal import ROUND_HALF_EVEN, Decimal

# Largest value an SQLite INTEGER column can hold.
MAX_AMOUNT_CENTS = 2**63 - 1

_CENTS_PER_UNIT = Decimal(100)
_WHOLE = Decimal(1)


def to_minor_units(amount: Decimal) -> int:
    """Return ``amount`` expressed in cents.

    Fractions of a cent are rounded half-to-even, so ``Decimal("10.005")``
    becomes ``1000`` and ``Decimal("10.015")`` becomes ``1002``.  Raises
    :class:`decimal.Overflow` or :class:`decimal.InvalidOperation` when the
    value is too large to convert.
    """

    return int((amount * _CENTS_PER_UNIT).quantize(_WHOLE, rounding=ROUND_HALF_EVEN))


def from_minor_units(cents: int) -> Decimal:
    """Return a dollar amount for ``cents`` suitable for prefilling forms."""

    return (Decimal(cents) / _CENTS_PER_UNIT).quantize(Decimal("0.01"))
