"""Decimal helpers for ledger amounts.

All amounts are expressed in a single base currency with two decimal places.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Union

from estate_market.modules.common.exceptions import ValidationError

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
# Exclusive bound on the magnitude of any single amount.
MAX_AMOUNT = Decimal("1e12")

AmountLike = Union[Decimal, int, float, str]


def to_amount(value: AmountLike | None) -> Decimal:
    """Coerce ``value`` into a two-decimal ``Decimal`` or raise ``ValidationError``.

    Floats go through ``str`` so that ``0.1`` becomes ``Decimal("0.10")`` rather
    than its binary expansion. More than two decimal places is rejected instead
    of silently rounded.
    """
    if value is None or isinstance(value, bool):
        raise ValidationError("Amount is required")
    try:
        amount = Decimal(str(value)) if isinstance(value, float) else Decimal(value)
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise ValidationError(f"Invalid amount: {value!r}") from exc
    if not amount.is_finite():
        raise ValidationError(f"Invalid amount: {value!r}")
    if abs(amount) >= MAX_AMOUNT:
        raise ValidationError(f"Amounts must be below {MAX_AMOUNT:,.0f}")
    try:
        quantized = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise ValidationError(f"Invalid amount: {value!r}") from exc
    if quantized != amount:
        raise ValidationError("Amounts support at most two decimal places")
    return quantized


def positive_amount(value: AmountLike | None, field: str = "amount") -> Decimal:
    amount = to_amount(value)
    if amount <= 0:
        raise ValidationError(f"{field} must be greater than 0")
    return amount


def coerce_amount(value) -> Decimal:
    """Normalise a value read back from storage (``None`` means zero)."""
    if value is None:
        return ZERO
    if isinstance(value, float):
        value = str(value)
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


def split_commission(sale_price: Decimal, rate: Decimal) -> tuple[Decimal, Decimal]:
    """Return ``(platform_fee, seller_earning)`` for ``sale_price``.

    The fee is rounded half-up to the cent and the earning is the remainder,
    so the two parts always add back up to the sale price exactly.
    """
    platform_fee = (sale_price * rate).quantize(CENT, rounding=ROUND_HALF_UP)
    return platform_fee, sale_price - platform_fee


__all__ = [
    "CENT",
    "MAX_AMOUNT",
    "ZERO",
    "AmountLike",
    "coerce_amount",
    "positive_amount",
    "split_commission",
    "to_amount",
]
