"""Validation of method-specific payout details."""

from __future__ import annotations

import re
from typing import Any, Mapping

from estate_market.modules.common.exceptions import ValidationError

from .models import PAYMENT_METHODS

REQUIRED_FIELDS = {
    "bank": ("accountName", "accountNumber", "bankName"),
    "paypal": ("email",),
    "crypto": ("walletAddress", "currency"),
}
OPTIONAL_FIELDS = {
    "bank": ("swiftCode",),
    "paypal": (),
    "crypto": (),
}
_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.title() for part in rest)


def validate_payment_details(details: Mapping[str, Any] | None) -> dict[str, Any]:
    """Return a normalised copy of ``details`` or raise ``ValidationError``.

    Keys may be given in camelCase (``accountNumber``) or snake_case
    (``account_number``); the result always uses camelCase and keeps only the
    fields known for the chosen method.
    """
    if not details:
        raise ValidationError("Payment details are required")
    normalised = {_camel(str(key)): value for key, value in details.items()}
    method = normalised.get("method")
    if method not in PAYMENT_METHODS:
        raise ValidationError(f"Unsupported payment method: {method!r}")

    cleaned: dict[str, Any] = {"method": method}
    missing = []
    for name in REQUIRED_FIELDS[method]:
        value = normalised.get(name)
        if not isinstance(value, str) or not value.strip():
            missing.append(name)
            continue
        cleaned[name] = value.strip()
    if missing:
        raise ValidationError(f"Missing {method} payment details: {', '.join(missing)}")

    for name in OPTIONAL_FIELDS[method]:
        value = normalised.get(name)
        if isinstance(value, str) and value.strip():
            cleaned[name] = value.strip()

    if method == "paypal" and not _EMAIL_RE.match(cleaned["email"]):
        raise ValidationError("Please enter a valid PayPal email address")
    if method == "crypto":
        cleaned["currency"] = cleaned["currency"].upper()
    return cleaned
