# MIT License
# Copyright (c) 2025 Hashborn

from decimal import Decimal, InvalidOperation
from typing import Any

from .config.params import AMOUNT_UNIT, MAX_AMOUNT
from .types.common import InvalidInput


def parse_amount(value: Any, field: str = "amount") -> Decimal:
    """
    Parses a user-supplied amount (str, int, float or Decimal) into a finite Decimal.

    Amounts are limited to MAX_AMOUNT in magnitude and to AMOUNT_UNIT
    (6 decimal places, one USDT micro-unit) in precision.

    Raises:
        InvalidInput: if the value is missing, not numeric, NaN, infinite,
            too large or more precise than AMOUNT_UNIT
    """
    if value is None or isinstance(value, bool) or (isinstance(value, str) and not value.strip()):
        raise InvalidInput(f"Missing required field: {field}")

    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidInput(f"Invalid {field}: {value!r}")

    if not amount.is_finite():
        raise InvalidInput(f"Invalid {field}: {value!r}")

    if abs(amount) > MAX_AMOUNT:
        raise InvalidInput(f"Invalid {field}: exceeds {MAX_AMOUNT}")

    # Magnitude is bounded above, so quantize cannot overflow the context
    if amount.quantize(AMOUNT_UNIT) != amount:
        raise InvalidInput(f"Invalid {field}: at most 6 decimal places")
    return amount


def parse_positive_amount(value: Any, field: str = "amount") -> Decimal:
    amount = parse_amount(value, field)
    if amount <= 0:
        raise InvalidInput(f"Invalid {field}: must be greater than zero")
    return amount
