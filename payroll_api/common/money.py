# payroll_api/common/money.py
from __future__ import annotations

import calendar
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Optional

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
CURRENCY_PREFIX = "Rs."


def to_decimal(x: Any) -> Optional[Decimal]:
    """
    Parse a raw amount into a 2dp Decimal.
    None, "", NaN and unparsable values come back as None.
    """
    if x is None or x == "" or isinstance(x, bool):
        return None
    try:
        d = x if isinstance(x, Decimal) else Decimal(str(x).strip())
    except (InvalidOperation, ValueError):
        return None
    if not d.is_finite():
        return None
    return d.quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class Amount:
    """A salary component that is either present (with a value) or absent."""
    value: Optional[Decimal] = None

    @classmethod
    def of(cls, raw: Any) -> "Amount":
        return cls(to_decimal(raw))

    @classmethod
    def absent(cls) -> "Amount":
        return cls(None)

    @property
    def present(self) -> bool:
        return self.value is not None

    def or_zero(self) -> Decimal:
        return self.value if self.value is not None else ZERO

    def __str__(self) -> str:
        return format_currency(self.value)


def _group_indian(digits: str) -> str:
    # 12345678 -> 1,23,45,678
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    parts = []
    while len(head) > 2:
        parts.insert(0, head[-2:])
        head = head[:-2]
    if head:
        parts.insert(0, head)
    return ",".join(parts) + "," + tail


def format_amount(value: Any) -> str:
    """en-IN grouping; no decimals unless the value has paise, then two."""
    d = value.value if isinstance(value, Amount) else to_decimal(value)
    if d is None:
        return "-"
    sign = "-" if d < 0 else ""
    d = abs(d)
    whole = int(d)
    frac = d - whole
    out = _group_indian(str(whole))
    if frac:
        out += "." + f"{frac:.2f}"[2:]
    return sign + out


def format_currency(value: Any, prefix: Optional[str] = None) -> str:
    text = format_amount(value)
    if text == "-":
        return text
    return f"{prefix or CURRENCY_PREFIX} {text}"


def period_label(month: int, year: int) -> str:
    return f"{calendar.month_name[int(month)]} {int(year)}"
