"""Booking price quotes.

Pure functions only: safe to call on every change to the guest counts or the
selected package. Garbage guest input degrades to zero, never raises.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

DEPOSIT_RATE = 0.5

# Leading base-10 integer, same reading a number field's raw text gets
_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class AddonSelection:
    meals: bool = False
    transportation: bool = False
    tour_guide: bool = False

    def any(self) -> bool:
        return self.meals or self.transportation or self.tour_guide


@dataclass(frozen=True)
class PriceQuote:
    adults: int
    children: int
    headcount_total: int
    subtotal: int
    deposit_due: float
    is_eligible: bool


def parse_guest_count(value: Any) -> int:
    """Parse a raw guest count into an int >= 0. Unparseable input is 0."""
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        n = value
    elif isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return 0
        n = int(value)
    else:
        m = _INT_PREFIX.match(str(value))
        if not m:
            return 0
        n = int(m.group(1))
    return max(0, n)


def compute_quote(package, adults: Any, children: Any) -> PriceQuote:
    """Quote a booking of `package` for the given guest counts.

    Only adults are charged. The deposit is DEPOSIT_RATE of the subtotal and is
    not rounded. `package` needs `price_per_person` and `min_headcount`.
    """
    a = parse_guest_count(adults)
    c = parse_guest_count(children)
    price = int(package.price_per_person or 0)
    subtotal = a * price
    return PriceQuote(
        adults=a,
        children=c,
        headcount_total=a + c,
        subtotal=subtotal,
        deposit_due=subtotal * DEPOSIT_RATE,
        is_eligible=a >= int(package.min_headcount),
    )


_SINGLE_ADDON_MESSAGES = {
    "meals": "A meal surcharge will be added to your final bill. Our team will contact you to coordinate dietary preferences.",
    "transportation": "Transportation fees will be added to your final bill. Our team will contact you to arrange pickup and drop-off.",
    "tour_guide": "A tour guide fee will be added to your final bill. Our team will be in touch to coordinate arrangements.",
}

_ADDON_LABELS = {"meals": "meals", "transportation": "transportation", "tour_guide": "a tour guide"}


def addon_message(addons: AddonSelection) -> str:
    """Advisory text for selected add-ons. Surcharges are settled out of band."""
    selected = [name for name in ("meals", "transportation", "tour_guide") if getattr(addons, name)]
    if not selected:
        return ""
    if len(selected) == 1:
        return _SINGLE_ADDON_MESSAGES[selected[0]]
    labels = [_ADDON_LABELS[name] for name in selected]
    if len(labels) == 2:
        joined = " and ".join(labels)
    else:
        joined = ", ".join(labels[:-1]) + ", and " + labels[-1]
    return f"Surcharges for {joined} will be added to your final bill. Our team will be in touch to coordinate all arrangements."
