from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Iterable

from .models import ShoppingListItem
from .units import CountType, System, Unit, convert_weight, get_unit_system

# Where a per-unit price lands when it has to cross into the other system.
_CROSS_SYSTEM_UNIT: dict[System, Unit] = {
    System.IMPERIAL: Unit.KILOGRAM,
    System.METRIC: Unit.POUND,
}

# Decimal places kept when showing a fractional weight.
_DISPLAY_PLACES: dict[Unit, int] = {
    Unit.OUNCE: 1,
    Unit.POUND: 2,
    Unit.KILOGRAM: 2,
    Unit.GRAM: 0,
}


@dataclass(frozen=True)
class ConvertedPerUnit:
    per_unit_count: float
    unit: Unit
    price_cents_per_unit: int


def total_price_cents(item: ShoppingListItem) -> int:
    """Total price of an item in cents, truncated toward zero."""
    price = item.price_cents_per_unit

    if item.is_quantity_priced:
        if item.per_unit_count_type is CountType.QUANTITY and item.per_unit_count != 1:
            # "10 Sweet Corn, 5/$2.00" is two lots of $2.00.
            return int(price * (item.count / item.per_unit_count))
        return int(price * item.count)

    unit = item.count_type.unit
    per_unit_unit = item.per_unit_count_type.unit
    if unit is None or per_unit_unit is None:
        raise RuntimeError(
            f"weight-priced item has no unit: {item.count_type} / {item.per_unit_count_type}"
        )

    weight = convert_weight(item.count, unit, per_unit_unit)
    return int(price * (weight / item.per_unit_count))


def grand_total_cents(items: Iterable[ShoppingListItem]) -> int:
    return sum(total_price_cents(i) for i in items)


def converted_per_unit(
    per_unit_count: int,
    unit: Unit,
    price_cents_per_unit: int,
    preferred: Unit,
) -> ConvertedPerUnit:
    """Restate a per-unit price in the preferred unit's system.

    Only the system of ``preferred`` matters: an Imperial price shown to a
    Metric reader becomes a per-kilogram price and vice versa. A single-unit
    price is rescaled ("$4.99/lb" -> "$11.00/kg"); a multi-unit price keeps
    its amount and converts the unit count instead ("$5.00/2 lb" ->
    "$5.00/0.91 kg").
    """
    system = get_unit_system(unit)
    if system is get_unit_system(preferred):
        return ConvertedPerUnit(
            per_unit_count=float(per_unit_count),
            unit=unit,
            price_cents_per_unit=price_cents_per_unit,
        )

    target = _CROSS_SYSTEM_UNIT[system]
    converted_count = convert_weight(float(per_unit_count), unit, target)

    if per_unit_count > 1:
        return ConvertedPerUnit(
            per_unit_count=converted_count,
            unit=target,
            price_cents_per_unit=price_cents_per_unit,
        )

    ratio = per_unit_count / converted_count
    return ConvertedPerUnit(
        per_unit_count=float(per_unit_count),
        unit=target,
        price_cents_per_unit=int(price_cents_per_unit * ratio),
    )


def display_weight(weight: float, unit: Unit) -> float:
    """Round a fractional weight for display; halves round up."""
    if float(weight).is_integer():
        return weight
    scale = 10 ** _DISPLAY_PLACES[unit]
    return math.floor(weight * scale + 0.5) / scale
