from __future__ import annotations

from enum import Enum


OZ_PER_LB = 16
GRAM_PER_KG = 1000
# Definitional: 1 lb == 0.45359237 kg exactly.
KG_PER_LB = 0.45359237


class System(Enum):
    IMPERIAL = "imperial"
    METRIC = "metric"


class Unit(Enum):
    """Weight-bearing units of measurement."""

    OUNCE = "oz"
    POUND = "lb"
    KILOGRAM = "kg"
    GRAM = "g"

    @property
    def label(self) -> str:
        return self.value

    @property
    def system(self) -> System:
        return get_unit_system(self)

    @property
    def count_type(self) -> "CountType":
        return _UNIT_TO_COUNT_TYPE[self]


class CountType(Enum):
    """What an item's count is measured in: a weight unit, or a plain quantity."""

    OUNCE = "oz"
    POUND = "lb"
    KILOGRAM = "kg"
    GRAM = "g"
    QUANTITY = "ea"

    @property
    def label(self) -> str:
        return self.value

    @property
    def unit(self) -> Unit | None:
        # None only for QUANTITY.
        return _COUNT_TYPE_TO_UNIT[self]


_UNIT_SYSTEM: dict[Unit, System] = {
    Unit.OUNCE: System.IMPERIAL,
    Unit.POUND: System.IMPERIAL,
    Unit.KILOGRAM: System.METRIC,
    Unit.GRAM: System.METRIC,
}

_UNIT_TO_COUNT_TYPE: dict[Unit, CountType] = {
    Unit.OUNCE: CountType.OUNCE,
    Unit.POUND: CountType.POUND,
    Unit.KILOGRAM: CountType.KILOGRAM,
    Unit.GRAM: CountType.GRAM,
}

_COUNT_TYPE_TO_UNIT: dict[CountType, Unit | None] = {
    **{ct: u for u, ct in _UNIT_TO_COUNT_TYPE.items()},
    CountType.QUANTITY: None,
}

# Each system converts through one base unit; these are units per base unit.
_SYSTEM_BASE: dict[System, Unit] = {
    System.IMPERIAL: Unit.POUND,
    System.METRIC: Unit.KILOGRAM,
}

_PER_BASE: dict[Unit, int] = {
    Unit.OUNCE: OZ_PER_LB,
    Unit.POUND: 1,
    Unit.KILOGRAM: 1,
    Unit.GRAM: GRAM_PER_KG,
}


def get_unit_system(unit: Unit) -> System:
    return _UNIT_SYSTEM[unit]


def unit_from_string(text: str) -> Unit | None:
    """Map 'oz', 'lb', 'kg' or 'g' to a Unit; anything else gives None."""
    try:
        return Unit(text)
    except ValueError:
        return None


def convert_weight(value: float, from_unit: Unit, to_unit: Unit) -> float:
    """Convert a weight between any two units.

    Ounces and grams are first brought to their system's base unit (pound or
    kilogram), crossed over between systems if needed, then scaled down to the
    target unit.
    """
    if from_unit is to_unit:
        return value

    base_value = value / _PER_BASE[from_unit]

    from_system = get_unit_system(from_unit)
    to_system = get_unit_system(to_unit)
    if from_system is not to_system:
        if _SYSTEM_BASE[from_system] is Unit.POUND:
            base_value = base_value * KG_PER_LB
        else:
            base_value = base_value / KG_PER_LB

    return base_value * _PER_BASE[to_unit]
