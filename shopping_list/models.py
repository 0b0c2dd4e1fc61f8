from __future__ import annotations

from pydantic import BaseModel, field_validator

from .units import CountType


class ShoppingListItem(BaseModel):
    """One parsed shopping list line.

    ``price_cents_per_unit`` is the price as written on the line, for
    ``per_unit_count`` units of ``per_unit_count_type``; it is not the
    item's total.
    """

    name: str

    price_cents_per_unit: int

    # Quantity or weight as written, e.g. 2 for "2 lb." or 10 for "10 Sweet Corn".
    count: float
    count_type: CountType

    # Denominator of the price, e.g. 5 in "5/$2.00"; 1 for "$4.99/lb.".
    per_unit_count: int = 1
    per_unit_count_type: CountType

    model_config = {"extra": "forbid", "frozen": True}

    @field_validator("name")
    @classmethod
    def name_not_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("name must not be empty")
        return v

    @field_validator("count")
    @classmethod
    def count_non_negative(cls, v: float) -> float:
        if v < 0:
            raise ValueError("count must be non-negative")
        return v

    @field_validator("per_unit_count")
    @classmethod
    def per_unit_count_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("per_unit_count must be at least 1")
        return v

    @property
    def is_quantity_priced(self) -> bool:
        return CountType.QUANTITY in (self.count_type, self.per_unit_count_type)
