# app/models.py
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Optional

from pydantic import BaseModel, field_validator

CENTS = Decimal("0.01")


def to_money(value) -> Decimal:
    """Normalise a price to a two-place Decimal without going through float."""
    if isinstance(value, bool):
        raise ValueError("price must be a number")
    if isinstance(value, float):
        value = str(value)
    try:
        money = Decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError):
        raise ValueError(f"invalid price: {value!r}")
    # "-0.00" is still zero
    return money.copy_abs() if money == 0 else money


class _Entity(BaseModel):
    # id is the sole identity key; unsaved entities only equal themselves
    id: Optional[int] = None

    def __eq__(self, other):
        if self is other:
            return True
        if type(self) is not type(other):
            return NotImplemented
        if self.id is None or other.id is None:
            return False
        return self.id == other.id

    def __hash__(self):
        if self.id is None:
            return id(self)
        return hash((type(self).__name__, self.id))


class Category(_Entity):
    name: str


class Product(_Entity):
    name: str
    price: Decimal
    category: Optional[Category] = None

    @field_validator("price", mode="before")
    @classmethod
    def _normalise_price(cls, v):
        return to_money(v)

    @property
    def category_id(self) -> Optional[int]:
        return self.category.id if self.category is not None else None
