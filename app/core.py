from datetime import datetime
from decimal import Decimal
from typing import Dict, Any

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from .models import Category, Product, to_money


def _non_blank(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("name must not be blank")
    return v


class CategoryIn(BaseModel):
    name: str = Field(..., max_length=255, examples=["Books"])

    check_name = field_validator("name")(_non_blank)


class ProductIn(BaseModel):
    # the owning category comes from the path or query, never from the body
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., max_length=255, examples=["Clean Code"])
    price: Decimal = Field(..., ge=0, max_digits=20, decimal_places=2, allow_inf_nan=False, examples=["89.90"])

    check_name = field_validator("name")(_non_blank)


class CategoryOut(BaseModel):
    id: int
    name: str


class ProductOut(BaseModel):
    id: int
    name: str
    price: Decimal
    category: CategoryOut

    @field_serializer("price")
    def _price_as_text(self, price: Decimal) -> str:
        return str(to_money(price))


class ErrorOut(BaseModel):
    timestamp: str
    status: int
    error: str
    message: str


def _make_category_dict(category: Category) -> Dict[str, Any]:
    return {"id": category.id, "name": category.name}


def _make_product_dict(product: Product) -> Dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "price": product.price,
        "category": _make_category_dict(product.category),
    }


def _make_error_dict(status: int, error: str, message: str) -> Dict[str, Any]:
    return {
        "timestamp": datetime.now().isoformat(timespec="seconds"),
        "status": status,
        "error": error,
        "message": message,
    }
