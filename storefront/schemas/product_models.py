"""Catalog (menu) pydantic models."""
from typing import Optional

from pydantic import BaseModel


class ProductInput(BaseModel):
    name: str
    category: str = "Custom"
    price_range: str = ""
    description: str = ""
    image_url: str = ""
    is_active: bool = True
    sort_order: int = 0


class ProductUpdate(BaseModel):
    """Partial update; only fields the caller actually sent are applied."""
    name: Optional[str] = None
    category: Optional[str] = None
    price_range: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    is_active: Optional[bool] = None
    sort_order: Optional[int] = None


class Product(ProductInput):
    id: str
    created_at: str = ""
    updated_at: str = ""

    def to_record(self) -> dict:
        return self.model_dump(mode="json")
