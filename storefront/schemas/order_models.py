"""Order related pydantic models.

- ``OrderStatus`` enumerates the seven workflow values; records keep ``status``
  as a plain string so an unexpected stored value still loads.
- ``AIConcept`` is validated here, at the boundary where the model's free-form
  JSON enters the system.
"""
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class OrderStatus(str, Enum):
    pending = "pending"
    confirmed = "confirmed"
    baking = "baking"
    ready = "ready"
    out_for_delivery = "out_for_delivery"
    delivered = "delivered"
    cancelled = "cancelled"


class AIConcept(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    description: str
    suggested_flavors: List[str] = Field(default_factory=list, alias="suggestedFlavors")
    visual_prompt: str = Field("", alias="visualPrompt")

    @field_validator("suggested_flavors", mode="before")
    @classmethod
    def coerce_flavors(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [part.strip() for part in v.split(",") if part.strip()]
        return [str(item) for item in v]


class OrderCreate(BaseModel):
    """Fields supplied by the custom-order form or the AI chef flow."""
    model_config = ConfigDict(populate_by_name=True)

    customer_name: str = Field(..., min_length=1)
    customer_phone: str = Field(..., min_length=1)
    event_date: str = Field(..., min_length=1)
    cake_flavor: str = ""
    cake_weight: str = "1 kg"
    occasion: str = ""
    details: str = ""
    reference_image_url: Optional[str] = None
    ai_concept: Optional[AIConcept] = None
    ai_image_url: Optional[str] = None


class Order(OrderCreate):
    id: str
    status: str = OrderStatus.pending.value
    owner_notes: Optional[str] = None
    created_at: str
    updated_at: str

    @field_validator("status", mode="before")
    @classmethod
    def plain_status(cls, v):
        if isinstance(v, OrderStatus):
            return v.value
        return v

    def to_record(self) -> dict:
        """JSON-ready dict in the stored (camelCase concept) shape."""
        return self.model_dump(mode="json", by_alias=True)


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
    owner_notes: Optional[str] = None


class OrderNote(BaseModel):
    owner_notes: Optional[str] = None
