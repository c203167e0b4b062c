"""Pydantic models for API I/O and the external collaborators' contracts."""
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Literal, Optional

from .order_models import Order


class ConceptRequest(BaseModel):
    prompt: str = Field(..., min_length=1)

class ImageRequest(BaseModel):
    prompt: str = Field(..., min_length=1)

class ImageResponse(BaseModel):
    image: str

class ChatMessage(BaseModel):
    sender: Literal["user", "bot"]
    text: str

class ChatRequest(BaseModel):
    message: str = Field(..., min_length=1)
    history: List[ChatMessage] = Field(default_factory=list)

class ChatResponse(BaseModel):
    text: str

class UploadResponse(BaseModel):
    url: str

class AuthUser(BaseModel):
    """The slice of the auth provider's user object the storefront reads."""
    id: str
    email: Optional[str] = None
    phone: Optional[str] = None
    user_metadata: Dict[str, Any] = Field(default_factory=dict)

    @property
    def display_name(self) -> str:
        return self.user_metadata.get("full_name") or self.email or self.phone or "User"

class PhoneLinkRequest(BaseModel):
    phone: str = Field(..., min_length=1)

class AdminLoginRequest(BaseModel):
    password: str

class TrackedOrder(BaseModel):
    order: Order
    label: str
    progress_index: int
    progress_fraction: Optional[float] = None
    cancelled: bool = False

class TrackResponse(BaseModel):
    query: str
    orders: List[TrackedOrder] = Field(default_factory=list)

class AdminOrdersResponse(BaseModel):
    orders: List[Order]
    counts: Dict[str, int]

class CustomerOrdersResponse(BaseModel):
    display_name: str
    linked_phone: Optional[str] = None
    orders: List[Order] = Field(default_factory=list)
