"""
Database Schemas

MongoDB collection schemas as Pydantic models. Collection names:
- Product -> "product" collection
- Order -> "order" collection
- ContactMessage -> "contact" collection
- NewsItem -> "news" collection
"""

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator


def _text(value: Any) -> Any:
    # Display prices arrive as "₹150" or as a bare number
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


# Collection: product
class ProductIn(BaseModel):
    title: str = Field(..., min_length=1, description="Product title")
    description: Optional[str] = Field(None, description="Product description")
    price: str = Field(..., description="Display price, e.g. ₹150")
    price_value: Optional[float] = Field(None, ge=0, description="Authoritative numeric price")
    image: Optional[str] = Field(None, description="Image path or URL")

    coerce_price = field_validator("price", mode="before")(_text)


class ProductUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1)
    description: Optional[str] = None
    price: Optional[str] = None
    price_value: Optional[float] = Field(None, ge=0)
    image: Optional[str] = None

    coerce_price = field_validator("price", mode="before")(_text)

    @field_validator("title", "price")
    @classmethod
    def not_null(cls, value: Optional[str]) -> str:
        # Omitted fields are left unchanged; an explicit null is rejected
        if value is None:
            raise ValueError("may not be null")
        return value


class ProductOut(BaseModel):
    id: int
    title: str = ""
    description: Optional[str] = None
    price: Optional[str] = None
    price_value: Optional[float] = None
    image: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


# Collection: order
class CartItem(BaseModel):
    """One requested cart line. Any price or title the client sends is ignored."""

    model_config = ConfigDict(extra="ignore")

    id: Any = None
    qty: Any = None
    title: Optional[str] = None


class CheckoutRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    customer_name: Optional[str] = Field(None, alias="customerName")
    customer_address: Optional[str] = Field(None, alias="customerAddress")
    customer_phone: Optional[str] = Field(None, alias="customerPhone")
    items: Optional[List[CartItem]] = None


class OrderLine(BaseModel):
    id: int
    title: str
    qty: int = Field(..., ge=1)
    unit_price: float = Field(..., ge=0)


class OrderOut(BaseModel):
    id: int
    customer_name: str
    customer_address: str
    customer_phone: str
    items: List[OrderLine]
    total: str
    total_value: float
    order_date: Optional[str] = None
    status: str


class StatusUpdate(BaseModel):
    status: Optional[str] = None


# Collection: contact
class ContactIn(BaseModel):
    name: str = Field(..., min_length=1)
    email: EmailStr
    message: str = Field(..., min_length=1)


class ContactOut(BaseModel):
    id: int
    name: str
    email: str
    message: str
    received_at: Optional[str] = None


# Collection: news
class NewsIn(BaseModel):
    title: str = Field(..., min_length=1)
    excerpt: Optional[str] = None
    link: Optional[str] = None
    date: Optional[str] = Field(None, description="Display date, e.g. 04 Oct 2025")


class NewsOut(NewsIn):
    id: int
    created_at: Optional[str] = None


class LoginRequest(BaseModel):
    password: Optional[str] = None
