# pawmart/schemas/order.py
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class OrderCreate(BaseModel):
    """Order placed by the authenticated buyer; email/userId come from the token."""
    model_config = ConfigDict(extra="ignore")

    listingId: str = Field(..., min_length=1)
    buyerName: str = Field("", description="Buyer name")
    listingName: Optional[str] = Field(None, description="Defaults to the listing's name")
    quantity: int = Field(1, gt=0)
    price: Optional[float] = Field(None, ge=0, description="Defaults to the listing's price")
    address: str = ""
    pickupDate: str = ""
    phone: str = ""
    notes: str = ""


class OrderStatusUpdate(BaseModel):
    # Serbest metin; sunucu tarafında durum makinesi yok.
    status: str = Field(..., min_length=1, max_length=64)


class OrderOut(BaseModel):
    id: str
    buyerName: str
    email: str
    userId: Optional[str] = None
    listingId: str
    listingName: str
    quantity: int
    price: float
    address: str
    pickupDate: str
    phone: str
    notes: str
    status: str
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None
