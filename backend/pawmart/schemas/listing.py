"""
# `pawmart/schemas/listing.py` — Listing schemas

## Input
### `ListingCreate`
| Field       | Type    | Required | Notes |
|-------------|---------|----------|-------|
| name        | `str`   | ✔        | |
| category    | `str`   | ✔        | non-admins: open category only |
| price       | `float` | ✖        | ≥ 0, default 0 |
| location    | `str`   | ✖        | |
| description | `str`   | ✖        | |
| imageUrl    | `str`   | ✖        | |
| pickupDate  | `str`   | ✖        | date-like string |
| userName    | `str`   | ✖        | defaults to the token's display name |
| status      | `str`   | ✖        | accepted but always overwritten with `pending` |

### `ListingUpdate`
Every field optional. `status` and `userId` are accepted so they can be
detected and dropped; they never reach the store through this path.

### `ListingApproval`
Admin approval body: `{"status": "approved"}`.

## Output
### `ListingOut`
Canonical listing (see `services.normalize.normalize_listing`).
"""
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

ListingStatus = Literal["pending", "approved"]

# Fields the generic update path must never write.
PROTECTED_UPDATE_FIELDS = ("status", "userId")


class ListingCreate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., min_length=1, description="Listing name")
    category: str = Field(..., min_length=1, description="Category")
    price: float = Field(0, ge=0, description="Price")
    location: str = Field("", description="Pickup location")
    description: str = Field("", description="Description")
    imageUrl: str = Field("", description="Image URL")
    pickupDate: str = Field("", description="Pickup date")
    userName: Optional[str] = Field(None, description="Seller display name")
    status: Optional[str] = Field(None, description="Ignored; new listings are always pending")


class ListingUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = Field(None, min_length=1)
    price: Optional[float] = Field(None, ge=0)
    location: Optional[str] = None
    description: Optional[str] = None
    imageUrl: Optional[str] = None
    pickupDate: Optional[str] = None
    userName: Optional[str] = None
    email: Optional[str] = None  # admin only
    status: Optional[str] = None
    userId: Optional[str] = None


class ListingApproval(BaseModel):
    status: Literal["approved"]


class ListingOut(BaseModel):
    id: str
    name: str
    category: str
    price: float
    location: str
    description: str
    imageUrl: str
    email: str
    pickupDate: str
    userId: Optional[str] = None
    userName: Optional[str] = None
    status: ListingStatus
    createdAt: Optional[str] = None
    updatedAt: Optional[str] = None
