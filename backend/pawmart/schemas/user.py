"""
# `pawmart/schemas/user.py` — User record schemas

| Model            | Used by |
|------------------|---------|
| `UserSync`       | `POST /users` (profile upsert, own record only) |
| `UserProfile`    | `GET /user-profile`, admin user endpoints |
| `AdminUserUpdate`| `PUT /admin/users/{uid}` |
| `RoleUpdate`     | `PUT /admin/users/{uid}/role` |

`role` is never writable from `UserSync`; only the admin role endpoint sets it.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from pawmart.schemas.principal import Role


class UserSync(BaseModel):
    model_config = ConfigDict(extra="ignore")

    displayName: Optional[str] = Field(None, max_length=120, description="Defaults to the token's name")


class UserProfile(BaseModel):
    uid: str
    email: str = ""
    displayName: str = ""
    role: Role = "user"
    createdAt: Optional[str] = None


class AdminUserUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    displayName: Optional[str] = Field(None, max_length=120)
    email: Optional[EmailStr] = None


class RoleUpdate(BaseModel):
    role: Role
