"""
pawmart/schemas/principal.py
Roles and the Principal model.
"""
from typing import Any, Dict, Literal, Optional
from pydantic import BaseModel, Field

Role = Literal["user", "admin", "demo"]

class Principal(BaseModel):
    uid: str = Field(..., description="Firebase UID (subject id)")
    email: Optional[str] = Field(None, description="E-mail from the verified token (if any)")
    display_name: Optional[str] = Field(None, description="Display name (if any)")
    claims: Dict[str, Any] = Field(default_factory=dict, description="Verified token claims")
    # Filled in by the authorization layer from users/{uid}; never by token verification.
    is_admin: bool = Field(False, description="Resolved from the users collection")
