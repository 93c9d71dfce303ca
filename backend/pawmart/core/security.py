"""
# `pawmart/core/security.py` — Authorization Policy

## Overview
Decides whether a verified `Principal` may act on a resource. Token
verification happens first in `pawmart.core.auth`; this module only answers
"allowed or not" and raises `Forbidden` (403) otherwise.

---

## Rules

### Rule A — self access
Allowed when `principal.uid == owner_id`, otherwise when
`principal.email == owner_email`. Both anchors are checked, in that order,
because older records were keyed by e-mail and newer ones by uid. Empty
values never match.

### Rule B — admin override
When Rule A fails, `users/{uid}` is read and `role == "admin"` allows.
A missing record means a regular user, not an error. The read happens on
every decision: there is no role cache, so a role change applies to the
very next request.

### Rule C — listing category
Non-admins may only create (or move a listing into) the open category
(`settings.open_listing_category`, default `Pets`).

---

## Dependencies
- `get_current_user` → verified `Principal`
- `get_current_admin` → verified `Principal` with `is_admin=True`, else 403
"""
import logging
from typing import Literal, Optional

from fastapi import Depends

from pawmart.config import Settings, get_db
from pawmart.core.auth import get_principal
from pawmart.core.errors import Forbidden
from pawmart.repositories import users as users_repo
from pawmart.schemas.principal import Principal, Role

logger = logging.getLogger("pawmart.security")

Access = Literal["owner", "admin"]


def lookup_role(db, uid: str) -> Optional[str]:
    return users_repo.get_role(db, uid)


def is_admin(db, uid: str) -> bool:
    return lookup_role(db, uid) == "admin"


def _same(a: Optional[str], b: Optional[str]) -> bool:
    return bool(a) and bool(b) and a == b


def authorize(
    db,
    principal: Principal,
    owner_id: Optional[str],
    owner_email: Optional[str],
    required_role: Optional[Role] = None,
) -> Access:
    """
    Returns how access was granted ("owner" or "admin"); raises Forbidden otherwise.
    With required_role="admin" the ownership rule is skipped.
    """
    if required_role != "admin":
        if _same(principal.uid, owner_id) or _same(principal.email, owner_email):
            return "owner"

    if is_admin(db, principal.uid):
        return "admin"

    logger.info("forbidden uid=%s required_role=%s", principal.uid, required_role or "owner")
    raise Forbidden()


def authorize_listing_category(db, principal: Principal, category: str, settings: Settings) -> None:
    """Rule C: only the open category is allowed without the admin role."""
    if category == settings.open_listing_category:
        return
    if is_admin(db, principal.uid):
        return
    logger.info("category denied uid=%s category=%s", principal.uid, category)
    raise Forbidden(f"Only admins can list outside the '{settings.open_listing_category}' category.")


# --------- FastAPI Dependencies --------- #

def get_current_user(principal: Principal = Depends(get_principal)) -> Principal:
    return principal


def get_current_admin(
    principal: Principal = Depends(get_principal),
    db=Depends(get_db),
) -> Principal:
    """
    Dependency to allow access only to admin users.
    Authenticates first, then checks the stored role.
    """
    authorize(db, principal, None, None, required_role="admin")
    return principal.model_copy(update={"is_admin": True})
