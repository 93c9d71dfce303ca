"""
# `pawmart/routers/admin.py` — Admin panel

Mounted under `/admin`; every route depends on `get_current_admin`, which
re-reads the caller's role from `users/{uid}` on each request.

- `GET /admin/listings?status=` — all listings, optionally filtered by status.
- `PUT /admin/listings/{listing_id}` — approval (`pending → approved`), the only
  way a listing's status changes. Approving an approved listing is a no-op.
- `GET /admin/users` — all user records.
- `PUT /admin/users/{uid}` — edit display name / e-mail.
- `PUT /admin/users/{uid}/role` — role assignment (`user | admin | demo`).
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from pawmart.config import get_db
from pawmart.core.errors import InvalidInput, NotFound
from pawmart.core.security import get_current_admin
from pawmart.repositories import listings as listings_repo
from pawmart.repositories import users as users_repo
from pawmart.repositories.documents import validate_document_id
from pawmart.schemas.listing import ListingApproval, ListingOut, ListingStatus
from pawmart.schemas.principal import Principal
from pawmart.schemas.user import AdminUserUpdate, RoleUpdate, UserProfile
from pawmart.services.normalize import normalize_listing, normalize_user

logger = logging.getLogger("pawmart.admin")

admin_router = APIRouter(tags=["Admin"], dependencies=[Depends(get_current_admin)])


@admin_router.get("/listings", response_model=List[ListingOut])
def admin_list_listings(
    status: Optional[ListingStatus] = Query(None),
    db=Depends(get_db),
):
    if status:
        docs = listings_repo.list_by_status(db, status)
    else:
        docs = listings_repo.list_all(db)
    return [normalize_listing(d) for d in docs]


@admin_router.put("/listings/{listing_id}", response_model=ListingOut)
def admin_approve_listing(
    listing_id: str,
    payload: ListingApproval,
    admin: Principal = Depends(get_current_admin),
    db=Depends(get_db),
):
    validate_document_id(listing_id, "listing id")
    doc = listings_repo.get(db, listing_id)
    if doc is None:
        raise NotFound("Listing not found.")
    if doc.get("status") == payload.status:
        return normalize_listing(doc)

    updated = listings_repo.update(db, listing_id, {"status": payload.status})
    logger.info("listing approved id=%s by=%s", listing_id, admin.uid)
    return normalize_listing(updated)


@admin_router.get("/users", response_model=List[UserProfile])
def admin_list_users(db=Depends(get_db)):
    return [normalize_user(d) for d in users_repo.list_all(db)]


@admin_router.put("/users/{uid}", response_model=UserProfile)
def admin_update_user(
    uid: str,
    payload: AdminUserUpdate,
    admin: Principal = Depends(get_current_admin),
    db=Depends(get_db),
):
    validate_document_id(uid, "uid")
    patch = payload.model_dump(exclude_none=True)
    if not patch:
        raise InvalidInput("Nothing to update.")
    record = users_repo.update(db, uid, patch)
    if record is None:
        raise NotFound("User not found.")
    logger.info("user updated uid=%s by=%s", uid, admin.uid)
    return normalize_user(record)


@admin_router.put("/users/{uid}/role", response_model=UserProfile)
def admin_set_role(
    uid: str,
    payload: RoleUpdate,
    admin: Principal = Depends(get_current_admin),
    db=Depends(get_db),
):
    validate_document_id(uid, "uid")
    record = users_repo.set_role(db, uid, payload.role)
    if record is None:
        raise NotFound("User not found.")
    logger.info("role changed uid=%s role=%s by=%s", uid, payload.role, admin.uid)
    return normalize_user(record)
