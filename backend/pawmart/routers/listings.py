"""
# `pawmart/routers/listings.py` — Listings

## Public
- `GET /listings` — approved listings only (optional `category` filter), newest first.
- `GET /latest-listings` — the newest approved listings (`settings.latest_listings_limit`).
- `GET /search?search=` — case-insensitive name search over approved listings.
- `GET /listing/{listing_id}` — single listing; `404` if absent. A pending listing
  is only returned to its owner or an admin (bearer token optional here).

## Authenticated
- `POST /listings` — creates a listing. `status` is always `pending`; `userId`/`email`
  come from the token. Non-admins may only use the open category.
- `PUT /listings/{listing_id}` — owner or admin. `status` and `userId` are dropped
  from the body; `email` is dropped unless the caller is an admin.
- `DELETE /listings/{listing_id}` — owner or admin.
- `GET /user-listings?userId=` — every listing of a user (any status), self or admin.

Read → check → write sequences are not transactional; two concurrent
authorized updates race and the last write wins.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from pawmart.config import Settings, get_db, get_settings
from pawmart.core.auth import get_optional_principal
from pawmart.core.errors import Forbidden, InvalidInput, NotFound
from pawmart.core.security import authorize, authorize_listing_category, get_current_user, is_admin
from pawmart.repositories import listings as listings_repo
from pawmart.repositories import users as users_repo
from pawmart.repositories.documents import validate_document_id
from pawmart.schemas.listing import PROTECTED_UPDATE_FIELDS, ListingCreate, ListingOut, ListingUpdate
from pawmart.schemas.principal import Principal
from pawmart.services.normalize import normalize_listing

logger = logging.getLogger("pawmart.listings")

router = APIRouter(tags=["Listings"])


def _owner_email(doc: dict) -> Optional[str]:
    return doc.get("email") or doc.get("created_by")


def _load(db, listing_id: str) -> dict:
    validate_document_id(listing_id, "listing id")
    doc = listings_repo.get(db, listing_id)
    if doc is None:
        raise NotFound("Listing not found.")
    return doc


@router.get("/listings", response_model=List[ListingOut], summary="List approved listings")
def list_listings(
    category: Optional[str] = Query(None, description="Category filter (optional)"),
    db=Depends(get_db),
):
    docs = listings_repo.list_by_status(db, listings_repo.APPROVED, category=category)
    return [normalize_listing(d) for d in docs]


@router.get("/latest-listings", response_model=List[ListingOut], summary="Newest approved listings")
def latest_listings(db=Depends(get_db), settings: Settings = Depends(get_settings)):
    docs = listings_repo.list_by_status(db, listings_repo.APPROVED, limit=settings.latest_listings_limit)
    return [normalize_listing(d) for d in docs]


@router.get("/search", response_model=List[ListingOut], summary="Search approved listings by name")
def search_listings(
    search: str = Query("", description="Text to look for in the listing name"),
    db=Depends(get_db),
):
    # Firestore has no substring/regex query; filter the approved set in Python.
    needle = search.strip().casefold()
    out = []
    for d in listings_repo.list_by_status(db, listings_repo.APPROVED):
        listing = normalize_listing(d)
        if needle in listing["name"].casefold():
            out.append(listing)
    return out


@router.get("/listing/{listing_id}", response_model=ListingOut, summary="Get listing")
def get_listing(
    listing_id: str,
    principal: Optional[Principal] = Depends(get_optional_principal),
    db=Depends(get_db),
):
    listing = normalize_listing(_load(db, listing_id))
    if listing["status"] == listings_repo.APPROVED:
        return listing

    # Pending listings look absent to everyone but the owner and admins.
    if principal is None:
        raise NotFound("Listing not found.")
    try:
        authorize(db, principal, listing["userId"], listing["email"])
    except Forbidden:
        raise NotFound("Listing not found.")
    return listing


@router.post("/listings", response_model=ListingOut, status_code=201, summary="Create listing")
def create_listing(
    payload: ListingCreate,
    principal: Principal = Depends(get_current_user),
    db=Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    authorize_listing_category(db, principal, payload.category, settings)

    data = payload.model_dump(exclude={"status", "userName"})
    data.update(
        userId=principal.uid,
        email=principal.email or "",
        userName=payload.userName or principal.display_name,
        status=listings_repo.PENDING,
    )
    created = listings_repo.create(db, data)
    logger.info("listing created id=%s uid=%s", created["_id"], principal.uid)
    return normalize_listing(created)


@router.put("/listings/{listing_id}", response_model=ListingOut, summary="Update listing")
def update_listing(
    listing_id: str,
    payload: ListingUpdate,
    principal: Principal = Depends(get_current_user),
    db=Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    doc = _load(db, listing_id)
    access = authorize(db, principal, doc.get("userId"), _owner_email(doc))

    changes = {k: v for k, v in payload.model_dump(exclude_unset=True).items() if v is not None}
    dropped = [f for f in PROTECTED_UPDATE_FIELDS if changes.pop(f, None) is not None]
    if "email" in changes and access != "admin" and not is_admin(db, principal.uid):
        changes.pop("email")
        dropped.append("email")
    if dropped:
        logger.warning("listing update ignored protected fields id=%s uid=%s fields=%s",
                       listing_id, principal.uid, ",".join(dropped))

    if "category" in changes and changes["category"] != doc.get("category"):
        authorize_listing_category(db, principal, changes["category"], settings)

    if not changes:
        raise InvalidInput("No updatable fields in request.")

    updated = listings_repo.update(db, listing_id, changes)
    logger.info("listing updated id=%s uid=%s access=%s", listing_id, principal.uid, access)
    return normalize_listing(updated)


@router.delete("/listings/{listing_id}", summary="Delete listing")
def delete_listing(
    listing_id: str,
    principal: Principal = Depends(get_current_user),
    db=Depends(get_db),
):
    doc = _load(db, listing_id)
    access = authorize(db, principal, doc.get("userId"), _owner_email(doc))
    listings_repo.delete(db, listing_id)
    logger.info("listing deleted id=%s uid=%s access=%s", listing_id, principal.uid, access)
    return {"success": True, "id": listing_id}


@router.get("/user-listings", response_model=List[ListingOut], summary="Listings of one user")
def user_listings(
    userId: Optional[str] = Query(None, description="Defaults to the caller"),
    principal: Principal = Depends(get_current_user),
    db=Depends(get_db),
):
    user_id = validate_document_id(userId or principal.uid, "userId")
    authorize(db, principal, user_id, None)

    # Legacy listings are keyed by e-mail only
    if user_id == principal.uid:
        email = principal.email
    else:
        email = (users_repo.get(db, user_id) or {}).get("email")

    docs = listings_repo.list_by_owner(db, user_id, email)
    return [normalize_listing(d) for d in docs]
