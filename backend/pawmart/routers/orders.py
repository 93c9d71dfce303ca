"""
# `pawmart/routers/orders.py` — Orders

- `POST /orders` — buyer places an order for an existing listing. `email`/`userId`
  come from the token, `status` starts as `pending`.
- `GET /orders?email=` — own orders; admins may pass any e-mail or omit it to get all.
- `GET /orders/{order_id}` — owner or admin.
- `DELETE /orders/{order_id}` — owner (admin override applies).
- `PATCH /orders/{order_id}/status` — admin only, free-form status.

Ownership is checked against both anchors (`userId`, then `email`).
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from pawmart.config import get_db
from pawmart.core.errors import Forbidden, InvalidInput, NotFound
from pawmart.core.security import authorize, get_current_admin, get_current_user, is_admin
from pawmart.repositories import listings as listings_repo
from pawmart.repositories import orders as orders_repo
from pawmart.repositories.documents import validate_document_id
from pawmart.schemas.order import OrderCreate, OrderOut, OrderStatusUpdate
from pawmart.schemas.principal import Principal
from pawmart.services.normalize import normalize_listing, normalize_order

logger = logging.getLogger("pawmart.orders")

router = APIRouter(prefix="/orders", tags=["Orders"])


def _load(db, order_id: str) -> dict:
    validate_document_id(order_id, "order id")
    doc = orders_repo.get(db, order_id)
    if doc is None:
        raise NotFound("Order not found.")
    return doc


@router.post("", response_model=OrderOut, status_code=201, summary="Place order")
def create_order(
    payload: OrderCreate,
    principal: Principal = Depends(get_current_user),
    db=Depends(get_db),
):
    if not principal.email:
        raise InvalidInput("An e-mail address is required to place an order.")

    validate_document_id(payload.listingId, "listingId")
    raw_listing = listings_repo.get(db, payload.listingId)
    if raw_listing is None:
        raise NotFound("Listing not found.")
    listing = normalize_listing(raw_listing)
    if listing["status"] != listings_repo.APPROVED:
        # Pending listings look absent to everyone but the owner and admins.
        try:
            authorize(db, principal, listing["userId"], listing["email"])
        except Forbidden:
            raise NotFound("Listing not found.")

    data = payload.model_dump()
    data.update(
        email=principal.email,
        userId=principal.uid,
        listingName=payload.listingName or listing["name"],
        price=listing["price"] if payload.price is None else payload.price,
        status="pending",
    )
    created = orders_repo.create(db, data)
    logger.info("order created id=%s uid=%s listing=%s", created["_id"], principal.uid, payload.listingId)
    return normalize_order(created)


@router.get("", response_model=List[OrderOut], summary="List orders")
def list_orders(
    email: Optional[str] = Query(None, description="Buyer e-mail; admins may omit it"),
    principal: Principal = Depends(get_current_user),
    db=Depends(get_db),
):
    if email is None:
        if is_admin(db, principal.uid):
            docs = orders_repo.list_all(db)
            return [normalize_order(d) for d in docs]
        email = principal.email
        if not email:
            raise InvalidInput("No e-mail on this account; pass ?email=.")

    authorize(db, principal, None, email)
    return [normalize_order(d) for d in orders_repo.list_by_email(db, email)]


@router.get("/{order_id}", response_model=OrderOut, summary="Get order")
def get_order(
    order_id: str,
    principal: Principal = Depends(get_current_user),
    db=Depends(get_db),
):
    doc = _load(db, order_id)
    authorize(db, principal, doc.get("userId"), doc.get("email"))
    return normalize_order(doc)


@router.delete("/{order_id}", summary="Delete order")
def delete_order(
    order_id: str,
    principal: Principal = Depends(get_current_user),
    db=Depends(get_db),
):
    doc = _load(db, order_id)
    access = authorize(db, principal, doc.get("userId"), doc.get("email"))
    orders_repo.delete(db, order_id)
    logger.info("order deleted id=%s uid=%s access=%s", order_id, principal.uid, access)
    return {"success": True, "id": order_id}


@router.patch("/{order_id}/status", response_model=OrderOut, summary="Set order status (admin)")
def set_order_status(
    order_id: str,
    payload: OrderStatusUpdate,
    admin: Principal = Depends(get_current_admin),
    db=Depends(get_db),
):
    _load(db, order_id)
    updated = orders_repo.set_status(db, order_id, payload.status.strip())
    logger.info("order status set id=%s by=%s", order_id, admin.uid)
    return normalize_order(updated)
