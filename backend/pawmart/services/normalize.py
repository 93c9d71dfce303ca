# pawmart/services/normalize.py
"""
Stored document → canonical response shape.

Listings and orders were written by several generations of the frontend, so
the same fact can live under different keys or encodings (`price` vs `Price`,
`{"$numberInt": "42"}`, `"19.99"`, `date` vs `pickupDate`, `image` vs
`imageUrl`). Everything here is total: missing or malformed fields fall back
to defaults, nothing raises, and the input dict is never modified.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

__all__ = [
    "PriceResolution",
    "resolve_price",
    "render_id",
    "normalize_listing",
    "normalize_order",
    "normalize_user",
]


# ──────────────────────────────────────────────────────────────────────────────
# Price
# ──────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PriceResolution:
    source: str  # which encoding matched: price | Price | Price.nested | Price.string | default
    value: float


def _finite_number(v: Any) -> Optional[float]:
    # bool is an int subclass; True is not a price
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        return None
    return v if math.isfinite(v) else None


def _numeric_price(doc: Mapping[str, Any]) -> Optional[float]:
    return _finite_number(doc.get("price"))


def _numeric_legacy_price(doc: Mapping[str, Any]) -> Optional[float]:
    return _finite_number(doc.get("Price"))


def _nested_legacy_price(doc: Mapping[str, Any]) -> Optional[float]:
    nested = doc.get("Price")
    if not isinstance(nested, Mapping):
        return None
    for key in ("$numberInt", "value"):
        raw = nested.get(key)
        if raw is None or isinstance(raw, bool):
            continue
        try:
            value = float(str(raw).strip())
        except ValueError:
            continue
        if math.isfinite(value):
            return int(value)
    return None


def _string_legacy_price(doc: Mapping[str, Any]) -> Optional[float]:
    raw = doc.get("Price")
    if not isinstance(raw, str):
        return None
    try:
        value = float(raw.strip())
    except ValueError:
        return None
    return value if math.isfinite(value) else None


# Order matters: the first rule that yields a number wins.
PRICE_RULES: Tuple[Tuple[str, Callable[[Mapping[str, Any]], Optional[float]]], ...] = (
    ("price", _numeric_price),
    ("Price", _numeric_legacy_price),
    ("Price.nested", _nested_legacy_price),
    ("Price.string", _string_legacy_price),
)


def resolve_price(doc: Mapping[str, Any]) -> PriceResolution:
    for source, rule in PRICE_RULES:
        value = rule(doc)
        if value is not None:
            return PriceResolution(source, value)
    return PriceResolution("default", 0)


# ──────────────────────────────────────────────────────────────────────────────
# Field helpers
# ──────────────────────────────────────────────────────────────────────────────

def render_id(value: Any) -> str:
    """
    Identifier → plain string. Handles Firestore DocumentReference (`.id`),
    extended-JSON `{"$oid": ...}` and anything str()-able; None → "".
    """
    if value is None:
        return ""
    if isinstance(value, Mapping):
        return render_id(value.get("$oid"))
    ref_id = getattr(value, "id", None)
    if isinstance(ref_id, str):
        return ref_id
    return str(value)


def _text(doc: Mapping[str, Any], *keys: str) -> str:
    for key in keys:
        value = doc.get(key)
        if value is None or value == "":
            continue
        if isinstance(value, (str, int, float)) and not isinstance(value, bool):
            return str(value)
    return ""


def _optional_text(doc: Mapping[str, Any], *keys: str) -> Optional[str]:
    return _text(doc, *keys) or None


def _timestamp(doc: Mapping[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = doc.get(key)
        if isinstance(value, datetime):
            return value.isoformat()
        if isinstance(value, str) and value:
            return value
    return None


def _quantity(raw: Any) -> int:
    if isinstance(raw, bool):
        return 1
    try:
        return max(1, int(raw))
    except (TypeError, ValueError, OverflowError):
        return 1


# ──────────────────────────────────────────────────────────────────────────────
# Canonical shapes
# ──────────────────────────────────────────────────────────────────────────────

def normalize_listing(doc: Mapping[str, Any]) -> Dict[str, Any]:
    doc = doc or {}
    return {
        "id": render_id(doc.get("_id", doc.get("id"))),
        "name": _text(doc, "name"),
        "category": _text(doc, "category"),
        "price": resolve_price(doc).value,
        "location": _text(doc, "location"),
        "description": _text(doc, "description"),
        "imageUrl": _text(doc, "imageUrl", "image"),
        "email": _text(doc, "email", "created_by"),
        "pickupDate": _text(doc, "pickupDate", "date"),
        "userId": _optional_text(doc, "userId"),
        "userName": _optional_text(doc, "userName"),
        "status": "approved" if doc.get("status") == "approved" else "pending",
        "createdAt": _timestamp(doc, "createdAt", "created_at"),
        "updatedAt": _timestamp(doc, "updatedAt", "updated_at"),
    }


def normalize_order(doc: Mapping[str, Any]) -> Dict[str, Any]:
    doc = doc or {}
    return {
        "id": render_id(doc.get("_id", doc.get("id"))),
        "buyerName": _text(doc, "buyerName"),
        "email": _text(doc, "email"),
        "userId": _optional_text(doc, "userId"),
        "listingId": render_id(doc.get("listingId")),
        "listingName": _text(doc, "listingName"),
        "quantity": _quantity(doc.get("quantity", 1)),
        "price": resolve_price(doc).value,
        "address": _text(doc, "address"),
        "pickupDate": _text(doc, "pickupDate", "date"),
        "phone": _text(doc, "phone"),
        "notes": _text(doc, "notes"),
        "status": _text(doc, "status") or "pending",
        "createdAt": _timestamp(doc, "createdAt", "created_at"),
        "updatedAt": _timestamp(doc, "updatedAt", "updated_at"),
    }


def normalize_user(doc: Mapping[str, Any]) -> Dict[str, Any]:
    doc = doc or {}
    role = doc.get("role")
    return {
        "uid": _text(doc, "uid") or render_id(doc.get("_id")),
        "email": _text(doc, "email"),
        "displayName": _text(doc, "displayName", "name"),
        "role": role if role in ("user", "admin", "demo") else "user",
        "createdAt": _timestamp(doc, "createdAt", "created_at"),
    }
