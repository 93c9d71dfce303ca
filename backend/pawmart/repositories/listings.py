# pawmart/repositories/listings.py
from typing import Any, Dict, List, Optional

from google.cloud.firestore_v1 import SERVER_TIMESTAMP
from google.cloud.firestore_v1.base_query import FieldFilter

from pawmart.repositories.documents import merge_unique, newest_first, to_raw

COL = "listings"
PENDING = "pending"
APPROVED = "approved"


def get(db, listing_id: str) -> Optional[Dict[str, Any]]:
    return to_raw(db.collection(COL).document(listing_id).get())


def list_by_status(db, status: str, category: Optional[str] = None,
                   limit: Optional[int] = None) -> List[Dict[str, Any]]:
    q = db.collection(COL).where(filter=FieldFilter("status", "==", status))
    if category:
        q = q.where(filter=FieldFilter("category", "==", category))
    return newest_first(q, limit=limit)


def list_all(db) -> List[Dict[str, Any]]:
    return newest_first(db.collection(COL))


def list_by_owner(db, user_id: str, email: Optional[str] = None) -> List[Dict[str, Any]]:
    """
    Listings owned by `user_id`. Older records only carry the owner's e-mail
    (`email` or `created_by`), so those are merged in when an e-mail is known.
    """
    col = db.collection(COL)
    groups = [newest_first(col.where(filter=FieldFilter("userId", "==", user_id)))]
    if email:
        groups.append(newest_first(col.where(filter=FieldFilter("email", "==", email))))
        groups.append(newest_first(col.where(filter=FieldFilter("created_by", "==", email))))
    return merge_unique(*groups)


def create(db, data: Dict[str, Any]) -> Dict[str, Any]:
    ref = db.collection(COL).document()
    ref.set({**data, "createdAt": SERVER_TIMESTAMP, "updatedAt": None})
    return to_raw(ref.get())


def update(db, listing_id: str, patch: Dict[str, Any]) -> Dict[str, Any]:
    ref = db.collection(COL).document(listing_id)
    ref.update({**patch, "updatedAt": SERVER_TIMESTAMP})
    return to_raw(ref.get())


def delete(db, listing_id: str) -> None:
    db.collection(COL).document(listing_id).delete()
