# pawmart/repositories/orders.py
from typing import Any, Dict, List, Optional

from google.cloud.firestore_v1 import SERVER_TIMESTAMP
from google.cloud.firestore_v1.base_query import FieldFilter

from pawmart.repositories.documents import newest_first, to_raw

COL = "orders"


def get(db, order_id: str) -> Optional[Dict[str, Any]]:
    return to_raw(db.collection(COL).document(order_id).get())


def list_by_email(db, email: str) -> List[Dict[str, Any]]:
    return newest_first(db.collection(COL).where(filter=FieldFilter("email", "==", email)))


def list_all(db) -> List[Dict[str, Any]]:
    return newest_first(db.collection(COL))


def create(db, data: Dict[str, Any]) -> Dict[str, Any]:
    ref = db.collection(COL).document()
    ref.set({**data, "createdAt": SERVER_TIMESTAMP})
    return to_raw(ref.get())


def set_status(db, order_id: str, status: str) -> Dict[str, Any]:
    ref = db.collection(COL).document(order_id)
    ref.update({"status": status, "updatedAt": SERVER_TIMESTAMP})
    return to_raw(ref.get())


def delete(db, order_id: str) -> None:
    db.collection(COL).document(order_id).delete()
