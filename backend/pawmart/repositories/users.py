# pawmart/repositories/users.py
from typing import Any, Dict, List, Optional

from google.cloud.firestore_v1 import SERVER_TIMESTAMP

from pawmart.repositories.documents import to_raw

COL = "users"


def get(db, uid: str) -> Optional[Dict[str, Any]]:
    return to_raw(db.collection(COL).document(uid).get())


def get_role(db, uid: str) -> Optional[str]:
    """Single point read of users/{uid}; None when there is no record."""
    doc = get(db, uid)
    if doc is None:
        return None
    return doc.get("role")


def upsert_profile(db, uid: str, email: str, display_name: str) -> Dict[str, Any]:
    """
    İlk senkronda kaydı oluşturur (role='user'); sonrakilerde yalnızca
    e-posta ve görünen adı günceller. Role is never touched here.
    """
    ref = db.collection(COL).document(uid)
    if ref.get().exists:
        ref.set({
            "email": email,
            "displayName": display_name,
            "updatedAt": SERVER_TIMESTAMP,
        }, merge=True)
    else:
        ref.set({
            "uid": uid,
            "email": email,
            "displayName": display_name,
            "role": "user",
            "createdAt": SERVER_TIMESTAMP,
        })
    return to_raw(ref.get())


def list_all(db) -> List[Dict[str, Any]]:
    return [to_raw(s) for s in db.collection(COL).stream()]


def update(db, uid: str, patch: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Partial update; None if the record does not exist."""
    ref = db.collection(COL).document(uid)
    if not ref.get().exists:
        return None
    ref.update({**patch, "updatedAt": SERVER_TIMESTAMP})
    return to_raw(ref.get())


def set_role(db, uid: str, role: str) -> Optional[Dict[str, Any]]:
    return update(db, uid, {"role": role})
