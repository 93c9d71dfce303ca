# pawmart/repositories/documents.py
"""Shared Firestore helpers for the repository modules."""
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from pawmart.core.errors import InvalidInput

MAX_ID_BYTES = 1500


def validate_document_id(doc_id: str, field: str = "id") -> str:
    """
    Firestore document id kuralları: boş olamaz, '/' içeremez,
    '.' / '..' olamaz, '__x__' biçiminde olamaz, 1500 byte'ı aşamaz.
    """
    if (
        not doc_id
        or "/" in doc_id
        or doc_id in (".", "..")
        or (doc_id.startswith("__") and doc_id.endswith("__"))
        or len(doc_id.encode("utf-8")) > MAX_ID_BYTES
    ):
        raise InvalidInput(f"Malformed {field}.")
    return doc_id


def to_raw(snap) -> Optional[Dict[str, Any]]:
    """Snapshot → raw dict with the document id under `_id`; None when missing."""
    if not snap.exists:
        return None
    data = dict(snap.to_dict() or {})
    data["_id"] = snap.id
    return data


def _created_key(data: Dict[str, Any]) -> float:
    ts = data.get("createdAt") or data.get("created_at")
    if isinstance(ts, datetime):
        return ts.timestamp()
    return 0.0


def newest_first(query, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    """
    Runs `query` unordered and sorts by createdAt (legacy: created_at) DESC in
    Python. A server-side order_by("createdAt") skips documents without that
    field; here undated documents are kept and sort last.
    """
    docs = sorted(
        (to_raw(s) for s in query.stream()),
        key=_created_key,
        reverse=True,
    )
    return docs[:limit] if limit else docs


def merge_unique(*groups: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Concatenate raw docs, keeping the first occurrence of each `_id`."""
    seen = set()
    out = []
    for group in groups:
        for doc in group:
            if doc["_id"] in seen:
                continue
            seen.add(doc["_id"])
            out.append(doc)
    return out
