"""
Shared fixtures: an in-memory Firestore double, a fake token verifier and a
TestClient wired to both through FastAPI dependency overrides.
"""
from __future__ import annotations

import copy
import itertools
import os
import uuid
from collections import defaultdict
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

import pytest

os.environ.setdefault("FIREBASE_PROJECT_ID", "pawmart-test")

from fastapi.testclient import TestClient  # noqa: E402
from google.api_core import exceptions as gexc  # noqa: E402
from google.cloud.firestore_v1 import SERVER_TIMESTAMP  # noqa: E402

from pawmart.config import get_db  # noqa: E402
from pawmart.core.auth import get_token_verifier  # noqa: E402
from pawmart.core.errors import Unauthenticated  # noqa: E402
from pawmart.main import app  # noqa: E402


# ──────────────────────────────────────────────────────────────────────────────
# Firestore double (only what the repositories use)
# ──────────────────────────────────────────────────────────────────────────────

class FakeSnapshot:
    def __init__(self, reference: "FakeDocRef", data: Optional[Dict[str, Any]]):
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self):
        return copy.deepcopy(self._data) if self._data is not None else None


class FakeDocRef:
    def __init__(self, store: "FakeFirestore", col: str, doc_id: str):
        self._store = store
        self._col = col
        self.id = doc_id

    def get(self) -> FakeSnapshot:
        self._store.check()
        self._store.reads[(self._col, self.id)] += 1
        return FakeSnapshot(self, self._store.data[self._col].get(self.id))

    def set(self, data: Dict[str, Any], merge: bool = False) -> None:
        self._store.check()
        resolved = self._store.resolve(data)
        docs = self._store.data[self._col]
        if merge and self.id in docs:
            docs[self.id].update(resolved)
        else:
            docs[self.id] = resolved

    def update(self, data: Dict[str, Any]) -> None:
        self._store.check()
        docs = self._store.data[self._col]
        if self.id not in docs:
            raise gexc.NotFound(f"No document to update: {self._col}/{self.id}")
        docs[self.id].update(self._store.resolve(data))

    def delete(self) -> None:
        self._store.check()
        self._store.data[self._col].pop(self.id, None)


def _sort_key(data: Dict[str, Any], field: str) -> float:
    value = data.get(field)
    if isinstance(value, datetime):
        return value.timestamp()
    return 0.0


class FakeQuery:
    def __init__(self, store: "FakeFirestore", col: str, filters=(), order=None, limit=None):
        self._store = store
        self._col = col
        self._filters = tuple(filters)
        self._order = order
        self._limit = limit

    def where(self, field_path=None, op_string=None, value=None, *, filter=None):
        if filter is not None:
            field_path, op_string, value = filter.field_path, filter.op_string, filter.value
        assert op_string == "==", "fake only supports equality"
        return FakeQuery(self._store, self._col, self._filters + ((field_path, value),), self._order, self._limit)

    def order_by(self, field, direction="ASCENDING"):
        return FakeQuery(self._store, self._col, self._filters, (field, direction), self._limit)

    def limit(self, count: int):
        return FakeQuery(self._store, self._col, self._filters, self._order, count)

    def stream(self):
        self._store.check()
        docs = self._store.data[self._col]
        rows = [
            (doc_id, data) for doc_id, data in docs.items()
            if all(data.get(f) == v for f, v in self._filters)
        ]
        if self._order:
            field, direction = self._order
            # Firestore ordering implies the field exists.
            rows = [r for r in rows if field in r[1]]
            rows.sort(key=lambda r: _sort_key(r[1], field), reverse=(direction == "DESCENDING"))
        if self._limit:
            rows = rows[: self._limit]
        for doc_id, data in rows:
            yield FakeSnapshot(FakeDocRef(self._store, self._col, doc_id), copy.deepcopy(data))


class FakeCollection(FakeQuery):
    def document(self, doc_id: Optional[str] = None) -> FakeDocRef:
        return FakeDocRef(self._store, self._col, doc_id or uuid.uuid4().hex[:20])


class FakeFirestore:
    def __init__(self):
        self.data: Dict[str, Dict[str, Dict[str, Any]]] = defaultdict(dict)
        self.reads: Dict[tuple, int] = defaultdict(int)
        self.fail_with: Optional[Exception] = None
        self._clock = itertools.count()
        self._epoch = datetime(2024, 1, 1, tzinfo=timezone.utc)

    def check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with

    def now(self) -> datetime:
        return self._epoch + timedelta(seconds=next(self._clock))

    def resolve(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return {k: (self.now() if v is SERVER_TIMESTAMP else copy.deepcopy(v)) for k, v in data.items()}

    def collection(self, name: str) -> FakeCollection:
        return FakeCollection(self, name)

    def seed(self, col: str, doc_id: str, data: Dict[str, Any]) -> None:
        self.data[col][doc_id] = self.resolve(data)


# ──────────────────────────────────────────────────────────────────────────────
# Identities
# ──────────────────────────────────────────────────────────────────────────────

TOKENS = {
    "alice-token": {"uid": "alice", "email": "alice@example.com", "name": "Alice"},
    "bob-token": {"uid": "bob", "email": "bob@example.com", "name": "Bob"},
    "root-token": {"uid": "root", "email": "root@example.com", "name": "Root"},
    "noemail-token": {"uid": "ghost"},
}


def fake_verifier(token: str) -> Dict[str, Any]:
    if token not in TOKENS:
        raise Unauthenticated("Invalid authentication token.")
    return dict(TOKENS[token])


def auth(token: str) -> Dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def db() -> FakeFirestore:
    store = FakeFirestore()
    store.seed("users", "alice", {"uid": "alice", "email": "alice@example.com", "displayName": "Alice", "role": "user"})
    store.seed("users", "bob", {"uid": "bob", "email": "bob@example.com", "displayName": "Bob", "role": "user"})
    store.seed("users", "root", {"uid": "root", "email": "root@example.com", "displayName": "Root", "role": "admin"})
    return store


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_token_verifier] = lambda: fake_verifier
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def seed_listing(db):
    def _seed(doc_id: str, **fields) -> str:
        data = {
            "name": "Kitten",
            "category": "Pets",
            "price": 10,
            "userId": "alice",
            "email": "alice@example.com",
            "status": "approved",
            "createdAt": SERVER_TIMESTAMP,
        }
        data.update(fields)
        db.seed("listings", doc_id, data)
        return doc_id
    return _seed
