import itertools

import pytest

from pawmart.config import get_settings
from pawmart.core.errors import Forbidden
from pawmart.core.security import authorize, authorize_listing_category, is_admin
from pawmart.schemas.principal import Principal

ALICE = Principal(uid="alice", email="alice@example.com")
ROOT = Principal(uid="root", email="root@example.com")
NO_RECORD = Principal(uid="stranger", email="stranger@example.com")


@pytest.mark.parametrize(
    "principal, owner_id, owner_email",
    list(itertools.product(
        [ALICE, ROOT, NO_RECORD],
        ["alice", "bob", None, ""],
        ["alice@example.com", "bob@example.com", None, ""],
    )),
)
def test_authorize_allows_iff_owner_or_admin(db, principal, owner_id, owner_email):
    expected = (
        principal.uid == owner_id
        or principal.email == owner_email
        or principal.uid == "root"
    )
    if expected:
        assert authorize(db, principal, owner_id, owner_email) in ("owner", "admin")
    else:
        with pytest.raises(Forbidden):
            authorize(db, principal, owner_id, owner_email)


def test_uid_match_wins_before_email_and_before_role_lookup(db):
    assert authorize(db, ALICE, "alice", "someone-else@example.com") == "owner"
    assert db.reads[("users", "alice")] == 0


def test_email_anchor_supports_legacy_records(db):
    assert authorize(db, ALICE, None, "alice@example.com") == "owner"


def test_admin_override_reads_role(db):
    assert authorize(db, ROOT, "alice", "alice@example.com") == "admin"


def test_required_admin_skips_ownership(db):
    with pytest.raises(Forbidden):
        authorize(db, ALICE, "alice", "alice@example.com", required_role="admin")
    assert authorize(db, ROOT, None, None, required_role="admin") == "admin"


def test_missing_user_record_is_not_admin(db):
    assert is_admin(db, "stranger") is False
    with pytest.raises(Forbidden):
        authorize(db, NO_RECORD, "alice", None)


def test_demo_role_is_not_admin(db):
    db.seed("users", "demo", {"uid": "demo", "role": "demo"})
    assert is_admin(db, "demo") is False


def test_role_revocation_applies_on_next_decision(db):
    assert authorize(db, ROOT, "alice", None) == "admin"
    db.collection("users").document("root").update({"role": "user"})
    with pytest.raises(Forbidden):
        authorize(db, ROOT, "alice", None)


def test_role_lookup_is_never_cached(db):
    for _ in range(3):
        is_admin(db, "root")
    assert db.reads[("users", "root")] == 3


def test_listing_category_rule(db):
    settings = get_settings()
    authorize_listing_category(db, ALICE, "Pets", settings)
    with pytest.raises(Forbidden):
        authorize_listing_category(db, ALICE, "Electronics", settings)
    authorize_listing_category(db, ROOT, "Electronics", settings)
