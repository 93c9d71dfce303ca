import pytest
from firebase_admin import auth as fb_auth

from pawmart.core import auth as core_auth
from pawmart.core.auth import extract_bearer_token, resolve_principal
from pawmart.core.errors import Unauthenticated, Unavailable
from conftest import auth, fake_verifier


@pytest.mark.parametrize(
    "header, token",
    [
        ("Bearer abc", "abc"),
        ("bearer abc", "abc"),
        ("Bearer", None),
        ("Basic abc", None),
        ("abc", None),
        ("Bearer a b", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_bearer_token(header, token):
    assert extract_bearer_token(header) == token


def test_resolve_principal_takes_identity_from_claims():
    principal = resolve_principal("Bearer alice-token", fake_verifier)
    assert principal.uid == "alice"
    assert principal.email == "alice@example.com"
    assert principal.claims["name"] == "Alice"
    assert principal.is_admin is False


def test_resolve_principal_rejects_missing_and_malformed():
    with pytest.raises(Unauthenticated):
        resolve_principal(None, fake_verifier)
    with pytest.raises(Unauthenticated):
        resolve_principal("Token alice-token", fake_verifier)


def test_resolve_principal_rejects_claims_without_uid():
    with pytest.raises(Unauthenticated):
        resolve_principal("Bearer x", lambda token: {"email": "x@example.com"})


@pytest.fixture
def no_firebase_init(monkeypatch):
    monkeypatch.setattr(core_auth, "init_firebase", lambda settings: None)


@pytest.mark.parametrize(
    "error, expected",
    [
        (fb_auth.ExpiredIdTokenError("expired", cause=None), Unauthenticated),
        (fb_auth.RevokedIdTokenError("revoked"), Unauthenticated),
        (fb_auth.InvalidIdTokenError("bad signature"), Unauthenticated),
        (fb_auth.UserNotFoundError("No user record found for the given identifier"), Unauthenticated),
        (fb_auth.CertificateFetchError("no certs", cause=None), Unavailable),
    ],
)
def test_verify_firebase_token_translates_provider_errors(monkeypatch, no_firebase_init, error, expected):
    def _raise(token, check_revoked=False):
        raise error

    monkeypatch.setattr(fb_auth, "verify_id_token", _raise)
    with pytest.raises(expected) as excinfo:
        core_auth.verify_firebase_token("secret-token-value")
    assert "secret-token-value" not in str(excinfo.value.detail)


def test_verify_firebase_token_checks_revocation(monkeypatch, no_firebase_init):
    seen = {}

    def _verify(token, check_revoked=False):
        seen["check_revoked"] = check_revoked
        return {"uid": "alice"}

    monkeypatch.setattr(fb_auth, "verify_id_token", _verify)
    assert core_auth.verify_firebase_token("t") == {"uid": "alice"}
    assert seen["check_revoked"] is True


def test_missing_header_is_401_with_bearer_challenge(client):
    r = client.post("/listings", json={"name": "x", "category": "Pets"})
    assert r.status_code == 401
    assert r.json()["message"] == "unauthenticated"
    assert r.headers["www-authenticate"] == "Bearer"


def test_rejected_token_is_401_and_not_echoed(client):
    r = client.get("/user-profile", headers=auth("forged-token"))
    assert r.status_code == 401
    assert "forged-token" not in r.text


def test_bad_token_on_public_route_is_still_401(client, seed_listing):
    seed_listing("l1")
    r = client.get("/listing/l1", headers=auth("forged-token"))
    assert r.status_code == 401
