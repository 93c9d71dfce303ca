# pawmart/core/auth.py
"""
Identity resolution: `Authorization: Bearer <Firebase ID token>` → `Principal`.

Token verification is delegated to Firebase Authentication. The verifier is a
FastAPI dependency (`get_token_verifier`) so the provider can be swapped out.
Nothing here touches Firestore; admin status is resolved in `core.security`.
"""
import logging
from typing import Any, Callable, Dict, Optional

from fastapi import Depends, Request
from firebase_admin import auth as fb_auth
from firebase_admin import exceptions as fb_exceptions

from pawmart.config import get_settings, init_firebase
from pawmart.core.errors import Unauthenticated, Unavailable
from pawmart.schemas.principal import Principal

logger = logging.getLogger("pawmart.auth")

TokenVerifier = Callable[[str], Dict[str, Any]]


def extract_bearer_token(auth_header: Optional[str]) -> Optional[str]:
    """
    Extracts the token from an `Authorization: Bearer <id_token>` header.
    Returns None when the header is absent or not a two-part bearer value.
    """
    if not auth_header:
        return None
    parts = auth_header.split()
    if len(parts) == 2 and parts[0].lower() == "bearer":
        return parts[1]
    return None


def verify_firebase_token(id_token: str) -> Dict[str, Any]:
    """
    Verifies a Firebase ID token, including the revocation check.
    Provider rejections become 401, provider outages become 503.
    """
    init_firebase(get_settings())
    try:
        return fb_auth.verify_id_token(id_token, check_revoked=True)
    except fb_auth.ExpiredIdTokenError:
        raise Unauthenticated("Token expired.")
    except fb_auth.RevokedIdTokenError:
        raise Unauthenticated("Session revoked.")
    except (fb_auth.UserDisabledError, fb_auth.UserNotFoundError, fb_auth.InvalidIdTokenError, ValueError):
        raise Unauthenticated("Invalid authentication token.")
    except fb_auth.CertificateFetchError as exc:
        logger.warning("identity provider certificate fetch failed: %s", type(exc).__name__)
        raise Unavailable("Identity provider unavailable.")
    except (fb_exceptions.UnavailableError, fb_exceptions.DeadlineExceededError) as exc:
        logger.warning("identity provider unavailable: %s", type(exc).__name__)
        raise Unavailable("Identity provider unavailable.")


def get_token_verifier() -> TokenVerifier:
    return verify_firebase_token


def _claims_to_principal(decoded: Dict[str, Any]) -> Principal:
    uid = decoded.get("uid") or decoded.get("user_id") or decoded.get("sub")
    if not uid:
        raise Unauthenticated("Invalid token payload.")
    return Principal(
        uid=str(uid),
        email=decoded.get("email") or None,
        display_name=decoded.get("name") or None,
        claims=dict(decoded),
    )


def resolve_principal(auth_header: Optional[str], verifier: TokenVerifier) -> Principal:
    """
    Turns a raw Authorization header into a verified Principal.
    Raises Unauthenticated if the header is missing/malformed or the token is rejected.
    """
    if not auth_header:
        raise Unauthenticated("Unauthorized access. Token not found!")
    token = extract_bearer_token(auth_header)
    if not token:
        raise Unauthenticated("Malformed Authorization header.")

    principal = _claims_to_principal(verifier(token))
    logger.debug("authenticated uid=%s", principal.uid)
    return principal


# --------- FastAPI Dependencies --------- #
# Plain `def`: FastAPI runs them in its thread pool while the provider call blocks.

def get_principal(
    request: Request,
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> Principal:
    """Token required: verifies it and returns the Principal."""
    return resolve_principal(request.headers.get("Authorization"), verifier)


def get_optional_principal(
    request: Request,
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> Optional[Principal]:
    """
    Token optional: verifies it when sent, otherwise returns None.
    Used by public GET routes. A header that is present but bad is still a 401.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    return resolve_principal(auth_header, verifier)
