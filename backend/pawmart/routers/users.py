"""
# `pawmart/routers/users.py` — Profile sync

- `POST /users` — creates `users/{uid}` on first sync (role `user`), afterwards only
  refreshes e-mail and display name. Always the caller's own record.
- `GET /user-profile` — the caller's record, or a default shape built from the token
  when no record exists yet (nothing is written in that case).
"""
import logging

from fastapi import APIRouter, Depends

from pawmart.config import get_db
from pawmart.core.security import get_current_user
from pawmart.repositories import users as users_repo
from pawmart.schemas.principal import Principal
from pawmart.schemas.user import UserProfile, UserSync
from pawmart.services.normalize import normalize_user

logger = logging.getLogger("pawmart.users")

router = APIRouter(tags=["Users"])


@router.post("/users", response_model=UserProfile, summary="Sync own profile")
def sync_profile(
    payload: UserSync,
    principal: Principal = Depends(get_current_user),
    db=Depends(get_db),
):
    record = users_repo.upsert_profile(
        db,
        principal.uid,
        email=principal.email or "",
        display_name=payload.displayName or principal.display_name or "",
    )
    logger.info("profile synced uid=%s", principal.uid)
    return normalize_user(record)


@router.get("/user-profile", response_model=UserProfile, summary="Get own profile")
def get_profile(
    principal: Principal = Depends(get_current_user),
    db=Depends(get_db),
):
    record = users_repo.get(db, principal.uid)
    if record is None:
        return UserProfile(
            uid=principal.uid,
            email=principal.email or "",
            displayName=principal.display_name or "",
        )
    return normalize_user(record)
