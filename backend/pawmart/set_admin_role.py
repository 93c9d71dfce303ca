#!/usr/bin/env python3
"""
Grants the admin role to an existing Firebase user.

Looks the user up by e-mail in Firebase Authentication and writes
`role="admin"` to `users/{uid}` (creating the record if the user never synced
a profile). Takes effect on the user's next request; no re-login needed.

Usage: python -m pawmart.set_admin_role <user_email>
"""
import logging
import sys

from firebase_admin import auth
from google.cloud.firestore_v1 import SERVER_TIMESTAMP

from pawmart.config import get_db
from pawmart.repositories import users as users_repo

logger = logging.getLogger("pawmart.admin")


def set_admin_role(db, user_email: str, get_user_by_email=auth.get_user_by_email) -> str:
    """Returns the uid that was promoted. Raises auth.UserNotFoundError if no such user."""
    user = get_user_by_email(user_email)
    if users_repo.set_role(db, user.uid, "admin") is None:
        db.collection(users_repo.COL).document(user.uid).set({
            "uid": user.uid,
            "email": user.email or user_email,
            "displayName": user.display_name or "",
            "role": "admin",
            "createdAt": SERVER_TIMESTAMP,
        })
    logger.info("admin role granted uid=%s", user.uid)
    return user.uid


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) != 1:
        print("Usage: python -m pawmart.set_admin_role <user_email>")
        return 1

    logging.basicConfig(level=logging.INFO)
    try:
        uid = set_admin_role(get_db(), argv[0])
    except auth.UserNotFoundError:
        print(f"User not found: {argv[0]}")
        return 1
    print(f"Admin role set for {argv[0]} (uid={uid})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
