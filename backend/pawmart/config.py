"""
pawmart/config.py - Application configuration and Firebase initialization.

This module defines a Pydantic BaseSettings class to load configuration from environment,
and initializes the Firebase Admin SDK (Firestore DB, Authentication) using the provided credentials.
Other modules get the Firestore client through `get_db()` (also used as a FastAPI dependency).
"""
from functools import lru_cache
from typing import Optional

import firebase_admin
from firebase_admin import credentials, firestore
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False, extra="ignore")

    # Firestore project; without it there is no document store to talk to.
    firebase_project_id: str = Field(..., description="Firebase / Firestore project id")
    firebase_cred_file: str = Field('firebase_service_account.json', description="Service account JSON path")

    # Firebase credentials from environment variables (for Cloud Run)
    firebase_private_key_id: Optional[str] = None
    firebase_private_key: Optional[str] = Field(None, repr=False)
    firebase_client_email: Optional[str] = None
    firebase_client_id: Optional[str] = None
    firebase_auth_uri: Optional[str] = None
    firebase_token_uri: Optional[str] = None
    firebase_auth_provider_x509_cert_url: Optional[str] = None
    firebase_client_x509_cert_url: Optional[str] = None

    debug: bool = False
    log_level: str = "INFO"
    allowed_origins: str = '*'  # Comma-separated list or '*' for all

    # Non-admin users may only list under this category.
    open_listing_category: str = "Pets"
    latest_listings_limit: int = Field(6, ge=1)

    def env_credentials(self) -> Optional[dict]:
        """Service account dict built from env vars, or None if any piece is missing."""
        fields = [
            self.firebase_private_key_id,
            self.firebase_private_key,
            self.firebase_client_email,
            self.firebase_client_id,
            self.firebase_auth_uri,
            self.firebase_token_uri,
            self.firebase_auth_provider_x509_cert_url,
            self.firebase_client_x509_cert_url,
        ]
        if not all(fields):
            return None
        return {
            "type": "service_account",
            "project_id": self.firebase_project_id,
            "private_key_id": self.firebase_private_key_id,
            # Cloud Run secrets usually arrive with escaped newlines
            "private_key": self.firebase_private_key.replace("\\n", "\n"),
            "client_email": self.firebase_client_email,
            "client_id": self.firebase_client_id,
            "auth_uri": self.firebase_auth_uri,
            "token_uri": self.firebase_token_uri,
            "auth_provider_x509_cert_url": self.firebase_auth_provider_x509_cert_url,
            "client_x509_cert_url": self.firebase_client_x509_cert_url,
        }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Raises pydantic.ValidationError when FIREBASE_PROJECT_ID is missing.
    return Settings()


def init_firebase(settings: Settings) -> firebase_admin.App:
    """Initialize the default Firebase app once; later calls return the existing app."""
    try:
        return firebase_admin.get_app()
    except ValueError:
        pass

    cred_dict = settings.env_credentials()
    if cred_dict is not None:
        # Use environment variables for Firebase credentials (Cloud Run)
        cred = credentials.Certificate(cred_dict)
    else:
        # Use service account file (local development)
        cred = credentials.Certificate(settings.firebase_cred_file)

    return firebase_admin.initialize_app(cred, {'projectId': settings.firebase_project_id})


@lru_cache(maxsize=1)
def get_db():
    """Firestore client shared by every request."""
    app = init_firebase(get_settings())
    return firestore.client(app=app)
