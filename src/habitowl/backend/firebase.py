"""Firebase backend bootstrap.

Initializes one Firebase app per process and exposes the three services the
app relies on: authentication, Firestore document storage and Cloud Storage.
"""

import logging
from dataclasses import dataclass
from types import ModuleType
from typing import Any, Optional

import firebase_admin
from firebase_admin import auth, credentials, firestore, storage

from ..config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


@dataclass
class BackendServices:
    """Handles to the initialized Firebase services."""

    app: firebase_admin.App
    auth: ModuleType
    db: Any  # google.cloud.firestore.Client
    bucket: Any  # google.cloud.storage.Bucket
    client_config: dict[str, str]


def firebase_options(settings: Settings) -> dict[str, str]:
    """App options derived from settings."""
    return {
        "projectId": settings.firebase_project_id,
        "storageBucket": settings.firebase_storage_bucket,
    }


def firebase_client_config(settings: Settings) -> dict[str, str]:
    """Web client config handed to the app, without unset keys."""
    config = {
        "apiKey": settings.firebase_api_key,
        "authDomain": settings.firebase_auth_domain,
        **firebase_options(settings),
        "messagingSenderId": settings.firebase_messaging_sender_id,
        "appId": settings.firebase_app_id,
        "measurementId": settings.firebase_measurement_id,
    }
    return {key: value for key, value in config.items() if value}


def initialize_backend(settings: Optional[Settings] = None) -> BackendServices:
    """Initialize the Firebase app and its services.

    Uses service account credentials when `firebase_credentials_path` is set
    and application default credentials otherwise.
    """
    settings = settings or get_settings()

    credential = None
    if settings.firebase_credentials_path:
        credential = credentials.Certificate(settings.firebase_credentials_path)

    app = firebase_admin.initialize_app(credential, firebase_options(settings))
    logger.info("Firebase initialized for project %s", settings.firebase_project_id)

    return BackendServices(
        app=app,
        auth=auth,
        db=firestore.client(app),
        bucket=storage.bucket(app=app),
        client_config=firebase_client_config(settings),
    )


# Global backend instance (lazy initialization)
_backend: Optional[BackendServices] = None


def get_backend() -> BackendServices:
    """Get the process-wide backend, initializing it on first use."""
    global _backend

    if _backend is None:
        _backend = initialize_backend()

    return _backend


def reset_backend() -> None:
    """Delete the process-wide Firebase app."""
    global _backend

    if _backend is not None:
        firebase_admin.delete_app(_backend.app)
        _backend = None
