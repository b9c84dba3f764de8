from threading import Lock
from typing import Any

import firebase_admin
from firebase_admin import credentials, firestore

from admin_backend.core import config

USERS_COLLECTION = "users"
TUTOR_APPLICATIONS_COLLECTION = "tutorApplications"
BOOKINGS_COLLECTION = "bookings"

# Every list endpoint reads at most this many documents.
LIST_LIMIT = 100

_client_lock = Lock()
_firestore_client = None


def get_firestore_client():
    global _firestore_client

    if _firestore_client is not None:
        return _firestore_client

    with _client_lock:
        if _firestore_client is not None:
            return _firestore_client

        if not firebase_admin._apps:
            if config.FIREBASE_CREDENTIALS_PATH:
                credential = credentials.Certificate(config.FIREBASE_CREDENTIALS_PATH)
            else:
                credential = credentials.ApplicationDefault()
            options = {"projectId": config.FIREBASE_PROJECT_ID} if config.FIREBASE_PROJECT_ID else None
            firebase_admin.initialize_app(credential, options)

        _firestore_client = firestore.client()
        return _firestore_client


def get_db():
    yield get_firestore_client()


def snapshot_to_dict(snapshot, id_field: str = "id") -> dict[str, Any]:
    return {id_field: snapshot.id, **(snapshot.to_dict() or {})}
