# backend/core/firebase.py
import logging
import threading
import firebase_admin
from firebase_admin import auth, credentials, db
from backend.core.config import settings

logger = logging.getLogger(__name__)

_init_lock = threading.Lock()


def get_app() -> firebase_admin.App:
    """Initialize the default Firebase app once and return it."""
    with _init_lock:
        try:
            return firebase_admin.get_app()
        except ValueError:
            cred = credentials.Certificate(settings.FIREBASE_CREDENTIALS)
            app = firebase_admin.initialize_app(cred, {
                "databaseURL": settings.FIREBASE_DATABASE_URL
            })
            logger.info(
                f"Firebase initialized for {settings.FIREBASE_DATABASE_URL}")
            return app


def get_reference(path: str) -> db.Reference:
    return db.reference(path, app=get_app())


def verify_id_token(token: str) -> str:
    """Return the uid of a Firebase ID token, raising on invalid tokens."""
    decoded = auth.verify_id_token(token, app=get_app())
    return decoded["uid"]
