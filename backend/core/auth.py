# backend/core/auth.py
import logging
from typing import Optional
from fastapi import Header, HTTPException, Query
from backend.core import firebase
from backend.core.config import settings

logger = logging.getLogger(__name__)


def get_user_id(
    user_id: Optional[str] = Query(None, alias="userId"),
    authorization: Optional[str] = Header(None),
) -> Optional[str]:
    """Resolve the calling user from a Firebase ID token or the userId query."""
    if authorization:
        scheme, _, token = authorization.partition(" ")
        if scheme.lower() != "bearer" or not token:
            raise HTTPException(
                status_code=401, detail="Invalid authorization header")
        try:
            return firebase.verify_id_token(token)
        except Exception as e:
            logger.warning(f"ID token verification failed: {e}")
            raise HTTPException(status_code=401, detail="Invalid ID token")

    if settings.REQUIRE_AUTH:
        raise HTTPException(status_code=401, detail="Authentication required")
    return user_id


def require_user_id(user_id: Optional[str]) -> str:
    if not user_id:
        raise HTTPException(status_code=400, detail="userId is required")
    return user_id
