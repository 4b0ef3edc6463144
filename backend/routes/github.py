# backend/routes/github.py
import logging
from typing import Optional
from urllib.parse import urlencode
from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import RedirectResponse
from backend.core.auth import get_user_id, require_user_id
from backend.core.config import settings
from backend.core.dependencies import get_github_oauth, get_store
from backend.services.chatbot_store import ChatbotStore
from backend.services.github_service import GitHubClient, GitHubOAuth

logger = logging.getLogger(__name__)

router = APIRouter()


def _frontend_redirect(**params) -> RedirectResponse:
    return RedirectResponse(f"{settings.FRONTEND_URL}?{urlencode(params)}")


@router.get("/login")
def github_login(
    user_id: Optional[str] = Depends(get_user_id),
    oauth: GitHubOAuth = Depends(get_github_oauth),
):
    user_id = require_user_id(user_id)
    if not oauth.client_id:
        logger.error("GitHub login requested but GITHUB_CLIENT_ID is not set")
        raise HTTPException(status_code=500, detail="GitHub OAuth is not configured")
    logger.info(f"Redirecting user {user_id} to GitHub authorization")
    return RedirectResponse(oauth.authorization_url(user_id))


@router.get("/callback")
def github_callback(
    code: Optional[str] = Query(None),
    state: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
    oauth: GitHubOAuth = Depends(get_github_oauth),
    store: ChatbotStore = Depends(get_store),
):
    if error:
        logger.warning(f"GitHub authorization was not granted: {error}")
        return _frontend_redirect(github="error", reason=error)
    if not code or not state:
        raise HTTPException(status_code=400, detail="Missing code or state")

    user_id = oauth.consume_state(state)
    if not user_id:
        raise HTTPException(status_code=400, detail="Invalid or expired state")

    try:
        token = oauth.exchange_code(code)
        username = GitHubClient(token).get_authenticated_user().get("login")
        store.save_github_credentials(user_id, token, username)
    except Exception as e:
        logger.error(f"GitHub callback failed for user {user_id}: {e}")
        return _frontend_redirect(github="error", reason="token_exchange_failed")

    logger.info(f"Connected GitHub account {username} for user {user_id}")
    return _frontend_redirect(github="connected")
