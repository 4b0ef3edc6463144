# backend/routes/chatbots.py
import logging
from typing import Optional
from fastapi import APIRouter, Depends
from backend.core.auth import get_user_id, require_user_id
from backend.core.dependencies import get_store
from backend.models.chatbot import ChatbotCreate
from backend.services.chatbot_store import ChatbotStore
from utils import ErrorHandler

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("")
def create_chatbot(
    chatbot: ChatbotCreate,
    user_id: Optional[str] = Depends(get_user_id),
    store: ChatbotStore = Depends(get_store),
):
    user_id = require_user_id(user_id)
    logger.info(f"Received request to create chatbot for user: {user_id}")
    try:
        chatbot_id = store.create_chatbot(user_id, chatbot)
    except Exception as e:
        raise ErrorHandler.handle_api_error("save chatbot", e)
    logger.info(f"Created chatbot {chatbot_id} for user: {user_id}")
    return {"id": chatbot_id}


@router.get("")
def list_chatbots(
    user_id: Optional[str] = Depends(get_user_id),
    store: ChatbotStore = Depends(get_store),
):
    user_id = require_user_id(user_id)
    logger.info(f"Received request to list chatbots for user: {user_id}")
    try:
        chatbots = store.list_chatbots(user_id)
    except Exception as e:
        raise ErrorHandler.handle_api_error("list chatbots", e)
    logger.info(f"Found {len(chatbots)} chatbots for user: {user_id}")
    return {
        "chatbots": [
            chatbot.summary(chatbot_id)
            for chatbot_id, chatbot in chatbots.items()
        ]
    }


@router.get("/{chatbot_id}")
def get_chatbot(
    chatbot_id: str,
    user_id: Optional[str] = Depends(get_user_id),
    store: ChatbotStore = Depends(get_store),
):
    logger.info(f"Received request to fetch chatbot: {chatbot_id}")
    try:
        chatbot = store.get_chatbot(chatbot_id, user_id)
    except Exception as e:
        raise ErrorHandler.handle_api_error("fetch chatbot", e, chatbot_id)
    return chatbot.summary(chatbot_id)
