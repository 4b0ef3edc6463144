# backend/routes/chat.py
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException
from chatbot_runtime.chat import ConfigurationError
from backend.core.auth import get_user_id
from backend.core.dependencies import get_preview
from backend.models.chatbot import ChatRequest
from backend.services.preview_service import PreviewService
from utils import ErrorHandler

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/{chatbot_id}")
def chat(
    chatbot_id: str,
    request: ChatRequest,
    user_id: Optional[str] = Depends(get_user_id),
    preview: PreviewService = Depends(get_preview),
):
    if not request.question or not request.question.strip():
        raise HTTPException(status_code=400, detail="Question is required")

    logger.info(f"Received preview question for chatbot: {chatbot_id}")
    try:
        response = preview.ask(chatbot_id, request.question, user_id)
    except ConfigurationError as e:
        logger.warning(f"Chatbot {chatbot_id} is misconfigured: {e}")
        preview.evict(chatbot_id, user_id)
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise ErrorHandler.handle_api_error("process the chat message", e, chatbot_id)

    return {"response": response}
