# backend/routes/generation.py
import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Response
from backend.core.auth import get_user_id
from backend.core.dependencies import get_generator, get_store
from backend.services.archive_service import archive_filename, zip_directory
from backend.services.chatbot_store import ChatbotStore
from backend.services.generator import ChatbotGenerator
from utils import ErrorHandler

logger = logging.getLogger(__name__)

router = APIRouter()


def _zip_response(chatbot_id: str, content: bytes) -> Response:
    return Response(
        content=content,
        media_type="application/zip",
        headers={
            "Content-Disposition": f'attachment; filename="{archive_filename(chatbot_id)}"'
        },
    )


@router.post("/generate-chatbot/{chatbot_id}")
def generate_chatbot(
    chatbot_id: str,
    user_id: Optional[str] = Depends(get_user_id),
    store: ChatbotStore = Depends(get_store),
    generator: ChatbotGenerator = Depends(get_generator),
):
    logger.info(f"Received request to generate chatbot: {chatbot_id}")
    try:
        chatbot = store.get_chatbot(chatbot_id, user_id)
        output_path = generator.generate(chatbot_id, chatbot)
    except Exception as e:
        raise ErrorHandler.handle_api_error("generate chatbot", e, chatbot_id)

    logger.info(f"Successfully generated files for chatbot: {chatbot_id}")
    return {
        "success": True,
        "message": "Chatbot files generated successfully",
        "outputPath": str(output_path),
    }


@router.get("/download/{chatbot_id}")
def download(
    chatbot_id: str,
    generator: ChatbotGenerator = Depends(get_generator),
):
    logger.info(f"Received request to download chatbot: {chatbot_id}")
    try:
        output_path = generator.output_path(chatbot_id)
    except Exception as e:
        raise ErrorHandler.handle_api_error("download chatbot", e, chatbot_id)

    if not output_path.is_dir():
        logger.error(f"Chatbot files not found: {chatbot_id}")
        raise HTTPException(status_code=404, detail="Chatbot files not found")

    try:
        content = zip_directory(output_path)
    except Exception as e:
        raise ErrorHandler.handle_api_error("create zip file", e, chatbot_id)
    return _zip_response(chatbot_id, content)


@router.get("/download-chatbot/{chatbot_id}")
def download_chatbot(
    chatbot_id: str,
    user_id: Optional[str] = Depends(get_user_id),
    store: ChatbotStore = Depends(get_store),
    generator: ChatbotGenerator = Depends(get_generator),
):
    logger.info(f"Received request to build and download chatbot: {chatbot_id}")
    try:
        chatbot = store.get_chatbot(chatbot_id, user_id)
        output_path = generator.generate(chatbot_id, chatbot)
        content = zip_directory(output_path)
    except Exception as e:
        raise ErrorHandler.handle_api_error("download chatbot", e, chatbot_id)
    return _zip_response(chatbot_id, content)
