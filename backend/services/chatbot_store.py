# backend/services/chatbot_store.py
import logging
from typing import Callable, Dict, Optional
from pydantic import ValidationError
from backend.core import firebase
from backend.models.chatbot import ChatbotConfig, ChatbotCreate
from backend.models.user import UserRecord
from utils import ChatbotNotFoundError, validate_identifier

logger = logging.getLogger(__name__)

SERVER_TIMESTAMP = {".sv": "timestamp"}


class ChatbotStore:
    """Reads and writes chatbot configurations in the Realtime Database."""

    def __init__(self, reference: Optional[Callable] = None):
        self._reference = reference or firebase.get_reference

    @staticmethod
    def _chatbot_path(chatbot_id: str, user_id: Optional[str] = None) -> str:
        if user_id:
            return f"users/{user_id}/chatbots/{chatbot_id}"
        return f"chatbots/{chatbot_id}"

    def create_chatbot(self, user_id: str, chatbot: ChatbotCreate) -> str:
        validate_identifier(user_id, "user id")
        record = chatbot.model_dump(by_alias=True)
        record["createdAt"] = SERVER_TIMESTAMP
        ref = self._reference(f"users/{user_id}/chatbots").push(record)
        logger.info(f"Created chatbot {ref.key} for user {user_id}")
        return ref.key

    def list_chatbots(self, user_id: str) -> Dict[str, ChatbotConfig]:
        validate_identifier(user_id, "user id")
        records = self._reference(f"users/{user_id}/chatbots").get() or {}
        chatbots = {}
        for chatbot_id, record in records.items():
            try:
                chatbots[chatbot_id] = ChatbotConfig.model_validate(record)
            except ValidationError as e:
                logger.warning(f"Skipping malformed chatbot {chatbot_id}: {e}")
        return chatbots

    def get_chatbot(self, chatbot_id: str, user_id: Optional[str] = None) -> ChatbotConfig:
        validate_identifier(chatbot_id)
        if user_id:
            validate_identifier(user_id, "user id")
        path = self._chatbot_path(chatbot_id, user_id)
        logger.info(f"Fetching chatbot data from {path}")
        record = self._reference(path).get()
        if not record:
            logger.error(f"Chatbot record not found at {path}")
            raise ChatbotNotFoundError(chatbot_id)
        try:
            return ChatbotConfig.model_validate(record)
        except ValidationError as e:
            logger.error(f"Chatbot record at {path} is incomplete: {e}")
            raise ChatbotNotFoundError(chatbot_id) from e

    def get_user(self, user_id: str) -> UserRecord:
        validate_identifier(user_id, "user id")
        record = self._reference(f"users/{user_id}").get() or {}
        return UserRecord.model_validate(record)

    def save_github_credentials(self, user_id: str, token: str, username: Optional[str]) -> None:
        validate_identifier(user_id, "user id")
        self._reference(f"users/{user_id}").update({
            "githubToken": token,
            "githubUsername": username,
        })
        logger.info(f"Stored GitHub credentials for user {user_id}")
