# backend/services/preview_service.py
import logging
import threading
from typing import Dict, Optional, Tuple
from chatbot_runtime.chat import ChatService, RuntimeConfig
from backend.services.chatbot_store import ChatbotStore

logger = logging.getLogger(__name__)


class PreviewService:
    """Runs a stored chatbot in-process so it can be tried before deploying."""

    def __init__(self, store: ChatbotStore, service_factory=ChatService):
        self.store = store
        self.service_factory = service_factory
        self.services: Dict[Tuple[Optional[str], str], ChatService] = {}
        self._lock = threading.Lock()

    def get_service(self, chatbot_id: str, user_id: Optional[str] = None) -> ChatService:
        key = (user_id, chatbot_id)
        with self._lock:
            service = self.services.get(key)
        if service is not None:
            return service

        chatbot = self.store.get_chatbot(chatbot_id, user_id)
        config = RuntimeConfig.from_env(chatbot.to_env())
        with self._lock:
            service = self.services.setdefault(key, self.service_factory(config))
        logger.info(f"Preview chat service ready for chatbot {chatbot_id}")
        return service

    def ask(self, chatbot_id: str, question: str, user_id: Optional[str] = None) -> str:
        return self.get_service(chatbot_id, user_id).process_user_message(question)

    def evict(self, chatbot_id: str, user_id: Optional[str] = None) -> None:
        with self._lock:
            self.services.pop((user_id, chatbot_id), None)
