# backend/models/chatbot.py
from typing import Any, Dict, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ChatbotBase(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        protected_namespaces=(),
        extra="ignore",
    )

    name: str = ""
    purpose: str = ""
    model: str = ""
    model_provider: str = "google"
    document_type: str = "text"
    document_content: str = ""
    embedding_model: str = ""


class ChatbotCreate(ChatbotBase):
    template: str = Field(..., min_length=1)
    api_key: str = Field(..., min_length=1)


class ChatbotConfig(ChatbotCreate):
    created_at: Optional[Any] = None

    def to_record(self) -> Dict[str, Any]:
        """Database representation (camelCase keys)."""
        return self.model_dump(by_alias=True, exclude={"created_at"})

    def to_env(self) -> Dict[str, str]:
        return {
            "API_KEY": self.api_key,
            "MODEL": self.model,
            "MODEL_PROVIDER": self.model_provider,
            "PURPOSE": self.purpose,
            "DOCUMENT_TYPE": self.document_type,
            "DOCUMENT_CONTENT": self.document_content,
            "EMBEDDING_MODEL": self.embedding_model,
        }

    def summary(self, chatbot_id: str) -> Dict[str, Any]:
        """Public view of a chatbot with the API key masked."""
        data = self.model_dump(by_alias=True, exclude={"api_key"})
        data["id"] = chatbot_id
        data["apiKey"] = mask_secret(self.api_key)
        return data


class ChatRequest(BaseModel):
    question: Optional[str] = None


def mask_secret(value: str) -> str:
    if len(value) <= 4:
        return "*" * len(value)
    return "*" * (len(value) - 4) + value[-4:]
