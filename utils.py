import logging
import re
from typing import Optional
from fastapi import HTTPException

logger = logging.getLogger(__name__)

_SAFE_ID = re.compile(r"^[A-Za-z0-9_-]+$")


class ChatbotNotFoundError(Exception):
    """Raised when a chatbot configuration does not exist in the database."""

    def __init__(self, chatbot_id: str):
        super().__init__(f"Chatbot not found: {chatbot_id}")
        self.chatbot_id = chatbot_id


class TemplateNotFoundError(Exception):
    def __init__(self, template: str):
        super().__init__(f"Template not found: {template}")
        self.template = template


class InvalidIdentifierError(ValueError):
    pass


class UpstreamServiceError(Exception):
    """A third-party API (GitHub, Render, Firebase Auth) answered with an error."""

    def __init__(self, service: str, status_code: Optional[int], message: str):
        super().__init__(f"{service} error ({status_code}): {message}")
        self.service = service
        self.status_code = status_code
        self.message = message


class ErrorHandler:
    """Centralized error handling for the application."""

    @staticmethod
    def handle_api_error(operation: str, error: Exception, chatbot_id: Optional[str] = None) -> HTTPException:
        if isinstance(error, HTTPException):
            return error
        if isinstance(error, ChatbotNotFoundError):
            return HTTPException(status_code=404, detail="Chatbot not found")
        if isinstance(error, TemplateNotFoundError):
            return HTTPException(status_code=404, detail=str(error))
        if isinstance(error, InvalidIdentifierError):
            return HTTPException(status_code=400, detail=str(error))

        error_msg = f"Error during {operation}"
        if chatbot_id:
            error_msg += f" for chatbot {chatbot_id}"
        logger.error(f"{error_msg}: {str(error)}")

        if isinstance(error, UpstreamServiceError):
            return HTTPException(status_code=502, detail=error.message)
        return HTTPException(status_code=500, detail=f"Failed to {operation}")


def validate_identifier(value: str, kind: str = "chatbot id") -> str:
    """Ensure a value is usable as a single path segment."""
    if not value or not _SAFE_ID.match(value):
        raise InvalidIdentifierError(f"Invalid {kind}: {value!r}")
    return value
