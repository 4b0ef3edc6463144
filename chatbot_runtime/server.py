# chatbot_runtime/server.py
import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from dotenv import load_dotenv
from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from chatbot_runtime.chat import ChatService, get_chat_service

PROJECT_DIR = Path(__file__).resolve().parent.parent
PUBLIC_DIR = PROJECT_DIR / "public"

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def _default_service() -> ChatService:
    load_dotenv(PROJECT_DIR / ".env", interpolate=False)
    return get_chat_service()


def create_app(service_factory: Callable[[], ChatService] = _default_service) -> FastAPI:
    app = FastAPI(title="Chatbot")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.post("/query")
    def query(payload: Optional[Dict[str, Any]] = Body(None)):
        question = (payload or {}).get("question")
        if not question or not isinstance(question, str):
            raise HTTPException(status_code=400, detail="Question is required")
        try:
            response = service_factory().process_user_message(question)
        except Exception as e:
            logger.error(f"Error processing query: {e}")
            raise HTTPException(
                status_code=500, detail=str(e) or "Internal server error")
        return {"response": response}

    if PUBLIC_DIR.is_dir():
        app.mount("/", StaticFiles(directory=PUBLIC_DIR, html=True), name="public")

    return app


app = create_app()
