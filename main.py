import logging
import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from backend.core.config import settings
from backend.routes import base, chat, chatbots, deploy, generation, github

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Chatbot Builder",
    description="API for generating, packaging and deploying RAG chatbots"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# Include routers with proper prefixes
app.include_router(base.router, prefix="/api")
app.include_router(chatbots.router, prefix="/api/chatbots")
app.include_router(generation.router, prefix="/api")
app.include_router(deploy.router, prefix="/api")
app.include_router(chat.router, prefix="/api/chat")
app.include_router(github.router, prefix="/api/github")


if __name__ == "__main__":
    logger.info(f"Server running on port {settings.PORT}")
    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
