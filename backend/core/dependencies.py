# backend/core/dependencies.py
from functools import lru_cache
from backend.core.config import settings
from backend.services.chatbot_store import ChatbotStore
from backend.services.deploy_service import DeploymentService, RenderClient
from backend.services.generator import ChatbotGenerator
from backend.services.github_service import GitHubOAuth
from backend.services.preview_service import PreviewService


@lru_cache
def get_store() -> ChatbotStore:
    return ChatbotStore()


@lru_cache
def get_generator() -> ChatbotGenerator:
    return ChatbotGenerator(
        templates_dir=settings.TEMPLATES_DIR,
        main_content_dir=settings.MAIN_CONTENT_DIR,
        runtime_dir=settings.RUNTIME_DIR,
        output_dir=settings.OUTPUT_DIR,
    )


@lru_cache
def get_github_oauth() -> GitHubOAuth:
    return GitHubOAuth(
        client_id=settings.GITHUB_CLIENT_ID,
        client_secret=settings.GITHUB_CLIENT_SECRET,
        redirect_uri=settings.GITHUB_REDIRECT_URI,
    )


@lru_cache
def get_deployer() -> DeploymentService:
    render = RenderClient(
        api_key=settings.RENDER_API_KEY,
        owner_id=settings.RENDER_OWNER_ID,
        region=settings.RENDER_REGION,
        plan=settings.RENDER_PLAN,
    )
    return DeploymentService(
        get_store(), get_generator(), render,
        private_repos=settings.GITHUB_PRIVATE_REPOS)


@lru_cache
def get_preview() -> PreviewService:
    return PreviewService(get_store())
