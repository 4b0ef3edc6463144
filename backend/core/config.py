# backend/core/config.py
import os
from pathlib import Path
from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent.parent.parent


def _env_path(name: str, default: Path) -> Path:
    value = os.getenv(name)
    return Path(value).resolve() if value else default


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings:
    def __init__(self):
        load_dotenv()
        self.TEMPLATES_DIR = _env_path("TEMPLATES_DIR", BASE_DIR / "templates")
        self.MAIN_CONTENT_DIR = _env_path(
            "MAIN_CONTENT_DIR", BASE_DIR / "main_content")
        self.RUNTIME_DIR = _env_path(
            "RUNTIME_DIR", BASE_DIR / "chatbot_runtime")
        self.OUTPUT_DIR = _env_path("OUTPUT_DIR", BASE_DIR / "output")

        # Firebase
        self.FIREBASE_CREDENTIALS = os.getenv(
            "FIREBASE_CREDENTIALS", str(BASE_DIR / "serviceAccountKey.json"))
        self.FIREBASE_DATABASE_URL = os.getenv("FIREBASE_DATABASE_URL", "")
        self.REQUIRE_AUTH = _env_flag("REQUIRE_AUTH")

        # HTTP
        self.CORS_ORIGINS = [
            origin.strip()
            for origin in os.getenv("CORS_ORIGINS", "*").split(",")
            if origin.strip()
        ]
        self.PORT = int(os.getenv("PORT", "3000"))
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:8501")

        # GitHub OAuth app
        self.GITHUB_CLIENT_ID = os.getenv("GITHUB_CLIENT_ID", "")
        self.GITHUB_CLIENT_SECRET = os.getenv("GITHUB_CLIENT_SECRET", "")
        self.GITHUB_REDIRECT_URI = os.getenv(
            "GITHUB_REDIRECT_URI", "http://localhost:3000/api/github/callback")
        # Render only builds private repos its GitHub app can read
        self.GITHUB_PRIVATE_REPOS = _env_flag("GITHUB_PRIVATE_REPOS")

        # Render
        self.RENDER_API_KEY = os.getenv("RENDER_API_KEY", "")
        self.RENDER_OWNER_ID = os.getenv("RENDER_OWNER_ID", "")
        self.RENDER_REGION = os.getenv("RENDER_REGION", "oregon")
        self.RENDER_PLAN = os.getenv("RENDER_PLAN", "free")


settings = Settings()
