# backend/services/generator.py
import logging
import shutil
from pathlib import Path
from typing import Dict, List
from backend.models.chatbot import ChatbotConfig
from utils import TemplateNotFoundError, validate_identifier

logger = logging.getLogger(__name__)

ENV_FILENAME = ".env"
RUNTIME_PACKAGE = "chatbot_runtime"
_IGNORED = shutil.ignore_patterns("__pycache__", "*.pyc", ".pytest_cache")


def escape_env_value(value: str) -> str:
    """Double-quote a value so multi-line text survives a dotenv parser."""
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\r", "\\r")
        .replace("\n", "\\n")
    )
    return f'"{escaped}"'


def render_env(values: Dict[str, str]) -> str:
    return "".join(
        f"{key}={escape_env_value(value or '')}\n"
        for key, value in values.items()
    )


class ChatbotGenerator:
    """Materializes a runnable chatbot project from a template and a config."""

    def __init__(self, templates_dir: Path, main_content_dir: Path,
                 runtime_dir: Path, output_dir: Path):
        self.templates_dir = Path(templates_dir).resolve()
        self.main_content_dir = Path(main_content_dir).resolve()
        self.runtime_dir = Path(runtime_dir).resolve()
        self.output_dir = Path(output_dir).resolve()

    def list_templates(self) -> List[str]:
        if not self.templates_dir.is_dir():
            return []
        return sorted(
            entry.name for entry in self.templates_dir.iterdir()
            if entry.is_dir() and not entry.name.startswith(".")
        )

    def output_path(self, chatbot_id: str) -> Path:
        return self.output_dir / validate_identifier(chatbot_id)

    def template_path(self, template: str) -> Path:
        path = (self.templates_dir / template).resolve()
        if path.parent != self.templates_dir or not path.is_dir():
            raise TemplateNotFoundError(template)
        return path

    def generate(self, chatbot_id: str, chatbot: ChatbotConfig) -> Path:
        output_path = self.output_path(chatbot_id)
        template_path = self.template_path(chatbot.template)

        if output_path.exists():
            shutil.rmtree(output_path)
        output_path.mkdir(parents=True)
        logger.info(f"Created output directory: {output_path}")

        shutil.copytree(template_path, output_path,
                        dirs_exist_ok=True, ignore=_IGNORED)
        logger.info(f"Copied template files from: {template_path}")

        shutil.copytree(self.main_content_dir, output_path,
                        dirs_exist_ok=True, ignore=_IGNORED)
        logger.info(f"Copied main-content files from: {self.main_content_dir}")

        shutil.copytree(self.runtime_dir, output_path / RUNTIME_PACKAGE,
                        dirs_exist_ok=True, ignore=_IGNORED)

        (output_path / ENV_FILENAME).write_text(
            render_env(chatbot.to_env()), encoding="utf-8")
        logger.info(f"Created {ENV_FILENAME} file for chatbot {chatbot_id}")

        return output_path
