# backend/services/deploy_service.py
import hashlib
import logging
import re
from typing import Dict, Optional
import requests
from pydantic import BaseModel
from backend.services.chatbot_store import ChatbotStore
from backend.services.generator import ENV_FILENAME, ChatbotGenerator
from backend.services.github_service import GitHubClient, error_message
from utils import UpstreamServiceError

logger = logging.getLogger(__name__)

RENDER_API_URL = "https://api.render.com/v1"
BUILD_COMMAND = "pip install -r requirements.txt"
START_COMMAND = "uvicorn chatbot_runtime.server:app --host 0.0.0.0 --port $PORT"


class DeploymentResult(BaseModel):
    service_id: str
    dashboard_url: Optional[str] = None
    service_url: Optional[str] = None
    deploy_id: Optional[str] = None


class GitHubNotConnectedError(Exception):
    pass


def repository_name(chatbot_id: str) -> str:
    """Repo name for a chatbot.

    GitHub names are case-insensitive while push keys are not, so a short
    hash of the original id keeps ids differing only by case apart.
    """
    digest = hashlib.sha1(chatbot_id.encode("utf-8")).hexdigest()[:7]
    name = re.sub(r"[^a-z0-9._-]+", "-", f"chatbot-{chatbot_id}".lower()).strip("-.")
    return f"{name}-{digest}"


class RenderClient:
    """Creates web services on Render from a GitHub repository."""

    def __init__(self, api_key: str, owner_id: str, region: str = "oregon",
                 plan: str = "free", session: Optional[requests.Session] = None,
                 api_url: str = RENDER_API_URL):
        self.owner_id = owner_id
        self.region = region
        self.plan = plan
        self.api_url = api_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {api_key}",
            "Accept": "application/json",
        })

    def create_web_service(self, name: str, repo_url: str, branch: str,
                           env_vars: Dict[str, str]) -> DeploymentResult:
        payload = {
            "type": "web_service",
            "name": name,
            "ownerId": self.owner_id,
            "repo": repo_url,
            "branch": branch,
            "autoDeploy": "yes",
            "envVars": [
                {"key": key, "value": value}
                for key, value in env_vars.items()
            ],
            "serviceDetails": {
                "runtime": "python",
                "plan": self.plan,
                "region": self.region,
                "envSpecificDetails": {
                    "buildCommand": BUILD_COMMAND,
                    "startCommand": START_COMMAND,
                },
            },
        }
        response = self.session.post(
            f"{self.api_url}/services", json=payload, timeout=60)
        if not response.ok:
            message = error_message(response)
            logger.error(f"Render service creation failed: {response.status_code} {message}")
            raise UpstreamServiceError("render", response.status_code, message)

        data = response.json()
        service = data.get("service", data)
        details = service.get("serviceDetails") or {}
        return DeploymentResult(
            service_id=service["id"],
            dashboard_url=service.get("dashboardUrl"),
            service_url=details.get("url"),
            deploy_id=data.get("deployId"),
        )


class DeploymentService:
    """Pushes a generated chatbot to GitHub and deploys it on Render."""

    def __init__(self, store: ChatbotStore, generator: ChatbotGenerator,
                 render: RenderClient, github_factory=GitHubClient,
                 private_repos: bool = False):
        self.store = store
        self.generator = generator
        self.render = render
        self.github_factory = github_factory
        self.private_repos = private_repos

    def _ensure_repository(self, github, name: str, description: str) -> dict:
        try:
            repo = github.create_repository(
                name, private=self.private_repos, description=description)
        except UpstreamServiceError as e:
            if e.status_code != 422:
                raise
            owner = github.get_authenticated_user()["login"]
            logger.info(f"Repository {owner}/{name} already exists, reusing it")
            return github.get_repository(owner, name)
        logger.info(f"Created repository {repo['full_name']}")
        return repo

    def deploy(self, chatbot_id: str, user_id: str) -> dict:
        chatbot = self.store.get_chatbot(chatbot_id, user_id)
        user = self.store.get_user(user_id)
        if not user.github_token:
            raise GitHubNotConnectedError("GitHub account not connected")

        output_path = self.generator.generate(chatbot_id, chatbot)

        github = self.github_factory(user.github_token)
        repo = self._ensure_repository(
            github, repository_name(chatbot_id),
            chatbot.name or f"Chatbot {chatbot_id}")

        owner = repo["owner"]["login"]
        branch = repo.get("default_branch") or "main"
        commit_sha = github.push_directory(
            owner, repo["name"], output_path, branch=branch,
            message=f"Add chatbot {chatbot_id}", exclude=[ENV_FILENAME])

        deployment = self.render.create_web_service(
            name=repo["name"],
            repo_url=repo["html_url"],
            branch=branch,
            env_vars=chatbot.to_env(),
        )
        logger.info(f"Deployed chatbot {chatbot_id} as Render service {deployment.service_id}")

        return {
            "success": True,
            "repoUrl": repo["html_url"],
            "commitSha": commit_sha,
            "serviceId": deployment.service_id,
            "serviceUrl": deployment.service_url,
            "dashboardUrl": deployment.dashboard_url,
            "deployId": deployment.deploy_id,
        }
