"""
Tests for the chatbot builder HTTP API
"""

import io
import logging
import zipfile
from unittest.mock import MagicMock
from urllib.parse import parse_qs, urlparse

import pytest

from backend.core import dependencies, firebase
from backend.core.config import settings
from backend.services.github_service import GitHubOAuth
from chatbot_runtime.chat import ConfigurationError
from main import app
from utils import UpstreamServiceError


# ============ Base ============

def test_server_is_working(client):
    response = client.get("/api/test")
    assert response.status_code == 200
    assert response.json() == {"message": "Server is working!"}


def test_templates(client):
    response = client.get("/api/templates")
    assert response.json() == {"templates": ["classic", "minimal"]}


# ============ Chatbot configuration ============

def test_create_and_list_chatbots(client, database):
    response = client.post("/api/chatbots", params={"userId": "user2"}, json={
        "name": "Docs bot",
        "purpose": "support agent",
        "modelProvider": "openai",
        "template": "minimal",
        "apiKey": "sk-1234567890",
        "documentContent": "Some docs",
    })
    assert response.status_code == 200
    chatbot_id = response.json()["id"]
    assert database.data["users"]["user2"]["chatbots"][chatbot_id]["modelProvider"] == "openai"

    response = client.get("/api/chatbots", params={"userId": "user2"})
    chatbots = response.json()["chatbots"]
    assert len(chatbots) == 1
    assert chatbots[0]["id"] == chatbot_id
    assert chatbots[0]["apiKey"] == "*********7890"


def test_create_chatbot_requires_user(client):
    response = client.post("/api/chatbots", json={"template": "classic", "apiKey": "k"})
    assert response.status_code == 400


def test_create_chatbot_requires_template_and_key(client):
    response = client.post("/api/chatbots", params={"userId": "user1"}, json={"purpose": "x"})
    assert response.status_code == 422


def test_get_chatbot_masks_api_key(client):
    response = client.get("/api/chatbots/bot1", params={"userId": "user1"})
    assert response.status_code == 200
    data = response.json()
    assert data["purpose"] == "museum guide"
    assert "secret" not in data["apiKey"]


def test_chatbot_requests_are_logged(client, caplog):
    with caplog.at_level(logging.INFO, logger="backend.routes.chatbots"):
        client.get("/api/chatbots", params={"userId": "user1"})
        client.get("/api/chatbots/bot1", params={"userId": "user1"})
    assert "Received request to list chatbots for user: user1" in caplog.text
    assert "Found 1 chatbots for user: user1" in caplog.text
    assert "Received request to fetch chatbot: bot1" in caplog.text
    assert "secret-api-key" not in caplog.text


def test_bearer_token_resolves_user(client, monkeypatch):
    monkeypatch.setattr(firebase, "verify_id_token", lambda token: "user1")
    response = client.get("/api/chatbots", headers={"Authorization": "Bearer id-token"})
    assert [c["id"] for c in response.json()["chatbots"]] == ["bot1"]


def test_invalid_bearer_token(client, monkeypatch):
    def reject(token):
        raise ValueError("expired")
    monkeypatch.setattr(firebase, "verify_id_token", reject)
    response = client.get("/api/chatbots", headers={"Authorization": "Bearer bad"})
    assert response.status_code == 401


def test_require_auth_rejects_query_user(client, monkeypatch):
    monkeypatch.setattr(settings, "REQUIRE_AUTH", True)
    response = client.get("/api/chatbots", params={"userId": "user1"})
    assert response.status_code == 401


# ============ Generation & download ============

def test_generate_chatbot(client, generator):
    response = client.post("/api/generate-chatbot/bot1", params={"userId": "user1"})
    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["message"] == "Chatbot files generated successfully"
    assert data["outputPath"] == str(generator.output_dir / "bot1")
    assert (generator.output_dir / "bot1" / ".env").exists()


def test_generate_from_legacy_path(client):
    response = client.post("/api/generate-chatbot/legacy1")
    assert response.status_code == 200


def test_generate_missing_chatbot(client):
    response = client.post("/api/generate-chatbot/missing", params={"userId": "user1"})
    assert response.status_code == 404


def test_generate_unknown_template(client, database):
    database.data["users"]["user1"]["chatbots"]["bot1"]["template"] = "gone"
    response = client.post("/api/generate-chatbot/bot1", params={"userId": "user1"})
    assert response.status_code == 404
    assert "gone" in response.json()["detail"]


def test_download_requires_generated_files(client):
    response = client.get("/api/download/bot1")
    assert response.status_code == 404
    assert response.json() == {"detail": "Chatbot files not found"}


def test_download_after_generate(client):
    client.post("/api/generate-chatbot/bot1", params={"userId": "user1"})
    response = client.get("/api/download/bot1")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/zip"
    assert 'filename="chatbot-bot1.zip"' in response.headers["content-disposition"]
    with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
        assert ".env" in archive.namelist()


def test_download_chatbot_generates_on_the_fly(client):
    response = client.get("/api/download-chatbot/bot1", params={"userId": "user1"})
    assert response.status_code == 200
    with zipfile.ZipFile(io.BytesIO(response.content)) as archive:
        assert "public/index.html" in archive.namelist()


def test_download_rejects_path_traversal(client):
    response = client.get("/api/download-chatbot/..%2Fsecrets", params={"userId": "user1"})
    assert response.status_code in (400, 404)


# ============ Deployment ============

@pytest.fixture
def deployer():
    deployer = MagicMock()
    app.dependency_overrides[dependencies.get_deployer] = lambda: deployer
    return deployer


def test_deploy_chatbot(client, deployer):
    deployer.deploy.return_value = {"success": True, "repoUrl": "https://github.com/o/r"}
    response = client.post("/api/deploy-chatbot/bot1", params={"userId": "user1"})
    assert response.status_code == 200
    assert response.json()["repoUrl"] == "https://github.com/o/r"
    deployer.deploy.assert_called_once_with("bot1", "user1")


def test_deploy_requires_user(client, deployer):
    response = client.post("/api/deploy-chatbot/bot1")
    assert response.status_code == 400
    deployer.deploy.assert_not_called()


def test_deploy_upstream_failure_is_bad_gateway(client, deployer):
    deployer.deploy.side_effect = UpstreamServiceError("github", 422, "name already exists")
    response = client.post("/api/deploy-chatbot/bot1", params={"userId": "user1"})
    assert response.status_code == 502
    assert response.json()["detail"] == "name already exists"


def test_deploy_without_github_connection(client, store, generator):
    from backend.services.deploy_service import DeploymentService
    app.dependency_overrides[dependencies.get_deployer] = lambda: DeploymentService(
        store, generator, MagicMock())
    response = client.post("/api/deploy-chatbot/bot1", params={"userId": "user1"})
    assert response.status_code == 400
    assert response.json()["detail"] == "GitHub account not connected"


# ============ Preview chat ============

@pytest.fixture
def preview():
    preview = MagicMock()
    app.dependency_overrides[dependencies.get_preview] = lambda: preview
    return preview


def test_preview_chat(client, preview):
    preview.ask.return_value = "We open at 9am."
    response = client.post("/api/chat/bot1", params={"userId": "user1"},
                           json={"question": "When do you open?"})
    assert response.status_code == 200
    assert response.json() == {"response": "We open at 9am."}
    preview.ask.assert_called_once_with("bot1", "When do you open?", "user1")


def test_preview_chat_requires_question(client, preview):
    response = client.post("/api/chat/bot1", json={"question": "  "})
    assert response.status_code == 400
    preview.ask.assert_not_called()


def test_preview_chat_misconfigured_chatbot(client, preview):
    preview.ask.side_effect = ConfigurationError("DOCUMENT_CONTENT environment variable is required")
    response = client.post("/api/chat/bot1", params={"userId": "user1"},
                           json={"question": "hello"})
    assert response.status_code == 400
    assert response.json()["detail"] == "DOCUMENT_CONTENT environment variable is required"
    preview.evict.assert_called_once_with("bot1", "user1")


def test_preview_chat_unexpected_failure(client, preview):
    preview.ask.side_effect = RuntimeError("vector store unavailable")
    response = client.post("/api/chat/bot1", params={"userId": "user1"},
                           json={"question": "hello"})
    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to process the chat message"
    preview.evict.assert_not_called()


# ============ GitHub OAuth ============

@pytest.fixture
def oauth():
    oauth = GitHubOAuth("client-id", "secret", "http://testserver/api/github/callback")
    app.dependency_overrides[dependencies.get_github_oauth] = lambda: oauth
    return oauth


def test_github_login_redirects(client, oauth):
    response = client.get("/api/github/login", params={"userId": "user1"},
                          follow_redirects=False)
    assert response.status_code == 307
    location = response.headers["location"]
    assert location.startswith("https://github.com/login/oauth/authorize")
    state = parse_qs(urlparse(location).query)["state"][0]
    assert oauth.consume_state(state) == "user1"


def test_github_callback_stores_token(client, oauth, store, monkeypatch):
    state = parse_qs(urlparse(oauth.authorization_url("user1")).query)["state"][0]
    monkeypatch.setattr(oauth, "exchange_code", lambda code: "gho_new")

    github_client = MagicMock()
    github_client.return_value.get_authenticated_user.return_value = {"login": "octocat"}
    monkeypatch.setattr("backend.routes.github.GitHubClient", github_client)

    response = client.get("/api/github/callback", params={"code": "abc", "state": state},
                          follow_redirects=False)

    assert response.status_code == 307
    assert response.headers["location"].endswith("?github=connected")
    user = store.get_user("user1")
    assert user.github_token == "gho_new"
    assert user.github_username == "octocat"


def test_github_callback_rejects_unknown_state(client, oauth):
    response = client.get("/api/github/callback", params={"code": "abc", "state": "forged"},
                          follow_redirects=False)
    assert response.status_code == 400
