import copy
import json

import pytest
import requests
from fastapi.testclient import TestClient

from backend.core import dependencies
from backend.models.chatbot import ChatbotConfig
from backend.services.chatbot_store import ChatbotStore
from backend.services.generator import ChatbotGenerator
from main import app


class FakeDatabase:
    """In-memory stand-in for the Realtime Database reference API."""

    def __init__(self, data=None):
        self.data = data or {}
        self.push_count = 0

    def reference(self, path):
        return FakeReference(self, path)


class FakeReference:
    def __init__(self, database, path):
        self.database = database
        self.parts = [part for part in path.split("/") if part]
        self.key = self.parts[-1] if self.parts else None

    def _node(self, create=False):
        node = self.database.data
        for part in self.parts:
            if part not in node:
                if not create:
                    return None
                node[part] = {}
            node = node[part]
        return node

    def get(self):
        return copy.deepcopy(self._node())

    def set(self, value):
        parent = FakeReference(self.database, "/".join(self.parts[:-1]))._node(create=True)
        parent[self.key] = copy.deepcopy(value)

    def update(self, value):
        self._node(create=True).update(copy.deepcopy(value))

    def push(self, value=""):
        self.database.push_count += 1
        child = FakeReference(
            self.database, "/".join(self.parts + [f"-Nkey{self.database.push_count:04d}"]))
        child.set(value)
        return child


CHATBOT_RECORD = {
    "name": "Museum helper",
    "purpose": "museum guide",
    "model": "gemini-2.0-flash",
    "modelProvider": "google",
    "documentType": "text",
    "documentContent": "The museum opens at 9am.\nTickets cost \"10\" euros.",
    "template": "classic",
    "apiKey": "secret-api-key-1234",
    "embeddingModel": "text-embedding-004",
}


@pytest.fixture
def chatbot_record():
    return copy.deepcopy(CHATBOT_RECORD)


@pytest.fixture
def chatbot_config(chatbot_record):
    return ChatbotConfig.model_validate(chatbot_record)


@pytest.fixture
def database(chatbot_record):
    return FakeDatabase({
        "users": {
            "user1": {
                "chatbots": {"bot1": chatbot_record},
            },
        },
        "chatbots": {"legacy1": chatbot_record},
    })


@pytest.fixture
def store(database):
    return ChatbotStore(reference=database.reference)


@pytest.fixture
def project_dirs(tmp_path):
    templates = tmp_path / "templates"
    (templates / "classic" / "public").mkdir(parents=True)
    (templates / "classic" / "public" / "index.html").write_text("<html>classic</html>")
    (templates / "classic" / "README.md").write_text("template readme")
    (templates / "minimal").mkdir()
    (templates / "minimal" / "index.html").write_text("<html>minimal</html>")

    main_content = tmp_path / "main_content"
    main_content.mkdir()
    (main_content / "requirements.txt").write_text("fastapi\n")
    (main_content / "README.md").write_text("runtime readme")

    runtime = tmp_path / "chatbot_runtime"
    (runtime / "__pycache__").mkdir(parents=True)
    (runtime / "chat.py").write_text("# chat\n")
    (runtime / "server.py").write_text("# server\n")
    (runtime / "__pycache__" / "chat.cpython-312.pyc").write_bytes(b"\x00")

    return {
        "templates_dir": templates,
        "main_content_dir": main_content,
        "runtime_dir": runtime,
        "output_dir": tmp_path / "output",
    }


@pytest.fixture
def generator(project_dirs):
    return ChatbotGenerator(**project_dirs)


@pytest.fixture
def make_response():
    def _make_response(status_code=200, json_data=None, headers=None):
        response = requests.Response()
        response.status_code = status_code
        response._content = json.dumps(json_data).encode() if json_data is not None else b""
        response.headers.update(headers or {})
        return response
    return _make_response


@pytest.fixture
def client(store, generator):
    """Test client with the database and filesystem swapped for fakes"""
    app.dependency_overrides[dependencies.get_store] = lambda: store
    app.dependency_overrides[dependencies.get_generator] = lambda: generator
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
