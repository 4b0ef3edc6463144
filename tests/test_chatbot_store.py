"""
Tests for the Realtime Database chatbot store
"""

import pytest

from backend.models.chatbot import ChatbotCreate
from utils import ChatbotNotFoundError, InvalidIdentifierError


def test_get_chatbot_from_user_path(store):
    chatbot = store.get_chatbot("bot1", "user1")
    assert chatbot.purpose == "museum guide"
    assert chatbot.api_key == "secret-api-key-1234"
    assert chatbot.model_provider == "google"


def test_get_chatbot_without_user_reads_legacy_path(store):
    chatbot = store.get_chatbot("legacy1")
    assert chatbot.template == "classic"

    with pytest.raises(ChatbotNotFoundError):
        store.get_chatbot("bot1")


def test_get_missing_chatbot(store):
    with pytest.raises(ChatbotNotFoundError):
        store.get_chatbot("nope", "user1")


def test_incomplete_record_is_not_found(database, store):
    database.data["users"]["user1"]["chatbots"]["broken"] = {"purpose": "x"}
    with pytest.raises(ChatbotNotFoundError):
        store.get_chatbot("broken", "user1")


def test_unsafe_identifiers_rejected(store):
    with pytest.raises(InvalidIdentifierError):
        store.get_chatbot("../secrets", "user1")
    with pytest.raises(InvalidIdentifierError):
        store.get_chatbot("bot1", "user1/chatbots")


def test_create_chatbot_pushes_with_server_timestamp(database, store):
    chatbot = ChatbotCreate(template="minimal", api_key="k", document_content="doc")
    chatbot_id = store.create_chatbot("user2", chatbot)

    record = database.data["users"]["user2"]["chatbots"][chatbot_id]
    assert record["template"] == "minimal"
    assert record["apiKey"] == "k"
    assert record["documentContent"] == "doc"
    assert record["createdAt"] == {".sv": "timestamp"}


def test_list_chatbots_skips_malformed(database, store):
    database.data["users"]["user1"]["chatbots"]["broken"] = {"name": "no template"}
    chatbots = store.list_chatbots("user1")
    assert list(chatbots) == ["bot1"]
    assert store.list_chatbots("nobody") == {}


def test_github_credentials_round_trip(store):
    assert store.get_user("user1").github_token is None

    store.save_github_credentials("user1", "gho_token", "octocat")
    user = store.get_user("user1")
    assert user.github_token == "gho_token"
    assert user.github_username == "octocat"
    # chatbots stay untouched
    assert store.get_chatbot("bot1", "user1").name == "Museum helper"
