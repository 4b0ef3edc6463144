import os
from typing import Optional
import requests
import streamlit as st

DEFAULT_API_URL = os.getenv("BUILDER_API_URL", "http://localhost:3000")


class APIClient:
    def __init__(self, base_url: str = DEFAULT_API_URL,
                 user_id: Optional[str] = None, id_token: Optional[str] = None):
        self.base_url = base_url.rstrip("/")
        self.user_id = user_id
        self.id_token = id_token

    def _params(self) -> dict:
        return {"userId": self.user_id} if self.user_id else {}

    def _headers(self) -> dict:
        if self.id_token:
            return {"Authorization": f"Bearer {self.id_token}"}
        return {}

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        return requests.request(
            method,
            f"{self.base_url}{path}",
            params=self._params(),
            headers=self._headers(),
            timeout=120,
            **kwargs
        )

    @staticmethod
    def _detail(response: requests.Response) -> str:
        try:
            return response.json().get("detail", response.text)
        except ValueError:
            return response.text

    def fetch_templates(self) -> list:
        """Fetch the available chatbot templates."""
        try:
            response = self._request("GET", "/api/templates")
            if response.status_code == 200:
                return response.json().get("templates", [])
            return []
        except Exception as e:
            st.error(f"Error fetching templates: {e}")
            return []

    def fetch_chatbots(self) -> list:
        """Fetch the signed-in user's chatbots."""
        try:
            response = self._request("GET", "/api/chatbots")
            if response.status_code == 200:
                return response.json().get("chatbots", [])
            return []
        except Exception as e:
            st.error(f"Error fetching chatbots: {e}")
            return []

    def create_chatbot(self, chatbot: dict) -> Optional[str]:
        try:
            response = self._request("POST", "/api/chatbots", json=chatbot)
            if response.ok:
                return response.json()["id"]
            st.error(f"Error saving chatbot: {self._detail(response)}")
            return None
        except Exception as e:
            st.error(f"Error saving chatbot: {e}")
            return None

    def generate_chatbot(self, chatbot_id: str) -> Optional[dict]:
        try:
            response = self._request(
                "POST", f"/api/generate-chatbot/{chatbot_id}")
            if response.ok:
                return response.json()
            st.error(f"Error generating chatbot: {self._detail(response)}")
            return None
        except Exception as e:
            st.error(f"Error generating chatbot: {e}")
            return None

    def download_chatbot(self, chatbot_id: str) -> Optional[bytes]:
        """Build the chatbot and return its zip archive."""
        try:
            response = self._request(
                "GET", f"/api/download-chatbot/{chatbot_id}")
            if response.ok:
                return response.content
            st.error(f"Error downloading chatbot: {self._detail(response)}")
            return None
        except Exception as e:
            st.error(f"Error downloading chatbot: {e}")
            return None

    def deploy_chatbot(self, chatbot_id: str) -> Optional[dict]:
        try:
            response = self._request(
                "POST", f"/api/deploy-chatbot/{chatbot_id}")
            if response.ok:
                return response.json()
            st.error(f"Error deploying chatbot: {self._detail(response)}")
            return None
        except Exception as e:
            st.error(f"Error deploying chatbot: {e}")
            return None

    def github_login_url(self) -> Optional[str]:
        """Authorization URL the browser must open to connect GitHub."""
        try:
            response = self._request(
                "GET", "/api/github/login", allow_redirects=False)
            if response.is_redirect:
                return response.headers["Location"]
            st.error(f"Error connecting GitHub: {self._detail(response)}")
            return None
        except Exception as e:
            st.error(f"Error connecting GitHub: {e}")
            return None

    def send_message(self, chatbot_id: str, message: str):
        try:
            response = self._request(
                "POST", f"/api/chat/{chatbot_id}", json={"question": message})
            return response.json() if response.ok else None
        except Exception as e:
            st.error(f"Error sending message: {e}")
            return None
