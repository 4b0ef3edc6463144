import os
import requests

IDENTITY_TOOLKIT_URL = "https://identitytoolkit.googleapis.com/v1"


class AuthError(Exception):
    pass


class AuthClient:
    """Email/password sign-in against Firebase Authentication's REST API."""

    def __init__(self, api_key: str = None):
        self.api_key = api_key or os.getenv("FIREBASE_WEB_API_KEY", "")

    def _post(self, endpoint: str, payload: dict) -> dict:
        response = requests.post(
            f"{IDENTITY_TOOLKIT_URL}/accounts:{endpoint}",
            params={"key": self.api_key},
            json=payload,
            timeout=30,
        )
        data = response.json()
        if not response.ok:
            raise AuthError(data.get("error", {}).get("message", "Authentication failed"))
        return {
            "user_id": data["localId"],
            "id_token": data["idToken"],
            "email": data.get("email"),
        }

    def sign_in(self, email: str, password: str) -> dict:
        return self._post("signInWithPassword", {
            "email": email,
            "password": password,
            "returnSecureToken": True,
        })

    def sign_up(self, email: str, password: str) -> dict:
        return self._post("signUp", {
            "email": email,
            "password": password,
            "returnSecureToken": True,
        })

    def send_password_reset(self, email: str) -> None:
        response = requests.post(
            f"{IDENTITY_TOOLKIT_URL}/accounts:sendOobCode",
            params={"key": self.api_key},
            json={"requestType": "PASSWORD_RESET", "email": email},
            timeout=30,
        )
        if not response.ok:
            raise AuthError(response.json().get("error", {}).get("message", "Reset failed"))
