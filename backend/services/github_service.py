# backend/services/github_service.py
import base64
import logging
import os
import secrets
import threading
import time
from pathlib import Path
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple
from urllib.parse import urlencode
import requests
from utils import UpstreamServiceError

logger = logging.getLogger(__name__)

GITHUB_API_URL = "https://api.github.com"
GITHUB_AUTHORIZE_URL = "https://github.com/login/oauth/authorize"
GITHUB_TOKEN_URL = "https://github.com/login/oauth/access_token"
OAUTH_SCOPE = "repo"
STATE_TTL_SECONDS = 600
SKIPPED_DIRS = {".git", "__pycache__", ".pytest_cache"}


class TreeFile(NamedTuple):
    path: str
    mode: str
    content: bytes


def build_tree_entries(directory: Path, exclude: Iterable[str] = ()) -> List[TreeFile]:
    """Walk a directory into Git tree entries with POSIX paths relative to it."""
    directory = Path(directory)
    excluded = set(exclude)
    entries = []
    for root, dirs, files in os.walk(directory):
        dirs[:] = sorted(d for d in dirs if d not in SKIPPED_DIRS | excluded)
        for name in sorted(files):
            if name in excluded or name.endswith(".pyc"):
                continue
            file_path = Path(root) / name
            mode = "100755" if os.access(file_path, os.X_OK) else "100644"
            entries.append(TreeFile(
                path=file_path.relative_to(directory).as_posix(),
                mode=mode,
                content=file_path.read_bytes(),
            ))
    return entries


def error_message(response: requests.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text or response.reason
    if isinstance(data, dict):
        return data.get("message") or data.get("error_description") or str(data)
    return str(data)


class GitHubOAuth:
    """OAuth web flow for connecting a user's GitHub account.

    Each user holds at most one pending state, and states older than
    ``state_ttl`` seconds are dropped.
    """

    def __init__(self, client_id: str, client_secret: str, redirect_uri: str,
                 session: Optional[requests.Session] = None,
                 state_ttl: float = STATE_TTL_SECONDS, clock=time.monotonic):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.session = session or requests.Session()
        self.state_ttl = state_ttl
        self._clock = clock
        self._pending: Dict[str, Tuple[str, float]] = {}
        self._lock = threading.Lock()

    def _purge_expired(self, now: float) -> None:
        expired = [
            state for state, (_, issued_at) in self._pending.items()
            if now - issued_at > self.state_ttl
        ]
        for state in expired:
            del self._pending[state]

    def authorization_url(self, user_id: str) -> str:
        now = self._clock()
        with self._lock:
            self._purge_expired(now)
            state = next(
                (s for s, (owner, _) in self._pending.items() if owner == user_id),
                None,
            )
            if state is None:
                state = secrets.token_urlsafe(24)
                self._pending[state] = (user_id, now)
        query = urlencode({
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": OAUTH_SCOPE,
            "state": state,
        })
        return f"{GITHUB_AUTHORIZE_URL}?{query}"

    def consume_state(self, state: str) -> Optional[str]:
        with self._lock:
            self._purge_expired(self._clock())
            entry = self._pending.pop(state, None)
        return entry[0] if entry else None

    def exchange_code(self, code: str) -> str:
        response = self.session.post(
            GITHUB_TOKEN_URL,
            data={
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "code": code,
                "redirect_uri": self.redirect_uri,
            },
            headers={"Accept": "application/json"},
            timeout=30,
        )
        if not response.ok:
            raise UpstreamServiceError(
                "github", response.status_code, error_message(response))
        data = response.json()
        if "access_token" not in data:
            raise UpstreamServiceError(
                "github", response.status_code,
                data.get("error_description") or data.get("error") or "No access token returned")
        return data["access_token"]


class GitHubClient:
    """Minimal GitHub REST client for creating and populating repositories."""

    def __init__(self, token: str, session: Optional[requests.Session] = None,
                 api_url: str = GITHUB_API_URL):
        self.api_url = api_url.rstrip("/")
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        })

    def _request(self, method: str, path: str, **kwargs) -> dict:
        response = self.session.request(
            method, f"{self.api_url}{path}", timeout=30, **kwargs)
        if not response.ok:
            message = error_message(response)
            logger.error(f"GitHub {method} {path} failed: {response.status_code} {message}")
            raise UpstreamServiceError("github", response.status_code, message)
        return response.json() if response.content else {}

    def get_authenticated_user(self) -> dict:
        return self._request("GET", "/user")

    def create_repository(self, name: str, private: bool = False,
                          description: str = "") -> dict:
        # auto_init gives the Git data API a base commit to build on
        return self._request("POST", "/user/repos", json={
            "name": name,
            "private": private,
            "description": description,
            "auto_init": True,
        })

    def get_repository(self, owner: str, name: str) -> dict:
        return self._request("GET", f"/repos/{owner}/{name}")

    def push_directory(self, owner: str, repo: str, directory: Path,
                       branch: str = "main", message: str = "Initial chatbot",
                       exclude: Iterable[str] = ()) -> str:
        """Commit a directory on top of a branch head and return the commit sha."""
        base = f"/repos/{owner}/{repo}"
        head = self._request("GET", f"{base}/git/ref/heads/{branch}")
        head_sha = head["object"]["sha"]
        head_commit = self._request("GET", f"{base}/git/commits/{head_sha}")

        tree = []
        for entry in build_tree_entries(directory, exclude):
            blob = self._request("POST", f"{base}/git/blobs", json={
                "content": base64.b64encode(entry.content).decode("ascii"),
                "encoding": "base64",
            })
            tree.append({
                "path": entry.path,
                "mode": entry.mode,
                "type": "blob",
                "sha": blob["sha"],
            })
        logger.info(f"Uploaded {len(tree)} blobs to {owner}/{repo}")

        new_tree = self._request("POST", f"{base}/git/trees", json={
            "base_tree": head_commit["tree"]["sha"],
            "tree": tree,
        })
        commit = self._request("POST", f"{base}/git/commits", json={
            "message": message,
            "tree": new_tree["sha"],
            "parents": [head_sha],
        })
        self._request("PATCH", f"{base}/git/refs/heads/{branch}", json={
            "sha": commit["sha"],
            "force": False,
        })
        logger.info(f"Pushed commit {commit['sha']} to {owner}/{repo}@{branch}")
        return commit["sha"]
