"""Shared fixtures: an in-process fake of the auth service"""

import json
from typing import Any, Dict, List, Optional

import httpx
import pytest

from auth_rocket import AuthConfig, AuthSession, MemoryKeyValueStore, TokenStorage


class FakeAuthServer:
    """Answers auth endpoints from canned responses and records every request"""

    def __init__(self):
        self.requests: List[httpx.Request] = []
        self.tokens: Dict[str, Dict[str, Any]] = {}
        self.next_token = "T1"
        self.fail: Dict[str, int] = {}
        self.canned: Dict[str, httpx.Response] = {}
        self.errors: Dict[str, Exception] = {}
        self.protected_status = 200
        self.protected_body: Any = {"data": "secret"}

    def issue(self, token: str, user: Dict[str, Any]) -> None:
        self.tokens[token] = user

    def body(self, index: int = -1) -> Optional[Dict[str, Any]]:
        content = self.requests[index].content
        return json.loads(content) if content else None

    def paths(self) -> List[str]:
        return [request.url.path for request in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path in self.canned:
            return self.canned[path]

        if path in self.errors:
            raise self.errors[path]

        for prefix, status in self.fail.items():
            if path.startswith(prefix):
                return httpx.Response(status, json={"detail": "failure"})

        if path in ("/api/user/register/", "/api/user/login/"):
            payload = json.loads(request.content)
            self.tokens.setdefault(
                self.next_token, {"username": payload["username"], "app": "app1"}
            )
            return httpx.Response(200, json={"token": self.next_token})

        if path == "/api/user/verify-token/":
            token = json.loads(request.content)["token"]
            if token not in self.tokens:
                return httpx.Response(401, json={"detail": "invalid token"})
            return httpx.Response(200, json=self.tokens[token])

        if path.startswith("/api/user/delete/"):
            return httpx.Response(204)

        if path.startswith("/api/protected"):
            if self.protected_status != 200:
                return httpx.Response(self.protected_status, json={"detail": "denied"})
            return httpx.Response(200, json=self.protected_body)

        return httpx.Response(404)


@pytest.fixture
def server():
    return FakeAuthServer()


@pytest.fixture
def storage():
    return TokenStorage(MemoryKeyValueStore())


@pytest.fixture
def auth_config():
    return AuthConfig(client_id="client-1", client_secret="secret-1", base_url="http://auth.test/api")


@pytest.fixture
def session(server, storage, auth_config):
    return AuthSession(auth_config, storage=storage, transport=httpx.MockTransport(server.handler))
