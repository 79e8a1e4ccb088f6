"""Data models for the Auth Rocket client"""

from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class AuthConfig:
    """Client identity used for every call to the auth service

    Attributes:
        client_id: Application identifier issued by the auth service
        client_secret: Secret paired with client_id
        base_url: Optional override of the auth service base URL
    """
    client_id: str
    client_secret: str
    base_url: Optional[str] = None


@dataclass
class UserCredentials:
    """Username/password pair supplied to login and register

    Attributes:
        username: Account name
        password: Plain-text password, sent once and never stored
    """
    username: str
    password: str

    def to_payload(self) -> Dict[str, str]:
        return {"username": self.username, "password": self.password}

    def __repr__(self) -> str:
        return f"UserCredentials(username={self.username!r}, password='***')"


@dataclass
class User:
    """Authenticated principal as reported by the verify-token endpoint

    Attributes:
        username: Account name
        app: Application the token was issued for
        id: Server-side identifier, when the server reports one
    """
    username: str
    app: str
    id: Optional[int] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "User":
        """Build a User from a verify-token response body

        Raises:
            KeyError: if username or app is missing
        """
        return cls(
            username=data["username"],
            app=data["app"],
            id=data.get("id"),
        )
